import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any
from uuid import UUID

from linkpage.domain.entities import ClickAggregate, Link, Page, Template
from linkpage.ports.repo import DataStoreError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def _dt(value: str) -> datetime:
    return datetime.fromisoformat(value)


class _SQLiteRepo:
    """Connection-per-call base. Every sqlite3 failure surfaces as DataStoreError."""

    def __init__(self, db_path: str, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS):
        self.db_path = db_path
        self.timeout_seconds = timeout_seconds

    @contextmanager
    def _conn(self) -> Iterator[sqlite3.Connection]:
        try:
            conn = sqlite3.connect(self.db_path, timeout=self.timeout_seconds)
        except sqlite3.Error as e:
            raise DataStoreError(f"cannot open data store: {e}") from e

        conn.row_factory = dict_factory
        try:
            conn.execute("PRAGMA foreign_keys = ON;")
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error("Data store error: %s", e)
            raise DataStoreError(str(e)) from e
        except BaseException:
            conn.rollback()
            raise
        finally:
            conn.close()


class SQLiteTemplateRepo(_SQLiteRepo):
    def _row_to_template(self, row: dict[str, Any]) -> Template:
        return Template(
            id=UUID(row["id"]),
            slug=row["slug"],
            name=row["name"],
            html=row["html"],
            created_at=_dt(row["created_at"]),
            updated_at=_dt(row["updated_at"]),
        )

    def get_by_slug(self, slug: str) -> Template | None:
        with self._conn() as conn:
            row = conn.execute("SELECT * FROM templates WHERE slug = ?", (slug,)).fetchone()
        return self._row_to_template(row) if row else None

    def list_all(self) -> list[Template]:
        with self._conn() as conn:
            rows = conn.execute("SELECT * FROM templates ORDER BY name ASC").fetchall()
        return [self._row_to_template(row) for row in rows]

    def save(self, template: Template) -> Template:
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO templates (id, slug, name, html, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    slug=excluded.slug,
                    name=excluded.name,
                    html=excluded.html,
                    updated_at=excluded.updated_at
            """,
                (
                    str(template.id),
                    template.slug,
                    template.name,
                    template.html,
                    template.created_at.isoformat(),
                    template.updated_at.isoformat(),
                ),
            )
        return template


class SQLitePageRepo(_SQLiteRepo):
    def _row_to_page(self, row: dict[str, Any]) -> Page:
        return Page(
            id=UUID(row["id"]),
            owner_user_id=row["owner_user_id"],
            slug=row["slug"],
            display_name=row["display_name"],
            bio=row["bio"],
            avatar_url=row["avatar_url"],
            template_slug=row["template_slug"],
            is_homepage=bool(row["is_homepage"]),
            created_at=_dt(row["created_at"]),
            updated_at=_dt(row["updated_at"]),
        )

    def get_by_id(self, page_id: UUID) -> Page | None:
        with self._conn() as conn:
            row = conn.execute("SELECT * FROM pages WHERE id = ?", (str(page_id),)).fetchone()
        return self._row_to_page(row) if row else None

    def get_by_slug(self, slug: str) -> Page | None:
        # pages.slug is COLLATE NOCASE
        with self._conn() as conn:
            row = conn.execute("SELECT * FROM pages WHERE slug = ?", (slug,)).fetchone()
        return self._row_to_page(row) if row else None

    def get_homepage(self) -> Page | None:
        with self._conn() as conn:
            row = conn.execute("SELECT * FROM pages WHERE is_homepage = 1 LIMIT 1").fetchone()
        return self._row_to_page(row) if row else None

    def list_by_owner(self, owner_user_id: str) -> list[Page]:
        with self._conn() as conn:
            rows = conn.execute(
                "SELECT * FROM pages WHERE owner_user_id = ? ORDER BY created_at ASC, rowid ASC",
                (owner_user_id,),
            ).fetchall()
        return [self._row_to_page(row) for row in rows]

    def slug_exists(self, slug: str) -> bool:
        with self._conn() as conn:
            row = conn.execute("SELECT 1 AS hit FROM pages WHERE slug = ?", (slug,)).fetchone()
        return row is not None

    def save(self, page: Page) -> Page:
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO pages (
                    id, owner_user_id, slug, display_name, bio, avatar_url,
                    template_slug, is_homepage, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    owner_user_id=excluded.owner_user_id,
                    slug=excluded.slug,
                    display_name=excluded.display_name,
                    bio=excluded.bio,
                    avatar_url=excluded.avatar_url,
                    template_slug=excluded.template_slug,
                    is_homepage=excluded.is_homepage,
                    updated_at=excluded.updated_at
            """,
                (
                    str(page.id),
                    page.owner_user_id,
                    page.slug,
                    page.display_name,
                    page.bio,
                    page.avatar_url,
                    page.template_slug,
                    1 if page.is_homepage else 0,
                    page.created_at.isoformat(),
                    page.updated_at.isoformat(),
                ),
            )
        return page

    def set_homepage(self, page_id: UUID) -> None:
        now = datetime.now().astimezone().isoformat()
        with self._conn() as conn:
            conn.execute(
                "UPDATE pages SET is_homepage = 0, updated_at = ? WHERE is_homepage = 1 AND id != ?",
                (now, str(page_id)),
            )
            conn.execute(
                "UPDATE pages SET is_homepage = 1, updated_at = ? WHERE id = ?",
                (now, str(page_id)),
            )


class SQLiteLinkRepo(_SQLiteRepo):
    def _row_to_link(self, row: dict[str, Any]) -> Link:
        return Link(
            id=UUID(row["id"]),
            page_id=UUID(row["page_id"]),
            label=row["label"],
            url=row["url"],
            type=row["type"],
            icon=row["icon"],
            sort_order=row["sort_order"],
            is_active=bool(row["is_active"]),
            created_at=_dt(row["created_at"]),
        )

    def get_by_id(self, link_id: UUID) -> Link | None:
        with self._conn() as conn:
            row = conn.execute("SELECT * FROM links WHERE id = ?", (str(link_id),)).fetchone()
        return self._row_to_link(row) if row else None

    def list_for_page(self, page_id: UUID) -> list[Link]:
        with self._conn() as conn:
            rows = conn.execute(
                "SELECT * FROM links WHERE page_id = ? ORDER BY sort_order ASC, rowid ASC",
                (str(page_id),),
            ).fetchall()
        return [self._row_to_link(row) for row in rows]

    def list_active_for_page(self, page_id: UUID) -> list[Link]:
        with self._conn() as conn:
            rows = conn.execute(
                """
                SELECT * FROM links
                WHERE page_id = ? AND is_active = 1
                ORDER BY sort_order ASC, rowid ASC
            """,
                (str(page_id),),
            ).fetchall()
        return [self._row_to_link(row) for row in rows]

    def save(self, link: Link) -> Link:
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO links (
                    id, page_id, label, url, type, icon, sort_order, is_active, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    page_id=excluded.page_id,
                    label=excluded.label,
                    url=excluded.url,
                    type=excluded.type,
                    icon=excluded.icon,
                    sort_order=excluded.sort_order,
                    is_active=excluded.is_active
            """,
                (
                    str(link.id),
                    str(link.page_id),
                    link.label,
                    link.url,
                    link.type,
                    link.icon,
                    link.sort_order,
                    1 if link.is_active else 0,
                    link.created_at.isoformat(),
                ),
            )
        return link

    def delete(self, link_id: UUID) -> None:
        with self._conn() as conn:
            conn.execute("DELETE FROM links WHERE id = ?", (str(link_id),))

    def update_sort_orders(self, orders: dict[UUID, int]) -> None:
        with self._conn() as conn:
            conn.executemany(
                "UPDATE links SET sort_order = ? WHERE id = ?",
                [(order, str(link_id)) for link_id, order in orders.items()],
            )


class SQLiteClickRepo(_SQLiteRepo):
    def increment(self, link_id: UUID, month: date, is_bot: bool) -> None:
        human, bot = (0, 1) if is_bot else (1, 0)
        with self._conn() as conn:
            conn.execute(
                """
                INSERT INTO link_clicks_monthly (link_id, month, human_clicks, bot_clicks)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(link_id, month) DO UPDATE SET
                    human_clicks = human_clicks + excluded.human_clicks,
                    bot_clicks = bot_clicks + excluded.bot_clicks
            """,
                (str(link_id), month.isoformat(), human, bot),
            )

    def get_counts(self, link_ids: list[UUID]) -> dict[UUID, int]:
        if not link_ids:
            return {}
        placeholders = ",".join("?" for _ in link_ids)
        with self._conn() as conn:
            rows = conn.execute(
                f"""
                SELECT link_id, SUM(human_clicks) AS total
                FROM link_clicks_monthly
                WHERE link_id IN ({placeholders})
                GROUP BY link_id
            """,
                [str(link_id) for link_id in link_ids],
            ).fetchall()
        return {UUID(row["link_id"]): int(row["total"] or 0) for row in rows}

    def get_monthly(self, link_id: UUID) -> list[ClickAggregate]:
        """Monthly counters for one link, oldest first."""
        with self._conn() as conn:
            rows = conn.execute(
                """
                SELECT month, human_clicks, bot_clicks FROM link_clicks_monthly
                WHERE link_id = ? ORDER BY month ASC
            """,
                (str(link_id),),
            ).fetchall()
        return [
            ClickAggregate(
                link_id=link_id,
                month=date.fromisoformat(row["month"]),
                human_clicks=row["human_clicks"],
                bot_clicks=row["bot_clicks"],
            )
            for row in rows
        ]
