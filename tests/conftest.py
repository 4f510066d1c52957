"""
Shared fixtures: in-memory data store, controllable clock, rules.

The in-memory repos follow the SQLite adapter's contracts (case-insensitive
slugs, sort_order then insertion order, single homepage) so component and
HTTP tests run without a database.
"""

from datetime import UTC, date, datetime, timedelta
from pathlib import Path
from uuid import UUID

import pytest

from linkpage.components.cache import TaggedCache
from linkpage.domain.entities import DEFAULT_TEMPLATE_SLUG, Link, Page, Template
from linkpage.rules.loader import load_rules
from linkpage.rules.models import Rules

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_TEMPLATE_HTML = (
    "<html><head><title>{{display_name}}</title></head><body>"
    "{{avatar_block}}<h1>{{display_name}}</h1><p>{{bio}}</p>"
    '<meta property="og:image" content="{{avatar_url}}">'
    "<nav>{{links}}</nav></body></html>"
)


# --- In-memory repos ---


class InMemoryPageRepo:
    def __init__(self) -> None:
        self.pages: dict[UUID, Page] = {}
        self.lookups = 0

    def get_by_id(self, page_id: UUID) -> Page | None:
        self.lookups += 1
        return self.pages.get(page_id)

    def get_by_slug(self, slug: str) -> Page | None:
        self.lookups += 1
        return next((p for p in self.pages.values() if p.slug.lower() == slug.lower()), None)

    def get_homepage(self) -> Page | None:
        self.lookups += 1
        return next((p for p in self.pages.values() if p.is_homepage), None)

    def list_by_owner(self, owner_user_id: str) -> list[Page]:
        return [p for p in self.pages.values() if p.owner_user_id == owner_user_id]

    def slug_exists(self, slug: str) -> bool:
        return any(p.slug.lower() == slug.lower() for p in self.pages.values())

    def save(self, page: Page) -> Page:
        self.pages[page.id] = page
        return page

    def set_homepage(self, page_id: UUID) -> None:
        for page in self.pages.values():
            page.is_homepage = page.id == page_id


class InMemoryLinkRepo:
    def __init__(self) -> None:
        self.links: dict[UUID, Link] = {}
        self.lookups = 0

    def get_by_id(self, link_id: UUID) -> Link | None:
        self.lookups += 1
        return self.links.get(link_id)

    def list_for_page(self, page_id: UUID) -> list[Link]:
        owned = [link for link in self.links.values() if link.page_id == page_id]
        return sorted(owned, key=lambda link: link.sort_order)

    def list_active_for_page(self, page_id: UUID) -> list[Link]:
        self.lookups += 1
        return [link for link in self.list_for_page(page_id) if link.is_active]

    def save(self, link: Link) -> Link:
        self.links[link.id] = link
        return link

    def delete(self, link_id: UUID) -> None:
        self.links.pop(link_id, None)

    def update_sort_orders(self, orders: dict[UUID, int]) -> None:
        for link_id, order in orders.items():
            if link_id in self.links:
                self.links[link_id].sort_order = order


class InMemoryTemplateRepo:
    def __init__(self) -> None:
        self.templates: dict[str, Template] = {}
        self.lookups = 0

    def get_by_slug(self, slug: str) -> Template | None:
        self.lookups += 1
        return self.templates.get(slug)

    def list_all(self) -> list[Template]:
        return sorted(self.templates.values(), key=lambda t: t.name)

    def save(self, template: Template) -> Template:
        self.templates = {s: t for s, t in self.templates.items() if t.id != template.id}
        self.templates[template.slug] = template
        return template


class InMemoryClickRepo:
    def __init__(self) -> None:
        self.rows: dict[tuple[UUID, date], dict[str, int]] = {}

    def increment(self, link_id: UUID, month: date, is_bot: bool) -> None:
        row = self.rows.setdefault((link_id, month), {"human": 0, "bot": 0})
        row["bot" if is_bot else "human"] += 1

    def get_counts(self, link_ids: list[UUID]) -> dict[UUID, int]:
        counts: dict[UUID, int] = {}
        for (link_id, _month), row in self.rows.items():
            if link_id in link_ids:
                counts[link_id] = counts.get(link_id, 0) + row["human"]
        return counts

    def total(self, link_id: UUID) -> tuple[int, int]:
        """(human, bot) across all months."""
        human = sum(r["human"] for (lid, _), r in self.rows.items() if lid == link_id)
        bot = sum(r["bot"] for (lid, _), r in self.rows.items() if lid == link_id)
        return human, bot


class FakeClock:
    """Monotonic and wall clock under test control."""

    def __init__(self, start: datetime | None = None) -> None:
        self._now = start or datetime(2026, 3, 15, 12, 0, tzinfo=UTC)
        self._mono = 1000.0

    def now_utc(self) -> datetime:
        return self._now

    def monotonic(self) -> float:
        return self._mono

    def advance(self, seconds: float) -> None:
        self._mono += seconds
        self._now += timedelta(seconds=seconds)


# --- Fixtures ---


@pytest.fixture
def rules() -> Rules:
    """The project's real rules file."""
    return load_rules(PROJECT_ROOT / "rules.yaml")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TaggedCache:
    return TaggedCache(clock=clock)


@pytest.fixture
def page_repo() -> InMemoryPageRepo:
    return InMemoryPageRepo()


@pytest.fixture
def link_repo() -> InMemoryLinkRepo:
    return InMemoryLinkRepo()


@pytest.fixture
def template_repo() -> InMemoryTemplateRepo:
    repo = InMemoryTemplateRepo()
    repo.save(Template(slug=DEFAULT_TEMPLATE_SLUG, name="Default", html=DEFAULT_TEMPLATE_HTML))
    return repo


@pytest.fixture
def click_repo() -> InMemoryClickRepo:
    return InMemoryClickRepo()


@pytest.fixture
def make_page(page_repo: InMemoryPageRepo):
    """Factory: store and return a page."""

    def _make(slug: str = "acme", **fields) -> Page:
        return page_repo.save(Page(slug=slug, **fields))

    return _make


@pytest.fixture
def make_link(link_repo: InMemoryLinkRepo):
    """Factory: store and return a link."""

    def _make(page: Page, label: str = "Site", url: str = "https://example.com", **fields) -> Link:
        return link_repo.save(Link(page_id=page.id, label=label, url=url, **fields))

    return _make
