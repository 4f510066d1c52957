from datetime import date
from typing import Protocol
from uuid import UUID

from linkpage.domain.entities import Link, Page, Template


class DataStoreError(Exception):
    """The data store failed or timed out. Never shown to visitors."""


class PageRepoPort(Protocol):
    def get_by_id(self, page_id: UUID) -> Page | None:
        ...

    def get_by_slug(self, slug: str) -> Page | None:
        """Case-insensitive lookup."""
        ...

    def get_homepage(self) -> Page | None:
        ...

    def list_by_owner(self, owner_user_id: str) -> list[Page]:
        """Pages of one identity, oldest first."""
        ...

    def slug_exists(self, slug: str) -> bool:
        """Case-insensitive."""
        ...

    def save(self, page: Page) -> Page:
        ...

    def set_homepage(self, page_id: UUID) -> None:
        """Clear any previous homepage flag and set it on `page_id`, atomically."""
        ...


class LinkRepoPort(Protocol):
    def get_by_id(self, link_id: UUID) -> Link | None:
        ...

    def list_for_page(self, page_id: UUID) -> list[Link]:
        """All links of a page, by sort_order then insertion."""
        ...

    def list_active_for_page(self, page_id: UUID) -> list[Link]:
        """Active links of a page, by sort_order then insertion."""
        ...

    def save(self, link: Link) -> Link:
        ...

    def delete(self, link_id: UUID) -> None:
        ...

    def update_sort_orders(self, orders: dict[UUID, int]) -> None:
        ...


class TemplateRepoPort(Protocol):
    def get_by_slug(self, slug: str) -> Template | None:
        ...

    def list_all(self) -> list[Template]:
        """All templates, by name."""
        ...

    def save(self, template: Template) -> Template:
        ...


class ClickRepoPort(Protocol):
    def increment(self, link_id: UUID, month: date, is_bot: bool) -> None:
        ...

    def get_counts(self, link_ids: list[UUID]) -> dict[UUID, int]:
        """Human clicks per link, summed over all months."""
        ...
