"""
Public page component - Port interfaces.

Read-only views of the data store; the resolver never writes.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from linkpage.domain.entities import Link, Page, Template


class PageLookupPort(Protocol):
    def get_by_slug(self, slug: str) -> Page | None:
        ...

    def get_homepage(self) -> Page | None:
        ...


class ActiveLinksPort(Protocol):
    def list_active_for_page(self, page_id: UUID) -> list[Link]:
        """Active links ordered by sort_order."""
        ...


class TemplateLookupPort(Protocol):
    def get_by_slug(self, slug: str) -> Template | None:
        ...
