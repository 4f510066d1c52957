"""
Revalidation component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from linkpage.components.cache.ports import TagPurgePort
from linkpage.domain.entities import Page


class PageByIdPort(Protocol):
    """Resolves the page that owns a changed link row."""

    def get_by_id(self, page_id: UUID) -> Page | None:
        ...


__all__ = ["PageByIdPort", "TagPurgePort"]
