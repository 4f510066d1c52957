"""
Pages component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol

from linkpage.domain.entities import Template
from linkpage.ports.repo import PageRepoPort


class TemplateCatalogPort(Protocol):
    """Template lookups needed to pick and check a page's template."""

    def get_by_slug(self, slug: str) -> Template | None:
        ...

    def list_all(self) -> list[Template]:
        ...


__all__ = ["PageRepoPort", "TemplateCatalogPort"]
