"""
Links component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from linkpage.domain.entities import Link

# --- Validation Errors ---


@dataclass(frozen=True)
class LinkValidationError:
    """Link validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CreateLinkInput:
    """Input for appending a link to a page."""

    page_id: UUID
    label: str
    url: str
    type: str | None = None
    icon: str | None = None


@dataclass(frozen=True)
class UpdateLinkInput:
    """Input for updating a link. None means unchanged."""

    link_id: UUID
    label: str | None = None
    url: str | None = None
    type: str | None = None
    icon: str | None = None
    is_active: bool | None = None


@dataclass(frozen=True)
class DeleteLinkInput:
    link_id: UUID


@dataclass(frozen=True)
class GetLinkInput:
    link_id: UUID


@dataclass(frozen=True)
class ListLinksInput:
    page_id: UUID


@dataclass(frozen=True)
class ReorderLinksInput:
    """New display order: `link_ids[i]` gets sort_order i."""

    page_id: UUID
    link_ids: tuple[UUID, ...]


# --- Output Models ---


@dataclass(frozen=True)
class LinkOperationOutput:
    """Output from link operation."""

    link: Link | None
    errors: tuple[LinkValidationError, ...]
    success: bool


@dataclass(frozen=True)
class LinkListOutput:
    """Output from list operation."""

    links: tuple[Link, ...]
    total: int
    errors: tuple[LinkValidationError, ...] = ()
