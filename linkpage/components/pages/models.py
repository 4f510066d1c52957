"""
Pages component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from linkpage.domain.entities import Page

# --- Validation Errors ---


@dataclass(frozen=True)
class PageValidationError:
    """Page validation error."""

    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class CreatePageInput:
    slug: str
    owner_user_id: str | None = None
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    template_slug: str | None = None


@dataclass(frozen=True)
class UpdatePageInput:
    """None means unchanged."""

    page_id: UUID
    slug: str | None = None
    display_name: str | None = None
    bio: str | None = None
    avatar_url: str | None = None
    template_slug: str | None = None


@dataclass(frozen=True)
class ProvisionPageInput:
    """First authorized access by an identity."""

    owner_user_id: str
    email: str
    display_name: str | None = None
    avatar_url: str | None = None


@dataclass(frozen=True)
class SetHomepageInput:
    page_id: UUID


# --- Output Models ---


@dataclass(frozen=True)
class PageOperationOutput:
    page: Page | None
    errors: tuple[PageValidationError, ...]
    success: bool
