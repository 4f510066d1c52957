"""
PageService - Page lifecycle: validation, creation, updates, first-access
provisioning and the homepage flag.

Functional Core - pure business logic over the repo ports.

Key behaviors:
- Slugs are stored lowercased and compared case-insensitively
- Reserved slugs (anything the router claims) are never assigned
- Provisioning derives the slug from the email local part and retries
  base, base-2, base-3, ... until a free candidate is found
- At most one page carries the homepage flag
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

from linkpage.domain.entities import Page
from linkpage.domain.sanitize import (
    is_reserved_slug,
    is_safe_url,
    is_valid_slug,
    slug_from_email,
)
from linkpage.rules.models import Rules

from .models import PageValidationError
from .ports import PageRepoPort, TemplateCatalogPort

logger = logging.getLogger(__name__)

RESERVED_SUFFIX = "-page"


# --- Validation Functions ---


def _too_long(field: str, label: str, limit: int) -> PageValidationError:
    return PageValidationError(
        code=f"{field}_too_long",
        message=f"{label} must be {limit} characters or less",
        field=field,
    )


def validate_page_data(
    slug: str | None = None,
    display_name: str | None = None,
    bio: str | None = None,
    avatar_url: str | None = None,
    template_slug: str | None = None,
    rules: Rules | None = None,
) -> list[PageValidationError]:
    """Validate supplied page fields. None means "not supplied"."""
    rules = rules or Rules()
    errors: list[PageValidationError] = []

    if slug is not None:
        normalized = slug.strip().lower()
        if not normalized:
            errors.append(
                PageValidationError(code="slug_required", message="Slug is required", field="slug")
            )
        elif not is_valid_slug(normalized, rules.slugs.min_length, rules.slugs.max_length):
            errors.append(
                PageValidationError(
                    code="slug_invalid",
                    message=(
                        f"Slug must be {rules.slugs.min_length}-{rules.slugs.max_length} "
                        "characters of a-z, 0-9 and '-'"
                    ),
                    field="slug",
                )
            )
        elif is_reserved_slug(normalized):
            errors.append(
                PageValidationError(
                    code="slug_reserved",
                    message=f"Slug '{normalized}' is reserved",
                    field="slug",
                )
            )

    if display_name is not None and len(display_name) > rules.fields.display_name_max:
        errors.append(_too_long("display_name", "Display name", rules.fields.display_name_max))

    if bio is not None and len(bio) > rules.fields.bio_max:
        errors.append(_too_long("bio", "Bio", rules.fields.bio_max))

    if avatar_url is not None and avatar_url.strip():
        if len(avatar_url.strip()) > rules.fields.avatar_url_max:
            errors.append(_too_long("avatar_url", "Avatar URL", rules.fields.avatar_url_max))
        elif not is_safe_url(avatar_url):
            errors.append(
                PageValidationError(
                    code="avatar_url_invalid_scheme",
                    message="Avatar URL must be an absolute http:// or https:// address",
                    field="avatar_url",
                )
            )

    if template_slug is not None and not template_slug.strip():
        errors.append(
            PageValidationError(
                code="template_required", message="Template is required", field="template_slug"
            )
        )

    return errors


def _optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def provisioning_candidates(email: str, rules: Rules | None = None) -> list[str]:
    """
    Ordered slug candidates for a new identity.

    The base comes from the email local part; a reserved or too-short base
    gets a "-page" suffix. Candidates are base, base-2, ... up to the
    configured attempt count, each within the maximum slug length.
    """
    rules = rules or Rules()
    slug_rules = rules.slugs

    base = slug_from_email(email, fallback=slug_rules.fallback)
    if is_reserved_slug(base) or len(base) < slug_rules.min_length:
        base = f"{base}{RESERVED_SUFFIX}"

    candidates: list[str] = []
    for attempt in range(1, slug_rules.provision_max_attempts + 1):
        suffix = "" if attempt == 1 else f"-{attempt}"
        stem = base[: slug_rules.max_length - len(suffix)].rstrip("-")
        candidates.append(f"{stem}{suffix}")
    return candidates


def _not_found(page_id: UUID) -> list[PageValidationError]:
    return [PageValidationError(code="page_not_found", message=f"Page with ID {page_id} not found")]


# --- Page Service ---


class PageService:
    def __init__(
        self,
        repo: PageRepoPort,
        templates: TemplateCatalogPort | None = None,
        rules: Rules | None = None,
    ) -> None:
        self._repo = repo
        self._templates = templates
        self._rules = rules or Rules()

    def get_by_id(self, page_id: UUID) -> Page | None:
        return self._repo.get_by_id(page_id)

    def get_by_slug(self, slug: str) -> Page | None:
        return self._repo.get_by_slug(slug.strip().lower())

    def list_by_owner(self, owner_user_id: str) -> list[Page]:
        return self._repo.list_by_owner(owner_user_id)

    def _template_error(self, template_slug: str) -> list[PageValidationError]:
        if self._templates is None or self._templates.get_by_slug(template_slug) is not None:
            return []
        return [
            PageValidationError(
                code="template_not_found",
                message=f"Template '{template_slug}' does not exist",
                field="template_slug",
            )
        ]

    def _default_template_slug(self) -> str:
        default = self._rules.templates.default_slug
        if self._templates is None or self._templates.get_by_slug(default) is not None:
            return default
        available = self._templates.list_all()
        return available[0].slug if available else default

    def create_page(
        self,
        slug: str,
        owner_user_id: str | None = None,
        display_name: str | None = None,
        bio: str | None = None,
        avatar_url: str | None = None,
        template_slug: str | None = None,
    ) -> tuple[Page | None, list[PageValidationError]]:
        """
        Create a page.

        Returns:
            Tuple of (page, errors). Page is None if validation fails.
        """
        errors = validate_page_data(
            slug=slug,
            display_name=display_name,
            bio=bio,
            avatar_url=avatar_url,
            template_slug=template_slug,
            rules=self._rules,
        )
        if errors:
            return None, errors

        normalized = slug.strip().lower()
        if self._repo.slug_exists(normalized):
            return None, [
                PageValidationError(
                    code="slug_duplicate",
                    message=f"Page with slug '{normalized}' already exists",
                    field="slug",
                )
            ]

        chosen_template = template_slug.strip() if template_slug else self._default_template_slug()
        errors = self._template_error(chosen_template)
        if errors:
            return None, errors

        page = Page(
            id=uuid4(),
            owner_user_id=owner_user_id,
            slug=normalized,
            display_name=_optional_text(display_name),
            bio=_optional_text(bio),
            avatar_url=_optional_text(avatar_url),
            template_slug=chosen_template,
        )
        saved = self._repo.save(page)
        logger.info("Created page %s", saved.slug)
        return saved, []

    def update_page(
        self,
        page_id: UUID,
        updates: dict[str, Any],
    ) -> tuple[Page | None, list[PageValidationError]]:
        """
        Update a page field by field.

        Returns:
            Tuple of (page, errors). Page is None if not found or validation fails.
        """
        page = self.get_by_id(page_id)
        if not page:
            return None, _not_found(page_id)

        errors = validate_page_data(
            slug=updates.get("slug"),
            display_name=updates.get("display_name"),
            bio=updates.get("bio"),
            avatar_url=updates.get("avatar_url"),
            template_slug=updates.get("template_slug"),
            rules=self._rules,
        )
        if errors:
            return None, errors

        new_slug = updates.get("slug")
        if new_slug is not None:
            new_slug = new_slug.strip().lower()
            if new_slug != page.slug.lower() and self._repo.slug_exists(new_slug):
                return None, [
                    PageValidationError(
                        code="slug_duplicate",
                        message=f"Page with slug '{new_slug}' already exists",
                        field="slug",
                    )
                ]

        if updates.get("template_slug") is not None:
            errors = self._template_error(updates["template_slug"].strip())
            if errors:
                return None, errors

        if new_slug is not None:
            page.slug = new_slug
        for field in ("display_name", "bio", "avatar_url"):
            if field in updates:
                setattr(page, field, _optional_text(updates[field]))
        if updates.get("template_slug") is not None:
            page.template_slug = updates["template_slug"].strip()
        page.updated_at = datetime.now(UTC)

        saved = self._repo.save(page)
        return saved, []

    def provision_for_identity(
        self,
        owner_user_id: str,
        email: str,
        display_name: str | None = None,
        avatar_url: str | None = None,
    ) -> tuple[Page | None, list[PageValidationError]]:
        """
        Return the identity's first page, creating one on first access.

        An unsafe avatar URL from the identity provider is dropped rather
        than failing provisioning.
        """
        existing = self._repo.list_by_owner(owner_user_id)
        if existing:
            return existing[0], []

        if avatar_url is not None and (
            not is_safe_url(avatar_url)
            or len(avatar_url.strip()) > self._rules.fields.avatar_url_max
        ):
            avatar_url = None
        if display_name is not None:
            display_name = display_name.strip()[: self._rules.fields.display_name_max]

        for candidate in provisioning_candidates(email, self._rules):
            if is_reserved_slug(candidate) or self._repo.slug_exists(candidate):
                continue
            return self.create_page(
                slug=candidate,
                owner_user_id=owner_user_id,
                display_name=display_name,
                avatar_url=avatar_url,
            )

        logger.warning("No free slug found while provisioning identity %s", owner_user_id)
        return None, [
            PageValidationError(
                code="slug_exhausted",
                message="Could not find a free slug for this account",
                field="slug",
            )
        ]

    def set_homepage(self, page_id: UUID) -> tuple[Page | None, list[PageValidationError]]:
        """Move the homepage flag to `page_id`."""
        page = self.get_by_id(page_id)
        if not page:
            return None, _not_found(page_id)

        self._repo.set_homepage(page_id)
        logger.info("Homepage is now %s", page.slug)
        return self._repo.get_by_id(page_id), []
