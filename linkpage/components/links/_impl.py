"""
LinkService - Link management for public pages.

Handles link creation, updates, ordering and validation.

Functional Core - pure business logic.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from linkpage.domain.entities import Link
from linkpage.domain.sanitize import is_safe_url
from linkpage.rules.models import FieldRules, LinkRules, Rules

from .models import LinkValidationError
from .ports import LinkRepoPort

# --- Validation Functions ---


def validate_link_data(
    label: str | None = None,
    url: str | None = None,
    link_type: str | None = None,
    icon: str | None = None,
    field_rules: FieldRules | None = None,
    link_rules: LinkRules | None = None,
) -> list[LinkValidationError]:
    """Validate link data. None means "not supplied"; empty type/icon is allowed."""
    field_rules = field_rules or FieldRules()
    link_rules = link_rules or LinkRules()
    errors: list[LinkValidationError] = []

    if label is not None:
        if not label.strip():
            errors.append(
                LinkValidationError(
                    code="label_required",
                    message="Label is required",
                    field="label",
                )
            )
        elif len(label.strip()) > field_rules.label_max:
            errors.append(
                LinkValidationError(
                    code="label_too_long",
                    message=f"Label must be {field_rules.label_max} characters or less",
                    field="label",
                )
            )

    if url is not None:
        if not url.strip():
            errors.append(
                LinkValidationError(
                    code="url_required",
                    message="URL is required",
                    field="url",
                )
            )
        elif len(url.strip()) > field_rules.url_max:
            errors.append(
                LinkValidationError(
                    code="url_too_long",
                    message=f"URL must be {field_rules.url_max} characters or less",
                    field="url",
                )
            )
        elif not is_safe_url(url):
            errors.append(
                LinkValidationError(
                    code="url_invalid_scheme",
                    message="URL must be an absolute http:// or https:// address",
                    field="url",
                )
            )

    if link_type and link_type.strip().lower() not in link_rules.types:
        errors.append(
            LinkValidationError(
                code="type_invalid",
                message=f"Type must be one of: {', '.join(link_rules.types)}",
                field="type",
            )
        )

    if icon and icon.strip().lower() not in link_rules.icons:
        errors.append(
            LinkValidationError(
                code="icon_invalid",
                message=f"Icon must be one of: {', '.join(link_rules.icons)}",
                field="icon",
            )
        )

    return errors


def _clean_choice(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip().lower()
    return cleaned or None


def _not_found(link_id: UUID) -> list[LinkValidationError]:
    return [
        LinkValidationError(
            code="link_not_found",
            message=f"Link with ID {link_id} not found",
        )
    ]


# --- Link Service ---


class LinkService:
    """
    Link service.

    Links are owned by exactly one page. New links go to the end of the
    list; reordering bulk-assigns sort_order by position.
    """

    def __init__(self, repo: LinkRepoPort, rules: Rules | None = None) -> None:
        self._repo = repo
        self._rules = rules or Rules()

    def _validate(self, **kwargs: str | None) -> list[LinkValidationError]:
        return validate_link_data(
            field_rules=self._rules.fields, link_rules=self._rules.links, **kwargs
        )

    def list_for_page(self, page_id: UUID) -> list[Link]:
        return self._repo.list_for_page(page_id)

    def get_by_id(self, link_id: UUID) -> Link | None:
        return self._repo.get_by_id(link_id)

    def create(
        self,
        page_id: UUID,
        label: str,
        url: str,
        link_type: str | None = None,
        icon: str | None = None,
    ) -> tuple[Link | None, list[LinkValidationError]]:
        """
        Append a new active link to a page.

        Returns:
            Tuple of (link, errors). Link is None if validation fails.
        """
        errors = self._validate(label=label, url=url, link_type=link_type, icon=icon)
        if errors:
            return None, errors

        existing = self._repo.list_for_page(page_id)
        next_order = max((link.sort_order for link in existing), default=-1) + 1

        link = Link(
            id=uuid4(),
            page_id=page_id,
            label=label.strip(),
            url=url.strip(),
            type=_clean_choice(link_type),
            icon=_clean_choice(icon),
            sort_order=next_order,
            is_active=True,
        )

        saved = self._repo.save(link)
        return saved, []

    def update(
        self,
        link_id: UUID,
        updates: dict[str, Any],
    ) -> tuple[Link | None, list[LinkValidationError]]:
        """
        Update an existing link field by field.

        Returns:
            Tuple of (link, errors). Link is None if not found or validation fails.
        """
        link = self.get_by_id(link_id)
        if not link:
            return None, _not_found(link_id)

        errors = self._validate(
            label=updates.get("label"),
            url=updates.get("url"),
            link_type=updates.get("type"),
            icon=updates.get("icon"),
        )
        if errors:
            return None, errors

        # None means "leave as is" for the required fields.
        if updates.get("label") is not None:
            link.label = str(updates["label"]).strip()
        if updates.get("url") is not None:
            link.url = str(updates["url"]).strip()
        if "type" in updates:
            link.type = _clean_choice(updates["type"])
        if "icon" in updates:
            link.icon = _clean_choice(updates["icon"])
        if updates.get("is_active") is not None:
            link.is_active = bool(updates["is_active"])

        saved = self._repo.save(link)
        return saved, []

    def delete(self, link_id: UUID) -> tuple[bool, list[LinkValidationError]]:
        """
        Delete a link.

        Returns:
            Tuple of (success, errors).
        """
        link = self.get_by_id(link_id)
        if not link:
            return False, _not_found(link_id)

        self._repo.delete(link_id)
        return True, []

    def reorder(
        self, page_id: UUID, ordered_ids: list[UUID]
    ) -> tuple[list[Link], list[LinkValidationError]]:
        """
        Assign sort_order = position for each id.

        Every id must belong to `page_id`; otherwise nothing is written.
        """
        owned = {link.id for link in self._repo.list_for_page(page_id)}
        foreign = [link_id for link_id in ordered_ids if link_id not in owned]
        if foreign:
            return [], [
                LinkValidationError(
                    code="link_not_on_page",
                    message=f"Link with ID {link_id} does not belong to this page",
                    field="link_ids",
                )
                for link_id in foreign
            ]

        if len(set(ordered_ids)) != len(ordered_ids):
            return [], [
                LinkValidationError(
                    code="link_ids_duplicate",
                    message="Each link may appear only once",
                    field="link_ids",
                )
            ]

        self._repo.update_sort_orders({link_id: index for index, link_id in enumerate(ordered_ids)})
        return self._repo.list_for_page(page_id), []
