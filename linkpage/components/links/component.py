"""
Links component - Page link management.

Handles link CRUD and ordering.

Shell Layer - converts service tuples into component outputs.
"""

from __future__ import annotations

from typing import Any

from ._impl import LinkService
from .models import (
    CreateLinkInput,
    DeleteLinkInput,
    GetLinkInput,
    LinkListOutput,
    LinkOperationOutput,
    LinkValidationError,
    ListLinksInput,
    ReorderLinksInput,
    UpdateLinkInput,
)


def run_create(
    input_data: CreateLinkInput,
    service: LinkService,
) -> LinkOperationOutput:
    """Append a link to a page."""
    link, errors = service.create(
        page_id=input_data.page_id,
        label=input_data.label,
        url=input_data.url,
        link_type=input_data.type,
        icon=input_data.icon,
    )

    return LinkOperationOutput(
        link=link,
        errors=tuple(errors),
        success=link is not None,
    )


def run_update(
    input_data: UpdateLinkInput,
    service: LinkService,
) -> LinkOperationOutput:
    """Update an existing link."""
    # Build updates dict from non-None fields
    updates: dict[str, Any] = {}
    if input_data.label is not None:
        updates["label"] = input_data.label
    if input_data.url is not None:
        updates["url"] = input_data.url
    if input_data.type is not None:
        updates["type"] = input_data.type
    if input_data.icon is not None:
        updates["icon"] = input_data.icon
    if input_data.is_active is not None:
        updates["is_active"] = input_data.is_active

    link, errors = service.update(input_data.link_id, updates)

    return LinkOperationOutput(
        link=link,
        errors=tuple(errors),
        success=link is not None,
    )


def run_delete(
    input_data: DeleteLinkInput,
    service: LinkService,
) -> LinkOperationOutput:
    """Delete a link."""
    success, errors = service.delete(input_data.link_id)

    return LinkOperationOutput(
        link=None,
        errors=tuple(errors),
        success=success,
    )


def run_get(
    input_data: GetLinkInput,
    service: LinkService,
) -> LinkOperationOutput:
    """Get a link by ID."""
    link = service.get_by_id(input_data.link_id)

    if link is None:
        return LinkOperationOutput(
            link=None,
            errors=(
                LinkValidationError(
                    code="link_not_found",
                    message=f"Link with ID {input_data.link_id} not found",
                ),
            ),
            success=False,
        )

    return LinkOperationOutput(link=link, errors=(), success=True)


def run_list(input_data: ListLinksInput, service: LinkService) -> LinkListOutput:
    """List every link of a page, active or not, in display order."""
    links = service.list_for_page(input_data.page_id)
    return LinkListOutput(links=tuple(links), total=len(links))


def run_reorder(input_data: ReorderLinksInput, service: LinkService) -> LinkListOutput:
    """Reorder a page's links; nothing is written if any id is foreign to the page."""
    links, errors = service.reorder(input_data.page_id, list(input_data.link_ids))
    return LinkListOutput(links=tuple(links), total=len(links), errors=tuple(errors))
