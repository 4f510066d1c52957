"""
Pages component - Shell entry points.
"""

from __future__ import annotations

from typing import Any

from ._impl import PageService
from .models import (
    CreatePageInput,
    PageOperationOutput,
    PageValidationError,
    ProvisionPageInput,
    SetHomepageInput,
    UpdatePageInput,
)


def _output(page: Any, errors: list[PageValidationError]) -> PageOperationOutput:
    return PageOperationOutput(page=page, errors=tuple(errors), success=page is not None)


def run_create(input_data: CreatePageInput, service: PageService) -> PageOperationOutput:
    page, errors = service.create_page(
        slug=input_data.slug,
        owner_user_id=input_data.owner_user_id,
        display_name=input_data.display_name,
        bio=input_data.bio,
        avatar_url=input_data.avatar_url,
        template_slug=input_data.template_slug,
    )
    return _output(page, errors)


def run_update(input_data: UpdatePageInput, service: PageService) -> PageOperationOutput:
    updates: dict[str, Any] = {}
    for field in ("slug", "display_name", "bio", "avatar_url", "template_slug"):
        value = getattr(input_data, field)
        if value is not None:
            updates[field] = value

    page, errors = service.update_page(input_data.page_id, updates)
    return _output(page, errors)


def run_provision(input_data: ProvisionPageInput, service: PageService) -> PageOperationOutput:
    page, errors = service.provision_for_identity(
        owner_user_id=input_data.owner_user_id,
        email=input_data.email,
        display_name=input_data.display_name,
        avatar_url=input_data.avatar_url,
    )
    return _output(page, errors)


def run_set_homepage(input_data: SetHomepageInput, service: PageService) -> PageOperationOutput:
    page, errors = service.set_homepage(input_data.page_id)
    return _output(page, errors)
