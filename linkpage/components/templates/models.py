"""
Templates component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass

from linkpage.domain.entities import Template


@dataclass(frozen=True)
class TemplateValidationError:
    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class UpdateTemplateInput:
    slug: str
    html: str


@dataclass(frozen=True)
class TemplateOperationOutput:
    template: Template | None
    errors: tuple[TemplateValidationError, ...]
    success: bool
