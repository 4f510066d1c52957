"""
TemplateService - Admin-authored page templates.

Template markup is trusted and stored verbatim; only its size is bounded.
Recognized placeholders are listed in `linkpage.components.render.PLACEHOLDERS`.
"""

from __future__ import annotations

from datetime import UTC, datetime

from linkpage.domain.entities import Template
from linkpage.rules.models import Rules

from .models import TemplateValidationError
from .ports import TemplateRepoPort


def validate_template_html(html: str, max_length: int) -> list[TemplateValidationError]:
    if not html.strip():
        return [
            TemplateValidationError(code="html_required", message="HTML is required", field="html")
        ]
    if len(html) > max_length:
        return [
            TemplateValidationError(
                code="html_too_long",
                message=f"HTML must be {max_length} characters or less",
                field="html",
            )
        ]
    return []


class TemplateService:
    def __init__(self, repo: TemplateRepoPort, rules: Rules | None = None) -> None:
        self._repo = repo
        self._rules = rules or Rules()

    def get(self, slug: str) -> Template | None:
        return self._repo.get_by_slug(slug.strip())

    def list_all(self) -> list[Template]:
        return self._repo.list_all()

    def update_html(
        self, slug: str, html: str
    ) -> tuple[Template | None, list[TemplateValidationError]]:
        template = self.get(slug)
        if template is None:
            return None, [
                TemplateValidationError(
                    code="template_not_found", message=f"Template '{slug}' not found"
                )
            ]

        errors = validate_template_html(html, self._rules.fields.html_max)
        if errors:
            return None, errors

        template.html = html
        template.updated_at = datetime.now(UTC)
        return self._repo.save(template), []
