"""
Templates component - Shell entry point.
"""

from __future__ import annotations

from ._impl import TemplateService
from .models import TemplateOperationOutput, UpdateTemplateInput


def run_update_html(
    input_data: UpdateTemplateInput, service: TemplateService
) -> TemplateOperationOutput:
    template, errors = service.update_html(input_data.slug, input_data.html)
    return TemplateOperationOutput(
        template=template, errors=tuple(errors), success=template is not None
    )
