"""
Templates component - Trusted page skeletons.
"""

from ._impl import TemplateService, validate_template_html
from .component import run_update_html
from .models import TemplateOperationOutput, TemplateValidationError, UpdateTemplateInput
from .ports import TemplateRepoPort

__all__ = [
    "run_update_html",
    "TemplateService",
    "validate_template_html",
    "UpdateTemplateInput",
    "TemplateOperationOutput",
    "TemplateValidationError",
    "TemplateRepoPort",
]
