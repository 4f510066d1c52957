"""
Pages component - Public page records.

Invariants:
- Slugs are unique case-insensitively and never reserved
- At most one page is the homepage
"""

from ._impl import PageService, provisioning_candidates, validate_page_data
from .component import run_create, run_provision, run_set_homepage, run_update
from .models import (
    CreatePageInput,
    PageOperationOutput,
    PageValidationError,
    ProvisionPageInput,
    SetHomepageInput,
    UpdatePageInput,
)
from .ports import PageRepoPort, TemplateCatalogPort

__all__ = [
    # Entry points
    "run_create",
    "run_update",
    "run_provision",
    "run_set_homepage",
    # Models
    "CreatePageInput",
    "UpdatePageInput",
    "ProvisionPageInput",
    "SetHomepageInput",
    "PageOperationOutput",
    "PageValidationError",
    # Service
    "PageService",
    "validate_page_data",
    "provisioning_candidates",
    # Ports
    "PageRepoPort",
    "TemplateCatalogPort",
]
