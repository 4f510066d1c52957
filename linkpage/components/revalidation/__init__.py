"""
Revalidation component - Authenticated cache invalidation.

Invariants:
- Nothing is purged or disclosed without the shared secret
- A slug rename purges both the old and the new page tag
- A homepage flag on either row version also purges the homepage tag
"""

from ._impl import (
    SECRET_HEADER,
    RevalidationGateway,
    is_authorized,
    parse_payload,
    tags_for_change,
    tags_for_manual,
)
from .component import run
from .models import (
    ChangeEvent,
    ManualRevalidateRequest,
    RevalidateInput,
    RevalidatePayload,
    RevalidationResult,
)
from .ports import PageByIdPort, TagPurgePort

__all__ = [
    # Entry point
    "run",
    "RevalidationGateway",
    # Models
    "ManualRevalidateRequest",
    "ChangeEvent",
    "RevalidatePayload",
    "RevalidateInput",
    "RevalidationResult",
    # Functions
    "is_authorized",
    "parse_payload",
    "tags_for_manual",
    "tags_for_change",
    "SECRET_HEADER",
    # Ports
    "PageByIdPort",
    "TagPurgePort",
]
