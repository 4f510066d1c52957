"""
Revalidation component - Shell entry point.
"""

from __future__ import annotations

from ._impl import RevalidationGateway
from .models import RevalidateInput, RevalidationResult


def run(input_data: RevalidateInput, gateway: RevalidationGateway) -> RevalidationResult:
    """Handle one invalidation call."""
    return gateway.handle(input_data.provided_secret, input_data.raw_body)
