"""
Public page component - Shell entry point.
"""

from __future__ import annotations

from ._impl import PublicPageResolver
from .models import ResolveInput, ResolveResult


def run(input_data: ResolveInput, resolver: PublicPageResolver) -> ResolveResult:
    """Resolve a public page identifier."""
    return resolver.resolve(input_data.identifier)
