"""
Public page component - Resolves `/` and `/{slug}` to rendered HTML.

Invariants:
- Reserved slugs are never looked up
- A missing template is a server fault, not a 404
- Only successful renders are cached
"""

from ._impl import PublicPageResolver, normalize_slug, precheck_slug
from .component import run
from .models import (
    HOMEPAGE,
    HomepageIdentifier,
    NotFound,
    RenderedPage,
    ResolveInput,
    ResolveResult,
    ServerError,
)
from .ports import ActiveLinksPort, PageLookupPort, TemplateLookupPort

__all__ = [
    # Entry point
    "run",
    "PublicPageResolver",
    # Models
    "HOMEPAGE",
    "HomepageIdentifier",
    "ResolveInput",
    "ResolveResult",
    "RenderedPage",
    "NotFound",
    "ServerError",
    # Helpers
    "normalize_slug",
    "precheck_slug",
    # Ports
    "PageLookupPort",
    "ActiveLinksPort",
    "TemplateLookupPort",
]
