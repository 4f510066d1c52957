"""
Cache component - Tagged server-side cache and edge header contract.

Invariants:
- A purged tag is never served again by this process (read-after-purge)
- Entries expire after the revalidation period even without a purge
- Public pages carry a shared-cache Cache-Control; errors are no-store
"""

from ._edge import (
    CONTENT_SECURITY_POLICY,
    HTML_CONTENT_TYPE,
    NO_STORE_POLICY,
    SECURITY_HEADERS,
    TEXT_CONTENT_TYPE,
    error_headers,
    generate_cache_headers,
    public_page_headers,
    public_page_policy,
)
from ._impl import (
    DEFAULT_REVALIDATE_SECONDS,
    HOMEPAGE_CACHE_KEY,
    HOMEPAGE_TAG,
    SystemMonotonicClock,
    TaggedCache,
    page_cache_key,
    page_cache_tags,
    page_tag,
    template_cache_key,
    template_tag,
)
from .models import CacheEntry, CachePolicy, CacheStats
from .ports import MonotonicClockPort, TagPurgePort

__all__ = [
    # Cache
    "TaggedCache",
    "SystemMonotonicClock",
    "CacheEntry",
    "CacheStats",
    "DEFAULT_REVALIDATE_SECONDS",
    # Tags / keys
    "HOMEPAGE_TAG",
    "HOMEPAGE_CACHE_KEY",
    "page_tag",
    "template_tag",
    "page_cache_key",
    "template_cache_key",
    "page_cache_tags",
    # Edge policy
    "CachePolicy",
    "NO_STORE_POLICY",
    "SECURITY_HEADERS",
    "CONTENT_SECURITY_POLICY",
    "HTML_CONTENT_TYPE",
    "TEXT_CONTENT_TYPE",
    "public_page_policy",
    "generate_cache_headers",
    "public_page_headers",
    "error_headers",
    # Ports
    "MonotonicClockPort",
    "TagPurgePort",
]
