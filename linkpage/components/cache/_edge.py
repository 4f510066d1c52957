"""
Edge cache policy and response header set.

The CDN tier cannot be purged from here; it is only steered through
Cache-Control. After a tag purge the edge may keep serving the previous
copy for up to `s-maxage` (plus the stale-while-revalidate window while it
refetches in the background).
"""

from __future__ import annotations

from linkpage.rules.models import CacheRules

from .models import CachePolicy

CONTENT_SECURITY_POLICY = "; ".join(
    [
        "default-src 'none'",
        "base-uri 'none'",
        "form-action 'none'",
        "style-src 'unsafe-inline' https://fonts.googleapis.com",
        "font-src https://fonts.gstatic.com",
        "img-src https: data:",
        "connect-src 'none'",
        "script-src 'none'",
        "frame-ancestors 'none'",
    ]
) + ";"

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
    "Content-Security-Policy": CONTENT_SECURITY_POLICY,
}

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"

NO_STORE_POLICY = CachePolicy(cache_control="no-store", is_public=False)


def public_page_policy(rules: CacheRules | None = None) -> CachePolicy:
    """Shared-cache policy for rendered public pages."""
    rules = rules or CacheRules()
    return CachePolicy(
        cache_control=(
            f"public, s-maxage={rules.edge_s_maxage_seconds}, "
            f"stale-while-revalidate={rules.edge_stale_while_revalidate_seconds}"
        ),
        is_public=True,
    )


def generate_cache_headers(policy: CachePolicy) -> dict[str, str]:
    return {"Cache-Control": policy.cache_control}


def public_page_headers(rules: CacheRules | None = None) -> dict[str, str]:
    """Full header set for a successfully rendered public page."""
    return {
        "Content-Type": HTML_CONTENT_TYPE,
        **SECURITY_HEADERS,
        **generate_cache_headers(public_page_policy(rules)),
    }


def error_headers() -> dict[str, str]:
    """Headers for generic error bodies on public routes; never edge-cached."""
    return {
        "Content-Type": TEXT_CONTENT_TYPE,
        **SECURITY_HEADERS,
        **generate_cache_headers(NO_STORE_POLICY),
    }
