"""
System route table.

Every literal path segment claimed by the HTTP surface (this service, the
editor front-end mounted next to it, and the platform) is declared here.
The reserved-slug set is derived from this table, and the API refuses to
start if a mounted route is not covered (see app_shell/config.py).
"""

from __future__ import annotations

from collections.abc import Iterable

# --- Segments served by this service ---

API = "api"
GO = "go"
HEALTH = "health"

# --- Segments served by the editor front-end / platform ---

LOGIN = "login"
LOGOUT = "logout"
DASHBOARD = "dashboard"
AUTH = "auth"
ADMIN = "admin"

LEGAL_PAGES = (
    "mentions-legales",
    "confidentialite",
    "conditions",
    "contact",
)

PLATFORM_SEGMENTS = ("_next", "favicon.ico")

SERVICE_SEGMENTS = (API, GO, HEALTH)
EXTERNAL_SEGMENTS = (LOGIN, LOGOUT, DASHBOARD, AUTH, ADMIN, *LEGAL_PAGES, *PLATFORM_SEGMENTS)

RESERVED_SLUGS: frozenset[str] = frozenset(SERVICE_SEGMENTS + EXTERNAL_SEGMENTS)

# --- Concrete paths (mounted by linkpage.api.main) ---

HOMEPAGE_PATH = "/"
PUBLIC_PAGE_PATH = "/{slug}"
GO_PATH = f"/{GO}/{{link_id}}"
HEALTH_PATH = f"/{HEALTH}"
REVALIDATE_PATH = f"/{API}/revalidate"
WEBHOOK_REVALIDATE_PATH = f"/{API}/webhooks/revalidate"


def first_literal_segment(path: str) -> str | None:
    """
    Return the first path segment if it is a literal, else None.

    "/go/{link_id}" -> "go", "/{slug}" -> None, "/" -> None.
    """
    segment = path.lstrip("/").split("/", 1)[0]
    if not segment or segment.startswith("{"):
        return None
    return segment.lower()


def uncovered_segments(paths: Iterable[str], reserved: Iterable[str] = RESERVED_SLUGS) -> list[str]:
    """List literal first segments of `paths` missing from the reserved set."""
    reserved_set = {r.lower() for r in reserved}
    missing: list[str] = []
    for path in paths:
        segment = first_literal_segment(path)
        if segment and segment not in reserved_set and segment not in missing:
            missing.append(segment)
    return missing
