"""
Sanitization and validation helpers.

Pure functions shared by the renderer, the redirect route and the
management services. No I/O.

Escaping contract: raw values are escaped exactly once, at the point they
are concatenated into markup. `escape_html` is not idempotent
(`&amp;` becomes `&amp;amp;`), so callers must never escape twice.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import urlsplit

from linkpage.domain.routes import RESERVED_SLUGS

ALLOWED_URL_SCHEMES = frozenset({"http", "https"})

SLUG_FALLBACK = "profile"
SLUG_MIN_LENGTH = 2
SLUG_MAX_LENGTH = 48
SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")

DEFAULT_BOT_SIGNATURES = (
    "bot",
    "crawler",
    "spider",
    "slurp",
    "preview",
    "facebookexternalhit",
    "whatsapp",
    "telegram",
    "discord",
    "embedly",
    "quora link preview",
)

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9-]+")
_HYPHEN_RUNS = re.compile(r"-{2,}")
# C0 controls and DEL. Never legal in a stored URL; would allow header
# injection through a Location header.
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


# --- Escaping ---


def escape_html(text: str) -> str:
    """Escape text for an HTML text context."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#039;")
    )


def escape_attr(text: str) -> str:
    """Escape text for a quoted HTML attribute value."""
    return escape_html(text).replace("\n", " ")


# --- URLs ---


def is_safe_url(url: str | None) -> bool:
    """
    True iff `url` is an absolute http(s) URL with a host.

    Rejects javascript:, data:, file:, protocol-relative and relative
    URLs, anything that fails to parse, and anything carrying control
    characters.
    """
    if not url:
        return False

    trimmed = url.strip()
    if not trimmed or _CONTROL_CHARS.search(trimmed):
        return False

    try:
        parsed = urlsplit(trimmed)
        hostname = parsed.hostname
    except ValueError:
        return False

    if parsed.scheme.lower() not in ALLOWED_URL_SCHEMES:
        return False

    if not hostname or any(ch.isspace() for ch in hostname):
        return False

    return True


def is_safe_redirect_path(path: str) -> bool:
    """
    True iff `path` is a same-origin absolute path.

    Guards internal post-login redirects against open redirects
    ("//evil.example", "/\\evil.example") and scheme smuggling.
    """
    return (
        path.startswith("/")
        and not path.startswith("//")
        and "\\" not in path
        and ":" not in path
    )


def referrer_to_domain(referrer: str | None) -> str | None:
    """Reduce a referrer URL to its hostname, or None."""
    if not referrer:
        return None
    try:
        hostname = urlsplit(referrer.strip()).hostname
    except ValueError:
        return None
    return hostname or None


# --- Slugs ---


def slug_from_string(value: str, fallback: str = SLUG_FALLBACK) -> str:
    """
    Normalize arbitrary input into a slug.

    Output matches ^[a-z0-9-]*$ with no leading, trailing or doubled
    hyphens. Falls back to `fallback` when nothing usable remains.
    """
    slug = _NON_SLUG_CHARS.sub("-", value.lower().strip())
    slug = _HYPHEN_RUNS.sub("-", slug).strip("-")
    return slug or fallback


def slug_from_email(email: str, fallback: str = SLUG_FALLBACK) -> str:
    """Derive a candidate slug from the local part of an email address."""
    local_part = email.split("@", 1)[0]
    return slug_from_string(local_part, fallback=fallback)


def is_reserved_slug(slug: str, reserved: Iterable[str] = RESERVED_SLUGS) -> bool:
    """Case-insensitive membership test against the system route table."""
    return slug.lower() in reserved


def is_valid_slug(
    slug: str,
    min_length: int = SLUG_MIN_LENGTH,
    max_length: int = SLUG_MAX_LENGTH,
) -> bool:
    """Pattern and length check only; reservation is checked separately."""
    return min_length <= len(slug) <= max_length and bool(SLUG_PATTERN.match(slug))


# --- User agents ---


def _compile_bot_pattern(signatures: Iterable[str]) -> re.Pattern[str]:
    parts = [re.escape(s) for s in signatures if s]
    if not parts:
        return re.compile(r"(?!)")
    return re.compile("|".join(parts), re.IGNORECASE)


_DEFAULT_BOT_PATTERN = _compile_bot_pattern(DEFAULT_BOT_SIGNATURES)


def is_bot_user_agent(
    user_agent: str | None,
    signatures: Iterable[str] | None = None,
) -> bool:
    """
    Small crawler / link-preview heuristic for click classification.

    A missing user agent counts as a bot.
    """
    if not user_agent:
        return True
    pattern = _DEFAULT_BOT_PATTERN if signatures is None else _compile_bot_pattern(signatures)
    return bool(pattern.search(user_agent))
