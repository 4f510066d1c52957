"""
Public page component - Data models.

A resolve call ends in exactly one of three outcomes. Only RenderedPage is
ever cached.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class HomepageIdentifier:
    """Sentinel identifier for the root path."""

    def __repr__(self) -> str:
        return "HOMEPAGE"


HOMEPAGE = HomepageIdentifier()


# --- Input ---


@dataclass(frozen=True)
class ResolveInput:
    """A raw slug from the path, or HOMEPAGE."""

    identifier: str | HomepageIdentifier


# --- Outcomes ---


@dataclass(frozen=True)
class RenderedPage:
    html: str
    headers: dict[str, str] = field(default_factory=dict)
    tags: tuple[str, ...] = ()
    slug: str = ""
    status_code: int = 200


@dataclass(frozen=True)
class NotFound:
    """Unknown, reserved or malformed slug. Visitors never see the reason."""

    reason: str
    status_code: int = 404


@dataclass(frozen=True)
class ServerError:
    """Data-integrity fault or unreachable store."""

    reason: str
    status_code: int = 500


ResolveResult = RenderedPage | NotFound | ServerError
