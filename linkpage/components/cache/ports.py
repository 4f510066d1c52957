"""
Cache component port definitions.
"""

from __future__ import annotations

from typing import Protocol


class MonotonicClockPort(Protocol):
    """Port for expiry arithmetic."""

    def monotonic(self) -> float:
        """Seconds from an arbitrary, non-decreasing origin."""
        ...


class TagPurgePort(Protocol):
    """What the invalidation gateway needs from the server-side cache."""

    def invalidate_tags(self, tags: list[str]) -> dict[str, int]:
        """Expire every entry carrying any of `tags`. Returns entries removed per tag."""
        ...
