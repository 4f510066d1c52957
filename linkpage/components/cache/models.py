"""
Cache component models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """One computed value in the server-side cache."""

    key: str
    value: Any
    tags: frozenset[str]
    expires_at: float


@dataclass(frozen=True)
class CachePolicy:
    """Edge cache policy for a response."""

    cache_control: str
    is_public: bool


@dataclass(frozen=True)
class CacheStats:
    """Counters for operators."""

    entries: int
    hits: int
    misses: int
    purged: int
