"""
TaggedCache - server-side cache of computed public-page values.

Key behaviors:
- Entries are keyed by a stable cache key and carry one or more tags
- Purging a tag expires every entry carrying it, visible to the next read
- Every entry also expires after a revalidation period, so a missed purge
  heals on its own
- A value computed before a purge of one of its tags is not stored
  (read-after-purge holds even for renders already in flight)
- Many concurrent readers; a single lock guards the index, never held
  while computing

`None` is never cached; callers use it to signal "nothing to store".
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from threading import Lock
from typing import Any, TypeVar

from linkpage.domain.entities import Page

from .models import CacheEntry, CacheStats
from .ports import MonotonicClockPort

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_REVALIDATE_SECONDS = 86400
MAX_TRACKED_PURGES = 4096

# --- Tags and keys ---

HOMEPAGE_TAG = "homepage"
HOMEPAGE_CACHE_KEY = "public-homepage"


def page_tag(slug: str) -> str:
    return f"page:{slug.strip().lower()}"


def template_tag(template_slug: str) -> str:
    return f"template:{template_slug.strip()}"


def page_cache_key(slug: str) -> str:
    return f"public-page:{slug.strip().lower()}"


def template_cache_key(template_slug: str) -> str:
    return f"public-template:{template_slug.strip()}"


def page_cache_tags(page: Page) -> list[str]:
    """Tags identifying a page: its slug, plus the homepage tag if flagged."""
    tags = [page_tag(page.slug)]
    if page.is_homepage:
        tags.append(HOMEPAGE_TAG)
    return tags


# --- Clock ---


class SystemMonotonicClock:
    """Production clock."""

    def monotonic(self) -> float:
        return time.monotonic()


# --- Cache ---


class TaggedCache:
    """In-process tag-indexed cache."""

    def __init__(
        self,
        default_ttl_seconds: int = DEFAULT_REVALIDATE_SECONDS,
        clock: MonotonicClockPort | None = None,
        max_tracked_purges: int = MAX_TRACKED_PURGES,
    ) -> None:
        self._default_ttl = default_ttl_seconds
        self._clock = clock if clock is not None else SystemMonotonicClock()
        self._entries: dict[str, CacheEntry] = {}
        self._tag_index: dict[str, set[str]] = {}
        self._tag_purged_at: dict[str, int] = {}
        self._max_tracked_purges = max_tracked_purges
        # Snapshots older than this may predate a purge no longer tracked.
        self._purge_floor = 0
        self._epoch = 0
        self._hits = 0
        self._misses = 0
        self._purged = 0
        self._lock = Lock()

    def _remove(self, key: str) -> None:
        entry = self._entries.pop(key, None)
        if entry is None:
            return
        for tag in entry.tags:
            keys = self._tag_index.get(tag)
            if keys is None:
                continue
            keys.discard(key)
            if not keys:
                del self._tag_index[tag]

    def snapshot(self) -> int:
        """Purge epoch to pass to `set(since=...)` for a value about to be computed."""
        with self._lock:
            return self._epoch

    def get(self, key: str) -> Any | None:
        now = self._clock.monotonic()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if entry.expires_at <= now:
                self._remove(key)
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def set(
        self,
        key: str,
        value: Any,
        tags: Iterable[str],
        ttl_seconds: int | None = None,
        since: int | None = None,
    ) -> bool:
        """
        Store `value` under `key`.

        With `since`, the write is dropped if any of `tags` was purged after
        that snapshot, or if the snapshot is older than the oldest purge
        still tracked. Returns True if stored.
        """
        tag_set = frozenset(tags)
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        expires_at = self._clock.monotonic() + ttl

        with self._lock:
            if since is not None and (
                since < self._purge_floor
                or any(self._tag_purged_at.get(tag, 0) > since for tag in tag_set)
            ):
                logger.debug("Cache write for %s skipped: tag purged during compute", key)
                return False

            self._remove(key)
            self._entries[key] = CacheEntry(
                key=key, value=value, tags=tag_set, expires_at=expires_at
            )
            for tag in tag_set:
                self._tag_index.setdefault(tag, set()).add(key)
        return True

    def get_or_compute(
        self,
        key: str,
        compute: Callable[[], T | None],
        tags: Iterable[str],
        ttl_seconds: int | None = None,
    ) -> T | None:
        """Return the cached value, or compute, store and return it."""
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit: %s", key)
            return cached  # type: ignore[no-any-return]

        logger.debug("Cache miss: %s", key)
        since = self.snapshot()
        value = compute()
        if value is not None:
            self.set(key, value, tags, ttl_seconds=ttl_seconds, since=since)
        return value

    def invalidate_tag(self, tag: str) -> int:
        """Expire every entry carrying `tag`. Returns the number removed."""
        with self._lock:
            self._epoch += 1
            # Re-insert so the map stays ordered by purge epoch.
            self._tag_purged_at.pop(tag, None)
            self._tag_purged_at[tag] = self._epoch
            while len(self._tag_purged_at) > self._max_tracked_purges:
                oldest = next(iter(self._tag_purged_at))
                self._purge_floor = self._tag_purged_at.pop(oldest)
            keys = list(self._tag_index.get(tag, ()))
            for key in keys:
                self._remove(key)
            self._purged += len(keys)

        logger.debug("Purged tag %s (%d entries)", tag, len(keys))
        return len(keys)

    def invalidate_tags(self, tags: list[str]) -> dict[str, int]:
        return {tag: self.invalidate_tag(tag) for tag in tags}

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._tag_index.clear()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                entries=len(self._entries),
                hits=self._hits,
                misses=self._misses,
                purged=self._purged,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
