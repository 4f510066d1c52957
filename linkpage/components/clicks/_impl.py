"""
ClickTracker - stats-only click counting for /go redirects.

Key behaviors:
- One counter row per (link, calendar month in UTC)
- Human and bot clicks are counted separately; nothing about the visitor
  is stored
- `record_safely` never raises: the redirect must not depend on it
- The referrer domain goes to the debug log only, never to storage
"""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from uuid import UUID

from linkpage.adapters.clock import SystemClock

from .ports import ClickRepoPort, UtcClockPort

logger = logging.getLogger(__name__)


def month_bucket(moment: datetime) -> date:
    """First day of the UTC month containing `moment`."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(UTC)
    return date(moment.year, moment.month, 1)


class ClickTracker:
    def __init__(self, repo: ClickRepoPort, clock: UtcClockPort | None = None) -> None:
        self._repo = repo
        self._clock = clock or SystemClock()

    def record(self, link_id: UUID, is_bot: bool, referrer_domain: str | None = None) -> None:
        month = month_bucket(self._clock.now_utc())
        self._repo.increment(link_id, month, is_bot)
        logger.debug(
            "Counted %s click on %s for %s (referrer domain: %s)",
            "bot" if is_bot else "human",
            link_id,
            month.isoformat(),
            referrer_domain or "-",
        )

    def record_safely(
        self, link_id: UUID, is_bot: bool, referrer_domain: str | None = None
    ) -> bool:
        """Fire-and-forget wrapper. Returns False if the increment failed."""
        try:
            self.record(link_id, is_bot, referrer_domain)
        except Exception:
            logger.exception("Click tracking failed for link %s", link_id)
            return False
        return True

    def get_click_counts(self, link_ids: list[UUID]) -> dict[UUID, int]:
        """Human clicks per link; links never clicked map to 0."""
        if not link_ids:
            return {}
        counts = self._repo.get_counts(link_ids)
        return {link_id: counts.get(link_id, 0) for link_id in link_ids}
