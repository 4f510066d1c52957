"""
Clicks component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RecordClickInput:
    """One redirect traversal. Carries no visitor identity.

    `referrer_domain` is only written to the debug log; the counter store
    never sees it.
    """

    link_id: UUID
    is_bot: bool
    referrer_domain: str | None = None


@dataclass(frozen=True)
class ClickCountsInput:
    link_ids: tuple[UUID, ...]


@dataclass(frozen=True)
class ClickCountsOutput:
    """Human clicks per link, all months."""

    counts: dict[UUID, int]

    @property
    def total(self) -> int:
        return sum(self.counts.values())
