"""
Clicks component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from linkpage.ports.repo import ClickRepoPort


class UtcClockPort(Protocol):
    def now_utc(self) -> datetime:
        ...


__all__ = ["ClickRepoPort", "UtcClockPort"]
