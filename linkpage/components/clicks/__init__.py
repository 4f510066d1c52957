"""
Clicks component - Privacy-preserving click counters.

Invariants:
- No visitor-identifying data is persisted
- A tracking failure never reaches the redirect response
"""

from ._impl import ClickTracker, month_bucket
from .component import run_counts, run_record
from .models import ClickCountsInput, ClickCountsOutput, RecordClickInput
from .ports import ClickRepoPort, UtcClockPort

__all__ = [
    # Entry points
    "run_record",
    "run_counts",
    "ClickTracker",
    # Models
    "RecordClickInput",
    "ClickCountsInput",
    "ClickCountsOutput",
    # Functions
    "month_bucket",
    # Ports
    "ClickRepoPort",
    "UtcClockPort",
]
