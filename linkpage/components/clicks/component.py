"""
Clicks component - Shell entry points.
"""

from __future__ import annotations

from ._impl import ClickTracker
from .models import ClickCountsInput, ClickCountsOutput, RecordClickInput


def run_record(input_data: RecordClickInput, tracker: ClickTracker) -> bool:
    """Count one click. Never raises."""
    return tracker.record_safely(
        input_data.link_id, input_data.is_bot, input_data.referrer_domain
    )


def run_counts(input_data: ClickCountsInput, tracker: ClickTracker) -> ClickCountsOutput:
    return ClickCountsOutput(counts=tracker.get_click_counts(list(input_data.link_ids)))
