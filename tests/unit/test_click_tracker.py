"""
Unit tests for the stats-only click tracker.
"""

import logging
from datetime import UTC, date, datetime, timedelta, timezone
from uuid import uuid4

from linkpage.components.clicks import (
    ClickCountsInput,
    ClickTracker,
    RecordClickInput,
    month_bucket,
    run_counts,
    run_record,
)


class ExplodingClickRepo:
    def increment(self, link_id, month, is_bot):
        raise RuntimeError("counter store down")

    def get_counts(self, link_ids):
        return {}


def test_month_bucket_is_first_of_utc_month() -> None:
    assert month_bucket(datetime(2026, 3, 31, 23, 59, tzinfo=UTC)) == date(2026, 3, 1)
    # 00:30 on April 1st at UTC+2 is still March in UTC.
    plus_two = timezone(timedelta(hours=2))
    assert month_bucket(datetime(2026, 4, 1, 0, 30, tzinfo=plus_two)) == date(2026, 3, 1)


def test_record_increments_human_or_bot(click_repo, clock) -> None:
    tracker = ClickTracker(click_repo, clock)
    link_id = uuid4()

    tracker.record(link_id, is_bot=False)
    tracker.record(link_id, is_bot=False)
    tracker.record(link_id, is_bot=True, referrer_domain="t.co")

    assert click_repo.rows[(link_id, date(2026, 3, 1))] == {"human": 2, "bot": 1}


def test_new_month_gets_new_bucket(click_repo, clock) -> None:
    tracker = ClickTracker(click_repo, clock)
    link_id = uuid4()
    tracker.record(link_id, is_bot=False)
    clock.advance(31 * 24 * 3600)
    tracker.record(link_id, is_bot=False)
    assert (link_id, date(2026, 3, 1)) in click_repo.rows
    assert (link_id, date(2026, 4, 1)) in click_repo.rows


def test_record_safely_swallows_and_logs(clock, caplog) -> None:
    tracker = ClickTracker(ExplodingClickRepo(), clock)
    link_id = uuid4()
    assert tracker.record_safely(link_id, is_bot=False) is False
    assert "Click tracking failed" in caplog.text


def test_referrer_domain_is_logged_not_stored(click_repo, clock, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="linkpage.components.clicks._impl")
    link_id = uuid4()

    ClickTracker(click_repo, clock).record(link_id, is_bot=False, referrer_domain="t.co")

    assert "referrer domain: t.co" in caplog.text
    assert click_repo.rows == {(link_id, date(2026, 3, 1)): {"human": 1, "bot": 0}}


def test_run_record_never_raises(clock) -> None:
    tracker = ClickTracker(ExplodingClickRepo(), clock)
    assert run_record(RecordClickInput(link_id=uuid4(), is_bot=True), tracker) is False


def test_click_counts_are_human_only_across_months(click_repo, clock) -> None:
    tracker = ClickTracker(click_repo, clock)
    clicked, never = uuid4(), uuid4()
    tracker.record(clicked, is_bot=False)
    tracker.record(clicked, is_bot=True)
    clock.advance(40 * 24 * 3600)
    tracker.record(clicked, is_bot=False)

    output = run_counts(ClickCountsInput(link_ids=(clicked, never)), tracker)
    assert output.counts == {clicked: 2, never: 0}
    assert output.total == 2


def test_click_counts_empty(click_repo) -> None:
    assert ClickTracker(click_repo).get_click_counts([]) == {}
