"""Tests for record deduplication and status filtering."""

import pytest

from recruitcrm.domain.models import Recruiter, ShiftRecord, StatusFilter
from recruitcrm.reporting.dedup import RecordDeduplicator, StatusFilterPass, canonicalize


def record(rid="R001", day="2025-08-29", score=5, row_key=None) -> ShiftRecord:
    return ShiftRecord(recruiter_id=rid, date_iso=day, score=score, row_key=row_key)


class TestRecordDeduplicator:
    """Tests for RecordDeduplicator."""

    @pytest.fixture
    def dedup(self):
        return RecordDeduplicator()

    def test_last_record_wins(self, dedup):
        first = record(score=5)
        second = record(score=9)
        assert dedup.deduplicate([first, second]) == [second]

    def test_survivor_keeps_first_position(self, dedup):
        """The replacement takes the slot of the first occurrence."""
        a = record("R001", score=1)
        b = record("R002", score=2)
        a2 = record("R001", score=3)
        assert dedup.deduplicate([a, b, a2]) == [a2, b]

    def test_idempotent(self, dedup):
        records = [record("R001"), record("R002"), record("R001", score=7)]
        once = dedup.deduplicate(records)
        assert dedup.deduplicate(once) == once

    def test_row_key_distinguishes_records(self, dedup):
        """Two rows for the same recruiter and day with different row keys."""
        records = [record(row_key=1), record(row_key=2), record(row_key=None)]
        assert len(dedup.deduplicate(records)) == 3

    def test_different_dates_are_kept(self, dedup):
        records = [record(day="2025-08-28"), record(day="2025-08-29")]
        assert len(dedup.deduplicate(records)) == 2


class TestStatusFilterPass:
    """Tests for StatusFilterPass."""

    @pytest.fixture
    def roster(self):
        return [
            Recruiter(id="R001", name="Active"),
            Recruiter(id="R002", name="Gone", is_inactive=True),
        ]

    @pytest.fixture
    def records(self):
        # R003 is not on the roster; the last record has no recruiter at all.
        return [record("R001"), record("R002"), record("R003"), record("")]

    def test_all_keeps_everything(self, records, roster):
        assert StatusFilterPass().apply(records, roster, StatusFilter.ALL) == records

    def test_active_only(self, records, roster):
        kept = StatusFilterPass().apply(records, roster, StatusFilter.ACTIVE)
        assert [r.recruiter_id for r in kept] == ["R001"]

    def test_inactive_only(self, records, roster):
        kept = StatusFilterPass().apply(records, roster, StatusFilter.INACTIVE)
        assert [r.recruiter_id for r in kept] == ["R002"]

    def test_accepts_string_filter_and_mapping_roster(self, records, roster):
        roster_map = {r.id: r for r in roster}
        kept = StatusFilterPass().apply(records, roster_map, "active")
        assert [r.recruiter_id for r in kept] == ["R001"]

    def test_no_roster_means_unknown_status(self, records):
        assert StatusFilterPass().apply(records, None, StatusFilter.ACTIVE) == []


class TestCanonicalize:
    """Tests for the combined pass."""

    def test_dedup_before_filter(self):
        roster = [Recruiter(id="R001", name="Active")]
        records = [record("R001", score=1), record("R001", score=4), record("R002")]
        kept = canonicalize(records, roster, StatusFilter.ACTIVE)
        assert len(kept) == 1
        assert kept[0].score == 4
