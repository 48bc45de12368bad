"""Tests for the shift history ledger."""

from decimal import Decimal

import pytest

from recruitcrm.compensation.calculator import CommissionCalculator
from recruitcrm.domain.models import RateBand, Settings, ShiftRecord
from recruitcrm.history.ledger import ShiftHistory
from recruitcrm.validation.validator import ShiftRejectedError, ValidationErrorType


def row(rid, day="2025-08-29", score=5, box2=0, hours=6, row_key=None) -> ShiftRecord:
    return ShiftRecord(
        recruiter_id=rid,
        date_iso=day,
        score=score,
        box2_full=box2,
        hours=hours,
        row_key=row_key,
    )


@pytest.fixture
def settings():
    return Settings(rate_bands=(RateBand("2025-01-01", "15"),))


class TestCommitDay:
    """Tests for ShiftHistory.commit_day."""

    def test_commit_appends(self):
        history = ShiftHistory().commit_day("2025-08-29", [row("R001"), row("R002")])
        assert [r.recruiter_id for r in history] == ["R001", "R002"]

    def test_previous_history_untouched(self):
        empty = ShiftHistory()
        empty.commit_day("2025-08-29", [row("R001")])
        assert len(empty) == 0

    def test_recommit_replaces_in_place(self):
        history = ShiftHistory([row("R001", "2025-08-28"), row("R001"), row("R002", "2025-08-30")])
        updated = history.commit_day("2025-08-29", [row("R001", score=9), row("R003")])

        assert [(r.recruiter_id, r.date_iso) for r in updated] == [
            ("R001", "2025-08-28"),
            ("R001", "2025-08-29"),
            ("R002", "2025-08-30"),
            ("R003", "2025-08-29"),
        ]
        assert updated.records[1].score == 9

    def test_rejected_day_writes_nothing(self):
        history = ShiftHistory([row("R001", "2025-08-28")])
        with pytest.raises(ShiftRejectedError) as exc_info:
            history.commit_day("2025-08-29", [row("R002"), row("R003", score=1, box2=3)])

        result = exc_info.value.result
        assert result.errors_of(ValidationErrorType.SCORE_EXCEEDED)
        assert len(history) == 1

    def test_rows_without_recruiter_are_skipped(self):
        history = ShiftHistory().commit_day("2025-08-29", [row(""), row("R001")])
        assert [r.recruiter_id for r in history] == ["R001"]

    def test_for_date(self):
        history = ShiftHistory([row("R001", "2025-08-28"), row("R002")])
        assert [r.recruiter_id for r in history.for_date("2025-08-29")] == ["R002"]


class TestRateSnapshots:
    """Tests for opt-in hourly rate snapshots."""

    def test_no_snapshot_by_default(self, settings):
        history = ShiftHistory().commit_day("2025-08-29", [row("R001")], settings)
        assert history.records[0].hourly_rate is None

    def test_snapshot_stores_rate(self, settings):
        history = ShiftHistory(snapshot_rates=True)
        history = history.commit_day("2025-08-29", [row("R001")], settings)
        assert history.records[0].hourly_rate == Decimal("15")

    def test_snapshot_survives_rate_change(self, settings):
        """Raising the rate later does not change wages of snapshotted shifts."""
        history = ShiftHistory(snapshot_rates=True).commit_day(
            "2025-08-29", [row("R001")], settings
        )
        raised = Settings(rate_bands=(RateBand("2025-01-01", "18"),))
        shift = CommissionCalculator().enrich(history.records[0], raised)
        assert shift.wages == Decimal("90")

    def test_configuration_carries_over(self, settings):
        history = ShiftHistory(snapshot_rates=True).commit_day("2025-08-29", [row("R001")], settings)
        assert history.snapshot_rates
        assert history.reset().snapshot_rates


class TestUpsertAndReset:
    """Tests for unvalidated upsert and bulk reset."""

    def test_row_key_keeps_rows_apart(self):
        history = ShiftHistory().upsert([row("R001", row_key=0), row("R001", row_key=1)])
        assert len(history) == 2

    def test_reset(self):
        history = ShiftHistory([row("R001"), row("R002")])
        assert len(history.reset()) == 0
        assert len(history) == 2


class TestSerialization:
    """Tests for list conversion."""

    def test_round_trip(self):
        history = ShiftHistory([row("R001", box2=3), row("R002", hours="7,5")])
        restored = ShiftHistory.from_list(history.to_list())
        assert restored.records == history.records

    def test_malformed_entries_skipped(self):
        restored = ShiftHistory.from_list([{"recruiter_id": "R001", "date_iso": "2025-08-29"}, "x", 3])
        assert len(restored) == 1

    def test_from_none(self):
        assert len(ShiftHistory.from_list(None)) == 0
