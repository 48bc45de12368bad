"""Tests for roster statistics."""

from datetime import date

import pytest

from recruitcrm.domain.models import Recruiter, Role, ShiftRecord
from recruitcrm.reporting.recruiter_stats import box_percentages, last_scores, ranked

TODAY = date(2025, 9, 30)


def shift(rid, day, score, box2=0, box4=0) -> ShiftRecord:
    return ShiftRecord(
        recruiter_id=rid, date_iso=day, score=score, box2_full=box2, box4_full=box4
    )


class TestLastScores:
    """Tests for last_scores."""

    def test_newest_first_limited_to_five(self):
        history = [shift("R001", f"2025-09-{d:02d}", d) for d in range(1, 8)]
        assert last_scores(history, "R001") == [7, 6, 5, 4, 3]

    def test_ignores_unscored_and_other_recruiters(self):
        history = [
            shift("R001", "2025-09-01", None),
            shift("R002", "2025-09-02", 9),
            shift("R001", "2025-09-03", 4),
        ]
        assert last_scores(history, "R001") == [4]


class TestBoxPercentages:
    """Tests for box_percentages."""

    def test_percentages_over_window(self):
        history = [
            shift("R001", "2025-09-01", 8, box2=3, box4=1),
            shift("R001", "2025-07-01", 10, box2=10),
        ]
        assert box_percentages(history, "R001", TODAY) == (37.5, 12.5)

    def test_no_score_in_window(self):
        history = [shift("R001", "2025-01-01", 10, box2=5)]
        assert box_percentages(history, "R001", TODAY) == (0.0, 0.0)


class TestRanked:
    """Tests for the ranked roster."""

    @pytest.fixture
    def roster(self):
        return [
            Recruiter(id="R001", name="zoe", role=Role.ROOKIE),
            Recruiter(id="R002", name="Adam", role=Role.ROOKIE),
            Recruiter(id="R003", name="Mia", role=Role.SALES_MANAGER),
            Recruiter(id="R004", name="Old", role=Role.BRANCH_MANAGER, is_inactive=True),
        ]

    def test_sorted_by_rank_then_name(self, roster):
        rows = ranked(roster, [], today=TODAY)
        assert [r.recruiter.name for r in rows] == ["Mia", "Adam", "zoe"]
        assert [r.rank for r in rows] == ["SM", "RK", "RK"]

    def test_include_inactive(self, roster):
        rows = ranked(roster, [], include_inactive=True, today=TODAY)
        assert rows[0].recruiter.name == "Old"
        assert rows[0].rank == "BM"

    def test_summary_carries_stats(self, roster):
        history = [shift("R003", "2025-09-20", 4, box2=2)]
        [mia] = [r for r in ranked(roster, history, today=TODAY) if r.recruiter.id == "R003"]
        assert mia.last_scores == (4,)
        assert mia.box2_percent == 50.0
