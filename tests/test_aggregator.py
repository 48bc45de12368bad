"""Tests for period aggregation."""

from decimal import Decimal

import pytest

from recruitcrm.compensation.calculator import CommissionCalculator
from recruitcrm.domain.models import (
    RateBand,
    Recruiter,
    Settings,
    ShiftRecord,
    StatusFilter,
)
from recruitcrm.reporting.aggregator import (
    BucketLevel,
    PeriodAggregator,
    Totals,
    day_label,
    month_label,
    summarize,
    week_key,
)


def shift(rid, day, hours=6, box2=0, box4=0, score=10, row_key=None) -> ShiftRecord:
    return ShiftRecord(
        recruiter_id=rid,
        date_iso=day,
        hours=hours,
        box2_full=box2,
        box4_full=box4,
        score=score,
        row_key=row_key,
    )


@pytest.fixture
def settings():
    return Settings(rate_bands=(RateBand("2025-01-01", "15"),))


@pytest.fixture
def roster():
    return [
        Recruiter(id="R001", name="Alice"),
        Recruiter(id="R002", name="Bob"),
        Recruiter(id="R003", name="Carol", is_inactive=True),
    ]


@pytest.fixture
def records():
    return [
        shift("R001", "2025-07-31", box2=2),
        shift("R001", "2025-08-01", box2=4),
        shift("R002", "2025-08-29", box2=1, box4=1),
        shift("R003", "2025-08-29", box2=3),
        shift("R001", "2025-09-01", box2=5),
        shift("R002", "2024-12-31", box2=2),
    ]


class TestKeysAndLabels:
    """Tests for period keys and display labels."""

    def test_week_key_uses_iso_week(self):
        assert week_key("2025-08-29") == "2025-08-W35"
        assert week_key("2025-09-01") == "2025-09-W36"

    def test_week_key_at_year_boundary(self):
        """1 Jan 2027 falls in ISO week 53 of 2026 but stays in January."""
        assert week_key("2027-01-01") == "2027-01-W53"

    def test_week_key_unparseable_date(self):
        assert week_key("garbage") == "garbage-W00"

    def test_labels(self):
        assert month_label("2025-08") == "August 2025"
        assert day_label("2025-08-29") == "29/08/25"


class TestPeriodAggregator:
    """Tests for PeriodAggregator."""

    @pytest.fixture
    def aggregator(self, settings):
        return PeriodAggregator(settings)

    def test_tree_shape(self, aggregator, records, roster):
        year = aggregator.aggregate(records, 2025, StatusFilter.ALL, roster)

        assert year.key == "2025"
        assert year.level is BucketLevel.YEAR
        assert [m.key for m in year.children] == ["2025-07", "2025-08", "2025-09"]

        august = year.child("2025-08")
        assert [w.key for w in august.children] == ["2025-08-W31", "2025-08-W35"]
        week = august.child("2025-08-W35")
        day = week.child("2025-08-29")
        assert day.level is BucketLevel.DAY
        assert day.children == ()
        assert len(day.records) == 2

    def test_week_spanning_months_splits(self, aggregator, records, roster):
        """31 Jul and 1 Aug share ISO week 31 but land in separate months."""
        year = aggregator.aggregate(records, 2025, StatusFilter.ALL, roster)
        assert year.child("2025-07").child("2025-07-W31") is not None
        assert year.child("2025-08").child("2025-08-W31") is not None

    def test_year_filter(self, aggregator, records, roster):
        year = aggregator.aggregate(records, 2025, StatusFilter.ALL, roster)
        assert year.totals.shifts == 5
        previous = aggregator.aggregate(records, 2024, StatusFilter.ALL, roster)
        assert previous.totals.shifts == 1

    def test_status_filter(self, aggregator, records, roster):
        year = aggregator.aggregate(records, 2025, StatusFilter.ACTIVE, roster)
        assert year.totals.shifts == 4
        inactive = aggregator.aggregate(records, 2025, StatusFilter.INACTIVE, roster)
        assert inactive.totals.shifts == 1

    def test_duplicates_are_collapsed(self, aggregator, roster):
        records = [
            shift("R001", "2025-08-01", box2=1),
            shift("R001", "2025-08-01", box2=4),
        ]
        year = aggregator.aggregate(records, 2025, StatusFilter.ALL, roster)
        assert year.totals.shifts == 1
        assert year.totals.box2 == 4

    def test_parent_totals_equal_sum_of_children(self, aggregator, records, roster):
        year = aggregator.aggregate(records, 2025, StatusFilter.ALL, roster)
        for bucket in year.walk():
            if not bucket.children:
                continue
            combined = Totals()
            for child in bucket.children:
                combined = combined + child.totals
            assert combined == bucket.totals

    def test_totals_sum_unrounded_values(self, aggregator, roster):
        """Three wages of 4.995 total 14.985, shown as 14.99 (not 15.00)."""
        records = [shift(rid, "2025-08-01", hours="0.333") for rid in ("R001", "R002", "R003")]
        year = aggregator.aggregate(records, 2025, StatusFilter.ALL, roster)
        assert year.totals.wages == Decimal("14.985")
        assert year.totals.display()["wages"] == "14.99"

    def test_display_uses_two_decimals(self, aggregator, roster):
        year = aggregator.aggregate([shift("R001", "2025-08-01", box2=4)], 2025, "all", roster)
        display = year.totals.display()
        assert display["wages"] == "90.00"
        assert display["bonus"] == "70.00"
        assert display["income"] == "200.00"
        assert display["profit"] == "40.00"

    def test_accepts_enriched_shifts(self, aggregator, settings, roster):
        calculator = CommissionCalculator()
        enriched = [calculator.enrich(shift("R001", "2025-08-01", box2=4), settings)]
        year = aggregator.aggregate(enriched, 2025, StatusFilter.ALL, roster)
        assert year.totals.income == Decimal("200")

    def test_empty_year(self, aggregator):
        year = aggregator.aggregate([], 2025)
        assert year.children == ()
        assert year.totals == Totals()


class TestSummarize:
    """Tests for additive totals."""

    def test_additivity(self, settings, records):
        """Summing two disjoint subsets equals summing their union."""
        calculator = CommissionCalculator()
        shifts = [calculator.enrich(r, settings) for r in records]
        left, right = shifts[:2], shifts[2:]
        assert summarize(left) + summarize(right) == summarize(shifts)

    def test_missing_score_counts_as_zero(self, settings):
        calculator = CommissionCalculator()
        shifts = [
            calculator.enrich(shift("R001", "2025-08-01", score=None), settings),
            calculator.enrich(shift("R002", "2025-08-01", score=4), settings),
        ]
        assert summarize(shifts).score == 4
