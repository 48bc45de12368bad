"""Tests for per-shift commission calculation."""

from decimal import Decimal

import pytest

from recruitcrm.compensation.calculator import CommissionCalculator
from recruitcrm.domain.models import (
    ConversionTable,
    RateBand,
    Role,
    Settings,
    ShiftRecord,
    ShiftType,
)
from recruitcrm.domain.numbers import format_money
from recruitcrm.domain.policies import DefaultCommissionPolicy


@pytest.fixture
def calculator():
    return CommissionCalculator()


@pytest.fixture
def settings():
    """Rate 15.0 and D2D full-price box2 worth 95."""
    return Settings(
        rate_bands=(RateBand("2025-01-01", "15.0"),),
        conversion_table=ConversionTable.from_dict(
            {"D2D": {"full": {"box2": 95, "box4": 0}}}
        ),
    )


def make_record(**overrides) -> ShiftRecord:
    values = dict(
        recruiter_id="R001",
        date_iso="2025-03-03",
        role_at_shift=Role.ROOKIE,
        shift_type=ShiftType.D2D,
        score=10,
    )
    values.update(overrides)
    return ShiftRecord(**values)


class TestEndToEnd:
    """The reference door-to-door scenario."""

    def test_d2d_full_price_shift(self, calculator, settings):
        """box2=4 at rate 15 for 6 hours as a Rookie."""
        record = make_record(hours=6, box2_full=4)
        shift = calculator.enrich(record, settings)

        assert format_money(shift.wages) == "90.00"
        assert format_money(shift.bonus) == "70.00"
        assert format_money(shift.income) == "380.00"
        assert format_money(shift.profit) == "220.00"

    def test_enrich_is_idempotent(self, calculator, settings):
        """Enriching an enriched shift gives the same figures."""
        once = calculator.enrich(make_record(hours=6, box2_full=4), settings)
        twice = calculator.enrich(once, settings)
        assert twice == once

    def test_input_record_untouched(self, calculator, settings):
        record = make_record(box2_full=4)
        calculator.enrich(record, settings)
        assert record.hours is None
        assert record.commission_multiplier is None


class TestIncome:
    """Tests for income from the conversion table."""

    def test_default_table_mixes_states(self, calculator):
        """Full and discounted units use their own unit values."""
        record = make_record(
            box2_full=2, box2_discounted=1, box4_full=1, box4_discounted=1
        )
        # 2 x 50 + 1 x 35 + 1 x 90 + 1 x 70
        assert calculator.income(record, Settings()) == Decimal("295")

    def test_event_shift_uses_event_values(self, calculator):
        record = make_record(shift_type=ShiftType.EVENT, box2_full=2)
        assert calculator.income(record, Settings()) == Decimal("80")

    def test_missing_table_entries_are_worth_zero(self, calculator, settings):
        """Only D2D full box2 is configured; everything else earns 0."""
        record = make_record(box2_discounted=3, box4_full=2)
        assert calculator.income(record, settings) == Decimal("0")

    def test_malformed_counters_count_as_zero(self, calculator):
        record = make_record(box2_full="abc", box4_full="")
        assert calculator.income(record, Settings()) == Decimal("0")


class TestWagesAndBonus:
    """Tests for hours, rates and multipliers."""

    def test_role_default_hours_and_multiplier(self, calculator, settings):
        """A Team Captain without overrides works 8 h at x1.5."""
        record = make_record(role_at_shift=Role.TEAM_CAPTAIN, box2_full=4)
        shift = calculator.enrich(record, settings)
        assert shift.effective_hours == Decimal("8")
        assert shift.wages == Decimal("120.0")
        assert shift.bonus == Decimal("105.0")

    def test_unrecorded_role_counts_as_rookie(self, calculator, settings):
        record = make_record(role_at_shift=None, box2_full=2)
        shift = calculator.enrich(record, settings)
        assert shift.effective_hours == Decimal("6")
        assert shift.effective_multiplier == Decimal("1.0")

    def test_hours_override_with_decimal_comma(self, calculator, settings):
        record = make_record(hours="7,5")
        assert calculator.wages(record, settings) == Decimal("112.50")

    def test_multiplier_override(self, calculator):
        record = make_record(box2_full=4, commission_multiplier="2")
        assert calculator.bonus(record) == Decimal("140")

    def test_rate_band_by_shift_date(self, calculator):
        settings = Settings(
            rate_bands=(
                RateBand("2025-01-01", "15"),
                RateBand("2025-05-01", "16"),
            )
        )
        early = calculator.enrich(make_record(date_iso="2025-04-30", hours=6), settings)
        late = calculator.enrich(make_record(date_iso="2025-05-01", hours=6), settings)
        assert early.wages == Decimal("90")
        assert late.wages == Decimal("96")

    def test_snapshotted_rate_takes_precedence(self, calculator, settings):
        record = make_record(hours=6, hourly_rate="14")
        assert calculator.hourly_rate(record, settings) == Decimal("14")
        assert calculator.wages(record, settings) == Decimal("84")

    def test_amounts_are_not_rounded(self, calculator, settings):
        """Rounding only happens at presentation time."""
        record = make_record(hours="0.333")
        assert calculator.wages(record, settings) == Decimal("4.9950")

    def test_custom_policy(self, settings):
        calculator = CommissionCalculator(
            policy=DefaultCommissionPolicy(fallback_hours=Decimal("5"))
        )
        shift = calculator.enrich(make_record(), settings)
        assert shift.wages == Decimal("75.0")
