"""Commission calculator.

Turns a shift record's raw counters into money:

    income = sum(counter x conversion_table[shift_type][state][box])
    wages  = effective_hours x hourly_rate(date)
    bonus  = tier_bonus(box2 units) x effective_multiplier
    profit = income - (wages + bonus)

Hours and multiplier fall back to role defaults when the record has no
override. All amounts stay unrounded Decimals; rounding is a presentation
concern.
"""

from decimal import Decimal
from typing import Optional, Union

from recruitcrm.compensation.rates import RateResolver
from recruitcrm.domain.models import (
    DiscountState,
    EnrichedShift,
    Settings,
    ShiftRecord,
)
from recruitcrm.domain.numbers import ZERO
from recruitcrm.domain.policies import CommissionPolicy, DefaultCommissionPolicy

_BOXES = ("box2", "box4")


class CommissionCalculator:
    """Enriches shift records with income, wages, bonus and profit.

    Example:
        >>> calculator = CommissionCalculator()
        >>> shift = calculator.enrich(record, settings)
        >>> shift.profit
        Decimal('220.0')
    """

    def __init__(
        self,
        policy: Optional[CommissionPolicy] = None,
        rate_resolver: Optional[RateResolver] = None,
    ):
        self.policy = policy or DefaultCommissionPolicy()
        self.rate_resolver = rate_resolver or RateResolver()

    def enrich(
        self,
        record: Union[ShiftRecord, EnrichedShift],
        settings: Optional[Settings] = None,
    ) -> EnrichedShift:
        """Compute derived pay figures for a shift.

        Passing an already enriched shift recomputes from its record, so
        enrichment is idempotent.

        Args:
            record: The shift record (or a previous enrichment of it).
            settings: Settings snapshot; defaults apply when None.

        Returns:
            A new EnrichedShift. The input is never modified.
        """
        if isinstance(record, EnrichedShift):
            record = record.record
        settings = settings or Settings()

        hours = self.effective_hours(record)
        rate = self.hourly_rate(record, settings)
        multiplier = self.effective_multiplier(record)
        tier = self.policy.tier_bonus(record.box2)

        return EnrichedShift(
            record=record,
            income=self.income(record, settings),
            wages=hours * rate,
            bonus=tier * multiplier,
            effective_hours=hours,
            hourly_rate=rate,
            effective_multiplier=multiplier,
            tier_bonus=tier,
        )

    def income(self, record: ShiftRecord, settings: Settings) -> Decimal:
        """Income generated by the shift's sales."""
        total = ZERO
        for state in DiscountState:
            units = settings.conversion_table.lookup(record.shift_type, state)
            for box in _BOXES:
                total += record.counter(box, state) * getattr(units, box)
        return total

    def effective_hours(self, record: ShiftRecord) -> Decimal:
        if record.hours is not None:
            return record.hours
        return self.policy.default_hours(record.role)

    def effective_multiplier(self, record: ShiftRecord) -> Decimal:
        if record.commission_multiplier is not None:
            return record.commission_multiplier
        return self.policy.default_multiplier(record.role)

    def hourly_rate(self, record: ShiftRecord, settings: Settings) -> Decimal:
        """Rate snapshotted on the record, else the current band rate."""
        if record.hourly_rate is not None:
            return record.hourly_rate
        return self.rate_resolver.resolve(record.date_iso, settings.rate_bands)

    def wages(self, record: ShiftRecord, settings: Settings) -> Decimal:
        return self.effective_hours(record) * self.hourly_rate(record, settings)

    def bonus(self, record: ShiftRecord) -> Decimal:
        return self.policy.tier_bonus(record.box2) * self.effective_multiplier(record)
