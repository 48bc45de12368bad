"""Monthly payroll.

Pay for month M is made of the wages earned in M-1 and the bonus earned
in M-2. Each payroll line keeps the per-shift breakdown behind both
figures.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from recruitcrm.compensation.calculator import CommissionCalculator
from recruitcrm.domain.models import (
    Recruiter,
    Settings,
    ShiftRecord,
    StatusFilter,
)
from recruitcrm.domain.numbers import ZERO
from recruitcrm.reporting.dedup import RecordDeduplicator


@dataclass(frozen=True)
class WageShift:
    """One shift's contribution to wages."""

    date_iso: str
    location: str
    hours: Decimal
    rate: Decimal
    wages: Decimal


@dataclass(frozen=True)
class BonusShift:
    """One shift's contribution to bonus."""

    date_iso: str
    location: str
    box2: int
    multiplier: Decimal
    bonus: Decimal


@dataclass(frozen=True)
class PayrollLine:
    """Pay for a single recruiter in a pay month."""

    recruiter: Recruiter
    wages: Decimal = ZERO
    bonus: Decimal = ZERO
    wage_shifts: tuple[WageShift, ...] = field(default_factory=tuple)
    bonus_shifts: tuple[BonusShift, ...] = field(default_factory=tuple)

    @property
    def total(self) -> Decimal:
        return self.wages + self.bonus


def shift_month(ym: str, delta: int) -> str:
    """Move a ``YYYY-MM`` key by ``delta`` months."""
    year, month = (int(part) for part in ym.split("-"))
    index = year * 12 + (month - 1) + delta
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def current_month(today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{today.year:04d}-{today.month:02d}"


class PayrollCalculator:
    """Computes monthly pay per recruiter.

    Example:
        >>> payroll = PayrollCalculator(settings)
        >>> for line in payroll.calculate("2025-09", recruiters, history):
        ...     print(line.recruiter.name, line.total)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        calculator: Optional[CommissionCalculator] = None,
    ):
        self.settings = settings or Settings()
        self.calculator = calculator or CommissionCalculator()

    def wages_month(self, pay_month: str) -> str:
        return shift_month(pay_month, -1)

    def bonus_month(self, pay_month: str) -> str:
        return shift_month(pay_month, -2)

    def calculate(
        self,
        pay_month: str,
        recruiters: Iterable[Recruiter],
        history: Iterable[ShiftRecord],
        status: StatusFilter = StatusFilter.ALL,
    ) -> list[PayrollLine]:
        """Compute payroll lines for every recruiter passing ``status``.

        Args:
            pay_month: Month being paid, ``YYYY-MM``.
            recruiters: Roster.
            history: Shift history (duplicates are collapsed).
            status: Recruiter status filter.

        Returns:
            One line per selected recruiter, in roster order.
        """
        status = StatusFilter(status)
        wages_month = self.wages_month(pay_month)
        bonus_month = self.bonus_month(pay_month)
        records = RecordDeduplicator().deduplicate(history)

        lines = []
        for recruiter in recruiters:
            if not recruiter.matches(status):
                continue
            own = [r for r in records if r.recruiter_id == recruiter.id]
            wage_shifts = tuple(
                self._wage_shift(r, recruiter)
                for r in own if r.date_iso[:7] == wages_month
            )
            bonus_shifts = tuple(
                self._bonus_shift(r, recruiter)
                for r in own if r.date_iso[:7] == bonus_month
            )
            lines.append(
                PayrollLine(
                    recruiter=recruiter,
                    wages=sum((s.wages for s in wage_shifts), ZERO),
                    bonus=sum((s.bonus for s in bonus_shifts), ZERO),
                    wage_shifts=wage_shifts,
                    bonus_shifts=bonus_shifts,
                )
            )
        return lines

    def _with_role(self, record: ShiftRecord, recruiter: Recruiter) -> ShiftRecord:
        # Records saved without a role use the recruiter's current rank.
        if record.role_at_shift is None:
            return replace(record, role_at_shift=recruiter.role)
        return record

    def _wage_shift(self, record: ShiftRecord, recruiter: Recruiter) -> WageShift:
        shift = self.calculator.enrich(self._with_role(record, recruiter), self.settings)
        return WageShift(
            date_iso=record.date_iso,
            location=record.location or "-",
            hours=shift.effective_hours,
            rate=shift.hourly_rate,
            wages=shift.wages,
        )

    def _bonus_shift(self, record: ShiftRecord, recruiter: Recruiter) -> BonusShift:
        shift = self.calculator.enrich(self._with_role(record, recruiter), self.settings)
        return BonusShift(
            date_iso=record.date_iso,
            location=record.location or "-",
            box2=record.box2,
            multiplier=shift.effective_multiplier,
            bonus=shift.bonus,
        )
