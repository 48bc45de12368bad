"""Period aggregation of shift records.

Builds the Year -> Month -> Week -> Day tree used by the finance report.
Every bucket keeps the enriched leaf shifts beneath it, and its totals are
summed directly from those leaves with unrounded Decimals, never from
already-rounded child totals.
"""

import logging
from calendar import month_name
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable, Mapping, Optional, Union

from recruitcrm.compensation.calculator import CommissionCalculator
from recruitcrm.domain.models import (
    EnrichedShift,
    Recruiter,
    Settings,
    ShiftRecord,
    StatusFilter,
)
from recruitcrm.domain.numbers import ZERO, format_money, to_optional_date
from recruitcrm.reporting.dedup import canonicalize

logger = logging.getLogger(__name__)


class BucketLevel(Enum):
    """Granularity of an aggregation bucket."""

    YEAR = "year"
    MONTH = "month"
    WEEK = "week"
    DAY = "day"


@dataclass(frozen=True)
class Totals:
    """Summed figures for a set of shifts.

    Attributes:
        shifts: Number of shift records.
        score: Summed scores (missing scores count as 0).
        box2_full: Summed full-price box2 units.
        box2_discounted: Summed discounted box2 units.
        box4_full: Summed full-price box4 units.
        box4_discounted: Summed discounted box4 units.
        wages: Summed wages, unrounded.
        income: Summed income, unrounded.
        bonus: Summed bonus, unrounded.
    """

    shifts: int = 0
    score: int = 0
    box2_full: int = 0
    box2_discounted: int = 0
    box4_full: int = 0
    box4_discounted: int = 0
    wages: Decimal = ZERO
    income: Decimal = ZERO
    bonus: Decimal = ZERO

    @property
    def box2(self) -> int:
        return self.box2_full + self.box2_discounted

    @property
    def box4(self) -> int:
        return self.box4_full + self.box4_discounted

    @property
    def profit(self) -> Decimal:
        return self.income - (self.wages + self.bonus)

    def __add__(self, other: "Totals") -> "Totals":
        if not isinstance(other, Totals):
            return NotImplemented
        return Totals(
            shifts=self.shifts + other.shifts,
            score=self.score + other.score,
            box2_full=self.box2_full + other.box2_full,
            box2_discounted=self.box2_discounted + other.box2_discounted,
            box4_full=self.box4_full + other.box4_full,
            box4_discounted=self.box4_discounted + other.box4_discounted,
            wages=self.wages + other.wages,
            income=self.income + other.income,
            bonus=self.bonus + other.bonus,
        )

    def display(self) -> dict:
        """Presentation values with money fixed to two decimals."""
        return {
            "shifts": self.shifts,
            "score": self.score,
            "box2_full": self.box2_full,
            "box2_discounted": self.box2_discounted,
            "box4_full": self.box4_full,
            "box4_discounted": self.box4_discounted,
            "wages": format_money(self.wages),
            "income": format_money(self.income),
            "bonus": format_money(self.bonus),
            "profit": format_money(self.profit),
        }


def summarize(shifts: Iterable[EnrichedShift]) -> Totals:
    """Sum a collection of enriched shifts."""
    shifts = list(shifts)
    return Totals(
        shifts=len(shifts),
        score=sum(s.record.score or 0 for s in shifts),
        box2_full=sum(s.record.box2_full for s in shifts),
        box2_discounted=sum(s.record.box2_discounted for s in shifts),
        box4_full=sum(s.record.box4_full for s in shifts),
        box4_discounted=sum(s.record.box4_discounted for s in shifts),
        wages=sum((s.wages for s in shifts), ZERO),
        income=sum((s.income for s in shifts), ZERO),
        bonus=sum((s.bonus for s in shifts), ZERO),
    )


@dataclass(frozen=True)
class AggregationBucket:
    """One node of the period tree.

    Attributes:
        key: Period key ("2025", "2025-08", "2025-08-W35", "2025-08-29").
        level: Granularity of this bucket.
        totals: Totals over every leaf shift under this bucket.
        children: Finer buckets in lexical key order (empty for days).
        records: Enriched leaf shifts under this bucket.
    """

    key: str
    level: BucketLevel
    totals: Totals = field(default_factory=Totals)
    children: tuple["AggregationBucket", ...] = ()
    records: tuple[EnrichedShift, ...] = ()

    @property
    def label(self) -> str:
        if self.level is BucketLevel.MONTH:
            return month_label(self.key)
        if self.level is BucketLevel.WEEK:
            return self.key.rsplit("-", 1)[-1]
        if self.level is BucketLevel.DAY:
            return day_label(self.key)
        return self.key

    def child(self, key: str) -> Optional["AggregationBucket"]:
        for bucket in self.children:
            if bucket.key == key:
                return bucket
        return None

    def walk(self):
        """Yield this bucket and all descendants, depth first."""
        yield self
        for bucket in self.children:
            yield from bucket.walk()


def month_key(date_iso: str) -> str:
    return date_iso[:7]


def week_key(date_iso: str) -> str:
    """``{YYYY-MM}-W{nn}`` using the ISO-8601 week number of the date."""
    parsed = to_optional_date(date_iso)
    if parsed is None:
        logger.warning("Unparseable shift date %r grouped into week W00", date_iso)
        week = 0
    else:
        week = parsed.isocalendar()[1]
    return f"{month_key(date_iso)}-W{week:02d}"


def month_label(ym: str) -> str:
    """``"2025-08" -> "August 2025"``."""
    try:
        year, month = (int(part) for part in ym.split("-"))
        return f"{month_name[month]} {year}"
    except (ValueError, IndexError):
        return ym


def day_label(date_iso: str) -> str:
    """``"2025-08-29" -> "29/08/25"``."""
    if len(date_iso) < 10:
        return date_iso
    return f"{date_iso[8:10]}/{date_iso[5:7]}/{date_iso[2:4]}"


class PeriodAggregator:
    """Groups shift records into nested period buckets with totals.

    Example:
        >>> aggregator = PeriodAggregator(settings)
        >>> year = aggregator.aggregate(history, 2025, StatusFilter.ACTIVE, roster)
        >>> for month in year.children:
        ...     print(month.label, month.totals.display()["profit"])
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        calculator: Optional[CommissionCalculator] = None,
    ):
        self.settings = settings or Settings()
        self.calculator = calculator or CommissionCalculator()

    def aggregate(
        self,
        records: Iterable[Union[ShiftRecord, EnrichedShift]],
        year: int,
        status: StatusFilter = StatusFilter.ALL,
        roster: Union[Mapping[str, Recruiter], Iterable[Recruiter], None] = None,
    ) -> AggregationBucket:
        """Build the period tree for one year.

        Args:
            records: Raw or enriched shift records, possibly duplicated.
            year: Calendar year to report.
            status: Recruiter status filter.
            roster: Recruiters used to resolve status.

        Returns:
            The year bucket, with month/week/day children.
        """
        raw = [r.record if isinstance(r, EnrichedShift) else r for r in records]
        canonical = canonicalize(raw, roster, status)

        start, end = f"{year}-01-01", f"{year}-12-31"
        in_year = [r for r in canonical if start <= r.date_iso <= end]
        logger.debug(
            "Aggregating %d of %d records for %s (%s)",
            len(in_year), len(raw), year, StatusFilter(status).value,
        )

        shifts = [self.calculator.enrich(r, self.settings) for r in in_year]
        return self._bucket(str(year), BucketLevel.YEAR, shifts)

    def _bucket(
        self,
        key: str,
        level: BucketLevel,
        shifts: list[EnrichedShift],
    ) -> AggregationBucket:
        children: tuple[AggregationBucket, ...] = ()
        child_level = _CHILD_LEVEL.get(level)
        if child_level is not None:
            grouper = _GROUPERS[child_level]
            groups: dict[str, list[EnrichedShift]] = {}
            for shift in shifts:
                groups.setdefault(grouper(shift.record.date_iso), []).append(shift)
            children = tuple(
                self._bucket(child_key, child_level, groups[child_key])
                for child_key in sorted(groups)
            )

        return AggregationBucket(
            key=key,
            level=level,
            totals=summarize(shifts),
            children=children,
            records=tuple(shifts),
        )


_CHILD_LEVEL = {
    BucketLevel.YEAR: BucketLevel.MONTH,
    BucketLevel.MONTH: BucketLevel.WEEK,
    BucketLevel.WEEK: BucketLevel.DAY,
}

_GROUPERS = {
    BucketLevel.MONTH: month_key,
    BucketLevel.WEEK: week_key,
    BucketLevel.DAY: lambda date_iso: date_iso,
}
