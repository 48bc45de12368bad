"""Reporting: canonical record sets, period aggregation and roster stats."""

from recruitcrm.reporting.aggregator import (
    AggregationBucket,
    BucketLevel,
    PeriodAggregator,
    Totals,
    day_label,
    month_label,
    summarize,
    week_key,
)
from recruitcrm.reporting.dedup import (
    RecordDeduplicator,
    StatusFilterPass,
    canonicalize,
)
from recruitcrm.reporting.recruiter_stats import (
    RecruiterSummary,
    box_percentages,
    last_scores,
    ranked,
)

__all__ = [
    # Canonicalization
    "RecordDeduplicator",
    "StatusFilterPass",
    "canonicalize",
    # Aggregation
    "AggregationBucket",
    "BucketLevel",
    "PeriodAggregator",
    "Totals",
    "summarize",
    "week_key",
    "month_label",
    "day_label",
    # Roster statistics
    "RecruiterSummary",
    "box_percentages",
    "last_scores",
    "ranked",
]
