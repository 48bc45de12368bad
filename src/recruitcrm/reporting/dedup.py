"""Canonicalization and status filtering of shift records.

Both passes run before any summation so that every aggregation level
sums the same canonical record set.
"""

import logging
from typing import Iterable, Mapping, Optional, Union

from recruitcrm.domain.models import Recruiter, ShiftRecord, StatusFilter

logger = logging.getLogger(__name__)


class RecordDeduplicator:
    """Keeps exactly one record per (recruiter, date, row key).

    A later record replaces an earlier one with the same key (overwrite,
    not merge). The surviving record takes the position of the first
    occurrence so that output order is stable across repeated runs.
    """

    def deduplicate(self, records: Iterable[ShiftRecord]) -> list[ShiftRecord]:
        canonical: dict[tuple[str, str, int], ShiftRecord] = {}
        total = 0
        for record in records:
            total += 1
            canonical[record.key] = record

        if total != len(canonical):
            logger.debug("Dropped %d duplicate shift records", total - len(canonical))
        return list(canonical.values())


class StatusFilterPass:
    """Filters shift records by their recruiter's active/inactive status.

    Records whose recruiter is missing or not on the roster have unknown
    status and survive only the ``all`` filter.
    """

    def apply(
        self,
        records: Iterable[ShiftRecord],
        roster: Union[Mapping[str, Recruiter], Iterable[Recruiter], None],
        status: StatusFilter = StatusFilter.ALL,
    ) -> list[ShiftRecord]:
        status = StatusFilter(status)
        if status is StatusFilter.ALL:
            return list(records)

        roster_map = _roster_map(roster)
        kept = []
        for record in records:
            recruiter = roster_map.get(record.recruiter_id) if record.recruiter_id else None
            if recruiter is not None and recruiter.matches(status):
                kept.append(record)
        return kept


def _roster_map(
    roster: Union[Mapping[str, Recruiter], Iterable[Recruiter], None],
) -> Mapping[str, Recruiter]:
    if roster is None:
        return {}
    if isinstance(roster, Mapping):
        return roster
    return {r.id: r for r in roster}


def canonicalize(
    records: Iterable[ShiftRecord],
    roster: Union[Mapping[str, Recruiter], Iterable[Recruiter], None] = None,
    status: StatusFilter = StatusFilter.ALL,
    deduplicator: Optional[RecordDeduplicator] = None,
) -> list[ShiftRecord]:
    """Deduplicate, then status-filter, a raw record collection."""
    deduplicator = deduplicator or RecordDeduplicator()
    return StatusFilterPass().apply(deduplicator.deduplicate(records), roster, status)
