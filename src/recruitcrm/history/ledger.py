"""Shift history: the single writer of shift records.

A ShiftHistory is an immutable ordered collection of ShiftRecords keyed by
``(recruiter_id, date_iso, row_key)``. Committing a day validates the rows
and returns a new history; the previous one is never modified.
"""

import logging
from dataclasses import replace
from typing import Iterable, Iterator, Optional

from recruitcrm.compensation.rates import RateResolver
from recruitcrm.domain.models import Settings, ShiftRecord
from recruitcrm.validation.validator import ShiftRejectedError, ShiftValidator

logger = logging.getLogger(__name__)


class ShiftHistory:
    """Ordered, copy-on-write collection of shift records.

    Args:
        records: Initial records, in stored order.
        snapshot_rates: When True, commit_day() stores the hourly rate in
            effect on the shift date on each committed record.
        validator: Validator applied by commit_day().

    Example:
        >>> history = ShiftHistory()
        >>> history = history.commit_day("2025-08-29", rows, settings)
        >>> len(history)
        3
    """

    def __init__(
        self,
        records: Iterable[ShiftRecord] = (),
        snapshot_rates: bool = False,
        validator: Optional[ShiftValidator] = None,
        rate_resolver: Optional[RateResolver] = None,
    ):
        self._records = tuple(records)
        self.snapshot_rates = snapshot_rates
        self.validator = validator or ShiftValidator()
        self.rate_resolver = rate_resolver or RateResolver()

    @property
    def records(self) -> tuple[ShiftRecord, ...]:
        return self._records

    def __iter__(self) -> Iterator[ShiftRecord]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def for_date(self, date_iso: str) -> list[ShiftRecord]:
        return [r for r in self._records if r.date_iso == date_iso]

    def commit_day(
        self,
        date_iso: str,
        rows: Iterable[ShiftRecord],
        settings: Optional[Settings] = None,
    ) -> "ShiftHistory":
        """Validate and upsert the rows of one day.

        Rows without a recruiter are skipped.

        Args:
            date_iso: The day being saved.
            rows: Shift rows for that day.
            settings: Used for rate snapshots when enabled.

        Returns:
            A new ShiftHistory containing the committed rows.

        Raises:
            ShiftRejectedError: If any row fails validation. The history is
                left unchanged.
        """
        rows = list(rows)
        result = self.validator.validate_day(date_iso, rows)
        if not result.is_valid:
            raise ShiftRejectedError(result)
        for warning in result.warnings:
            logger.warning("%s: %s", date_iso, warning)

        accepted = [r for r in rows if r.recruiter_id]
        if self.snapshot_rates and settings is not None:
            accepted = [
                replace(
                    r,
                    hourly_rate=self.rate_resolver.resolve(r.date_iso, settings.rate_bands),
                )
                if r.hourly_rate is None else r
                for r in accepted
            ]

        logger.info("Committing %d shift(s) for %s", len(accepted), date_iso)
        return self.upsert(accepted)

    def upsert(self, rows: Iterable[ShiftRecord]) -> "ShiftHistory":
        """Insert or replace records by key without validation.

        A replaced record keeps its position; new keys are appended.
        """
        records = list(self._records)
        index = {record.key: i for i, record in enumerate(records)}
        for row in rows:
            position = index.get(row.key)
            if position is None:
                index[row.key] = len(records)
                records.append(row)
            else:
                records[position] = row
        return self._with(records)

    def reset(self) -> "ShiftHistory":
        """Return an empty history with the same configuration."""
        logger.info("Resetting shift history (%d records dropped)", len(self._records))
        return self._with(())

    def _with(self, records: Iterable[ShiftRecord]) -> "ShiftHistory":
        return ShiftHistory(
            records,
            snapshot_rates=self.snapshot_rates,
            validator=self.validator,
            rate_resolver=self.rate_resolver,
        )

    @classmethod
    def from_list(cls, data: Optional[Iterable[dict]], **kwargs) -> "ShiftHistory":
        """Build from stored dicts; non-dict entries are skipped."""
        records = []
        for item in data or ():
            if not isinstance(item, dict):
                logger.warning("Skipping malformed history entry: %r", item)
                continue
            records.append(ShiftRecord.from_dict(item))
        return cls(records, **kwargs)

    def to_list(self) -> list[dict]:
        return [record.to_dict() for record in self._records]
