"""Hourly rate lookup over dated rate bands."""

import logging
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Union

from recruitcrm.domain.models import DEFAULT_RATE_BANDS, RateBand
from recruitcrm.domain.numbers import to_optional_date

logger = logging.getLogger(__name__)


def coerce_bands(raw: Optional[Iterable]) -> tuple[RateBand, ...]:
    """Normalize a stored band list, dropping malformed entries.

    Accepts RateBand objects or mappings with ``effective_from`` and
    ``hourly_rate``. Falls back to the default band when nothing usable
    remains.
    """
    if raw is None or isinstance(raw, (str, bytes, Mapping)):
        return DEFAULT_RATE_BANDS

    bands = []
    try:
        items = list(raw)
    except TypeError:
        return DEFAULT_RATE_BANDS

    for item in items:
        if isinstance(item, RateBand):
            bands.append(item)
            continue
        if not isinstance(item, Mapping):
            logger.warning("Skipping malformed rate band: %r", item)
            continue
        try:
            bands.append(RateBand.from_dict(item))
        except ValueError:
            logger.warning("Skipping rate band with invalid date: %r", item)

    return tuple(bands) if bands else DEFAULT_RATE_BANDS


class RateResolver:
    """Maps a calendar date to the hourly rate in effect on that date.

    The applicable band is the one with the latest ``effective_from`` not
    after the date. Dates before every band get the earliest band's rate.

    Example:
        >>> resolver = RateResolver()
        >>> resolver.resolve("2025-03-01", bands)
        Decimal('15')
    """

    def resolve(
        self,
        on: Union[date, str, None],
        bands: Optional[Iterable] = None,
    ) -> Decimal:
        """Resolve the hourly rate for a date.

        Args:
            on: Query date, as a date or ISO string. Unparseable values
                resolve against today.
            bands: Rate bands in any order. Missing or malformed lists
                fall back to the default band.

        Returns:
            The applicable hourly rate.
        """
        ordered = sorted(coerce_bands(bands), key=lambda b: b.effective_from)

        target = to_optional_date(on)
        if target is None:
            target = date.today()

        rate = ordered[0].hourly_rate
        for band in ordered:
            if band.effective_from <= target:
                rate = band.hourly_rate
        return rate


_default_resolver = RateResolver()


def rate_for_date(on: Union[date, str, None], bands: Optional[Iterable] = None) -> Decimal:
    """Module-level shortcut for :meth:`RateResolver.resolve`."""
    return _default_resolver.resolve(on, bands)
