"""Per-recruiter performance statistics for the roster view."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from recruitcrm.domain.models import Recruiter, ShiftRecord


@dataclass(frozen=True)
class RecruiterSummary:
    """Roster row with recent performance.

    Attributes:
        recruiter: The recruiter.
        last_scores: Up to five most recent scores, newest first.
        box2_percent: Box2 units as a percentage of score, last 8 weeks.
        box4_percent: Box4 units as a percentage of score, last 8 weeks.
    """

    recruiter: Recruiter
    last_scores: tuple[int, ...]
    box2_percent: float
    box4_percent: float

    @property
    def rank(self) -> str:
        return self.recruiter.role.acronym


def last_scores(
    history: Iterable[ShiftRecord],
    recruiter_id: str,
    limit: int = 5,
) -> list[int]:
    """Most recent recorded scores for a recruiter, newest first."""
    scored = [
        r for r in history
        if r.recruiter_id == recruiter_id and r.score is not None
    ]
    scored.sort(key=lambda r: r.date_iso, reverse=True)
    return [r.score for r in scored[:limit]]


def box_percentages(
    history: Iterable[ShiftRecord],
    recruiter_id: str,
    today: Optional[date] = None,
    window_days: int = 56,
) -> tuple[float, float]:
    """Box2 and box4 conversion percentages over a trailing window.

    Returns (0.0, 0.0) when the recruiter has no score in the window.
    """
    today = today or date.today()
    cutoff = today - timedelta(days=window_days)

    box2 = box4 = score = 0
    for record in history:
        if record.recruiter_id != recruiter_id:
            continue
        shift_date = record.shift_date
        if shift_date is None or shift_date < cutoff:
            continue
        box2 += record.box2
        box4 += record.box4
        score += record.score or 0

    if score <= 0:
        return 0.0, 0.0
    return box2 / score * 100.0, box4 / score * 100.0


def ranked(
    recruiters: Iterable[Recruiter],
    history: Iterable[ShiftRecord],
    include_inactive: bool = False,
    today: Optional[date] = None,
) -> list[RecruiterSummary]:
    """Roster summaries sorted by rank (highest first), then name."""
    history = list(history)
    rows = []
    for recruiter in recruiters:
        if recruiter.is_inactive and not include_inactive:
            continue
        box2_pct, box4_pct = box_percentages(history, recruiter.id, today)
        rows.append(
            RecruiterSummary(
                recruiter=recruiter,
                last_scores=tuple(last_scores(history, recruiter.id)),
                box2_percent=box2_pct,
                box4_percent=box4_pct,
            )
        )
    rows.sort(key=lambda s: (-s.recruiter.role.rank_order, s.recruiter.name.lower()))
    return rows
