"""Domain models for the recruitment CRM.

This module contains the core data structures shared by the compensation,
reporting and pipeline code: recruiters, shift records, settings, and the
candidate pipeline board. Values are normalized on construction so that
downstream code never has to re-parse stored input.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from recruitcrm.domain.numbers import (
    ZERO,
    to_count,
    to_decimal,
    to_flag,
    to_optional_count,
    to_optional_date,
    to_optional_decimal,
)


def _mapping(value) -> Mapping:
    return value if isinstance(value, Mapping) else {}


class Role(Enum):
    """Recruiter ranks, lowest to highest."""

    ROOKIE = "Rookie"
    PROMOTER = "Promoter"
    POOL_CAPTAIN = "Pool Captain"
    TEAM_CAPTAIN = "Team Captain"
    SALES_MANAGER = "Sales Manager"
    BRANCH_MANAGER = "Branch Manager"

    @classmethod
    def parse(cls, value) -> "Role":
        """Parse a stored role name; unknown or missing roles are Rookie."""
        if isinstance(value, Role):
            return value
        for role in cls:
            if value == role.value or value == role.name:
                return role
        return cls.ROOKIE

    @property
    def acronym(self) -> str:
        return _ROLE_ACRONYMS[self]

    @property
    def rank_order(self) -> int:
        """Numeric rank, 1 (Rookie) to 6 (Branch Manager)."""
        return _RANK_ORDER[self]


_ROLE_ACRONYMS = {
    Role.ROOKIE: "RK",
    Role.PROMOTER: "PR",
    Role.POOL_CAPTAIN: "PC",
    Role.TEAM_CAPTAIN: "TC",
    Role.SALES_MANAGER: "SM",
    Role.BRANCH_MANAGER: "BM",
}

_RANK_ORDER = {
    Role.ROOKIE: 1,
    Role.PROMOTER: 2,
    Role.POOL_CAPTAIN: 3,
    Role.TEAM_CAPTAIN: 4,
    Role.SALES_MANAGER: 5,
    Role.BRANCH_MANAGER: 6,
}


class ShiftType(Enum):
    """Kind of shift a team works."""

    D2D = "D2D"  # Door-to-door
    EVENT = "EVENT"

    @classmethod
    def parse(cls, value) -> "ShiftType":
        """Anything other than EVENT is treated as door-to-door."""
        if isinstance(value, ShiftType):
            return value
        return cls.EVENT if value == cls.EVENT.value else cls.D2D


class DiscountState(Enum):
    """Whether a sale was made at full price or discounted."""

    FULL = "full"
    DISCOUNTED = "discounted"


class StatusFilter(Enum):
    """Recruiter status selector used by reports."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ALL = "all"


class Stage(Enum):
    """Ordered pipeline stages a candidate passes through before hire."""

    INTAKE = "intake"
    SCREENING = "screening"
    ONBOARDING = "onboarding"

    @property
    def order(self) -> int:
        return list(Stage).index(self)

    @property
    def label(self) -> str:
        return _STAGE_LABELS[self]

    @property
    def previous(self) -> Optional["Stage"]:
        stages = list(Stage)
        return stages[self.order - 1] if self.order > 0 else None

    @property
    def next(self) -> Optional["Stage"]:
        stages = list(Stage)
        return stages[self.order + 1] if self.order + 1 < len(stages) else None


_STAGE_LABELS = {
    Stage.INTAKE: "Leads",
    Stage.SCREENING: "Interview",
    Stage.ONBOARDING: "Formation",
}


@dataclass(frozen=True)
class RateBand:
    """An hourly rate in effect from a given date onwards.

    Attributes:
        effective_from: First date the rate applies.
        hourly_rate: Hourly wage; locale strings ("15,5") are accepted.
    """

    effective_from: date
    hourly_rate: Decimal

    def __post_init__(self) -> None:
        parsed = to_optional_date(self.effective_from)
        if parsed is None:
            raise ValueError(f"Invalid rate band date: {self.effective_from!r}")
        object.__setattr__(self, "effective_from", parsed)
        object.__setattr__(self, "hourly_rate", to_decimal(self.hourly_rate))

    @classmethod
    def from_dict(cls, data: Mapping) -> "RateBand":
        return cls(
            effective_from=data.get("effective_from"),
            hourly_rate=data.get("hourly_rate"),
        )

    def to_dict(self) -> dict:
        return {
            "effective_from": self.effective_from.isoformat(),
            "hourly_rate": str(self.hourly_rate),
        }


DEFAULT_RATE_BANDS = (RateBand(date(2025, 1, 1), Decimal("15")),)


@dataclass(frozen=True)
class UnitValues:
    """Per-unit monetary value of the box2 and box4 counters."""

    box2: Decimal = ZERO
    box4: Decimal = ZERO

    def __post_init__(self) -> None:
        object.__setattr__(self, "box2", to_decimal(self.box2))
        object.__setattr__(self, "box4", to_decimal(self.box4))


@dataclass(frozen=True)
class ConversionTable:
    """Per-unit income by shift type and discount state.

    Every (shift type, discount state) combination resolves; missing
    entries are worth 0.
    """

    values: Mapping[tuple[ShiftType, DiscountState], UnitValues] = field(
        default_factory=dict
    )

    def lookup(self, shift_type: ShiftType, state: DiscountState) -> UnitValues:
        return self.values.get((shift_type, state), UnitValues())

    @classmethod
    def default(cls) -> "ConversionTable":
        return cls(
            values={
                (ShiftType.D2D, DiscountState.FULL): UnitValues(50, 90),
                (ShiftType.D2D, DiscountState.DISCOUNTED): UnitValues(35, 70),
                (ShiftType.EVENT, DiscountState.FULL): UnitValues(40, 80),
                (ShiftType.EVENT, DiscountState.DISCOUNTED): UnitValues(30, 60),
            }
        )

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> "ConversionTable":
        """Build from ``{"D2D": {"full": {"box2": .., "box4": ..}, ...}}``.

        An absent table yields the defaults; a partial one yields zeros
        for the missing entries.
        """
        if not data or not isinstance(data, Mapping):
            return cls.default()
        values = {}
        for shift_type in ShiftType:
            per_type = _mapping(data.get(shift_type.value))
            for state in DiscountState:
                units = _mapping(per_type.get(state.value))
                values[(shift_type, state)] = UnitValues(
                    units.get("box2"), units.get("box4")
                )
        return cls(values=values)

    def to_dict(self) -> dict:
        out: dict = {}
        for shift_type in ShiftType:
            out[shift_type.value] = {}
            for state in DiscountState:
                units = self.lookup(shift_type, state)
                out[shift_type.value][state.value] = {
                    "box2": str(units.box2),
                    "box4": str(units.box4),
                }
        return out


@dataclass(frozen=True)
class Settings:
    """Read-only settings snapshot consumed by the compensation engine.

    Attributes:
        projects: Project names shown when planning teams.
        rate_bands: Hourly rate bands, in any order.
        conversion_table: Per-unit income values.
    """

    projects: tuple[str, ...] = ("Hello Fresh",)
    rate_bands: tuple[RateBand, ...] = DEFAULT_RATE_BANDS
    conversion_table: ConversionTable = field(default_factory=ConversionTable.default)

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> "Settings":
        # Imported here to avoid a cycle; rates depends on this module.
        from recruitcrm.compensation.rates import coerce_bands

        data = _mapping(data)
        projects = tuple(data.get("projects") or ("Hello Fresh",))
        return cls(
            projects=projects,
            rate_bands=coerce_bands(data.get("rate_bands")),
            conversion_table=ConversionTable.from_dict(data.get("conversion_table")),
        )

    def to_dict(self) -> dict:
        return {
            "projects": list(self.projects),
            "rate_bands": [band.to_dict() for band in self.rate_bands],
            "conversion_table": self.conversion_table.to_dict(),
        }


@dataclass(frozen=True)
class ShiftRecord:
    """Performance record for one recruiter on one shift.

    Optional fields stay None when not recorded; role defaults fill them
    at calculation time. Counters are always ints.

    Attributes:
        recruiter_id: ID of the recruiter who worked the shift.
        date_iso: Calendar date, zero-padded ISO (YYYY-MM-DD).
        role_at_shift: Recruiter's role on that day, if recorded.
        shift_type: Door-to-door or event.
        hours: Hours worked, if overridden.
        commission_multiplier: Bonus multiplier, if overridden.
        score: Upper bound on the summed box counters.
        box2_full: Box 2 units sold at full price.
        box2_discounted: Box 2 units sold discounted.
        box4_full: Box 4 units sold at full price.
        box4_discounted: Box 4 units sold discounted.
        row_key: Disambiguates rows sharing recruiter and date.
        recruiter_name: Display name captured at save time.
        location: Zone(s) worked.
        project: Project name.
        hourly_rate: Rate snapshotted at save time, if any.
    """

    recruiter_id: str
    date_iso: str
    role_at_shift: Optional[Role] = None
    shift_type: ShiftType = ShiftType.D2D
    hours: Optional[Decimal] = None
    commission_multiplier: Optional[Decimal] = None
    score: Optional[int] = None
    box2_full: int = 0
    box2_discounted: int = 0
    box4_full: int = 0
    box4_discounted: int = 0
    row_key: Optional[int] = None
    recruiter_name: str = ""
    location: str = ""
    project: str = ""
    hourly_rate: Optional[Decimal] = None

    def __post_init__(self) -> None:
        set_ = object.__setattr__
        set_(self, "recruiter_id", str(self.recruiter_id or ""))
        set_(self, "date_iso", str(self.date_iso or ""))
        if self.role_at_shift not in (None, ""):
            set_(self, "role_at_shift", Role.parse(self.role_at_shift))
        else:
            set_(self, "role_at_shift", None)
        set_(self, "shift_type", ShiftType.parse(self.shift_type))
        set_(self, "hours", to_optional_decimal(self.hours))
        set_(self, "commission_multiplier", to_optional_decimal(self.commission_multiplier))
        set_(self, "score", to_optional_count(self.score))
        for name in ("box2_full", "box2_discounted", "box4_full", "box4_discounted"):
            set_(self, name, to_count(getattr(self, name)))
        set_(self, "row_key", to_optional_count(self.row_key))
        set_(self, "hourly_rate", to_optional_decimal(self.hourly_rate))

    @property
    def role(self) -> Role:
        """Role used for pay defaults; unrecorded roles count as Rookie."""
        return self.role_at_shift or Role.ROOKIE

    @property
    def box2(self) -> int:
        return self.box2_full + self.box2_discounted

    @property
    def box4(self) -> int:
        return self.box4_full + self.box4_discounted

    @property
    def counter_total(self) -> int:
        return self.box2 + self.box4

    @property
    def key(self) -> tuple[str, str, int]:
        """Identity used for deduplication and upserts."""
        return (
            self.recruiter_id,
            self.date_iso,
            -1 if self.row_key is None else self.row_key,
        )

    @property
    def shift_date(self) -> Optional[date]:
        return to_optional_date(self.date_iso)

    def counter(self, box: str, state: DiscountState) -> int:
        """Get a counter by box name ("box2"/"box4") and discount state."""
        suffix = "full" if state is DiscountState.FULL else "discounted"
        return getattr(self, f"{box}_{suffix}")

    @classmethod
    def from_dict(cls, data: Mapping) -> "ShiftRecord":
        return cls(
            recruiter_id=data.get("recruiter_id"),
            date_iso=data.get("date_iso"),
            role_at_shift=data.get("role_at_shift"),
            shift_type=data.get("shift_type"),
            hours=data.get("hours"),
            commission_multiplier=data.get("commission_multiplier"),
            score=data.get("score"),
            box2_full=data.get("box2_full"),
            box2_discounted=data.get("box2_discounted"),
            box4_full=data.get("box4_full"),
            box4_discounted=data.get("box4_discounted"),
            row_key=data.get("row_key"),
            recruiter_name=data.get("recruiter_name") or "",
            location=data.get("location") or "",
            project=data.get("project") or "",
            hourly_rate=data.get("hourly_rate"),
        )

    def to_dict(self) -> dict:
        def opt(value):
            return None if value is None else str(value)

        return {
            "recruiter_id": self.recruiter_id,
            "date_iso": self.date_iso,
            "role_at_shift": self.role_at_shift.value if self.role_at_shift else None,
            "shift_type": self.shift_type.value,
            "hours": opt(self.hours),
            "commission_multiplier": opt(self.commission_multiplier),
            "score": self.score,
            "box2_full": self.box2_full,
            "box2_discounted": self.box2_discounted,
            "box4_full": self.box4_full,
            "box4_discounted": self.box4_discounted,
            "row_key": self.row_key,
            "recruiter_name": self.recruiter_name,
            "location": self.location,
            "project": self.project,
            "hourly_rate": opt(self.hourly_rate),
        }


@dataclass(frozen=True)
class EnrichedShift:
    """A shift record plus its derived pay figures.

    Derived values are unrounded; presentation rounds to cents.
    """

    record: ShiftRecord
    income: Decimal
    wages: Decimal
    bonus: Decimal
    effective_hours: Decimal
    hourly_rate: Decimal
    effective_multiplier: Decimal
    tier_bonus: Decimal

    @property
    def profit(self) -> Decimal:
        return self.income - (self.wages + self.bonus)


@dataclass(frozen=True)
class Recruiter:
    """A hired recruiter on the roster.

    Attributes:
        id: Unique identifier.
        name: Display name.
        role: Current rank.
        is_inactive: Inactive recruiters are excluded by the "active" filter.
        crew_code: Five-digit crew code assigned at hire.
    """

    id: str
    name: str
    role: Role = Role.ROOKIE
    is_inactive: bool = False
    crew_code: str = ""
    phone: str = ""
    email: str = ""
    source: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "role", Role.parse(self.role))
        object.__setattr__(self, "is_inactive", to_flag(self.is_inactive))

    def matches(self, status: StatusFilter) -> bool:
        """Check whether this recruiter passes a status filter."""
        if status is StatusFilter.ALL:
            return True
        if status is StatusFilter.ACTIVE:
            return not self.is_inactive
        return self.is_inactive

    @classmethod
    def from_dict(cls, data: Mapping) -> "Recruiter":
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
            role=data.get("role"),
            is_inactive=data.get("is_inactive", False),
            crew_code=data.get("crew_code") or "",
            phone=data.get("phone") or "",
            email=data.get("email") or "",
            source=data.get("source") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
            "is_inactive": self.is_inactive,
            "crew_code": self.crew_code,
            "phone": self.phone,
            "email": self.email,
            "source": self.source,
        }


@dataclass(frozen=True)
class PipelineEntity:
    """A candidate moving through the hiring pipeline.

    ``date``/``time``/``comment`` describe the candidate's appointment in
    their current stage; the stage machine snapshots them on every move.
    """

    id: str
    name: str
    phone: str = ""
    email: str = ""
    source: str = ""
    calls: int = 0
    date: str = ""
    time: str = ""
    comment: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "calls", to_count(self.calls))

    @classmethod
    def from_dict(cls, data: Mapping) -> "PipelineEntity":
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
            phone=data.get("phone") or "",
            email=data.get("email") or "",
            source=data.get("source") or "",
            calls=data.get("calls", 0),
            date=data.get("date") or "",
            time=data.get("time") or "",
            comment=data.get("comment") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "source": self.source,
            "calls": self.calls,
            "date": self.date,
            "time": self.time,
            "comment": self.comment,
        }


@dataclass(frozen=True)
class StageSnapshot:
    """Last known appointment fields for an entity in one stage."""

    date: str = ""
    time: str = ""
    comment: str = ""


@dataclass(frozen=True)
class PipelineBoard:
    """Immutable snapshot of all pipeline stage collections.

    Attributes:
        stages: Entities in each stage, in display order.
        stage_memory: Last snapshot per (entity ID, stage). Entries outlive
            the entity's stay in that stage so they can be restored.
    """

    stages: Mapping[Stage, tuple[PipelineEntity, ...]] = field(
        default_factory=lambda: {stage: () for stage in Stage}
    )
    stage_memory: Mapping[tuple[str, Stage], StageSnapshot] = field(
        default_factory=dict
    )

    def entities(self, stage: Stage) -> tuple[PipelineEntity, ...]:
        return tuple(self.stages.get(stage, ()))

    def find(self, entity_id: str, stage: Stage) -> Optional[PipelineEntity]:
        for entity in self.entities(stage):
            if entity.id == entity_id:
                return entity
        return None

    def locate(self, entity_id: str) -> Optional[Stage]:
        """Get the stage currently holding an entity, if any."""
        for stage in Stage:
            if self.find(entity_id, stage) is not None:
                return stage
        return None

    def memory(self, entity_id: str, stage: Stage) -> Optional[StageSnapshot]:
        return self.stage_memory.get((entity_id, stage))

    @classmethod
    def from_dict(cls, data: Optional[Mapping]) -> "PipelineBoard":
        data = _mapping(data)
        stages = {}
        for stage in Stage:
            items = data.get(stage.value)
            if not isinstance(items, (list, tuple)):
                items = ()
            stages[stage] = tuple(
                PipelineEntity.from_dict(item) for item in items
                if isinstance(item, Mapping)
            )
        memory = {}
        for entity_id, per_stage in _mapping(data.get("stage_memory")).items():
            for stage_name, snap in _mapping(per_stage).items():
                if not isinstance(snap, Mapping):
                    continue
                try:
                    stage = Stage(stage_name)
                except ValueError:
                    continue
                memory[(entity_id, stage)] = StageSnapshot(
                    date=snap.get("date") or "",
                    time=snap.get("time") or "",
                    comment=snap.get("comment") or "",
                )
        return cls(stages=stages, stage_memory=memory)

    def to_dict(self) -> dict:
        out: dict = {
            stage.value: [entity.to_dict() for entity in self.entities(stage)]
            for stage in Stage
        }
        memory: dict = {}
        for (entity_id, stage), snap in self.stage_memory.items():
            memory.setdefault(entity_id, {})[stage.value] = {
                "date": snap.date,
                "time": snap.time,
                "comment": snap.comment,
            }
        out["stage_memory"] = memory
        return out
