"""Domain models and business rules for the recruitment CRM."""

from recruitcrm.domain.models import (
    ConversionTable,
    DiscountState,
    EnrichedShift,
    PipelineBoard,
    PipelineEntity,
    RateBand,
    Recruiter,
    Role,
    Settings,
    ShiftRecord,
    ShiftType,
    Stage,
    StageSnapshot,
    StatusFilter,
    UnitValues,
)
from recruitcrm.domain.policies import (
    CommissionPolicy,
    DefaultCommissionPolicy,
)

__all__ = [
    # Models
    "ConversionTable",
    "DiscountState",
    "EnrichedShift",
    "PipelineBoard",
    "PipelineEntity",
    "RateBand",
    "Recruiter",
    "Role",
    "Settings",
    "ShiftRecord",
    "ShiftType",
    "Stage",
    "StageSnapshot",
    "StatusFilter",
    "UnitValues",
    # Policies
    "CommissionPolicy",
    "DefaultCommissionPolicy",
]
