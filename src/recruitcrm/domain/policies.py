"""Policy definitions for compensation rules.

This module contains the configurable business rules used to turn shift
counters into pay: the tiered bonus schedule and the role-dependent
defaults for hours and bonus multipliers. Policies are kept separate from
the calculator so they can be tested and swapped independently.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal

from recruitcrm.domain.models import Role


class CommissionPolicy(ABC):
    """Abstract base class for commission and pay-default policies."""

    @abstractmethod
    def tier_bonus(self, box2_units: int) -> Decimal:
        """Get the base bonus for the number of box2 units sold.

        Args:
            box2_units: Full-price plus discounted box2 units in the shift.

        Returns:
            Bonus amount before the role multiplier is applied.
        """
        pass

    @abstractmethod
    def default_hours(self, role: Role) -> Decimal:
        """Hours assumed for a shift that has no recorded hours."""
        pass

    @abstractmethod
    def default_multiplier(self, role: Role) -> Decimal:
        """Bonus multiplier assumed when a shift has no override."""
        pass


@dataclass
class DefaultCommissionPolicy(CommissionPolicy):
    """Default commission policy.

    Tier bonus by box2 units sold:
    - 0-10 units: fixed table (0, 0, 25, 40, 70, 85, 120, 135, 175, 190, 235)
    - above 10 units: the 10-unit amount plus 15 per extra unit

    Default hours: Pool Captain 7, Team Captain and Sales Manager 8, others 6.
    Default multiplier: Pool Captain 1.25, Team Captain 1.5,
    Sales Manager 2.0, others 1.0.
    """

    tier_table: tuple[int, ...] = (0, 0, 25, 40, 70, 85, 120, 135, 175, 190, 235)
    per_unit_above_table: int = 15

    fallback_hours: Decimal = Decimal("6")
    role_hours: dict[Role, Decimal] = field(
        default_factory=lambda: {
            Role.POOL_CAPTAIN: Decimal("7"),
            Role.TEAM_CAPTAIN: Decimal("8"),
            Role.SALES_MANAGER: Decimal("8"),
        }
    )

    fallback_multiplier: Decimal = Decimal("1.0")
    role_multipliers: dict[Role, Decimal] = field(
        default_factory=lambda: {
            Role.POOL_CAPTAIN: Decimal("1.25"),
            Role.TEAM_CAPTAIN: Decimal("1.5"),
            Role.SALES_MANAGER: Decimal("2.0"),
        }
    )

    def tier_bonus(self, box2_units: int) -> Decimal:
        if box2_units <= 0:
            return Decimal(self.tier_table[0])
        last = len(self.tier_table) - 1
        if box2_units <= last:
            return Decimal(self.tier_table[box2_units])
        extra = box2_units - last
        return Decimal(self.tier_table[last] + extra * self.per_unit_above_table)

    def default_hours(self, role: Role) -> Decimal:
        return self.role_hours.get(role, self.fallback_hours)

    def default_multiplier(self, role: Role) -> Decimal:
        return self.role_multipliers.get(role, self.fallback_multiplier)
