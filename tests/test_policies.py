"""Tests for commission policies."""

from decimal import Decimal

import pytest

from recruitcrm.domain.models import Role
from recruitcrm.domain.policies import DefaultCommissionPolicy


class TestTierBonus:
    """Tests for the tiered box2 bonus schedule."""

    @pytest.fixture
    def policy(self):
        return DefaultCommissionPolicy()

    def test_fixed_table(self, policy):
        """0 to 10 units follow the fixed table exactly."""
        expected = [0, 0, 25, 40, 70, 85, 120, 135, 175, 190, 235]
        assert [policy.tier_bonus(n) for n in range(11)] == [Decimal(v) for v in expected]

    def test_above_table_adds_15_per_unit(self, policy):
        """Each unit above 10 adds 15 to the 10-unit amount."""
        assert policy.tier_bonus(11) == Decimal("250")
        assert policy.tier_bonus(12) == Decimal("265")
        assert policy.tier_bonus(20) == Decimal("385")

    def test_negative_units(self, policy):
        """Negative counts earn nothing."""
        assert policy.tier_bonus(-3) == Decimal("0")

    def test_custom_slope(self):
        """The post-table slope is configurable."""
        policy = DefaultCommissionPolicy(per_unit_above_table=20)
        assert policy.tier_bonus(12) == Decimal("275")


class TestRoleDefaults:
    """Tests for role-dependent hours and multipliers."""

    @pytest.fixture
    def policy(self):
        return DefaultCommissionPolicy()

    def test_default_hours(self, policy):
        assert policy.default_hours(Role.POOL_CAPTAIN) == Decimal("7")
        assert policy.default_hours(Role.TEAM_CAPTAIN) == Decimal("8")
        assert policy.default_hours(Role.SALES_MANAGER) == Decimal("8")
        assert policy.default_hours(Role.ROOKIE) == Decimal("6")
        assert policy.default_hours(Role.PROMOTER) == Decimal("6")
        assert policy.default_hours(Role.BRANCH_MANAGER) == Decimal("6")

    def test_default_multipliers(self, policy):
        assert policy.default_multiplier(Role.POOL_CAPTAIN) == Decimal("1.25")
        assert policy.default_multiplier(Role.TEAM_CAPTAIN) == Decimal("1.5")
        assert policy.default_multiplier(Role.SALES_MANAGER) == Decimal("2.0")
        assert policy.default_multiplier(Role.ROOKIE) == Decimal("1.0")

    def test_override_role_hours(self):
        policy = DefaultCommissionPolicy(role_hours={Role.ROOKIE: Decimal("4")})
        assert policy.default_hours(Role.ROOKIE) == Decimal("4")
        assert policy.default_hours(Role.TEAM_CAPTAIN) == Decimal("6")
