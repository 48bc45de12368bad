"""Compensation engine: rates, per-shift pay and monthly payroll."""

from recruitcrm.compensation.calculator import CommissionCalculator
from recruitcrm.compensation.payroll import (
    BonusShift,
    PayrollCalculator,
    PayrollLine,
    WageShift,
    current_month,
    shift_month,
)
from recruitcrm.compensation.rates import RateResolver, coerce_bands, rate_for_date

__all__ = [
    # Rates
    "RateResolver",
    "coerce_bands",
    "rate_for_date",
    # Per-shift pay
    "CommissionCalculator",
    # Payroll
    "PayrollCalculator",
    "PayrollLine",
    "WageShift",
    "BonusShift",
    "current_month",
    "shift_month",
]
