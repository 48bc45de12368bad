"""Shift history storage."""

from recruitcrm.history.ledger import ShiftHistory

__all__ = ["ShiftHistory"]
