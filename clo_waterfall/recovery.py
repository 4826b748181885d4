from __future__ import annotations

from decimal import Decimal
from typing import List, Tuple

from .models import ZERO


def lag_periods(recovery_lag_months: int, period_days: int) -> int:
    """Convert a recovery lag in months to whole periods (30-day months, rounded up, at least 1)."""
    # ceil(months * 30 / days), kept in integers
    lag = -(-recovery_lag_months * 30 // period_days)
    return max(lag, 1)


class RecoveryScheduler:
    """
    Holds recoveries from past defaults until their due period.

    Due periods only grow as the run advances, so a flat list with
    filter-and-drain on collect is enough at CLO horizons.
    """

    def __init__(self) -> None:
        self._pending: List[Tuple[int, Decimal]] = []

    def schedule(self, due_period: int, amount: Decimal) -> None:
        self._pending.append((due_period, amount))

    def collect(self, current_period: int) -> Decimal:
        due = sum((amt for p, amt in self._pending if p == current_period), ZERO)
        self._pending = [(p, amt) for p, amt in self._pending if p != current_period]
        return due

    def pending_total(self) -> Decimal:
        return sum((amt for _, amt in self._pending), ZERO)

    def __len__(self) -> int:
        return len(self._pending)
