from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Tuple


ZERO = Decimal("0")
ONE = Decimal("1")


def to_decimal(value) -> Decimal:
    """Coerce ints/strings/floats to Decimal without going through binary float repr."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def _coerce_decimals(obj, names) -> None:
    # frozen dataclasses: bypass __setattr__
    for name in names:
        object.__setattr__(obj, name, to_decimal(getattr(obj, name)))


@dataclass(frozen=True)
class Tranche:
    name: str                 # "AAA", "AA", ..., "Equity"
    rating: str               # rating label, "NR" for equity
    notional: Decimal         # initial balance
    spread: Decimal           # annual spread over reference rate, e.g. 0.013
    is_equity: bool = False   # True for the residual / equity tranche

    def __post_init__(self):
        _coerce_decimals(self, ("notional", "spread"))


@dataclass(frozen=True)
class ScenarioAssumptions:
    cdr: Decimal                  # annual conditional default rate
    cpr: Decimal                  # annual conditional prepayment rate
    recovery_rate: Decimal
    recovery_lag_months: int
    reference_rate: Decimal       # e.g. 3M SOFR
    senior_fees_bps: Decimal
    period_days: int = 90
    num_periods: int = 20

    def __post_init__(self):
        _coerce_decimals(self, ("cdr", "cpr", "recovery_rate", "reference_rate", "senior_fees_bps"))

    @property
    def period_fraction(self) -> Decimal:
        return Decimal(self.period_days) / Decimal(360)


@dataclass(frozen=True)
class TranchePayment:
    name: str
    interest_paid: Decimal
    principal_paid: Decimal
    ending_balance: Decimal


@dataclass(frozen=True)
class PeriodResult:
    period: int
    pool_balance: Decimal             # ending pool balance
    defaults: Decimal
    losses: Decimal
    prepayments: Decimal
    recoveries: Decimal               # recoveries released this period
    interest_income: Decimal
    senior_fees: Decimal
    interest_available: Decimal       # after senior fees, floored at zero
    principal_available: Decimal
    undistributed_principal: Decimal  # left over once every balance is repaid
    tranche_payments: Tuple[TranchePayment, ...]

    def payment(self, name: str) -> TranchePayment:
        for p in self.tranche_payments:
            if p.name == name:
                return p
        raise KeyError(name)


@dataclass
class WaterfallOutput:
    periods: List[PeriodResult]
    total_interest_by_tranche: List[Tuple[str, Decimal]]
    total_principal_by_tranche: List[Tuple[str, Decimal]]
    equity_cash_flows: List[Decimal]    # index 0 = -initial equity investment
    pending_recoveries: Decimal = ZERO  # scheduled but not yet due at the horizon


@dataclass(frozen=True)
class StressScenario:
    name: str
    cdr: Decimal
    cpr: Decimal
    recovery: Decimal
    probability: Decimal

    def __post_init__(self):
        _coerce_decimals(self, ("cdr", "cpr", "recovery", "probability"))


@dataclass(frozen=True)
class TrancheScenarioLoss:
    name: str
    loss_amount: Decimal
    loss_pct: Decimal


@dataclass(frozen=True)
class ScenarioResult:
    scenario_name: str
    probability: Decimal
    cumulative_loss: Decimal
    ending_pool_balance: Decimal
    tranche_losses: Tuple[TrancheScenarioLoss, ...]


@dataclass
class ScenarioOutput:
    scenario_results: List[ScenarioResult]
    expected_loss_by_tranche: List[Tuple[str, Decimal]]
    attachment_points: List[Tuple[str, Decimal]]
    detachment_points: List[Tuple[str, Decimal]]
    probability_total: Decimal = field(default=ZERO)
