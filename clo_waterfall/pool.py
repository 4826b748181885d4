from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .models import ONE, ZERO, ScenarioAssumptions
from .recovery import RecoveryScheduler

_BPS = Decimal(10000)


@dataclass(frozen=True)
class PoolCashflows:
    defaults: Decimal
    losses: Decimal
    recovery_scheduled: Decimal
    prepayments: Decimal
    scheduled_amortization: Decimal
    interest_income: Decimal
    senior_fees: Decimal
    interest_available: Decimal
    ending_balance: Decimal


def amortize_pool(
    pool_balance: Decimal,
    weighted_avg_spread: Decimal,
    assumptions: ScenarioAssumptions,
    period: int,
    lag: int,
    recoveries: RecoveryScheduler,
) -> PoolCashflows:
    """
    One period of collateral behaviour.

    Defaults, prepayments and fees are simple prorations of the annual rates
    (period_days / 360). The recovery on this period's defaults is not cash
    yet: it is scheduled on `recoveries` for `period + lag`.
    """
    frac = assumptions.period_fraction
    cdr_p = assumptions.cdr * frac
    cpr_p = assumptions.cpr * frac

    defaults = pool_balance * cdr_p
    losses = defaults * (ONE - assumptions.recovery_rate)
    recovery_due = defaults * assumptions.recovery_rate
    recoveries.schedule(period + lag, recovery_due)

    surviving = pool_balance - defaults
    prepayments = surviving * cpr_p if surviving > ZERO else ZERO
    scheduled_amort = ZERO  # bullet collateral

    interest_income = pool_balance * (weighted_avg_spread + assumptions.reference_rate) * frac
    senior_fees = pool_balance * assumptions.senior_fees_bps / _BPS * frac

    ending = max(pool_balance - defaults - prepayments - scheduled_amort, ZERO)

    return PoolCashflows(
        defaults=defaults,
        losses=losses,
        recovery_scheduled=recovery_due,
        prepayments=prepayments,
        scheduled_amortization=scheduled_amort,
        interest_income=interest_income,
        senior_fees=senior_fees,
        interest_available=max(interest_income - senior_fees, ZERO),
        ending_balance=ending,
    )
