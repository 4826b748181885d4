from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Tuple

from .config import EngineConfig
from .models import ZERO, PeriodResult, TranchePayment, WaterfallOutput
from .pool import amortize_pool
from .recovery import RecoveryScheduler, lag_periods
from .validation import validate_engine_config
from .waterfall import run_interest_waterfall, run_principal_waterfall

logger = logging.getLogger(__name__)


@dataclass
class RunState:
    """Everything a single run mutates. Owned by exactly one run."""

    pool_balance: Decimal
    tranche_balances: List[Decimal]
    recoveries: RecoveryScheduler = field(default_factory=RecoveryScheduler)
    total_interest: List[Decimal] = field(default_factory=list)
    total_principal: List[Decimal] = field(default_factory=list)

    @classmethod
    def initial(cls, cfg: EngineConfig) -> "RunState":
        n = len(cfg.structure.tranches)
        return cls(
            pool_balance=cfg.structure.pool_balance,
            tranche_balances=[t.notional for t in cfg.structure.tranches],
            total_interest=[ZERO] * n,
            total_principal=[ZERO] * n,
        )

    @property
    def exhausted(self) -> bool:
        return self.pool_balance <= ZERO


def run_period(cfg: EngineConfig, state: RunState, period: int, lag: int) -> Tuple[PeriodResult, Decimal]:
    """
    Advance `state` by one period.

    Returns (PeriodResult, equity distribution for the period). Once the pool
    is exhausted no new collateral cash arrives, but recoveries scheduled
    earlier still come in and go down the principal waterfall.
    """
    s = cfg.structure
    a = cfg.assumptions
    frac = a.period_fraction
    opening_balances = list(state.tranche_balances)

    was_active = not state.exhausted
    if not was_active:
        defaults = losses = prepayments = interest_income = senior_fees = ZERO
        interest_available = ZERO
        sched_amort = ZERO
        ending_pool = ZERO
    else:
        cf = amortize_pool(state.pool_balance, s.weighted_avg_spread, a, period, lag, state.recoveries)
        defaults, losses, prepayments = cf.defaults, cf.losses, cf.prepayments
        interest_income, senior_fees = cf.interest_income, cf.senior_fees
        interest_available = cf.interest_available
        sched_amort = cf.scheduled_amortization
        ending_pool = cf.ending_balance

    recoveries = state.recoveries.collect(period)
    principal_available = prepayments + sched_amort + recoveries

    interest = run_interest_waterfall(interest_available, s.tranches, opening_balances, a.reference_rate, frac)
    principal = run_principal_waterfall(principal_available, s.tranches, opening_balances)

    equity_distribution = ZERO
    payments: List[TranchePayment] = []
    for i, t in enumerate(s.tranches):
        int_paid = interest.interest_paid[i]
        prn_paid = principal.principal_paid[i]
        state.total_interest[i] += int_paid
        state.total_principal[i] += prn_paid
        if t.is_equity:
            equity_distribution += int_paid + prn_paid
        payments.append(TranchePayment(t.name, int_paid, prn_paid, principal.closing_balances[i]))

    state.tranche_balances = principal.closing_balances
    state.pool_balance = ending_pool

    if was_active and ending_pool <= ZERO:
        logger.info("Pool exhausted in period %d", period)

    result = PeriodResult(
        period=period,
        pool_balance=ending_pool,
        defaults=defaults,
        losses=losses,
        prepayments=prepayments,
        recoveries=recoveries,
        interest_income=interest_income,
        senior_fees=senior_fees,
        interest_available=interest_available,
        principal_available=principal_available,
        undistributed_principal=principal.unallocated,
        tranche_payments=tuple(payments),
    )
    return result, equity_distribution


def calculate_waterfall(cfg: EngineConfig) -> WaterfallOutput:
    """
    Full multi-period CLO waterfall simulation.

    Validates every input first, then runs num_periods periods:
      pool amortization -> recovery release -> interest waterfall -> principal waterfall
    """
    validate_engine_config(cfg)

    a = cfg.assumptions
    lag = lag_periods(a.recovery_lag_months, a.period_days)
    state = RunState.initial(cfg)

    logger.info(
        "Running waterfall: %d tranches, pool %s, %d periods, recovery lag %d periods",
        len(cfg.structure.tranches),
        cfg.structure.pool_balance,
        a.num_periods,
        lag,
    )

    periods: List[PeriodResult] = []
    equity_cash_flows: List[Decimal] = [-cfg.structure.equity_notional()]

    for period in range(1, a.num_periods + 1):
        result, equity_distribution = run_period(cfg, state, period, lag)
        periods.append(result)
        equity_cash_flows.append(equity_distribution)
        logger.debug(
            "Period %d: pool %s, interest avail %s, principal avail %s",
            period,
            result.pool_balance,
            result.interest_available,
            result.principal_available,
        )

    names = cfg.structure.tranche_names()
    pending = state.recoveries.pending_total()
    if pending > ZERO:
        logger.debug("Recoveries still pending at horizon: %s", pending)

    return WaterfallOutput(
        periods=periods,
        total_interest_by_tranche=list(zip(names, state.total_interest)),
        total_principal_by_tranche=list(zip(names, state.total_principal)),
        equity_cash_flows=equity_cash_flows,
        pending_recoveries=pending,
    )
