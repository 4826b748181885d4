from __future__ import annotations

import logging
from decimal import Decimal
from typing import List, Sequence, Tuple

from .config import CapitalStructure, ScenarioConfig
from .models import (
    ONE,
    ZERO,
    ScenarioOutput,
    ScenarioResult,
    StressScenario,
    Tranche,
    TrancheScenarioLoss,
)
from .validation import validate_scenario_config

logger = logging.getLogger(__name__)


def _safe_div(n: Decimal, d: Decimal) -> Decimal:
    return n / d if d != ZERO else ZERO


def tranche_attachment_points(
    structure: CapitalStructure,
) -> Tuple[List[Tuple[str, Decimal]], List[Tuple[str, Decimal]]]:
    """
    Attachment / detachment as a fraction of total notional, built bottom-up.

    Equity attaches at 0 and the most senior tranche detaches at 1. Returned in
    list (seniority) order.
    """
    total = structure.total_notional()
    attach = [ZERO] * len(structure.tranches)
    detach = [ZERO] * len(structure.tranches)

    cumulative = ZERO
    for i in reversed(range(len(structure.tranches))):
        attach[i] = cumulative
        cumulative += _safe_div(structure.tranches[i].notional, total)
        detach[i] = cumulative

    names = structure.tranche_names()
    return list(zip(names, attach)), list(zip(names, detach))


def cumulative_pool_loss(
    pool_balance: Decimal,
    scenario: StressScenario,
    num_periods: int,
    period_days: int,
) -> Tuple[Decimal, Decimal]:
    """
    Simplified collateral run: survival compounds each period, losses accumulate.

    Returns (cumulative loss, ending pool balance).
    """
    frac = Decimal(period_days) / Decimal(360)
    cdr_p = scenario.cdr * frac
    cpr_p = scenario.cpr * frac

    pool = pool_balance
    cumulative = ZERO
    for _ in range(num_periods):
        if pool <= ZERO:
            break
        defaults = pool * cdr_p
        cumulative += defaults * (ONE - scenario.recovery)
        surviving = pool - defaults
        prepayments = surviving * cpr_p if surviving > ZERO else ZERO
        pool = max(pool - defaults - prepayments, ZERO)
    return cumulative, pool


def allocate_losses_bottom_up(tranches: Sequence[Tranche], loss: Decimal) -> List[TrancheScenarioLoss]:
    """Equity absorbs first, then each more senior tranche up to its notional."""
    out: List[TrancheScenarioLoss] = [TrancheScenarioLoss(t.name, ZERO, ZERO) for t in tranches]
    remaining = max(loss, ZERO)
    for i in reversed(range(len(tranches))):
        t = tranches[i]
        hit = min(t.notional, remaining)
        remaining -= hit
        out[i] = TrancheScenarioLoss(t.name, hit, _safe_div(hit, t.notional))
    return out


def calculate_clo_scenarios(cfg: ScenarioConfig) -> ScenarioOutput:
    """
    Probability-weighted tranche loss across named stress scenarios.

    Probabilities are used as given. They are not required to sum to 1 and
    are not normalised; `probability_total` on the output shows the sum.
    """
    validate_scenario_config(cfg)

    structure = cfg.structure
    attachment, detachment = tranche_attachment_points(structure)
    expected = [ZERO] * len(structure.tranches)
    results: List[ScenarioResult] = []

    for sc in cfg.scenarios:
        loss, ending_pool = cumulative_pool_loss(structure.pool_balance, sc, cfg.num_periods, cfg.period_days)
        losses = allocate_losses_bottom_up(structure.tranches, loss)
        for i, tl in enumerate(losses):
            expected[i] += tl.loss_amount * sc.probability
        results.append(
            ScenarioResult(
                scenario_name=sc.name,
                probability=sc.probability,
                cumulative_loss=loss,
                ending_pool_balance=ending_pool,
                tranche_losses=tuple(losses),
            )
        )
        logger.debug("Scenario %s: cumulative loss %s", sc.name, loss)

    prob_total = sum((sc.probability for sc in cfg.scenarios), ZERO)
    if prob_total != ONE:
        logger.warning("Scenario probabilities sum to %s, not 1; expected loss is not normalised", prob_total)

    return ScenarioOutput(
        scenario_results=results,
        expected_loss_by_tranche=list(zip(structure.tranche_names(), expected)),
        attachment_points=attachment,
        detachment_points=detachment,
        probability_total=prob_total,
    )
