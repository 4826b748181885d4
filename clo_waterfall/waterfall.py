from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from .allocation import allocate_sequential
from .models import ZERO, Tranche


@dataclass(frozen=True)
class InterestLeg:
    interest_due: List[Decimal]   # per tranche, list order; zero for equity
    interest_paid: List[Decimal]
    residual_to_equity: Decimal
    unallocated: Decimal          # only non-zero when there is no equity tranche


@dataclass(frozen=True)
class PrincipalLeg:
    principal_paid: List[Decimal]
    closing_balances: List[Decimal]
    unallocated: Decimal          # principal left once every balance is repaid


def _payment_order(tranches: Sequence[Tranche]) -> List[int]:
    # rated notes by list position, then equity regardless of where it sits
    rated = [i for i, t in enumerate(tranches) if not t.is_equity]
    equity = [i for i, t in enumerate(tranches) if t.is_equity]
    return rated + equity


def run_interest_waterfall(
    available: Decimal,
    tranches: Sequence[Tranche],
    balances: Sequence[Decimal],
    reference_rate: Decimal,
    period_fraction: Decimal,
) -> InterestLeg:
    """
    Interest priority of payments:
      1) Each rated tranche in seniority order: coupon on its current balance
         at (spread + reference rate), capped at what is left
      2) Residual interest to the equity tranche (first one, if several)
    """
    order = _payment_order(tranches)
    due: List[Decimal] = [ZERO] * len(tranches)
    claims: List[Optional[Decimal]] = []
    residual_taken = False
    for i in order:
        t = tranches[i]
        if t.is_equity:
            claims.append(ZERO if residual_taken else None)
            residual_taken = True
        else:
            due[i] = balances[i] * (t.spread + reference_rate) * period_fraction
            claims.append(due[i])

    alloc = allocate_sequential(available, claims)

    paid: List[Decimal] = [ZERO] * len(tranches)
    residual = ZERO
    for i, amt in zip(order, alloc.paid):
        paid[i] = amt
        if tranches[i].is_equity:
            residual += amt

    return InterestLeg(
        interest_due=due,
        interest_paid=paid,
        residual_to_equity=residual,
        unallocated=alloc.remaining,
    )


def run_principal_waterfall(
    available: Decimal,
    tranches: Sequence[Tranche],
    balances: Sequence[Decimal],
) -> PrincipalLeg:
    """
    Principal priority of payments:
      1) Rated tranches sequentially (most senior first) down to zero
      2) Return of equity notional from whatever is left
    Anything beyond that stays unallocated for the caller to report.
    """
    order = _payment_order(tranches)
    # pass 1 and pass 2 collapse into one ordered allocation: equity sits after every rated note
    alloc = allocate_sequential(available, [balances[i] for i in order])

    paid: List[Decimal] = [ZERO] * len(tranches)
    closing: List[Decimal] = list(balances)
    for i, amt in zip(order, alloc.paid):
        paid[i] = amt
        closing[i] = balances[i] - amt

    return PrincipalLeg(principal_paid=paid, closing_balances=closing, unallocated=alloc.remaining)
