from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence

from .models import ZERO


@dataclass(frozen=True)
class Allocation:
    paid: List[Decimal]   # one entry per claim, same order
    remaining: Decimal    # cash left after the last claimant


def allocate_sequential(available: Decimal, claims: Sequence[Optional[Decimal]]) -> Allocation:
    """
    Pay claims strictly in order, each capped at its own claim, until cash runs out.

    A claim of None is uncapped and takes everything still available (residual
    claimant). Negative claims and negative availability are treated as zero.
    """
    remaining = max(available, ZERO)
    paid: List[Decimal] = []
    for claim in claims:
        if claim is None:
            pay = remaining
        else:
            pay = min(max(claim, ZERO), remaining)
        remaining -= pay
        paid.append(pay)
    return Allocation(paid=paid, remaining=remaining)
