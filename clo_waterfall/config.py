from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import List

from .models import ScenarioAssumptions, StressScenario, Tranche, ZERO, to_decimal


@dataclass(frozen=True)
class CapitalStructure:
    tranches: List[Tranche]       # index 0 = most senior; list position is seniority
    pool_balance: Decimal         # opening collateral balance
    weighted_avg_spread: Decimal  # collateral WAS over the reference rate

    def __post_init__(self):
        object.__setattr__(self, "pool_balance", to_decimal(self.pool_balance))
        object.__setattr__(self, "weighted_avg_spread", to_decimal(self.weighted_avg_spread))

    def rated_tranches(self) -> List[Tranche]:
        return [t for t in self.tranches if not t.is_equity]

    def equity_tranches(self) -> List[Tranche]:
        return [t for t in self.tranches if t.is_equity]

    def tranche_names(self) -> List[str]:
        return [t.name for t in self.tranches]

    def total_notional(self) -> Decimal:
        return sum((t.notional for t in self.tranches), ZERO)

    def equity_notional(self) -> Decimal:
        return sum((t.notional for t in self.equity_tranches()), ZERO)


@dataclass(frozen=True)
class EngineConfig:
    structure: CapitalStructure
    assumptions: ScenarioAssumptions


@dataclass(frozen=True)
class ScenarioConfig:
    structure: CapitalStructure
    scenarios: List[StressScenario]
    num_periods: int = 20
    period_days: int = 90  # quarterly


def sample_structure() -> CapitalStructure:
    """Reference 900M broadly syndicated CLO: four rated notes plus equity."""
    return CapitalStructure(
        tranches=[
            Tranche("AAA", "AAA", Decimal("600000000"), Decimal("0.0130")),
            Tranche("AA", "AA", Decimal("100000000"), Decimal("0.0180")),
            Tranche("A", "A", Decimal("80000000"), Decimal("0.0250")),
            Tranche("BBB", "BBB", Decimal("50000000"), Decimal("0.0400")),
            Tranche("Equity", "NR", Decimal("70000000"), ZERO, is_equity=True),
        ],
        pool_balance=Decimal("900000000"),
        weighted_avg_spread=Decimal("0.0350"),
    )


def sample_assumptions() -> ScenarioAssumptions:
    return ScenarioAssumptions(
        cdr=Decimal("0.02"),
        cpr=Decimal("0.10"),
        recovery_rate=Decimal("0.40"),
        recovery_lag_months=6,
        reference_rate=Decimal("0.05"),
        senior_fees_bps=Decimal("50"),
        period_days=90,
        num_periods=20,
    )


def sample_scenarios() -> List[StressScenario]:
    return [
        StressScenario("Base", Decimal("0.02"), Decimal("0.15"), Decimal("0.40"), Decimal("0.50")),
        StressScenario("Stress", Decimal("0.05"), Decimal("0.10"), Decimal("0.30"), Decimal("0.30")),
        StressScenario("Severe", Decimal("0.10"), Decimal("0.05"), Decimal("0.20"), Decimal("0.20")),
    ]
