from __future__ import annotations

from decimal import Decimal
from typing import List

from .config import EngineConfig, ScenarioConfig
from .errors import ValidationError
from .models import ONE, ZERO, Tranche


def _check_unit_interval(field: str, value: Decimal, label: str) -> None:
    if value < ZERO or value > ONE:
        raise ValidationError(field, f"{label} must be in [0, 1].")


def _check_tranches(tranches: List[Tranche]) -> None:
    for t in tranches:
        if t.notional < ZERO:
            raise ValidationError(f"tranche.{t.name}.notional", "Tranche notional cannot be negative.")


def validate_engine_config(cfg: EngineConfig) -> None:
    s = cfg.structure
    a = cfg.assumptions

    if not s.tranches:
        raise ValidationError("tranches", "At least one tranche is required.")
    if s.pool_balance <= ZERO:
        raise ValidationError("pool_balance", "Pool balance must be positive.")
    _check_unit_interval("cdr", a.cdr, "CDR")
    _check_unit_interval("cpr", a.cpr, "CPR")
    _check_unit_interval("recovery_rate", a.recovery_rate, "Recovery rate")
    if a.num_periods <= 0:
        raise ValidationError("num_periods", "Must have at least one projection period.")
    if a.period_days <= 0:
        raise ValidationError("period_days", "Period days must be positive.")
    if a.senior_fees_bps < ZERO:
        raise ValidationError("senior_fees_bps", "Senior fees cannot be negative.")
    if a.recovery_lag_months < 0:
        raise ValidationError("recovery_lag_months", "Recovery lag cannot be negative.")
    _check_tranches(s.tranches)


def validate_scenario_config(cfg: ScenarioConfig) -> None:
    s = cfg.structure

    if not s.tranches:
        raise ValidationError("tranches", "At least one tranche is required.")
    if not cfg.scenarios:
        raise ValidationError("scenarios", "At least one scenario is required.")
    if s.pool_balance <= ZERO:
        raise ValidationError("pool_balance", "Pool balance must be positive.")
    if cfg.num_periods <= 0:
        raise ValidationError("num_periods", "Must have at least one projection period.")
    if cfg.period_days <= 0:
        raise ValidationError("period_days", "Period days must be positive.")
    for sc in cfg.scenarios:
        _check_unit_interval(f"scenario.{sc.name}.cdr", sc.cdr, "CDR")
        _check_unit_interval(f"scenario.{sc.name}.cpr", sc.cpr, "CPR")
        _check_unit_interval(f"scenario.{sc.name}.recovery", sc.recovery, "Recovery")
        _check_unit_interval(f"scenario.{sc.name}.probability", sc.probability, "Probability")
    _check_tranches(s.tranches)
