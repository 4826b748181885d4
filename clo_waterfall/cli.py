from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from decimal import Decimal, InvalidOperation

from .config import EngineConfig, ScenarioConfig, sample_assumptions, sample_scenarios, sample_structure
from .errors import ValidationError
from .runner import run_clo_engine


def _decimal_arg(text: str) -> Decimal:
    try:
        value = Decimal(text)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"invalid decimal value: {text!r}")
    if not value.is_finite():
        raise argparse.ArgumentTypeError(f"invalid decimal value: {text!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    base = sample_assumptions()
    p = argparse.ArgumentParser(description="CLO Cash-Flow Waterfall + Scenario Loss Engine")
    p.add_argument("--cdr", type=_decimal_arg, default=base.cdr, help="Annual conditional default rate")
    p.add_argument("--cpr", type=_decimal_arg, default=base.cpr, help="Annual conditional prepayment rate")
    p.add_argument("--recovery", type=_decimal_arg, default=base.recovery_rate, help="Recovery rate")
    p.add_argument("--recovery-lag-months", type=int, default=base.recovery_lag_months)
    p.add_argument("--reference-rate", type=_decimal_arg, default=base.reference_rate)
    p.add_argument("--senior-fees-bps", type=_decimal_arg, default=base.senior_fees_bps)
    p.add_argument("--period-days", type=int, default=base.period_days)
    p.add_argument("--periods", type=int, default=base.num_periods, help="Number of projection periods")
    p.add_argument("--no-scenarios", action="store_true", help="Skip the stress scenario run")
    p.add_argument("--output", help="Write the report pack to this .xlsx path")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    structure = sample_structure()
    assumptions = replace(
        sample_assumptions(),
        cdr=args.cdr,
        cpr=args.cpr,
        recovery_rate=args.recovery,
        recovery_lag_months=args.recovery_lag_months,
        reference_rate=args.reference_rate,
        senior_fees_bps=args.senior_fees_bps,
        period_days=args.period_days,
        num_periods=args.periods,
    )
    cfg = EngineConfig(structure=structure, assumptions=assumptions)

    scenario_cfg = None
    if not args.no_scenarios:
        scenario_cfg = ScenarioConfig(
            structure=structure,
            scenarios=sample_scenarios(),
            num_periods=assumptions.num_periods,
            period_days=assumptions.period_days,
        )

    try:
        dfs = run_clo_engine(cfg, scenario_cfg, output_xlsx=args.output)
    except ValidationError as e:
        raise SystemExit(f"Invalid input: {e}")

    print(dfs["Tranche Totals"].to_string(index=False))
    if "Expected Loss" in dfs:
        print()
        print(dfs["Expected Loss"].to_string(index=False))
    if args.output:
        print(f"Wrote report pack: {args.output}")


if __name__ == "__main__":
    main()
