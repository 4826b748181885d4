from __future__ import annotations

import logging
from typing import Dict, Optional

import pandas as pd

from .config import EngineConfig, ScenarioConfig
from .engine import calculate_waterfall
from .excel_writer import ensure_template, write_report_pack
from .reporting import (
    build_equity_cash_flows,
    build_expected_loss_table,
    build_period_table,
    build_scenario_losses,
    build_tranche_cashflows,
    build_tranche_totals,
)
from .scenarios import calculate_clo_scenarios
from .validation import validate_engine_config, validate_scenario_config

logger = logging.getLogger(__name__)


def run_clo_engine(
    cfg: EngineConfig,
    scenario_cfg: Optional[ScenarioConfig] = None,
    output_xlsx: Optional[str] = None,
    template_xlsx: Optional[str] = None,
) -> Dict[str, pd.DataFrame]:
    """
    End-to-end engine run:
      - Validates the deal (and scenarios, if given) before running anything
      - Runs the period-by-period waterfall
      - Runs the stress scenarios
      - Builds the report tables
      - Writes them to output_xlsx when a path is given
      - Returns the DataFrames for display
    """
    validate_engine_config(cfg)
    if scenario_cfg is not None:
        validate_scenario_config(scenario_cfg)

    out = calculate_waterfall(cfg)

    dfs = {
        "Period Summary": build_period_table(out),
        "Tranche Cashflows": build_tranche_cashflows(out),
        "Tranche Totals": build_tranche_totals(cfg.structure, out),
        "Equity Cash Flows": build_equity_cash_flows(out),
    }

    if scenario_cfg is not None:
        res = calculate_clo_scenarios(scenario_cfg)
        dfs["Scenario Losses"] = build_scenario_losses(res)
        dfs["Expected Loss"] = build_expected_loss_table(res)

    if output_xlsx:
        template = template_xlsx or output_xlsx
        if template_xlsx is None:
            ensure_template(template)
        write_report_pack(template, output_xlsx, dfs)
        logger.info("Wrote report pack: %s", output_xlsx)

    return dfs
