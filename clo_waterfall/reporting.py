from __future__ import annotations

from typing import Dict

import pandas as pd

from .config import CapitalStructure
from .models import ScenarioOutput, WaterfallOutput


def build_period_table(out: WaterfallOutput) -> pd.DataFrame:
    rows = []
    for p in out.periods:
        rows.append({
            "Period": p.period,
            "Pool Balance": p.pool_balance,
            "Defaults": p.defaults,
            "Losses": p.losses,
            "Prepayments": p.prepayments,
            "Recoveries": p.recoveries,
            "Interest Income": p.interest_income,
            "Senior Fees": p.senior_fees,
            "Interest Available": p.interest_available,
            "Principal Available": p.principal_available,
            "Undistributed Principal": p.undistributed_principal,
        })
    return pd.DataFrame(rows)


def build_tranche_cashflows(out: WaterfallOutput) -> pd.DataFrame:
    # long format: one row per (period, tranche)
    rows = []
    for p in out.periods:
        for tp in p.tranche_payments:
            rows.append({
                "Period": p.period,
                "Tranche": tp.name,
                "Interest Paid": tp.interest_paid,
                "Principal Paid": tp.principal_paid,
                "Ending Balance": tp.ending_balance,
            })
    return pd.DataFrame(rows)


def build_tranche_totals(structure: CapitalStructure, out: WaterfallOutput) -> pd.DataFrame:
    interest: Dict[str, object] = dict(out.total_interest_by_tranche)
    principal: Dict[str, object] = dict(out.total_principal_by_tranche)
    last = out.periods[-1] if out.periods else None
    rows = []
    for t in structure.tranches:
        closing = last.payment(t.name).ending_balance if last else t.notional
        rows.append({
            "Tranche": t.name,
            "Rating": t.rating,
            "Opening Balance": t.notional,
            "Total Interest Paid": interest.get(t.name),
            "Total Principal Paid": principal.get(t.name),
            "Closing Balance": closing,
        })
    return pd.DataFrame(rows)


def build_equity_cash_flows(out: WaterfallOutput) -> pd.DataFrame:
    return pd.DataFrame({
        "Period": list(range(len(out.equity_cash_flows))),
        "Equity Cash Flow": out.equity_cash_flows,
    })


def build_scenario_losses(res: ScenarioOutput) -> pd.DataFrame:
    rows = []
    for sr in res.scenario_results:
        for tl in sr.tranche_losses:
            rows.append({
                "Scenario": sr.scenario_name,
                "Probability": sr.probability,
                "Tranche": tl.name,
                "Loss Amount": tl.loss_amount,
                "Loss %": tl.loss_pct,
            })
    return pd.DataFrame(rows)


def build_expected_loss_table(res: ScenarioOutput) -> pd.DataFrame:
    attach = dict(res.attachment_points)
    detach = dict(res.detachment_points)
    rows = []
    for name, el in res.expected_loss_by_tranche:
        rows.append({
            "Tranche": name,
            "Attachment": attach[name],
            "Detachment": detach[name],
            "Expected Loss": el,
        })
    return pd.DataFrame(rows)
