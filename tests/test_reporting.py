from decimal import Decimal

from openpyxl import load_workbook

from clo_waterfall.cli import main
from clo_waterfall.config import (
    EngineConfig,
    ScenarioConfig,
    sample_assumptions,
    sample_scenarios,
    sample_structure,
)
from clo_waterfall.excel_writer import REPORT_SHEETS
from clo_waterfall.runner import run_clo_engine


def _configs():
    structure = sample_structure()
    cfg = EngineConfig(structure=structure, assumptions=sample_assumptions())
    scen = ScenarioConfig(structure=structure, scenarios=sample_scenarios())
    return cfg, scen


def test_report_tables():
    cfg, scen = _configs()
    dfs = run_clo_engine(cfg, scen)

    assert len(dfs["Period Summary"]) == 20
    assert len(dfs["Tranche Cashflows"]) == 20 * 5
    assert list(dfs["Tranche Totals"]["Tranche"]) == ["AAA", "AA", "A", "BBB", "Equity"]
    assert len(dfs["Equity Cash Flows"]) == 21
    assert dfs["Equity Cash Flows"]["Equity Cash Flow"].iloc[0] == Decimal("-70000000")
    assert len(dfs["Scenario Losses"]) == 3 * 5

    el = dfs["Expected Loss"].set_index("Tranche")
    assert el.loc["Equity", "Attachment"] == 0
    assert el.loc["AAA", "Detachment"] == 1


def test_report_without_scenarios():
    cfg, _ = _configs()
    dfs = run_clo_engine(cfg)
    assert "Scenario Losses" not in dfs
    assert "Expected Loss" not in dfs


def test_writes_report_pack(tmp_path):
    cfg, scen = _configs()
    out = tmp_path / "clo_pack.xlsx"
    run_clo_engine(cfg, scen, output_xlsx=str(out))

    wb = load_workbook(out)
    assert wb.sheetnames == REPORT_SHEETS
    ws = wb["Period Summary"]
    assert ws.cell(row=1, column=1).value == "Period"
    assert ws.cell(row=2, column=1).value == 1
    assert ws.max_row == 21


def test_cli_prints_summary(capsys):
    main(["--periods", "4", "--no-scenarios"])
    printed = capsys.readouterr().out
    assert "AAA" in printed
    assert "Equity" in printed


def test_cli_rejects_bad_input():
    try:
        main(["--cdr", "2"])
    except SystemExit as e:
        assert "cdr" in str(e.code)
    else:
        raise AssertionError("expected SystemExit")


def test_cli_rejects_non_numeric_rate(capsys):
    for bad in ("abc", "nan"):
        try:
            main(["--cdr", bad, "--no-scenarios"])
        except SystemExit as e:
            assert e.code == 2
        else:
            raise AssertionError("expected SystemExit")
        assert "invalid decimal value" in capsys.readouterr().err


def test_report_pack_formats_and_column_widths(tmp_path):
    cfg, scen = _configs()
    out = tmp_path / "clo_pack.xlsx"
    run_clo_engine(cfg, scen, output_xlsx=str(out))

    wb = load_workbook(out)
    ws = wb["Expected Loss"]
    assert [c.value for c in ws[1]] == ["Tranche", "Attachment", "Detachment", "Expected Loss"]
    assert ws["A1"].font.bold
    assert ws["A2"].number_format == "General"
    assert ws["B2"].number_format == "0.00%"
    assert ws["D2"].number_format == "#,##0.00"
    assert ws.column_dimensions["D"].width >= len("Expected Loss") + 2

    ws = wb["Period Summary"]
    assert ws["A2"].number_format == "General"
    assert ws["B2"].number_format == "#,##0.00"
    assert ws.column_dimensions["K"].width >= len("Undistributed Principal") + 2
