from decimal import Decimal

from clo_waterfall.config import EngineConfig, sample_assumptions, sample_structure
from clo_waterfall.engine import calculate_waterfall


def _reference_run():
    cfg = EngineConfig(structure=sample_structure(), assumptions=sample_assumptions())
    return cfg, calculate_waterfall(cfg)


def test_reference_deal_shape():
    cfg, out = _reference_run()

    assert len(out.periods) == 20
    assert len(out.equity_cash_flows) == 21
    assert out.equity_cash_flows[0] == Decimal("-70000000")
    assert [n for n, _ in out.total_interest_by_tranche] == ["AAA", "AA", "A", "BBB", "Equity"]
    assert [n for n, _ in out.total_principal_by_tranche] == ["AAA", "AA", "A", "BBB", "Equity"]


def test_first_period_cashflows():
    _, out = _reference_run()
    p1 = out.periods[0]

    # 900m * 2% * 90/360
    assert p1.defaults == Decimal("4500000")
    assert p1.losses == Decimal("2700000")
    # recovery is lagged, nothing arrives yet
    assert p1.recoveries == 0
    # (900m - 4.5m) * 10% * 90/360
    assert p1.prepayments == Decimal("22387500")
    assert p1.principal_available == Decimal("22387500")
    # 900m * (3.5% + 5%) * 0.25 - 900m * 50bps * 0.25
    assert p1.interest_income == Decimal("19125000")
    assert p1.senior_fees == Decimal("1125000")
    assert p1.interest_available == Decimal("18000000")
    assert p1.pool_balance == Decimal("873112500")

    aaa = p1.payment("AAA")
    assert aaa.interest_paid == Decimal("9450000")
    assert aaa.principal_paid == Decimal("22387500")
    assert aaa.ending_balance == Decimal("600000000") - Decimal("22387500")

    # rated coupons 9.45m + 1.7m + 1.5m + 1.125m = 13.775m, rest is equity
    assert p1.payment("Equity").interest_paid == Decimal("4225000")
    assert out.equity_cash_flows[1] == Decimal("4225000")


def test_pool_balance_strictly_decreasing():
    cfg, out = _reference_run()
    prev = cfg.structure.pool_balance
    for p in out.periods:
        assert p.pool_balance < prev
        prev = p.pool_balance


def test_aaa_coupon_paid_in_full_early_periods():
    cfg, out = _reference_run()
    a = cfg.assumptions
    opening = Decimal("600000000")
    for p in out.periods[:8]:
        aaa = p.payment("AAA")
        due = opening * (Decimal("0.0130") + a.reference_rate) * a.period_fraction
        assert aaa.interest_paid == due
        opening = aaa.ending_balance


def test_junior_notes_untouched_while_aaa_outstanding():
    _, out = _reference_run()
    for p in out.periods:
        if p.payment("AAA").ending_balance > 0:
            for name in ("AA", "A", "BBB", "Equity"):
                assert p.payment(name).principal_paid == 0


def test_recovery_arrives_two_quarters_later():
    _, out = _reference_run()
    # 6 month lag on 90 day periods -> 2 periods
    assert out.periods[0].recoveries == 0
    assert out.periods[1].recoveries == 0
    assert out.periods[2].recoveries == out.periods[0].defaults * Decimal("0.40")
    assert out.periods[3].recoveries == out.periods[1].defaults * Decimal("0.40")
