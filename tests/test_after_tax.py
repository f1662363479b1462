"""
Tests for benefit taxation and after-tax rankings.

Federal tiers follow IRS Publication 915:
- Tier 1: 0% taxable (provisional income <= base amount)
- Tier 2: 50% of the excess (base < provisional <= adjusted base)
- Tier 3: 85% formula, capped at 85% of the benefit
"""

import pytest

from claimright.after_tax import (
    after_tax_benefit,
    federal_taxable_benefit,
    rank_states_by_after_tax,
    rank_strategies_by_after_tax,
    state_tax_leakage,
    tax_breakdown,
)
from claimright.projection import simulate_household
from claimright.schema import StateTaxRule
from claimright.taxes_states.base import state_tax_on_benefit, state_taxable_benefit
from claimright.taxes_states.registry import get_state_rule


class TestFederalTaxable:
    def test_mfj_below_base(self):
        # provisional = 20k + 10k = 30k < 32k
        assert federal_taxable_benefit(20_000, 20_000, "MFJ") == 0.0

    def test_single_at_adjusted_base(self):
        # provisional = 24k + 10k = 34k -> 0.5 * (34k - 25k)
        assert federal_taxable_benefit(20_000, 24_000, "SINGLE") == pytest.approx(4_500.0)

    def test_mfj_in_fifty_percent_band(self):
        # provisional = 30k + 10k = 40k -> 0.5 * 8k
        assert federal_taxable_benefit(20_000, 30_000, "MFJ") == pytest.approx(4_000.0)

    def test_eighty_five_percent_band(self):
        # provisional = 50k + 10k = 60k; 0.5 * 12k + 0.85 * 16k = 6k + 13.6k, capped at 17k
        assert federal_taxable_benefit(20_000, 50_000, "MFJ") == pytest.approx(17_000.0)

    def test_eighty_five_percent_cap(self):
        assert federal_taxable_benefit(30_000, 100_000, "SINGLE") == pytest.approx(25_500.0)

    def test_mfs_has_no_base_amount(self):
        assert federal_taxable_benefit(10_000, 0, "MFS") == pytest.approx(4_250.0)

    def test_hoh_uses_single_bases(self):
        assert federal_taxable_benefit(20_000, 24_000, "HOH") == federal_taxable_benefit(20_000, 24_000, "SINGLE")

    def test_zero_benefit(self):
        assert federal_taxable_benefit(0, 500_000, "MFJ") == 0.0

    def test_unknown_filing_status(self):
        with pytest.raises(ValueError):
            federal_taxable_benefit(20_000, 30_000, "JOINT")


class TestStateTax:
    def test_exempt_state(self):
        assert state_tax_on_benefit(120_000, get_state_rule("FL")) == 0.0

    def test_no_rule(self):
        assert state_tax_on_benefit(120_000, None) == 0.0

    def test_tax_above_exemption(self):
        mn = get_state_rule("MN")
        assert state_tax_on_benefit(120_000, mn) == pytest.approx((120_000 - 108_480) * 0.0985)

    def test_below_exemption(self):
        assert state_tax_on_benefit(60_000, get_state_rule("VT")) == 0.0
        assert state_taxable_benefit(60_000, 65_000) == 0.0


class TestAfterTaxBenefit:
    def test_breakdown(self):
        vt = get_state_rule("VT")
        bd = tax_breakdown(80_000, 30_000, "MFJ", vt, 0.22)
        assert bd.federal_taxable == pytest.approx(federal_taxable_benefit(80_000, 30_000, "MFJ"))
        assert bd.federal_tax == pytest.approx(bd.federal_taxable * 0.22)
        assert bd.state_tax == pytest.approx(15_000 * 0.0875)
        assert bd.after_tax == pytest.approx(80_000 - bd.federal_tax - bd.state_tax)

    def test_matches_breakdown(self):
        assert after_tax_benefit(40_000, 30_000, "MFJ") == pytest.approx(tax_breakdown(40_000, 30_000, "MFJ").after_tax)

    def test_low_income_keeps_everything(self):
        assert after_tax_benefit(20_000, 0, "MFJ") == 20_000


class TestRankStates:
    def test_orders_by_after_tax_then_tax_then_code(self):
        rules = [get_state_rule(c) for c in ("VT", "MN", "FL", "CA")]
        ranked = rank_states_by_after_tax(120_000, rules)
        assert [r.state_code for r in ranked] == ["CA", "FL", "MN", "VT"]
        assert ranked[0].after_tax_benefit > ranked[-1].after_tax_benefit
        assert ranked[-1].tax_amount - ranked[0].tax_amount == pytest.approx(55_000 * 0.0875, abs=0.01)
        assert ranked[-1].benefits_taxable is True

    def test_equal_after_tax_orders_by_state_code(self):
        a = StateTaxRule("AA", "Alpha", benefits_taxable=False)
        b = StateTaxRule("BB", "Beta", benefits_taxable=False)
        ranked = rank_states_by_after_tax(50_000, [b, a])
        assert [r.state_code for r in ranked] == ["AA", "BB"]

    def test_empty(self):
        assert rank_states_by_after_tax(50_000, []) == []


class TestRankStrategies:
    def test_orders_by_after_tax_lifetime(self, couple):
        strategies = [simulate_household(couple, p, s) for p, s in [(62, 62), (70, 62), (67, 67)]]
        ranked = rank_strategies_by_after_tax(strategies)
        values = [s.after_tax_lifetime_benefits for s in ranked]
        assert values == sorted(values, reverse=True)


class TestStateTaxLeakage:
    def test_thirty_year_leakage(self):
        rules = [get_state_rule("VT"), get_state_rule("FL")]
        rows = state_tax_leakage(75_000, rules, cola_rate=0.0)
        assert [r.state_code for r in rows] == ["FL", "VT"]
        vt = rows[1]
        assert vt.total_tax_leakage == pytest.approx(10_000 * 0.0875 * 30)
        assert vt.annual_average == pytest.approx(875.0)
        assert vt.savings_vs_worst == 0.0
        assert rows[0].savings_vs_worst == pytest.approx(26_250.0)

    def test_cola_grows_leakage(self):
        vt = [get_state_rule("VT")]
        flat = state_tax_leakage(75_000, vt, cola_rate=0.0)[0]
        grown = state_tax_leakage(75_000, vt, cola_rate=0.03)[0]
        assert grown.total_tax_leakage > flat.total_tax_leakage

    def test_no_rules(self):
        assert state_tax_leakage(75_000, []) == []
