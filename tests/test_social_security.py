"""Tests for claiming adjustments, COLA projection and spousal/survivor helpers."""

import pytest

from claimright.social_security import (
    cola_factor,
    compute_adjustment,
    early_survivor_factor,
    monthly_benefit,
    project_to_claiming_age,
    resolve_spousal_benefit,
    resolve_survivor_benefit,
)


class TestComputeAdjustment:
    def test_reference_age_is_exactly_one(self):
        assert compute_adjustment(67, 67) == 1.0
        assert compute_adjustment(66.5, 66.5) == 1.0

    def test_claim_at_62_with_fra_67(self):
        # 36 months at 5/9% + 24 months at 5/12% = 20% + 10%
        assert compute_adjustment(62, 67) == pytest.approx(0.70)

    def test_claim_at_70_with_fra_67(self):
        assert compute_adjustment(70, 67) == pytest.approx(1.24)

    def test_first_tier_only(self):
        # 24 months early -> 24 * 5/9 % = 13.333%
        assert compute_adjustment(65, 67) == pytest.approx(1 - 24 * 5 / 9 / 100)

    def test_continuous_at_36_months(self):
        at_36 = compute_adjustment(64, 67)
        assert at_36 == pytest.approx(0.80)
        assert compute_adjustment(64 - 1e-9, 67) == pytest.approx(at_36, abs=1e-9)
        assert compute_adjustment(64 + 1e-9, 67) == pytest.approx(at_36, abs=1e-9)

    def test_fractional_delay(self):
        # six months of delayed credit at 8%/year
        assert compute_adjustment(67.5, 67) == pytest.approx(1.04)

    def test_custom_delayed_credit_rate(self):
        assert compute_adjustment(70, 67, delayed_credit_rate=0.06) == pytest.approx(1.18)

    @pytest.mark.parametrize("reference_age", [66, 66.5, 67])
    def test_strictly_increasing_over_claiming_window(self, reference_age):
        ages = [62 + m / 12 for m in range(0, 8 * 12 + 1)]
        factors = [compute_adjustment(a, reference_age) for a in ages]
        assert all(b > a for a, b in zip(factors, factors[1:]))


class TestMonthlyBenefit:
    def test_example_single_claimant(self):
        assert monthly_benefit(2000, 62, 67) == pytest.approx(1400.0)
        assert monthly_benefit(2000, 70, 67) == pytest.approx(2480.0)


class TestColaProjection:
    @pytest.mark.parametrize("age,rate", [(62, 0.0), (65, 0.0254), (70, 0.05)])
    def test_identity_when_claiming_now(self, age, rate):
        assert project_to_claiming_age(1234.56, age, age, rate) == 1234.56

    def test_compounds_whole_years(self):
        assert project_to_claiming_age(1000, 60, 62, 0.03) == pytest.approx(1000 * 1.03 ** 2)

    def test_partial_years_are_truncated(self):
        assert project_to_claiming_age(1000, 60, 62.75, 0.03) == pytest.approx(1000 * 1.03 ** 2)

    def test_claim_in_past_leaves_amount_unchanged(self):
        assert project_to_claiming_age(1000, 66, 62, 0.03) == 1000

    def test_cola_factor(self):
        assert cola_factor(0.02, 0) == 1.0
        assert cola_factor(0.02, 3) == pytest.approx(1.061208)


class TestSpousalBenefit:
    def test_uses_spousal_when_half_partner_pia_is_larger(self):
        res = resolve_spousal_benefit(1000, 67, 67, 3200)
        assert res.own_benefit == pytest.approx(1000)
        assert res.spousal_benefit == pytest.approx(1600)
        assert res.uses_spousal is True
        assert res.received == pytest.approx(1600)

    def test_own_benefit_wins(self):
        res = resolve_spousal_benefit(1800, 62, 67, 2500)
        assert res.own_benefit == pytest.approx(1260)
        assert res.uses_spousal is False
        assert res.received == pytest.approx(1260)

    def test_spousal_reduction_first_36_months(self):
        res = resolve_spousal_benefit(0, 64, 67, 2000)
        assert res.spousal_benefit == pytest.approx(1000 * 0.75)

    def test_spousal_reduction_beyond_36_months(self):
        # 60 months early: 25% + 24 * 5/12 % = 35%
        res = resolve_spousal_benefit(0, 62, 67, 2000)
        assert res.spousal_benefit == pytest.approx(1000 * 0.65)

    def test_no_delayed_credit_on_spousal(self):
        res = resolve_spousal_benefit(0, 70, 67, 2000)
        assert res.spousal_benefit == pytest.approx(1000)


class TestSurvivorHelpers:
    def test_survivor_keeps_larger_benefit(self):
        assert resolve_survivor_benefit(30000, 21600) == 30000
        assert resolve_survivor_benefit(10000, 21600) == 21600

    def test_early_survivor_factor(self):
        assert early_survivor_factor(67, 67) == 1.0
        assert early_survivor_factor(65, 67) == pytest.approx(1 - 24 * 0.00396)
        assert early_survivor_factor(60, 67) == pytest.approx(0.715)
