"""Shared fixtures for the claiming-strategy tests."""

import pytest

from claimright.schema import (
    Assumptions, Claimant, ClaimingStrategy, HouseholdParams, MonthlyBenefit, YearlyBenefitRecord,
)


@pytest.fixture
def single_household():
    """Single claimant, FRA 67, $2,000 PIA, no COLA."""
    return HouseholdParams(
        primary=Claimant(base_pia=2000.0, reference_age=67, current_age=60, life_expectancy_age=90),
        cola_rate=0.0,
        filing_status="SINGLE",
    )


@pytest.fixture
def couple():
    """Primary is the higher earner; both expected to live to 95."""
    return HouseholdParams(
        primary=Claimant(base_pia=2500.0, reference_age=67, current_age=62, life_expectancy_age=95),
        spouse=Claimant(base_pia=1800.0, reference_age=67, current_age=62, life_expectancy_age=95),
        is_married=True,
        cola_rate=0.0254,
        filing_status="MFJ",
    )


@pytest.fixture
def serial():
    """Assumptions that keep the grid search on the calling thread."""
    return Assumptions(max_workers=1)


def make_strategy(cumulative_by_age, name="test"):
    """Strategy carrying only a cumulative column, for break-even tests."""
    records = []
    prev = 0.0
    for age, cum in cumulative_by_age:
        paid = cum - prev
        prev = cum
        records.append(YearlyBenefitRecord(
            age=age, spouse_age=None, primary_benefit=paid, spouse_benefit=0.0,
            total_benefit=paid, cumulative_benefit=cum, after_tax_benefit=paid,
            is_survivor_active=False,
        ))
    return ClaimingStrategy(
        name=name, description="", primary_claiming_age=62, spouse_claiming_age=None,
        monthly_benefit_at_claim=MonthlyBenefit(0.0, 0.0), lifetime_benefits=prev,
        after_tax_lifetime_benefits=prev, benefits_by_age=tuple(records),
    )
