# claimright/projection.py
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional, Tuple

import pandas as pd

from .errors import DomainRangeError, MissingSpouseDataError
from .schema import (
    Assumptions, Claimant, ClaimingStrategy, DEFAULT_ASSUMPTIONS, HouseholdParams,
    MonthlyBenefit, StrategyComparisonResult, SurvivorPolicy, YearlyBenefitRecord,
)
from .social_security import (
    cola_factor, early_survivor_factor, monthly_benefit, project_to_claiming_age,
    resolve_spousal_benefit, resolve_survivor_benefit,
)
from .after_tax import after_tax_benefit
from . import constants as C

logger = logging.getLogger(__name__)


class ClaimState(Enum):
    NOT_YET_CLAIMING = "not_yet_claiming"
    CLAIMING = "claiming"
    SURVIVOR_CLAIMING = "survivor_claiming"
    DECEASED = "deceased"


# -------- Validation --------
def check_claiming_age(label: str, age: Optional[float], assumptions: Assumptions) -> None:
    if age is None or not (assumptions.min_claiming_age <= age <= assumptions.max_claiming_age):
        raise DomainRangeError(label, age, assumptions.min_claiming_age, assumptions.max_claiming_age)


def validate(params: HouseholdParams, primary_claiming_age: float,
             spouse_claiming_age: Optional[float], assumptions: Assumptions) -> None:
    if params.is_married and params.spouse is None:
        raise MissingSpouseDataError("Household is married but no spouse record was supplied")
    check_claiming_age("Primary", primary_claiming_age, assumptions)
    if params.is_married:
        check_claiming_age("Spouse", spouse_claiming_age, assumptions)


# -------- Claim-time amounts --------
def monthly_at_claim(own: Claimant, own_claim_age: float, partner: Optional[Claimant],
                     cola_rate: float, delayed_credit_rate: float = C.DELAYED_CREDIT_RATE) -> float:
    """
    Monthly benefit on the claim date: the PIA grown with COLA up to the claim,
    then adjusted for claiming age. With a partner the spousal alternative is
    priced on the partner's PIA grown over the same years, and the larger wins.
    """
    own_pia = project_to_claiming_age(own.base_pia, own.current_age, own_claim_age, cola_rate)
    if partner is None:
        return monthly_benefit(own_pia, own_claim_age, own.reference_age, delayed_credit_rate)
    partner_pia = project_to_claiming_age(partner.base_pia, own.current_age, own_claim_age, cola_rate)
    return resolve_spousal_benefit(own_pia, own_claim_age, own.reference_age,
                                   partner_pia, delayed_credit_rate).received


def ongoing_annual(monthly: float, age: float, claim_age: float, cola_rate: float) -> float:
    """Annual amount in the year the claimant is `age`; zero before the claim."""
    if age < claim_age:
        return 0.0
    return monthly * 12.0 * cola_factor(cola_rate, age - claim_age)


def claim_state(age: float, claim_age: Optional[float], life_expectancy: float) -> ClaimState:
    if age > life_expectancy:
        return ClaimState.DECEASED
    if claim_age is not None and age >= claim_age:
        return ClaimState.CLAIMING
    return ClaimState.NOT_YET_CLAIMING


def _survivor_step(survivor_state: ClaimState, own_stream: float, deceased_stream: float,
                   survivor_age: float, survivor_reference_age: float,
                   policy: SurvivorPolicy, early_factor: Optional[float]) -> Tuple[float, bool, Optional[float]]:
    """
    One year for the surviving claimant. Returns (benefit, survivor_active, early_factor);
    an early survivor factor is locked in on the first year it is applied.
    """
    if survivor_state is ClaimState.CLAIMING:
        return resolve_survivor_benefit(deceased_stream, own_stream), True, early_factor
    if (policy is SurvivorPolicy.EARLY_SURVIVOR and deceased_stream > 0
            and survivor_age >= C.SURVIVOR_MIN_AGE):
        if early_factor is None:
            early_factor = early_survivor_factor(survivor_age, survivor_reference_age)
        return deceased_stream * early_factor, True, early_factor
    return 0.0, False, early_factor


# -------- Engine --------
def run(params: HouseholdParams, primary_claiming_age: float,
        spouse_claiming_age: Optional[float] = None,
        assumptions: Assumptions = DEFAULT_ASSUMPTIONS,
        name: str = "Your Strategy", description: str = "") -> ClaimingStrategy:
    """
    Year-by-year household benefit stream, unrounded. Callers outside the
    package should use `simulate_household`, which rounds money to cents.
    """
    validate(params, primary_claiming_age, spouse_claiming_age, assumptions)
    p = params.primary
    married = params.is_married
    s = params.spouse if married else None
    cola = params.cola_rate
    dcr = assumptions.delayed_credit_rate

    monthly_p = monthly_at_claim(p, primary_claiming_age, s, cola, dcr)
    monthly_s = monthly_at_claim(s, spouse_claiming_age, p, cola, dcr) if married else 0.0

    horizon = p.life_expectancy_age - p.current_age
    if married:
        horizon = max(horizon, s.life_expectancy_age - s.current_age)

    records = []
    cumulative = 0.0
    after_tax_total = 0.0
    survivor_active = False
    p_claimed = s_claimed = False
    early_factor = None

    for step in range(int(horizon) + 1):
        p_age = p.current_age + step
        s_age = s.current_age + step if married else None

        p_state = claim_state(p_age, primary_claiming_age, p.life_expectancy_age)
        p_claimed = p_claimed or p_state is ClaimState.CLAIMING
        p_stream = ongoing_annual(monthly_p, p_age, primary_claiming_age, cola) if p_claimed else 0.0

        primary_benefit = p_stream if p_state is not ClaimState.DECEASED else 0.0
        spouse_benefit = 0.0

        if married:
            s_state = claim_state(s_age, spouse_claiming_age, s.life_expectancy_age)
            s_claimed = s_claimed or s_state is ClaimState.CLAIMING
            s_stream = ongoing_annual(monthly_s, s_age, spouse_claiming_age, cola) if s_claimed else 0.0
            spouse_benefit = s_stream if s_state is not ClaimState.DECEASED else 0.0

            if p_state is ClaimState.DECEASED and s_state is not ClaimState.DECEASED:
                spouse_benefit, active, early_factor = _survivor_step(
                    s_state, s_stream, p_stream, s_age, s.reference_age,
                    assumptions.survivor_policy, early_factor)
                survivor_active = survivor_active or active
            elif s_state is ClaimState.DECEASED and p_state is not ClaimState.DECEASED:
                primary_benefit, active, early_factor = _survivor_step(
                    p_state, p_stream, s_stream, p_age, p.reference_age,
                    assumptions.survivor_policy, early_factor)
                survivor_active = survivor_active or active

        total = primary_benefit + spouse_benefit
        cumulative += total
        after_tax = after_tax_benefit(total, assumptions.other_income, params.filing_status,
                                      params.tax_rule, assumptions.federal_marginal_rate)
        after_tax_total += after_tax

        records.append(YearlyBenefitRecord(
            age=p_age,
            spouse_age=s_age,
            primary_benefit=primary_benefit,
            spouse_benefit=spouse_benefit,
            total_benefit=total,
            cumulative_benefit=cumulative,
            after_tax_benefit=after_tax,
            is_survivor_active=survivor_active,
        ))

    strategy = ClaimingStrategy(
        name=name,
        description=description or describe_ages(primary_claiming_age, spouse_claiming_age, married),
        primary_claiming_age=primary_claiming_age,
        spouse_claiming_age=spouse_claiming_age if married else None,
        monthly_benefit_at_claim=MonthlyBenefit(primary=monthly_p, spouse=monthly_s),
        lifetime_benefits=cumulative,
        after_tax_lifetime_benefits=after_tax_total,
        benefits_by_age=tuple(records),
    )
    logger.debug("Simulated %s (%s/%s): %d years, lifetime %.2f",
                 name, primary_claiming_age, spouse_claiming_age, len(records), cumulative)
    return strategy


def describe_ages(primary_claiming_age: float, spouse_claiming_age: Optional[float], married: bool) -> str:
    if married:
        return f"You claim at {primary_claiming_age}, spouse at {spouse_claiming_age}"
    return f"You claim at {primary_claiming_age}"


def simulate_household(params: HouseholdParams, primary_claiming_age: float,
                       spouse_claiming_age: Optional[float] = None,
                       assumptions: Assumptions = DEFAULT_ASSUMPTIONS) -> ClaimingStrategy:
    """Full benefit stream for one claiming-age combination, money rounded to cents."""
    return run(params, primary_claiming_age, spouse_claiming_age, assumptions).rounded()


# -------- Tables --------
BENEFIT_COLUMNS = [
    "Age", "Spouse Age", "Primary Benefit", "Spouse Benefit", "Total Benefit",
    "Cumulative Benefit", "After-Tax Benefit", "Survivor Active",
]


def benefits_frame(strategy: ClaimingStrategy, round_whole: bool = False) -> pd.DataFrame:
    rows = [
        {
            "Age": r.age,
            "Spouse Age": r.spouse_age,
            "Primary Benefit": round(r.primary_benefit, 2),
            "Spouse Benefit": round(r.spouse_benefit, 2),
            "Total Benefit": round(r.total_benefit, 2),
            "Cumulative Benefit": round(r.cumulative_benefit, 2),
            "After-Tax Benefit": round(r.after_tax_benefit, 2),
            "Survivor Active": r.is_survivor_active,
        }
        for r in strategy.benefits_by_age
    ]
    df = pd.DataFrame(rows, columns=BENEFIT_COLUMNS)
    if round_whole and not df.empty:
        num_cols = ["Primary Benefit", "Spouse Benefit", "Total Benefit",
                    "Cumulative Benefit", "After-Tax Benefit"]
        df[num_cols] = df[num_cols].round(0)
    return df


def comparison_frame(result: StrategyComparisonResult) -> pd.DataFrame:
    rows = []
    for s in result.strategies:
        rows.append({
            "Strategy": s.name,
            "Primary Claim Age": s.primary_claiming_age,
            "Spouse Claim Age": s.spouse_claiming_age,
            "Monthly at Claim": round(s.monthly_benefit_at_claim.combined, 2),
            "Annual at Claim": round(s.annual_benefit_at_claim, 2),
            "Lifetime Benefits": round(s.lifetime_benefits, 2),
            "After-Tax Lifetime": round(s.after_tax_lifetime_benefits, 2),
            "Break-Even Age": s.break_even_age or None,
        })
    return pd.DataFrame(rows)
