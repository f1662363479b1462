# claimright/social_security.py
# Helpers for Social Security claiming adjustments, COLA compounding,
# spousal and survivor benefits.

from . import constants as C
from .schema import SpousalResolution


def compute_adjustment(claiming_age: float, reference_age: float,
                       delayed_credit_rate: float = C.DELAYED_CREDIT_RATE) -> float:
    """
    Multiplier applied to the PIA for claiming at `claiming_age`.
    - At or past the reference age: delayed credits, +8% per year (pro-rated by month)
    - Early: 5/9 of 1% per month for the first 36 months, 5/12 of 1% per month beyond
    Ages may be fractional (66.5 == 66 years 6 months).
    """
    months_diff = (claiming_age - reference_age) * 12
    if months_diff >= 0:
        return 1.0 + (months_diff / 12.0) * delayed_credit_rate

    months_early = -months_diff
    if months_early <= C.EARLY_TIER_MONTHS:
        reduction = months_early * C.EARLY_REDUCTION_FIRST_36
    else:
        reduction = (C.EARLY_TIER_MONTHS * C.EARLY_REDUCTION_FIRST_36
                     + (months_early - C.EARLY_TIER_MONTHS) * C.EARLY_REDUCTION_AFTER_36)
    return 1.0 - reduction


def monthly_benefit(pia: float, claiming_age: float, reference_age: float,
                    delayed_credit_rate: float = C.DELAYED_CREDIT_RATE) -> float:
    return pia * compute_adjustment(claiming_age, reference_age, delayed_credit_rate)


def cola_factor(cola_rate: float, years: float) -> float:
    """(1 + cola) ** years; the only place COLA compounding is spelled out."""
    return (1.0 + cola_rate) ** years


def project_to_claiming_age(base_amount: float, current_age: float,
                            claiming_age: float, cola_rate: float) -> float:
    """
    Grow the PIA with COLA between today and the claiming age.
    Only whole years count; a claiming age at or before today leaves it unchanged.
    """
    years = int(max(0, claiming_age - current_age))
    return base_amount * cola_factor(cola_rate, years)


def _spousal_reduction(claiming_age: float, reference_age: float) -> float:
    months_early = max(0.0, (reference_age - claiming_age) * 12)
    if months_early <= 0:
        return 1.0
    if months_early <= C.EARLY_TIER_MONTHS:
        return 1.0 - months_early * C.SPOUSAL_REDUCTION_FIRST_36
    return (1.0 - C.EARLY_TIER_MONTHS * C.SPOUSAL_REDUCTION_FIRST_36
            - (months_early - C.EARLY_TIER_MONTHS) * C.SPOUSAL_REDUCTION_AFTER_36)


def resolve_spousal_benefit(own_pia: float, own_claiming_age: float, own_reference_age: float,
                            partner_pia: float,
                            delayed_credit_rate: float = C.DELAYED_CREDIT_RATE) -> SpousalResolution:
    """
    Compare a claimant's own adjusted benefit with the spousal alternative.
    The spousal benefit is capped at 50% of the partner's PIA and reduced for
    claiming before the claimant's own reference age; delayed credits never
    apply to it. The claimant receives the larger of the two, never both.
    """
    own = monthly_benefit(own_pia, own_claiming_age, own_reference_age, delayed_credit_rate)
    spousal = partner_pia * C.SPOUSAL_SHARE * _spousal_reduction(own_claiming_age, own_reference_age)
    return SpousalResolution(own_benefit=own, spousal_benefit=spousal, uses_spousal=spousal > own)


def early_survivor_factor(survivor_age: float, survivor_reference_age: float) -> float:
    """Reduction applied to a survivor benefit started before the survivor's reference age."""
    if survivor_age >= survivor_reference_age:
        return 1.0
    months_early = (survivor_reference_age - survivor_age) * 12
    return max(C.SURVIVOR_REDUCTION_FLOOR, 1.0 - months_early * C.SURVIVOR_REDUCTION_PER_MONTH)


def resolve_survivor_benefit(deceased_annual: float, survivor_own_annual: float) -> float:
    """Survivor keeps the larger of their own ongoing benefit and the deceased's."""
    return max(deceased_annual, survivor_own_annual)
