# claimright/comparator.py
# Canonical strategy comparison, single-claimant scenario table and the
# exhaustive claiming-age search for couples.
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Optional, Sequence, Tuple

from . import constants as C
from .breakeven import find_break_even
from .projection import run, validate
from .schema import (
    Assumptions, Claimant, ClaimingStrategy, CoupleOptimization, DEFAULT_ASSUMPTIONS, HouseholdParams,
    OptimalAdvantage, StrategyComparisonResult,
)
from .social_security import compute_adjustment

logger = logging.getLogger(__name__)


class StrategyVariant(Enum):
    EARLIEST = "Earliest"
    BALANCED = "Balanced"
    OPTIMAL = "Optimal"
    CUSTOM = "Your Strategy"
    GRID = "Grid"


def variant_ages(variant: StrategyVariant, params: HouseholdParams,
                 assumptions: Assumptions = DEFAULT_ASSUMPTIONS) -> Tuple[float, Optional[float]]:
    """(primary, spouse) claiming ages for a canonical strategy."""
    lo, hi = assumptions.min_claiming_age, assumptions.max_claiming_age
    married = params.is_married
    if variant is StrategyVariant.EARLIEST:
        return lo, (lo if married else None)
    if variant is StrategyVariant.BALANCED:
        return params.primary.reference_age, (params.spouse.reference_age if married else None)
    if variant is StrategyVariant.OPTIMAL:
        if not married:
            return hi, None
        if primary_is_higher_earner(params):
            return hi, lo
        return lo, hi
    raise ValueError(f"{variant} has no fixed claiming ages")


def primary_is_higher_earner(params: HouseholdParams) -> bool:
    if not params.is_married or params.spouse is None:
        return True
    return params.primary.base_pia >= params.spouse.base_pia


def variant_description(variant: StrategyVariant, params: HouseholdParams,
                        assumptions: Assumptions = DEFAULT_ASSUMPTIONS) -> str:
    lo, hi = assumptions.min_claiming_age, assumptions.max_claiming_age
    if variant is StrategyVariant.EARLIEST:
        return f"Both claim at {lo} for immediate income" if params.is_married else f"Claim at {lo} for immediate income"
    if variant is StrategyVariant.BALANCED:
        return "Both claim at Full Retirement Age" if params.is_married else "Claim at Full Retirement Age"
    if variant is StrategyVariant.OPTIMAL:
        if not params.is_married:
            return f"Delay to {hi} for the largest lifetime benefit"
        if primary_is_higher_earner(params):
            return f"You delay to {hi}, spouse claims at {lo} (maximizes survivor benefit)"
        return f"Spouse delays to {hi}, you claim at {lo} (maximizes survivor benefit)"
    return ""


def _run_variant(params: HouseholdParams, variant: StrategyVariant, assumptions: Assumptions) -> ClaimingStrategy:
    p_age, s_age = variant_ages(variant, params, assumptions)
    return run(params, p_age, s_age, assumptions,
               name=variant.value, description=variant_description(variant, params, assumptions))


def recommendation_text(advantage: OptimalAdvantage, assumptions: Assumptions = DEFAULT_ASSUMPTIONS) -> str:
    gain_k = f"{advantage.vs_earliest / 1000:.0f}"
    if advantage.vs_earliest > assumptions.large_advantage_threshold:
        return (f"If you live past age {advantage.break_even_vs_earliest}, the Delay to "
                f"{assumptions.max_claiming_age} strategy will provide you with ${gain_k}K more "
                f"in lifetime income than claiming early.")
    if advantage.vs_earliest > 0:
        return (f"Delaying provides a modest advantage of ${gain_k}K over early claiming, "
                f"with break-even at age {advantage.break_even_vs_earliest}.")
    return "Given your life expectancy assumptions, claiming early may be advantageous."


def compare_strategies(params: HouseholdParams, assumptions: Assumptions = DEFAULT_ASSUMPTIONS,
                       custom_ages: Optional[Tuple[float, Optional[float]]] = None) -> StrategyComparisonResult:
    """
    Run the three canonical strategies (and `custom_ages` when given), measure
    break-even of each later strategy against Earliest and summarize the gap.
    """
    earliest = _run_variant(params, StrategyVariant.EARLIEST, assumptions)
    balanced = _run_variant(params, StrategyVariant.BALANCED, assumptions)
    optimal = _run_variant(params, StrategyVariant.OPTIMAL, assumptions)

    never = assumptions.never_age
    balanced = replace(balanced, break_even_age=find_break_even(earliest, balanced, never))
    optimal = replace(optimal, break_even_age=find_break_even(earliest, optimal, never))

    custom = None
    if custom_ages is not None:
        custom = run(params, custom_ages[0], custom_ages[1], assumptions, name=StrategyVariant.CUSTOM.value)
        custom = replace(custom, break_even_age=find_break_even(earliest, custom, never))

    advantage = OptimalAdvantage(
        vs_earliest=round(optimal.lifetime_benefits - earliest.lifetime_benefits, 2),
        vs_balanced=round(optimal.lifetime_benefits - balanced.lifetime_benefits, 2),
        break_even_vs_earliest=optimal.break_even_age,
    )
    logger.debug("Optimal advantage vs earliest %.2f, break-even %s",
                 advantage.vs_earliest, advantage.break_even_vs_earliest)

    return StrategyComparisonResult(
        earliest=earliest.rounded(),
        balanced=balanced.rounded(),
        optimal=optimal.rounded(),
        optimal_advantage=advantage,
        recommendation=recommendation_text(advantage, assumptions),
        custom_strategy=custom.rounded() if custom else None,
    )


@lru_cache(maxsize=256)
def cached_compare_strategies(params: HouseholdParams, assumptions: Assumptions = DEFAULT_ASSUMPTIONS,
                              custom_ages: Optional[Tuple[float, Optional[float]]] = None) -> StrategyComparisonResult:
    """`compare_strategies` memoized on the full (hashable) input set."""
    return compare_strategies(params, assumptions, custom_ages)


def custom_strategy(params: HouseholdParams, primary_claiming_age: float,
                    spouse_claiming_age: Optional[float] = None,
                    assumptions: Assumptions = DEFAULT_ASSUMPTIONS) -> ClaimingStrategy:
    return run(params, primary_claiming_age, spouse_claiming_age, assumptions,
               name=StrategyVariant.CUSTOM.value).rounded()


# -------- Single-claimant scenarios --------
def claiming_scenarios(pia: float, reference_age: float, current_age: int,
                       life_expectancy: int, cola_rate: float,
                       assumptions: Assumptions = DEFAULT_ASSUMPTIONS) -> List[Dict[str, float]]:
    """
    One row per whole claiming age (ages already passed are skipped) with the
    claim-time monthly benefit, lifetime total through life expectancy and the
    break-even age against the next-earlier claiming age.
    """
    params = HouseholdParams(primary=Claimant(pia, reference_age, current_age, life_expectancy),
                             cola_rate=cola_rate)
    strategies = [
        run(params, claim_age, None, assumptions, name=f"Claim at {claim_age}")
        for claim_age in range(assumptions.min_claiming_age, assumptions.max_claiming_age + 1)
        if claim_age >= current_age
    ]

    rows = []
    previous = None
    for strategy in strategies:
        claim_age = strategy.primary_claiming_age
        rows.append({
            "claiming_age": claim_age,
            "adjustment": compute_adjustment(claim_age, reference_age, assumptions.delayed_credit_rate),
            "monthly_benefit": round(strategy.monthly_benefit_at_claim.primary, 2),
            "lifetime_benefits": round(strategy.lifetime_benefits, 2),
            "break_even_age": find_break_even(previous, strategy, assumptions.never_age) if previous is not None else 0,
        })
        previous = strategy
    return rows


def lifetime_benefit_comparison(pia: float, reference_age: float, current_age: int,
                                life_expectancy: int, cola_rate: float,
                                ages: Sequence[int] = (C.MIN_CLAIMING_AGE, C.DEFAULT_REFERENCE_AGE,
                                                       C.MAX_CLAIMING_AGE),
                                assumptions: Assumptions = DEFAULT_ASSUMPTIONS) -> Dict[int, float]:
    """Lifetime benefits at a few headline claiming ages; 0.0 for ages already passed."""
    rows = claiming_scenarios(pia, reference_age, current_age, life_expectancy, cola_rate, assumptions)
    by_age = {row["claiming_age"]: row["lifetime_benefits"] for row in rows}
    return {age: by_age.get(age, 0.0) for age in ages}


# -------- Exhaustive search --------
def score_strategy(strategy: ClaimingStrategy, assumptions: Assumptions = DEFAULT_ASSUMPTIONS) -> float:
    return (assumptions.lifetime_weight * strategy.lifetime_benefits
            + assumptions.survivor_weight * strategy.survivor_benefits)


def claiming_grid(params: HouseholdParams, assumptions: Assumptions = DEFAULT_ASSUMPTIONS) -> List[Tuple[float, float]]:
    """
    Every (primary, spouse) pair on the whole-year claiming window, lower
    primary age first. Canonical pairs that fall between grid points
    (fractional reference ages) are appended so they are always candidates.
    """
    ages = range(assumptions.min_claiming_age, assumptions.max_claiming_age + 1)
    grid = [(p, s) for p in ages for s in ages]
    seen = set(grid)
    for variant in (StrategyVariant.EARLIEST, StrategyVariant.BALANCED, StrategyVariant.OPTIMAL):
        pair = variant_ages(variant, params, assumptions)
        if pair not in seen:
            grid.append(pair)
            seen.add(pair)
    return grid


def _explain(params: HouseholdParams, best: ClaimingStrategy) -> str:
    primary_higher = primary_is_higher_earner(params)
    higher = "You (higher earner)" if primary_higher else "Your spouse (higher earner)"
    lower = "Your spouse (lower earner)" if primary_higher else "You (lower earner)"
    bp, bs = best.primary_claiming_age, best.spouse_claiming_age

    if primary_higher and bp >= 68 and bs <= 64:
        return (f"{higher} delays to {bp} to maximize survivor protection, "
                f"while {lower} claims at {bs} for early cash flow.")
    if not primary_higher and bs >= 68 and bp <= 64:
        return (f"{higher} delays to {bs} to maximize survivor protection, "
                f"while {lower} claims at {bp} for early cash flow.")
    if bp == bs:
        return f"Both claim at age {bp} - this balances cash flow timing with lifetime benefits."
    return (f"Optimal strategy: You claim at {bp}, spouse claims at {bs}. "
            f"This maximizes combined household income over your lifetimes.")


def optimize_for_couple(params: HouseholdParams,
                        assumptions: Assumptions = DEFAULT_ASSUMPTIONS) -> CoupleOptimization:
    """
    Score every claiming-age pair and return the best one.

    Cells are simulated independently on a thread pool; the reduction keeps
    the highest score and, on equal scores, the pair generated first (lower
    primary age, then lower spouse age).
    """
    if not params.is_married:
        hi = assumptions.max_claiming_age
        best = run(params, hi, None, assumptions, name=f"Delay to {hi}",
                   description="Maximum lifetime benefits")
        return CoupleOptimization(
            best_strategy=best.rounded(),
            explanation=f"As a single filer, delaying to {hi} maximizes your lifetime benefits.",
            best_score=round(score_strategy(best, assumptions), 2),
            all_strategies=(best.rounded(),),
        )

    validate(params, assumptions.min_claiming_age, assumptions.min_claiming_age, assumptions)
    grid = claiming_grid(params, assumptions)

    def _cell(pair):
        p_age, s_age = pair
        strategy = run(params, p_age, s_age, assumptions,
                       name=f"{p_age}/{s_age}", description=f"Primary at {p_age}, Spouse at {s_age}")
        return strategy, score_strategy(strategy, assumptions)

    if assumptions.max_workers == 1:
        scored = list(map(_cell, grid))
    else:
        with ThreadPoolExecutor(max_workers=assumptions.max_workers) as pool:
            scored = list(pool.map(_cell, grid))

    best_idx = max(range(len(scored)), key=lambda i: (scored[i][1], -i))
    best, best_score = scored[best_idx]
    logger.info("Searched %d claiming combinations; best %s scored %.2f",
                len(scored), best.name, best_score)

    return CoupleOptimization(
        best_strategy=best.rounded(),
        explanation=_explain(params, best),
        best_score=round(best_score, 2),
        all_strategies=tuple(s.rounded() for s, _ in scored),
    )
