# claimright/breakeven.py
# Break-even age between two claiming strategies.

from typing import Dict

from . import constants as C
from .schema import ClaimingStrategy


def _cumulative_by_age(strategy: ClaimingStrategy) -> Dict[int, float]:
    return {r.age: r.cumulative_benefit for r in strategy.benefits_by_age}


def find_break_even(strategy_a: ClaimingStrategy, strategy_b: ClaimingStrategy,
                    never_age: int = C.NEVER_BREAK_EVEN_AGE) -> int:
    """
    First age at which the later-claiming `strategy_b` has collected strictly
    more in total than the earlier-claiming baseline `strategy_a`.

    Both cumulative columns are read on a shared age axis. Where one stream
    has no entry for an age it carries its last known total forward (zero
    before it starts). Returns `never_age` when `strategy_b` never pulls
    ahead or when either stream is empty.
    """
    cum_a = _cumulative_by_age(strategy_a)
    cum_b = _cumulative_by_age(strategy_b)
    if not cum_a or not cum_b:
        return never_age

    last_a = last_b = 0.0
    for age in sorted(set(cum_a) | set(cum_b)):
        last_a = cum_a.get(age, last_a)
        last_b = cum_b.get(age, last_b)
        if last_b > last_a:
            return age
    return never_age
