# claimright/after_tax.py
# After-tax view of benefits: provisional-income federal test (IRS Pub. 915)
# plus the household's state rule, and rankings by what the household keeps.
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from . import constants as C
from .schema import ClaimingStrategy, StateTaxRule
from .social_security import cola_factor
from .taxes_states.base import state_tax_on_benefit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaxBreakdown:
    benefit: float
    federal_taxable: float
    federal_tax: float
    state_tax: float

    @property
    def total_tax(self) -> float:
        return self.federal_tax + self.state_tax

    @property
    def after_tax(self) -> float:
        return self.benefit - self.total_tax


@dataclass(frozen=True)
class StateAfterTax:
    state: str
    state_code: str
    after_tax_benefit: float
    tax_amount: float
    benefits_taxable: bool


@dataclass(frozen=True)
class StateLeakage:
    state: str
    state_code: str
    total_tax_leakage: float
    annual_average: float
    benefits_taxable: bool
    savings_vs_worst: float


def _thresholds(filing_status: str):
    fs = (filing_status or "SINGLE").upper()
    try:
        return C.SS_PROVISIONAL_THRESHOLDS[fs]
    except KeyError:
        raise ValueError(f"Unknown filing status {filing_status!r}") from None


def federal_taxable_benefit(benefit: float, other_income: float, filing_status: str) -> float:
    if benefit <= 0:
        return 0.0
    base, adj = _thresholds(filing_status)
    provisional = other_income + 0.5 * benefit
    part1 = max(0.0, min(provisional - base, adj - base)) * C.SS_TIER1_INCLUSION
    if provisional <= adj:
        return min(C.SS_TIER1_INCLUSION * benefit, part1)
    part2 = (provisional - adj) * C.SS_TIER2_INCLUSION
    return min(C.SS_TIER2_INCLUSION * benefit, part1 + part2)


def tax_breakdown(benefit: float, other_income: float = C.DEFAULT_OTHER_INCOME,
                  filing_status: str = "MFJ", tax_rule: Optional[StateTaxRule] = None,
                  federal_marginal_rate: float = C.DEFAULT_FEDERAL_MARGINAL_RATE) -> TaxBreakdown:
    taxable = federal_taxable_benefit(benefit, other_income, filing_status)
    return TaxBreakdown(
        benefit=benefit,
        federal_taxable=taxable,
        federal_tax=taxable * federal_marginal_rate,
        state_tax=state_tax_on_benefit(benefit, tax_rule),
    )


def after_tax_benefit(benefit: float, other_income: float = C.DEFAULT_OTHER_INCOME,
                      filing_status: str = "MFJ", tax_rule: Optional[StateTaxRule] = None,
                      federal_marginal_rate: float = C.DEFAULT_FEDERAL_MARGINAL_RATE) -> float:
    return tax_breakdown(benefit, other_income, filing_status, tax_rule, federal_marginal_rate).after_tax


def rank_states_by_after_tax(annual_benefit: float, tax_rules: Iterable[StateTaxRule],
                             other_income: float = C.DEFAULT_OTHER_INCOME,
                             filing_status: str = "MFJ",
                             federal_marginal_rate: float = C.DEFAULT_FEDERAL_MARGINAL_RATE) -> List[StateAfterTax]:
    """
    What the household keeps of `annual_benefit` in each jurisdiction, best first.
    Ties go to the lower tax amount, then to the state code.
    """
    rows = []
    for rule in tax_rules:
        bd = tax_breakdown(annual_benefit, other_income, filing_status, rule, federal_marginal_rate)
        rows.append(StateAfterTax(
            state=rule.state_name,
            state_code=rule.state_code,
            after_tax_benefit=round(bd.after_tax, 2),
            tax_amount=round(bd.total_tax, 2),
            benefits_taxable=rule.benefits_taxable,
        ))
    rows.sort(key=lambda r: (-r.after_tax_benefit, r.tax_amount, r.state_code))
    logger.debug("Ranked %d jurisdictions for annual benefit %.2f", len(rows), annual_benefit)
    return rows


def rank_strategies_by_after_tax(strategies: Sequence[ClaimingStrategy]) -> List[ClaimingStrategy]:
    """Strategies ordered by after-tax lifetime value, lower lifetime tax first on ties."""
    return sorted(strategies, key=lambda s: (-s.after_tax_lifetime_benefits, s.total_tax))


def state_tax_leakage(annual_benefit: float, tax_rules: Iterable[StateTaxRule],
                      cola_rate: float = C.DEFAULT_COLA_RATE,
                      years: int = C.STATE_LEAKAGE_YEARS) -> List[StateLeakage]:
    """
    State tax paid on a COLA-growing benefit over `years`, lowest leakage first,
    with savings measured against the costliest jurisdiction in the list.
    """
    totals = []
    for rule in tax_rules:
        total = sum(
            state_tax_on_benefit(annual_benefit * cola_factor(cola_rate, yr), rule)
            for yr in range(years)
        )
        totals.append((rule, total))

    if not totals:
        return []
    worst = max(t for _, t in totals)
    rows = [
        StateLeakage(
            state=rule.state_name,
            state_code=rule.state_code,
            total_tax_leakage=round(total, 2),
            annual_average=round(total / years, 2) if years > 0 else 0.0,
            benefits_taxable=rule.benefits_taxable,
            savings_vs_worst=round(worst - total, 2),
        )
        for rule, total in totals
    ]
    rows.sort(key=lambda r: (r.total_tax_leakage, r.state_code))
    return rows
