# claimright/schema.py
# Value objects for claimants, households, assumptions and strategy results.

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

from . import constants as C


class SurvivorPolicy(Enum):
    AT_OWN_CLAIM = "at_own_claim"      # survivor benefit starts no earlier than the survivor's own claim
    EARLY_SURVIVOR = "early_survivor"  # survivor may draw a reduced survivor benefit from age 60


@dataclass(frozen=True)
class Claimant:
    base_pia: float
    reference_age: float
    current_age: int
    life_expectancy_age: int

    def __post_init__(self):
        if self.base_pia < 0:
            raise ValueError(f"base_pia must be >= 0, got {self.base_pia}")


@dataclass(frozen=True)
class StateTaxRule:
    state_code: str
    state_name: str
    benefits_taxable: bool
    exemption_threshold: float = 0.0
    base_rate: float = 0.0  # fraction, e.g. 0.0535


@dataclass(frozen=True)
class HouseholdParams:
    primary: Claimant
    spouse: Optional[Claimant] = None
    is_married: bool = False
    cola_rate: float = C.DEFAULT_COLA_RATE
    filing_status: str = "SINGLE"
    tax_rule: Optional[StateTaxRule] = None

    def __post_init__(self):
        fs = (self.filing_status or "").upper()
        if fs not in C.FILING_STATUSES:
            raise ValueError(f"Unknown filing status {self.filing_status!r}; expected one of {C.FILING_STATUSES}")
        object.__setattr__(self, "filing_status", fs)


@dataclass(frozen=True)
class Assumptions:
    rules_version: str = C.RULES_VERSION
    min_claiming_age: int = C.MIN_CLAIMING_AGE
    max_claiming_age: int = C.MAX_CLAIMING_AGE
    delayed_credit_rate: float = C.DELAYED_CREDIT_RATE
    other_income: float = C.DEFAULT_OTHER_INCOME
    federal_marginal_rate: float = C.DEFAULT_FEDERAL_MARGINAL_RATE
    never_age: int = C.NEVER_BREAK_EVEN_AGE
    lifetime_weight: float = C.LIFETIME_WEIGHT
    survivor_weight: float = C.SURVIVOR_WEIGHT
    large_advantage_threshold: float = C.LARGE_ADVANTAGE_THRESHOLD
    survivor_policy: SurvivorPolicy = SurvivorPolicy.AT_OWN_CLAIM
    max_workers: Optional[int] = None


DEFAULT_ASSUMPTIONS = Assumptions()


@dataclass(frozen=True)
class SpousalResolution:
    own_benefit: float
    spousal_benefit: float
    uses_spousal: bool

    @property
    def received(self) -> float:
        return max(self.own_benefit, self.spousal_benefit)


@dataclass(frozen=True)
class YearlyBenefitRecord:
    age: int
    spouse_age: Optional[int]
    primary_benefit: float
    spouse_benefit: float
    total_benefit: float
    cumulative_benefit: float
    after_tax_benefit: float
    is_survivor_active: bool

    def rounded(self) -> "YearlyBenefitRecord":
        return replace(
            self,
            primary_benefit=round(self.primary_benefit, 2),
            spouse_benefit=round(self.spouse_benefit, 2),
            total_benefit=round(self.total_benefit, 2),
            cumulative_benefit=round(self.cumulative_benefit, 2),
            after_tax_benefit=round(self.after_tax_benefit, 2),
        )


@dataclass(frozen=True)
class MonthlyBenefit:
    primary: float
    spouse: float

    @property
    def combined(self) -> float:
        return self.primary + self.spouse


@dataclass(frozen=True)
class ClaimingStrategy:
    name: str
    description: str
    primary_claiming_age: float
    spouse_claiming_age: Optional[float]
    monthly_benefit_at_claim: MonthlyBenefit
    lifetime_benefits: float
    after_tax_lifetime_benefits: float
    benefits_by_age: Tuple[YearlyBenefitRecord, ...] = ()
    break_even_age: int = 0  # 0 until compared against a baseline

    @property
    def annual_benefit_at_claim(self) -> float:
        return self.monthly_benefit_at_claim.combined * 12

    @property
    def survivor_benefits(self) -> float:
        """Total household benefit paid in survivor-active years."""
        return sum(r.total_benefit for r in self.benefits_by_age if r.is_survivor_active)

    @property
    def total_tax(self) -> float:
        return self.lifetime_benefits - self.after_tax_lifetime_benefits

    def rounded(self) -> "ClaimingStrategy":
        return replace(
            self,
            monthly_benefit_at_claim=MonthlyBenefit(
                primary=round(self.monthly_benefit_at_claim.primary, 2),
                spouse=round(self.monthly_benefit_at_claim.spouse, 2),
            ),
            lifetime_benefits=round(self.lifetime_benefits, 2),
            after_tax_lifetime_benefits=round(self.after_tax_lifetime_benefits, 2),
            benefits_by_age=tuple(r.rounded() for r in self.benefits_by_age),
        )


@dataclass(frozen=True)
class OptimalAdvantage:
    vs_earliest: float
    vs_balanced: float
    break_even_vs_earliest: int


@dataclass(frozen=True)
class StrategyComparisonResult:
    earliest: ClaimingStrategy
    balanced: ClaimingStrategy
    optimal: ClaimingStrategy
    optimal_advantage: OptimalAdvantage
    recommendation: str
    custom_strategy: Optional[ClaimingStrategy] = None

    @property
    def strategies(self) -> Tuple[ClaimingStrategy, ...]:
        base = (self.earliest, self.balanced, self.optimal)
        return base + ((self.custom_strategy,) if self.custom_strategy else ())


@dataclass(frozen=True)
class CoupleOptimization:
    best_strategy: ClaimingStrategy
    explanation: str
    best_score: float
    all_strategies: Tuple[ClaimingStrategy, ...] = field(default_factory=tuple)

    @property
    def total_combinations(self) -> int:
        return len(self.all_strategies)

    @property
    def best_survivor_benefit(self) -> float:
        return self.best_strategy.survivor_benefits

    @property
    def best_cumulative_income(self) -> float:
        return self.best_strategy.lifetime_benefits
