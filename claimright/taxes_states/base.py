# claimright/taxes_states/base.py
# Generic helpers for state taxation of Social Security benefits

from ..schema import StateTaxRule


def state_taxable_benefit(benefit: float, exemption_threshold: float = 0.0) -> float:
    """
    Portion of the benefit a state taxes: the excess over its exemption threshold.
    """
    return max(0.0, benefit - exemption_threshold)


def state_tax_on_benefit(benefit: float, rule: StateTaxRule | None) -> float:
    """
    State tax owed on a benefit amount. Zero when there is no rule or the
    jurisdiction exempts benefits. `rule.base_rate` is a fraction (0.05 for 5%).
    """
    if rule is None or not rule.benefits_taxable:
        return 0.0
    return state_taxable_benefit(benefit, rule.exemption_threshold) * rule.base_rate
