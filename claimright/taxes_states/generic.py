# claimright/taxes_states/generic.py
# Fallback rules for jurisdictions missing from the registry.

from ..schema import StateTaxRule


def exempt_rule(state_code: str, state_name: str | None = None) -> StateTaxRule:
    """Default fallback: benefits are not taxed."""
    return StateTaxRule(state_code=state_code, state_name=state_name or state_code,
                        benefits_taxable=False)


def make_generic_flat(state_code: str, state_rate_pct: float = 0.0, exemption_threshold: float = 0.0,
                      state_name: str | None = None) -> StateTaxRule:
    """
    Rule taxing benefits above `exemption_threshold` at a flat rate.
    state_rate_pct is in PERCENT (e.g., 5.0 for 5%), as entered in the UI.
    """
    rate = float(state_rate_pct) / 100.0
    return StateTaxRule(
        state_code=state_code,
        state_name=state_name or state_code,
        benefits_taxable=rate > 0,
        exemption_threshold=float(exemption_threshold),
        base_rate=rate,
    )
