# claimright/taxes_states/registry.py
# Registry of state rules for taxing Social Security benefits (2026 law).
import logging

from ..schema import StateTaxRule
from . import generic

logger = logging.getLogger(__name__)

STATE_NAMES = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas", "CA": "California",
    "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware", "DC": "District of Columbia",
    "FL": "Florida", "GA": "Georgia", "HI": "Hawaii", "ID": "Idaho", "IL": "Illinois",
    "IN": "Indiana", "IA": "Iowa", "KS": "Kansas", "KY": "Kentucky", "LA": "Louisiana",
    "ME": "Maine", "MD": "Maryland", "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota",
    "MS": "Mississippi", "MO": "Missouri", "MT": "Montana", "NE": "Nebraska", "NV": "Nevada",
    "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico", "NY": "New York",
    "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio", "OK": "Oklahoma", "OR": "Oregon",
    "PA": "Pennsylvania", "RI": "Rhode Island", "SC": "South Carolina", "SD": "South Dakota",
    "TN": "Tennessee", "TX": "Texas", "UT": "Utah", "VT": "Vermont", "VA": "Virginia",
    "WA": "Washington", "WV": "West Virginia", "WI": "Wisconsin", "WY": "Wyoming",
}

# States that still tax benefits: (joint exemption threshold, rate as a fraction).
# West Virginia dropped off this list in 2026.
TAXING_STATES = {
    "MN": (108_480, 0.0985),
    "CT": (100_000, 0.0699),
    "MT": (32_000, 0.0675),
    "NM": (150_000, 0.059),
    "RI": (119_750, 0.0599),
    "UT": (75_000, 0.0495),
    "VT": (65_000, 0.0875),
}

NO_INCOME_TAX_STATES = ("AK", "FL", "NV", "NH", "SD", "TN", "TX", "WA", "WY")


def _build_registry(taxing: dict = TAXING_STATES,
                    no_income_tax: tuple = NO_INCOME_TAX_STATES) -> dict[str, StateTaxRule]:
    overlap = sorted(set(taxing) & set(no_income_tax))
    if overlap:
        raise ValueError(f"States without an income tax cannot tax benefits: {overlap}")
    reg = {}
    for code, name in STATE_NAMES.items():
        if code in taxing:
            threshold, rate = taxing[code]
            reg[code] = StateTaxRule(code, name, benefits_taxable=True,
                                     exemption_threshold=float(threshold), base_rate=rate)
        else:
            reg[code] = generic.exempt_rule(code, name)
    return reg


REGISTRY = _build_registry()


def get_state_rule(state_code: str, state_rate: float | None = None,
                   exemption_threshold: float = 0.0) -> StateTaxRule:
    """
    Return the benefit-tax rule for a jurisdiction.
    - Registered states return their table entry.
    - Otherwise fall back to a flat rule using the provided percentage, or an
      exempt rule when no rate is given.
    """
    sc = (state_code or "").upper()
    if sc in REGISTRY:
        return REGISTRY[sc]

    logger.warning("No benefit-tax rule registered for %r; using generic fallback", sc)
    if state_rate:
        return generic.make_generic_flat(sc, state_rate, exemption_threshold)
    return generic.exempt_rule(sc)


def all_state_rules() -> list[StateTaxRule]:
    return [REGISTRY[code] for code in sorted(REGISTRY)]
