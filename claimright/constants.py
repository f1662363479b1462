# claimright/constants.py
# Canonical rates, thresholds and ages. Every other module imports from here.

# Claiming window (SSA)
MIN_CLAIMING_AGE = 62
MAX_CLAIMING_AGE = 70
DEFAULT_REFERENCE_AGE = 67  # FRA for anyone born 1960 or later

# Own-record adjustment
DELAYED_CREDIT_RATE = 0.08             # per year past FRA
EARLY_TIER_MONTHS = 36
EARLY_REDUCTION_FIRST_36 = (5 / 9) / 100   # per month
EARLY_REDUCTION_AFTER_36 = (5 / 12) / 100  # per month

# Spousal benefit
SPOUSAL_SHARE = 0.5
SPOUSAL_REDUCTION_FIRST_36 = (25 / 36) / 100
SPOUSAL_REDUCTION_AFTER_36 = (5 / 12) / 100

# Survivor benefit claimed before the survivor's own FRA
SURVIVOR_MIN_AGE = 60
SURVIVOR_REDUCTION_PER_MONTH = 0.00396
SURVIVOR_REDUCTION_FLOOR = 0.715

# COLA
DEFAULT_COLA_RATE = 0.0254

# Federal taxation of benefits (IRS Pub. 915): (base amount, adjusted base amount)
SS_PROVISIONAL_THRESHOLDS = {
    "MFJ": (32_000, 44_000),
    "SINGLE": (25_000, 34_000),
    "HOH": (25_000, 34_000),
    "MFS": (0, 0),
}
FILING_STATUSES = tuple(SS_PROVISIONAL_THRESHOLDS)
SS_TIER1_INCLUSION = 0.50
SS_TIER2_INCLUSION = 0.85
DEFAULT_FEDERAL_MARGINAL_RATE = 0.22
DEFAULT_OTHER_INCOME = 30_000.0  # simplified non-benefit income for the after-tax hook

# Strategy search / comparison
LIFETIME_WEIGHT = 0.6
SURVIVOR_WEIGHT = 0.4
LARGE_ADVANTAGE_THRESHOLD = 100_000.0
NEVER_BREAK_EVEN_AGE = 100
STATE_LEAKAGE_YEARS = 30

RULES_VERSION = "2026.v1"
