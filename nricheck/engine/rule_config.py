# nricheck/engine/rule_config.py
from .types import RuleId, Severity

# Weight multiplier for a "not_sure" answer on a rule's compliance flag.
# Policy value, calibrated by hand; keep in sync with published reports.
NOT_SURE_FACTOR = 0.7

BASELINE_SCORE = 100

SEVERITY_ORDER = {
    Severity.URGENT: 0,
    Severity.WARNING: 1,
    Severity.INFO: 2,
}

# -------------------------
# Amount buckets
# -------------------------
ABOVE_10K_BUCKETS = ("10k_50k", "50k_100k", "over_100k")
ABOVE_50K_BUCKETS = ("50k_100k", "over_100k")
HIGH_VALUE_BUCKETS = ("50k_100k", "over_100k", "50l_1cr", "over_1cr")

FOREIGN_ACCOUNT_ASSETS = ("bank_accounts", "nre_nro")
FINANCIAL_ACCOUNT_ASSETS = ("bank_accounts", "nre_nro", "ppf", "epf", "nps")

# Count fallbacks: holding this many account/asset types is taken as
# "likely above threshold" even without an explicit amount.
MIN_ACCOUNT_TYPES_FOR_10K = 2
MIN_ASSET_TYPES_FOR_50K = 3
MIN_ASSET_TYPES_FOR_REPATRIATION = 3

FIRST_YEAR_MAX_ELAPSED = 1
BIOMETRIC_REFRESH_YEARS = 10

# -------------------------
# State lists
# -------------------------
FEIE_NON_CONFORMING_STATES = ("CA", "NJ", "MA", "CT", "VA")
FTC_GAP_STATES = ("CA", "NJ", "MA", "CT", "VA", "PA", "IL", "GA")
CAPITAL_GAINS_STATE = "WA"

# -------------------------
# Per-rule policy
# -------------------------
RULE_CONFIG = {
    RuleId.FBAR: {"severity": Severity.URGENT, "weight": 20, "penalty": (10_000, 100_000)},
    RuleId.FATCA: {"severity": Severity.URGENT, "weight": 15, "penalty": (10_000, 60_000)},
    RuleId.INDIAN_ITR: {"severity": Severity.URGENT, "weight": 12, "penalty": (300, 5_000)},
    RuleId.PAN_INOPERATIVE: {"severity": Severity.WARNING, "weight": 8, "penalty": (0, 1_200)},
    RuleId.FEMA_CONVERSION: {"severity": Severity.URGENT, "weight": 10, "penalty": (600, 50_000)},
    RuleId.OCI_UPDATE: {"severity": Severity.WARNING, "weight": 5, "penalty": (0, 500)},
    RuleId.AADHAAR_BIOMETRIC: {"severity": Severity.INFO, "weight": 3, "penalty": (0, 0)},
    RuleId.TDS_CERTIFICATES: {"severity": Severity.INFO, "weight": 3, "penalty": (0, 600)},
    RuleId.REPATRIATION: {"severity": Severity.WARNING, "weight": 4, "penalty": (0, 12_000)},
    RuleId.PFIC: {
        "severity": Severity.URGENT,
        "weight": 12,
        # permanent obligation for Green Card / US Citizen
        "weight_permanent": 15,
        "penalty": (5_000, 50_000),
    },
    RuleId.DTAA_TRC: {"severity": Severity.WARNING, "weight": 4, "penalty": (0, 5_000)},
    RuleId.PROPERTY_TAX: {"severity": Severity.INFO, "weight": 3, "penalty": (0, 10_000)},
    RuleId.BANK_KYC: {"severity": Severity.WARNING, "weight": 5, "penalty": (0, 1_200)},
    RuleId.PPF_NRI: {"severity": Severity.INFO, "weight": 3, "penalty": (0, 0)},
    RuleId.LIC_PREMIUM: {"severity": Severity.WARNING, "weight": 4, "penalty": (0, 5_000)},
    RuleId.CITIZENSHIP_RENUNCIATION: {"severity": Severity.WARNING, "weight": 8, "penalty": (0, 2_500)},
    RuleId.STATE_FEIE_GAP: {"severity": Severity.WARNING, "weight": 6, "penalty": (0, 10_000)},
    RuleId.STATE_FTC_GAP: {"severity": Severity.WARNING, "weight": 5, "penalty": (0, 8_000)},
    RuleId.WA_CAPITAL_GAINS: {"severity": Severity.INFO, "weight": 4, "penalty": (0, 5_000)},
}


def get_rule_config(rule_id: RuleId) -> dict:
    return RULE_CONFIG[rule_id]
