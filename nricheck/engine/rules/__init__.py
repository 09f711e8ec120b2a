from .base import Caveat, Rule, RuleContext, RuleText
from .federal import DTAA_TRC, FATCA, FBAR, PFIC, TDS_CERTIFICATES
from .india import (
    AADHAAR_BIOMETRIC,
    BANK_KYC,
    CITIZENSHIP_RENUNCIATION,
    FEMA_CONVERSION,
    INDIAN_ITR,
    LIC_PREMIUM,
    OCI_UPDATE,
    PAN_INOPERATIVE,
    PPF_NRI,
    PROPERTY_TAX,
    REPATRIATION,
)
from .state import STATE_FEIE_GAP, STATE_FTC_GAP, WA_CAPITAL_GAINS

# Declaration order is the tie-break for findings of equal severity and weight.
DEFAULT_RULES = (
    FBAR,
    FATCA,
    INDIAN_ITR,
    PAN_INOPERATIVE,
    FEMA_CONVERSION,
    OCI_UPDATE,
    AADHAAR_BIOMETRIC,
    TDS_CERTIFICATES,
    REPATRIATION,
    PFIC,
    DTAA_TRC,
    PROPERTY_TAX,
    BANK_KYC,
    PPF_NRI,
    LIC_PREMIUM,
    CITIZENSHIP_RENUNCIATION,
    STATE_FEIE_GAP,
    STATE_FTC_GAP,
    WA_CAPITAL_GAINS,
)

RULES_BY_ID = {rule.rule_id: rule for rule in DEFAULT_RULES}
