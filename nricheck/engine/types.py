# nricheck/engine/types.py
from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Tuple


class Severity(str, enum.Enum):
    URGENT = "urgent"
    WARNING = "warning"
    INFO = "info"


class FindingStatus(str, enum.Enum):
    TRIGGERED = "triggered"
    CLEAR = "clear"  # reserved: rules that did not fire produce no Finding
    NEEDS_REVIEW = "needs_review"


class FixDifficulty(str, enum.Enum):
    EASY = "easy"
    MODERATE = "moderate"
    HARD = "hard"


class TriState(str, enum.Enum):
    YES = "yes"
    NO = "no"
    NOT_SURE = "not_sure"
    UNANSWERED = ""


class RuleId(str, enum.Enum):
    FBAR = "fbar"
    FATCA = "fatca"
    INDIAN_ITR = "indian_itr"
    PAN_INOPERATIVE = "pan_inoperative"
    FEMA_CONVERSION = "fema_conversion"
    OCI_UPDATE = "oci_update"
    AADHAAR_BIOMETRIC = "aadhaar_biometric"
    TDS_CERTIFICATES = "tds_certificates"
    REPATRIATION = "repatriation"
    PFIC = "pfic"
    DTAA_TRC = "dtaa_trc"
    PROPERTY_TAX = "property_tax"
    BANK_KYC = "bank_kyc"
    PPF_NRI = "ppf_nri"
    LIC_PREMIUM = "lic_premium"
    CITIZENSHIP_RENUNCIATION = "citizenship_renunciation"
    STATE_FEIE_GAP = "state_feie_gap"
    STATE_FTC_GAP = "state_ftc_gap"
    WA_CAPITAL_GAINS = "wa_capital_gains"


# Status strings as collected by the questionnaire
H1B = "H1B"
GREEN_CARD = "Green Card"
US_CITIZEN = "US Citizen"
MARRIED_FILING_JOINTLY = "Married Filing Jointly"


# -------------------------
# Wire-name mapping (camelCase questionnaire <-> snake_case fields)
# -------------------------
WIRE_NAMES: Dict[str, str] = {
    "year_left_india": "yearLeftIndia",
    "us_status": "usStatus",
    "filing_status": "filingStatus",
    "us_state": "usState",
    "assets": "assets",
    "asset_amounts": "assetAmounts",
    "income_types": "incomeTypes",
    "income_amounts": "incomeAmounts",
    "has_pan": "hasPAN",
    "pan_linked_aadhaar": "panLinkedAadhaar",
    "has_aadhaar": "hasAadhaar",
    "has_oci": "hasOCI",
    "oci_updated_after_passport_renewal": "ociUpdatedAfterPassportRenewal",
    "surrendered_indian_passport": "surrenderedIndianPassport",
    "filed_indian_itr": "filedIndianITR",
    "filed_fbar": "filedFBAR",
    "filed_fatca": "filedFATCA",
    "reported_pfics": "reportedPFICs",
    "updated_bank_kyc": "updatedBankKYC",
    "converted_to_nro": "convertedToNRO",
}

TRI_STATE_FIELDS: Tuple[str, ...] = (
    "has_pan",
    "pan_linked_aadhaar",
    "has_aadhaar",
    "has_oci",
    "oci_updated_after_passport_renewal",
    "surrendered_indian_passport",
    "filed_indian_itr",
    "filed_fbar",
    "filed_fatca",
    "reported_pfics",
    "updated_bank_kyc",
    "converted_to_nro",
)


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_tags(value: Any) -> frozenset:
    if not value or isinstance(value, (str, Mapping)):
        return frozenset()
    return frozenset(v for v in value if isinstance(v, str))


def _as_buckets(value: Any) -> Tuple[Tuple[str, str], ...]:
    if not isinstance(value, Mapping):
        return ()
    return tuple(
        sorted((k, v) for k, v in value.items() if isinstance(k, str) and isinstance(v, str))
    )


@dataclass(frozen=True)
class QuestionnaireAnswers:
    """
    One respondent's questionnaire, immutable for the duration of an evaluation.

    Every field defaults to "unanswered", so ``QuestionnaireAnswers()`` is the
    blank questionnaire. Amount mappings are stored as sorted pairs so the
    record stays hashable; use ``asset_amount()`` to read.
    """

    year_left_india: str = ""
    us_status: str = ""
    filing_status: str = ""
    us_state: str = ""

    assets: frozenset = field(default_factory=frozenset)
    asset_amounts: Tuple[Tuple[str, str], ...] = ()

    income_types: frozenset = field(default_factory=frozenset)
    income_amounts: Tuple[Tuple[str, str], ...] = ()

    has_pan: str = ""
    pan_linked_aadhaar: str = ""
    has_aadhaar: str = ""
    has_oci: str = ""
    oci_updated_after_passport_renewal: str = ""
    surrendered_indian_passport: str = ""
    filed_indian_itr: str = ""
    filed_fbar: str = ""
    filed_fatca: str = ""
    reported_pfics: str = ""
    updated_bank_kyc: str = ""
    converted_to_nro: str = ""

    def __post_init__(self):
        # Direct construction may pass plain lists/dicts; store the hashable forms
        for name in ("assets", "income_types"):
            value = getattr(self, name)
            if not isinstance(value, frozenset):
                object.__setattr__(self, name, _as_tags(value))
        for name in ("asset_amounts", "income_amounts"):
            value = getattr(self, name)
            if isinstance(value, Mapping):
                object.__setattr__(self, name, _as_buckets(value))

    def asset_amount(self, asset: str) -> str:
        return dict(self.asset_amounts).get(asset, "")

    def amount_buckets(self) -> Tuple[str, ...]:
        return tuple(v for _, v in self.asset_amounts)

    def flag(self, name: str) -> str:
        """Tri-state value of ``name``; anything outside the four states reads as unanswered."""
        value = getattr(self, name, "")
        allowed = {t.value for t in TriState}
        return value if value in allowed else TriState.UNANSWERED.value

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "QuestionnaireAnswers":
        """Accepts the camelCase questionnaire payload or snake_case keys."""
        data = data or {}
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            wire = WIRE_NAMES[f.name]
            raw = data.get(wire, data.get(f.name))
            if f.name in ("assets", "income_types"):
                kwargs[f.name] = _as_tags(raw)
            elif f.name in ("asset_amounts", "income_amounts"):
                kwargs[f.name] = _as_buckets(raw)
            else:
                kwargs[f.name] = _as_str(raw)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("assets", "income_types"):
                value = sorted(value)
            elif f.name in ("asset_amounts", "income_amounts"):
                value = dict(value)
            out[WIRE_NAMES[f.name]] = value
        return out


@dataclass(frozen=True)
class Finding:
    rule_id: RuleId
    rule_name: str
    severity: Severity
    status: FindingStatus
    score_weight: float
    penalty_min_usd: int
    penalty_max_usd: int
    obligation_summary: str
    why_applies: str
    consequence: str
    fix_steps: Tuple[str, ...]
    fix_time: str
    fix_cost: str
    fix_difficulty: FixDifficulty

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rule_id": self.rule_id.value,
            "rule_name": self.rule_name,
            "severity": self.severity.value,
            "status": self.status.value,
            "score_weight": self.score_weight,
            "penalty_min_usd": self.penalty_min_usd,
            "penalty_max_usd": self.penalty_max_usd,
            "obligation_summary": self.obligation_summary,
            "why_applies": self.why_applies,
            "consequence": self.consequence,
            "fix_steps": list(self.fix_steps),
            "fix_time": self.fix_time,
            "fix_cost": self.fix_cost,
            "fix_difficulty": self.fix_difficulty.value,
        }


@dataclass(frozen=True)
class EngineOutput:
    score: int
    total_penalty_min: int
    total_penalty_max: int
    results: Tuple[Finding, ...] = ()

    def find(self, rule_id: RuleId) -> Finding | None:
        return next((r for r in self.results if r.rule_id == rule_id), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "totalPenaltyMin": self.total_penalty_min,
            "totalPenaltyMax": self.total_penalty_max,
            "results": [r.to_dict() for r in self.results],
        }
