# nricheck/schemas.py
from __future__ import annotations

from datetime import datetime
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field, ConfigDict, field_validator

from .engine.types import QuestionnaireAnswers


class QuestionnaireIn(BaseModel):
    """
    Questionnaire as posted by the client (camelCase keys).

    Only shapes are checked here; enum-like values stay plain strings so an
    unknown status or bucket reaches the engine, which treats it as
    "condition not met".
    """

    model_config = ConfigDict(extra="ignore")

    yearLeftIndia: str = ""
    usStatus: str = ""
    filingStatus: str = ""
    usState: str = ""

    assets: List[str] = Field(default_factory=list)
    assetAmounts: Dict[str, str] = Field(default_factory=dict)

    incomeTypes: List[str] = Field(default_factory=list)
    incomeAmounts: Dict[str, str] = Field(default_factory=dict)

    hasPAN: str = ""
    panLinkedAadhaar: str = ""
    hasAadhaar: str = ""
    hasOCI: str = ""
    ociUpdatedAfterPassportRenewal: str = ""
    surrenderedIndianPassport: str = ""
    filedIndianITR: str = ""
    filedFBAR: str = ""
    filedFATCA: str = ""
    reportedPFICs: str = ""
    updatedBankKYC: str = ""
    convertedToNRO: str = ""

    @field_validator("yearLeftIndia", mode="before")
    @classmethod
    def _coerce_year(cls, v: Any):
        if v is None:
            return ""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    def to_answers(self) -> QuestionnaireAnswers:
        return QuestionnaireAnswers.from_dict(self.model_dump())


class ReportRequest(BaseModel):
    # presence is checked in the route so the error text matches the client contract
    email: Optional[str] = None
    quizAnswers: Optional[QuestionnaireIn] = None


class FindingOut(BaseModel):
    rule_id: str
    rule_name: str
    severity: str
    status: str
    score_weight: float
    penalty_min_usd: int
    penalty_max_usd: int
    obligation_summary: str
    why_applies: str
    consequence: str
    fix_steps: List[str] = Field(default_factory=list)
    fix_time: str
    fix_cost: str
    fix_difficulty: str


class AssessmentResponse(BaseModel):
    score: int = Field(..., ge=0, le=100)
    totalPenaltyMin: int
    totalPenaltyMax: int
    results: List[FindingOut] = Field(default_factory=list)
    rulesetVersion: Optional[str] = None


class QuestionsResponse(BaseModel):
    questions: List[str] = Field(default_factory=list)


class ReportSubmitResponse(BaseModel):
    success: bool
    reportId: Optional[str] = None


class ReportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    quiz_answers: Dict[str, Any] = Field(default_factory=dict)
    score: int
    total_penalty_min: int
    total_penalty_max: int
    results: List[FindingOut] = Field(default_factory=list)
    urgent_count: int = 0
    warning_count: int = 0
    info_count: int = 0
    ruleset_version: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("results", mode="before")
    @classmethod
    def _coerce_list(cls, v: Any):
        if v is None:
            return []
        if isinstance(v, list):
            return v
        return []
