# nricheck/engine/scoring.py
from __future__ import annotations

import math
from datetime import date
from typing import Iterable, List, Optional

from .rule_config import BASELINE_SCORE, SEVERITY_ORDER
from .rules import DEFAULT_RULES, Rule
from .types import EngineOutput, Finding, QuestionnaireAnswers


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compliance_score(total_weight: float) -> int:
    """
    Baseline minus accumulated weight, floored at 0.

    Documented in one place so the client view and the server-side report
    always agree on the number.
    """
    return max(0, round_half_up(BASELINE_SCORE - total_weight))


def sort_findings(findings: Iterable[Finding]) -> List[Finding]:
    # urgent -> warning -> info, heavier first within a tier; sorted() is stable
    return sorted(findings, key=lambda f: (SEVERITY_ORDER[f.severity], -f.score_weight))


def run_rules_engine(
    answers: QuestionnaireAnswers,
    rules: Iterable[Rule] = DEFAULT_RULES,
    as_of: Optional[date] = None,
) -> EngineOutput:
    as_of = as_of or date.today()

    findings: List[Finding] = []
    total_weight = 0.0
    penalty_min = 0
    penalty_max = 0

    for rule in rules:
        finding = rule.evaluate(answers, as_of)
        if finding is None:
            continue
        findings.append(finding)
        total_weight += finding.score_weight
        penalty_min += finding.penalty_min_usd
        penalty_max += finding.penalty_max_usd

    return EngineOutput(
        score=compliance_score(total_weight),
        total_penalty_min=penalty_min,
        total_penalty_max=penalty_max,
        results=tuple(sort_findings(findings)),
    )
