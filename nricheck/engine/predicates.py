# nricheck/engine/predicates.py
"""
Shared boolean / threshold helpers over a questionnaire.

All helpers are pure. Unknown bucket or status strings simply fail the
check; nothing here raises for a well-typed ``QuestionnaireAnswers``.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Optional

from .rule_config import (
    ABOVE_10K_BUCKETS,
    ABOVE_50K_BUCKETS,
    FINANCIAL_ACCOUNT_ASSETS,
    FIRST_YEAR_MAX_ELAPSED,
    FOREIGN_ACCOUNT_ASSETS,
    HIGH_VALUE_BUCKETS,
    MIN_ACCOUNT_TYPES_FOR_10K,
    MIN_ASSET_TYPES_FOR_50K,
)
from .types import GREEN_CARD, H1B, US_CITIZEN, QuestionnaireAnswers

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def has_asset(answers: QuestionnaireAnswers, asset: str) -> bool:
    return asset in answers.assets


def has_any_assets(answers: QuestionnaireAnswers) -> bool:
    return len(answers.assets) > 0


def has_foreign_accounts(answers: QuestionnaireAnswers) -> bool:
    return any(a in answers.assets for a in FOREIGN_ACCOUNT_ASSETS)


def financial_account_count(answers: QuestionnaireAnswers) -> int:
    return sum(1 for a in FINANCIAL_ACCOUNT_ASSETS if a in answers.assets)


def has_income_from_india(answers: QuestionnaireAnswers) -> bool:
    # "none" is an explicit sentinel, it wins over any other tag
    return len(answers.income_types) > 0 and "none" not in answers.income_types


def has_income(answers: QuestionnaireAnswers, income: str) -> bool:
    return income in answers.income_types


def is_permanent_resident(answers: QuestionnaireAnswers) -> bool:
    return answers.us_status in (GREEN_CARD, US_CITIZEN)


def years_since_departure(answers: QuestionnaireAnswers, as_of: Optional[date] = None) -> Optional[int]:
    # Leading integer of the free-form answer ("2012", "2012-06", "2010s")
    match = _LEADING_INT.match(answers.year_left_india)
    if match is None:
        return None
    today = as_of or date.today()
    return today.year - int(match.group(1))


def is_first_year_h1b(answers: QuestionnaireAnswers, as_of: Optional[date] = None) -> bool:
    elapsed = years_since_departure(answers, as_of)
    if elapsed is None:
        return False
    return answers.us_status == H1B and elapsed <= FIRST_YEAR_MAX_ELAPSED


def aggregate_above_10k(answers: QuestionnaireAnswers) -> bool:
    """Is the combined foreign-account balance likely above the $10,000 FBAR line?"""
    for asset in FOREIGN_ACCOUNT_ASSETS:
        if answers.asset_amount(asset) in ABOVE_10K_BUCKETS:
            return True
    return financial_account_count(answers) >= MIN_ACCOUNT_TYPES_FOR_10K


def assets_above_50k(answers: QuestionnaireAnswers) -> bool:
    if any(v in ABOVE_50K_BUCKETS for v in answers.amount_buckets()):
        return True
    return len(answers.assets) >= MIN_ASSET_TYPES_FOR_50K


def has_high_value_assets(answers: QuestionnaireAnswers) -> bool:
    # INR bands count here too
    return any(v in HIGH_VALUE_BUCKETS for v in answers.amount_buckets())


def has_high_value_stocks_or_funds(answers: QuestionnaireAnswers) -> bool:
    return (
        answers.asset_amount("stocks") in ABOVE_50K_BUCKETS
        or answers.asset_amount("mutual_funds") in ABOVE_50K_BUCKETS
    )
