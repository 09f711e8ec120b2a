# nricheck/engine/questions.py
from __future__ import annotations

from typing import Callable, List, Tuple

from .predicates import (
    financial_account_count,
    has_any_assets,
    has_asset,
    has_foreign_accounts,
    has_income_from_india,
)
from .rule_config import MIN_ACCOUNT_TYPES_FOR_10K
from .types import US_CITIZEN, WIRE_NAMES, QuestionnaireAnswers, TriState

YES = TriState.YES.value


def _always(_: QuestionnaireAnswers) -> bool:
    return True


# (answer field, show-when) in the order the questionnaire asks them
QUESTION_GATES: Tuple[Tuple[str, Callable[[QuestionnaireAnswers], bool]], ...] = (
    ("has_pan", _always),
    ("has_aadhaar", _always),
    ("pan_linked_aadhaar", lambda a: a.flag("has_pan") == YES and a.flag("has_aadhaar") == YES),
    ("has_oci", lambda a: a.us_status == US_CITIZEN),
    (
        "oci_updated_after_passport_renewal",
        lambda a: a.us_status == US_CITIZEN and a.flag("has_oci") == YES,
    ),
    ("surrendered_indian_passport", lambda a: a.us_status == US_CITIZEN),
    ("filed_indian_itr", lambda a: has_any_assets(a) or has_income_from_india(a)),
    ("filed_fbar", lambda a: has_foreign_accounts(a) or financial_account_count(a) >= MIN_ACCOUNT_TYPES_FOR_10K),
    ("filed_fatca", has_any_assets),
    ("reported_pfics", lambda a: has_asset(a, "mutual_funds")),
    ("updated_bank_kyc", has_foreign_accounts),
    ("converted_to_nro", lambda a: has_asset(a, "bank_accounts")),
)


def applicable_questions(answers: QuestionnaireAnswers) -> List[str]:
    """Wire keys of the yes/no questions worth asking given the answers so far."""
    return [WIRE_NAMES[name] for name, show in QUESTION_GATES if show(answers)]
