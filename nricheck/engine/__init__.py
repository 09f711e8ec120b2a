# nricheck/engine/__init__.py
from .types import EngineOutput, Finding, FindingStatus, QuestionnaireAnswers, RuleId, Severity
from .scoring import compliance_score, run_rules_engine
from .rules import DEFAULT_RULES, RULES_BY_ID
from .questions import applicable_questions
