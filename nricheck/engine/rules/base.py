# nricheck/engine/rules/base.py
from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Optional, Tuple, Union

from ..rule_config import NOT_SURE_FACTOR, get_rule_config
from ..types import (
    Finding,
    FindingStatus,
    FixDifficulty,
    QuestionnaireAnswers,
    RuleId,
    TriState,
)


@dataclass(frozen=True)
class RuleContext:
    answers: QuestionnaireAnswers
    as_of: date
    flag_value: str = ""

    @property
    def unsure(self) -> bool:
        return self.flag_value == TriState.NOT_SURE.value

    def either(self, when_no: str, when_unsure: str) -> str:
        """Pick the phrasing for a "no" vs "not_sure" answer on the rule's flag."""
        return when_unsure if self.unsure else when_no


@dataclass(frozen=True)
class RuleText:
    name: str
    obligation: str
    why: str
    consequence: str
    fix_steps: Tuple[str, ...]
    fix_time: str
    fix_cost: str
    fix_difficulty: FixDifficulty


Gate = Callable[[RuleContext], bool]
TextBuilder = Callable[[RuleContext], RuleText]


@dataclass(frozen=True)
class Caveat:
    """Optional sentence appended to ``why_applies`` when ``when`` holds."""

    text: Union[str, Callable[[RuleContext], str]]
    when: Gate

    def render(self, ctx: RuleContext) -> str:
        if not self.when(ctx):
            return ""
        return self.text(ctx) if callable(self.text) else self.text


@dataclass(frozen=True)
class Rule:
    """
    Declarative rule: applicability gate + optional compliance flag + content.

    Flag semantics (when ``flag`` names a tri-state answer):
      - "yes"       -> compliant, no Finding
      - "no"        -> full weight, status "triggered"
      - "not_sure"  -> weight * NOT_SURE_FACTOR, status "needs_review"
      - "" / other  -> not yet answered, no Finding

    Rules without a flag are advisory: they fire at full weight with
    status "needs_review" whenever the gate holds.
    """

    rule_id: RuleId
    applies: Gate
    text: TextBuilder
    flag: Optional[str] = None
    caveats: Tuple[Caveat, ...] = ()
    weight: Optional[Callable[[RuleContext], float]] = None

    @property
    def config(self) -> dict:
        return get_rule_config(self.rule_id)

    def base_weight(self, ctx: RuleContext) -> float:
        if self.weight is not None:
            return self.weight(ctx)
        return self.config["weight"]

    def evaluate(self, answers: QuestionnaireAnswers, as_of: Optional[date] = None) -> Optional[Finding]:
        ctx = RuleContext(answers=answers, as_of=as_of or date.today())
        if not self.applies(ctx):
            return None

        status = FindingStatus.NEEDS_REVIEW
        if self.flag is not None:
            value = answers.flag(self.flag)
            if value == TriState.NO.value:
                status = FindingStatus.TRIGGERED
            elif value != TriState.NOT_SURE.value:
                return None
            ctx = replace(ctx, flag_value=value)

        weight = self.base_weight(ctx)
        if ctx.unsure:
            weight = weight * NOT_SURE_FACTOR

        text = self.text(ctx)
        why = text.why + "".join(c.render(ctx) for c in self.caveats)
        penalty_min, penalty_max = self.config["penalty"]

        return Finding(
            rule_id=self.rule_id,
            rule_name=text.name,
            severity=self.config["severity"],
            status=status,
            score_weight=weight,
            penalty_min_usd=penalty_min,
            penalty_max_usd=penalty_max,
            obligation_summary=text.obligation,
            why_applies=why,
            consequence=text.consequence,
            fix_steps=tuple(text.fix_steps),
            fix_time=text.fix_time,
            fix_cost=text.fix_cost,
            fix_difficulty=text.fix_difficulty,
        )
