# nricheck/engine/rules/state.py
"""State-level quirks: FEIE non-conformity, limited state FTC, Washington capital gains."""
from __future__ import annotations

from ..predicates import has_asset, has_high_value_stocks_or_funds, has_income_from_india
from ..rule_config import CAPITAL_GAINS_STATE, FEIE_NON_CONFORMING_STATES, FTC_GAP_STATES
from ..types import FixDifficulty, RuleId
from .base import Rule, RuleContext, RuleText


def _feie_text(ctx: RuleContext) -> RuleText:
    st = ctx.answers.us_state
    return RuleText(
        name=f"{st} Does Not Honor FEIE",
        obligation=(
            f"{st} does not conform to the federal Foreign Earned Income Exclusion (FEIE). Even if "
            f"you exclude foreign income on your federal return using Form 2555, {st} will tax "
            "that income at the state level."
        ),
        why=(
            f"You live in {st} and have income from India. While you may exclude this from "
            "federal taxes via FEIE, your state will not honor that exclusion — you'll owe state "
            "tax on the full amount."
        ),
        consequence=(
            f"Unexpected state tax bill on income you thought was excluded. {st} state tax rates "
            "can be significant (e.g., CA up to 13.3%). Penalties and interest for underpayment "
            "if not planned for."
        ),
        fix_steps=(
            f"Review your {st} state return separately from your federal return",
            "Calculate state tax liability on Indian income that was excluded federally",
            "Consider using Foreign Tax Credit (Form 1116) instead of FEIE if it results in lower combined tax",
            "Consult a CPA familiar with your state's treatment of foreign income",
        ),
        fix_time="2-4 hours",
        fix_cost="$200-$500 (CPA consultation)",
        fix_difficulty=FixDifficulty.MODERATE,
    )


STATE_FEIE_GAP = Rule(
    rule_id=RuleId.STATE_FEIE_GAP,
    applies=lambda ctx: ctx.answers.us_state in FEIE_NON_CONFORMING_STATES
    and has_income_from_india(ctx.answers),
    text=_feie_text,
)


def _ftc_text(ctx: RuleContext) -> RuleText:
    st = ctx.answers.us_state
    return RuleText(
        name=f"{st} Limited Foreign Tax Credit",
        obligation=(
            f"{st} has limited or no foreign tax credit at the state level. Taxes paid to India "
            f"may not offset your {st} state tax liability, resulting in effective double taxation."
        ),
        why=(
            f"You live in {st} and have Indian income. While the federal foreign tax credit "
            "(Form 1116) offsets federal tax, your state may not allow a corresponding credit for "
            "taxes paid to India."
        ),
        consequence=(
            f"You may effectively pay tax on the same income to India and {st}. This can "
            "significantly increase your overall tax burden on Indian-source income."
        ),
        fix_steps=(
            f"Check {st}'s specific rules for foreign tax credits on the state tax authority website",
            "Compare total tax impact of FEIE vs FTC at both federal and state levels",
            "Structure income timing to minimize state tax impact where possible",
            "Consult a CPA who specializes in cross-border taxation in your state",
        ),
        fix_time="2-4 hours",
        fix_cost="$200-$500 (CPA consultation)",
        fix_difficulty=FixDifficulty.MODERATE,
    )


STATE_FTC_GAP = Rule(
    rule_id=RuleId.STATE_FTC_GAP,
    applies=lambda ctx: ctx.answers.us_state in FTC_GAP_STATES
    and has_income_from_india(ctx.answers),
    text=_ftc_text,
)


def _wa_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="Washington State Capital Gains Tax",
        obligation=(
            "Washington state imposes a 7% tax on capital gains exceeding $250,000 from the sale "
            "of stocks, bonds, and other capital assets. This applies to sales of Indian stocks "
            "and mutual funds."
        ),
        why=(
            "You live in Washington and have high-value Indian stocks or mutual funds. If you sell "
            "these assets with gains exceeding $250,000, you'll owe Washington's capital gains tax "
            "in addition to federal taxes."
        ),
        consequence=(
            "7% state capital gains tax on gains over $250,000. This is in addition to federal "
            "capital gains tax and any PFIC-related taxes on Indian mutual funds. Penalties for "
            "non-filing."
        ),
        fix_steps=(
            "Track cost basis of all Indian stock and mutual fund holdings",
            "Plan sales to stay under the $250,000 annual gains threshold if possible",
            "File Washington Excise Tax return if you have qualifying capital gains",
            "Consider timing of sales across tax years to minimize impact",
        ),
        fix_time="1-2 hours",
        fix_cost="$0-$300 (CPA if needed)",
        fix_difficulty=FixDifficulty.MODERATE,
    )


WA_CAPITAL_GAINS = Rule(
    rule_id=RuleId.WA_CAPITAL_GAINS,
    applies=lambda ctx: ctx.answers.us_state == CAPITAL_GAINS_STATE
    and (has_asset(ctx.answers, "stocks") or has_asset(ctx.answers, "mutual_funds"))
    and has_high_value_stocks_or_funds(ctx.answers),
    text=_wa_text,
)
