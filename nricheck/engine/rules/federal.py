# nricheck/engine/rules/federal.py
"""US federal reporting obligations: FBAR, FATCA, PFIC, DTAA residency, TDS credits."""
from __future__ import annotations

from ..predicates import (
    aggregate_above_10k,
    assets_above_50k,
    has_any_assets,
    has_asset,
    has_foreign_accounts,
    has_income,
    has_income_from_india,
    is_first_year_h1b,
    is_permanent_resident,
)
from ..rule_config import get_rule_config
from ..types import GREEN_CARD, MARRIED_FILING_JOINTLY, FixDifficulty, RuleId
from .base import Caveat, Rule, RuleContext, RuleText


# -------------------------
# FBAR (FinCEN 114)
# -------------------------
def _fbar_text(ctx: RuleContext) -> RuleText:
    held = "Indian bank accounts" if has_asset(ctx.answers, "bank_accounts") else "NRE/NRO accounts"
    return RuleText(
        name="FBAR Filing (FinCEN 114)",
        obligation=(
            "US persons must report foreign bank accounts if the aggregate value "
            "exceeds $10,000 at any time during the year."
        ),
        why=f"You indicated you have {held} and "
        + ctx.either("have not filed FBAR", "are unsure if you've filed FBAR")
        + ".",
        consequence=(
            "Civil penalties start at $10,000 per account per year for non-willful violations. "
            "Willful violations can reach $100,000 or 50% of account balance, whichever is greater. "
            "Criminal penalties possible."
        ),
        fix_steps=(
            "Gather statements for ALL Indian bank accounts (savings, FD, NRE, NRO, PPF, etc.)",
            "Calculate the maximum balance in each account during the year (convert INR to USD using Treasury rate)",
            "File FinCEN Form 114 electronically at https://bsaefiling.fincen.treas.gov/",
            "If filing late, use the IRS Streamlined Filing Compliance Procedures to avoid penalties",
            "File for all delinquent years (no statute of limitations on FBAR)",
        ),
        fix_time="2-4 hours (per year)",
        fix_cost="$0 (self-file) or $500-$2,000 (CPA)",
        fix_difficulty=FixDifficulty.MODERATE,
    )


RESIDENCY_TEST_CAVEAT = (
    " Note: As a first-year H1B holder, you may not meet the Substantial Presence Test yet. "
    "However, if you elected to be treated as a resident for the full year (e.g., for filing "
    "jointly), FBAR still applies."
)

FBAR = Rule(
    rule_id=RuleId.FBAR,
    applies=lambda ctx: has_foreign_accounts(ctx.answers) or aggregate_above_10k(ctx.answers),
    flag="filed_fbar",
    text=_fbar_text,
    caveats=(
        Caveat(RESIDENCY_TEST_CAVEAT, when=lambda ctx: is_first_year_h1b(ctx.answers, ctx.as_of)),
    ),
)


# -------------------------
# FATCA (Form 8938)
# -------------------------
def _fatca_text(ctx: RuleContext) -> RuleText:
    joint = ctx.answers.filing_status == MARRIED_FILING_JOINTLY
    year_end = "$100,000 (married filing jointly)" if joint else "$50,000 (single/MFS)"
    any_time = "$200,000" if joint else "$75,000"
    threshold = "$100,000 MFJ" if joint else "$50,000"
    return RuleText(
        name="FATCA Form 8938",
        obligation=(
            f"US taxpayers with foreign financial assets exceeding {year_end} at year-end "
            f"(or {any_time} at any time) must file Form 8938 with their tax return."
        ),
        why="You have Indian financial assets and "
        + ctx.either("have not filed Form 8938", "are unsure if you've filed Form 8938")
        + f". Based on your assets, you likely exceed the {threshold} filing threshold.",
        consequence=(
            "$10,000 penalty for failure to file. Additional $10,000 for each 30 days of "
            "non-filing after IRS notice, up to $60,000. 40% penalty on understatement of tax "
            "related to undisclosed assets."
        ),
        fix_steps=(
            "List all Indian financial assets: bank accounts, mutual funds, stocks, insurance policies with cash value, etc.",
            "Determine the maximum value during the year and the year-end value for each asset",
            "Complete IRS Form 8938 and attach to your annual tax return (Form 1040)",
            "If filing late, include with an amended return or use Streamlined Procedures",
        ),
        fix_time="3-6 hours",
        fix_cost="$0 (self-file) or $500-$3,000 (CPA)",
        fix_difficulty=FixDifficulty.MODERATE,
    )


FATCA = Rule(
    rule_id=RuleId.FATCA,
    applies=lambda ctx: has_any_assets(ctx.answers) and assets_above_50k(ctx.answers),
    flag="filed_fatca",
    text=_fatca_text,
)


# -------------------------
# PFIC (Form 8621)
# -------------------------
def _pfic_weight(ctx: RuleContext) -> float:
    cfg = get_rule_config(RuleId.PFIC)
    return cfg["weight_permanent"] if is_permanent_resident(ctx.answers) else cfg["weight"]


def _pfic_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="PFIC Reporting (Form 8621)",
        obligation=(
            "Indian mutual funds are classified as PFICs (Passive Foreign Investment Companies) "
            "by the IRS and must be reported on Form 8621 — one form per fund."
        ),
        why="You hold Indian mutual funds and "
        + ctx.either("have not reported them as PFICs", "are unsure if they've been reported")
        + ". Each fund requires a separate Form 8621.",
        consequence=(
            "Punitive 'excess distribution' tax regime applies — gains taxed at highest marginal "
            "rate + interest. No long-term capital gains benefit. $10,000+ penalties for non-filing."
        ),
        fix_steps=(
            "List all Indian mutual fund holdings (direct and regular plans count separately)",
            "Obtain annual statements showing NAV on Jan 1 and Dec 31, plus all distributions",
            "File Form 8621 for EACH fund — consider QEF or Mark-to-Market election",
            "Strongly recommend engaging a CPA experienced with PFICs",
            "Consider liquidating Indian MFs and re-investing in US-domiciled funds to avoid ongoing PFIC pain",
        ),
        fix_time="4-10 hours (depends on number of funds)",
        fix_cost="$200-$500 per fund (CPA fees)",
        fix_difficulty=FixDifficulty.HARD,
    )


PFIC = Rule(
    rule_id=RuleId.PFIC,
    applies=lambda ctx: has_asset(ctx.answers, "mutual_funds"),
    flag="reported_pfics",
    text=_pfic_text,
    weight=_pfic_weight,
    caveats=(
        Caveat(
            lambda ctx: (
                f" As a {ctx.answers.us_status} holder, PFIC reporting is a permanent annual "
                "obligation — it does not end when you leave the US."
            ),
            when=lambda ctx: is_permanent_resident(ctx.answers),
        ),
        Caveat(
            " As an H1B holder, this obligation lasts as long as you are a US tax resident.",
            when=lambda ctx: not is_permanent_resident(ctx.answers),
        ),
    ),
)


# -------------------------
# DTAA Tax Residency Certificate
# -------------------------
def _dtaa_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="DTAA Tax Residency Certificate",
        obligation=(
            "To claim benefits under the India-US Double Taxation Avoidance Agreement (DTAA), "
            "you need a Tax Residency Certificate (TRC) from the US."
        ),
        why=(
            "You have income from India. Without a TRC, you may end up paying tax in both "
            "countries on the same income without relief."
        ),
        consequence=(
            "Double taxation on Indian income. Higher TDS rates in India (30% instead of treaty "
            "rates). Cannot claim beneficial DTAA rates for interest, dividends, or capital gains."
        ),
        fix_steps=(
            "Obtain IRS Form 6166 (US Tax Residency Certificate) — apply via IRS website",
            "Pay the $85 fee and wait 4-6 weeks for processing",
            "Submit TRC to Indian tax authorities/banks/tenants to claim lower TDS rates",
            "File Form 10F on the Indian income tax portal along with TRC",
            "Claim foreign tax credit on US return using Form 1116",
        ),
        fix_time="1 hour (application) + 4-6 weeks (processing)",
        fix_cost="$85 (IRS fee) + CPA fees if needed",
        fix_difficulty=FixDifficulty.MODERATE,
    )


DUAL_RESIDENCY_CAVEAT = (
    " Important: As a Green Card holder, you may face dual-residency issues under the DTAA "
    "tie-breaker rules (Article 4). Ensure you can establish US tax residency clearly to claim "
    "treaty benefits."
)

DTAA_TRC = Rule(
    rule_id=RuleId.DTAA_TRC,
    applies=lambda ctx: has_income_from_india(ctx.answers),
    text=_dtaa_text,
    caveats=(
        Caveat(DUAL_RESIDENCY_CAVEAT, when=lambda ctx: ctx.answers.us_status == GREEN_CARD),
    ),
)


# -------------------------
# TDS certificates (Form 16A)
# -------------------------
def _tds_text(ctx: RuleContext) -> RuleText:
    kinds = [k for k in ("interest", "rental") if has_income(ctx.answers, k)]
    return RuleText(
        name="TDS Certificates (Form 16A)",
        obligation=(
            "TDS deducted on Indian income should be documented via Form 16A. NRIs face higher "
            "TDS rates and need certificates to claim DTAA benefits."
        ),
        why=(
            f"You have {' and '.join(kinds)} income from India which attracts TDS. "
            "You need certificates to claim credit on your US return."
        ),
        consequence=(
            "Cannot claim foreign tax credit on US return without documentation. May pay double "
            "tax on the same income. NRI TDS rate is 30% on many income types."
        ),
        fix_steps=(
            "Request Form 16A from banks/tenants for each financial year",
            "Download Form 26AS from the Indian income tax portal to verify TDS credits",
            "Use these certificates when filing US taxes to claim foreign tax credit (Form 1116)",
            "If TDS was deducted at rates higher than DTAA rates, apply for a lower TDS certificate (Section 197)",
        ),
        fix_time="1-2 hours",
        fix_cost="$0",
        fix_difficulty=FixDifficulty.EASY,
    )


TDS_CERTIFICATES = Rule(
    rule_id=RuleId.TDS_CERTIFICATES,
    applies=lambda ctx: has_income_from_india(ctx.answers)
    and (has_income(ctx.answers, "interest") or has_income(ctx.answers, "rental")),
    text=_tds_text,
)
