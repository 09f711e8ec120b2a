# nricheck/engine/rules/india.py
"""Obligations on the Indian side: tax filing, identity documents, FEMA/bank status, holdings."""
from __future__ import annotations

from ..predicates import (
    has_any_assets,
    has_asset,
    has_foreign_accounts,
    has_high_value_assets,
    has_income_from_india,
    years_since_departure,
)
from ..rule_config import BIOMETRIC_REFRESH_YEARS, MIN_ASSET_TYPES_FOR_REPATRIATION
from ..types import GREEN_CARD, US_CITIZEN, FixDifficulty, RuleId, TriState
from .base import Caveat, Rule, RuleContext, RuleText

YES = TriState.YES.value
NO = TriState.NO.value


# -------------------------
# Indian Income Tax Return
# -------------------------
def _itr_text(ctx: RuleContext) -> RuleText:
    source = (
        "income from India"
        if has_income_from_india(ctx.answers)
        else "Indian assets that may generate taxable income"
    )
    return RuleText(
        name="Indian Income Tax Return",
        obligation=(
            "NRIs earning above the basic exemption limit from Indian sources must file an "
            "Indian Income Tax Return."
        ),
        why=f"You have {source} and "
        + ctx.either("have not filed Indian ITR since becoming NRI", "are unsure if you've filed")
        + ".",
        consequence=(
            "Late filing fee up to Rs 10,000. Interest at 1% per month on outstanding tax. "
            "Penalty up to 300% of tax evaded in extreme cases. Cannot carry forward losses."
        ),
        fix_steps=(
            "Determine your NRI status under Indian tax law (Section 6)",
            "Calculate Indian-source income (rent, interest, capital gains, etc.)",
            "File ITR-2 or ITR-3 on the Indian Income Tax e-filing portal",
            "Claim DTAA benefits to avoid double taxation",
            "Pay any outstanding tax with interest under Section 234A/B/C",
        ),
        fix_time="4-8 hours",
        fix_cost="$50-$500 (Indian CA)",
        fix_difficulty=FixDifficulty.MODERATE,
    )


INDIAN_ITR = Rule(
    rule_id=RuleId.INDIAN_ITR,
    applies=lambda ctx: has_income_from_india(ctx.answers) or has_any_assets(ctx.answers),
    flag="filed_indian_itr",
    text=_itr_text,
    caveats=(
        Caveat(
            " As a US Citizen, you are still considered an NRI under Indian tax law if you don't "
            "meet the residency test — but India may tax your Indian-source income.",
            when=lambda ctx: ctx.answers.us_status == US_CITIZEN,
        ),
        Caveat(
            " As a Green Card holder, you retain NRI status in India. Your Indian-source income "
            "is taxable in India regardless of your US status.",
            when=lambda ctx: ctx.answers.us_status == GREEN_CARD,
        ),
    ),
)


# -------------------------
# PAN-Aadhaar linkage
# -------------------------
def _pan_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="PAN-Aadhaar Linkage",
        obligation=(
            "PAN must be linked to Aadhaar to remain operative. Inoperative PAN attracts higher "
            "TDS rates and blocks financial transactions."
        ),
        why="You have a PAN and Aadhaar but "
        + ctx.either("they are not linked", "you're unsure if they're linked")
        + ". Over 100 million PANs became inoperative due to non-linkage.",
        consequence=(
            "Inoperative PAN: TDS deducted at 20% instead of normal rates. Cannot open new "
            "demat/bank accounts. Existing mutual fund transactions may be blocked. Rs 1,000 "
            "penalty for late linkage."
        ),
        fix_steps=(
            "Check linkage status at https://eportal.incometax.gov.in/",
            "If not linked, link via the income tax portal or SMS (send UIDPAN <12-digit Aadhaar> <10-digit PAN> to 567678)",
            "Pay Rs 1,000 late linkage fee if applicable",
            "Wait 7-30 days for PAN to become operative again",
        ),
        fix_time="30 minutes",
        fix_cost="$12 (Rs 1,000 fee)",
        fix_difficulty=FixDifficulty.EASY,
    )


# a respondent who explicitly lacks either ID has a different problem
PAN_INOPERATIVE = Rule(
    rule_id=RuleId.PAN_INOPERATIVE,
    applies=lambda ctx: ctx.answers.flag("has_pan") != NO and ctx.answers.flag("has_aadhaar") != NO,
    flag="pan_linked_aadhaar",
    text=_pan_text,
)


# -------------------------
# FEMA resident -> NRO conversion
# -------------------------
def _fema_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="FEMA Account Conversion (NRO/NRE)",
        obligation=(
            "Under FEMA regulations, NRIs must convert resident savings accounts to NRO accounts. "
            "Holding a resident account as an NRI is a FEMA violation."
        ),
        why="You have Indian bank accounts and "
        + ctx.either("have not converted them to NRO", "are unsure if they've been converted")
        + ". FEMA requires conversion upon becoming NRI.",
        consequence=(
            "FEMA violations: penalty up to 3x the amount involved. RBI can impose compounding "
            "fees. In extreme cases, up to Rs 2 lakh per day of continuing violation. Banks may "
            "freeze accounts."
        ),
        fix_steps=(
            "Contact your Indian bank branch (or use internet banking if available)",
            "Submit Form for redesignation of resident account to NRO account",
            "Provide proof of NRI status (passport, visa, foreign address proof)",
            "Consider opening an NRE account for repatriable funds",
            "Update KYC with NRI status at the same time",
        ),
        fix_time="1-2 weeks",
        fix_cost="$0-$50 (bank fees)",
        fix_difficulty=FixDifficulty.MODERATE,
    )


FEMA_CONVERSION = Rule(
    rule_id=RuleId.FEMA_CONVERSION,
    applies=lambda ctx: has_asset(ctx.answers, "bank_accounts"),
    flag="converted_to_nro",
    text=_fema_text,
)


# -------------------------
# OCI update after passport renewal
# -------------------------
def _oci_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="OCI Card Update After Passport Renewal",
        obligation=(
            "OCI cardholders must update their OCI card when they get a new passport (before age "
            "20 and once after 50). Entry to India can be denied with a mismatched OCI."
        ),
        why="You have an OCI card and "
        + ctx.either(
            "have not updated it after your last passport renewal",
            "are unsure if it's been updated",
        )
        + ".",
        consequence=(
            "May be denied boarding or entry at Indian immigration. Could face deportation or "
            "fines. OCI benefits (property, banking) may be impacted."
        ),
        fix_steps=(
            "Check if your OCI card needs updating (mandatory if passport renewed before age 20 or after 50)",
            "Apply online at https://ociservices.gov.in/",
            "Upload photo of new passport, old OCI card, and old passport",
            "Pay the fee (~$25) and mail documents to VFS/embassy",
            "Processing takes 4-8 weeks",
        ),
        fix_time="1-2 hours (application) + 4-8 weeks (processing)",
        fix_cost="$25-$50",
        fix_difficulty=FixDifficulty.EASY,
    )


OCI_UPDATE = Rule(
    rule_id=RuleId.OCI_UPDATE,
    applies=lambda ctx: ctx.answers.flag("has_oci") == YES,
    flag="oci_updated_after_passport_renewal",
    text=_oci_text,
)


# -------------------------
# Aadhaar biometric refresh (recommendation only)
# -------------------------
def _long_absence(ctx: RuleContext) -> bool:
    elapsed = years_since_departure(ctx.answers, ctx.as_of)
    return elapsed is not None and elapsed >= BIOMETRIC_REFRESH_YEARS


def _aadhaar_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="Aadhaar Biometric Update",
        obligation=(
            "UIDAI recommends updating Aadhaar biometrics every 10 years. Outdated biometrics "
            "can cause authentication failures."
        ),
        why=(
            f"You left India in {ctx.answers.year_left_india.strip()}, which is over 10 years ago. "
            "Your Aadhaar biometrics may be outdated."
        ),
        consequence=(
            "Aadhaar authentication failures when trying to use services remotely. May affect PAN "
            "linkage, bank KYC, and other Aadhaar-dependent processes."
        ),
        fix_steps=(
            "Visit an Aadhaar enrollment center during your next India trip",
            "Carry your Aadhaar card and a valid ID",
            "Update biometrics (fingerprints, iris scan, photograph)",
            "Free of cost if done at government centers",
        ),
        fix_time="1 hour (during India visit)",
        fix_cost="$0",
        fix_difficulty=FixDifficulty.EASY,
    )


AADHAAR_BIOMETRIC = Rule(
    rule_id=RuleId.AADHAAR_BIOMETRIC,
    applies=lambda ctx: ctx.answers.flag("has_aadhaar") == YES and _long_absence(ctx),
    text=_aadhaar_text,
)


# -------------------------
# Repatriation (Form 15CA/CB)
# -------------------------
def _repatriation_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="Repatriation Compliance (Form 15CA/CB)",
        obligation=(
            "Transferring money from India to the US requires Form 15CA (self-declaration) and "
            "Form 15CB (CA certificate) for amounts above Rs 5 lakh."
        ),
        why=(
            "You have significant Indian assets. When you eventually repatriate funds, you'll "
            "need proper documentation to comply with RBI and tax regulations."
        ),
        consequence=(
            "Banks may refuse to process the transfer. Penalty under Section 271-I of Rs 1 lakh "
            "for non-furnishing of Form 15CA/CB. Delays in moving your own money."
        ),
        fix_steps=(
            "Engage an Indian CA to issue Form 15CB (certificate of remittance)",
            "File Form 15CA online on the income tax portal before remittance",
            "Submit the forms to your Indian bank along with the remittance request",
            "Ensure all Indian tax obligations are cleared before repatriation",
            "Keep copies of all forms for US tax filing purposes",
        ),
        fix_time="2-5 days",
        fix_cost="$100-$300 (CA fees)",
        fix_difficulty=FixDifficulty.MODERATE,
    )


REPATRIATION = Rule(
    rule_id=RuleId.REPATRIATION,
    applies=lambda ctx: has_any_assets(ctx.answers)
    and (
        has_high_value_assets(ctx.answers)
        or len(ctx.answers.assets) >= MIN_ASSET_TYPES_FOR_REPATRIATION
    ),
    text=_repatriation_text,
)


# -------------------------
# Indian property
# -------------------------
def _property_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="Indian Property Tax & US Reporting",
        obligation=(
            "Indian property owned by NRIs must be reported on FBAR/FATCA if held through "
            "financial accounts. Deemed rental income may apply even if property is vacant."
        ),
        why=(
            "You own property in India. This has implications for both Indian tax (deemed rental "
            "income if >1 self-occupied property) and US reporting."
        ),
        consequence=(
            "Deemed rental income taxed in India. Capital gains on sale taxed in both countries. "
            "TDS at 20%+ when NRI sells property. Must report on Schedule FA in Indian ITR."
        ),
        fix_steps=(
            "Declare property in your Indian ITR (Schedule FA for foreign assets)",
            "Pay municipal/property tax on time",
            "If renting: declare rental income, get TDS certificates from tenant",
            "If property value > self-occupied exemption: calculate deemed rental income",
            "Plan capital gains tax implications before selling (both Indian and US tax)",
        ),
        fix_time="2-4 hours",
        fix_cost="$100-$300 (CA fees for tax planning)",
        fix_difficulty=FixDifficulty.MODERATE,
    )


PROPERTY_TAX = Rule(
    rule_id=RuleId.PROPERTY_TAX,
    applies=lambda ctx: has_asset(ctx.answers, "property"),
    text=_property_text,
)


# -------------------------
# Bank KYC -> NRI status
# -------------------------
def _kyc_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="Bank KYC Update (NRI Status)",
        obligation=(
            "NRIs must update their KYC with Indian banks to reflect NRI status. Banks are "
            "required to re-classify accounts of customers who become NRIs."
        ),
        why="You have Indian bank accounts and "
        + ctx.either(
            "have not updated your KYC to NRI status",
            "are unsure if KYC reflects NRI status",
        )
        + ".",
        consequence=(
            "Account may be frozen by the bank. FEMA violation for holding resident accounts as "
            "NRI. Tax deducted at incorrect rates. May lose NRI tax benefits."
        ),
        fix_steps=(
            "Contact your bank branch or use internet banking for KYC update",
            "Submit: passport copy, visa copy, overseas address proof, passport-size photos",
            "Fill the KYC update form with NRI status",
            "Ensure all accounts (savings, FD, locker, demat) are updated",
            "Can often be done via video KYC for major banks",
        ),
        fix_time="1-3 hours",
        fix_cost="$0",
        fix_difficulty=FixDifficulty.EASY,
    )


BANK_KYC = Rule(
    rule_id=RuleId.BANK_KYC,
    applies=lambda ctx: has_foreign_accounts(ctx.answers),
    flag="updated_bank_kyc",
    text=_kyc_text,
)


# -------------------------
# PPF restrictions for NRIs
# -------------------------
def _ppf_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="PPF Account NRI Status",
        obligation=(
            "NRIs cannot open new PPF accounts. Existing accounts can continue until maturity but "
            "cannot be extended. Interest rate may be reduced to post-office savings rate."
        ),
        why=(
            "You have a PPF account and are an NRI. The rules for NRI PPF accounts changed in "
            "2017 — your account may be earning reduced interest."
        ),
        consequence=(
            "Interest earned may be at savings account rate (4%) instead of PPF rate (7%+). "
            "Account may be frozen if NRI status is discovered. Cannot extend account after maturity."
        ),
        fix_steps=(
            "Check with your bank if PPF account is still earning full interest",
            "Do NOT make new contributions if you're an NRI (these may be returned)",
            "Plan to close the account at maturity — cannot extend as NRI",
            "Consider alternative tax-efficient investments in the US (401k, IRA)",
        ),
        fix_time="1 hour",
        fix_cost="$0",
        fix_difficulty=FixDifficulty.EASY,
    )


PPF_NRI = Rule(
    rule_id=RuleId.PPF_NRI,
    applies=lambda ctx: has_asset(ctx.answers, "ppf"),
    text=_ppf_text,
)


# -------------------------
# LIC / life insurance
# -------------------------
def _lic_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="LIC Policy NRI Compliance",
        obligation=(
            "NRIs holding LIC policies must update their status with LIC. Premiums must be paid "
            "from NRO/NRE accounts. LIC policies may be PFICs for US tax purposes."
        ),
        why=(
            "You have LIC/life insurance in India. As an NRI, there are specific compliance "
            "requirements for maintaining these policies."
        ),
        consequence=(
            "Policy may be classified as PFIC — complex US tax reporting. Premiums paid from "
            "resident account violates FEMA. Maturity proceeds may face TDS and repatriation issues."
        ),
        fix_steps=(
            "Update NRI status with LIC — submit passport, visa, and foreign address",
            "Switch premium payments to NRO/NRE account",
            "Consider whether to continue the policy (PFIC reporting costs may exceed benefits)",
            "If policy has investment component, report as PFIC on Form 8621",
            "Plan for TDS on maturity proceeds (2% if PAN available, 20% without)",
        ),
        fix_time="2-3 hours",
        fix_cost="$0-$200 (CPA advice)",
        fix_difficulty=FixDifficulty.MODERATE,
    )


LIC_PREMIUM = Rule(
    rule_id=RuleId.LIC_PREMIUM,
    applies=lambda ctx: has_asset(ctx.answers, "life_insurance"),
    text=_lic_text,
)


# -------------------------
# Indian passport surrender after naturalization
# -------------------------
def _renunciation_text(ctx: RuleContext) -> RuleText:
    return RuleText(
        name="Indian Passport Surrender After US Citizenship",
        obligation=(
            "Indian law does not allow dual citizenship. Upon acquiring US citizenship, you must "
            "surrender your Indian passport within 90 days and apply for OCI if you want "
            "travel/residency privileges in India."
        ),
        why="You are a US Citizen and "
        + ctx.either(
            "have not surrendered your Indian passport",
            "are unsure if you've surrendered it",
        )
        + ". Using an Indian passport after acquiring foreign citizenship is illegal under the "
        "Indian Citizenship Act.",
        consequence=(
            "Using an Indian passport after acquiring US citizenship is a criminal offense under "
            "Section 17 of the Indian Passport Act. You may face deportation from India, "
            "blacklisting, and fines. Your OCI application may also be rejected."
        ),
        fix_steps=(
            "Visit the nearest Indian consulate/embassy to surrender your Indian passport",
            "Fill out the online renunciation form at the VFS/consulate website",
            "Submit your Indian passport, US passport, and US naturalization certificate",
            "Pay the renunciation fee (~$175)",
            "Apply for OCI card simultaneously to retain travel/property rights in India",
        ),
        fix_time="1-2 hours (application) + 4-8 weeks (processing)",
        fix_cost="$175-$275 (renunciation + OCI fees)",
        fix_difficulty=FixDifficulty.MODERATE,
    )


CITIZENSHIP_RENUNCIATION = Rule(
    rule_id=RuleId.CITIZENSHIP_RENUNCIATION,
    applies=lambda ctx: ctx.answers.us_status == US_CITIZEN,
    flag="surrendered_indian_passport",
    text=_renunciation_text,
)
