from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from nricheck.engine import (
    DEFAULT_RULES,
    FindingStatus,
    QuestionnaireAnswers,
    RuleId,
    Severity,
    compliance_score,
    run_rules_engine,
)
from nricheck.engine.predicates import years_since_departure
from nricheck.engine.rules import RULES_BY_ID


AS_OF = date(2026, 6, 1)


def make_answers(**overrides) -> QuestionnaireAnswers:
    """Blank questionnaire for a Texas resident, with snake_case overrides."""
    base = {"us_state": "TX"}
    base.update(overrides)
    return QuestionnaireAnswers.from_dict(base)


def run(answers: QuestionnaireAnswers):
    return run_rules_engine(answers, as_of=AS_OF)


# -------------------------
# SCORE / BOUNDARIES
# -------------------------
def test_empty_questionnaire_scores_100():
    out = run(QuestionnaireAnswers())
    assert out.score == 100
    assert out.results == ()
    assert out.total_penalty_min == 0
    assert out.total_penalty_max == 0


def test_all_compliant_h1b_has_no_findings():
    answers = make_answers(
        year_left_india="2020",
        us_status="H1B",
        filing_status="Single",
        assets=["bank_accounts"],
        asset_amounts={"bank_accounts": "under_5k"},
        income_types=["none"],
        has_pan="yes",
        pan_linked_aadhaar="yes",
        has_aadhaar="yes",
        filed_indian_itr="yes",
        filed_fbar="yes",
        filed_fatca="yes",
        reported_pfics="yes",
        updated_bank_kyc="yes",
        converted_to_nro="yes",
    )
    out = run(answers)
    assert out.score == 100
    assert out.results == ()


def test_everything_non_compliant_scores_near_zero():
    answers = make_answers(
        year_left_india="2015",
        us_status="Green Card",
        filing_status="Married Filing Jointly",
        assets=["bank_accounts", "mutual_funds", "stocks", "property", "life_insurance",
                "ppf", "nps", "epf", "nre_nro"],
        asset_amounts={"bank_accounts": "over_100k", "mutual_funds": "over_100k"},
        income_types=["rental", "interest", "dividend", "capital_gains"],
        has_pan="no",
        pan_linked_aadhaar="no",
        has_aadhaar="no",
        filed_indian_itr="no",
        filed_fbar="no",
        filed_fatca="no",
        reported_pfics="no",
        updated_bank_kyc="no",
        converted_to_nro="no",
    )
    out = run(answers)
    assert out.score <= 10
    assert len(out.results) > 5
    assert out.total_penalty_max > 0
    # 20 + 15 + 12 + 10 + 3 + 4 + 15 + 4 + 3 + 5 + 3 + 4
    assert out.score == 2


def test_score_rounds_half_up_like_the_client():
    # 100 - 97.5 = 2.5 must round up, not to even
    assert compliance_score(97.5) == 3
    assert compliance_score(10.5) == 90
    assert compliance_score(0) == 100
    assert compliance_score(250) == 0


def test_score_never_negative():
    answers = make_answers(
        year_left_india="2000",
        us_status="US Citizen",
        filing_status="Single",
        us_state="CA",
        assets=["bank_accounts", "mutual_funds", "stocks", "property", "life_insurance",
                "ppf", "nps", "epf", "nre_nro"],
        asset_amounts={"stocks": "over_100k"},
        income_types=["rental", "interest"],
        has_pan="yes",
        has_aadhaar="yes",
        has_oci="yes",
        pan_linked_aadhaar="no",
        oci_updated_after_passport_renewal="no",
        surrendered_indian_passport="no",
        filed_indian_itr="no",
        filed_fbar="no",
        filed_fatca="no",
        reported_pfics="no",
        updated_bank_kyc="no",
        converted_to_nro="no",
    )
    out = run(answers)
    assert out.score == 0
    assert out.total_penalty_min <= out.total_penalty_max


# -------------------------
# FBAR
# -------------------------
def _fbar_answers(**overrides):
    base = dict(
        year_left_india="2018",
        us_status="H1B",
        filing_status="Single",
        assets=["bank_accounts"],
        asset_amounts={"bank_accounts": "10k_50k"},
        income_types=["none"],
        filed_fbar="no",
    )
    base.update(overrides)
    return make_answers(**base)


def test_fbar_triggers_when_not_filed():
    out = run(_fbar_answers())
    fbar = out.find(RuleId.FBAR)
    assert fbar is not None
    assert fbar.severity == Severity.URGENT
    assert fbar.status == FindingStatus.TRIGGERED
    assert fbar.score_weight == 20
    assert "Indian bank accounts" in fbar.why_applies


def test_fbar_suppressed_when_filed():
    out = run(_fbar_answers(filed_fbar="yes"))
    assert out.find(RuleId.FBAR) is None


def test_fbar_not_triggered_when_unanswered():
    out = run(_fbar_answers(filed_fbar=""))
    assert out.find(RuleId.FBAR) is None


def test_fbar_first_year_h1b_gets_residency_caveat():
    first_year = run(_fbar_answers(year_left_india=str(AS_OF.year))).find(RuleId.FBAR)
    veteran = run(_fbar_answers(year_left_india="2018")).find(RuleId.FBAR)
    assert "Substantial Presence Test" in first_year.why_applies
    assert "Substantial Presence Test" not in veteran.why_applies


def test_fbar_count_fallback_without_amounts():
    # two account types and no amounts still counts as likely above $10k
    answers = make_answers(assets=["ppf", "epf"], filed_fbar="no")
    assert run(answers).find(RuleId.FBAR) is not None

    answers = make_answers(assets=["ppf"], filed_fbar="no")
    assert run(answers).find(RuleId.FBAR) is None


def test_fbar_names_nre_accounts_when_no_bank_account():
    answers = make_answers(assets=["nre_nro"], filed_fbar="not_sure")
    fbar = run(answers).find(RuleId.FBAR)
    assert "NRE/NRO accounts" in fbar.why_applies
    assert "are unsure" in fbar.why_applies


# -------------------------
# FATCA
# -------------------------
def test_fatca_triggers_for_high_value_assets():
    answers = make_answers(
        assets=["bank_accounts", "stocks"],
        asset_amounts={"bank_accounts": "50k_100k", "stocks": "50k_100k"},
        income_types=["none"],
        filed_fatca="no",
    )
    fatca = run(answers).find(RuleId.FATCA)
    assert fatca is not None
    assert fatca.severity == Severity.URGENT
    assert "$50,000 (single/MFS)" in fatca.obligation_summary


def test_fatca_joint_filers_get_higher_threshold_text():
    answers = make_answers(
        filing_status="Married Filing Jointly",
        assets=["stocks"],
        asset_amounts={"stocks": "over_100k"},
        filed_fatca="no",
    )
    fatca = run(answers).find(RuleId.FATCA)
    assert "$100,000 (married filing jointly)" in fatca.obligation_summary
    assert "$200,000" in fatca.obligation_summary


def test_fatca_skipped_below_threshold():
    answers = make_answers(
        assets=["stocks"],
        asset_amounts={"stocks": "10k_50k"},
        filed_fatca="no",
    )
    assert run(answers).find(RuleId.FATCA) is None


# -------------------------
# INDIAN ITR / PAN / FEMA / KYC
# -------------------------
def test_itr_triggers_with_india_income():
    answers = make_answers(assets=["bank_accounts"], income_types=["rental"], filed_indian_itr="no")
    itr = run(answers).find(RuleId.INDIAN_ITR)
    assert itr is not None
    assert "income from India" in itr.why_applies


def test_itr_caveat_for_green_card():
    answers = make_answers(us_status="Green Card", assets=["property"], filed_indian_itr="no")
    itr = run(answers).find(RuleId.INDIAN_ITR)
    assert "Green Card holder" in itr.why_applies
    assert "Indian assets that may generate taxable income" in itr.why_applies


def test_itr_needs_income_or_assets():
    answers = make_answers(income_types=["none"], filed_indian_itr="no")
    assert run(answers).find(RuleId.INDIAN_ITR) is None


def test_pan_linkage_triggers_when_not_linked():
    answers = make_answers(has_pan="yes", has_aadhaar="yes", pan_linked_aadhaar="no")
    pan = run(answers).find(RuleId.PAN_INOPERATIVE)
    assert pan is not None
    assert pan.severity == Severity.WARNING


@pytest.mark.parametrize("missing", ["has_pan", "has_aadhaar"])
def test_pan_linkage_skipped_without_both_ids(missing):
    fields = {"has_pan": "yes", "has_aadhaar": "yes", "pan_linked_aadhaar": "no"}
    fields[missing] = "no"
    answers = make_answers(**fields)
    assert run(answers).find(RuleId.PAN_INOPERATIVE) is None


def test_fema_conversion_needs_resident_bank_account():
    assert run(make_answers(assets=["bank_accounts"], converted_to_nro="no")).find(RuleId.FEMA_CONVERSION)
    assert run(make_answers(assets=["nre_nro"], converted_to_nro="no")).find(RuleId.FEMA_CONVERSION) is None


def test_bank_kyc_for_any_foreign_account():
    kyc = run(make_answers(assets=["nre_nro"], updated_bank_kyc="no")).find(RuleId.BANK_KYC)
    assert kyc is not None
    assert kyc.score_weight == 5


# -------------------------
# PFIC
# -------------------------
def test_pfic_weighs_more_for_permanent_residents():
    common = dict(assets=["mutual_funds"], income_types=["none"], reported_pfics="no")
    green = run(make_answers(us_status="Green Card", **common)).find(RuleId.PFIC)
    h1b = run(make_answers(us_status="H1B", **common)).find(RuleId.PFIC)

    assert green.score_weight > h1b.score_weight
    assert green.score_weight == 15
    assert h1b.score_weight == 12
    assert "permanent annual obligation" in green.why_applies
    assert "As a Green Card holder" in green.why_applies
    assert "As an H1B holder" in h1b.why_applies


# -------------------------
# CITIZENSHIP / OCI / AADHAAR
# -------------------------
def test_passport_surrender_full_and_damped_weight():
    no = run(make_answers(us_status="US Citizen", surrendered_indian_passport="no"))
    unsure = run(make_answers(us_status="US Citizen", surrendered_indian_passport="not_sure"))

    f_no = no.find(RuleId.CITIZENSHIP_RENUNCIATION)
    f_unsure = unsure.find(RuleId.CITIZENSHIP_RENUNCIATION)

    assert f_no.severity == Severity.WARNING
    assert f_no.score_weight == 8
    assert f_no.status == FindingStatus.TRIGGERED

    assert f_unsure.score_weight == pytest.approx(5.6)
    assert f_unsure.status == FindingStatus.NEEDS_REVIEW


def test_passport_surrender_only_for_citizens_and_answered():
    assert run(make_answers(us_status="Green Card", surrendered_indian_passport="no")).results == ()
    assert run(make_answers(us_status="US Citizen", surrendered_indian_passport="")).results == ()


def test_oci_update_requires_oci():
    answers = make_answers(us_status="US Citizen", has_oci="yes", oci_updated_after_passport_renewal="no")
    assert run(answers).find(RuleId.OCI_UPDATE) is not None

    answers = replace(answers, has_oci="not_sure")
    assert run(answers).find(RuleId.OCI_UPDATE) is None


def test_aadhaar_biometric_after_ten_years():
    old = run(make_answers(has_aadhaar="yes", year_left_india="2010")).find(RuleId.AADHAAR_BIOMETRIC)
    assert old is not None
    assert old.severity == Severity.INFO
    assert old.status == FindingStatus.NEEDS_REVIEW
    assert old.score_weight == 3
    assert "2010" in old.why_applies

    assert run(make_answers(has_aadhaar="yes", year_left_india="2020")).results == ()
    assert run(make_answers(has_aadhaar="yes", year_left_india="someday")).results == ()


@pytest.mark.parametrize("raw, elapsed", [
    ("2010", 16),
    (" 2012", 14),
    ("2010s", 16),
    ("2012-06", 14),
    ("20_26", 2006),
    ("+2020", 6),
    ("", None),
    ("someday", None),
    ("٢٠١٠", None),
])
def test_departure_year_reads_leading_integer(raw, elapsed):
    assert years_since_departure(make_answers(year_left_india=raw), AS_OF) == elapsed


def test_aadhaar_biometric_with_decade_style_year():
    finding = run(make_answers(has_aadhaar="yes", year_left_india="2010s")).find(RuleId.AADHAAR_BIOMETRIC)
    assert finding is not None
    assert "2010s" in finding.why_applies


def test_fbar_first_year_ignores_underscored_year():
    finding = run(_fbar_answers(year_left_india="20_26")).find(RuleId.FBAR)
    assert finding is not None
    assert "Substantial Presence Test" not in finding.why_applies


def test_fbar_first_year_with_month_suffix():
    finding = run(_fbar_answers(year_left_india=f"{AS_OF.year}-03")).find(RuleId.FBAR)
    assert "Substantial Presence Test" in finding.why_applies


# -------------------------
# ADVISORY RULES
# -------------------------
def test_tds_lists_income_kinds():
    tds = run(make_answers(income_types=["interest", "rental"])).find(RuleId.TDS_CERTIFICATES)
    assert "interest and rental income" in tds.why_applies

    assert run(make_answers(income_types=["dividend"])).find(RuleId.TDS_CERTIFICATES) is None


def test_dtaa_dual_residency_caveat_only_for_green_card():
    green = run(make_answers(us_status="Green Card", income_types=["dividend"])).find(RuleId.DTAA_TRC)
    citizen = run(make_answers(us_status="US Citizen", income_types=["dividend"])).find(RuleId.DTAA_TRC)
    assert "tie-breaker" in green.why_applies
    assert "tie-breaker" not in citizen.why_applies


def test_income_none_sentinel_wins():
    out = run(make_answers(income_types=["none", "rental"]))
    assert out.find(RuleId.DTAA_TRC) is None
    assert out.find(RuleId.TDS_CERTIFICATES) is None


def test_repatriation_accepts_inr_bands():
    answers = make_answers(assets=["property"], asset_amounts={"property": "50l_1cr"})
    rep = run(answers).find(RuleId.REPATRIATION)
    assert rep is not None
    assert rep.status == FindingStatus.NEEDS_REVIEW


@pytest.mark.parametrize(
    "asset, rule_id, severity",
    [
        ("property", RuleId.PROPERTY_TAX, Severity.INFO),
        ("ppf", RuleId.PPF_NRI, Severity.INFO),
        ("life_insurance", RuleId.LIC_PREMIUM, Severity.WARNING),
    ],
)
def test_holding_rules_fire_unconditionally(asset, rule_id, severity):
    finding = run(make_answers(assets=[asset])).find(rule_id)
    assert finding is not None
    assert finding.severity == severity
    assert finding.status == FindingStatus.NEEDS_REVIEW


# -------------------------
# STATE RULES
# -------------------------
def test_no_income_tax_state_skips_state_rules():
    out = run(make_answers(us_state="TX", income_types=["rental"]))
    assert out.find(RuleId.STATE_FEIE_GAP) is None
    assert out.find(RuleId.STATE_FTC_GAP) is None


def test_california_gets_both_state_rules_with_name():
    out = run(make_answers(us_state="CA", income_types=["rental"]))
    feie = out.find(RuleId.STATE_FEIE_GAP)
    ftc = out.find(RuleId.STATE_FTC_GAP)
    assert feie.rule_name == "CA Does Not Honor FEIE"
    assert ftc.rule_name == "CA Limited Foreign Tax Credit"


def test_pennsylvania_only_has_ftc_gap():
    out = run(make_answers(us_state="PA", income_types=["interest"]))
    assert out.find(RuleId.STATE_FEIE_GAP) is None
    assert out.find(RuleId.STATE_FTC_GAP).rule_name == "PA Limited Foreign Tax Credit"


def test_state_rules_need_india_income():
    out = run(make_answers(us_state="CA", income_types=["none"]))
    assert out.find(RuleId.STATE_FEIE_GAP) is None


def test_washington_capital_gains_needs_high_value_holdings():
    high = make_answers(us_state="WA", assets=["stocks"], asset_amounts={"stocks": "50k_100k"})
    low = make_answers(us_state="WA", assets=["stocks"], asset_amounts={"stocks": "10k_50k"})
    elsewhere = replace(high, us_state="OR")

    assert run(high).find(RuleId.WA_CAPITAL_GAINS) is not None
    assert run(low).find(RuleId.WA_CAPITAL_GAINS) is None
    assert run(elsewhere).find(RuleId.WA_CAPITAL_GAINS) is None


# -------------------------
# ORDERING / INPUT TOLERANCE
# -------------------------
def test_results_sorted_by_severity_then_weight():
    answers = make_answers(
        us_status="Green Card",
        us_state="CA",
        assets=["bank_accounts", "mutual_funds", "property", "ppf"],
        income_types=["rental"],
        filed_fbar="no",
        reported_pfics="not_sure",
        updated_bank_kyc="no",
    )
    out = run(answers)
    order = {"urgent": 0, "warning": 1, "info": 2}
    keys = [(order[r.severity.value], -r.score_weight) for r in out.results]
    assert keys == sorted(keys)
    assert out.results[0].rule_id == RuleId.FBAR


def test_unknown_values_fail_safe():
    answers = QuestionnaireAnswers.from_dict({
        "yearLeftIndia": "long ago",
        "usStatus": "Martian",
        "usState": "ZZ",
        "assets": ["spaceship"],
        "assetAmounts": {"spaceship": "a_lot"},
        "incomeTypes": ["lottery"],
        "filedFBAR": "maybe",
        "hasAadhaar": "perhaps",
    })
    out = run(answers)
    assert 0 <= out.score <= 100
    # "lottery" is still a non-"none" income tag and "spaceship" an asset
    assert out.find(RuleId.FBAR) is None
    assert answers.flag("filed_fbar") == ""


def test_from_dict_tolerates_wrong_shapes():
    answers = QuestionnaireAnswers.from_dict({"assets": None, "assetAmounts": "x", "usStatus": 7})
    assert answers.assets == frozenset()
    assert answers.asset_amounts == ()
    assert answers.us_status == ""


def test_from_dict_accepts_wire_names():
    answers = QuestionnaireAnswers.from_dict({"filedFBAR": "no", "assets": ["bank_accounts"]})
    assert answers.filed_fbar == "no"
    assert answers.to_dict()["filedFBAR"] == "no"


def test_direct_construction_normalizes_collections():
    answers = QuestionnaireAnswers(
        us_status="H1B",
        assets=["bank_accounts", "stocks"],
        asset_amounts={"stocks": "over_100k", "bank_accounts": "10k_50k"},
        income_types={"interest"},
        filed_fbar="no",
    )
    assert answers.assets == frozenset({"bank_accounts", "stocks"})
    assert answers.asset_amounts == (("bank_accounts", "10k_50k"), ("stocks", "over_100k"))
    assert sorted(answers.amount_buckets()) == ["10k_50k", "over_100k"]
    hash(answers)

    assert run(answers) == run(QuestionnaireAnswers.from_dict(answers.to_dict()))
    assert run(answers).find(RuleId.FBAR) is not None


def test_string_where_list_expected_is_empty():
    answers = QuestionnaireAnswers.from_dict({"assets": "stocks", "incomeTypes": {"rental": 1}})
    assert answers.assets == frozenset()
    assert answers.income_types == frozenset()


def test_engine_is_idempotent():
    answers = _fbar_answers(us_state="CA", income_types=["rental"], filed_indian_itr="not_sure")
    assert run(answers) == run(answers)
    assert run(answers).to_dict() == run(answers).to_dict()


def test_rule_ids_are_unique():
    assert len(RULES_BY_ID) == len(DEFAULT_RULES) == 19
