"""Tests for the rule-based compliance evaluator."""

import pytest

from schemas.compliance import AttachmentInfo, ComplianceStatus, RequirementContext
from services.compliance_rules import (
    DEFAULT_ACTION_ITEM,
    RULES,
    Rule,
    draft_text,
    evaluate_requirement,
)


def req(text, type="mandatory"):
    return RequirementContext(text=text, type=type)


def att(type, filename):
    return AttachmentInfo(type=type, filename=filename)


UNRELATED = "Describe the project timeline and milestones"


class TestDefaultVerdict:
    def test_no_trigger_is_missing_info(self):
        verdict = evaluate_requirement(req(UNRELATED), {}, [])
        assert verdict.status == ComplianceStatus.MISSING_INFO
        assert verdict.action_item == DEFAULT_ACTION_ITEM
        assert verdict.evidence is None

    def test_drafts_and_attachments_do_not_matter_without_trigger(self):
        drafts = {"budget": "within the budget", "executive_summary": "$10,000,000"}
        verdict = evaluate_requirement(req(UNRELATED), drafts, [att("cv", "a.pdf")])
        assert verdict.status == ComplianceStatus.MISSING_INFO
        assert verdict.action_item == DEFAULT_ACTION_ITEM

    @pytest.mark.parametrize("rule", RULES, ids=lambda r: r.id)
    def test_each_rule_not_applicable_to_unrelated_text(self, rule):
        verdict = rule.match(req(UNRELATED), {}, [])
        assert verdict.status == ComplianceStatus.NOT_APPLICABLE

    def test_empty_rule_list_gives_default(self):
        verdict = evaluate_requirement(req("Submit CVs"), {}, [att("cv", "a.pdf")], rules=())
        assert verdict.status == ComplianceStatus.MISSING_INFO
        assert verdict.action_item == DEFAULT_ACTION_ITEM


class TestGenderStrategy:
    def test_complies_with_methodology_alias(self):
        drafts = {"approach_methodology": "We apply PSEA safeguards in all activities."}
        verdict = evaluate_requirement(req("Describe your GESI approach"), drafts, [])
        assert verdict.status == ComplianceStatus.COMPLIES
        assert verdict.evidence == "Methodology/Plan mentions gender & inclusion"

    def test_complies_with_plan_draft(self):
        verdict = evaluate_requirement(
            req("Social inclusion strategy required"),
            {"plan": "Female participation targets are set per district."},
            []
        )
        assert verdict.status == ComplianceStatus.COMPLIES

    def test_missing_strategy(self):
        verdict = evaluate_requirement(req("Gender strategy"), {"methodology": "Agile delivery"}, [])
        assert verdict.status == ComplianceStatus.MISSING_INFO
        assert verdict.action_item == "Add Gender & Inclusion strategy in Methodology"


class TestBudgetCap:
    def test_within_the_budget_complies(self):
        verdict = evaluate_requirement(
            req("Proposals must respect the budget cap"),
            {"budget": "The total cost is within the budget."},
            []
        )
        assert verdict.status == ComplianceStatus.COMPLIES
        assert verdict.evidence == "Budget narrative states compliance with cap"

    def test_amount_comparison_complies(self):
        verdict = evaluate_requirement(
            req("Budget ceiling applies"),
            {"budget_narrative": "Total <= $170,000"},
            []
        )
        assert verdict.status == ComplianceStatus.COMPLIES

    def test_no_budget_draft(self):
        verdict = evaluate_requirement(req("Maximum ceiling of USD 170,000"), {}, [])
        assert verdict.status == ComplianceStatus.MISSING_INFO
        assert verdict.action_item == "State explicitly that total budget complies with the cap"


class TestAttachmentRules:
    def test_audited_financials_attached(self):
        verdict = evaluate_requirement(
            req("Provide audited financial statements"),
            {},
            [att("financials", "2023.pdf")]
        )
        assert verdict.status == ComplianceStatus.COMPLIES
        assert verdict.evidence == "Audited financials attached"

    def test_audited_financials_missing(self):
        verdict = evaluate_requirement(
            req("Provide audited financial statements"), {}, [att("cv", "jane.pdf")]
        )
        assert verdict.status == ComplianceStatus.MISSING_INFO
        assert verdict.action_item == "Upload audited financial statements (last 2 years)"

    def test_cvs_for_key_personnel(self):
        verdict = evaluate_requirement(
            req("Submit CVs for key personnel"), {}, [att("cv", "john.pdf")]
        )
        assert verdict.status == ComplianceStatus.COMPLIES
        assert verdict.evidence == "CVs attached"

    def test_resume_matched_by_filename(self):
        verdict = evaluate_requirement(
            req("Key personnel resumes"), {}, [att("other", "Team_Resume_Lead.docx")]
        )
        assert verdict.status == ComplianceStatus.COMPLIES

    def test_cvs_missing(self):
        verdict = evaluate_requirement(req("Submit CVs for key personnel"), {}, [])
        assert verdict.status == ComplianceStatus.MISSING_INFO
        assert verdict.action_item == "Upload CVs for key personnel"

    def test_certificate_matched_by_filename(self):
        verdict = evaluate_requirement(
            req("Valid registration certificate"), {}, [att("other", "company_registration.pdf")]
        )
        assert verdict.status == ComplianceStatus.COMPLIES
        assert verdict.evidence == "Certificates/registrations attached"

    def test_certificate_missing(self):
        verdict = evaluate_requirement(req("Operating license"), {}, [])
        assert verdict.status == ComplianceStatus.MISSING_INFO
        assert verdict.action_item == "Upload required certificates or registrations"


class TestGatingRevenue:
    REQUIREMENT = "Bidders must demonstrate 10 million annual revenue"

    def test_missing_figure_fails(self):
        verdict = evaluate_requirement(req(self.REQUIREMENT, "gating"), {}, [])
        assert verdict.status == ComplianceStatus.FAIL
        assert "gating requirement" in verdict.action_item

    def test_unrelated_executive_text_fails(self):
        drafts = {"executive_summary": "We have 5 million in revenue."}
        verdict = evaluate_requirement(req(self.REQUIREMENT), drafts, [])
        assert verdict.status == ComplianceStatus.FAIL

    @pytest.mark.parametrize("text", [
        "Our annual turnover exceeds $10,000,000.",
        "Revenue of $10000000 in 2024",
        "USD 10 000 000 annual revenue",
        "We exceed 10 million every year",
    ])
    def test_figure_stated(self, text):
        verdict = evaluate_requirement(req(self.REQUIREMENT), {"executive": text}, [])
        assert verdict.status == ComplianceStatus.COMPLIES
        assert verdict.evidence == "Revenue stated in Executive/Past Performance"

    def test_figure_in_past_performance(self):
        drafts = {"past_performance": "Contracts worth 10million delivered."}
        verdict = evaluate_requirement(req("Annual revenue above 10M+"), drafts, [])
        assert verdict.status == ComplianceStatus.COMPLIES


class TestRuleOrder:
    def test_first_rule_wins(self):
        # Matches GEN-STRAT and BUDGET-CAP; budget would comply, gender decides
        verdict = evaluate_requirement(
            req("Gender-responsive budget"),
            {"budget": "within budget"},
            []
        )
        assert verdict.status == ComplianceStatus.MISSING_INFO
        assert verdict.action_item == "Add Gender & Inclusion strategy in Methodology"

    def test_budget_before_revenue(self):
        verdict = evaluate_requirement(
            req("Budget cap and 10 million annual revenue"),
            {"budget": "within the budget"},
            []
        )
        assert verdict.status == ComplianceStatus.COMPLIES
        assert verdict.evidence == "Budget narrative states compliance with cap"

    def test_custom_order_respected(self):
        always_fail = Rule(
            "ALWAYS",
            lambda r, d, a: RULES[3].match(req("annual revenue"), {}, [])
        )
        verdict = evaluate_requirement(
            req("Submit CVs"), {}, [att("cv", "a.pdf")], rules=(always_fail,) + RULES
        )
        assert verdict.status == ComplianceStatus.FAIL

    def test_catalog_order(self):
        assert [rule.id for rule in RULES] == [
            "GEN-STRAT",
            "BUDGET-CAP",
            "FINANCIALS-AUDITED",
            "GATING-REVENUE",
            "CV-KEY-PERSONNEL",
            "CERTIFICATES",
        ]


def test_draft_text_joins_aliases():
    drafts = {"budget": "short", "budget_narrative": "long", "other": "x"}
    assert draft_text(drafts, "budget") == "short long"
    assert draft_text(drafts, "plan") == ""
