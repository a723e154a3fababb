"""
Compliance Rules

Rule-based compliance evaluator. Each rule is a pure function of
(requirement, drafts, attachments) returning a RuleVerdict. A rule whose
trigger does not appear in the requirement text returns NOT_APPLICABLE so
the next rule is tried; the first other verdict wins.
"""

import logging
import re
from typing import Callable, Iterable, Mapping, NamedTuple, Sequence

from schemas.compliance import (
    AttachmentInfo,
    ComplianceStatus,
    RequirementContext,
    RuleVerdict,
)


logger = logging.getLogger("rfp_manager.services.compliance_rules")

Drafts = Mapping[str, str]
Attachments = Sequence[AttachmentInfo]
Matcher = Callable[[RequirementContext, Drafts, Attachments], RuleVerdict]


class Rule(NamedTuple):
    """A named matcher in the rule catalog."""
    id: str
    match: Matcher


DEFAULT_ACTION_ITEM = "Add content or evidence"

# Drafting screens store sections under longer keys than the rules use
DRAFT_ALIASES = {
    "methodology": ("methodology", "approach_methodology"),
    "plan": ("plan", "implementation_plan"),
    "budget": ("budget", "budget_narrative"),
    "executive": ("executive", "executive_summary"),
    "pastperf": ("pastperf", "past_performance"),
}

NOT_APPLICABLE = RuleVerdict(status=ComplianceStatus.NOT_APPLICABLE)


def _search(pattern: str, text: str) -> bool:
    return re.search(pattern, text, re.IGNORECASE) is not None


def draft_text(drafts: Drafts, *names: str) -> str:
    """Join the content of the named drafts, resolving section key aliases."""
    parts = []
    for name in names:
        for key in DRAFT_ALIASES.get(name, (name,)):
            content = drafts.get(key)
            if content:
                parts.append(content)
    return " ".join(parts)


def has_attachment(attachments: Iterable[AttachmentInfo], pattern: str) -> bool:
    """Whether any attachment's "type filename" matches the pattern."""
    return any(_search(pattern, f"{a.type} {a.filename}") for a in attachments)


def _complies(evidence: str) -> RuleVerdict:
    return RuleVerdict(status=ComplianceStatus.COMPLIES, evidence=evidence)


def _missing(action_item: str) -> RuleVerdict:
    return RuleVerdict(status=ComplianceStatus.MISSING_INFO, action_item=action_item)


# ============================================================================
# Rule catalog
# ============================================================================

def gender_strategy(requirement: RequirementContext, drafts: Drafts, attachments: Attachments) -> RuleVerdict:
    if not _search(r"gender|inclusion|GESI|social inclusion", requirement.text):
        return NOT_APPLICABLE

    text = draft_text(drafts, "methodology", "plan")
    if _search(r"gender|female|inclusion|GBV|PSEA", text):
        return _complies("Methodology/Plan mentions gender & inclusion")
    return _missing("Add Gender & Inclusion strategy in Methodology")


def budget_cap(requirement: RequirementContext, drafts: Drafts, attachments: Attachments) -> RuleVerdict:
    if not _search(r"budget|ceiling|cap", requirement.text):
        return NOT_APPLICABLE

    text = draft_text(drafts, "budget")
    if _search(r"(under|within)\s+(the\s+)?budget|<=?\s?\$?\d", text):
        return _complies("Budget narrative states compliance with cap")
    return _missing("State explicitly that total budget complies with the cap")


def audited_financials(requirement: RequirementContext, drafts: Drafts, attachments: Attachments) -> RuleVerdict:
    if not _search(r"audited financial statements|financials", requirement.text):
        return NOT_APPLICABLE

    if has_attachment(attachments, r"financial|audit"):
        return _complies("Audited financials attached")
    return _missing("Upload audited financial statements (last 2 years)")


def gating_revenue(requirement: RequirementContext, drafts: Drafts, attachments: Attachments) -> RuleVerdict:
    if not _search(r"10M\+|10\s?million|annual revenue", requirement.text):
        return NOT_APPLICABLE

    text = draft_text(drafts, "executive", "pastperf")
    # $10000000, $10,000,000, USD 10 000 000
    stated = (
        _search(r"(\$|USD)\s?1?0(?:[,. ]?0{3}){2}", text)
        or _search(r"10\s?million", text)
    )
    if stated:
        return _complies("Revenue stated in Executive/Past Performance")
    # Gating: missing evidence disqualifies the bid
    return RuleVerdict(
        status=ComplianceStatus.FAIL,
        action_item="Provide evidence of ≥ $10M annual revenue (gating requirement)",
    )


def cv_key_personnel(requirement: RequirementContext, drafts: Drafts, attachments: Attachments) -> RuleVerdict:
    if not _search(r"CV|curriculum vitae|resume|key personnel", requirement.text):
        return NOT_APPLICABLE

    if has_attachment(attachments, r"cv|resume"):
        return _complies("CVs attached")
    return _missing("Upload CVs for key personnel")


def certificates(requirement: RequirementContext, drafts: Drafts, attachments: Attachments) -> RuleVerdict:
    if not _search(r"certificate|registration|license", requirement.text):
        return NOT_APPLICABLE

    if has_attachment(attachments, r"certificate|registration|license"):
        return _complies("Certificates/registrations attached")
    return _missing("Upload required certificates or registrations")


# Order matters: the first applicable rule decides the verdict
RULES: tuple[Rule, ...] = (
    Rule("GEN-STRAT", gender_strategy),
    Rule("BUDGET-CAP", budget_cap),
    Rule("FINANCIALS-AUDITED", audited_financials),
    Rule("GATING-REVENUE", gating_revenue),
    Rule("CV-KEY-PERSONNEL", cv_key_personnel),
    Rule("CERTIFICATES", certificates),
)


def default_verdict() -> RuleVerdict:
    """Verdict for a requirement no rule applies to."""
    return _missing(DEFAULT_ACTION_ITEM)


def evaluate_requirement(
    requirement: RequirementContext,
    drafts: Drafts,
    attachments: Attachments,
    rules: Sequence[Rule] = RULES,
) -> RuleVerdict:
    """
    Run the rules in order and return the first applicable verdict.

    Args:
        requirement: Requirement under evaluation
        drafts: Draft section content keyed by section key
        attachments: Attachment metadata for the RFP
        rules: Rule catalog, evaluated in the given order

    Returns:
        The first verdict that is not NOT_APPLICABLE, else the default
        missing_info verdict
    """
    for rule in rules:
        verdict = rule.match(requirement, drafts, attachments)
        if verdict.status != ComplianceStatus.NOT_APPLICABLE:
            logger.debug(f"Rule {rule.id} -> {verdict.status.value}")
            return verdict
    return default_verdict()
