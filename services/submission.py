"""
Submission Service

Submission readiness checks and plain-text export of the proposal package.
"""

import base64
import logging
import re
import uuid
from datetime import date
from typing import Optional, Sequence

from database.models import RFP, DraftSection, Requirement, ComplianceItem
from schemas.compliance import ComplianceStatus
from schemas.rfp import RequirementType
from schemas.submission import (
    ExportFormat,
    ExportResult,
    ValidationItem,
    ValidationResult,
    ValidationSummary,
)
from services.rfp_store import RFPStore, get_store

logger = logging.getLogger("rfp_manager.services.submission")

RULE_HEAVY = "=" * 80
RULE_LIGHT = "-" * 80


class RFPNotFound(Exception):
    """Raised when the RFP to export does not exist."""
    pass


def _status_of(item: Optional[ComplianceItem]) -> ComplianceStatus:
    if item is None:
        return ComplianceStatus.MISSING_INFO
    return ComplianceStatus(item.status)


def validate_requirements(
    requirements: Sequence[Requirement],
    compliance_items: Sequence[ComplianceItem]
) -> ValidationResult:
    """
    Summarise compliance and flag blocking requirements.

    A requirement without a compliance item counts as missing_info. A gating
    requirement whose status is fail blocks the submission.
    """
    by_requirement = {item.requirement_id: item for item in compliance_items}
    summary = ValidationSummary()
    items = []

    for requirement in requirements:
        status = _status_of(by_requirement.get(requirement.id))

        if status == ComplianceStatus.COMPLIES:
            summary.complies += 1
        elif status == ComplianceStatus.MISSING_INFO:
            summary.missing += 1
        elif status == ComplianceStatus.FAIL:
            summary.fail += 1
        elif status == ComplianceStatus.NOT_APPLICABLE:
            summary.na += 1

        blocking = requirement.type == RequirementType.GATING.value and status == ComplianceStatus.FAIL
        items.append(ValidationItem(
            requirement_id=str(requirement.id),
            requirement_text=requirement.text,
            requirement_type=requirement.type,
            status=status,
            blocking=blocking,
        ))

    return ValidationResult(
        summary=summary,
        blocking=any(item.blocking for item in items),
        items=items,
    )


async def validate_submission(rfp_id: uuid.UUID, store: Optional[RFPStore] = None) -> ValidationResult:
    """Validate submission readiness for an RFP."""
    store = store or get_store()

    requirements = await store.get_requirements(rfp_id)
    compliance_items = await store.get_compliance_items(rfp_id)
    result = validate_requirements(requirements, compliance_items)

    logger.info(
        f"Validated RFP {rfp_id}: {result.summary.complies} complies, "
        f"{result.summary.missing} missing, {result.summary.fail} fail, "
        f"blocking={result.blocking}"
    )
    return result


# ============================================================================
# Export
# ============================================================================

def build_document_content(
    rfp: RFP,
    sections: Sequence[DraftSection],
    requirements: Sequence[Requirement],
    compliance_items: Sequence[ComplianceItem],
    today: Optional[date] = None
) -> str:
    """Render the submission package as plain text."""
    today = today or date.today()
    by_requirement = {item.requirement_id: item for item in compliance_items}
    matrix_number = len(sections) + 1
    lines = []

    # Cover page
    lines += [
        "PROPOSAL SUBMISSION",
        "",
        f"RFP: {rfp.title}",
        f"Issuer: {rfp.issuer or 'N/A'}",
        f"Reference: {rfp.reference_id or 'N/A'}",
        f"Date: {today.isoformat()}",
        "",
        RULE_HEAVY,
        "",
    ]

    lines += ["TABLE OF CONTENTS", ""]
    for i, section in enumerate(sections, start=1):
        lines.append(f"{i}. {section.section_key}")
    lines += [f"{matrix_number}. Compliance Matrix", "", RULE_HEAVY, ""]

    for i, section in enumerate(sections, start=1):
        lines += [
            f"{i}. {section.section_key.upper()}",
            "",
            section.content or "No content available.",
            "",
            RULE_LIGHT,
            "",
        ]

    lines += [
        f"{matrix_number}. COMPLIANCE MATRIX",
        "",
        "Requirement | Type | Status | Evidence",
        RULE_LIGHT,
    ]
    for requirement in requirements:
        item = by_requirement.get(requirement.id)
        status = _status_of(item).value
        evidence = (item.evidence if item else None) or "N/A"
        lines.append(
            f"{requirement.text[:40]}... | {requirement.type} | {status} | {evidence[:20]}..."
        )

    return "\n".join(lines) + "\n"


def export_filename(rfp: RFP, export_format: ExportFormat, today: Optional[date] = None) -> str:
    """PROPOSAL_<reference>_<YYYYMMDD>.<format>"""
    today = today or date.today()
    reference = re.sub(r"[\\/\s]+", "-", rfp.reference_id) if rfp.reference_id else "RFP"
    return f"PROPOSAL_{reference}_{today.strftime('%Y%m%d')}.{export_format.value}"


async def export_submission(
    rfp_id: uuid.UUID,
    export_format: ExportFormat,
    include_sections: Sequence[str],
    store: Optional[RFPStore] = None
) -> ExportResult:
    """
    Build the submission package for an RFP.

    Only the draft sections named in `include_sections` are included, in
    that order; a repeated name is included once.

    Raises:
        RFPNotFound: If the RFP does not exist
    """
    store = store or get_store()

    rfp = await store.get_rfp(rfp_id)
    if rfp is None:
        raise RFPNotFound(f"RFP {rfp_id} not found")

    drafts = {d.section_key: d for d in await store.get_drafts(rfp_id)}
    sections = [drafts[key] for key in dict.fromkeys(include_sections) if key in drafts]
    requirements = await store.get_requirements(rfp_id)
    compliance_items = await store.get_compliance_items(rfp_id)

    content = build_document_content(rfp, sections, requirements, compliance_items)
    filename = export_filename(rfp, export_format)
    encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")

    logger.info(f"Exported RFP {rfp_id} as {filename} ({len(sections)} sections)")
    return ExportResult(url=f"data:text/plain;base64,{encoded}", filename=filename)
