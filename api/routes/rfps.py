"""
RFPs Router (v1)

Upload and extraction of RFP documents, and the requirements, deadlines,
draft sections and attachments tracked per RFP.
"""

import logging
import time
from typing import List

from fastapi import APIRouter, Depends, File, Request, UploadFile

from api.auth.dependencies import get_current_user_id
from api.middleware.error_handler import ValidationError
from api.middleware.rate_limit import limiter, LIMIT_UPLOAD
from api.routes.common import parse_id, require_rfp
from schemas.rfp import (
    AttachmentCreate,
    AttachmentResponse,
    DeadlineResponse,
    DraftSectionResponse,
    DraftSectionUpsert,
    ExtractionMeta,
    ExtractionResponse,
    RequirementCreate,
    RequirementResponse,
    RFPResponse,
)
from database.models import Attachment, DraftSection, RFPDeadline
from services.document_processor import get_processor
from services.extraction import extract_fields
from services.rfp_store import get_store

logger = logging.getLogger("rfp_manager.api.rfps")

router = APIRouter(prefix="/rfps", tags=["RFPs"])


def _deadline_response(deadline: RFPDeadline) -> DeadlineResponse:
    return DeadlineResponse(
        id=str(deadline.id),
        type=deadline.type,
        datetime_iso=deadline.datetime_iso,
        timezone=deadline.timezone
    )


def _draft_response(draft: DraftSection) -> DraftSectionResponse:
    return DraftSectionResponse(
        id=str(draft.id),
        rfp_id=str(draft.rfp_id),
        section_key=draft.section_key,
        content=draft.content,
        why_it_scores=draft.why_it_scores,
        placeholders_needed=draft.placeholders_needed or [],
        risks=draft.risks
    )


def _attachment_response(attachment: Attachment) -> AttachmentResponse:
    return AttachmentResponse(
        id=str(attachment.id),
        rfp_id=str(attachment.rfp_id),
        type=attachment.type,
        filename=attachment.filename,
        url=attachment.url or "",
        signed=bool(attachment.signed)
    )


@router.post("/extract", response_model=ExtractionResponse)
@limiter.limit(LIMIT_UPLOAD)
async def extract_rfp(
    request: Request,
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id)
):
    """
    Upload an RFP document and extract its structured fields.

    Saves the RFP and its deadlines for the calling user.
    """
    start_time = time.perf_counter()

    if not file.filename:
        raise ValidationError("No file provided")

    content = await file.read()
    logger.info(f"Processing: {file.filename} ({len(content)} bytes)")

    processed = get_processor().process_bytes(content, file.filename)
    for warning in processed["warnings"]:
        logger.warning(f"{file.filename}: {warning}")

    text = processed["text"]
    logger.info(f"Extracted text length: {len(text)} chars")

    extracted = extract_fields(text)
    rfp = await get_store().create_rfp(user_id, extracted, text)
    extracted.id = str(rfp.id)

    duration_ms = int((time.perf_counter() - start_time) * 1000)
    logger.info(f"Extraction complete in {duration_ms}ms")

    return ExtractionResponse(
        rfp_id=str(rfp.id),
        extracted=extracted,
        meta=ExtractionMeta(duration_ms=duration_ms, method="regex")
    )


@router.post("/{rfp_id}/requirements", response_model=RequirementResponse, status_code=201)
async def create_requirement(
    rfp_id: str,
    data: RequirementCreate,
    user_id: str = Depends(get_current_user_id)
):
    """Add a requirement to an RFP."""
    store = get_store()
    rfp_uuid = parse_id(rfp_id)
    await require_rfp(store, rfp_uuid)

    fields = data.model_dump()
    fields["type"] = data.type.value
    requirement = await store.add_requirement(rfp_uuid, fields)

    return RequirementResponse(
        id=str(requirement.id),
        rfp_id=str(rfp_uuid),
        text=requirement.text,
        type=requirement.type,
        category=requirement.category,
        priority=requirement.priority,
        section_key=requirement.section_key
    )


@router.get("/{rfp_id}/requirements", response_model=List[RequirementResponse])
async def list_requirements(
    rfp_id: str,
    user_id: str = Depends(get_current_user_id)
):
    """List the requirements of an RFP."""
    store = get_store()
    rfp_uuid = parse_id(rfp_id)
    await require_rfp(store, rfp_uuid)

    return [
        RequirementResponse(
            id=str(r.id),
            rfp_id=str(r.rfp_id),
            text=r.text,
            type=r.type,
            category=r.category,
            priority=r.priority,
            section_key=r.section_key
        )
        for r in await store.get_requirements(rfp_uuid)
    ]


@router.put("/{rfp_id}/drafts/{section_key}", response_model=DraftSectionResponse)
async def save_draft(
    rfp_id: str,
    section_key: str,
    data: DraftSectionUpsert,
    user_id: str = Depends(get_current_user_id)
):
    """Create or replace the draft of one proposal section."""
    store = get_store()
    rfp_uuid = parse_id(rfp_id)
    await require_rfp(store, rfp_uuid)

    draft = await store.upsert_draft(rfp_uuid, section_key, user_id, data.model_dump())
    return _draft_response(draft)


@router.post("/{rfp_id}/attachments", response_model=AttachmentResponse, status_code=201)
async def add_attachment(
    rfp_id: str,
    data: AttachmentCreate,
    user_id: str = Depends(get_current_user_id)
):
    """Register attachment metadata for an RFP."""
    store = get_store()
    rfp_uuid = parse_id(rfp_id)
    await require_rfp(store, rfp_uuid)

    attachment = await store.add_attachment(rfp_uuid, data.model_dump())
    return _attachment_response(attachment)


@router.get("/{rfp_id}", response_model=RFPResponse)
async def get_rfp(
    rfp_id: str,
    user_id: str = Depends(get_current_user_id)
):
    """Get an RFP with its extracted fields and deadlines, earliest first."""
    store = get_store()
    rfp_uuid = parse_id(rfp_id)
    rfp = await require_rfp(store, rfp_uuid)
    deadlines = await store.get_deadlines(rfp_uuid)

    return RFPResponse(
        id=str(rfp.id),
        title=rfp.title,
        issuer=rfp.issuer,
        reference_id=rfp.reference_id,
        budget_cap_amount=rfp.budget_cap_amount,
        budget_cap_currency=rfp.budget_cap_currency,
        duration_months=rfp.duration_months,
        language=rfp.language,
        submission_channel=rfp.submission_channel,
        partial_proposals_allowed=rfp.partial_proposals_allowed,
        confidence=rfp.confidence,
        deadlines=[_deadline_response(d) for d in deadlines]
    )


@router.get("/{rfp_id}/deadlines", response_model=List[DeadlineResponse])
async def list_deadlines(
    rfp_id: str,
    user_id: str = Depends(get_current_user_id)
):
    """Timeline of an RFP, earliest deadline first."""
    store = get_store()
    rfp_uuid = parse_id(rfp_id)
    await require_rfp(store, rfp_uuid)

    return [_deadline_response(d) for d in await store.get_deadlines(rfp_uuid)]


@router.get("/{rfp_id}/drafts", response_model=List[DraftSectionResponse])
async def list_drafts(
    rfp_id: str,
    user_id: str = Depends(get_current_user_id)
):
    """List the draft sections of an RFP by section key."""
    store = get_store()
    rfp_uuid = parse_id(rfp_id)
    await require_rfp(store, rfp_uuid)

    return [_draft_response(d) for d in await store.get_drafts(rfp_uuid)]


@router.get("/{rfp_id}/attachments", response_model=List[AttachmentResponse])
async def list_attachments(
    rfp_id: str,
    user_id: str = Depends(get_current_user_id)
):
    store = get_store()
    rfp_uuid = parse_id(rfp_id)
    await require_rfp(store, rfp_uuid)

    return [_attachment_response(a) for a in await store.get_attachments(rfp_uuid)]
