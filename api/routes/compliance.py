"""
Compliance Router (v1)

Rule-based compliance check and the per-requirement compliance matrix.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from api.auth.dependencies import get_current_user_id
from api.middleware.error_handler import NotFoundError
from api.middleware.rate_limit import limiter, LIMIT_CHECK
from api.routes.common import parse_id, require_rfp
from database.models import ComplianceItem
from schemas.compliance import (
    ComplianceCheckRequest,
    ComplianceCheckResponse,
    ComplianceItemResponse,
    ComplianceItemUpdate,
)
from services.compliance_checker import run_compliance_check
from services.rfp_store import get_store

logger = logging.getLogger("rfp_manager.api.compliance")

router = APIRouter(tags=["Compliance"])


def _item_response(item: ComplianceItem) -> ComplianceItemResponse:
    return ComplianceItemResponse(
        id=str(item.id),
        rfp_id=str(item.rfp_id),
        requirement_id=str(item.requirement_id),
        user_id=item.user_id,
        status=item.status,
        evidence=item.evidence,
        action_item=item.action_item,
        owner=item.owner,
        due_date=item.due_date
    )


@router.post("/compliance/check-auto", response_model=ComplianceCheckResponse)
@limiter.limit(LIMIT_CHECK)
async def check_compliance_auto(
    request: Request,
    data: ComplianceCheckRequest,
    user_id: str = Depends(get_current_user_id)
):
    """
    Run the rule-based compliance check for every requirement of an RFP.

    Overwrites the status, evidence and action item of existing compliance
    items. Individual write failures are logged, not reported.
    """
    rfp_uuid = parse_id(data.rfp_id)

    processed = await run_compliance_check(rfp_uuid, user_id)

    return ComplianceCheckResponse(processed=processed)


@router.get("/rfps/{rfp_id}/compliance", response_model=List[ComplianceItemResponse])
async def list_compliance_items(
    rfp_id: str,
    user_id: str = Depends(get_current_user_id)
):
    """List the stored compliance items of an RFP."""
    store = get_store()
    rfp_uuid = parse_id(rfp_id)
    await require_rfp(store, rfp_uuid)

    return [_item_response(item) for item in await store.get_compliance_items(rfp_uuid)]


@router.patch(
    "/rfps/{rfp_id}/compliance/{requirement_id}",
    response_model=ComplianceItemResponse
)
async def update_compliance_item(
    rfp_id: str,
    requirement_id: str,
    data: ComplianceItemUpdate,
    user_id: str = Depends(get_current_user_id)
):
    """Manually edit the compliance item of one requirement."""
    store = get_store()
    rfp_uuid = parse_id(rfp_id)
    requirement_uuid = parse_id(requirement_id, "requirement_id")
    await require_rfp(store, rfp_uuid)

    requirements = await store.get_requirements(rfp_uuid)
    if not any(r.id == requirement_uuid for r in requirements):
        raise NotFoundError("Requirement not found")

    fields = data.model_dump(exclude_unset=True)
    if "status" in fields:
        status = fields.pop("status")
        if status is not None:
            fields["status"] = status.value

    item = await store.upsert_compliance_item(rfp_uuid, requirement_uuid, user_id, fields)
    logger.info(f"Compliance item for requirement {requirement_uuid} edited: {sorted(fields)}")

    return _item_response(item)
