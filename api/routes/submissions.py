"""
Submissions Router (v1)

Submission readiness validation and package export.
"""

from fastapi import APIRouter, Depends

from api.auth.dependencies import get_current_user_id
from api.middleware.error_handler import NotFoundError, ValidationError
from api.routes.common import parse_id
from schemas.submission import (
    ExportRequest,
    ExportResult,
    SubmissionRequest,
    ValidationResult,
)
from services.submission import RFPNotFound, export_submission, validate_submission

router = APIRouter(prefix="/submissions", tags=["Submissions"])


@router.post("/validate", response_model=ValidationResult)
async def validate(
    data: SubmissionRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Summarise compliance and report blocking gating failures."""
    return await validate_submission(parse_id(data.rfp_id))


@router.post("/export", response_model=ExportResult)
async def export(
    data: ExportRequest,
    user_id: str = Depends(get_current_user_id)
):
    """Export the selected draft sections and the compliance matrix."""
    rfp_uuid = parse_id(data.rfp_id)
    if data.format is None:
        raise ValidationError("rfp_id and format are required")

    try:
        return await export_submission(rfp_uuid, data.format, data.include_sections)
    except RFPNotFound:
        raise NotFoundError("RFP not found")
