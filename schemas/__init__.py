"""
RFP Manager - Pydantic Schemas

Data models for RFPs, compliance and submissions.
"""

from schemas.rfp import (
    RequirementType,
    DeadlineResponse,
    RFPResponse,
    ExtractedDeadline,
    ExtractedRFP,
    ExtractionResponse,
    RequirementCreate,
    RequirementResponse,
    DraftSectionUpsert,
    DraftSectionResponse,
    AttachmentCreate,
    AttachmentResponse,
)
from schemas.compliance import (
    ComplianceStatus,
    RequirementContext,
    AttachmentInfo,
    RuleVerdict,
    ComplianceCheckRequest,
    ComplianceCheckResponse,
    ComplianceItemResponse,
    ComplianceItemUpdate,
)
from schemas.submission import (
    SubmissionRequest,
    ValidationSummary,
    ValidationItem,
    ValidationResult,
    ExportFormat,
    ExportRequest,
    ExportResult,
)

__all__ = [
    # RFP
    "RequirementType",
    "DeadlineResponse",
    "RFPResponse",
    "ExtractedDeadline",
    "ExtractedRFP",
    "ExtractionResponse",
    "RequirementCreate",
    "RequirementResponse",
    "DraftSectionUpsert",
    "DraftSectionResponse",
    "AttachmentCreate",
    "AttachmentResponse",
    # Compliance
    "ComplianceStatus",
    "RequirementContext",
    "AttachmentInfo",
    "RuleVerdict",
    "ComplianceCheckRequest",
    "ComplianceCheckResponse",
    "ComplianceItemResponse",
    "ComplianceItemUpdate",
    # Submission
    "SubmissionRequest",
    "ValidationSummary",
    "ValidationItem",
    "ValidationResult",
    "ExportFormat",
    "ExportRequest",
    "ExportResult",
]
