"""
Submission Schemas

Data models for submission validation and export.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from schemas.compliance import ComplianceStatus


class SubmissionRequest(BaseModel):
    """Request naming the RFP whose submission is validated."""
    rfp_id: Optional[str] = Field(default=None, description="RFP to validate")


class ValidationSummary(BaseModel):
    """Requirement counts per compliance status."""
    complies: int = 0
    missing: int = 0
    fail: int = 0
    na: int = 0


class ValidationItem(BaseModel):
    """Compliance of one requirement as seen by the validator."""
    requirement_id: str
    requirement_text: str
    requirement_type: Optional[str] = None
    status: ComplianceStatus
    blocking: bool = Field(default=False, description="Gating requirement that fails")


class ValidationResult(BaseModel):
    """Submission readiness for an RFP."""
    summary: ValidationSummary = Field(default_factory=ValidationSummary)
    blocking: bool = Field(default=False, description="Any blocking item present")
    items: list[ValidationItem] = Field(default_factory=list)


class ExportFormat(str, Enum):
    """Supported export file extensions."""
    DOCX = "docx"
    PDF = "pdf"
    TXT = "txt"


class ExportRequest(BaseModel):
    """Request to export a submission package."""
    rfp_id: Optional[str] = Field(default=None, description="RFP to export")
    format: Optional[ExportFormat] = Field(default=None, description="Target file extension")
    include_sections: list[str] = Field(
        default_factory=list,
        description="Draft section keys to include"
    )


class ExportResult(BaseModel):
    """Exported package location."""
    url: str = Field(..., description="data: URL holding the document")
    filename: str
