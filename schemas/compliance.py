"""
Compliance Schemas

Data models for rule verdicts, compliance items and the automatic check.
"""

from datetime import date
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class ComplianceStatus(str, Enum):
    """Status of a compliance item."""
    COMPLIES = "complies"
    MISSING_INFO = "missing_info"
    FAIL = "fail"
    NOT_APPLICABLE = "not_applicable"


class RequirementContext(BaseModel):
    """The parts of a requirement a compliance rule may inspect."""
    text: str = Field(..., description="Requirement text")
    type: Optional[str] = Field(default=None, description="mandatory, optional or gating")
    category: Optional[str] = Field(default=None, description="Requirement category")
    priority: Optional[str] = Field(default=None, description="Requirement priority")
    section_key: Optional[str] = Field(default=None, description="Draft section addressing it")


class AttachmentInfo(BaseModel):
    """Attachment metadata used for document-presence checks."""
    type: str = Field(default="", description="Attachment type label")
    filename: str = Field(default="", description="Original filename")


class RuleVerdict(BaseModel):
    """Outcome of evaluating one requirement."""
    status: ComplianceStatus = Field(..., description="Compliance status")
    evidence: Optional[str] = Field(default=None, description="Where the requirement is addressed")
    action_item: Optional[str] = Field(default=None, description="What is still needed")


class ComplianceCheckRequest(BaseModel):
    """Request to run the rule-based compliance check for an RFP."""
    rfp_id: Optional[str] = Field(default=None, description="RFP to check")


class ComplianceCheckResponse(BaseModel):
    """Summary of an automatic compliance run."""
    success: bool = True
    processed: int = Field(..., description="Number of requirements evaluated")
    message: str = "Compliance check completed"


class ComplianceItemResponse(BaseModel):
    """A stored compliance item."""
    id: str
    rfp_id: str
    requirement_id: str
    user_id: str
    status: ComplianceStatus
    evidence: Optional[str] = None
    action_item: Optional[str] = None
    owner: Optional[str] = None
    due_date: Optional[date] = None


class ComplianceItemUpdate(BaseModel):
    """Manual edit of a compliance item; unset fields are left unchanged."""
    status: Optional[ComplianceStatus] = None
    evidence: Optional[str] = None
    action_item: Optional[str] = None
    owner: Optional[str] = None
    due_date: Optional[date] = None
