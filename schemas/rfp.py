"""
RFP Schemas

Data models for RFP field extraction and the records tracked per RFP.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class RequirementType(str, Enum):
    """How a requirement affects submission eligibility."""
    MANDATORY = "mandatory"
    OPTIONAL = "optional"
    GATING = "gating"


# ============================================================================
# Extraction
# ============================================================================

class ExtractedDeadline(BaseModel):
    """A dated milestone found in the RFP text."""
    type: str = Field(..., description="clarifications, info_session, submission or contract_start")
    datetime_iso: str = Field(..., description="Local date and time, ISO format")
    timezone: str = Field(default="UTC", description="Timezone abbreviation")


class BudgetCap(BaseModel):
    amount: Optional[float] = None
    currency: Optional[str] = None


class Financials(BaseModel):
    budget_cap: BudgetCap = Field(default_factory=BudgetCap)


class SubmissionInfo(BaseModel):
    channel: Optional[str] = None
    language: Optional[str] = None
    partial_proposals_allowed: Optional[bool] = None


class EvaluationInfo(BaseModel):
    method: str = "weighted"
    criteria: list = Field(default_factory=list)


class ExtractedRFP(BaseModel):
    """Structured fields extracted from an RFP document."""
    id: Optional[str] = None
    title: Optional[str] = None
    issuer: Optional[str] = None
    reference_id: Optional[str] = None
    deadlines: list[ExtractedDeadline] = Field(default_factory=list)
    financials: Financials = Field(default_factory=Financials)
    duration_months: Optional[int] = None
    submission: SubmissionInfo = Field(default_factory=SubmissionInfo)
    evaluation: EvaluationInfo = Field(default_factory=EvaluationInfo)
    required_documents: list = Field(default_factory=list)
    citations: list = Field(default_factory=list)
    confidence: float = Field(default=0.6, ge=0.0, le=1.0)


class ExtractionMeta(BaseModel):
    duration_ms: int
    method: str


class ExtractionResponse(BaseModel):
    """Response from RFP upload and extraction."""
    rfp_id: str
    extracted: ExtractedRFP
    meta: ExtractionMeta


# ============================================================================
# Requirements, drafts and attachments
# ============================================================================

class RequirementCreate(BaseModel):
    text: str = Field(..., min_length=1, description="Requirement text")
    type: RequirementType = RequirementType.MANDATORY
    category: Optional[str] = None
    priority: Optional[str] = None
    section_key: Optional[str] = None
    source_page: Optional[int] = None
    source_section: Optional[str] = None


class RequirementResponse(BaseModel):
    id: str
    rfp_id: str
    text: str
    type: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    section_key: Optional[str] = None


class DraftSectionUpsert(BaseModel):
    content: Optional[str] = None
    why_it_scores: Optional[str] = None
    placeholders_needed: list[str] = Field(default_factory=list)
    risks: Optional[str] = None


class DraftSectionResponse(BaseModel):
    id: str
    rfp_id: str
    section_key: str
    content: Optional[str] = None
    why_it_scores: Optional[str] = None
    placeholders_needed: list[str] = Field(default_factory=list)
    risks: Optional[str] = None


class AttachmentCreate(BaseModel):
    type: str = Field(..., min_length=1, description="Attachment type label (cv, financials, ...)")
    filename: str = Field(..., min_length=1)
    url: str = ""
    signed: bool = False


class AttachmentResponse(BaseModel):
    id: str
    rfp_id: str
    type: str
    filename: str
    url: str = ""
    signed: bool = False


# ============================================================================
# Tracked RFP
# ============================================================================

class DeadlineResponse(BaseModel):
    id: str
    type: str
    datetime_iso: str
    timezone: Optional[str] = None


class RFPResponse(BaseModel):
    """A stored RFP with its deadlines, earliest first."""
    id: str
    title: str
    issuer: Optional[str] = None
    reference_id: Optional[str] = None
    budget_cap_amount: Optional[float] = None
    budget_cap_currency: Optional[str] = None
    duration_months: Optional[int] = None
    language: Optional[str] = None
    submission_channel: Optional[str] = None
    partial_proposals_allowed: Optional[bool] = None
    confidence: Optional[float] = None
    deadlines: list[DeadlineResponse] = Field(default_factory=list)
