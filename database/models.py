"""
Database Models

SQLAlchemy models for RFP responses: RFPs, requirements, drafts,
attachments and compliance items.
"""

import uuid
from datetime import datetime, date
from typing import Optional, List

from sqlalchemy import (
    String, Text, Integer, Float, Boolean, DateTime, Date, JSON, Uuid,
    ForeignKey, Index, UniqueConstraint
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func


# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ============================================================================
# RFP MODELS
# ============================================================================

class RFP(Base):
    """An uploaded RFP with its extracted fields."""
    __tablename__ = "rfps"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    issuer: Mapped[Optional[str]] = mapped_column(String(255))
    reference_id: Mapped[Optional[str]] = mapped_column(String(100))
    budget_cap_amount: Mapped[Optional[float]] = mapped_column(Float)
    budget_cap_currency: Mapped[Optional[str]] = mapped_column(String(10))
    duration_months: Mapped[Optional[int]] = mapped_column(Integer)
    language: Mapped[Optional[str]] = mapped_column(String(10))
    submission_channel: Mapped[Optional[str]] = mapped_column(String(255))
    partial_proposals_allowed: Mapped[Optional[bool]] = mapped_column(Boolean)
    confidence: Mapped[Optional[float]] = mapped_column(Float)
    raw_text: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    # Relationships
    deadlines: Mapped[List["RFPDeadline"]] = relationship(
        back_populates="rfp",
        cascade="all, delete-orphan"
    )
    requirements: Mapped[List["Requirement"]] = relationship(
        back_populates="rfp",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_rfps_user", "user_id"),
    )


class RFPDeadline(Base):
    """A dated milestone extracted from the RFP (submission, clarifications, ...)."""
    __tablename__ = "rfp_deadlines"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    rfp_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("rfps.id", ondelete="CASCADE"),
        nullable=False
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    datetime_iso: Mapped[str] = mapped_column(String(50), nullable=False)
    timezone: Mapped[Optional[str]] = mapped_column(String(10))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    rfp: Mapped["RFP"] = relationship(back_populates="deadlines")

    __table_args__ = (
        Index("idx_deadlines_rfp", "rfp_id"),
    )


class Requirement(Base):
    """
    A single obligation extracted from an RFP.

    Types: mandatory, optional, gating
    """
    __tablename__ = "rfp_requirements"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    rfp_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("rfps.id", ondelete="CASCADE"),
        nullable=False
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[Optional[str]] = mapped_column(String(20), default="mandatory")
    category: Mapped[Optional[str]] = mapped_column(String(100))
    priority: Mapped[Optional[str]] = mapped_column(String(20))
    section_key: Mapped[Optional[str]] = mapped_column(String(100))
    source_page: Mapped[Optional[int]] = mapped_column(Integer)
    source_section: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    rfp: Mapped["RFP"] = relationship(back_populates="requirements")

    __table_args__ = (
        Index("idx_requirements_rfp", "rfp_id"),
    )


class DraftSection(Base):
    """Proposal section text, one per (RFP, section key)."""
    __tablename__ = "draft_sections"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    rfp_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("rfps.id", ondelete="CASCADE"),
        nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    section_key: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text)
    why_it_scores: Mapped[Optional[str]] = mapped_column(Text)
    placeholders_needed: Mapped[list] = mapped_column(JSONType, default=list)
    risks: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("rfp_id", "section_key", name="uq_rfp_section"),
    )


class Attachment(Base):
    """Supporting document metadata (CVs, financials, certificates, ...)."""
    __tablename__ = "attachments"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    rfp_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("rfps.id", ondelete="CASCADE"),
        nullable=False
    )
    type: Mapped[str] = mapped_column(String(100), nullable=False)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text, default="")
    signed: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    __table_args__ = (
        Index("idx_attachments_rfp", "rfp_id"),
    )


class ComplianceItem(Base):
    """
    Evaluated compliance of one requirement.

    At most one row per (rfp_id, requirement_id).
    Status: complies, missing_info, fail, not_applicable
    """
    __tablename__ = "compliance_items"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )
    rfp_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("rfps.id", ondelete="CASCADE"),
        nullable=False
    )
    requirement_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("rfp_requirements.id", ondelete="CASCADE"),
        nullable=False
    )
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="missing_info")
    evidence: Mapped[Optional[str]] = mapped_column(Text)
    action_item: Mapped[Optional[str]] = mapped_column(Text)
    owner: Mapped[Optional[str]] = mapped_column(String(255))
    due_date: Mapped[Optional[date]] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now()
    )

    __table_args__ = (
        UniqueConstraint("rfp_id", "requirement_id", name="uq_rfp_requirement"),
        Index("idx_compliance_rfp", "rfp_id"),
    )
