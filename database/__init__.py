"""
Database Package

SQLAlchemy models for RFPs, their requirements, drafts, attachments and
compliance items, plus async connection management.
"""

from database.connection import (
    get_db_context,
    get_engine,
    init_db,
    drop_db,
    close_db,
)

from database.models import (
    Base,
    RFP,
    RFPDeadline,
    Requirement,
    DraftSection,
    Attachment,
    ComplianceItem,
)

__all__ = [
    "get_db_context",
    "get_engine",
    "init_db",
    "drop_db",
    "close_db",
    "Base",
    "RFP",
    "RFPDeadline",
    "Requirement",
    "DraftSection",
    "Attachment",
    "ComplianceItem",
]
