"""
RFP Manager - Services Package

Compliance evaluation, submission handling, extraction and storage.
"""

from services.compliance_rules import RULES, Rule, evaluate_requirement
from services.compliance_checker import run_compliance_check
from services.document_processor import DocumentProcessor, get_processor
from services.extraction import extract_fields
from services.rfp_store import RFPStore, get_store
from services.submission import export_submission, validate_submission

__all__ = [
    "RULES",
    "Rule",
    "evaluate_requirement",
    "run_compliance_check",
    "DocumentProcessor",
    "get_processor",
    "extract_fields",
    "RFPStore",
    "get_store",
    "export_submission",
    "validate_submission",
]
