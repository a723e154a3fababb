"""
RFP Field Extraction

Regex extraction of structured RFP fields (title, issuer, budget cap,
deadlines, ...) from cleaned document text.
"""

import logging
import re
from datetime import datetime
from typing import Optional

from dateutil import parser as date_parser

from schemas.rfp import ExtractedDeadline, ExtractedRFP

logger = logging.getLogger("rfp_manager.services.extraction")

REGEX_CONFIDENCE = 0.6

# Column widths in database/models.py
REFERENCE_MAX_LENGTH = 100

DEADLINE_PATTERNS = [
    (
        "clarifications",
        r"(?:Request\s*for\s*clarification|Clarifications?\s*deadline)[:\s]*"
        r"(\d{1,2}\s+\w+\s+\d{4})\s*(\d{2}:\d{2})?(?:\s*((?-i:[A-Z]{3,4}))\b)?",
    ),
    (
        "info_session",
        r"(?:Information\s*Session|Info\s*session)[:\s]*"
        r"(\d{1,2}\s+\w+\s+\d{4})\s*(\d{2}:\d{2})?(?:\s*((?-i:[A-Z]{3,4}))\b)?",
    ),
    (
        "submission",
        r"(?:Submission\s*of\s*proposals?|Proposal\s*deadline|Closing\s*date)[:\s]*"
        r"(\d{1,2}\s+\w+\s+\d{4})\s*(\d{2}:\d{2})?(?:\s*((?-i:[A-Z]{3,4}))\b)?",
    ),
    (
        "contract_start",
        r"(?:Expected\s*(?:agreement|contract)\s*start\s*date|Contract\s*start)[:\s]*"
        r"(\d{1,2}\s+\w+\s+\d{4})",
    ),
]


def _find(pattern: str, text: str, flags: int = re.IGNORECASE) -> Optional[re.Match]:
    return re.search(pattern, text, flags)


def parse_deadline_date(date_str: str, time_str: str = "23:59") -> str:
    """
    Turn "12 October 2025" plus "17:00" into "2025-10-12T17:00:00".

    Unparseable dates fall back to the current time.
    """
    try:
        day = date_parser.parse(date_str, dayfirst=True)
    except (ValueError, OverflowError):
        return datetime.now().isoformat()
    return f"{day.strftime('%Y-%m-%d')}T{time_str}:00"


def extract_fields(text: str) -> ExtractedRFP:
    """
    Extract RFP fields with regular expressions.

    Args:
        text: Cleaned document text

    Returns:
        Extracted fields; anything not found stays None
    """
    result = ExtractedRFP(confidence=REGEX_CONFIDENCE)

    match = _find(r"(?:Call for Proposals|Request for Proposals|RFP)[:\s]*([^\n]{10,150})", text)
    if match:
        result.title = match.group(1).strip()

    match = _find(
        r"(?:UNOPS|World Bank|European Commission|Ministry|City Council|Nations?|Government)[^\n]*",
        text
    )
    if match:
        result.issuer = match.group(0).strip()[:100]

    match = _find(r"([A-Z]+/[A-Z]+/\d{4}/\d+)", text, 0)
    if match:
        result.reference_id = match.group(1)[:REFERENCE_MAX_LENGTH]

    match = _find(
        r"Budget\s*(?:Ceiling|Cap|Amount)[:\s]*(?:up to\s*)?(?:USD|EUR|GBP)?\s*([\d.,]+)\s*(?:USD|EUR|GBP)?",
        text
    )
    if match:
        currency = _find(r"USD|EUR|GBP", text)
        try:
            result.financials.budget_cap.amount = float(match.group(1).replace(",", ""))
            result.financials.budget_cap.currency = currency.group(0).upper() if currency else "USD"
        except ValueError:
            logger.debug(f"Unparseable budget amount: {match.group(1)}")

    match = _find(r"(?:duration|grant period)[:\s]*(\d+)\s*months?", text)
    if match:
        result.duration_months = int(match.group(1))

    match = _find(r"Language\s*of\s*proposals?[:\s]*(English|Spanish|French|Portuguese|German)", text)
    if match:
        result.submission.language = match.group(1).lower()[:2]

    match = _find(
        r"(?:Grant\+|iSupplier|Ariba|Mercell|grantplus\.unops\.org|submit.*(?:via|through|at))[^\n]*",
        text
    )
    if match:
        result.submission.channel = match.group(0).strip()[:100]

    match = _find(r"Partial\s*proposals[:\s]*(not\s*permitted|not\s*allowed|are\s*permitted|allowed)", text)
    if match:
        result.submission.partial_proposals_allowed = "not" not in match.group(1).lower()

    for deadline_type, pattern in DEADLINE_PATTERNS:
        match = _find(pattern, text)
        if not match:
            continue
        groups = match.groups()
        time_str = groups[1] if len(groups) > 1 and groups[1] else "23:59"
        timezone = groups[2] if len(groups) > 2 and groups[2] else "UTC"
        result.deadlines.append(ExtractedDeadline(
            type=deadline_type,
            datetime_iso=parse_deadline_date(groups[0], time_str),
            timezone=timezone,
        ))

    logger.info(
        f"Regex extraction found title={bool(result.title)}, "
        f"reference={result.reference_id}, {len(result.deadlines)} deadlines"
    )
    return result
