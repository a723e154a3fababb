"""
Compliance Checker

Runs the compliance rules over every requirement of an RFP and stores one
compliance item per requirement.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from services.compliance_rules import evaluate_requirement
from services.rfp_store import RFPStore, get_store, requirement_context, attachment_info

logger = logging.getLogger("rfp_manager.services.compliance")


async def run_compliance_check(
    rfp_id: uuid.UUID,
    user_id: str,
    store: Optional[RFPStore] = None
) -> int:
    """
    Evaluate and store compliance for all requirements of an RFP.

    Statuses are recomputed from scratch on every run and overwrite the
    stored ones. A failed write is logged and skipped; the rest of the
    batch still runs.

    Args:
        rfp_id: RFP to check
        user_id: Caller recorded on each compliance item
        store: Storage service (defaults to the database store)

    Returns:
        Number of requirements processed
    """
    store = store or get_store()

    requirements = await store.get_requirements(rfp_id)
    drafts = await store.get_draft_texts(rfp_id)
    attachments = [attachment_info(a) for a in await store.get_attachments(rfp_id)]

    logger.info(
        f"Checking compliance for RFP {rfp_id}: {len(requirements)} requirements, "
        f"{len(drafts)} drafts, {len(attachments)} attachments"
    )

    verdicts = [
        (requirement.id, evaluate_requirement(requirement_context(requirement), drafts, attachments))
        for requirement in requirements
    ]

    failed = 0
    for requirement_id, verdict in verdicts:
        try:
            await store.save_verdict(rfp_id, requirement_id, user_id, verdict)
        except SQLAlchemyError as e:
            failed += 1
            logger.error(f"Error upserting compliance item for requirement {requirement_id}: {str(e)}")

    if failed:
        logger.warning(f"Compliance check for RFP {rfp_id} finished with {failed} failed writes")
    else:
        logger.info(f"Compliance check for RFP {rfp_id} completed")

    return len(verdicts)
