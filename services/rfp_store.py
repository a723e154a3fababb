"""
RFP Store

Async storage service over the RFP tables. Every method opens its own
session and commits on success, so each write is its own transaction.
"""

import logging
import uuid
from typing import Awaitable, Callable, Optional, List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import (
    Base, RFP, RFPDeadline, Requirement, DraftSection, Attachment, ComplianceItem
)
from database.connection import get_db_context
from schemas.compliance import AttachmentInfo, RequirementContext, RuleVerdict
from schemas.rfp import ExtractedRFP

logger = logging.getLogger("rfp_manager.services.store")

RAW_TEXT_LIMIT = 10000

# A concurrent writer can insert the row between our select and insert;
# the second attempt then finds it and updates
UPSERT_ATTEMPTS = 2


class RFPStore:
    """Reads and writes RFP records, keyed by RFP id."""

    # =========================================================================
    # RFPs
    # =========================================================================

    async def create_rfp(self, user_id: str, extracted: ExtractedRFP, raw_text: str) -> RFP:
        """Save an extracted RFP and its deadlines."""
        async with get_db_context() as db:
            rfp = RFP(
                user_id=user_id,
                title=extracted.title or "Untitled RFP",
                issuer=extracted.issuer,
                reference_id=extracted.reference_id,
                budget_cap_amount=extracted.financials.budget_cap.amount,
                budget_cap_currency=extracted.financials.budget_cap.currency,
                duration_months=extracted.duration_months,
                language=extracted.submission.language,
                submission_channel=extracted.submission.channel,
                partial_proposals_allowed=extracted.submission.partial_proposals_allowed,
                confidence=extracted.confidence,
                raw_text=raw_text[:RAW_TEXT_LIMIT],
            )
            db.add(rfp)
            await db.flush()

            for deadline in extracted.deadlines:
                db.add(RFPDeadline(
                    rfp_id=rfp.id,
                    type=deadline.type,
                    datetime_iso=deadline.datetime_iso,
                    timezone=deadline.timezone,
                ))

        return rfp

    async def get_rfp(self, rfp_id: uuid.UUID) -> Optional[RFP]:
        async with get_db_context() as db:
            result = await db.execute(select(RFP).where(RFP.id == rfp_id))
            return result.scalar_one_or_none()

    async def get_deadlines(self, rfp_id: uuid.UUID) -> List[RFPDeadline]:
        async with get_db_context() as db:
            result = await db.execute(
                select(RFPDeadline)
                .where(RFPDeadline.rfp_id == rfp_id)
                .order_by(RFPDeadline.datetime_iso)
            )
            return list(result.scalars().all())

    # =========================================================================
    # Requirements
    # =========================================================================

    async def add_requirement(self, rfp_id: uuid.UUID, fields: dict) -> Requirement:
        async with get_db_context() as db:
            requirement = Requirement(rfp_id=rfp_id, **fields)
            db.add(requirement)
        return requirement

    async def get_requirements(self, rfp_id: uuid.UUID) -> List[Requirement]:
        async with get_db_context() as db:
            result = await db.execute(
                select(Requirement)
                .where(Requirement.rfp_id == rfp_id)
                .order_by(Requirement.created_at, Requirement.id)
            )
            return list(result.scalars().all())

    # =========================================================================
    # Draft sections
    # =========================================================================

    async def upsert_draft(
        self,
        rfp_id: uuid.UUID,
        section_key: str,
        user_id: str,
        fields: dict
    ) -> DraftSection:
        """Create or replace the draft for (rfp_id, section_key)."""
        return await self._upsert(
            lambda db: self._find_draft(db, rfp_id, section_key),
            lambda: DraftSection(rfp_id=rfp_id, section_key=section_key, user_id=user_id),
            {**fields, "user_id": user_id}
        )

    async def _find_draft(
        self,
        db: AsyncSession,
        rfp_id: uuid.UUID,
        section_key: str
    ) -> Optional[DraftSection]:
        result = await db.execute(
            select(DraftSection).where(
                DraftSection.rfp_id == rfp_id,
                DraftSection.section_key == section_key
            )
        )
        return result.scalar_one_or_none()

    async def get_drafts(self, rfp_id: uuid.UUID) -> List[DraftSection]:
        async with get_db_context() as db:
            result = await db.execute(
                select(DraftSection)
                .where(DraftSection.rfp_id == rfp_id)
                .order_by(DraftSection.section_key)
            )
            return list(result.scalars().all())

    async def get_draft_texts(self, rfp_id: uuid.UUID) -> dict[str, str]:
        """Draft content indexed by section key ("" for empty drafts)."""
        drafts = await self.get_drafts(rfp_id)
        return {d.section_key: d.content or "" for d in drafts}

    # =========================================================================
    # Attachments
    # =========================================================================

    async def add_attachment(self, rfp_id: uuid.UUID, fields: dict) -> Attachment:
        async with get_db_context() as db:
            attachment = Attachment(rfp_id=rfp_id, **fields)
            db.add(attachment)
        return attachment

    async def get_attachments(self, rfp_id: uuid.UUID) -> List[Attachment]:
        async with get_db_context() as db:
            result = await db.execute(
                select(Attachment)
                .where(Attachment.rfp_id == rfp_id)
                .order_by(Attachment.created_at, Attachment.id)
            )
            return list(result.scalars().all())

    # =========================================================================
    # Compliance items
    # =========================================================================

    async def get_compliance_items(self, rfp_id: uuid.UUID) -> List[ComplianceItem]:
        async with get_db_context() as db:
            result = await db.execute(
                select(ComplianceItem)
                .where(ComplianceItem.rfp_id == rfp_id)
                .order_by(ComplianceItem.created_at, ComplianceItem.id)
            )
            return list(result.scalars().all())

    async def upsert_compliance_item(
        self,
        rfp_id: uuid.UUID,
        requirement_id: uuid.UUID,
        user_id: str,
        fields: dict
    ) -> ComplianceItem:
        """
        Write the compliance item for (rfp_id, requirement_id).

        Only the given fields are written; columns not in `fields` keep
        their stored values.
        """
        return await self._upsert(
            lambda db: self._find_compliance_item(db, rfp_id, requirement_id),
            lambda: ComplianceItem(rfp_id=rfp_id, requirement_id=requirement_id, user_id=user_id),
            {**fields, "user_id": user_id}
        )

    async def _find_compliance_item(
        self,
        db: AsyncSession,
        rfp_id: uuid.UUID,
        requirement_id: uuid.UUID
    ) -> Optional[ComplianceItem]:
        result = await db.execute(
            select(ComplianceItem).where(
                ComplianceItem.rfp_id == rfp_id,
                ComplianceItem.requirement_id == requirement_id
            )
        )
        return result.scalar_one_or_none()

    async def save_verdict(
        self,
        rfp_id: uuid.UUID,
        requirement_id: uuid.UUID,
        user_id: str,
        verdict: RuleVerdict
    ) -> ComplianceItem:
        """Store a rule verdict; owner and due date are left as they were."""
        return await self.upsert_compliance_item(
            rfp_id,
            requirement_id,
            user_id,
            {
                "status": verdict.status.value,
                "evidence": verdict.evidence,
                "action_item": verdict.action_item,
            }
        )

    # =========================================================================
    # Upsert
    # =========================================================================

    async def _upsert(
        self,
        find: Callable[[AsyncSession], Awaitable[Optional[Base]]],
        create: Callable[[], Base],
        fields: dict
    ) -> Base:
        """
        Update the row `find` returns, or insert a new one from `create`.

        Losing an insert race to another writer raises IntegrityError on the
        unique key; the write is then retried once against the stored row.
        """
        for attempt in range(1, UPSERT_ATTEMPTS + 1):
            try:
                async with get_db_context() as db:
                    row = await find(db)
                    if row is None:
                        row = create()
                        db.add(row)

                    for name, value in fields.items():
                        setattr(row, name, value)

                return row
            except IntegrityError:
                if attempt == UPSERT_ATTEMPTS:
                    raise
                logger.warning("Upsert conflicted with a concurrent insert; retrying as update")


def requirement_context(requirement: Requirement) -> RequirementContext:
    """View of a stored requirement as seen by the compliance rules."""
    return RequirementContext(
        text=requirement.text,
        type=requirement.type,
        category=requirement.category,
        priority=requirement.priority,
        section_key=requirement.section_key,
    )


def attachment_info(attachment: Attachment) -> AttachmentInfo:
    return AttachmentInfo(type=attachment.type or "", filename=attachment.filename or "")


# Factory function
def get_store() -> RFPStore:
    """Get an RFP store instance."""
    return RFPStore()
