"""Tests for RFP store upserts and reads."""

import pytest
from sqlalchemy.exc import IntegrityError

from schemas.compliance import ComplianceStatus, RuleVerdict
from schemas.rfp import ExtractedDeadline, ExtractedRFP
from services.rfp_store import RFPStore
from tests.conftest import TEST_USER


class LateLookupStore(RFPStore):
    """
    Misses the stored row on the first lookup, as when another writer
    inserts it between our select and our insert.
    """

    def __init__(self, misses=1):
        self.misses = misses

    def _miss(self):
        if self.misses > 0:
            self.misses -= 1
            return True
        return False

    async def _find_compliance_item(self, db, rfp_id, requirement_id):
        if self._miss():
            return None
        return await super()._find_compliance_item(db, rfp_id, requirement_id)

    async def _find_draft(self, db, rfp_id, section_key):
        if self._miss():
            return None
        return await super()._find_draft(db, rfp_id, section_key)


async def test_compliance_upsert_recovers_from_concurrent_insert(store, rfp):
    requirement = await store.add_requirement(rfp.id, {"text": "Submit CVs"})
    await store.upsert_compliance_item(
        rfp.id, requirement.id, TEST_USER, {"status": "fail", "owner": "HR lead"}
    )

    verdict = RuleVerdict(status=ComplianceStatus.COMPLIES, evidence="CVs attached")
    await LateLookupStore().save_verdict(rfp.id, requirement.id, TEST_USER, verdict)

    items = await store.get_compliance_items(rfp.id)
    assert len(items) == 1
    assert items[0].status == ComplianceStatus.COMPLIES.value
    assert items[0].evidence == "CVs attached"
    assert items[0].owner == "HR lead"


async def test_draft_upsert_recovers_from_concurrent_insert(store, rfp):
    await store.upsert_draft(rfp.id, "budget", TEST_USER, {"content": "first"})

    await LateLookupStore().upsert_draft(rfp.id, "budget", "user-0002", {"content": "second"})

    drafts = await store.get_drafts(rfp.id)
    assert len(drafts) == 1
    assert drafts[0].content == "second"
    assert drafts[0].user_id == "user-0002"


async def test_repeated_conflict_is_raised(store, rfp):
    requirement = await store.add_requirement(rfp.id, {"text": "Submit CVs"})
    await store.upsert_compliance_item(rfp.id, requirement.id, TEST_USER, {"status": "fail"})

    with pytest.raises(IntegrityError):
        await LateLookupStore(misses=2).upsert_compliance_item(
            rfp.id, requirement.id, TEST_USER, {"status": "complies"}
        )


async def test_deadlines_earliest_first(store):
    extracted = ExtractedRFP(
        title="Road Maintenance Framework",
        deadlines=[
            ExtractedDeadline(type="submission", datetime_iso="2025-10-15T12:00:00"),
            ExtractedDeadline(type="contract_start", datetime_iso="2025-12-01T23:59:00"),
            ExtractedDeadline(type="clarifications", datetime_iso="2025-10-01T17:00:00", timezone="CET"),
        ]
    )
    rfp = await store.create_rfp(TEST_USER, extracted, "")

    deadlines = await store.get_deadlines(rfp.id)

    assert [d.type for d in deadlines] == ["clarifications", "submission", "contract_start"]
    assert deadlines[0].timezone == "CET"


async def test_drafts_ordered_by_section_key(store, rfp):
    for key in ("past_performance", "budget", "executive_summary"):
        await store.upsert_draft(rfp.id, key, TEST_USER, {"content": key})

    drafts = await store.get_drafts(rfp.id)

    assert [d.section_key for d in drafts] == ["budget", "executive_summary", "past_performance"]
