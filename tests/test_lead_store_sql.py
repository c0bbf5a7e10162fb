import pytest

from leaddocs.adapters.repos.sql_leads import SqlLeadStore
from leaddocs.domain.types import LeadStatus
from leaddocs.errors import InvalidTransitionError, LeadNotFoundError, VersionConflictError


async def test_sql_store_lifecycle(async_session_maker):
    store = SqlLeadStore(async_session_maker)
    lead_id = await store.create_lead(
        business_legal_name="Acme", phase1_folder_id="folder-1", phase1_data={"ein": "12-3"}
    )

    lead = await store.get_lead_by_id(lead_id)
    assert lead.status == LeadStatus.PHASE_1_COMPLETE
    assert lead.phase1_submission_data == {"ein": "12-3"}
    assert (await store.find_lead_by_folder("folder-1")).lead_id == lead_id

    lead = await store.update_lead_status(lead_id, LeadStatus.PHASE_2_IN_PROGRESS, expected_version=1)
    assert lead.row_version == 2
    lead = await store.update_lead_status(
        lead_id, LeadStatus.PHASE_2_COMPLETE, {"phase2_folder_id": "folder-1"}, expected_version=2
    )
    assert lead.status == LeadStatus.PHASE_2_COMPLETE
    assert lead.phase2_folder_id == "folder-1"
    assert [l.lead_id for l in await store.get_leads_by_status(LeadStatus.PHASE_2_COMPLETE)] == [lead_id]


async def test_sql_store_rejects_stale_writers(async_session_maker):
    store = SqlLeadStore(async_session_maker)
    lead_id = await store.create_lead(business_legal_name="Acme", phase1_folder_id="f", phase1_data={})
    seen = (await store.get_lead_by_id(lead_id)).row_version

    await store.update_lead_status(lead_id, LeadStatus.PHASE_2_IN_PROGRESS, expected_version=seen)
    with pytest.raises(VersionConflictError):
        await store.update_lead_status(lead_id, LeadStatus.PHASE_2_COMPLETE, expected_version=seen)
    with pytest.raises(InvalidTransitionError):
        await store.update_lead_status(lead_id, LeadStatus.PHASE_1_COMPLETE)
    with pytest.raises(LeadNotFoundError):
        await store.update_lead_status("missing", LeadStatus.ERROR)


async def test_sql_record_error(async_session_maker):
    store = SqlLeadStore(async_session_maker)
    lead_id = await store.create_lead(business_legal_name="Acme", phase1_folder_id="f", phase1_data={})

    await store.record_error(lead_id, "boom")
    lead = await store.get_lead_by_id(lead_id)
    assert lead.status == LeadStatus.ERROR
    assert lead.error_details == "boom"
    assert lead.retry_count == 1
    assert await store.get_leads_by_status(LeadStatus.PHASE_1_COMPLETE) == []
