import pytest

from leaddocs.adapters.memory import InMemorySheets
from leaddocs.adapters.repos.leads import HEADERS, SheetLeadStore, loads_object
from leaddocs.domain.types import LeadStatus
from leaddocs.errors import InvalidTransitionError, LeadNotFoundError, RecordStoreError, VersionConflictError


def _store():
    sheets = InMemorySheets()
    return sheets, SheetLeadStore(sheets, "sheet-1", "LeadTracking")


async def test_create_writes_header_then_row():
    sheets, store = _store()
    lead_id = await store.create_lead(
        business_legal_name="Acme", phase1_folder_id="folder-1", phase1_data={"ein": "12-3"}
    )

    rows = sheets.rows("sheet-1", "LeadTracking")
    assert rows[0] == HEADERS
    assert rows[1][0] == lead_id
    assert rows[1][1] == "PHASE_1_COMPLETE"

    lead = await store.get_lead_by_id(lead_id)
    assert lead.business_legal_name == "Acme"
    assert lead.phase1_submission_data == {"ein": "12-3"}
    assert lead.retry_count == 0 and lead.row_version == 1
    assert (await store.find_lead_by_folder("folder-1")).lead_id == lead_id
    assert await store.get_lead_by_id("nope") is None


async def test_status_walk_bumps_row_version():
    _, store = _store()
    lead_id = await store.create_lead(business_legal_name="Acme", phase1_folder_id="f", phase1_data={})

    lead = await store.update_lead_status(lead_id, LeadStatus.PHASE_2_IN_PROGRESS, expected_version=1)
    assert lead.row_version == 2
    lead = await store.update_lead_status(
        lead_id,
        LeadStatus.PHASE_2_COMPLETE,
        {"phase2_folder_id": "f", "phase2_submission_data_json": {"x": "1"}},
        expected_version=2,
    )
    assert lead.status == LeadStatus.PHASE_2_COMPLETE
    assert lead.phase2_folder_id == "f"
    assert lead.phase2_submission_data == {"x": "1"}
    assert [l.lead_id for l in await store.get_leads_by_status(LeadStatus.PHASE_2_COMPLETE)] == [lead_id]


async def test_illegal_transition_and_stale_version_are_rejected():
    _, store = _store()
    lead_id = await store.create_lead(business_legal_name="Acme", phase1_folder_id="f", phase1_data={})

    with pytest.raises(InvalidTransitionError):
        await store.update_lead_status(lead_id, LeadStatus.PHASE_2_COMPLETE)
    with pytest.raises(VersionConflictError):
        await store.update_lead_status(lead_id, LeadStatus.PHASE_2_IN_PROGRESS, expected_version=7)
    with pytest.raises(LeadNotFoundError):
        await store.update_lead_status("missing", LeadStatus.ERROR)


async def test_record_error_marks_lead_and_counts_retries():
    _, store = _store()
    lead_id = await store.create_lead(business_legal_name="Acme", phase1_folder_id="f", phase1_data={})

    await store.record_error(lead_id, "drive.move_folder: boom")
    await store.record_error(lead_id, "again")
    lead = await store.get_lead_by_id(lead_id)
    assert lead.status == LeadStatus.ERROR
    assert lead.error_details == "again"
    assert lead.retry_count == 2

    # best effort: never raises
    await store.record_error("missing", "x")


async def test_legacy_sheet_without_row_version_column():
    sheets, store = _store()
    legacy = HEADERS[:-1]
    sheets.rows("sheet-1", "LeadTracking").extend(
        [legacy, ["L-1", "PHASE_1_COMPLETE", "Acme", "f", "", "not json", "", "", "", "", ""]]
    )
    lead = await store.get_lead_by_id("L-1")
    assert lead.row_version == 1
    assert lead.phase1_submission_data == {}
    assert loads_object("[1, 2]") == {}


def test_store_requires_sheet_id():
    with pytest.raises(RecordStoreError):
        SheetLeadStore(InMemorySheets(), "")
