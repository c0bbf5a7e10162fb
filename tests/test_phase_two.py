from datetime import datetime

import pytest

from leaddocs.domain.types import LeadStatus
from leaddocs.errors import ExternalServiceError, InvalidTransitionError, LeadNotFoundError
from leaddocs.service_layer.use_cases.phase_one import run_phase_one
from leaddocs.service_layer.use_cases.phase_two import run_phase_two

NOW = datetime(2026, 2, 3, 14, 5)
TEMPLATES = {"form_c": "tpl-form-c", "project_card": "tpl-card"}

PHASE_TWO_RAW = {
    "Email (POC)": "cfo@sunrise.example",
    "Financial Statements": [{"url": "https://files.example/fs.pdf", "filename": "fs.pdf"}],
    "Submission Date": "2026-02-03",
}


async def _phase_one(ws, raw):
    return await run_phase_one(ws, raw, now=datetime(2026, 1, 2, 9, 30))


async def test_phase_two_moves_sorts_uploads_and_renders(workspace, phase_one_raw):
    one = await _phase_one(workspace, phase_one_raw)

    res = await run_phase_two(workspace, one.lead_id, PHASE_TWO_RAW, now=NOW, templates=TEMPLATES)
    drive = workspace.drive
    case_id = one.folders.case.id

    assert drive.items[case_id].parents == [workspace.phase2_root_id]
    assert drive.children(workspace.phase1_root_id) == []

    data_room = res.folders.folder_id("Data Room")
    assert sorted(c.name for c in drive.children(data_room)) == sorted(d.name for d in one.documents.succeeded)
    assert [f.name for f in res.uploads.uploaded] == ["fs.pdf"]
    assert [c.name for c in drive.children(res.folders.folder_id("Financial Statements"))] == ["fs.pdf"]

    form_c, card = res.documents.succeeded
    assert form_c.name == "Sunrise Solar LLC - Form C"
    assert drive.items[form_c.id].parents == [res.folders.folder_id("Form C")]
    assert drive.items[card.id].parents == [res.folders.folder_id("Content")]
    assert workspace.docs.text_of(form_c.id) == "Form C for Sunrise Solar LLC filed 02/03/2026, contact cfo@sunrise.example"
    assert workspace.docs.text_of(card.id) == "Sunrise Solar LLC Solar Project in Detroit"

    lead = res.lead
    assert lead.status == LeadStatus.PHASE_2_COMPLETE
    assert lead.phase2_folder_id == case_id
    assert lead.row_version == 3
    assert lead.phase2_submission_data["email_poc"] == "cfo@sunrise.example"
    assert lead.phase2_submission_data["phase_two_submission"] == "2026-02-03"
    assert lead.phase1_submission_data["email_poc"] == "ada@example.com"


async def test_only_phase_one_complete_leads_are_accepted(workspace, phase_one_raw):
    one = await _phase_one(workspace, phase_one_raw)
    await run_phase_two(workspace, one.lead_id, PHASE_TWO_RAW, now=NOW, templates=TEMPLATES)
    calls = len(workspace.drive.calls)

    with pytest.raises(InvalidTransitionError):
        await run_phase_two(workspace, one.lead_id, PHASE_TWO_RAW, now=NOW, templates=TEMPLATES)

    lead = await workspace.leads.get_lead_by_id(one.lead_id)
    assert lead.status == LeadStatus.PHASE_2_COMPLETE
    assert len(workspace.drive.calls) == calls


async def test_unknown_lead(workspace):
    with pytest.raises(LeadNotFoundError):
        await run_phase_two(workspace, "no-such-lead", PHASE_TWO_RAW, now=NOW, templates=TEMPLATES)


async def test_failure_after_start_marks_lead_error(workspace, phase_one_raw):
    one = await _phase_one(workspace, phase_one_raw)
    workspace.drive.fail_operations.add("drive.move_folder")

    with pytest.raises(ExternalServiceError):
        await run_phase_two(workspace, one.lead_id, PHASE_TWO_RAW, now=NOW, templates=TEMPLATES)

    lead = await workspace.leads.get_lead_by_id(one.lead_id)
    assert lead.status == LeadStatus.ERROR
    assert "drive.move_folder" in lead.error_details
    assert lead.retry_count == 1

    with pytest.raises(InvalidTransitionError):
        await run_phase_two(workspace, one.lead_id, PHASE_TWO_RAW, now=NOW, templates=TEMPLATES)


async def test_bad_upload_does_not_block_documents(workspace, phase_one_raw):
    one = await _phase_one(workspace, phase_one_raw)
    raw = dict(PHASE_TWO_RAW, **{"Cap Table": [{"url": "https://files.example/gone.xlsx", "filename": "gone.xlsx"}]})

    res = await run_phase_two(workspace, one.lead_id, raw, now=NOW, templates=TEMPLATES)

    assert res.to_dict()["uploads"]["failed"][0]["field"] == "cap_table"
    assert res.lead.status == LeadStatus.PHASE_2_COMPLETE


async def test_changed_address_and_signer_are_rendered_fresh(workspace, phase_one_raw):
    one = await _phase_one(workspace, phase_one_raw)
    workspace.docs.templates["tpl-signed"] = "{{authorized_signatory}} <{{email}}>, {{full_address_issuer}}"
    raw = dict(
        PHASE_TWO_RAW,
        **{"Business Address": "9 Oak Ave\nBoston, MA 02101", "First Name": "Grace", "Last Name": "Hopper"},
    )

    res = await run_phase_two(
        workspace, one.lead_id, raw, now=NOW, templates={"form_c": "tpl-signed", "project_card": "tpl-card"}
    )

    signed, card = res.documents.succeeded
    assert workspace.docs.text_of(signed.id) == "Grace Hopper <cfo@sunrise.example>, 9 Oak Ave, Boston, MA 02101"
    assert workspace.docs.text_of(card.id) == "Sunrise Solar LLC Solar Project in Boston"
