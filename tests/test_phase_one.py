from datetime import datetime

import pytest

from leaddocs.config import settings
from leaddocs.domain.types import LeadStatus
from leaddocs.errors import IntakeValidationError, TotalMaterializationFailure
from leaddocs.service_layer.use_cases.phase_one import run_phase_one

NOW = datetime(2026, 1, 2, 9, 30)


async def test_phase_one_materializes_documents_and_registers_lead(workspace, phase_one_raw):
    res = await run_phase_one(workspace, phase_one_raw, now=NOW)

    assert [d["name"] for d in res.documents.to_list()] == [
        "Sunrise Solar LLC - MNDA",
        "Sunrise Solar LLC - POA",
        "Sunrise Solar LLC - Project Overview",
        "Sunrise Solar LLC - Form ID",
        "Sunrise Solar LLC - Bridge Term Sheet",
    ]
    assert res.documents.partial is False

    case = workspace.drive.children(workspace.phase1_root_id)
    assert [c.name for c in case] == ["Sunrise Solar LLC"]
    internal = res.folders.folder_id("Internal")
    assert len([c for c in workspace.drive.children(internal)]) == 5

    mnda, poa, overview, form_id, term = (d.id for d in res.documents.succeeded)
    text = workspace.docs.text_of
    assert text(mnda) == "MNDA for Sunrise Solar LLC signed by Ada Lovelace <ada@example.com> on 01/02/2026"
    assert text(poa) == "POA: Ada Lovelace acts for Sunrise Solar LLC, 123 Main St, Detroit, MI 48226"
    assert text(overview) == "Project Sunrise Solar LLC Solar Project (Solar) needs To be determined"
    assert text(form_id) == "Form ID sub-1 / EIN 12-3456789"
    assert "BRIDGE FINANCING TERM SHEET" in text(term)
    assert "{{" not in text(term)

    lead = await workspace.leads.get_lead_by_id(res.lead_id)
    assert lead.status == LeadStatus.PHASE_1_COMPLETE
    assert lead.business_legal_name == "Sunrise Solar LLC"
    assert lead.phase1_folder_id == res.folders.case.id
    assert lead.phase1_submission_data["address_issuer"] == "123 Main St\nDetroit, Michigan 48226"
    assert lead.phase1_submission_data["phase_one_submission"] == "01/02/2026"
    assert "city_issuer" not in lead.phase1_submission_data
    assert "authorized_signatory" not in lead.phase1_submission_data
    assert "current_date" not in lead.phase1_submission_data


async def test_redelivered_submission_reuses_folder_documents_and_lead(workspace, phase_one_raw):
    first = await run_phase_one(workspace, phase_one_raw, now=NOW)
    second = await run_phase_one(workspace, phase_one_raw, now=NOW)

    assert second.lead_id == first.lead_id
    assert second.existing_lead is True
    assert second.folders.case.id == first.folders.case.id
    assert [d.id for d in second.documents.succeeded] == [d.id for d in first.documents.succeeded]
    assert len(await workspace.leads.get_leads_by_status(LeadStatus.PHASE_1_COMPLETE)) == 1


async def test_missing_business_name_fails_before_any_external_call(workspace, phase_one_raw):
    raw = dict(phase_one_raw, **{"Business Legal Name": "  "})
    with pytest.raises(IntakeValidationError):
        await run_phase_one(workspace, raw, now=NOW)
    assert workspace.drive.calls == []


async def test_partial_failure_still_registers_lead(workspace, phase_one_raw):
    workspace.docs.failing_templates = {settings.TEMPLATE_POA_ID, settings.TEMPLATE_FORM_ID_ID}
    res = await run_phase_one(workspace, phase_one_raw, now=NOW)

    out = res.to_dict()
    assert out["partial"] is True
    assert [("error" in d) for d in out["documents"]] == [False, True, False, True, False]
    assert await workspace.leads.get_lead_by_id(res.lead_id) is not None


async def test_total_failure_registers_nothing(workspace, phase_one_raw):
    workspace.docs.failing_templates = {
        settings.TEMPLATE_MNDA_ID,
        settings.TEMPLATE_POA_ID,
        settings.TEMPLATE_PROJECT_OVERVIEW_ID,
        settings.TEMPLATE_FORM_ID_ID,
        settings.TERM_SHEET_BRIDGE_ID,
    }
    with pytest.raises(TotalMaterializationFailure):
        await run_phase_one(workspace, phase_one_raw, now=NOW)
    assert await workspace.leads.get_leads_by_status(LeadStatus.PHASE_1_COMPLETE) == []


async def test_strict_identity_rejects_anonymous_submission(workspace, monkeypatch):
    monkeypatch.setattr(settings, "STRICT_IDENTITY", True)
    with pytest.raises(IntakeValidationError):
        await run_phase_one(workspace, {"Business Legal Name": "Acme"}, now=NOW)
    assert workspace.drive.calls == []


async def test_returning_customer_fills_gaps(workspace, phase_one_raw, monkeypatch):
    monkeypatch.setattr(settings, "PREVIOUS_PROJECTS_SHEET_ID", "prev")
    workspace.rows.rows("prev", settings.PREVIOUS_PROJECTS_SHEET_NAME).extend(
        [
            ["Email (POC)", "Business Legal Name", "Company Website", "Submission Time"],
            ["ada@example.com", "Old Name", "https://sunrise.example", "2025-01-01T00:00:00"],
        ]
    )
    res = await run_phase_one(workspace, phase_one_raw, now=NOW)

    assert res.returning_customer is True
    lead = await workspace.leads.get_lead_by_id(res.lead_id)
    assert lead.phase1_submission_data["website"] == "https://sunrise.example"
    assert lead.business_legal_name == "Sunrise Solar LLC"
    assert lead.phase1_submission_data["business_legal_name"] == "Sunrise Solar LLC"
