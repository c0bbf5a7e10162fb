from __future__ import annotations

import logging
from typing import Mapping

from ..adapters.base import DocumentService, DriveService
from ..config import settings
from ..domain.financing import select_financing_profile, term_sheet_template_id
from ..domain.types import DocumentFailure, DocumentHandle, DocumentSpec, FileHandle, FolderSet, MaterializationResult
from ..errors import ExternalServiceError, PartialMaterializationError, TotalMaterializationFailure
from .guard import call_external

log = logging.getLogger(__name__)


def phase_one_plan(business_name: str, financing_option: str | None) -> list[DocumentSpec]:
    """Fixed order: MNDA, POA, Project Overview, Form ID, then the financing-specific term sheet."""
    profile = select_financing_profile(financing_option)
    return [
        DocumentSpec("mnda", settings.TEMPLATE_MNDA_ID, f"{business_name} - MNDA", "Internal"),
        DocumentSpec("poa", settings.TEMPLATE_POA_ID, f"{business_name} - POA", "Internal"),
        DocumentSpec(
            "project_overview", settings.TEMPLATE_PROJECT_OVERVIEW_ID, f"{business_name} - Project Overview", "Internal"
        ),
        DocumentSpec("form_id", settings.TEMPLATE_FORM_ID_ID, f"{business_name} - Form ID", "Internal"),
        DocumentSpec(
            "term_sheet",
            term_sheet_template_id(profile),
            f"{business_name} - {profile.display_name} Term Sheet",
            "Internal",
        ),
    ]


def phase_two_templates() -> dict[str, str | None]:
    return {
        "form_c": settings.TEMPLATE_FORM_C_ID,
        "project_summary": settings.TEMPLATE_PROJECT_SUMMARY_ID,
        "filing_form_c": settings.TEMPLATE_FILING_FORM_C_ID,
        "certification_statement": settings.TEMPLATE_CERTIFICATION_STATEMENT_ID,
        "project_card": settings.TEMPLATE_PROJECT_CARD_ID,
    }


def phase_two_plan(business_name: str, templates: Mapping[str, str | None] | None = None) -> list[DocumentSpec]:
    """Regulatory filings into "Form C", the project card into "Content". Unconfigured templates are left out."""
    templates = phase_two_templates() if templates is None else templates
    wanted = (
        ("form_c", "Form C", "Form C"),
        ("project_summary", "Project Summary", "Form C"),
        ("filing_form_c", "Filing Form C", "Form C"),
        ("certification_statement", "Certification Statement", "Form C"),
        ("project_card", "Project Card", "Content"),
    )
    plan: list[DocumentSpec] = []
    for key, label, folder in wanted:
        template_id = templates.get(key)
        if not template_id:
            log.warning("phase two template %s is not configured; skipping", key)
            continue
        plan.append(DocumentSpec(key, template_id, f"{business_name} - {label}", folder))
    return plan


async def materialize_document(
    docs: DocumentService, spec: DocumentSpec, folder_id: str, replacements: Mapping[str, str]
) -> DocumentHandle:
    """Copy the template into the folder, then one batch of literal replacements."""
    handle = await call_external("docs.copy_template", docs.copy_template(spec.template_id, spec.name, folder_id))
    await call_external("docs.batch_replace_text", docs.batch_replace_text(handle.id, replacements))
    return handle


async def _existing_by_name(drive: DriveService, folder_id: str) -> dict[str, FileHandle]:
    try:
        files = await call_external("drive.list_files", drive.list_files(folder_id))
    except ExternalServiceError as e:
        log.warning("listing %s failed (%s); assuming no documents yet", folder_id, e)
        return {}
    return {f.name: f for f in files}


async def materialize_batch(
    docs: DocumentService,
    drive: DriveService,
    plan: list[DocumentSpec],
    folders: FolderSet,
    replacements: Mapping[str, str],
) -> MaterializationResult:
    """
    Materialize every document in plan order, one at a time.

    A failed document becomes a DocumentFailure entry and the batch continues. A
    document whose name already exists in its folder is not copied again; the
    replacements are re-applied to it instead. Raises TotalMaterializationFailure
    only when nothing succeeded.
    """
    existing: dict[str, dict[str, FileHandle]] = {}
    entries: list[DocumentHandle | DocumentFailure] = []

    for spec in plan:
        try:
            folder_id = folders.folder_id(spec.folder_key)
            if folder_id not in existing:
                existing[folder_id] = await _existing_by_name(drive, folder_id)

            prior = existing[folder_id].get(spec.name)
            if prior is not None:
                await call_external("docs.batch_replace_text", docs.batch_replace_text(prior.id, replacements))
                handle = DocumentHandle(id=prior.id, name=prior.name, view_link=prior.view_link)
                log.info("reused existing document %r (%s)", spec.name, prior.id)
            else:
                handle = await materialize_document(docs, spec, folder_id, replacements)
                log.info("materialized %r (%s)", spec.name, handle.id)
            entries.append(handle)
        except Exception as e:
            log.warning("document %r failed: %s", spec.name, e)
            entries.append(DocumentFailure(error=str(e) or e.__class__.__name__, name=spec.name))

    result = MaterializationResult(entries=tuple(entries))
    if not result.succeeded:
        log.error("materialization failed for all %d document(s)", len(plan))
        raise TotalMaterializationFailure(result.failed)
    if result.partial:
        log.warning("partial materialization (%d ok): %s", len(result.succeeded), PartialMaterializationError(result.failed))
    return result
