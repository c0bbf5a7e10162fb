# tests/conftest.py
import pytest
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from leaddocs.adapters.base import FetchedFile
from leaddocs.config import settings
from leaddocs.models import Base
from leaddocs.service_layer.bootstrap import memory_workspace


TEMPLATE_TEXT = {
    "MNDA": "MNDA for {{business_legal_name}} signed by [First Name] [Last Name] <{{email}}> on {{current_date}}",
    "POA": "POA: {{authorized_signatory}} acts for {{business_legal_name}}, {{full_address_issuer}}",
    "OVERVIEW": "Project {{project_name}} ({{tech}}) needs {{target_issuer}}",
    "FORM_ID": "Form ID {{form_id}} / EIN {{ein}}",
    "TERM_SHEET": "TERM SHEET\n{{term_sheet_content}}",
}


@pytest.fixture
async def engine():
    """
    Fresh in-memory DB per test. StaticPool makes all connections share the same
    in-memory database for the lifetime of this engine fixture.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def async_session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=True)


@pytest.fixture
def workspace(monkeypatch):
    """In-memory Drive/Docs/Sheets with phase-one templates that exercise the replacement map."""
    monkeypatch.setattr(settings, "LEAD_STORE_BACKEND", "sheets")
    monkeypatch.setattr(settings, "PREVIOUS_PROJECTS_SHEET_ID", None)
    ws = memory_workspace()
    ws.docs.templates.update(
        {
            settings.TEMPLATE_MNDA_ID: TEMPLATE_TEXT["MNDA"],
            settings.TEMPLATE_POA_ID: TEMPLATE_TEXT["POA"],
            settings.TEMPLATE_PROJECT_OVERVIEW_ID: TEMPLATE_TEXT["OVERVIEW"],
            settings.TEMPLATE_FORM_ID_ID: TEMPLATE_TEXT["FORM_ID"],
            settings.TERM_SHEET_BRIDGE_ID: TEMPLATE_TEXT["TERM_SHEET"],
            "tpl-form-c": "Form C for {{business_legal_name}} filed {{filing_date}}, contact {{email}}",
            "tpl-card": "{{project_name}} in {{city_issuer}}",
        }
    )
    ws.files.files["https://files.example/fs.pdf"] = FetchedFile(
        content=b"%PDF-1.4 statements", filename="fs.pdf", mime_type="application/pdf"
    )
    return ws


@pytest.fixture
def phase_one_raw():
    return {
        "Business Legal Name": "Sunrise Solar LLC",
        "First Name (POC)": "Ada",
        "Last Name (POC)": "Lovelace",
        "Email (POC)": "ada@example.com",
        "Business Address": "123 Main St\nDetroit, Michigan 48226",
        "Financing Option": "Bridge",
        "Technology": "Solar",
        "EIN Number": "12-3456789",
        "Submission ID": "sub-1",
    }
