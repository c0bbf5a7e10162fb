from datetime import datetime

from leaddocs.domain.enrichment import (
    RENDER_TIME_KEYS,
    TO_BE_DETERMINED,
    enrich,
    intake_fields,
    merge_phase_data,
    snapshot_fields,
)
from leaddocs.domain.types import Phase

NOW = datetime(2026, 1, 2, 9, 30)


def _base():
    return {
        "business_legal_name": "Sunrise Solar LLC",
        "first_name_poc": "Ada",
        "last_name_poc": "Lovelace",
        "email_poc": "ada@example.com",
        "address_issuer": "123 Main St\nDetroit, Michigan 48226",
        "tech": "Solar",
        "financing_option": "Bridge",
    }


def test_addresses_are_decomposed_and_formatted():
    values = enrich(_base(), now=NOW)
    assert values["address_issuer"] == "123 Main St"
    assert values["city_issuer"] == "Detroit"
    assert values["state_issuer"] == "MI"
    assert values["full_address_issuer"] == "123 Main St, Detroit, MI 48226"


def test_explicit_city_beats_parsed_city():
    canonical = dict(_base(), city_issuer="Ferndale")
    values = enrich(canonical, now=NOW)
    assert values["city_issuer"] == "Ferndale"
    assert values["address_issuer"] == "123 Main St"


def test_identity_and_legacy_contact_fields():
    values = enrich(_base(), now=NOW)
    assert values["first_name"] == "Ada"
    assert values["email"] == "ada@example.com"
    assert values["contact_name"] == "Ada Lovelace"
    assert values["contact_email"] == "ada@example.com"
    assert values["authorized_signatory"] == "Ada Lovelace"


def test_timestamps_and_phase_stamps():
    one = enrich(dict(_base(), submission_time="2025-12-01T10:00:00Z"), now=NOW)
    assert one["current_date"] == "01/02/2026"
    assert one["current_time"] == "09:30 AM"
    assert one["phase_one_submission"] == "2025-12-01T10:00:00Z"
    assert "filing_date" not in one

    two = enrich(_base(), phase=Phase.two, now=NOW)
    assert two["filing_date"] == "01/02/2026"
    assert two["phase_two_submission"] == "01/02/2026"


def test_project_and_smart_defaults():
    values = enrich(_base(), now=NOW)
    assert values["project_name"] == "Sunrise Solar LLC Solar Project"
    assert values["technology_risk"].startswith("Low - Proven solar PV")
    assert values["target_issuer"] == TO_BE_DETERMINED
    assert values["maximum_issuer"] == TO_BE_DETERMINED
    assert "BRIDGE FINANCING TERM SHEET" in values["term_sheet_content"]


def test_answers_are_never_overwritten_by_defaults():
    values = enrich(dict(_base(), technology_risk="High", target_issuer="$500,000"), now=NOW)
    assert values["technology_risk"] == "High"
    assert values["target_issuer"] == "$500,000"


def test_raw_submission_is_a_low_priority_fallback():
    values = enrich(_base(), {"Project Color": "green", "Business Legal Name": "Other"}, now=NOW)
    assert values["project_color"] == "green"
    assert values["business_legal_name"] == "Sunrise Solar LLC"


def test_inputs_are_not_mutated():
    canonical = _base()
    before = dict(canonical)
    enrich(canonical, now=NOW)
    assert canonical == before


def test_merge_phase_data_prefers_non_empty_phase_two():
    merged = merge_phase_data(
        {"a": "1", "b": "2", "phase_one_submission": "2025-01-01"},
        {"b": "", "c": "3", "phase_one_submission": "2025-02-01"},
    )
    assert merged["a"] == "1"
    assert merged["b"] == "2"
    assert merged["c"] == "3"
    assert merged["phase_one_submission"] == "2025-01-01"
    assert merged["phase_two_submission"] == "2025-02-01"


def test_snapshot_drops_render_time_values():
    values = enrich(_base(), now=NOW)
    snap = snapshot_fields(values)
    assert not RENDER_TIME_KEYS & set(snap)
    assert snap["business_legal_name"] == "Sunrise Solar LLC"


def test_phase_two_answers_replace_what_phase_one_derived():
    stored = snapshot_fields(intake_fields(_base()))
    assert "city_issuer" not in stored
    assert "authorized_signatory" not in stored

    phase_two = {
        "address_issuer": "9 Oak Ave\nBoston, MA 02101",
        "first_name_sign": "Grace",
        "last_name_sign": "Hopper",
    }
    values = enrich(merge_phase_data(stored, phase_two), phase=Phase.two, now=NOW)

    assert values["full_address_issuer"] == "9 Oak Ave, Boston, MA 02101"
    assert values["city_issuer"] == "Boston"
    assert values["first_name"] == "Grace"
    assert values["authorized_signatory"] == "Grace Hopper"
    assert values["contact_name"] == "Grace Hopper"
