from __future__ import annotations

from datetime import datetime
from typing import Any, Mapping

from .address import decompose_address, format_postal_address
from .defaults import calculated_fields, smart_defaults, technology_category
from .financing import select_financing_profile
from .identity import IdentityDefaults, display_name, resolve_identity
from .normalizer import is_file_value, slug_keys
from .parsing import as_text
from .term_sheets import render_term_sheet
from .types import Phase

# Values that belong to one render, never to a stored snapshot.
RENDER_TIME_KEYS = frozenset(
    {"current_date", "current_time", "submission_date", "filing_date", "term_sheet_content"}
)

TO_BE_DETERMINED = "To be determined"

ADDRESS_ROLES = ("issuer", "project")


def _raw_layer(raw: Mapping[str, Any]) -> dict[str, str]:
    out: dict[str, str] = {}
    for key, v in slug_keys(raw).items():
        if is_file_value(v):
            continue
        text = as_text(v)
        if text:
            out[key] = text
    return out


def overlay(base: dict[str, str], top: Mapping[str, str]) -> dict[str, str]:
    """Non-empty values in top win; empty ones only claim missing keys."""
    out = dict(base)
    for k, v in top.items():
        if v:
            out[k] = v
        else:
            out.setdefault(k, "")
    return out


def intake_fields(canonical: Mapping[str, str], raw: Mapping[str, Any] | None = None) -> dict[str, str]:
    """The answers as submitted: canonical fields over the raw submission. Nothing derived."""
    return overlay(_raw_layer(raw or {}), canonical)


def _fill(values: dict[str, str], extra: Mapping[str, str]) -> dict[str, str]:
    out = dict(values)
    for k, v in extra.items():
        if not out.get(k):
            out[k] = v
    return out


def _address_fields(values: Mapping[str, str], role: str) -> dict[str, str]:
    text = values.get(f"address_{role}") or ""
    if not text:
        return {}
    out: dict[str, str] = {}
    for key, v in decompose_address(text, role).items():
        if not v:
            continue
        # Explicit city/state/zip answers beat what the free-text address implies.
        if key == f"address_{role}" or not values.get(key):
            out[key] = v
    return out


def restamp_phase_two(phase_two: Mapping[str, str]) -> dict[str, str]:
    """A phase-two "submission date" is phase two's own timestamp, never the phase-one one."""
    second = dict(phase_two)
    stamped = second.pop("phase_one_submission", "")
    if stamped and not second.get("phase_two_submission"):
        second["phase_two_submission"] = stamped
    return second


def merge_phase_data(phase_one: Mapping[str, Any], phase_two: Mapping[str, str]) -> dict[str, str]:
    """{...phase one snapshot, ...phase two}: phase two wins per key when non-empty; keys only phase one has survive."""
    base = {k: as_text(v) for k, v in phase_one.items()}
    return overlay(base, restamp_phase_two(phase_two))


def snapshot_fields(values: Mapping[str, str]) -> dict[str, str]:
    """
    What a lead stores for a later phase. Pass intake_fields(), not enrich() output:
    derived values (parsed city/state/zip, signatory, defaults) are recomputed
    from the merged answers each time.
    """
    return {k: v for k, v in values.items() if k not in RENDER_TIME_KEYS}


def enrich(
    canonical: Mapping[str, str],
    raw: Mapping[str, Any] | None = None,
    *,
    phase: Phase = Phase.one,
    now: datetime | None = None,
    identity_defaults: IdentityDefaults | None = None,
    strict_identity: bool = False,
    calendar_link: str | None = None,
) -> dict[str, str]:
    """
    CanonicalFields (+ the raw submission as a low-priority fallback) -> the flat
    value map a replacement map is built from. Pure: inputs are not mutated.
    """
    now = now or datetime.now()
    values = intake_fields(canonical, raw)

    # Addresses
    for role in ADDRESS_ROLES:
        values.update(_address_fields(values, role))
        parts = [values.get(f"{k}_{role}") or "" for k in ("address", "city", "state", "zip")]
        if any(parts):
            values[f"full_address_{role}"] = format_postal_address(*parts)

    # Identity
    values.update(resolve_identity(values, defaults=identity_defaults, strict=strict_identity))
    signer = display_name(values["first_name"], values["last_name"])
    values = _fill(
        values,
        {
            "contact_name": signer,
            "contact_email": values["email"],
            "authorized_signatory": values.get("contact_name") or signer,
        },
    )

    # System timestamps (render time, not submission time)
    today = now.strftime("%m/%d/%Y")
    values["current_date"] = today
    values["current_time"] = now.strftime("%I:%M %p")
    values["submission_date"] = today
    stamp = values.get("submission_time") or today
    if phase is Phase.one:
        values = _fill(values, {"phase_one_submission": stamp})
    else:
        values = _fill(values, {"phase_two_submission": stamp})
        values["filing_date"] = today

    # Financing and project
    profile = select_financing_profile(values.get("financing_option"))
    biz = values.get("business_legal_name") or ""
    tech = values.get("tech") or ""
    values = _fill(
        values,
        {
            "financing_option": profile.display_name,
            "project_type": values.get("financing_option") or profile.display_name,
            "project_name": " ".join(p for p in (biz, tech, "Project") if p) if biz else "",
            "calendar_link": calendar_link or "",
        },
    )

    category = technology_category(tech, values.get("other_tech"), values.get("project_type"))
    values = _fill(values, smart_defaults(category))
    values = _fill(values, calculated_fields(values, category, profile.slug))
    values = _fill(values, {"target_issuer": TO_BE_DETERMINED, "maximum_issuer": TO_BE_DETERMINED})

    values["term_sheet_content"] = render_term_sheet(values.get("financing_option"), values)
    return values
