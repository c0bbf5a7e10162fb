from __future__ import annotations

from typing import Mapping

from .parsing import as_text, get_first

_ACRONYMS = {"poc", "ein", "dba", "zip", "ltv", "ppa", "ar", "id", "roi", "npv", "co2", "url"}

# Title-cased bracket spellings that are too generic to emit ("[Name]", "[Term]" ...).
NO_TITLE_SPELLING = {"term", "rate", "technology", "tech", "name", "type", "option"}

# Human-readable stand-ins that templates already use for these keys.
PLACEHOLDER_OVERRIDES: dict[str, str] = {
    "address_issuer": "[Business Address]",
    "city_issuer": "[Business City]",
    "state_issuer": "[Business State]",
    "zip_issuer": "[Business ZIP]",
    "phone_issuer": "[Business Phone]",
    "address_project": "[Project Address]",
    "city_project": "[Project City]",
    "state_project": "[Project State]",
    "zip_project": "[Project ZIP]",
    "state_incorporation": "[State of Incorporation]",
    "date_incorporation": "[Date of Incorporation]",
    "tech": "[Technology]",
    "other_tech": "[Other Technology Details]",
    "name_plate_capacity": "[Nameplate Capacity]",
    "target_issuer": "[Target Amount]",
    "maximum_issuer": "[Maximum Amount]",
    "deadline": "[Funding Deadline]",
    "linkedin": "[LinkedIn Profile]",
    "linkedin_poc": "[LinkedIn POC]",
    "first_name_sign": "[Signer First Name]",
    "last_name_sign": "[Signer Last Name]",
    "title_sign": "[Signer Title]",
    "email_sign": "[Signer Email]",
}

FISCAL_YEAR_END_DEFAULT = "December 31"


def title_case(key: str) -> str:
    words = [w for w in key.split("_") if w]
    return " ".join(w.upper() if w in _ACRONYMS else w.capitalize() for w in words)


def placeholder_for(key: str) -> str:
    """Visible stand-in for a missing value: address_issuer -> "[Business Address]"."""
    return PLACEHOLDER_OVERRIDES.get(key) or f"[{title_case(key)}]"


def spellings(key: str) -> list[str]:
    out = [key, f"{{{{{key}}}}}", f"[{key}]"]
    if key not in NO_TITLE_SPELLING:
        out.append(f"[{title_case(key)}]")
    override = PLACEHOLDER_OVERRIDES.get(key)
    if override:
        out.append(override)
    return out


def build_replacement_map(values: Mapping[str, str]) -> dict[str, str]:
    """
    Expand enriched values into every literal spelling a template may contain.

    Missing values become their bracketed stand-in, so an unresolved document reads
    "[Business Legal Name]" instead of a silent gap.
    """
    out: dict[str, str] = {}
    resolved: dict[str, str] = {}

    for key, value in values.items():
        if value is None:
            continue
        v = str(value) if str(value).strip() else placeholder_for(key)
        resolved[key] = v
        for spelling in spellings(key):
            out[spelling] = v

    # Spellings some templates use for the same logical values.
    if "business_legal_name" in resolved:
        out["legal_business_name"] = resolved["business_legal_name"]
        out["{{legal_business_name}}"] = resolved["business_legal_name"]
    first = (values.get("first_name") or "").strip()
    last = (values.get("last_name") or "").strip()
    if first or last:
        out["first_name last_name"] = " ".join(p for p in (first, last) if p)
    mobile = as_text(get_first(dict(values), "mobile_phone", "phone_issuer"))
    if mobile:
        out["[Mobile Phone]"] = mobile
    rate = as_text(get_first(dict(values), "rate", "interest_rate"))
    if rate:
        out["[Interest Rate]"] = rate
    if not (values.get("fiscal_year_end") or "").strip():
        out["[Fiscal Year End]"] = FISCAL_YEAR_END_DEFAULT
        out["{{fiscal_year_end}}"] = FISCAL_YEAR_END_DEFAULT
        out["fiscal_year_end"] = FISCAL_YEAR_END_DEFAULT

    return out


def is_safe_literal(literal: str) -> bool:
    """
    Bare single words ("ein", "city", "title") also occur inside ordinary prose
    ("being", "capacity", "entitled"). Delimited or snake_case literals do not.
    """
    return any(ch in literal for ch in "{[_ ")


def ordered_requests(
    replacements: Mapping[str, str], *, safe_only: bool = False
) -> list[tuple[str, str]]:
    """
    One request per non-null entry, longest literal first so "{{first_name_poc}}" is
    replaced before "first_name". safe_only drops bare single-word literals.
    """
    return sorted(
        (
            (k, v)
            for k, v in replacements.items()
            if k and v is not None and (not safe_only or is_safe_literal(k))
        ),
        key=lambda kv: (-len(kv[0]), kv[0]),
    )


def render_text(text: str, replacements: Mapping[str, str], *, safe_only: bool = False) -> str:
    """Apply the batch the way the document service does: case-sensitive, in request order."""
    for literal, value in ordered_requests(replacements, safe_only=safe_only):
        text = text.replace(literal, value)
    return text
