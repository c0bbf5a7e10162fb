from __future__ import annotations

from dataclasses import dataclass

from ..config import settings


@dataclass(frozen=True)
class FinancingProfile:
    template_key: str
    slug: str
    display_name: str


BRIDGE = FinancingProfile("BRIDGE", "bridge", "Bridge")
CONSTRUCTION = FinancingProfile("CONSTRUCTION", "construction", "Construction")
CONSTRUCTION_PLUS = FinancingProfile("CONSTRUCTION_PLUS", "construction_plus", "Construction Plus")
PRE_DEV = FinancingProfile("PRE_DEV", "predevelopment", "Pre-Development")
PERMANENT_DEBT = FinancingProfile("PERMANENT_DEBT", "permanent_debt", "Permanent Debt")
WORKING_CAPITAL = FinancingProfile("WORKING_CAPITAL", "working_capital", "Working Capital")
OTHER = FinancingProfile("OTHER", "other", "Other")

DEFAULT_PROFILE = BRIDGE

# Ordered; first containment hit wins. "construction plus" must precede "construction".
KEYWORDS: tuple[tuple[str, FinancingProfile], ...] = (
    ("working capital", WORKING_CAPITAL),
    ("pre-development", PRE_DEV),
    ("pre-dev", PRE_DEV),
    ("predevelopment", PRE_DEV),
    ("construction plus", CONSTRUCTION_PLUS),
    ("construction", CONSTRUCTION),
    ("bridge", BRIDGE),
    ("permanent debt", PERMANENT_DEBT),
    ("other", OTHER),
)


def select_financing_profile(financing_option: str | None) -> FinancingProfile:
    s = (financing_option or "").strip().lower()
    if not s:
        return DEFAULT_PROFILE
    for keyword, profile in KEYWORDS:
        if keyword in s:
            return profile
    return DEFAULT_PROFILE


def term_sheet_template_id(profile: FinancingProfile) -> str:
    return {
        "BRIDGE": settings.TERM_SHEET_BRIDGE_ID,
        "CONSTRUCTION": settings.TERM_SHEET_CONSTRUCTION_ID,
        "CONSTRUCTION_PLUS": settings.TERM_SHEET_CONSTRUCTION_PLUS_ID,
        "PRE_DEV": settings.TERM_SHEET_PRE_DEV_ID,
        "PERMANENT_DEBT": settings.TERM_SHEET_PERMANENT_DEBT_ID,
        "WORKING_CAPITAL": settings.TERM_SHEET_WORKING_CAPITAL_ID,
        "OTHER": settings.TERM_SHEET_OTHER_ID,
    }[profile.template_key]
