from __future__ import annotations

import re

ZIP = r"\d{5}(?:-\d{4})?"

US_STATES: dict[str, str] = {
    "alabama": "AL", "alaska": "AK", "arizona": "AZ", "arkansas": "AR", "california": "CA",
    "colorado": "CO", "connecticut": "CT", "delaware": "DE", "district of columbia": "DC",
    "florida": "FL", "georgia": "GA", "hawaii": "HI", "idaho": "ID", "illinois": "IL",
    "indiana": "IN", "iowa": "IA", "kansas": "KS", "kentucky": "KY", "louisiana": "LA",
    "maine": "ME", "maryland": "MD", "massachusetts": "MA", "michigan": "MI",
    "minnesota": "MN", "mississippi": "MS", "missouri": "MO", "montana": "MT",
    "nebraska": "NE", "nevada": "NV", "new hampshire": "NH", "new jersey": "NJ",
    "new mexico": "NM", "new york": "NY", "north carolina": "NC", "north dakota": "ND",
    "ohio": "OH", "oklahoma": "OK", "oregon": "OR", "pennsylvania": "PA",
    "puerto rico": "PR", "rhode island": "RI", "south carolina": "SC",
    "south dakota": "SD", "tennessee": "TN", "texas": "TX", "utah": "UT", "vermont": "VT",
    "virginia": "VA", "washington": "WA", "west virginia": "WV", "wisconsin": "WI",
    "wyoming": "WY",
}

_COUNTRY_LINE = re.compile(r"^(united states( of america)?|u\.?s\.?a?\.?|america)$", re.IGNORECASE)

# "West Virginia" must be tried before "Virginia".
_STATE_NAMES = "|".join(re.escape(n) for n in sorted(US_STATES, key=len, reverse=True))

# Ordered; first match wins.
LOCALITY_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"^(?P<city>.+?),\s*(?P<state>[A-Za-z]{{2}})\.?,?\s+(?P<zip>{ZIP})$"),
    re.compile(rf"^(?P<city>.+?)\s+(?P<state>[A-Za-z]{{2}})\s+(?P<zip>{ZIP})$"),
    re.compile(rf"^(?P<city>.+?),?\s+(?P<state>{_STATE_NAMES}),?\s+(?P<zip>{ZIP})$", re.IGNORECASE),
    re.compile(rf"^(?P<city>.+?),?\s+(?P<state>[A-Za-z]{{2,}}\.?),?\s+(?P<zip>{ZIP})$"),
)


def _split_lines(text: str) -> list[str]:
    s = text.replace("\\r\\n", "\n").replace("\\n", "\n").replace("\r\n", "\n").replace("\r", "\n")
    lines = [ln.strip().strip(",").strip() for ln in s.split("\n")]
    return [ln for ln in lines if ln and not _COUNTRY_LINE.match(ln)]


def _state_code(state: str) -> str:
    s = state.strip().rstrip(".")
    if len(s) == 2:
        return s.upper()
    return US_STATES.get(s.lower(), s)


def _fields(role: str, address: str = "", city: str = "", state: str = "", zipc: str = "") -> dict[str, str]:
    return {
        f"address_{role}": address,
        f"city_{role}": city,
        f"state_{role}": state,
        f"zip_{role}": zipc,
    }


def decompose_address(text: str | None, role: str) -> dict[str, str]:
    """
    Free-text (possibly multi-line) US address -> address_<role>, city_<role>,
    state_<role>, zip_<role>. Never raises; returns whatever it could recover.

    The last line is the locality line ("City, ST 12345"); earlier lines are the street.
    """
    raw = "" if text is None else str(text)
    lines = _split_lines(raw)
    if not lines:
        return _fields(role, address=raw.strip())

    locality = lines[-1]
    street_lines = lines[:-1]
    street = ", ".join(street_lines)

    for pattern in LOCALITY_PATTERNS:
        m = pattern.match(locality)
        if not m:
            continue
        city = m.group("city").strip().rstrip(",").strip()
        if not street_lines and "," in city:
            # one-line address: "123 Main St, Anytown, CA 90210"
            street, city = (p.strip() for p in city.rsplit(",", 1))
        return _fields(role, street, city, _state_code(m.group("state")), m.group("zip"))

    if len(lines) == 1:
        return _fields(role, address=lines[0])

    return _fields(role, address=street or locality)


def format_postal_address(street: str, city: str, state: str, zipc: str) -> str:
    """Single line: "123 Main St, Anytown, CA 90210" (empty parts skipped)."""
    state_zip = " ".join(p for p in (state.strip(), zipc.strip()) if p)
    parts = [street.strip(), city.strip(), state_zip]
    return ", ".join(p for p in parts if p)
