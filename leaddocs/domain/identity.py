from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from ..errors import IntakeValidationError

ACTIVE_FIELDS: tuple[str, ...] = ("first_name", "last_name", "title", "email", "mobile_phone", "linkedin")

# Only these three get a stand-in value; the rest may stay empty.
DEFAULTED_FIELDS: tuple[str, ...] = ("first_name", "last_name", "email")

_LEGACY = {"email": "contact_email"}


@dataclass(frozen=True)
class IdentityDefaults:
    first_name: str = "Contact"
    last_name: str = "Person"
    email: str = "contact@example.com"

    def for_field(self, name: str) -> str:
        return getattr(self, name)


def resolve_identity(
    fields: Mapping[str, str],
    *,
    defaults: IdentityDefaults | None = None,
    strict: bool = False,
) -> dict[str, str]:
    """
    Pick the active identity: signer (*_sign) first, then point of contact (*_poc),
    then whatever an earlier stage already put under the bare name.

    Lenient mode (default) fills a missing first/last name or email with a
    non-identifying stand-in so a document still renders. Strict mode raises instead.
    Returns only the active identity keys; the caller merges them.
    """
    defaults = defaults or IdentityDefaults()
    out: dict[str, str] = {}

    for name in ACTIVE_FIELDS:
        value = (
            (fields.get(f"{name}_sign") or "").strip()
            or (fields.get(f"{name}_poc") or "").strip()
            or (fields.get(name) or "").strip()
            or (fields.get(_LEGACY.get(name, "")) or "").strip()
        )
        out[name] = value

    missing = [n for n in DEFAULTED_FIELDS if not out[n]]
    if missing and strict:
        raise IntakeValidationError(
            f"missing signer/contact identity: {', '.join(missing)}",
            field=missing[0],
        )
    for name in missing:
        out[name] = defaults.for_field(name)

    return out


def display_name(first: str, last: str) -> str:
    return " ".join(p for p in (first.strip(), last.strip()) if p)
