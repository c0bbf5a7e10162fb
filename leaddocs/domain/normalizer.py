from __future__ import annotations

from typing import Any, Mapping

from .field_map import FIELD_MAP, label_key
from .parsing import as_text
from .vocabulary import is_canonical


def is_file_value(v: Any) -> bool:
    # Upload answers arrive as {"url": ..., "filename": ...} or a list of those.
    if isinstance(v, dict):
        return True
    if isinstance(v, (list, tuple)):
        return any(isinstance(x, dict) for x in v)
    return False


def slug_keys(raw: Mapping[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for k, v in raw.items():
        if k is None:
            continue
        out[label_key(k)] = v
    return out


def normalize_fields(raw: Mapping[str, Any]) -> dict[str, str]:
    """
    RawSubmission -> CanonicalFields.

    Walks FIELD_MAP in table order: a non-empty alias overwrites, an empty one only
    claims the key when nothing has yet. Raw keys that already are canonical names are
    applied last, and only when non-empty. Empty values come out as "" so the key
    is still present for later stages.
    """
    slugged = slug_keys(raw)
    out: dict[str, str] = {}

    for label, field in FIELD_MAP:
        if label not in slugged:
            continue
        v = slugged[label]
        if is_file_value(v):
            continue
        text = as_text(v)
        if text:
            out[field.value] = text
        else:
            out.setdefault(field.value, "")

    for key, v in slugged.items():
        if not is_canonical(key) or is_file_value(v):
            continue
        text = as_text(v)
        if text:
            out[key] = text
        else:
            out.setdefault(key, "")

    return out
