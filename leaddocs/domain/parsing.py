from __future__ import annotations

import re
from typing import Any

EMPTY_SENTINELS = {"null", "unanswered"}

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def is_empty(x: Any) -> bool:
    """None, blank text, or the literal sentinels "null" / "unanswered" (any case)."""
    if x is None:
        return True
    if isinstance(x, str):
        s = x.strip()
        return not s or s.lower() in EMPTY_SENTINELS
    if isinstance(x, (list, tuple)):
        return all(is_empty(v) for v in x)
    return False


def as_text(x: Any) -> str:
    """Flatten a form value into the single string a document can hold."""
    if is_empty(x):
        return ""
    if isinstance(x, bool):
        return "Yes" if x else "No"
    if isinstance(x, (list, tuple)):
        return ", ".join(as_text(v) for v in x if not is_empty(v))
    if isinstance(x, float) and x.is_integer():
        return str(int(x))
    return str(x).strip()


def to_int(x: Any) -> int | None:
    if x is None or x == "":
        return None
    try:
        return int(float(x))
    except Exception:
        return None


def to_float(x: Any) -> float | None:
    """Accepts "$1,250,000", "7.5%", "18 months"; takes the first number found."""
    if x is None or x == "":
        return None
    if isinstance(x, (int, float)):
        return float(x)
    m = _NUMBER.search(str(x).replace(",", ""))
    if not m:
        return None
    try:
        return float(m.group(0))
    except Exception:
        return None


def get_first(payload: dict[str, Any], *keys: str) -> Any:
    """Return first non-empty key from payload."""
    for k in keys:
        v = payload.get(k)
        if is_empty(v):
            continue
        return v
    return None


def get_nested(payload: dict[str, Any], path: str) -> Any:
    """Tiny dot-path getter: 'submission.questions'."""
    cur: Any = payload
    for part in path.split("."):
        if not isinstance(cur, dict):
            return None
        cur = cur.get(part)
        if cur is None:
            return None
    return cur
