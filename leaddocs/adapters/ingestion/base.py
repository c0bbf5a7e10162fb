from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass(frozen=True)
class InboundSubmission:
    """A webhook body reduced to its RawSubmission mapping plus provenance."""

    fields: dict[str, Any]
    shape: str
    form_id: str | None = None
    submission_time: str | None = None
    lead_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


class SubmissionParser(Protocol):
    def parse(self, payload: dict[str, Any]) -> InboundSubmission:
        raise NotImplementedError
