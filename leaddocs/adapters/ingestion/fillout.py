from __future__ import annotations

import logging
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...domain.parsing import get_first, get_nested
from ...errors import IntakeValidationError
from .base import InboundSubmission, SubmissionParser

log = logging.getLogger(__name__)


class _Loose(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Question(_Loose):
    id: str | None = None
    name: str | None = None
    type: str | None = None
    value: Any = None


class UrlParameter(_Loose):
    name: str | None = None
    value: Any = None


class FilloutSubmission(_Loose):
    submission_id: str | None = Field(default=None, alias="submissionId")
    submission_time: str | None = Field(default=None, alias="submissionTime")
    questions: list[Question] = Field(default_factory=list)
    url_parameters: list[UrlParameter] = Field(default_factory=list, alias="urlParameters")


class QuestionsPayload(_Loose):
    kind: Literal["questions"] = "questions"
    form_id: str | None = Field(default=None, alias="formId")
    submission: FilloutSubmission


class DataItem(_Loose):
    field: str | None = None
    value: Any = None


class DataPayload(_Loose):
    kind: Literal["data"] = "data"
    data: list[DataItem]


class ResponseItem(_Loose):
    question: str | None = None
    answer: Any = None


class ResponsesPayload(_Loose):
    kind: Literal["responses"] = "responses"
    responses: list[ResponseItem]


class FlatPayload(_Loose):
    kind: Literal["flat"] = "flat"


WirePayload = Union[QuestionsPayload, DataPayload, ResponsesPayload, FlatPayload]


def detect_shape(payload: dict[str, Any]) -> WirePayload:
    """Tag the body with the first shape that fits: questions, data, responses, flat."""
    if isinstance(get_nested(payload, "submission.questions"), list):
        return QuestionsPayload.model_validate(payload)
    if isinstance(payload.get("questions"), list):
        # Some integrations post the submission object itself.
        return QuestionsPayload.model_validate({"formId": payload.get("formId"), "submission": payload})
    if isinstance(payload.get("data"), list):
        return DataPayload.model_validate(payload)
    if isinstance(payload.get("responses"), list):
        return ResponsesPayload.model_validate(payload)
    return FlatPayload.model_validate(payload)


class FilloutParser(SubmissionParser):
    """Fillout webhook bodies (and the older shapes other form tools send)."""

    def parse(self, payload: dict[str, Any]) -> InboundSubmission:
        if not isinstance(payload, dict):
            raise IntakeValidationError("submission payload must be a JSON object")
        try:
            wire = detect_shape(payload)
        except ValidationError as e:
            raise IntakeValidationError(f"malformed submission payload: {e.errors()[:3]}") from e

        fields: dict[str, Any] = {}
        form_id = submission_time = None
        url_params: dict[str, Any] = {}

        if isinstance(wire, QuestionsPayload):
            for q in wire.submission.questions:
                if q.name:
                    fields[q.name] = q.value
            url_params = {p.name: p.value for p in wire.submission.url_parameters if p.name}
            form_id = wire.form_id or wire.submission.submission_id
            submission_time = wire.submission.submission_time
        elif isinstance(wire, DataPayload):
            for item in wire.data:
                if item.field:
                    fields[item.field] = item.value
        elif isinstance(wire, ResponsesPayload):
            for item in wire.responses:
                if item.question:
                    fields[item.question] = item.answer
        else:
            fields = dict(payload)
            form_id = get_first(payload, "submissionId", "id", "form_id")

        lead_id = get_first(payload, "lead_id", "leadId") or get_first(url_params, "lead_id", "leadId")

        for key, value in (("form_id", form_id), ("submission_time", submission_time), ("lead_id", lead_id)):
            if value and key not in fields:
                fields[key] = value

        log.info("parsed %s submission with %d fields", wire.kind, len(fields))
        return InboundSubmission(
            fields=fields,
            shape=wire.kind,
            form_id=str(form_id) if form_id else None,
            submission_time=submission_time,
            lead_id=str(lead_id) if lead_id else None,
        )
