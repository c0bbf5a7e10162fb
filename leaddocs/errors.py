from __future__ import annotations

from typing import Any


class LeadDocsError(Exception):
    """Base for every error this package raises on purpose."""


class IntakeValidationError(LeadDocsError):
    """A required canonical field is missing after normalization; nothing is generated."""

    def __init__(self, message: str, *, field: str | None = None):
        super().__init__(message)
        self.field = field


class PartialMaterializationError(LeadDocsError):
    """
    Some documents in a batch failed. Never raised by the orchestrator itself;
    callers build one from a result when they want to report the failures.
    """

    def __init__(self, failures: list[Any]):
        names = ", ".join(getattr(f, "name", "?") for f in failures)
        super().__init__(f"{len(failures)} document(s) failed: {names}")
        self.failures = failures


class TotalMaterializationFailure(LeadDocsError):
    def __init__(self, failures: list[Any]):
        super().__init__(f"no document succeeded ({len(failures)} attempted)")
        self.failures = failures


class ExternalServiceError(LeadDocsError):
    """A collaborator call (document, folder, row, fetch) failed or timed out."""

    def __init__(self, operation: str, message: str, *, retryable: bool = False):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.retryable = retryable


class RecordStoreError(LeadDocsError):
    pass


class LeadNotFoundError(RecordStoreError):
    def __init__(self, lead_id: str):
        super().__init__(f"lead not found: {lead_id}")
        self.lead_id = lead_id


class InvalidTransitionError(RecordStoreError):
    def __init__(self, current: str, target: str, reason: str | None = None):
        super().__init__(reason or f"invalid status transition {current} -> {target}")
        self.current = current
        self.target = target


class VersionConflictError(RecordStoreError):
    def __init__(self, lead_id: str, expected: int, actual: int | None):
        super().__init__(f"lead {lead_id} changed concurrently (expected v{expected}, found v{actual})")
        self.lead_id = lead_id
        self.expected = expected
        self.actual = actual
