from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, TypeVar

from ..config import settings
from ..errors import ExternalServiceError, LeadDocsError

log = logging.getLogger(__name__)

T = TypeVar("T")


async def call_external(operation: str, aw: Awaitable[T], *, timeout_s: float | None = None) -> T:
    """
    Await one collaborator call with a deadline.

    Timeout -> retryable ExternalServiceError. Our own errors (store conflicts, not-found,
    already-wrapped service errors) pass through; anything else is logged with the
    operation name and re-raised as ExternalServiceError.
    """
    limit = float(timeout_s if timeout_s is not None else settings.EXTERNAL_CALL_TIMEOUT_S)
    try:
        return await asyncio.wait_for(aw, timeout=limit)
    except asyncio.TimeoutError as e:
        log.warning("%s timed out after %.1fs", operation, limit)
        raise ExternalServiceError(operation, f"timed out after {limit:.1f}s", retryable=True) from e
    except LeadDocsError as e:
        log.warning("%s failed: %s", operation, e)
        raise
    except Exception as e:
        log.warning("%s failed: %s", operation, e)
        raise ExternalServiceError(operation, str(e) or e.__class__.__name__) from e
