# leaddocs/adapters/clients/http_resilience.py
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from ...config import settings
from ...errors import ExternalServiceError

log = logging.getLogger(__name__)

RETRYABLE_STATUS = (429, 500, 502, 503, 504)


@dataclass
class _CircuitState:
    fails: int = 0
    opened_at: float | None = None


_CIRCUIT = _CircuitState()
_RATE_LOCK = asyncio.Lock()
_LAST_TS = 0.0


def _circuit_is_open(now: float) -> bool:
    if _CIRCUIT.opened_at is None:
        return False
    return (now - _CIRCUIT.opened_at) < float(settings.HTTP_CIRCUIT_RESET_S)


def _circuit_on_success() -> None:
    _CIRCUIT.fails = 0
    _CIRCUIT.opened_at = None


def _circuit_on_failure() -> None:
    _CIRCUIT.fails += 1
    if _CIRCUIT.fails >= int(settings.HTTP_CIRCUIT_FAIL_THRESHOLD):
        _CIRCUIT.opened_at = time.time()


async def _rate_limit() -> None:
    """Very simple per-process limiter (Google quotas are per project, not per call site)."""
    global _LAST_TS
    rps = float(settings.HTTP_RATE_LIMIT_RPS)
    if rps <= 0:
        return
    min_gap = 1.0 / rps
    async with _RATE_LOCK:
        now = time.time()
        wait = (_LAST_TS + min_gap) - now
        if wait > 0:
            await asyncio.sleep(wait)
        _LAST_TS = time.time()


def bearer_headers() -> dict[str, str]:
    if not settings.GOOGLE_ACCESS_TOKEN:
        raise ExternalServiceError("auth", "GOOGLE_ACCESS_TOKEN is not set")
    return {"Authorization": f"Bearer {settings.GOOGLE_ACCESS_TOKEN}"}


async def resilient_request(
    method: str,
    url: str,
    *,
    operation: str,
    headers: dict[str, str] | None = None,
    params: dict[str, Any] | None = None,
    json: Any | None = None,
    content: bytes | None = None,
    files: Any | None = None,
) -> httpx.Response:
    """
    One external call with rate limiting, a process-wide circuit breaker and
    exponential backoff on 429/5xx/timeouts. Final failure -> ExternalServiceError.
    """
    now = time.time()
    if _circuit_is_open(now):
        raise ExternalServiceError(operation, f"circuit_open: refusing external call to {url}", retryable=True)

    await _rate_limit()

    timeout = httpx.Timeout(float(settings.HTTP_TIMEOUT_S))
    max_retries = int(settings.HTTP_MAX_RETRIES)
    backoff = float(settings.HTTP_BACKOFF_BASE_S)

    last_exc: Exception | None = None
    for attempt in range(max_retries + 1):
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                resp = await client.request(
                    method, url, headers=headers, params=params, json=json, content=content, files=files
                )

            if resp.status_code in RETRYABLE_STATUS:
                raise httpx.HTTPStatusError("retryable_status", request=resp.request, response=resp)

            if resp.is_error:
                # 4xx other than 429: permission / not found / bad request. Retrying won't help.
                _circuit_on_success()
                raise ExternalServiceError(
                    operation, f"HTTP {resp.status_code}: {resp.text[:300]}", retryable=False
                )

            _circuit_on_success()
            return resp
        except (httpx.TimeoutException, httpx.NetworkError, httpx.HTTPStatusError) as e:
            last_exc = e
            _circuit_on_failure()
            if attempt >= max_retries:
                break
            log.warning("%s failed (attempt %d/%d): %s", operation, attempt + 1, max_retries + 1, e)
            await asyncio.sleep(min(5.0, backoff * (2**attempt)))

    assert last_exc is not None
    raise ExternalServiceError(operation, str(last_exc), retryable=True) from last_exc
