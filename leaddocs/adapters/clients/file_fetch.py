# leaddocs/adapters/clients/file_fetch.py
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import unquote, urlparse

from ..base import FetchedFile
from .http_resilience import resilient_request


def _name_from_url(url: str) -> str:
    path = urlparse(url).path
    return unquote(path.rsplit("/", 1)[-1]) or "upload"


@dataclass
class HttpFileFetcher:
    """Downloads form uploads (signed CDN URLs; no auth header)."""

    async def fetch(self, url: str) -> FetchedFile:
        resp = await resilient_request("GET", url, operation="files.fetch")
        mime = (resp.headers.get("content-type") or "").split(";")[0].strip() or None
        return FetchedFile(content=resp.content, filename=_name_from_url(url), mime_type=mime)
