# leaddocs/adapters/clients/google_docs.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ...config import settings
from ...domain.replacements import ordered_requests
from ...domain.types import DocumentHandle
from .http_resilience import bearer_headers, resilient_request


def replace_requests(replacements: Mapping[str, str], *, safe_only: bool | None = None) -> list[dict[str, Any]]:
    """Docs batchUpdate payload: one replaceAllText per literal, case-sensitive."""
    if safe_only is None:
        safe_only = settings.SAFE_LITERALS_ONLY
    return [
        {
            "replaceAllText": {
                "containsText": {"text": literal, "matchCase": True},
                "replaceText": value,
            }
        }
        for literal, value in ordered_requests(replacements, safe_only=safe_only)
    ]


@dataclass
class GoogleDocsClient:
    drive_base_url: str
    docs_base_url: str

    @classmethod
    def from_settings(cls) -> "GoogleDocsClient":
        return cls(drive_base_url=settings.GOOGLE_DRIVE_BASE_URL, docs_base_url=settings.GOOGLE_DOCS_BASE_URL)

    async def copy_template(self, template_id: str, name: str, parent_id: str) -> DocumentHandle:
        resp = await resilient_request(
            "POST",
            f"{self.drive_base_url}/files/{template_id}/copy",
            operation="docs.copy_template",
            headers=bearer_headers(),
            params={"supportsAllDrives": "true", "fields": "id,name,webViewLink"},
            json={"name": name, "parents": [parent_id]},
        )
        d = resp.json()
        return DocumentHandle(id=d["id"], name=d.get("name") or name, view_link=d.get("webViewLink"))

    async def batch_replace_text(self, document_id: str, replacements: Mapping[str, str]) -> None:
        requests = replace_requests(replacements)
        if not requests:
            return
        await resilient_request(
            "POST",
            f"{self.docs_base_url}/documents/{document_id}:batchUpdate",
            operation="docs.batch_replace_text",
            headers=bearer_headers(),
            json={"requests": requests},
        )
