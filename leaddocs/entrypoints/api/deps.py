# leaddocs/entrypoints/api/deps.py
from __future__ import annotations

from fastapi import Header, HTTPException

from ...config import settings
from ...service_layer.bootstrap import Workspace, get_workspace


def require_api_key(x_api_key: str | None = Header(default=None, alias="X-API-Key")) -> None:
    if settings.API_KEY:
        if not x_api_key or x_api_key != settings.API_KEY:
            raise HTTPException(status_code=401, detail="Invalid API key")


def workspace_dep() -> Workspace:
    # Overridden in tests with an in-memory workspace.
    return get_workspace()
