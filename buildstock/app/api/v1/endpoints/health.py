from __future__ import annotations

from fastapi import APIRouter, Depends

from buildstock.core.config import Settings, get_settings

router = APIRouter()


@router.get("/health")
def health(settings: Settings = Depends(get_settings)):
    return {"status": "ok", "auth_enabled": settings.auth_enabled}
