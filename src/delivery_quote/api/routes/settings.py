"""Effective pricing settings (read-only)."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...schemas.zones import GlobalSettingsModel
from ...services.quotes import get_quote_dependencies

router = APIRouter(tags=["settings"])


@router.get("/settings", response_model=GlobalSettingsModel, status_code=status.HTTP_200_OK)
def current_settings() -> GlobalSettingsModel:
    return GlobalSettingsModel.from_domain(get_quote_dependencies().settings_cache.get())
