"""
Settings API Endpoints

Endpoints:
- GET /api/settings/origin - Read the origin address (404 until one is saved)
- PUT /api/settings/origin - Replace the origin address
- PUT /api/settings/theme  - Set the UI theme (dark, light or sepia)

Handlers are plain functions: the JSON stores block on file I/O, so FastAPI
runs them in its threadpool.
"""

import logging

from fastapi import APIRouter, Depends

from postage_service.api.deps import get_settings_store
from postage_service.core.errors import NotFoundError
from postage_service.schemas.settings import OriginSettings, ThemePreferenceRequest, ThemeSettings
from postage_service.stores.settings import SettingsStore

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/origin", response_model=OriginSettings, response_model_by_alias=True)
def get_origin(store: SettingsStore = Depends(get_settings_store)):
    origin = store.get_origin_settings()
    if origin is None:
        raise NotFoundError("Origin settings not configured")
    return origin


@router.put("/origin", response_model=OriginSettings, response_model_by_alias=True)
def update_origin(payload: OriginSettings, store: SettingsStore = Depends(get_settings_store)):
    """Save the origin; updatedAt is set by the server."""
    return store.save_origin_settings(payload)


@router.put("/theme", response_model=ThemeSettings, response_model_by_alias=True)
def update_theme(payload: ThemePreferenceRequest, store: SettingsStore = Depends(get_settings_store)):
    return store.update_theme(payload.theme_preference)
