"""Settings API routes for the user settings record."""

import logging
from typing import Annotated, Any

import yaml
from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from mixerdeck.settings.service import SettingsService
from mixerdeck.web.core.container import Container
from mixerdeck.web.models.audio import SettingsResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/settings")


def _settings_failure(message: str, status_code: int) -> JSONResponse:
    envelope = SettingsResponse(success=False, error=message)
    return JSONResponse(
        status_code=status_code, content=envelope.model_dump(mode="json", by_alias=True)
    )


@router.get("", response_model=SettingsResponse)
@inject
async def get_settings(
    settings_service: Annotated[SettingsService, Depends(Provide[Container.settings_service])],
) -> SettingsResponse | JSONResponse:
    """Load the settings record."""
    try:
        settings = settings_service.load()
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Failed to load settings: %s", e)
        return _settings_failure(f"Failed to load settings: {e!s}", 500)
    return SettingsResponse(success=True, settings=settings.model_dump(by_alias=True))


@router.patch("", response_model=SettingsResponse)
@inject
async def update_settings(
    updates: Annotated[dict[str, Any], Body(examples=[{"whitelistedApps": ["C:\\app.exe"]}])],
    settings_service: Annotated[SettingsService, Depends(Provide[Container.settings_service])],
) -> SettingsResponse | JSONResponse:
    """Merge a partial settings record into the stored one."""
    try:
        settings = settings_service.update(updates)
    except ValidationError as e:
        return _settings_failure(f"Invalid settings: {e.errors()[0]['msg']}", 400)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Failed to update settings: %s", e)
        return _settings_failure(f"Failed to update settings: {e!s}", 500)
    return SettingsResponse(success=True, settings=settings.model_dump(by_alias=True))
