"""Audio API routes for device and application volume control."""

import logging
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from mixerdeck.audio.errors import AudioError
from mixerdeck.audio.processes import ProcessEnumerationService
from mixerdeck.audio.service import AudioOrchestrationService
from mixerdeck.config import MixerDeckConfig
from mixerdeck.web.core.container import Container
from mixerdeck.web.models.audio import (
    ApiEnvelope,
    ApplicationListResponse,
    ApplicationModel,
    ApplicationVolumeRequest,
    ApplicationVolumeResponse,
    DeviceListResponse,
    DeviceModel,
    GetVolumeResponse,
    MuteRequest,
    MuteResponse,
    ProcessListResponse,
    ProcessModel,
    VolumeRequest,
    VolumeResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/audio")

FALLBACK_DEFAULT_DEVICE = "System Default Audio Device"


def failure_response(envelope: ApiEnvelope, status_code: int = 500) -> JSONResponse:
    """Serialize a failed envelope with an error status code."""
    content = envelope.model_dump(mode="json", by_alias=True)
    return JSONResponse(status_code=status_code, content=content)


@router.get("/devices", response_model=DeviceListResponse)
@inject
async def get_devices(
    audio_service: Annotated[
        AudioOrchestrationService, Depends(Provide[Container.audio_service])
    ],
) -> DeviceListResponse | JSONResponse:
    """List render devices and the default device."""
    result = await audio_service.get_devices()
    if not result.success:
        return failure_response(
            DeviceListResponse(
                success=False,
                default_device=FALLBACK_DEFAULT_DEVICE,
                error=result.error,
                error_kind=result.error_kind,
            )
        )

    device_list = result.value
    return DeviceListResponse(
        success=True,
        devices=[DeviceModel.from_device(device) for device in device_list.devices],
        default_device=device_list.default_device,
    )


@router.get("/volume", response_model=GetVolumeResponse)
@inject
async def get_volume(
    audio_service: Annotated[
        AudioOrchestrationService, Depends(Provide[Container.audio_service])
    ],
    config: Annotated[MixerDeckConfig, Depends(Provide[Container.config])],
    device: Annotated[str | None, Query(description="Device name")] = None,
) -> GetVolumeResponse | JSONResponse:
    """Get volume and mute state of a device (the configured default when omitted)."""
    device = device or config.default_device
    volume_result = await audio_service.get_volume(device)
    mute_result = await audio_service.get_muted(device) if volume_result.success else None

    failed = volume_result if not volume_result.success else mute_result
    if failed is not None and not failed.success:
        return failure_response(
            GetVolumeResponse(
                success=False,
                device=device,
                volume=0,
                muted=False,
                error=failed.error,
                error_kind=failed.error_kind,
            )
        )

    return GetVolumeResponse(
        success=True, device=device, volume=volume_result.value, muted=mute_result.value
    )


@router.post("/volume", response_model=VolumeResponse)
@inject
async def set_volume(
    request: VolumeRequest,
    audio_service: Annotated[
        AudioOrchestrationService, Depends(Provide[Container.audio_service])
    ],
) -> VolumeResponse | JSONResponse:
    """Set a device's volume."""
    result = await audio_service.set_volume(request.device, request.volume)
    if not result.success:
        return failure_response(
            VolumeResponse(
                success=False,
                device=request.device,
                volume=0,
                error=result.error,
                error_kind=result.error_kind,
            )
        )
    return VolumeResponse(success=True, device=request.device, volume=result.value)


@router.get("/mute", response_model=MuteResponse)
@inject
async def get_mute(
    audio_service: Annotated[
        AudioOrchestrationService, Depends(Provide[Container.audio_service])
    ],
    config: Annotated[MixerDeckConfig, Depends(Provide[Container.config])],
    device: Annotated[str | None, Query(description="Device name")] = None,
) -> MuteResponse | JSONResponse:
    """Get the mute state of a device."""
    device = device or config.default_device
    result = await audio_service.get_muted(device)
    if not result.success:
        return failure_response(
            MuteResponse(
                success=False,
                device=device,
                muted=False,
                error=result.error,
                error_kind=result.error_kind,
            )
        )
    return MuteResponse(success=True, device=device, muted=result.value)


@router.post("/mute", response_model=MuteResponse)
@inject
async def set_mute(
    request: MuteRequest,
    audio_service: Annotated[
        AudioOrchestrationService, Depends(Provide[Container.audio_service])
    ],
) -> MuteResponse | JSONResponse:
    """Mute or unmute a device."""
    result = await audio_service.set_muted(request.device, request.mute)
    if not result.success:
        return failure_response(
            MuteResponse(
                success=False,
                device=request.device,
                muted=False,
                error=result.error,
                error_kind=result.error_kind,
            )
        )
    return MuteResponse(success=True, device=request.device, muted=request.mute)


@router.get("/applications", response_model=ApplicationListResponse)
@inject
async def get_applications(
    audio_service: Annotated[
        AudioOrchestrationService, Depends(Provide[Container.audio_service])
    ],
) -> ApplicationListResponse:
    """List applications currently playing audio.

    Enumeration failures produce an empty list rather than an error.
    """
    result = await audio_service.get_applications()
    return ApplicationListResponse(
        success=True,
        applications=[ApplicationModel.from_application(app) for app in result.value or ()],
    )


@router.post("/applications/volume", response_model=ApplicationVolumeResponse)
@inject
async def set_application_volume(
    request: ApplicationVolumeRequest,
    audio_service: Annotated[
        AudioOrchestrationService, Depends(Provide[Container.audio_service])
    ],
) -> ApplicationVolumeResponse | JSONResponse:
    """Set an application's volume. Every instance of the process is affected."""
    result = await audio_service.set_application_volume(
        request.process_path, request.volume, request.instance_id
    )
    if not result.success:
        return failure_response(
            ApplicationVolumeResponse(
                success=False,
                process_path=request.process_path,
                volume=0,
                error=result.error,
                error_kind=result.error_kind,
            )
        )
    return ApplicationVolumeResponse(
        success=True, process_path=request.process_path, volume=result.value
    )


@router.get("/processes", response_model=ProcessListResponse)
@inject
async def get_processes(
    process_service: Annotated[
        ProcessEnumerationService, Depends(Provide[Container.process_service])
    ],
) -> ProcessListResponse | JSONResponse:
    """List every process with an audio session, marking those playing audio."""
    try:
        processes = await process_service.list_processes()
    except AudioError as e:
        logger.error("Failed to get processes: %s", e.message)
        return failure_response(
            ProcessListResponse(success=False, error=e.message, error_kind=e.kind)
        )
    return ProcessListResponse(
        success=True, processes=[ProcessModel.from_process(p) for p in processes]
    )
