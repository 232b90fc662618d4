"""Pydantic models for the audio control API.

Every response shares the envelope ``{success, timestamp, error?}``. Field
names are camelCase on the wire.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from mixerdeck.audio.errors import AudioErrorKind
from mixerdeck.audio.models import Application, AudioProcess, Device
from mixerdeck.audio.sanitizer import clamp_volume


def utc_timestamp() -> str:
    """Current time as an ISO 8601 string."""
    return datetime.now(UTC).isoformat()


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiEnvelope(CamelModel):
    """Fields common to every API response."""

    success: bool = Field(..., description="Whether the operation succeeded")
    timestamp: str = Field(default_factory=utc_timestamp, description="ISO 8601 response time")
    error: str | None = Field(default=None, description="Error message if the operation failed")
    error_kind: AudioErrorKind | None = Field(default=None, description="Classified error kind")


# Requests


class VolumeRequest(CamelModel):
    """Request to set a device volume."""

    model_config = ConfigDict(json_schema_extra={"example": {"device": "Speakers", "volume": 40}})

    device: str = Field(..., min_length=1, description="Device name")
    volume: float = Field(..., ge=0, le=100, description="Volume percentage")


class MuteRequest(CamelModel):
    """Request to mute or unmute a device."""

    model_config = ConfigDict(json_schema_extra={"example": {"device": "Speakers", "mute": True}})

    device: str = Field(..., min_length=1, description="Device name")
    mute: bool = Field(..., description="True to mute, False to unmute")


class ApplicationVolumeRequest(CamelModel):
    """Request to set an application's volume."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"processPath": "C:\\Program Files\\App\\app.exe", "volume": 60}
        }
    )

    process_path: str = Field(..., min_length=1, description="Full path of the process")
    volume: float = Field(..., ge=0, le=100, description="Volume percentage")
    instance_id: str | None = Field(
        default=None, description="Instance id; all instances share one volume"
    )


# Records


class DeviceModel(CamelModel):
    """An audio device."""

    name: str
    device_identifier: str
    id: str
    volume: int = Field(..., ge=0, le=100)
    is_default: bool
    direction: str

    @classmethod
    def from_device(cls, device: Device) -> "DeviceModel":
        return cls(
            name=device.name,
            device_identifier=device.device_identifier,
            id=device.name,
            volume=clamp_volume(device.volume_percent),
            is_default=device.is_default,
            direction=device.direction.value,
        )


class ApplicationModel(CamelModel):
    """An application currently rendering audio."""

    name: str
    process_path: str
    volume: int = Field(..., ge=0, le=100)
    instance_id: str | None = None

    @classmethod
    def from_application(cls, application: Application) -> "ApplicationModel":
        return cls(
            name=application.name,
            process_path=application.process_path,
            volume=clamp_volume(application.volume_percent),
            instance_id=application.instance_id,
        )


class ProcessModel(CamelModel):
    """A process owning an audio session."""

    name: str
    process_path: str
    icon_path: str | None = None
    is_active: bool

    @classmethod
    def from_process(cls, process: AudioProcess) -> "ProcessModel":
        return cls(
            name=process.name,
            process_path=process.process_path,
            icon_path=process.icon_path,
            is_active=process.is_active,
        )


# Responses


class DeviceListResponse(ApiEnvelope):
    devices: list[DeviceModel] = Field(default_factory=list)
    default_device: str


class GetVolumeResponse(ApiEnvelope):
    device: str
    volume: int = Field(..., ge=0, le=100)
    muted: bool


class VolumeResponse(ApiEnvelope):
    device: str
    volume: int = Field(..., ge=0, le=100)


class MuteResponse(ApiEnvelope):
    device: str
    muted: bool


class ApplicationListResponse(ApiEnvelope):
    applications: list[ApplicationModel] = Field(default_factory=list)


class ApplicationVolumeResponse(ApiEnvelope):
    process_path: str
    volume: int = Field(..., ge=0, le=100)


class ProcessListResponse(ApiEnvelope):
    processes: list[ProcessModel] = Field(default_factory=list)


class SettingsResponse(ApiEnvelope):
    settings: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(ApiEnvelope):
    """Body returned for rejected requests."""
