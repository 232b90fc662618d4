"""Web API contract models using Pydantic for validation."""

from mixerdeck.web.models.audio import (
    ApplicationVolumeRequest,
    MuteRequest,
    VolumeRequest,
)

__all__ = [
    "ApplicationVolumeRequest",
    "MuteRequest",
    "VolumeRequest",
]
