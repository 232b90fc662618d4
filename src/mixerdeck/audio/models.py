"""Domain records produced by the audio orchestration layer.

Records are frozen: every enumeration builds a fresh collection instead of
mutating entries in place.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from mixerdeck.audio.errors import AudioErrorKind


class DeviceDirection(str, Enum):
    """Data-flow direction of an audio endpoint."""

    RENDER = "render"
    CAPTURE = "capture"


@dataclass(frozen=True)
class Device:
    """An audio endpoint as reported by the enumeration command."""

    name: str
    device_identifier: str
    volume_percent: float
    is_default: bool = False
    direction: DeviceDirection = DeviceDirection.RENDER


@dataclass(frozen=True)
class DeviceList:
    """Result of a device enumeration pass."""

    devices: tuple[Device, ...]
    default_device: str


@dataclass(frozen=True)
class Application:
    """An application session currently rendering audio.

    Identity is the ``(process_path, instance_id)`` pair. ``instance_id`` is
    numbered by position within one enumeration pass, so it can change between
    refreshes when process order changes.
    """

    name: str
    process_path: str
    volume_percent: float
    instance_id: str | None = None

    @property
    def key(self) -> tuple[str, str | None]:
        return (self.process_path, self.instance_id)


@dataclass(frozen=True)
class AudioProcess:
    """A process known to own an audio session."""

    name: str
    process_path: str
    is_active: bool
    icon_path: str | None = None


@dataclass(frozen=True)
class VolumeCommandResult:
    """Uniform result of every orchestration call."""

    success: bool
    value: Any = None
    error_kind: AudioErrorKind | None = None
    error: str | None = None

    @classmethod
    def ok(cls, value: Any = None) -> "VolumeCommandResult":
        return cls(success=True, value=value)

    @classmethod
    def failed(cls, error_kind: AudioErrorKind, error: str) -> "VolumeCommandResult":
        return cls(success=False, error_kind=error_kind, error=error or "Unknown error occurred")
