"""Audio domain package.

This package contains the command orchestration layer for the external tools:
- CommandRunner: argv-based execution with output capture
- Parser: tabular output to Device/Application records
- Sanitizer: identifier filtering and volume clamping
- Errors: error taxonomy and message classification
- AudioOrchestrationService: device and application volume control
- ProcessEnumerationService: audio-capable process listing
"""

from mixerdeck.audio.command_runner import CommandFailedError, CommandRunner, CommandSpawnError
from mixerdeck.audio.errors import AudioError, AudioErrorKind, classify
from mixerdeck.audio.models import (
    Application,
    AudioProcess,
    Device,
    DeviceDirection,
    DeviceList,
    VolumeCommandResult,
)
from mixerdeck.audio.processes import ProcessEnumerationService
from mixerdeck.audio.sanitizer import clamp_volume, sanitize_identifier, validate_volume_range
from mixerdeck.audio.service import AudioOrchestrationService

__all__ = [
    "Application",
    "AudioError",
    "AudioErrorKind",
    "AudioOrchestrationService",
    "AudioProcess",
    "CommandFailedError",
    "CommandRunner",
    "CommandSpawnError",
    "Device",
    "DeviceDirection",
    "DeviceList",
    "ProcessEnumerationService",
    "VolumeCommandResult",
    "clamp_volume",
    "classify",
    "sanitize_identifier",
    "validate_volume_range",
]
