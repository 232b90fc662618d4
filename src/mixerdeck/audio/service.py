"""Audio orchestration service: the facade over the external volume tools."""

import logging
from pathlib import PureWindowsPath

from mixerdeck.audio.command_runner import CommandFailedError, CommandRunner, CommandSpawnError
from mixerdeck.audio.errors import AudioError, AudioErrorKind, classify
from mixerdeck.audio.models import VolumeCommandResult
from mixerdeck.audio.parser import parse_applications, parse_devices, parse_number
from mixerdeck.audio.sanitizer import clamp_volume, sanitize_identifier

logger = logging.getLogger(__name__)

DEVICE_COLUMNS = "Name,Default,Device Name,Command-Line Friendly ID,Volume Percent"
DEVICE_PROJECTION = "Device Name,Name,Volume Percent,Default"
DEVICE_FILTER = "Default=Render"

APPLICATION_COLUMNS = "Name,Type,Process Path,Volume Percent,Direction"
APPLICATION_PROJECTION = "Name,Volume Percent,Process Path"
APPLICATION_FILTER = "Type=Application && 'Process Path' EndsWith .exe && Direction=Render"


def to_audio_error(error: CommandFailedError) -> AudioError:
    """Classify a command failure into an AudioError."""
    message = str(error) or "Unknown error occurred"
    if isinstance(error, CommandSpawnError):
        return AudioError(message, AudioErrorKind.COMMAND_FAILED)
    return AudioError(message, classify(message))


def process_name(process_path: str) -> str:
    """Return the executable filename of a Windows or POSIX process path."""
    return PureWindowsPath(process_path).name or process_path


class AudioOrchestrationService:
    """Device and application volume control through the external tools.

    Every public operation returns a VolumeCommandResult; command failures are
    classified and never escape as exceptions.
    """

    def __init__(self, runner: CommandRunner, svcl_path: str, getnir_path: str):
        self.runner = runner
        self.svcl_path = svcl_path
        self.getnir_path = getnir_path

    async def _execute(self, *args: str) -> str:
        """Run the volume tool with ``args`` and return its trimmed stdout."""
        try:
            output = await self.runner.run([self.svcl_path, *args])
        except CommandFailedError as e:
            raise to_audio_error(e) from e
        return output.stdout.strip()

    async def _enumerate(self, columns: str, projection: str, predicate: str) -> str:
        """Run the volume tool's CSV listing through the filter tool."""
        try:
            output = await self.runner.run_pipeline(
                [self.svcl_path, "/scomma", "", "/Columns", columns],
                [self.getnir_path, projection, predicate],
            )
        except CommandFailedError as e:
            raise to_audio_error(e) from e
        return output.stdout

    async def get_devices(self) -> VolumeCommandResult:
        """Enumerate render devices; the value is a DeviceList."""
        try:
            stdout = await self._enumerate(DEVICE_COLUMNS, DEVICE_PROJECTION, DEVICE_FILTER)
        except AudioError as e:
            logger.error("Failed to get devices: %s", e.message)
            return VolumeCommandResult.failed(e.kind, e.message)
        return VolumeCommandResult.ok(parse_devices(stdout))

    async def get_volume(self, device: str) -> VolumeCommandResult:
        """Read a device's volume percentage as an integer."""
        try:
            output = await self._execute("/GetPercent", sanitize_identifier(device), "/Stdout")
        except AudioError as e:
            logger.error("Failed to get volume for %s: %s", device, e.message)
            return VolumeCommandResult.failed(e.kind, e.message)
        return VolumeCommandResult.ok(clamp_volume(parse_number(output)))

    async def set_volume(self, device: str, volume: float) -> VolumeCommandResult:
        """Set a device's volume; the value is the clamped level transmitted."""
        level = clamp_volume(volume)
        try:
            await self._execute("/SetVolume", sanitize_identifier(device), str(level))
        except AudioError as e:
            logger.error("Failed to set volume for %s: %s", device, e.message)
            return VolumeCommandResult.failed(e.kind, e.message)
        return VolumeCommandResult.ok(level)

    async def get_muted(self, device: str) -> VolumeCommandResult:
        """Read a device's mute state; the tool prints ``1`` when muted."""
        try:
            output = await self._execute("/GetMute", sanitize_identifier(device), "/Stdout")
        except AudioError as e:
            logger.error("Failed to get mute state for %s: %s", device, e.message)
            return VolumeCommandResult.failed(e.kind, e.message)
        return VolumeCommandResult.ok(output.strip() == "1")

    async def set_muted(self, device: str, muted: bool) -> VolumeCommandResult:
        """Mute or unmute a device."""
        action = "/Mute" if muted else "/Unmute"
        try:
            await self._execute(action, sanitize_identifier(device))
        except AudioError as e:
            logger.error("Failed to set mute state for %s: %s", device, e.message)
            return VolumeCommandResult.failed(e.kind, e.message)
        return VolumeCommandResult.ok(muted)

    async def get_applications(self) -> VolumeCommandResult:
        """Enumerate applications rendering audio.

        Best effort: a failed enumeration yields an empty tuple instead of an error.
        """
        try:
            stdout = await self._enumerate(
                APPLICATION_COLUMNS, APPLICATION_PROJECTION, APPLICATION_FILTER
            )
        except AudioError as e:
            logger.warning("Failed to get applications, returning none: %s", e.message)
            return VolumeCommandResult.ok(())
        return VolumeCommandResult.ok(parse_applications(stdout))

    async def set_application_volume(
        self, process_path: str, volume: float, instance_id: str | None = None
    ) -> VolumeCommandResult:
        """Set an application's volume by its executable name.

        The tool addresses sessions by process name, so every instance of a
        duplicated process receives the same level; ``instance_id`` does not
        narrow the command.
        """
        level = clamp_volume(volume)
        name = process_name(process_path)
        if instance_id:
            logger.debug("Instance %s of %s shares the process-wide volume", instance_id, name)
        try:
            await self._execute("/SetVolume", name, str(level))
        except AudioError as e:
            logger.error("Failed to set application volume for %s: %s", name, e.message)
            if "not found" in e.message.lower():
                return VolumeCommandResult.failed(
                    AudioErrorKind.APPLICATION_NOT_FOUND, f"Application {name} not found"
                )
            return VolumeCommandResult.failed(e.kind, e.message)
        return VolumeCommandResult.ok(level)
