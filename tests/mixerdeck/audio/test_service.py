"""Tests for the audio orchestration service."""

import pytest

from mixerdeck.audio.command_runner import CommandFailedError, CommandOutput, CommandSpawnError
from mixerdeck.audio.errors import AudioErrorKind
from mixerdeck.audio.models import DeviceList
from mixerdeck.audio.service import (
    APPLICATION_COLUMNS,
    DEVICE_COLUMNS,
    DEVICE_FILTER,
    DEVICE_PROJECTION,
    AudioOrchestrationService,
)

SVCL = "C:\\tools\\svcl.exe"
GETNIR = "C:\\tools\\GetNir.exe"


@pytest.fixture
def service(mock_runner):
    """Create an orchestration service over the mocked runner."""
    return AudioOrchestrationService(mock_runner, SVCL, GETNIR)


def output(stdout: str) -> CommandOutput:
    return CommandOutput(stdout=stdout, stderr="")


class TestDevices:
    """Test device enumeration."""

    async def test_get_devices(self, service, mock_runner):
        """Should pipe the CSV listing through the filter tool and parse it."""
        mock_runner.run_pipeline.return_value = output(
            "Realtek\tSpeakers\t45.5%\tRender\nUSB\tHeadset\t80\t\n"
        )

        result = await service.get_devices()

        assert result.success is True
        assert isinstance(result.value, DeviceList)
        assert result.value.default_device == "Speakers"
        assert len(result.value.devices) == 2
        mock_runner.run_pipeline.assert_awaited_once_with(
            [SVCL, "/scomma", "", "/Columns", DEVICE_COLUMNS],
            [GETNIR, DEVICE_PROJECTION, DEVICE_FILTER],
        )

    async def test_get_devices_failure(self, service, mock_runner):
        """Should classify the failure instead of raising."""
        mock_runner.run_pipeline.side_effect = CommandFailedError("Device not found")

        result = await service.get_devices()

        assert result.success is False
        assert result.error_kind == AudioErrorKind.DEVICE_NOT_FOUND
        assert result.error == "Device not found"

    async def test_spawn_failure_is_command_failed(self, service, mock_runner):
        """Should report an unstartable tool as COMMAND_FAILED."""
        mock_runner.run_pipeline.side_effect = CommandSpawnError(
            "Failed to start command svcl.exe: not found"
        )

        result = await service.get_devices()

        assert result.error_kind == AudioErrorKind.COMMAND_FAILED


class TestDeviceVolume:
    """Test device volume and mute operations."""

    async def test_get_volume_rounds(self, service, mock_runner):
        """Should parse and round the reported percentage."""
        mock_runner.run.return_value = output("45.5\r\n")

        result = await service.get_volume("Speakers")

        assert result.success is True
        assert result.value == 46
        mock_runner.run.assert_awaited_once_with([SVCL, "/GetPercent", "Speakers", "/Stdout"])

    async def test_set_volume_clamps_high(self, service, mock_runner):
        """Should transmit an out-of-range level clamped to 100."""
        result = await service.set_volume("Speakers", 150)

        assert result.success is True
        assert result.value == 100
        mock_runner.run.assert_awaited_once_with([SVCL, "/SetVolume", "Speakers", "100"])

    async def test_set_volume_sanitizes_device(self, service, mock_runner):
        """Should strip disallowed characters from the device name."""
        await service.set_volume("Speakers; calc", 40)

        mock_runner.run.assert_awaited_once_with([SVCL, "/SetVolume", "Speakers calc", "40"])

    async def test_set_volume_failure(self, service, mock_runner):
        """Should classify a rejected level as INVALID_VOLUME."""
        mock_runner.run.side_effect = CommandFailedError("Invalid volume")

        result = await service.set_volume("Speakers", 50)

        assert result.success is False
        assert result.error_kind == AudioErrorKind.INVALID_VOLUME

    @pytest.mark.parametrize(
        "stdout,expected",
        [
            pytest.param("1\r\n", True, id="muted"),
            pytest.param("0\r\n", False, id="unmuted"),
            pytest.param("yes", False, id="anything-else"),
        ],
    )
    async def test_get_muted(self, service, mock_runner, stdout, expected):
        """Should report muted only when the tool prints 1."""
        mock_runner.run.return_value = output(stdout)

        result = await service.get_muted("Speakers")

        assert result.value is expected
        mock_runner.run.assert_awaited_once_with([SVCL, "/GetMute", "Speakers", "/Stdout"])

    @pytest.mark.parametrize(
        "muted,action",
        [pytest.param(True, "/Mute", id="mute"), pytest.param(False, "/Unmute", id="unmute")],
    )
    async def test_set_muted(self, service, mock_runner, muted, action):
        """Should send the matching action for the requested state."""
        result = await service.set_muted("Speakers", muted)

        assert result.success is True
        assert result.value is muted
        mock_runner.run.assert_awaited_once_with([SVCL, action, "Speakers"])


class TestApplications:
    """Test application enumeration and volume."""

    async def test_get_applications(self, service, mock_runner):
        """Should parse applications from the filtered listing."""
        mock_runner.run_pipeline.return_value = output(
            "Chrome\t50\tC:\\chrome.exe\nChrome\t40\tC:\\chrome.exe\n"
        )

        result = await service.get_applications()

        assert result.success is True
        assert [app.instance_id for app in result.value] == [None, "instance-1"]
        first_argv = mock_runner.run_pipeline.call_args.args[0]
        assert first_argv == [SVCL, "/scomma", "", "/Columns", APPLICATION_COLUMNS]

    async def test_get_applications_failure_is_empty(self, service, mock_runner):
        """Should report success with no applications when enumeration fails."""
        mock_runner.run_pipeline.side_effect = CommandFailedError("Command failed")

        result = await service.get_applications()

        assert result.success is True
        assert result.value == ()
        assert result.error is None

    async def test_set_application_volume_uses_process_name(self, service, mock_runner):
        """Should address the application by executable name with a clamped level."""
        result = await service.set_application_volume("C:\\app.exe", -5)

        assert result.success is True
        assert result.value == 0
        mock_runner.run.assert_awaited_once_with([SVCL, "/SetVolume", "app.exe", "0"])

    async def test_set_application_volume_ignores_instance(self, service, mock_runner):
        """Should send the same command whatever the instance id."""
        await service.set_application_volume("C:\\Apps\\chrome.exe", 30, "instance-2")

        mock_runner.run.assert_awaited_once_with([SVCL, "/SetVolume", "chrome.exe", "30"])

    async def test_set_application_volume_not_found(self, service, mock_runner):
        """Should report a missing application as APPLICATION_NOT_FOUND."""
        mock_runner.run.side_effect = CommandFailedError("Item not found")

        result = await service.set_application_volume("C:\\Games\\game.exe", 50)

        assert result.success is False
        assert result.error_kind == AudioErrorKind.APPLICATION_NOT_FOUND
        assert result.error == "Application game.exe not found"
