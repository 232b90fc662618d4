"""Tests for audio process enumeration."""

import pytest

from mixerdeck.audio.command_runner import CommandFailedError, CommandOutput
from mixerdeck.audio.errors import AudioError, AudioErrorKind
from mixerdeck.audio.processes import ProcessEnumerationService


class TestProcessEnumerationService:
    """Test listing processes with audio sessions."""

    async def test_lists_processes_sorted(self, mock_runner):
        """Should return application sessions sorted by name."""
        mock_runner.run.return_value = CommandOutput(
            stdout=(
                "spotify,Application,C:\\spotify.exe,Render\n"
                "Chrome,Application,C:\\chrome.exe,Capture\n"
                "Speakers,Device,,Render\n"
            ),
            stderr="",
        )
        service = ProcessEnumerationService(mock_runner, "svcl.exe")

        processes = await service.list_processes()

        assert [p.name for p in processes] == ["Chrome", "spotify"]
        assert [p.is_active for p in processes] == [False, True]
        argv = mock_runner.run.call_args.args[0]
        assert argv == ["svcl.exe", "/scomma", "", "/Columns", "Name,Type,Process Path,Direction"]

    async def test_failure_raises_audio_error(self, mock_runner):
        """Should raise a classified AudioError when the tool fails."""
        mock_runner.run.side_effect = CommandFailedError("command rejected")
        service = ProcessEnumerationService(mock_runner, "svcl.exe")

        with pytest.raises(AudioError) as exc_info:
            await service.list_processes()

        assert exc_info.value.kind == AudioErrorKind.COMMAND_FAILED
