"""Enumeration of processes that own audio sessions."""

import logging

from mixerdeck.audio.command_runner import CommandFailedError, CommandRunner
from mixerdeck.audio.models import AudioProcess
from mixerdeck.audio.parser import parse_processes
from mixerdeck.audio.service import to_audio_error

logger = logging.getLogger(__name__)

PROCESS_COLUMNS = ("Name", "Type", "Process Path", "Direction")


class ProcessEnumerationService:
    """Lists every process the volume tool knows an audio session for.

    Unlike the application listing, this includes sessions that are idle or
    capturing, so a whitelist can be edited for apps that are not playing.
    """

    def __init__(self, runner: CommandRunner, svcl_path: str):
        self.runner = runner
        self.svcl_path = svcl_path

    async def list_processes(self) -> list[AudioProcess]:
        """Return known audio processes sorted by name.

        Raises:
            AudioError: If the volume tool fails.
        """
        argv = [self.svcl_path, "/scomma", "", "/Columns", ",".join(PROCESS_COLUMNS)]
        try:
            output = await self.runner.run(argv)
        except CommandFailedError as e:
            raise to_audio_error(e) from e

        processes = parse_processes(output.stdout, PROCESS_COLUMNS)
        logger.debug("Found %d audio processes", len(processes))
        return sorted(processes, key=lambda process: process.name.lower())
