"""Execution of the external audio command-line tools.

Commands are built as argv token lists and spawned without a shell, so device
and process names are never re-interpreted as shell syntax.
"""

import asyncio
import logging
import shlex
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)

STDOUT_PREVIEW_LENGTH = 200


@dataclass(frozen=True)
class CommandOutput:
    """Captured output of a finished command."""

    stdout: str
    stderr: str
    returncode: int = 0


class CommandFailedError(Exception):
    """Raised when an external command exits non-zero or reports only errors."""

    def __init__(
        self,
        message: str,
        argv: Sequence[str] = (),
        stdout: str = "",
        stderr: str = "",
        returncode: int | None = None,
    ):
        super().__init__(message)
        self.argv = list(argv)
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode


class CommandSpawnError(CommandFailedError):
    """Raised when the executable cannot be started at all."""


def format_command(argv: Sequence[str]) -> str:
    """Render an argv list as a readable command line for logs."""
    return shlex.join(argv)


def preview(text: str, limit: int = STDOUT_PREVIEW_LENGTH) -> str:
    """Return the first ``limit`` characters of ``text``, marking truncation."""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."


class CommandRunner:
    """Runs external commands and captures their output."""

    def __init__(self, timeout: float = 10.0, encoding: str = "utf-8"):
        self.timeout = timeout
        self.encoding = encoding

    async def run(self, argv: Sequence[str], input_text: str | None = None) -> CommandOutput:
        """Run a single command.

        Args:
            argv: Executable followed by its arguments.
            input_text: Optional text written to the command's stdin.

        Returns:
            The captured stdout/stderr.

        Raises:
            CommandSpawnError: If the executable could not be started.
            CommandFailedError: If the command exited non-zero, timed out, or
                produced stderr without any stdout.
        """
        command_line = format_command(argv)
        logger.info("Executing command: %s", command_line)

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.PIPE if input_text is not None else None,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error("Command failed to start: %s (%s)", command_line, e)
            raise CommandSpawnError(
                f"Failed to start command {argv[0]}: {e.strerror or e}", argv=argv
            ) from e

        stdin_bytes = input_text.encode(self.encoding) if input_text is not None else None
        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(stdin_bytes), timeout=self.timeout
            )
        except TimeoutError as e:
            process.kill()
            await process.wait()
            logger.error("Command timed out after %ss: %s", self.timeout, command_line)
            raise CommandFailedError(
                f"Command timed out after {self.timeout}s", argv=argv
            ) from e

        stdout = stdout_bytes.decode(self.encoding, errors="replace")
        stderr = stderr_bytes.decode(self.encoding, errors="replace")
        returncode = process.returncode if process.returncode is not None else 0

        if returncode != 0:
            message = stderr.strip() or stdout.strip() or f"Command exited with status {returncode}"
            logger.error("Command failed (exit %s): %s: %s", returncode, command_line, message)
            raise CommandFailedError(
                message, argv=argv, stdout=stdout, stderr=stderr, returncode=returncode
            )

        if stderr.strip() and not stdout.strip():
            logger.error("Command reported errors: %s: %s", command_line, stderr.strip())
            raise CommandFailedError(
                stderr.strip(), argv=argv, stdout=stdout, stderr=stderr, returncode=returncode
            )

        logger.info("Command output: %s", preview(stdout))
        return CommandOutput(stdout=stdout, stderr=stderr, returncode=returncode)

    async def run_pipeline(
        self, first_argv: Sequence[str], second_argv: Sequence[str]
    ) -> CommandOutput:
        """Run ``first | second``, feeding the first command's stdout to the second."""
        first = await self.run(first_argv)
        return await self.run(second_argv, input_text=first.stdout)
