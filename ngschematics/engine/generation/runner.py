"""Process runner collaborator.

The engine only decides *what* to run; running it is delegated to a
``CommandRunner``.  ``ShellCommandRunner`` is the default implementation,
tests substitute a recording one.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Protocol

from anyio import run_process
from loguru import logger


class CommandFailedError(RuntimeError):
    """The generation command exited with a non-zero status."""

    def __init__(self, command: str, returncode: int, stdout: str = "", stderr: str = "") -> None:
        super().__init__(f'Command "{command}" failed with exit code {returncode}')
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class CommandRunner(Protocol):
    async def run(self, command: str, cwd: Path) -> str:
        """Run ``command`` in ``cwd`` and return its stdout.  Raises ``CommandFailedError``."""
        ...


class ShellCommandRunner:
    """Run commands through the system shell, capturing their output."""

    async def run(self, command: str, cwd: Path) -> str:
        logger.info("Launching this command: {}", command)
        result = await run_process(command, cwd=cwd, check=False, stdout=subprocess.PIPE, stderr=subprocess.PIPE)

        stdout = result.stdout.decode(errors="replace") if result.stdout else ""
        stderr = result.stderr.decode(errors="replace") if result.stderr else ""

        if result.returncode != 0:
            logger.error("Command failed with exit code {}", result.returncode)
            raise CommandFailedError(command, result.returncode, stdout, stderr)

        return stdout
