"""Shell command execution and filesystem helpers used by the elevation core."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

SubprocessObserver = Callable[[asyncio.subprocess.Process], None]


@dataclass(frozen=True)
class CommandResult:
    """Normalized command execution result."""

    command: str
    stdout: str
    stderr: str
    exit_code: Optional[int]

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def to_dict(self) -> dict:
        return {
            "command": self.command,
            "stdout": self.stdout,
            "stderr": self.stderr,
            "exit_code": self.exit_code,
        }


class ShellRunner:
    """Run command lines through the system shell, capturing both streams."""

    async def run(
        self,
        command: str,
        *,
        on_subprocess: Optional[SubprocessObserver] = None,
    ) -> CommandResult:
        """
        Execute ``command`` via ``/bin/sh`` and wait for it to exit.

        Args:
            command: Full shell command line
            on_subprocess: Called with the live process before it completes

        If the run is cancelled, the process is killed and reaped before
        the cancellation propagates.

        Returns:
            CommandResult with decoded stdout/stderr and the exit code
        """
        proc = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        if on_subprocess is not None:
            on_subprocess(proc)

        try:
            stdout, stderr = await proc.communicate()
        except asyncio.CancelledError:
            # An abandoned prompt must not leave its dialog on screen.
            if proc.returncode is None:
                logger.debug(f"Killing cancelled command (pid={proc.pid}) | command={command}")
                try:
                    proc.kill()
                except ProcessLookupError:
                    pass
                await proc.wait()
            raise
        result = CommandResult(
            command=command,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            exit_code=proc.returncode,
        )
        logger.debug(f"Command exited with {result.exit_code} | command={command}")
        return result


def escape_double_quotes(value: str) -> str:
    return value.replace('"', '\\"')


def quote_path(path: str | Path) -> str:
    """Normalize ``path`` and wrap it in double quotes for the shell."""
    return '"' + escape_double_quotes(os.path.normpath(str(path))) + '"'


async def path_exists(path: str | Path) -> bool:
    """
    Check whether ``path`` exists.

    Missing paths and paths below a non-directory count as absent; any
    other stat failure (e.g. permission denied) is raised.
    """
    try:
        await asyncio.to_thread(os.stat, path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    return True


async def copy_path(shell: ShellRunner, source: str | Path, target: str | Path) -> CommandResult:
    """Recursively copy ``source`` to ``target`` preserving attributes."""
    return await shell.run(f"/bin/cp -R -p {quote_path(source)} {quote_path(target)}")


async def remove_path(shell: ShellRunner, target: str | Path) -> CommandResult:
    """Recursively remove ``target``; a missing target is not an error."""
    if not str(target):
        raise ValueError("Target not defined.")
    return await shell.run(f"/bin/rm -rf {quote_path(target)}")


def format_command_output(stdout: str, stderr: str, exit_code: Optional[int] = 0) -> str:
    """Format command output for tool responses."""
    output_parts = []
    if stdout:
        output_parts.append(f"STDOUT:\n{stdout}")
    if stderr:
        output_parts.append(f"STDERR:\n{stderr}")
    output_parts.append(f"Exit code: {exit_code}")
    return "\n\n".join(output_parts)
