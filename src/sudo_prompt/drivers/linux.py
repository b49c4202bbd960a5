"""Graphical sudo front-ends for Linux desktops (gksudo, pkexec, kdesudo)."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..commands import (
    CommandResult,
    ShellRunner,
    SubprocessObserver,
    escape_double_quotes,
    path_exists,
)
from ..config import Config
from ..errors import CommandFailedError, FrontendNotFoundError, PermissionDeniedError
from .base import PromptDriver

CANCEL_PATTERN = re.compile(r"Request dismissed|Not authorized|Authorization failed", re.IGNORECASE)
# pkexec: "the authorization could not be obtained" (dialog dismissed).
PKEXEC_DISMISSED_EXIT = 126


class FrontendDriver(PromptDriver):
    """Prompt through the first installed graphical sudo front-end.

    By default (``Config.FRONTEND_DIRECT``) each command runs through the
    front-end itself: a ``sudo -v`` run by pkexec refreshes root's ticket and
    one run by gksudo is bound to another terminal, so neither helps the
    next ``sudo -n``. With ``direct=False`` the front-end only runs
    ``Config.TIMESTAMP_COMMAND``, for hosts with a global sudo timestamp.
    """

    def __init__(
        self,
        *,
        paths: Optional[List[str]] = None,
        shell: ShellRunner | None = None,
        direct: Optional[bool] = None,
        timestamp_command: Optional[str] = None,
    ):
        self._paths = list(paths if paths is not None else Config.FRONTEND_PATHS)
        self._shell = shell or ShellRunner()
        self.runs_command = Config.FRONTEND_DIRECT if direct is None else direct
        self._timestamp_command = timestamp_command or Config.TIMESTAMP_COMMAND

    def get_name(self) -> str:
        return "Linux Front-end"

    async def find_binary(self) -> str:
        """
        Return the first existing front-end path.

        Raises:
            FrontendNotFoundError: If none of the candidates exist
        """
        for path in self._paths:
            if await path_exists(path):
                logger.debug(f"Using sudo front-end {path}")
                return path
        names = [Path(p).name for p in self._paths]
        if len(names) > 1:
            listed = f"{', '.join(names[:-1])} or {names[-1]}"
        else:
            listed = "".join(names) or "a sudo front-end"
        raise FrontendNotFoundError(f"Unable to find {listed}.")

    @staticmethod
    def build_command(binary: str, command: str, name: str) -> str:
        """Build the front-end command line for ``command``."""
        parts = [f'"{escape_double_quotes(binary)}"']
        frontend = Path(binary).name.lower()
        if "gksudo" in frontend:
            parts.append("--preserve-env")
            parts.append("--sudo-mode")
            parts.append(f'--description="{escape_double_quotes(name)}"')
        elif "pkexec" in frontend:
            # Avoid pkexec's textual agent stealing the terminal.
            parts.append("--disable-internal-agent")
        elif "kdesudo" in frontend:
            parts.append(f'--comment "{escape_double_quotes(name)}"')
        parts.append(command)
        return " ".join(parts)

    async def _run_frontend(
        self,
        command: str,
        name: str,
        on_subprocess: Optional[SubprocessObserver] = None,
    ) -> CommandResult:
        binary = await self.find_binary()
        result = await self._shell.run(
            self.build_command(binary, command, name), on_subprocess=on_subprocess
        )
        if result.ok:
            return result

        if CANCEL_PATTERN.search(result.stderr) or (
            "pkexec" in binary and result.exit_code == PKEXEC_DISMISSED_EXIT
        ):
            logger.warning(f"User dismissed the {Path(binary).name} dialog")
            raise PermissionDeniedError()

        raise CommandFailedError(
            f"{Path(binary).name} failed with exit code {result.exit_code}",
            exit_code=result.exit_code,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    async def run_interactive(
        self, name: str, icon: Optional[str] = None, *, token: str
    ) -> None:
        await self._run_frontend(self._timestamp_command, name)

    async def run_command(
        self,
        command: str,
        name: str,
        *,
        on_subprocess: Optional[SubprocessObserver] = None,
    ) -> CommandResult:
        return await self._run_frontend(command, name, on_subprocess)
