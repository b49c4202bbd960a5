"""One-shot AppleScript applet that shows the macOS administrator dialog.

The applet performs a privileged ``touch`` of the user's sudo timestamp
directory. Authorizing it makes macOS show one dialog carrying the caller's
display name and icon, and refreshes the timestamp so the following
``sudo -n`` succeeds.
"""

from __future__ import annotations

import asyncio
import os
import re
import shlex
import tempfile
from pathlib import Path
from typing import Callable, Optional

from loguru import logger

from ..commands import CommandResult, ShellRunner, copy_path, quote_path, remove_path
from ..config import Config
from ..errors import ArtifactError, PermissionDeniedError
from .base import PromptDriver

CANCEL_PATTERN = re.compile(r"User cancell?ed|\(-128\)", re.IGNORECASE)


def _applescript_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def applet_source(user: str, timestamp_dir: str = Config.SUDO_TIMESTAMP_DIR) -> list[str]:
    """AppleScript lines for the timestamp-touching applet."""
    return [
        f"set userName to {_applescript_string(user)}",
        f'set timestampDir to "{timestamp_dir}/" & userName',
        'do shell script "mkdir -p " & quoted form of timestampDir & '
        '"; touch " & quoted form of timestampDir with administrator privileges',
    ]


class LauncherDriver(PromptDriver):
    """Prompt by building and opening a disposable ``<name>.app`` bundle.

    Pipeline: make session dir → build applet → set icon → set bundle
    name → open and wait. The session directory ``<tmp>/<token>`` is
    removed on every path; a cleanup failure after a successful prompt is
    raised, otherwise the original error wins.
    """

    uses_icon = True

    def __init__(
        self,
        *,
        shell: ShellRunner | None = None,
        temp_dir: Callable[[], Optional[str]] = tempfile.gettempdir,
        user: Callable[[], Optional[str]] = lambda: os.environ.get("USER"),
        applet_archive: Optional[str] = None,
    ):
        self._shell = shell or ShellRunner()
        self._temp_dir = temp_dir
        self._user = user
        self._applet_archive = applet_archive or Config.APPLET_ARCHIVE

    def get_name(self) -> str:
        return "macOS Launcher"

    def session_dir(self, token: str) -> Path:
        temp = self._temp_dir()
        if not temp:
            raise ArtifactError("Requires a temporary directory to be defined.")
        return Path(temp) / token

    async def run_interactive(
        self, name: str, icon: Optional[str] = None, *, token: str
    ) -> None:
        session_dir = self.session_dir(token)
        user = self._user()
        if not user:
            raise ArtifactError("Requires env['USER'] to be defined.")

        target = session_dir / f"{name}.app"
        try:
            await self._make_dir(session_dir)
            await self._build_applet(target, user)
            await self._set_icon(target, icon)
            await self._set_bundle_name(target, name)
            await self._open(target)
        except BaseException:
            try:
                await self._remove(session_dir)
            except ArtifactError as cleanup_error:
                logger.error(f"Cleanup after failed prompt also failed: {cleanup_error}")
            raise
        await self._remove(session_dir)

    @staticmethod
    def _check(result: CommandResult, step: str) -> CommandResult:
        if not result.ok:
            logger.error(f"Launcher step '{step}' failed: {result.stderr.strip()}")
            raise ArtifactError(
                f"Failed to {step} (exit code {result.exit_code}): {result.stderr.strip()}",
                step=step,
            )
        return result

    async def _make_dir(self, session_dir: Path) -> None:
        try:
            await asyncio.to_thread(session_dir.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactError(f"Failed to create {session_dir}: {e}", step="make directory") from e

    async def _build_applet(self, target: Path, user: str) -> None:
        if self._applet_archive:
            command = f"unzip -o {quote_path(self._applet_archive)} -d {quote_path(target)}"
        else:
            lines = " ".join(f"-e {shlex.quote(line)}" for line in applet_source(user))
            command = f"osacompile -o {quote_path(target)} {lines}"
        self._check(await self._shell.run(command), "build applet")

    async def _set_icon(self, target: Path, icon: Optional[str]) -> None:
        if not icon:
            return
        destination = target / "Contents" / "Resources" / "applet.icns"
        self._check(await copy_path(self._shell, icon, destination), "copy icon")

    async def _set_bundle_name(self, target: Path, name: str) -> None:
        # defaults(1) requires the value in single quotes.
        value = f"{name} Password Prompt"
        if "'" in value:
            raise ArtifactError("Value should not contain single quotes.")
        plist = quote_path(target / "Contents" / "Info.plist")
        command = f"defaults write {plist} \"CFBundleName\" '{value}'"
        self._check(await self._shell.run(command), "set bundle name")

    async def _open(self, target: Path) -> None:
        result = await self._shell.run(f"open -n -W {quote_path(target)}")
        if not result.ok and CANCEL_PATTERN.search(result.stdout + result.stderr):
            logger.warning("User dismissed the administrator dialog")
            raise PermissionDeniedError()
        self._check(result, "open applet")

    async def _remove(self, session_dir: Path) -> None:
        self._check(await remove_path(self._shell, session_dir), "remove session directory")
