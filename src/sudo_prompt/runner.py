"""Non-interactive sudo attempts and classification of their outcome."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger

from .commands import ShellRunner, SubprocessObserver
from .config import Config
from .diagnostics import Diagnosis, DiagnosticRules
from .errors import (
    CommandFailedError,
    ElevationError,
    PermissionDeniedError,
    UnexpectedToolOutputError,
    ValidationError,
)


class AttemptStatus(str, Enum):
    """Result kind of one non-interactive attempt."""

    SUCCESS = "success"
    AUTHORIZATION_REQUIRED = "authorization_required"
    COMMAND_FAILED = "command_failed"
    COMMAND_REJECTED = "command_rejected"


@dataclass(frozen=True)
class AttemptOutcome:
    """Outcome of running a command through ``sudo -n``.

    Attributes:
        status: Which outcome this is
        stdout: Captured standard output (SUCCESS / COMMAND_FAILED)
        stderr: Captured standard error (SUCCESS / COMMAND_FAILED)
        error: Error to surface (COMMAND_FAILED / COMMAND_REJECTED)
    """

    status: AttemptStatus
    stdout: str = ""
    stderr: str = ""
    error: Optional[ElevationError] = None

    @classmethod
    def success(cls, stdout: str, stderr: str) -> "AttemptOutcome":
        return cls(AttemptStatus.SUCCESS, stdout=stdout, stderr=stderr)

    @classmethod
    def authorization_required(cls) -> "AttemptOutcome":
        return cls(AttemptStatus.AUTHORIZATION_REQUIRED)

    @classmethod
    def failed(cls, error: ElevationError, stdout: str = "", stderr: str = "") -> "AttemptOutcome":
        return cls(AttemptStatus.COMMAND_FAILED, stdout=stdout, stderr=stderr, error=error)

    @classmethod
    def rejected(cls, error: ElevationError) -> "AttemptOutcome":
        return cls(AttemptStatus.COMMAND_REJECTED, error=error)


def starts_with_tool(command: str, tool_name: str = Config.TOOL_NAME) -> bool:
    """True if ``command`` already invokes the elevation tool."""
    return re.match(rf"\s*{re.escape(tool_name)}", command, re.IGNORECASE) is not None


class NonInteractiveRunner:
    """Attempt commands through ``sudo -n`` so they never block on a password."""

    def __init__(
        self,
        *,
        shell: ShellRunner | None = None,
        rules: DiagnosticRules | None = None,
        sudo_path: str | None = None,
    ) -> None:
        self._shell = shell or ShellRunner()
        self._rules = rules or DiagnosticRules.from_config()
        self._sudo_path = sudo_path or Config.SUDO_PATH

    async def attempt(
        self,
        command: str,
        *,
        attempt: int = 0,
        max_attempts: int = Config.DEFAULT_MAX_ATTEMPTS,
        on_subprocess: Optional[SubprocessObserver] = None,
    ) -> AttemptOutcome:
        """
        Run ``command`` once without any interactive prompt.

        Args:
            command: Shell command to elevate (without the sudo prefix)
            attempt: Number of prompts already completed for this request
            max_attempts: Prompt budget for this request
            on_subprocess: Observer for the live sudo process

        Returns:
            AttemptOutcome describing success, failure or the need to prompt
        """
        if starts_with_tool(command):
            return AttemptOutcome.rejected(
                ValidationError(f'Command should not contain "{Config.TOOL_NAME}".')
            )

        # -n makes sudo exit with a diagnostic instead of prompting.
        result = await self._shell.run(
            f"{self._sudo_path} -n {command}", on_subprocess=on_subprocess
        )
        diagnosis = self._rules.classify(result.stderr)
        logger.debug(
            f"Non-interactive attempt {attempt}/{max_attempts}: "
            f"exit={result.exit_code} diagnosis={diagnosis.value}"
        )

        if diagnosis is Diagnosis.AUTHORIZATION_REQUIRED:
            if attempt < max_attempts:
                return AttemptOutcome.authorization_required()
            logger.warning(f"Authorization still required after {attempt} prompt(s)")
            return AttemptOutcome.failed(
                PermissionDeniedError(), stdout=result.stdout, stderr=result.stderr
            )

        if diagnosis is Diagnosis.UNEXPECTED:
            lines = "; ".join(self._rules.tool_lines(result.stderr))
            return AttemptOutcome.failed(
                UnexpectedToolOutputError(
                    f"Unexpected output from {Config.TOOL_NAME}: {lines}",
                    stderr=result.stderr,
                ),
                stdout=result.stdout,
                stderr=result.stderr,
            )

        if result.ok:
            return AttemptOutcome.success(result.stdout, result.stderr)

        return AttemptOutcome.failed(
            CommandFailedError(
                f"Command failed with exit code {result.exit_code}: {command}",
                exit_code=result.exit_code,
                stdout=result.stdout,
                stderr=result.stderr,
            ),
            stdout=result.stdout,
            stderr=result.stderr,
        )
