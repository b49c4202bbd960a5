"""Elevation orchestrator: attempt, prompt once, retry."""

from __future__ import annotations

import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Tuple

from loguru import logger

from .commands import SubprocessObserver
from .config import Config
from .coordinator import PromptCoordinator
from .drivers import PromptDriver, select_driver
from .errors import ArtifactError, PlatformUnsupportedError, ValidationError
from .identity import identity_for
from .runner import AttemptStatus, NonInteractiveRunner
from .validation import (
    normalize_options,
    valid_name,
    validate_command,
    validate_icon,
    validate_max_attempts,
    validate_name,
    validate_on_subprocess,
)


@dataclass(frozen=True)
class ElevationRequest:
    """A single command to run as administrator.

    Attributes:
        command: Shell command, without a leading ``sudo``
        name: Display name for the prompt (resolved from defaults when None)
        icon: Optional icon path (macOS only)
        max_attempts: How many interactive prompts this request may trigger
        on_subprocess: Observer receiving each live sudo/front-end process
    """

    command: str
    name: Optional[str] = None
    icon: Optional[str] = None
    max_attempts: int = Config.DEFAULT_MAX_ATTEMPTS
    on_subprocess: Optional[SubprocessObserver] = None


def process_title() -> str:
    """Best equivalent of a process title: the running program's name."""
    if not sys.argv or not sys.argv[0]:
        return ""
    return Path(sys.argv[0]).stem


class Elevator:
    """
    Run commands with administrator privileges, prompting at most once.

    The prompt driver is chosen once, at construction. On unsupported
    platforms construction still succeeds and every ``execute`` fails with
    PlatformUnsupportedError before spawning anything.
    """

    def __init__(
        self,
        *,
        driver: Optional[PromptDriver] = None,
        coordinator: Optional[PromptCoordinator] = None,
        runner: Optional[NonInteractiveRunner] = None,
        name_provider: Callable[[], str] = process_title,
        platform: Optional[str] = None,
    ):
        self._coordinator = coordinator or PromptCoordinator()
        self._runner = runner or NonInteractiveRunner()
        self._name_provider = name_provider
        self._platform_error: Optional[PlatformUnsupportedError] = None
        self.default_name: Optional[str] = None

        if driver is None:
            try:
                driver = select_driver(platform)
            except PlatformUnsupportedError as e:
                self._platform_error = e
        self._driver = driver

    @property
    def coordinator(self) -> PromptCoordinator:
        return self._coordinator

    @property
    def driver(self) -> Optional[PromptDriver]:
        return self._driver

    def set_default_name(self, name: str) -> None:
        self.default_name = validate_name(name)

    def resolve_name(self, name: Optional[str]) -> str:
        """
        Resolve the display name: explicit → default_name → process title.

        Raises:
            ValidationError: If no valid name can be found
        """
        if name is not None:
            return validate_name(name)
        if self.default_name is not None:
            return self.default_name
        title = self._name_provider()
        if valid_name(title):
            return title
        raise ValidationError("options.name must be provided (process title is not valid).")

    def build_request(
        self, command: Any, options: Optional[Mapping[str, Any]] = None
    ) -> ElevationRequest:
        """Build and validate a request from a command and an options mapping."""
        fields = normalize_options(options)
        request = ElevationRequest(
            command=command,
            name=fields.get("name"),
            icon=fields.get("icon"),
            max_attempts=fields.get("max_attempts", Config.DEFAULT_MAX_ATTEMPTS),
            on_subprocess=fields.get("on_subprocess"),
        )
        return self.validate(request)

    def validate(self, request: ElevationRequest) -> ElevationRequest:
        """
        Validate a request and fill in its display name.

        Runs before any subprocess is spawned.

        Raises:
            ValidationError: On any invalid field
            PlatformUnsupportedError: If no prompt driver exists for this host
        """
        validate_command(request.command)
        name = self.resolve_name(request.name)
        validate_icon(request.icon)
        validate_on_subprocess(request.on_subprocess)
        validate_max_attempts(request.max_attempts)
        if self._driver is None:
            raise self._platform_error or PlatformUnsupportedError("Platform not yet supported.")
        return replace(request, name=name)

    async def execute(self, request: ElevationRequest) -> Tuple[str, str]:
        """
        Run ``request.command`` as administrator.

        Attempts the command through ``sudo -n``; when a password is needed,
        waits for (or leads) the single prompt for this identity and retries,
        up to ``request.max_attempts`` prompts.

        Returns:
            (stdout, stderr) of the elevated command

        Raises:
            ElevationError: See sudo_prompt.errors for the taxonomy
        """
        request = self.validate(request)
        driver = self._driver
        name = request.name
        token: Optional[str] = None
        attempt = 0

        while True:
            outcome = await self._runner.attempt(
                request.command,
                attempt=attempt,
                max_attempts=request.max_attempts,
                on_subprocess=request.on_subprocess,
            )
            if outcome.status is AttemptStatus.SUCCESS:
                return outcome.stdout, outcome.stderr
            if outcome.status is not AttemptStatus.AUTHORIZATION_REQUIRED:
                raise outcome.error

            if driver.runs_command:
                logger.info(f"Running command through {driver.get_name()} for '{name}'")
                result = await driver.run_command(
                    request.command, name, on_subprocess=request.on_subprocess
                )
                return result.stdout, result.stderr

            if token is None:
                token = await self._identity(name, request.icon, driver)

            await self._coordinator.authorize(
                token,
                lambda: driver.run_interactive(name, request.icon, token=token),
            )
            attempt += 1
            logger.debug(f"Authorization granted for {token}, retrying (attempt {attempt})")

    @staticmethod
    async def _identity(name: str, icon: Optional[str], driver: PromptDriver) -> str:
        try:
            return await identity_for(name, icon, read_icon=driver.uses_icon)
        except OSError as e:
            raise ArtifactError(f"Failed to read icon {icon}: {e}") from e
