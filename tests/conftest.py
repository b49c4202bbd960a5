"""Pytest fixtures and fakes for the sudo-prompt test suite."""

import asyncio
from typing import Callable, List, Optional

import pytest

from sudo_prompt.commands import CommandResult, ShellRunner
from sudo_prompt.coordinator import PromptCoordinator
from sudo_prompt.diagnostics import DiagnosticRules
from sudo_prompt.drivers.base import PromptDriver
from sudo_prompt.elevation import Elevator
from sudo_prompt.errors import ElevationError
from sudo_prompt.runner import NonInteractiveRunner

PASSWORD_REQUIRED = "sudo: a password is required\n"


# ============================================================================
# FAKE COLLABORATORS
# ============================================================================


class FakeShell(ShellRunner):
    """
    ShellRunner double driven by a handler function.

    Records every command line and hands a placeholder "process" to the
    on_subprocess observer, like the real runner does before completion.
    """

    def __init__(self, handler: Callable[[str], CommandResult]):
        self.handler = handler
        self.commands: List[str] = []

    async def run(self, command, *, on_subprocess=None):
        self.commands.append(command)
        if on_subprocess is not None:
            on_subprocess(("process", command))
        await asyncio.sleep(0)
        return self.handler(command)


def result(command: str = "", stdout: str = "", stderr: str = "", exit_code: int = 0) -> CommandResult:
    return CommandResult(command=command, stdout=stdout, stderr=stderr, exit_code=exit_code)


class SudoHost:
    """
    Simulated host: ``sudo -n`` fails until a prompt authorizes the user.

    ``echo <text>`` commands print their text; any other command succeeds
    silently.
    """

    def __init__(self, authorized: bool = False):
        self.authorized = authorized
        self.shell = FakeShell(self.handle)

    def handle(self, command: str) -> CommandResult:
        prefix = "/usr/bin/sudo -n "
        if not command.startswith(prefix):
            return result(command)
        if not self.authorized:
            return result(command, stderr=PASSWORD_REQUIRED, exit_code=1)
        inner = command[len(prefix):]
        if inner.startswith("echo "):
            return result(command, stdout=inner[len("echo "):] + "\n")
        return result(command)

    @property
    def sudo_commands(self) -> List[str]:
        return [c for c in self.shell.commands if c.startswith("/usr/bin/sudo -n ")]


class RecordingDriver(PromptDriver):
    """Prompt driver that records invocations and authorizes the host."""

    def __init__(
        self,
        host: Optional[SudoHost] = None,
        *,
        error: Optional[ElevationError] = None,
        release: Optional[asyncio.Event] = None,
    ):
        self.host = host
        self.error = error
        self.release = release
        self.calls: List[tuple] = []

    def get_name(self) -> str:
        return "Recording"

    async def run_interactive(self, name, icon=None, *, token):
        self.calls.append((name, icon, token))
        if self.release is not None:
            await self.release.wait()
        else:
            await asyncio.sleep(0.01)
        if self.error is not None:
            raise self.error
        if self.host is not None:
            self.host.authorized = True


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def host():
    """Simulated host that requires a password."""
    return SudoHost()


@pytest.fixture
def driver(host):
    """Recording driver that authorizes the simulated host."""
    return RecordingDriver(host)


@pytest.fixture
def coordinator():
    return PromptCoordinator(timeout=None)


@pytest.fixture
def elevator(host, driver, coordinator):
    """Elevator wired to the simulated host and recording driver."""
    return Elevator(
        driver=driver,
        coordinator=coordinator,
        runner=NonInteractiveRunner(shell=host.shell, rules=DiagnosticRules()),
        name_provider=lambda: "pytest",
    )
