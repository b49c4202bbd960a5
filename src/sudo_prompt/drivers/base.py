"""Base class for platform prompt drivers."""

from abc import ABC, abstractmethod
from typing import Optional

from ..commands import CommandResult, SubprocessObserver


class PromptDriver(ABC):
    """Abstract base class for interactive authorization drivers.

    A driver shows the operating system's authorization dialog once so
    that the sudo timestamp of the current user is extended and the next
    non-interactive attempt succeeds.

    Attributes:
        uses_icon: Whether the icon changes the prompt (and the identity token)
        runs_command: Whether the driver runs the caller's command itself
            instead of extending the timestamp
    """

    uses_icon: bool = False
    runs_command: bool = False

    @abstractmethod
    async def run_interactive(
        self, name: str, icon: Optional[str] = None, *, token: str
    ) -> None:
        """Show one authorization dialog.

        Args:
            name: Display name shown in the dialog
            icon: Optional icon path (ignored by drivers without icon support)
            token: Identity token of the prompt session

        Raises:
            PermissionDeniedError: If the user dismissed the dialog
            ElevationError: On driver-specific failures
        """

    async def run_command(
        self,
        command: str,
        name: str,
        *,
        on_subprocess: Optional[SubprocessObserver] = None,
    ) -> CommandResult:
        """Run ``command`` through the driver directly (``runs_command`` only)."""
        raise NotImplementedError(f"{self.get_name()} cannot run commands directly")

    @abstractmethod
    def get_name(self) -> str:
        """Get human-readable name of this driver."""
