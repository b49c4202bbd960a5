"""Error taxonomy for elevation requests.

Every error raised by sudo-prompt is an ``ElevationError``, which is a
FastMCP ``ToolError`` so the MCP tool surface can pass errors through
unchanged. Each class carries a stable ``code`` for programmatic handling.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastmcp.exceptions import ToolError

PERMISSION_DENIED_MESSAGE = "User did not grant permission."


class ElevationError(ToolError):
    """Base class for all elevation failures."""

    code = "SUDO_E_ELEVATION"

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def as_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            d["details"] = self.details
        return d


class ValidationError(ElevationError):
    """Request rejected before any subprocess was spawned."""

    code = "SUDO_E_VALIDATION"


class PlatformUnsupportedError(ElevationError):
    """No prompt mechanism exists for the host operating system."""

    code = "SUDO_E_PLATFORM"


class PermissionDeniedError(ElevationError):
    """The user dismissed the prompt or the attempt budget ran out."""

    code = "SUDO_E_PERMISSION"

    def __init__(self, message: str = PERMISSION_DENIED_MESSAGE, **details: Any) -> None:
        super().__init__(message, **details)


class PromptTimeoutError(PermissionDeniedError):
    """The interactive prompt did not complete within the configured timeout."""

    code = "SUDO_E_PROMPT_TIMEOUT"


class UnexpectedToolOutputError(ElevationError):
    """sudo printed a diagnostic that is not a known authorization message."""

    code = "SUDO_E_TOOL_OUTPUT"

    def __init__(self, message: str, stderr: str = "", **details: Any) -> None:
        super().__init__(message, **details)
        self.stderr = stderr


class CommandFailedError(ElevationError):
    """The elevated command ran and exited unsuccessfully."""

    code = "SUDO_E_COMMAND"

    def __init__(
        self,
        message: str,
        *,
        exit_code: Optional[int] = None,
        stdout: str = "",
        stderr: str = "",
        **details: Any,
    ) -> None:
        super().__init__(message, exit_code=exit_code, **details)
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr


class ArtifactError(ElevationError):
    """Building, opening or cleaning up the launcher artifact failed."""

    code = "SUDO_E_ARTIFACT"


class FrontendNotFoundError(ElevationError):
    """None of the known graphical sudo front-ends is installed."""

    code = "SUDO_E_FRONTEND"
