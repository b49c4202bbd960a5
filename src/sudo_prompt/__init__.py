"""sudo-prompt - run shell commands as administrator, prompting at most once."""

__version__ = "0.1.0"

from .api import exec_callback, exec_command, get_elevator, reset_elevator, set_name, touch
from .elevation import ElevationRequest, Elevator
from .errors import (
    ArtifactError,
    CommandFailedError,
    ElevationError,
    FrontendNotFoundError,
    PermissionDeniedError,
    PlatformUnsupportedError,
    PromptTimeoutError,
    UnexpectedToolOutputError,
    ValidationError,
)

__all__ = [
    "ArtifactError",
    "CommandFailedError",
    "ElevationError",
    "ElevationRequest",
    "Elevator",
    "FrontendNotFoundError",
    "PermissionDeniedError",
    "PlatformUnsupportedError",
    "PromptTimeoutError",
    "UnexpectedToolOutputError",
    "ValidationError",
    "__version__",
    "exec_callback",
    "exec_command",
    "get_elevator",
    "reset_elevator",
    "set_name",
    "touch",
]
