"""
Request validation.

Everything here runs before any subprocess is spawned. Failures raise
``ValidationError`` and leave no side effects behind.
"""

import re
from typing import Any, Callable, Mapping, Optional

from .config import Config
from .errors import ValidationError
from .runner import starts_with_tool

# ASCII only; fullmatch so a trailing newline is rejected too.
_NAME_PATTERN = re.compile(r"[A-Za-z0-9 ]+", re.ASCII)

OPTION_ALIASES = {
    "icns": "icon",
    "onChildProcess": "on_subprocess",
    "onSubprocess": "on_subprocess",
    "maxAttempts": "max_attempts",
}
KNOWN_OPTIONS = {"name", "icon", "on_subprocess", "max_attempts"}


def valid_name(value: Any) -> bool:
    """Letters, digits and spaces only, not blank, shorter than NAME_MAX_LENGTH."""
    return (
        isinstance(value, str)
        and _NAME_PATTERN.fullmatch(value) is not None
        and len(value.strip()) > 0
        and len(value) < Config.NAME_MAX_LENGTH
    )


def validate_name(value: Any) -> str:
    if not valid_name(value):
        raise ValidationError("options.name must be alphanumeric only (spaces are allowed).")
    return value


def validate_icon(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("options.icon must be a string if provided.")
    if not value.strip():
        raise ValidationError("options.icon must be a non-empty string if provided.")
    return value


def validate_command(value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError("Command should be a string.")
    if starts_with_tool(value):
        raise ValidationError(f'Command should not contain "{Config.TOOL_NAME}".')
    return value


def validate_max_attempts(value: Any) -> int:
    # bool is an int subclass but never a meaningful budget.
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError("Attempts argument should be a positive integer.")
    return value


def validate_on_subprocess(value: Any) -> Optional[Callable]:
    if value is not None and not callable(value):
        raise ValidationError("options.on_subprocess must be a function if provided.")
    return value


def normalize_options(options: Optional[Mapping[str, Any]]) -> dict:
    """
    Map user-facing option names onto request fields.

    Accepts the snake_case names plus the camelCase / ``icns`` aliases.

    Raises:
        ValidationError: If options is not a mapping or holds unknown keys
    """
    if options is None:
        return {}
    if not isinstance(options, Mapping):
        raise ValidationError("Expected options to be a mapping.")

    normalized: dict = {}
    for key, value in options.items():
        field_name = OPTION_ALIASES.get(key, key)
        if field_name not in KNOWN_OPTIONS:
            raise ValidationError(f"Unknown option: {key}")
        normalized[field_name] = value
    return normalized
