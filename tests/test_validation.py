"""Tests for request validation helpers."""

import pytest

from sudo_prompt.errors import ValidationError
from sudo_prompt.validation import (
    normalize_options,
    valid_name,
    validate_command,
    validate_icon,
    validate_max_attempts,
    validate_on_subprocess,
)


# ============================================================================
# NAMES
# ============================================================================


@pytest.mark.parametrize("name", ["My App", "app2", "A", "x" * 69])
def test_valid_names(name):
    assert valid_name(name)


@pytest.mark.parametrize(
    "name",
    [
        "",
        "   ",
        "my-app",
        "My App!",
        "naïve",
        "x" * 70,
        None,
        42,
        "My App\n",
        "Clas\u017f",
        "\u0131nstaller",
        "\u0130nstaller",
        "\u212ait",
    ],
)
def test_invalid_names(name):
    assert not valid_name(name)


# ============================================================================
# COMMAND / ICON / ATTEMPTS
# ============================================================================


def test_validate_command_requires_string():
    with pytest.raises(ValidationError, match="Command should be a string."):
        validate_command(["ls"])


@pytest.mark.parametrize("command", ["sudo ls", "  SUDO ls", "Sudo -v"])
def test_validate_command_rejects_sudo_prefix(command):
    with pytest.raises(ValidationError, match='should not contain "sudo"'):
        validate_command(command)


def test_validate_command_allows_sudo_later_in_line():
    assert validate_command("echo sudo") == "echo sudo"


def test_validate_icon():
    assert validate_icon(None) is None
    assert validate_icon("/tmp/a.icns") == "/tmp/a.icns"
    with pytest.raises(ValidationError, match="must be a string"):
        validate_icon(3)
    with pytest.raises(ValidationError, match="non-empty"):
        validate_icon("  ")


@pytest.mark.parametrize("value", [0, 1, 5])
def test_validate_max_attempts_accepts_non_negative(value):
    assert validate_max_attempts(value) == value


@pytest.mark.parametrize("value", [-1, 1.5, "2", True, None])
def test_validate_max_attempts_rejects(value):
    with pytest.raises(ValidationError, match="positive integer"):
        validate_max_attempts(value)


def test_validate_on_subprocess():
    assert validate_on_subprocess(None) is None
    assert validate_on_subprocess(print) is print
    with pytest.raises(ValidationError, match="must be a function"):
        validate_on_subprocess("callback")


# ============================================================================
# OPTIONS
# ============================================================================


def test_normalize_options_maps_aliases():
    callback = lambda proc: None  # noqa: E731
    options = normalize_options(
        {"name": "App", "icns": "/a.icns", "onChildProcess": callback, "maxAttempts": 2}
    )
    assert options == {
        "name": "App",
        "icon": "/a.icns",
        "on_subprocess": callback,
        "max_attempts": 2,
    }


def test_normalize_options_none_is_empty():
    assert normalize_options(None) == {}


def test_normalize_options_rejects_unknown_key():
    with pytest.raises(ValidationError, match="Unknown option: env"):
        normalize_options({"env": {}})


def test_normalize_options_rejects_non_mapping():
    with pytest.raises(ValidationError, match="mapping"):
        normalize_options(["name"])
