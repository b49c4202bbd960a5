"""Tests for centralized Config class."""
import warnings

import pytest

from sudo_prompt.config import Config, _env_bool


def test_config_defaults():
    """Verify default configuration values."""
    assert Config.TOOL_NAME == "sudo"
    assert Config.PROTOCOL_VERSION == "sudo-prompt 2.0.0"
    assert Config.IDENTITY_LENGTH == 32
    assert Config.NAME_MAX_LENGTH == 70
    assert Config.TOUCH_COMMAND == "echo touchingsudotimestamp"
    assert Config.SUDO_TIMESTAMP_DIR == "/var/db/sudo"
    assert Config.FRONTEND_DIRECT is True


def test_config_validation_passes():
    assert Config.validate() is True


@pytest.mark.parametrize(
    "raw, expected",
    [("", None), ("  ", None), ("0", None), ("-5", None), ("30", 30.0), ("2.5", 2.5)],
)
def test_parse_timeout(raw, expected):
    assert Config._parse_timeout(raw) == expected


def test_parse_timeout_invalid():
    with pytest.raises(ValueError, match="SUDO_PROMPT_PROMPT_TIMEOUT"):
        Config._parse_timeout("soon")


@pytest.mark.parametrize("raw, expected", [("1", True), ("yes", True), ("off", False), ("", False)])
def test_env_bool(monkeypatch, raw, expected):
    monkeypatch.setenv("SUDO_PROMPT_FLAG", raw)
    assert _env_bool("FLAG", True) is expected


def test_env_bool_default(monkeypatch):
    monkeypatch.delenv("SUDO_PROMPT_FLAG", raising=False)
    assert _env_bool("FLAG", True) is True


def test_config_validation_rejects_negative_attempts(monkeypatch):
    monkeypatch.setattr(Config, "DEFAULT_MAX_ATTEMPTS", -1)
    with pytest.raises(ValueError, match="DEFAULT_MAX_ATTEMPTS must be >= 0"):
        Config.validate()


def test_config_validation_warns_on_zero_attempts(monkeypatch):
    monkeypatch.setattr(Config, "DEFAULT_MAX_ATTEMPTS", 0)
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        Config.validate()
    assert any("DEFAULT_MAX_ATTEMPTS is 0" in str(w.message) for w in caught)


def test_config_validation_rejects_missing_diagnostics(monkeypatch, tmp_path):
    monkeypatch.setattr(Config, "DIAGNOSTICS_PATH", str(tmp_path / "missing.yaml"))
    with pytest.raises(ValueError, match="DIAGNOSTICS_PATH does not exist"):
        Config.validate()


def test_config_validation_warns_on_empty_frontends(monkeypatch):
    monkeypatch.setattr(Config, "FRONTEND_PATHS", [])
    with pytest.warns(UserWarning, match="FRONTEND_PATHS is empty"):
        Config.validate()
