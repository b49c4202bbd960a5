"""Centralized configuration for sudo-prompt."""

import os


def _env(name: str, default: str) -> str:
    return os.getenv(f"SUDO_PROMPT_{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(f"SUDO_PROMPT_{name}")
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    """
    sudo-prompt configuration with environment variable overrides.

    All configuration values are centralized here with sensible defaults.
    Values can be overridden via ``SUDO_PROMPT_*`` environment variables.
    """

    @staticmethod
    def _parse_timeout(timeout_str: str) -> float | None:
        """Parse an optional prompt timeout; empty or zero disables it."""
        if not timeout_str or not timeout_str.strip():
            return None
        try:
            timeout = float(timeout_str)
        except ValueError as e:
            raise ValueError(f"Invalid SUDO_PROMPT_PROMPT_TIMEOUT environment variable: {e}")
        return timeout if timeout > 0 else None

    # ========================================================================
    # Elevation Tool
    # ========================================================================
    SUDO_PATH: str = _env("SUDO_PATH", "/usr/bin/sudo")
    TOOL_NAME: str = "sudo"
    DEFAULT_MAX_ATTEMPTS: int = int(_env("MAX_ATTEMPTS", "1"))
    TOUCH_COMMAND: str = "echo touchingsudotimestamp"

    # ========================================================================
    # Identity / Naming
    # ========================================================================
    # Bump when the launcher artifact changes incompatibly.
    PROTOCOL_VERSION: str = "sudo-prompt 2.0.0"
    IDENTITY_LENGTH: int = 32
    # Stays under the 255 byte path component limit after unicode normalization.
    NAME_MAX_LENGTH: int = 70

    # ========================================================================
    # Prompt Coordination
    # ========================================================================
    PROMPT_TIMEOUT: float | None = _parse_timeout.__func__(_env("PROMPT_TIMEOUT", ""))

    # ========================================================================
    # Linux Front-ends
    # ========================================================================
    # gksudo first since it gives the nicest prompt.
    FRONTEND_PATHS: list[str] = [
        path.strip()
        for path in _env(
            "FRONTEND_PATHS", "/usr/bin/gksudo:/usr/bin/pkexec:/usr/bin/kdesudo"
        ).split(":")
        if path.strip()
    ]
    # A front-end cannot refresh the caller's own sudo ticket.
    FRONTEND_DIRECT: bool = _env_bool("FRONTEND_DIRECT", True)
    TIMESTAMP_COMMAND: str = _env("TIMESTAMP_COMMAND", "/usr/bin/sudo -v")

    # ========================================================================
    # macOS Launcher
    # ========================================================================
    APPLET_ARCHIVE: str | None = os.getenv("SUDO_PROMPT_APPLET_ARCHIVE") or None
    SUDO_TIMESTAMP_DIR: str = "/var/db/sudo"

    # ========================================================================
    # Diagnostics / Logging
    # ========================================================================
    DIAGNOSTICS_PATH: str | None = os.getenv("SUDO_PROMPT_DIAGNOSTICS_PATH") or None
    LOG_LEVEL: str = _env("LOG_LEVEL", "INFO")
    LOG_FILE: str | None = os.getenv("SUDO_PROMPT_LOG_FILE") or None

    @classmethod
    def validate(cls) -> bool:
        """
        Validate configuration consistency.

        Returns:
            True if validation passes

        Raises:
            ValueError: If validation fails
        """
        import warnings

        errors = []

        if cls.DEFAULT_MAX_ATTEMPTS < 0:
            errors.append(
                f"DEFAULT_MAX_ATTEMPTS must be >= 0, got {cls.DEFAULT_MAX_ATTEMPTS}"
            )
        elif cls.DEFAULT_MAX_ATTEMPTS == 0:
            warnings.warn(
                "DEFAULT_MAX_ATTEMPTS is 0 - commands needing a password will "
                "fail without ever showing a prompt."
            )

        if not 8 <= cls.IDENTITY_LENGTH <= 64:
            errors.append(
                f"IDENTITY_LENGTH must be between 8 and 64, got {cls.IDENTITY_LENGTH}"
            )

        if cls.NAME_MAX_LENGTH <= 1:
            errors.append(f"NAME_MAX_LENGTH must be > 1, got {cls.NAME_MAX_LENGTH}")

        if cls.PROMPT_TIMEOUT is not None and cls.PROMPT_TIMEOUT <= 0:
            errors.append(f"PROMPT_TIMEOUT must be > 0, got {cls.PROMPT_TIMEOUT}")

        if not cls.SUDO_PATH:
            errors.append("SUDO_PATH must not be empty")

        if not cls.FRONTEND_PATHS:
            warnings.warn(
                "FRONTEND_PATHS is empty - Linux prompts will always fail "
                "with no supported front-end."
            )

        if cls.DIAGNOSTICS_PATH and not os.path.exists(cls.DIAGNOSTICS_PATH):
            errors.append(f"DIAGNOSTICS_PATH does not exist: {cls.DIAGNOSTICS_PATH}")

        if errors:
            raise ValueError(f"Config validation failed: {'; '.join(errors)}")

        return True
