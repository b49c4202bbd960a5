"""Classification of sudo's diagnostic output.

sudo reports "a password is required" and similar conditions as plain text
on stderr. The wording differs between sudo versions and locales, so the
patterns live in ``DiagnosticRules`` and can be replaced from a YAML file::

    tool_prefix: "^sudo: "
    authorization:
      - "a password is required"
    ignore:
      - "unable to resolve host"
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

import yaml
from loguru import logger

from .config import Config

DEFAULT_TOOL_PREFIX = r"^sudo: "
DEFAULT_AUTHORIZATION_PATTERNS = [
    r"a password is required",
    r"a terminal is required",
    r"no tty present",
    r"askpass",
    r"incorrect password",
    r"authentication is required",
    r"\d+ incorrect password attempts?",
]
DEFAULT_IGNORE_PATTERNS = [
    r"unable to resolve host",
]


class Diagnosis(str, Enum):
    """What sudo's stderr says about a non-interactive attempt."""

    CLEAN = "clean"
    AUTHORIZATION_REQUIRED = "authorization_required"
    UNEXPECTED = "unexpected"


def _compile(patterns: Iterable[str]) -> List[re.Pattern]:
    return [re.compile(pattern, re.IGNORECASE) for pattern in patterns]


@dataclass
class DiagnosticRules:
    """Patterns used to classify sudo diagnostics found on stderr."""

    tool_prefix: str = DEFAULT_TOOL_PREFIX
    authorization_patterns: List[str] = field(
        default_factory=lambda: list(DEFAULT_AUTHORIZATION_PATTERNS)
    )
    ignore_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS))

    def __post_init__(self) -> None:
        self._prefix = re.compile(self.tool_prefix, re.IGNORECASE)
        self._authorization = _compile(self.authorization_patterns)
        self._ignore = _compile(self.ignore_patterns)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "DiagnosticRules":
        """
        Load rules from a YAML file; missing keys keep their defaults.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the structure is invalid
        """
        yaml_file = Path(yaml_path)
        if not yaml_file.exists():
            raise FileNotFoundError(f"Diagnostics YAML not found: {yaml_path}")

        with open(yaml_file) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Invalid YAML structure: expected dict, got {type(data).__name__}")

        for key in ("authorization", "ignore"):
            if key in data and not isinstance(data[key], list):
                raise ValueError(f"'{key}' must be a list")

        try:
            rules = cls(
                tool_prefix=str(data.get("tool_prefix", DEFAULT_TOOL_PREFIX)),
                authorization_patterns=[
                    str(p) for p in data.get("authorization", DEFAULT_AUTHORIZATION_PATTERNS)
                ],
                ignore_patterns=[str(p) for p in data.get("ignore", DEFAULT_IGNORE_PATTERNS)],
            )
        except re.error as e:
            raise ValueError(f"Invalid pattern in {yaml_path}: {e}") from e

        logger.info(
            f"Loaded diagnostic rules from {yaml_path} "
            f"({len(rules.authorization_patterns)} authorization, "
            f"{len(rules.ignore_patterns)} ignore)"
        )
        return rules

    @classmethod
    def from_config(cls) -> "DiagnosticRules":
        if Config.DIAGNOSTICS_PATH:
            return cls.from_yaml(Config.DIAGNOSTICS_PATH)
        return cls()

    def tool_lines(self, stderr: str) -> List[str]:
        """Lines of ``stderr`` emitted by sudo itself."""
        return [line for line in stderr.splitlines() if self._prefix.search(line)]

    def classify(self, stderr: str) -> Diagnosis:
        """
        Classify sudo's stderr.

        Any authorization line wins; otherwise a sudo line that is neither
        an authorization message nor explicitly ignored is unexpected.
        """
        unexpected: Optional[str] = None
        for line in self.tool_lines(stderr):
            if any(p.search(line) for p in self._authorization):
                return Diagnosis.AUTHORIZATION_REQUIRED
            if any(p.search(line) for p in self._ignore):
                continue
            unexpected = unexpected or line
        if unexpected is not None:
            logger.debug(f"Unexpected sudo diagnostic: {unexpected}")
            return Diagnosis.UNEXPECTED
        return Diagnosis.CLEAN
