"""Platform prompt drivers and host-based driver selection."""

import sys
from typing import Optional

from loguru import logger

from ..errors import PlatformUnsupportedError
from .base import PromptDriver
from .linux import FrontendDriver
from .macos import LauncherDriver


def select_driver(platform: Optional[str] = None) -> PromptDriver:
    """
    Create the prompt driver for the host operating system.

    Args:
        platform: ``sys.platform`` style name (defaults to the host)

    Returns:
        LauncherDriver on macOS, FrontendDriver on Linux

    Raises:
        PlatformUnsupportedError: On any other platform
    """
    platform = platform or sys.platform
    if platform == "darwin":
        driver: PromptDriver = LauncherDriver()
    elif platform.startswith("linux"):
        driver = FrontendDriver()
    else:
        raise PlatformUnsupportedError("Platform not yet supported.", platform=platform)
    logger.debug(f"Selected prompt driver: {driver.get_name()} ({platform})")
    return driver


__all__ = [
    "FrontendDriver",
    "LauncherDriver",
    "PromptDriver",
    "select_driver",
]
