"""Identity tokens grouping concurrent prompts that can share one dialog."""

import asyncio
import hashlib
from pathlib import Path
from typing import Optional

from loguru import logger

from .config import Config


def identity(name: str, icon_bytes: bytes = b"") -> str:
    """
    Compute the identity token for a pending authorization.

    Two requests with the same display name and icon content produce the
    same token and therefore share a single interactive prompt. The token
    is also used as a temporary directory name by the macOS launcher.

    Args:
        name: Display name shown in the prompt
        icon_bytes: Raw icon content, empty when no icon is used

    Returns:
        Lowercase hex string of Config.IDENTITY_LENGTH characters
    """
    digest = hashlib.sha256()
    digest.update(Config.PROTOCOL_VERSION.encode("utf-8"))
    digest.update(name.encode("utf-8"))
    digest.update(icon_bytes)
    return digest.hexdigest()[-Config.IDENTITY_LENGTH:]


async def identity_for(name: str, icon: Optional[str], *, read_icon: bool) -> str:
    """
    Compute the identity token, reading icon bytes only when they matter.

    Icons only change the prompt on macOS, so other platforms hash an
    empty icon and requests differing only by icon still share a prompt.
    """
    icon_bytes = b""
    if icon and read_icon:
        icon_bytes = await asyncio.to_thread(Path(icon).read_bytes)
    token = identity(name, icon_bytes)
    logger.debug(f"Identity for '{name}' (icon={bool(icon_bytes)}): {token}")
    return token
