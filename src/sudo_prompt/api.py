"""Module-level convenience API backed by a shared Elevator."""

from __future__ import annotations

import asyncio
import warnings
from typing import Any, Callable, Mapping, Optional, Tuple

from loguru import logger

from .config import Config
from .elevation import Elevator
from .errors import ElevationError

CompletionCallback = Callable[[Optional[BaseException], Optional[str], Optional[str]], None]

# Singleton instance
_elevator: Optional[Elevator] = None


def get_elevator() -> Elevator:
    """Get or create the shared Elevator used by the module-level API."""
    global _elevator

    if _elevator is None:
        _elevator = Elevator()
    return _elevator


def reset_elevator(elevator: Optional[Elevator] = None) -> None:
    """Replace the shared Elevator (None recreates it lazily)."""
    global _elevator
    _elevator = elevator


async def exec_command(
    command: str, options: Optional[Mapping[str, Any]] = None
) -> Tuple[str, str]:
    """
    Run ``command`` with administrator privileges.

    Args:
        command: Shell command, without a leading ``sudo``
        options: Optional mapping with ``name``, ``icon``, ``on_subprocess``
            and ``max_attempts``

    Returns:
        (stdout, stderr) of the command

    Raises:
        ElevationError: On validation, permission or command failure
    """
    elevator = get_elevator()
    request = elevator.build_request(command, options)
    return await elevator.execute(request)


def exec_callback(
    command: str,
    options: Optional[Mapping[str, Any]] = None,
    callback: Optional[CompletionCallback] = None,
) -> Optional[asyncio.Task]:
    """
    Callback flavour of :func:`exec_command`.

    ``callback(error, stdout, stderr)`` is called once. Must be called from
    a running event loop; validation errors, and a missing loop, are
    reported to the callback immediately and no task is created. An
    exception raised by the callback itself propagates out of the returned
    task.
    """
    end = callback or (lambda error, stdout, stderr: None)
    elevator = get_elevator()
    try:
        request = elevator.build_request(command, options)
        loop = asyncio.get_running_loop()
    except (ElevationError, RuntimeError) as e:
        end(e, None, None)
        return None

    async def _run() -> None:
        try:
            stdout, stderr = await elevator.execute(request)
        except Exception as e:
            end(e, getattr(e, "stdout", None), getattr(e, "stderr", None))
            return
        end(None, stdout, stderr)

    return loop.create_task(_run())


def set_name(name: str) -> None:
    """
    Set the default display name for prompts.

    DEPRECATED: pass ``options["name"]`` instead. A process-wide name
    races when concurrent callers want different names.
    """
    warnings.warn(
        "set_name() is deprecated; pass options['name'] to exec_command()",
        DeprecationWarning,
        stacklevel=2,
    )
    get_elevator().set_default_name(name)


async def touch() -> None:
    """
    Extend the sudo timestamp by running a no-op command.

    DEPRECATED: call exec_command() directly. Fails if no default name was
    set and the process title is not a valid name.
    """
    warnings.warn(
        "touch() is deprecated; call exec_command() directly",
        DeprecationWarning,
        stacklevel=2,
    )
    await exec_command(Config.TOUCH_COMMAND, {})
    logger.debug("sudo timestamp extended")
