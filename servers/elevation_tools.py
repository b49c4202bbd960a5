"""Elevation tools as a standalone FastMCP server.

Tools:
- elevated_exec: Run a shell command as administrator (prompts at most once)
- extend_elevation: Refresh the sudo timestamp with a no-op command
- get_prompt_status: Report the prompt driver and pending prompts

Errors are raised as ToolError subclasses from sudo_prompt.errors, so MCP
clients receive the same messages as library callers.
"""

from typing import Optional

from fastmcp import FastMCP
from loguru import logger

from sudo_prompt.api import exec_command, get_elevator
from sudo_prompt.commands import format_command_output
from sudo_prompt.config import Config

# Create FastMCP server instance for elevation tools
elevation_server = FastMCP("ElevationTools")


async def elevated_exec(
    command: str, name: Optional[str] = None, icon: Optional[str] = None
) -> str:
    """
    Run a shell command with administrator privileges.

    If sudo needs a password, one system dialog is shown; concurrent calls
    with the same name share it.

    Args:
        command: Command line without a leading sudo
        name: Display name for the dialog (letters, digits and spaces)
        icon: Optional icon path (macOS only)

    Returns:
        Formatted STDOUT/STDERR and exit code
    """
    options = {"name": name, "icon": icon}
    stdout, stderr = await exec_command(
        command, {key: value for key, value in options.items() if value is not None}
    )
    logger.info(f"Elevated command completed via MCP tool: {command}")
    return format_command_output(stdout, stderr, 0)


async def extend_elevation(name: Optional[str] = None) -> str:
    """
    Refresh the sudo timestamp, prompting if needed.

    Args:
        name: Display name for the dialog

    Returns:
        Confirmation message
    """
    await exec_command(Config.TOUCH_COMMAND, {"name": name} if name else {})
    return "sudo timestamp extended."


async def get_prompt_status() -> str:
    """
    Report the selected prompt driver and any prompts waiting on the user.

    Returns:
        Formatted status report
    """
    elevator = get_elevator()
    driver = elevator.driver
    pending = elevator.coordinator.pending_tokens()

    status_lines = [
        "# Elevation Status",
        "",
        f"**Driver:** `{driver.get_name() if driver else 'unsupported platform'}`",
        f"**Prompt attempts per command:** {Config.DEFAULT_MAX_ATTEMPTS}",
        f"**Pending prompts:** {len(pending)}",
    ]
    for token in pending:
        status_lines.append(
            f"- `{token}` ({elevator.coordinator.waiter_count(token)} waiter(s))"
        )
    return "\n".join(status_lines)


elevation_server.tool()(elevated_exec)
elevation_server.tool()(extend_elevation)
elevation_server.tool()(get_prompt_status)

# Export elevation server for mounting
__all__ = ["elevation_server", "elevated_exec", "extend_elevation", "get_prompt_status"]
