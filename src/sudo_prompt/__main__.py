"""
Entry point for running sudo_prompt as a module.

Usage:
    python -m sudo_prompt exec "apt-get update" --name "My App"
    python -m sudo_prompt touch
    python -m sudo_prompt serve

Exit Codes:
    0   Success
    1   Elevation error (validation, permission, platform, artifact)
    N   The elevated command's own non-zero exit code
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from loguru import logger

from .api import exec_command
from .config import Config
from .errors import CommandFailedError, ElevationError

EXIT_SUCCESS = 0
EXIT_ERROR = 1


def configure_logging(level: Optional[str] = None) -> None:
    """Configure loguru with a stderr sink and an optional rotating file."""
    logger.remove()  # Remove default handler

    logger.add(
        sys.stderr,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> | <level>{message}</level>",
        level=level or Config.LOG_LEVEL,
    )

    if Config.LOG_FILE:
        logger.add(
            Config.LOG_FILE,
            rotation="10 MB",
            retention="7 days",
            compression="zip",
            level="DEBUG",
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sudo_prompt",
        description="Run shell commands as administrator, prompting at most once.",
    )
    parser.add_argument("--log-level", default=None, help="Loguru level (default: Config.LOG_LEVEL)")
    sub = parser.add_subparsers(dest="action", required=True)

    exec_parser = sub.add_parser("exec", help="Run a command with administrator privileges")
    exec_parser.add_argument("command", help="Command line, without a leading sudo")
    exec_parser.add_argument("--name", default=None, help="Display name for the prompt")
    exec_parser.add_argument("--icon", default=None, help="Icon path (macOS only)")
    exec_parser.add_argument(
        "--max-attempts",
        type=int,
        default=Config.DEFAULT_MAX_ATTEMPTS,
        help="How many prompts the command may trigger",
    )

    touch_parser = sub.add_parser("touch", help="Extend the sudo timestamp")
    touch_parser.add_argument("--name", default=None, help="Display name for the prompt")

    sub.add_parser("serve", help="Run the elevation MCP server over stdio")
    return parser


async def _run_exec(args: argparse.Namespace) -> int:
    options = {"name": args.name, "icon": args.icon, "max_attempts": args.max_attempts}
    options = {key: value for key, value in options.items() if value is not None}
    stdout, stderr = await exec_command(args.command, options)
    sys.stdout.write(stdout)
    sys.stderr.write(stderr)
    return EXIT_SUCCESS


async def _run_touch(args: argparse.Namespace) -> int:
    options = {"name": args.name} if args.name else {}
    await exec_command(Config.TOUCH_COMMAND, options)
    return EXIT_SUCCESS


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.action == "serve":
        from servers.elevation_tools import elevation_server

        logger.info("Starting ElevationTools MCP server...")
        elevation_server.run()
        return EXIT_SUCCESS

    runner = _run_exec if args.action == "exec" else _run_touch
    try:
        return asyncio.run(runner(args))
    except CommandFailedError as e:
        sys.stdout.write(e.stdout)
        sys.stderr.write(e.stderr)
        logger.error(str(e))
        return e.exit_code or EXIT_ERROR
    except ElevationError as e:
        logger.error(f"{e.code}: {e}")
        return EXIT_ERROR
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
