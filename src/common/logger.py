"""Logging utilities with rich console output.

Every module in the engine logs through this module so that rule-loading
fallbacks, skipped patterns and checker failures all land in the same
rich-formatted stream.

Usage:
    from common.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Loaded 12 banned-phrase rules")
    logger.warning("Invalid regex pattern skipped: '('")
"""

import logging
import os
import sys

from rich.console import Console
from rich.logging import RichHandler

# Shared console so log lines and reporter output interleave correctly
console = Console()


def _rich_handler(show_time: bool = False, show_path: bool = False) -> RichHandler:
    handler = RichHandler(
        console=console,
        show_time=show_time,
        show_path=show_path,
        rich_tracebacks=True,
        markup=True,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def get_logger(
    name: str,
    level: str | None = None,
    show_time: bool = False,
    show_path: bool = False,
) -> logging.Logger:
    """Get a configured logger with rich output.

    Args:
        name: Logger name (typically __name__ of the module)
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If None, uses environment variable LOG_LEVEL or defaults to INFO.
        show_time: Show timestamp in log output
        show_path: Show file path in log output

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")

    logger.setLevel(level.upper())
    logger.addHandler(_rich_handler(show_time=show_time, show_path=show_path))

    # Propagate so pytest caplog can capture records
    logger.propagate = True

    return logger


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure the root logger once at the CLI entry point.

    Args:
        level: Default logging level for all modules
        log_file: Optional file path to also log to a file
    """
    level = os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(_rich_handler())

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)


def success(message: str) -> None:
    """Print a success line with a green checkmark."""
    console.print(f"[green]✓[/green] {message}")


def warning(message: str) -> None:
    """Print a warning line with a yellow warning icon."""
    console.print(f"[yellow]⚠[/yellow] {message}")


def error(message: str) -> None:
    """Print an error line with a red X icon to stderr."""
    Console(file=sys.stderr).print(f"[red]✗[/red] {message}")
