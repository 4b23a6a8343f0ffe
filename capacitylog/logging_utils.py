"""Logging utilities for capacitylog.

Provides color-coded console output so generation steps, storage steps, and
errors are easy to tell apart when seeding demo data.
"""

import os
from enum import Enum


class Color(Enum):
    """ANSI color codes for terminal output."""

    BLUE = "\033[94m"      # Simulation steps
    YELLOW = "\033[93m"    # Storage operations
    RED = "\033[91m"       # Errors
    GREEN = "\033[92m"     # Success/completion
    CYAN = "\033[96m"      # Info/metadata

    # Formatting
    BOLD = "\033[1m"
    RESET = "\033[0m"


def _quiet() -> bool:
    return bool(os.getenv("CAPACITYLOG_QUIET"))


def colored(text: str, color: Color, bold: bool = False) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply
        bold: Whether to make text bold

    Returns:
        Colorized text if CAPACITYLOG_NO_COLOR is not set, otherwise plain text
    """
    if os.getenv("CAPACITYLOG_NO_COLOR"):
        return text

    prefix = color.value
    if bold:
        prefix = Color.BOLD.value + prefix

    return f"{prefix}{text}{Color.RESET.value}"


def _emit(message: str, color: Color) -> None:
    if _quiet():
        return
    print(colored(message, color))


def log_deterministic(message: str) -> None:
    """Log a simulation step (blue)."""
    _emit(message, Color.BLUE)


def log_storage(message: str) -> None:
    """Log a storage operation (yellow)."""
    _emit(message, Color.YELLOW)


def log_error(message: str) -> None:
    """Log an error (red). Never silenced by quiet mode."""
    print(colored(message, Color.RED))


def log_success(message: str) -> None:
    """Log a success (green)."""
    _emit(message, Color.GREEN)


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    _emit(message, Color.CYAN)


# Markers for operation types (color-blind accessible)
EMOJI_DETERMINISTIC = "[•]"  # Simulation step
EMOJI_STORAGE = "[db]"       # Storage operation
EMOJI_ERROR = "[!]"          # Error
EMOJI_SUCCESS = "[✓]"        # Success
EMOJI_INFO = "[i]"           # Information
