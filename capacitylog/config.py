"""
capacitylog Configuration

Loads configuration from environment variables with sensible defaults.
Only the command line reads Config; library calls take every setting as an
argument.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import InvalidArgument

# Load .env file if it exists
load_dotenv()

def _optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return int(raw)

class Config:
    """Application configuration loaded from environment variables."""

    # Simulation
    DEFAULT_YEARS: int = int(os.getenv("CAPACITYLOG_YEARS", "4"))
    # Unset means every run draws from an unseeded generator
    SEED: Optional[int] = _optional_int("CAPACITYLOG_SEED")

    # Storage slot used by the mobile client for capacity logs
    STORAGE_KEY: str = os.getenv("CAPACITYLOG_STORAGE_KEY", "@orbital:logs")
    STORAGE_DIR: Path = Path(os.getenv("CAPACITYLOG_STORAGE_DIR", "capacity_logs"))

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors for unusable values."""
        if cls.DEFAULT_YEARS <= 0:
            raise InvalidArgument(
                f"CAPACITYLOG_YEARS must be a positive integer, got {cls.DEFAULT_YEARS}"
            )

        if not cls.STORAGE_KEY:
            raise InvalidArgument("CAPACITYLOG_STORAGE_KEY cannot be empty")

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "capacitylog Configuration:",
            f"  Default Years: {cls.DEFAULT_YEARS}",
            f"  Seed: {cls.SEED if cls.SEED is not None else 'random'}",
            f"  Storage Key: {cls.STORAGE_KEY}",
            f"  Storage Dir: {cls.STORAGE_DIR}",
        ]
        return "\n".join(lines)
