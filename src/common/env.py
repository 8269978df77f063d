"""Environment configuration interface for the content safety engine.

All environment variable access is centralized here. Values are read on
every call so tests (and long-running processes) see changes without a
restart.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Environment:
    """Interface for accessing environment configuration."""

    @staticmethod
    def rules_path() -> Path | None:
        """Get the explicit banned-phrase rule file override.

        Returns:
            Path from CONTENT_SAFETY_RULES_PATH, or None when unset or blank
        """
        value = os.getenv("CONTENT_SAFETY_RULES_PATH", "").strip()
        return Path(value) if value else None

    @staticmethod
    def rules_base_dir() -> Path:
        """Get the directory that conventional rule locations are resolved against.

        Returns:
            Path from CONTENT_SAFETY_BASE_DIR, defaults to the current directory
        """
        return Path(os.getenv("CONTENT_SAFETY_BASE_DIR", "."))

    @staticmethod
    def log_level() -> str:
        """Get the logging level.

        Returns:
            Upper-cased level name, defaults to 'INFO'
        """
        return os.getenv("LOG_LEVEL", "INFO").upper()


# Singleton instance for convenient access
env = Environment()
