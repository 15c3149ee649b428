"""Environment settings and validation."""

import os
from typing import Optional


class Settings:
    """Application settings from environment variables."""

    @staticmethod
    def get(key: str, default: Optional[str] = None) -> str:
        """
        Get environment variable value.

        Args:
            key: Environment variable name
            default: Default value if not set

        Returns:
            str: Environment variable value, "" when unset and no default
        """
        return os.getenv(key, default) or ""

    @staticmethod
    def validate_required() -> None:
        """
        Validate that the cluster credentials are present in the environment.

        Raises:
            ValueError: If any required variable is missing
        """
        required_vars = [
            "CB_USERNAME",
            "CB_PASSWORD",
        ]

        missing = [var for var in required_vars if not os.getenv(var)]
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

    LOG_LEVEL = property(lambda self: Settings.get("LOG_LEVEL"))
    CB_USERNAME = property(lambda self: Settings.get("CB_USERNAME"))
    CB_PASSWORD = property(lambda self: Settings.get("CB_PASSWORD"))
