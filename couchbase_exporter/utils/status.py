"""Collection health status enumeration."""

from enum import Enum


class HealthStatus(Enum):
    """Outcome of collecting one target during a poll cycle."""

    GREEN = "green"
    UNKNOWN = "unknown"
