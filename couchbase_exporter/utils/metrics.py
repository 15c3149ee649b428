"""Result data structures for collectors."""

from dataclasses import dataclass, field
from typing import Optional, Dict
import time
from .status import HealthStatus


@dataclass
class CollectorResult:
    """Outcome of one collection pass over a single bucket."""

    collector_name: str
    target_name: str
    status: HealthStatus
    metrics: Dict[str, float] = field(default_factory=dict)  # Values written this cycle
    message: str = ""
    error: Optional[str] = None
    timestamp: Optional[float] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = time.time()

    @property
    def ok(self) -> bool:
        """Whether stats were fetched for this target."""
        return self.status == HealthStatus.GREEN
