"""Base collector abstract class for cluster stats collectors."""

from abc import ABC, abstractmethod
from typing import List
import logging
from functools import wraps

from ..services.couchbase_client import CouchbaseClient
from ..utils.metrics import CollectorResult


class BaseCollector(ABC):
    """Abstract base class for all collectors."""

    def __init__(self, client: CouchbaseClient, logger: logging.Logger):
        """
        Initialize base collector.

        Args:
            client: REST client for the cluster
            logger: Logger instance
        """
        self.client = client
        self.logger = logger.getChild(self.__class__.__name__)

    @property
    def name(self) -> str:
        """Short collector name used in results."""
        return self.__class__.__name__.lower().replace('collector', '')

    @abstractmethod
    async def collect(self, *args, **kwargs) -> List[CollectorResult]:
        """
        Run one collection pass.

        Returns:
            List[CollectorResult]: One result per collected target

        Note:
            Implementations should use @safe_collect so one bad pass never
            ends the polling loop.
        """
        pass


def safe_collect(func):
    """
    Decorator that logs unexpected collector exceptions and returns no results.

    Args:
        func: Collector coroutine method to wrap

    Returns:
        Wrapped coroutine that never raises Exception
    """
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            return await func(self, *args, **kwargs)
        except Exception as e:
            self.logger.error(f"Collection failed: {e}", exc_info=True)
            return []
    return wrapper
