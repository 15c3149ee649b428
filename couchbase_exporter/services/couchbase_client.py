"""Async REST client for the cluster administrative API."""

import logging
from typing import Any, List
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from ..config.models import CouchbaseConfig
from .couchbase_models import (
    Bucket,
    NodeList,
    PerNodeBucketStats,
    ServerList,
)


class CouchbaseClientError(Exception):
    """Raised when a REST call fails or returns an unusable payload."""


class CouchbaseClient:
    """
    Thin wrapper over httpx.AsyncClient for the endpoints the exporter polls.

    Every method raises CouchbaseClientError on transport failures, non-2xx
    responses and undecodable bodies, so callers only handle one error type.
    """

    POOLS_DEFAULT = "/pools/default"
    BUCKETS = "/pools/default/buckets"

    def __init__(
        self,
        config: CouchbaseConfig,
        logger: logging.Logger = None,
        transport: httpx.AsyncBaseTransport = None
    ):
        """
        Initialize REST client.

        Args:
            config: Cluster connection configuration
            logger: Optional logger instance
            transport: Optional httpx transport (used by tests)
        """
        self.config = config
        self.logger = (logger or logging.getLogger(__name__)).getChild(self.__class__.__name__)
        self._client = httpx.AsyncClient(
            base_url=config.url,
            auth=(config.username, config.password),
            timeout=config.timeout_seconds,
            follow_redirects=True,
            transport=transport
        )

    async def __aenter__(self) -> "CouchbaseClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def get(self, url: str) -> Any:
        """
        GET a path (or absolute URL) and decode the JSON body.

        Args:
            url: Path relative to the cluster URL, or an absolute URL

        Returns:
            Any: Decoded JSON object or array

        Raises:
            CouchbaseClientError: On empty URL, transport error, HTTP error or bad JSON
        """
        if not url:
            raise CouchbaseClientError("Cannot GET an empty URL")

        self.logger.debug(f"GET {url}")
        try:
            response = await self._client.get(url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise CouchbaseClientError(
                f"GET {url} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise CouchbaseClientError(f"GET {url} failed: {e}") from e
        except ValueError as e:
            raise CouchbaseClientError(f"GET {url} returned invalid JSON: {e}") from e

        if not isinstance(payload, (dict, list)):
            raise CouchbaseClientError(
                f"GET {url} returned {type(payload).__name__}, expected JSON object or array"
            )
        return payload

    async def nodes(self) -> NodeList:
        """Fetch the cluster node list and rebalance state."""
        payload = await self.get(self.POOLS_DEFAULT)
        return self._parse(NodeList, payload, self.POOLS_DEFAULT)

    async def cluster_name(self) -> str:
        """Fetch the cluster's configured name."""
        return (await self.nodes()).cluster_name

    async def buckets(self) -> List[Bucket]:
        """Fetch every bucket defined on the cluster."""
        payload = await self.get(self.BUCKETS)
        if not isinstance(payload, list):
            raise CouchbaseClientError(f"GET {self.BUCKETS} did not return a list")
        return [self._parse(Bucket, item, self.BUCKETS) for item in payload]

    async def servers(self, bucket: str) -> ServerList:
        """
        Fetch the servers hosting a bucket.

        Args:
            bucket: Bucket name

        Returns:
            ServerList: Servers with their per-bucket stats links
        """
        path = f"{self.BUCKETS}/{quote(bucket, safe='')}/nodes"
        payload = await self.get(path)
        return self._parse(ServerList, payload, path)

    async def get_node_bucket_stats(self, url: str) -> PerNodeBucketStats:
        """Fetch and decode a per-node bucket stats payload."""
        payload = await self.get(url)
        return self._parse(PerNodeBucketStats, payload, url)

    @staticmethod
    def _parse(model, payload: Any, url: str):
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise CouchbaseClientError(
                f"Unexpected payload from {url}: {e.error_count()} validation error(s)"
            ) from e
