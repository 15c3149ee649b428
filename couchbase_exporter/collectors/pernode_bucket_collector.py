"""Per-node bucket statistics collector."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..config.models import CollectionConfig
from ..services.couchbase_client import CouchbaseClient, CouchbaseClientError
from ..services.couchbase_models import NodeList
from ..services.retry_handler import RetryError, RetryHandler
from ..utils.metrics import CollectorResult
from ..utils.status import HealthStatus
from .base import BaseCollector, safe_collect
from .pernode_bucket_metrics import PerNodeBucketMetrics


class ResolutionError(Exception):
    """Raised when the node list needed to find the local node is unavailable."""


def cluster_is_balanced(nodes: NodeList) -> bool:
    """
    Whether the cluster is settled enough to collect from.

    A cluster that has completed at least one rebalance counts as balanced;
    otherwise it must report balanced with no rebalance in progress.
    """
    return nodes.counters.rebalance_success > 0 or (
        nodes.balanced and nodes.rebalance_status == "none"
    )


def find_current_node(nodes: NodeList) -> str:
    """Hostname of the node flagged as this node, or "" if none is flagged."""
    for node in nodes.nodes:
        if node.this_node:
            return node.hostname
    return ""


class PerNodeBucketCollector(BaseCollector):
    """
    Publishes the local node's stats for every bucket.

    Startup resolves the local node, waits for any rebalance to finish and
    then runs a polling loop in a background task for the life of the process.
    """

    def __init__(
        self,
        client: CouchbaseClient,
        metrics: PerNodeBucketMetrics,
        config: CollectionConfig,
        logger: logging.Logger
    ):
        """
        Initialize collector.

        Args:
            client: REST client for the cluster
            metrics: Gauge set to publish into
            config: Polling cadence and retry budgets
            logger: Logger instance
        """
        super().__init__(client, logger)
        self.metrics = metrics
        self.config = config
        self.node: Optional[str] = None
        self.cluster_name: Optional[str] = None
        self._stop = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def task(self) -> Optional[asyncio.Task]:
        """Background polling task, once started."""
        return self._task

    async def resolve_current_node(self) -> str:
        """
        Find the hostname of the node this process runs on.

        Returns:
            str: Hostname, or "" when no node carries the this-node flag

        Raises:
            ResolutionError: If the node list cannot be fetched
        """
        try:
            nodes = await self.client.nodes()
        except CouchbaseClientError as e:
            raise ResolutionError(f"Unable to retrieve nodes: {e}") from e

        hostname = find_current_node(nodes)
        if not hostname:
            self.logger.warning("No node is flagged as the current node, labelling stats with an empty node")
        return hostname

    async def is_cluster_balanced(self) -> bool:
        """Check rebalance state; a failed fetch counts as not balanced."""
        try:
            nodes = await self.client.nodes()
        except CouchbaseClientError as e:
            self.logger.error(f"Unable to get rebalance status: {e}")
            return False
        return cluster_is_balanced(nodes)

    async def get_node_bucket_stats_url(self, bucket: str, node: str) -> str:
        """
        Stats URI of the bucket's server entry matching node.

        Returns "" when the server list cannot be fetched or no entry matches.
        """
        try:
            servers = await self.client.servers(bucket)
        except CouchbaseClientError as e:
            self.logger.error(f"Unable to retrieve servers for bucket {bucket}: {e}")
            return ""

        url = ""
        for server in servers.servers:
            if server.hostname == node:
                url = server.stats.get("uri", "")
        return url

    async def get_node_bucket_stats(self, bucket: str, node: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the samples section of this node's stats for a bucket.

        Returns:
            Optional[Dict[str, Any]]: Field name to sample series, None on failure
        """
        url = await self.get_node_bucket_stats_url(bucket, node)
        try:
            stats = await self.client.get_node_bucket_stats(url)
        except CouchbaseClientError as e:
            self.logger.error(f"Unable to GET per-node bucket stats for {bucket}: {e}")
            return None
        return stats.op.samples

    @safe_collect
    async def collect(self, node: str, cluster_name: str) -> List[CollectorResult]:
        """
        Run one poll cycle over every bucket.

        Args:
            node: Local node hostname
            cluster_name: Cluster label value

        Returns:
            List[CollectorResult]: One result per bucket
        """
        try:
            buckets = await self.client.buckets()
        except CouchbaseClientError as e:
            self.logger.error(f"Unable to get buckets: {e}")
            return []

        results = []
        for bucket in buckets:
            self.logger.debug(f"Collecting per-node bucket stats, node={node}, bucket={bucket.name}")

            samples = await self.get_node_bucket_stats(bucket.name, node)
            if samples is None:
                results.append(CollectorResult(
                    collector_name=self.name,
                    target_name=bucket.name,
                    status=HealthStatus.UNKNOWN,
                    message="Stats unavailable",
                    error="stats fetch failed"
                ))
                continue

            written = self.metrics.publish_samples(samples, bucket.name, node, cluster_name)
            results.append(CollectorResult(
                collector_name=self.name,
                target_name=bucket.name,
                status=HealthStatus.GREEN,
                metrics=written,
                message=f"Published {len(written)} metrics"
            ))

        return results

    async def run_forever(
        self,
        node: str,
        cluster_name: str,
        iterations: Optional[int] = None
    ) -> None:
        """
        Poll every refresh_interval seconds until stopped.

        Args:
            node: Local node hostname
            cluster_name: Cluster label value
            iterations: Stop after this many cycles (None polls indefinitely)
        """
        completed = 0
        while not self._stop.is_set():
            results = await self.collect(node, cluster_name)
            failed = sum(1 for r in results if not r.ok)
            self.logger.info(
                f"Poll cycle complete: {len(results)} buckets, {failed} failed"
            )

            completed += 1
            if iterations is not None and completed >= iterations:
                break

            try:
                await asyncio.wait_for(self._stop.wait(), timeout=self.config.refresh_interval)
            except asyncio.TimeoutError:
                pass

    async def prepare(self) -> bool:
        """
        Resolve the local node and cluster name, then wait for rebalance.

        Returns:
            bool: True once the cluster is ready to be polled
        """
        node = await self._resolve_node_with_retry()
        if node is None:
            return False

        try:
            cluster_name = await self.client.cluster_name()
        except CouchbaseClientError as e:
            self.logger.error(f"Unable to get cluster name: {e}")
            return False

        if not await self._wait_for_rebalance():
            return False

        self.node = node
        self.cluster_name = cluster_name
        return True

    async def start(self) -> bool:
        """
        Prepare, then spawn the polling loop as a background task.

        Returns:
            bool: True if the polling loop was started
        """
        if not await self.prepare():
            return False

        self._stop.clear()
        self._task = asyncio.create_task(
            self.run_forever(self.node, self.cluster_name),
            name="pernode-bucket-stats"
        )
        self.logger.info(
            f"Per-node bucket stats collection started for node={self.node}, cluster={self.cluster_name}"
        )
        return True

    async def run_once(self) -> Optional[List[CollectorResult]]:
        """Prepare and run a single poll cycle; None if preparation failed."""
        if not await self.prepare():
            return None
        return await self.collect(self.node, self.cluster_name)

    async def stop(self) -> None:
        """Signal the polling loop to exit and wait for it."""
        self._stop.set()
        if self._task is not None:
            await self._task
            self._task = None

    async def _resolve_node_with_retry(self) -> Optional[str]:
        resolved = []

        async def attempt() -> bool:
            try:
                resolved.append(await self.resolve_current_node())
            except ResolutionError as e:
                self.logger.error(f"Could not get current node, will retry: {e}")
                return False
            return True

        budget = self.config.node_retry
        try:
            await RetryHandler.retry_until(
                attempt,
                interval=budget.interval_seconds,
                max_attempts=budget.max_attempts,
                timeout=budget.timeout_seconds,
                logger=self.logger
            )
        except RetryError as e:
            self.logger.error(f"Resolving the current node failed: {e}")
            return None
        return resolved[-1]

    async def _wait_for_rebalance(self) -> bool:
        async def balanced() -> bool:
            if await self.is_cluster_balanced():
                return True
            self.logger.info("Waiting for rebalance... retrying")
            return False

        budget = self.config.rebalance_retry
        try:
            await RetryHandler.retry_until(
                balanced,
                interval=budget.interval_seconds,
                max_attempts=budget.max_attempts,
                timeout=budget.timeout_seconds,
                logger=self.logger
            )
        except RetryError as e:
            self.logger.error(f"Per-node bucket stats collection not started: {e}")
            return False
        return True
