"""Tests for the per-node bucket stats collector."""

import asyncio

import pytest

from couchbase_exporter.collectors.pernode_bucket_collector import (
    PerNodeBucketCollector,
    ResolutionError,
    cluster_is_balanced,
    find_current_node,
)
from couchbase_exporter.services.couchbase_client import CouchbaseClientError
from couchbase_exporter.services.couchbase_models import Bucket, PerNodeBucketStats, ServerList
from couchbase_exporter.utils.status import HealthStatus

LABELS = {"bucket": "default", "node": "node1", "cluster": "prod"}


@pytest.fixture
def collector(fake_client, metrics, collection_config, logger):
    return PerNodeBucketCollector(fake_client, metrics, collection_config, logger)


class TestClusterIsBalanced:
    """Rebalance gate predicate."""

    def test_successful_rebalance_counts(self, node_list):
        nodes = node_list(balanced=False, rebalance_status="running", rebalance_success=2)
        assert cluster_is_balanced(nodes) is True

    def test_balanced_and_idle(self, node_list):
        nodes = node_list(balanced=True, rebalance_status="none", rebalance_success=0)
        assert cluster_is_balanced(nodes) is True

    def test_balanced_but_running(self, node_list):
        nodes = node_list(balanced=True, rebalance_status="running", rebalance_success=0)
        assert cluster_is_balanced(nodes) is False

    def test_unbalanced_and_idle(self, node_list):
        nodes = node_list(balanced=False, rebalance_status="none", rebalance_success=0)
        assert cluster_is_balanced(nodes) is False


class TestFindCurrentNode:
    """Node resolver predicate."""

    def test_flagged_node(self, node_list):
        nodes = node_list(nodes=[
            {"hostname": "a", "thisNode": False},
            {"hostname": "b", "thisNode": True},
        ])
        assert find_current_node(nodes) == "b"

    def test_no_flagged_node_returns_empty(self, node_list):
        nodes = node_list(nodes=[{"hostname": "a"}, {"hostname": "b"}])
        assert find_current_node(nodes) == ""


class TestResolution:
    """Node resolution and rebalance checks against the client."""

    @pytest.mark.asyncio
    async def test_resolve_current_node(self, collector):
        assert await collector.resolve_current_node() == "node1"

    @pytest.mark.asyncio
    async def test_resolve_without_flag_is_empty_not_error(self, collector, fake_client, node_list):
        fake_client.nodes.return_value = node_list(nodes=[{"hostname": "node1"}])

        assert await collector.resolve_current_node() == ""

    @pytest.mark.asyncio
    async def test_resolve_fetch_failure_raises(self, collector, fake_client):
        fake_client.nodes.side_effect = CouchbaseClientError("connection refused")

        with pytest.raises(ResolutionError):
            await collector.resolve_current_node()

    @pytest.mark.asyncio
    async def test_balanced_fetch_failure_is_false(self, collector, fake_client):
        fake_client.nodes.side_effect = CouchbaseClientError("connection refused")

        assert await collector.is_cluster_balanced() is False


class TestStatsUrl:
    """Per-node stats URL lookup."""

    @pytest.mark.asyncio
    async def test_matching_server(self, collector):
        url = await collector.get_node_bucket_stats_url("default", "node1")
        assert url == "/pools/default/buckets/default/nodes/node1/stats"

    @pytest.mark.asyncio
    async def test_no_matching_server(self, collector):
        assert await collector.get_node_bucket_stats_url("default", "node2") == ""

    @pytest.mark.asyncio
    async def test_servers_failure(self, collector, fake_client):
        fake_client.servers.side_effect = CouchbaseClientError("HTTP 404")

        assert await collector.get_node_bucket_stats_url("default", "node1") == ""

    @pytest.mark.asyncio
    async def test_server_without_uri(self, collector, fake_client):
        fake_client.servers.return_value = ServerList.model_validate({
            "servers": [{"hostname": "node1", "stats": {}}]
        })

        assert await collector.get_node_bucket_stats_url("default", "node1") == ""


class TestCollect:
    """One poll cycle."""

    @pytest.mark.asyncio
    async def test_end_to_end_cycle(self, collector, registry):
        results = await collector.collect("node1", "prod")

        assert len(results) == 1
        assert results[0].status == HealthStatus.GREEN
        assert results[0].metrics == {"curr_items": 30.0}
        assert registry.get_sample_value("cbpernodebucket_curr_items", LABELS) == 30.0

    @pytest.mark.asyncio
    async def test_buckets_failure_publishes_nothing(self, collector, fake_client, registry):
        fake_client.buckets.side_effect = CouchbaseClientError("timeout")

        results = await collector.collect("node1", "prod")

        assert results == []
        fake_client.get_node_bucket_stats.assert_not_called()
        assert registry.get_sample_value("cbpernodebucket_curr_items", LABELS) is None

    @pytest.mark.asyncio
    async def test_stats_failure_skips_bucket(self, collector, fake_client, registry):
        fake_client.buckets.return_value = [Bucket(name="broken"), Bucket(name="default")]
        fake_client.get_node_bucket_stats.side_effect = [
            CouchbaseClientError("HTTP 500"),
            PerNodeBucketStats.model_validate({"op": {"samples": {"curr_items": [1, 2]}}}),
        ]

        results = await collector.collect("node1", "prod")

        assert [r.target_name for r in results] == ["broken", "default"]
        assert results[0].status == HealthStatus.UNKNOWN
        assert results[1].ok
        assert registry.get_sample_value("cbpernodebucket_curr_items", LABELS) == 2.0

    @pytest.mark.asyncio
    async def test_unresolved_url_is_requested_and_logged(self, collector, fake_client):
        fake_client.get_node_bucket_stats.side_effect = CouchbaseClientError("Cannot GET an empty URL")

        results = await collector.collect("node2", "prod")

        fake_client.get_node_bucket_stats.assert_awaited_once_with("")
        assert results[0].status == HealthStatus.UNKNOWN

    @pytest.mark.asyncio
    async def test_missing_field_keeps_prior_value(self, collector, fake_client, registry):
        await collector.collect("node1", "prod")
        fake_client.get_node_bucket_stats.return_value = PerNodeBucketStats.model_validate({
            "op": {"samples": {"ops": "5"}}
        })

        await collector.collect("node1", "prod")

        assert registry.get_sample_value("cbpernodebucket_curr_items", LABELS) == 30.0
        assert registry.get_sample_value("cbpernodebucket_ops", LABELS) == 5.0

    @pytest.mark.asyncio
    async def test_new_bucket_picked_up_next_cycle(self, collector, fake_client, registry):
        await collector.collect("node1", "prod")
        fake_client.buckets.return_value = [Bucket(name="default"), Bucket(name="beer-sample")]

        await collector.collect("node1", "prod")

        assert fake_client.buckets.await_count == 2
        labels = {"bucket": "beer-sample", "node": "node1", "cluster": "prod"}
        assert registry.get_sample_value("cbpernodebucket_curr_items", labels) == 30.0

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self, collector, fake_client):
        fake_client.buckets.side_effect = RuntimeError("unexpected")

        assert await collector.collect("node1", "prod") == []


class TestLoop:
    """Background polling loop and orchestration."""

    @pytest.mark.asyncio
    async def test_run_forever_stops_after_iterations(self, collector, fake_client):
        await collector.run_forever("node1", "prod", iterations=1)

        assert fake_client.buckets.await_count == 1

    @pytest.mark.asyncio
    async def test_run_forever_survives_errors(self, collector, fake_client, collection_config):
        collection_config.refresh_interval = 0
        fake_client.buckets.side_effect = [
            CouchbaseClientError("down"),
            [Bucket(name="default")],
            [Bucket(name="default")],
        ]

        await collector.run_forever("node1", "prod", iterations=3)

        assert fake_client.buckets.await_count == 3

    @pytest.mark.asyncio
    async def test_start_and_stop(self, collector, fake_client, registry):
        assert await collector.start() is True
        assert collector.node == "node1"
        assert collector.cluster_name == "prod"

        # Let the first cycle run
        for _ in range(20):
            if registry.get_sample_value("cbpernodebucket_curr_items", LABELS) is not None:
                break
            await asyncio.sleep(0.01)

        await asyncio.wait_for(collector.stop(), timeout=2)

        assert collector.task is None
        assert registry.get_sample_value("cbpernodebucket_curr_items", LABELS) == 30.0

    @pytest.mark.asyncio
    async def test_start_with_unflagged_node_uses_empty_label(self, collector, fake_client, node_list, registry):
        fake_client.nodes.return_value = node_list(nodes=[{"hostname": "node1"}])
        fake_client.servers.return_value = ServerList.model_validate({
            "servers": [{"hostname": "", "stats": {"uri": "/stats"}}]
        })

        results = await collector.run_once()

        assert collector.node == ""
        labels = {"bucket": "default", "node": "", "cluster": "prod"}
        assert results[0].ok
        assert registry.get_sample_value("cbpernodebucket_curr_items", labels) == 30.0

    @pytest.mark.asyncio
    async def test_start_fails_when_node_list_unavailable(self, collector, fake_client):
        fake_client.nodes.side_effect = CouchbaseClientError("refused")

        assert await collector.start() is False
        assert fake_client.nodes.await_count == 3
        assert collector.task is None

    @pytest.mark.asyncio
    async def test_start_retries_node_resolution(self, collector, fake_client, node_list):
        fake_client.nodes.side_effect = [
            CouchbaseClientError("refused"),
            node_list(nodes=[{"hostname": "node1", "thisNode": True}]),
            node_list(),
        ]

        assert await collector.prepare() is True
        assert collector.node == "node1"

    @pytest.mark.asyncio
    async def test_start_fails_while_rebalancing(self, collector, fake_client, node_list):
        fake_client.nodes.return_value = node_list(
            nodes=[{"hostname": "node1", "thisNode": True}],
            balanced=False,
            rebalance_status="running"
        )

        assert await collector.start() is False
        # One resolution call plus three gate attempts
        assert fake_client.nodes.await_count == 4
        fake_client.buckets.assert_not_called()

    @pytest.mark.asyncio
    async def test_start_fails_without_cluster_name(self, collector, fake_client):
        fake_client.cluster_name.side_effect = CouchbaseClientError("refused")

        assert await collector.start() is False
        fake_client.buckets.assert_not_called()

    @pytest.mark.asyncio
    async def test_gate_waits_for_rebalance(self, collector, fake_client, node_list):
        fake_client.nodes.side_effect = [
            node_list(nodes=[{"hostname": "node1", "thisNode": True}]),
            node_list(balanced=False, rebalance_status="running"),
            node_list(balanced=True, rebalance_status="none"),
        ]

        results = await collector.run_once()

        assert results is not None
        assert results[0].metrics == {"curr_items": 30.0}
