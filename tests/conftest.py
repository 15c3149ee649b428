"""Shared pytest configuration and fixtures."""

import pytest
from unittest.mock import AsyncMock

from prometheus_client import CollectorRegistry

from couchbase_exporter.collectors.pernode_bucket_metrics import PerNodeBucketMetrics
from couchbase_exporter.config.models import CollectionConfig, CouchbaseConfig, RetryConfig
from couchbase_exporter.services.couchbase_models import (
    Bucket,
    NodeList,
    PerNodeBucketStats,
    ServerList,
)
from couchbase_exporter.utils.logger import setup_logger


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test")


@pytest.fixture
def registry():
    """Private registry so gauges never collide between tests."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry):
    """Full per-node bucket gauge set bound to the test registry."""
    return PerNodeBucketMetrics(registry=registry)


@pytest.fixture
def couchbase_config():
    """Connection settings pointing at a fake cluster."""
    return CouchbaseConfig(
        url="http://cb.example.com:8091",
        username="Administrator",
        password="password"
    )


@pytest.fixture
def collection_config():
    """Retry budgets with no waiting so tests run instantly."""
    return CollectionConfig(
        refresh_interval=1,
        node_retry=RetryConfig(interval_seconds=0, max_attempts=3, timeout_seconds=5),
        rebalance_retry=RetryConfig(interval_seconds=0, max_attempts=3, timeout_seconds=5)
    )


def make_node_list(
    nodes=None,
    balanced=True,
    rebalance_status="none",
    rebalance_success=0,
    cluster_name="prod"
):
    """Build a NodeList payload the way GET /pools/default returns it."""
    return NodeList.model_validate({
        "nodes": nodes if nodes is not None else [
            {"hostname": "node1:8091", "thisNode": True},
        ],
        "balanced": balanced,
        "rebalanceStatus": rebalance_status,
        "counters": {"rebalance_success": rebalance_success},
        "clusterName": cluster_name,
    })


@pytest.fixture
def fake_client():
    """
    AsyncMock client describing a one-bucket, one-node cluster.

    Bucket "default" on node "node1" in cluster "prod", with
    curr_items samples "10 20 30".
    """
    client = AsyncMock()
    client.nodes.return_value = make_node_list(
        nodes=[{"hostname": "node1", "thisNode": True}]
    )
    client.cluster_name.return_value = "prod"
    client.buckets.return_value = [Bucket(name="default")]
    client.servers.return_value = ServerList.model_validate({
        "servers": [
            {
                "hostname": "node1",
                "stats": {"uri": "/pools/default/buckets/default/nodes/node1/stats"}
            }
        ]
    })
    client.get_node_bucket_stats.return_value = PerNodeBucketStats.model_validate({
        "op": {"samples": {"curr_items": "10 20 30"}}
    })
    return client


@pytest.fixture
def node_list():
    """Factory fixture for NodeList payloads."""
    return make_node_list
