"""Pydantic models for the cluster REST API payloads the exporter reads."""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class _RestModel(BaseModel):
    """Base for REST payloads: accept aliases and ignore unknown keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Node(_RestModel):
    """One entry of the cluster node list."""
    hostname: str = ""
    this_node: bool = Field(default=False, alias="thisNode")
    status: str = ""


class NodeCounters(_RestModel):
    """Cluster-wide operation counters."""
    rebalance_success: int = 0
    rebalance_start: int = 0


class NodeList(_RestModel):
    """Payload of GET /pools/default."""
    nodes: List[Node] = Field(default_factory=list)
    balanced: bool = False
    rebalance_status: str = Field(default="", alias="rebalanceStatus")
    counters: NodeCounters = Field(default_factory=NodeCounters)
    cluster_name: str = Field(default="", alias="clusterName")


class Server(_RestModel):
    """A node hosting a bucket, with links to its per-bucket endpoints."""
    hostname: str = ""
    stats: Dict[str, str] = Field(default_factory=dict)


class ServerList(_RestModel):
    """Payload of GET /pools/default/buckets/<bucket>/nodes."""
    servers: List[Server] = Field(default_factory=list)


class Bucket(_RestModel):
    """One entry of GET /pools/default/buckets."""
    name: str
    bucket_type: str = Field(default="", alias="bucketType")


class OpStats(_RestModel):
    """Sample section of a stats payload: field name to series."""
    samples: Dict[str, Any] = Field(default_factory=dict)
    samples_count: int = Field(default=0, alias="samplesCount")


class PerNodeBucketStats(_RestModel):
    """Payload of GET /pools/default/buckets/<bucket>/nodes/<node>/stats."""
    hostname: str = ""
    op: OpStats = Field(default_factory=OpStats)
