"""Gauge definitions for per-node bucket statistics."""

from dataclasses import dataclass
from typing import Dict, Mapping, Any, Optional, Sequence, Tuple

from prometheus_client import CollectorRegistry, Gauge, REGISTRY

from .samples import extract_series, format_series, latest_sample


LABEL_NAMES: Tuple[str, ...] = ("bucket", "node", "cluster")
DEFAULT_NAMESPACE = "cbpernodebucket"


@dataclass(frozen=True)
class MetricSpec:
    """A stats field and the gauge it is exported as."""

    field: str
    help: str
    name: Optional[str] = None

    @property
    def metric_name(self) -> str:
        """Exported name suffix; defaults to the field name."""
        return self.name or self.field


# Field lookups follow the per-node bucket stats endpoint's op.samples keys.
PERNODE_BUCKET_METRICS: Tuple[MetricSpec, ...] = (
    MetricSpec("avg_disk_update_time",
               "Average disk update time in microseconds as from disk_update histogram of timings"),
    MetricSpec("avg_disk_commit_time",
               "Average disk commit time in seconds as from disk_update histogram of timings"),
    MetricSpec("avg_bg_wait_seconds",
               "Latest avg_bg_wait_seconds sample for this bucket on this node"),
    MetricSpec("avg_active_timestamp_drift",
               "Average drift (in seconds) between mutation timestamps and the local time for active vBuckets. (measured from ep_active_hlc_drift and ep_active_hlc_drift_count)"),
    MetricSpec("avg_replica_timestamp_drift",
               "Average drift (in seconds) between mutation timestamps and the local time for replica vBuckets. (measured from ep_replica_hlc_drift and ep_replica_hlc_drift_count)"),
    MetricSpec("couch_total_disk_size",
               "The total size on disk of all data and view files for this bucket"),
    MetricSpec("couch_docs_fragmentation",
               "How much fragmented data there is to be compacted compared to real data for the data files in this bucket"),
    MetricSpec("couch_views_fragmentation",
               "How much fragmented data there is to be compacted compared to real data for the view index files in this bucket"),
    MetricSpec("couch_docs_actual_disk_size",
               "The size of all data files for this bucket, including the data itself, meta data and temporary files"),
    MetricSpec("couch_docs_data_size",
               "The size of active data in this bucket"),
    MetricSpec("couch_docs_disk_size",
               "The size of all data files for this bucket, including the data itself, meta data and temporary files"),
    MetricSpec("couch_docs_spatial_data_size",
               "Latest couch_spatial_data_size sample for this bucket on this node",
               name="couch_spatial_data_size"),
    MetricSpec("couch_docs_spatial_disk_size",
               "Latest couch_spatial_disk_size sample for this bucket on this node",
               name="couch_spatial_disk_size"),
    MetricSpec("couch_spatial_ops",
               "Latest couch_spatial_ops sample for this bucket on this node"),
    MetricSpec("couch_views_actual_disk_size",
               "The size of all active items in all the indexes for this bucket on disk"),
    MetricSpec("couch_views_data_size",
               "The size of active data on for all the indexes in this bucket"),
    MetricSpec("couch_views_disk_size",
               "Latest couch_views_disk_size sample for this bucket on this node"),
    MetricSpec("couch_views_ops",
               "All the view reads for all design documents including scatter gather"),
    MetricSpec("hit_ratio",
               "Hit ratio"),
    MetricSpec("ep_cache_miss_rate",
               "Percentage of reads per second to this bucket from disk as opposed to RAM"),
    MetricSpec("ep_resident_items_rate",
               "Percentage of all items cached in RAM in this bucket"),
    MetricSpec("ep_dcp_views_indexes_count",
               "Latest ep_dcp_views_indexes_count sample for this bucket on this node"),
    MetricSpec("ep_dcp_views_indexes_items_remaining",
               "Latest ep_dcp_views_indexes_items_remaining sample for this bucket on this node"),
    MetricSpec("ep_dcp_views_indexes_producer_count",
               "Latest ep_dcp_views_indexes_producer_count sample for this bucket on this node"),
    MetricSpec("ep_dcp_views_indexes_total_backlog_size",
               "Latest ep_dcp_views_indexes_total_backlog_size sample for this bucket on this node"),
    MetricSpec("ep_dcp_views_indexes_items_sent",
               "Latest ep_dcp_views_indexes_items_sent sample for this bucket on this node"),
    MetricSpec("ep_dcp_views_indexes_total_bytes",
               "Latest ep_dcp_views_indexes_total_bytes sample for this bucket on this node"),
    MetricSpec("ep_dcp_views_indexes_backoff",
               "Latest ep_dcp_views_indexes_backoff sample for this bucket on this node"),
    MetricSpec("bg_wait_count",
               "Latest bg_wait_count sample for this bucket on this node"),
    MetricSpec("bg_wait_total",
               "Latest bg_wait_total sample for this bucket on this node"),
    MetricSpec("bytes_read",
               "Bytes Read"),
    MetricSpec("bytes_written",
               "Bytes written"),
    MetricSpec("cas_bad_val",
               "Compare and Swap bad values"),
    MetricSpec("cas_hits",
               "Number of operations with a CAS id per second for this bucket"),
    MetricSpec("cas_misses",
               "Compare and Swap misses"),
    MetricSpec("cmd_get",
               "Number of reads (get operations) per second from this bucket"),
    MetricSpec("cmd_set",
               "Number of writes (set operations) per second to this bucket"),
    MetricSpec("curr_connections",
               "Number of connections to this server including connections from external client SDKs, proxies, DCP requests and internal statistic gathering"),
    MetricSpec("curr_items",
               "Number of items in active vBuckets in this bucket"),
    MetricSpec("curr_items_tot",
               "Total number of items in this bucket"),
    MetricSpec("decr_hits",
               "Decrement hits"),
    MetricSpec("decr_misses",
               "Decrement misses"),
    MetricSpec("delete_hits",
               "Number of delete operations per second for this bucket"),
    MetricSpec("delete_misses",
               "Number of delete operations per second for data that this bucket does not contain. (measured from delete_misses)"),
    MetricSpec("disk_commit_count",
               "Latest disk_commit_count sample for this bucket on this node"),
    MetricSpec("disk_commit_total",
               "Latest disk_commit_total sample for this bucket on this node"),
    MetricSpec("disk_update_count",
               "Latest disk_update_count sample for this bucket on this node"),
    MetricSpec("disk_update_total",
               "Latest disk_update_total sample for this bucket on this node"),
    MetricSpec("disk_write_queue",
               "Number of items waiting to be written to disk in this bucket. (measured from ep_queue_size+ep_flusher_todo)"),
    MetricSpec("ep_active_ahead_exceptions",
               "Total number of ahead exceptions (when timestamp drift between mutations and local time has exceeded 5000000 μs) per second for all active vBuckets."),
    MetricSpec("ep_active_hlc_drift",
               "Latest ep_active_hlc_drift sample for this bucket on this node"),
    MetricSpec("ep_active_hlc_drift_count",
               "Latest ep_active_hlc_drift_count sample for this bucket on this node"),
    MetricSpec("ep_bg_fetched",
               "Number of reads per second from disk for this bucket"),
    MetricSpec("ep_clock_cas_drift_threshold_exceeded",
               "Latest ep_clock_cas_drift_threshold_exceeded sample for this bucket on this node"),
    MetricSpec("ep_data_read_failed",
               "Number of disk read failures. (measured from ep_data_read_failed)"),
    MetricSpec("ep_data_write_failed",
               "Number of disk write failures. (measured from ep_data_write_failed)"),
    MetricSpec("ep_dcp_2i_backoff",
               "Number of backoffs for indexes DCP connections"),
    MetricSpec("ep_dcp_2i_count",
               "Number of indexes DCP connections"),
    MetricSpec("ep_dcp_2i_items_remaining",
               "Number of indexes items remaining to be sent"),
    MetricSpec("ep_dcp_2i_items_sent",
               "Number of indexes items sent"),
    MetricSpec("ep_dcp_2i_producers",
               "Number of indexes producers"),
    MetricSpec("ep_dcp_2i_total_backlog_size",
               "Latest ep_dcp_2i_total_backlog_size sample for this bucket on this node"),
    MetricSpec("ep_dcp_2i_total_bytes",
               "Number of bytes per second being sent for indexes DCP connections"),
    MetricSpec("ep_dcp_cbas_backoff",
               "Number of backoffs per second for analytics DCP connections (measured from ep_dcp_cbas_backoff)"),
    MetricSpec("ep_dcp_cbas_count",
               "Number of internal analytics DCP connections in this bucket (measured from ep_dcp_cbas_count)"),
    MetricSpec("ep_dcp_cbas_items_remaining",
               "Number of items remaining to be sent to consumer in this bucket"),
    MetricSpec("ep_dcp_cbas_items_sent",
               "Number of items per second being sent for a producer for this bucket"),
    MetricSpec("ep_dcp_cbas_producer_count",
               "Number of analytics senders for this bucket (measured from ep_dcp_cbas_producer_count)"),
    MetricSpec("ep_dcp_cbas_total_backlog_size",
               "Latest ep_dcp_cbas_total_backlog_size sample for this bucket on this node"),
    MetricSpec("ep_dcp_cbas_total_bytes",
               "Latest ep_dcp_cbas_total_bytes sample for this bucket on this node"),
    MetricSpec("ep_dcp_fts_backoff",
               "Latest ep_dcp_fts_backoff sample for this bucket on this node"),
    MetricSpec("ep_dcp_fts_count",
               "Latest ep_dcp_fts_count sample for this bucket on this node"),
    MetricSpec("ep_dcp_fts_items_remaining",
               "Latest ep_dcp_fts_items_remaining sample for this bucket on this node"),
    MetricSpec("ep_dcp_fts_items_sent",
               "Latest ep_dcp_fts_items_sent sample for this bucket on this node"),
    MetricSpec("ep_dcp_fts_producer_count",
               "Latest ep_dcp_fts_producer_count sample for this bucket on this node"),
    MetricSpec("ep_dcp_fts_backlog_size",
               "Latest ep_dcp_fts_backlog_size sample for this bucket on this node"),
    MetricSpec("ep_dcp_fts_total_bytes",
               "Latest ep_dcp_fts_total_bytes sample for this bucket on this node"),
    MetricSpec("ep_dcp_other_backoff",
               "Number of backoffs for other DCP connections"),
    MetricSpec("ep_dcp_other_count",
               "Number of other DCP connections in this bucket"),
    MetricSpec("ep_dcp_other_items_remaining",
               "Number of items remaining to be sent to consumer in this bucket (measured from ep_dcp_other_items_remaining)"),
    MetricSpec("ep_dcp_other_items_sent",
               "Number of items per second being sent for a producer for this bucket (measured from ep_dcp_other_items_sent)"),
    MetricSpec("ep_dcp_other_producer_count",
               "Number of other senders for this bucket"),
    MetricSpec("ep_dcp_other_total_backlog_size",
               "Latest ep_dcp_other_total_backlog_size sample for this bucket on this node"),
    MetricSpec("ep_dcp_other_total_bytes",
               "Number of bytes per second being sent for other DCP connections for this bucket"),
    MetricSpec("ep_dcp_replica_backoff",
               "Number of backoffs for replication DCP connections"),
    MetricSpec("ep_dcp_replica_count",
               "Number of internal replication DCP connections in this bucket"),
    MetricSpec("ep_dcp_replica_items_remaining",
               "Number of items remaining to be sent to consumer in this bucket"),
    MetricSpec("ep_dcp_replica_items_sent",
               "Number of items per second being sent for a producer for this bucket"),
    MetricSpec("ep_dcp_replica_producer_count",
               "Number of replication senders for this bucket"),
    MetricSpec("ep_dcp_replica_total_backlog_size",
               "Latest ep_dcp_replica_total_backlog_size sample for this bucket on this node"),
    MetricSpec("ep_dcp_replica_total_bytes",
               "Number of bytes per second being sent for replication DCP connections for this bucket"),
    MetricSpec("ep_dcp_views_backoff",
               "Number of backoffs for views DCP connections"),
    MetricSpec("ep_dcp_views_count",
               "Number of views DCP connections"),
    MetricSpec("ep_dcp_views_items_remaining",
               "Number of views items remaining to be sent"),
    MetricSpec("ep_dcp_views_items_sent",
               "Number of views items sent"),
    MetricSpec("ep_dcp_views_producer_count",
               "Number of views producers"),
    MetricSpec("ep_dcp_views_total_backlog_size",
               "Latest ep_dcp_views_total_backlog_size sample for this bucket on this node"),
    MetricSpec("ep_dcp_views_total_bytes",
               "Number bytes per second being sent for views DCP connections"),
    MetricSpec("ep_dcp_xdcr_backoff",
               "Number of backoffs for XDCR DCP connections"),
    MetricSpec("ep_dcp_xdcr_count",
               "Number of internal XDCR DCP connections in this bucket"),
    MetricSpec("ep_dcp_xdcr_items_remaining",
               "Number of items remaining to be sent to consumer in this bucket"),
    MetricSpec("ep_dcp_xdcr_items_sent",
               "Number of items per second being sent for a producer for this bucket"),
    MetricSpec("ep_dcp_xdcr_producer_count",
               "Number of XDCR senders for this bucket"),
    MetricSpec("ep_dcp_xdcr_total_backlog_size",
               "Latest ep_dcp_xdcr_total_backlog_size sample for this bucket on this node"),
    MetricSpec("ep_dcp_xdcr_total_bytes",
               "Number of bytes per second being sent for XDCR DCP connections for this bucket"),
    MetricSpec("ep_diskqueue_drain",
               "Total number of items per second being written to disk in this bucket"),
    MetricSpec("ep_diskqueue_fill",
               "Total number of items per second being put on the disk queue in this bucket"),
    MetricSpec("ep_diskqueue_items",
               "Total number of items waiting to be written to disk in this bucket"),
    MetricSpec("ep_flusher_todo",
               "Number of items currently being written"),
    MetricSpec("ep_item_commit_failed",
               "Number of times a transaction failed to commit due to storage errors"),
    MetricSpec("ep_kv_size",
               "Total amount of user data cached in RAM in this bucket"),
    MetricSpec("ep_max_size",
               "The maximum amount of memory this bucket can use"),
    MetricSpec("ep_mem_high_wat",
               "High water mark for auto-evictions"),
    MetricSpec("ep_mem_low_wat",
               "Low water mark for auto-evictions"),
    MetricSpec("ep_meta_data_memory",
               "Total amount of item metadata consuming RAM in this bucket"),
    MetricSpec("ep_num_non_resident",
               "Number of non-resident items"),
    MetricSpec("ep_num_ops_del_meta",
               "Number of delete operations per second for this bucket as the target for XDCR"),
    MetricSpec("ep_num_ops_del_ret_meta",
               "Number of delRetMeta operations per second for this bucket as the target for XDCR"),
    MetricSpec("ep_num_ops_get_meta",
               "Number of metadata read operations per second for this bucket as the target for XDCR"),
    MetricSpec("ep_num_ops_set_meta",
               "Number of set operations per second for this bucket as the target for XDCR"),
    MetricSpec("ep_num_ops_set_ret_meta",
               "Number of setRetMeta operations per second for this bucket as the target for XDCR"),
    MetricSpec("ep_num_value_ejects",
               "Total number of items per second being ejected to disk in this bucket"),
    MetricSpec("ep_oom_errors",
               "Number of times unrecoverable OOMs happened while processing operations"),
    MetricSpec("ep_ops_create",
               "Total number of new items being inserted into this bucket"),
    MetricSpec("ep_ops_update",
               "Number of items updated on disk per second for this bucket"),
    MetricSpec("ep_overhead",
               "Extra memory used by transient data like persistence queues or checkpoints"),
    MetricSpec("ep_queue_size",
               "Number of items queued for storage"),
    MetricSpec("ep_replica_ahead_exceptions",
               "Percentage of all items cached in RAM in this bucket"),
    MetricSpec("ep_replica_hlc_drift",
               "The sum of the total Absolute Drift, which is the accumulated drift observed by the vBucket. Drift is always accumulated as an absolute value."),
    MetricSpec("ep_replica_hlc_drift_count",
               "Latest ep_replica_hlc_drift_count sample for this bucket on this node"),
    MetricSpec("ep_tmp_oom_errors",
               "Number of back-offs sent per second to client SDKs due to OOM situations from this bucket"),
    MetricSpec("ep_vb_total",
               "Total number of vBuckets for this bucket"),
    MetricSpec("evictions",
               "Number of evictions"),
    MetricSpec("get_hits",
               "Number of get hits"),
    MetricSpec("get_misses",
               "Number of get misses"),
    MetricSpec("incr_hits",
               "Number of increment hits"),
    MetricSpec("incr_misses",
               "Number of increment misses"),
    MetricSpec("mem_used",
               "Amount of memory used"),
    MetricSpec("misses",
               "Number of misses"),
    MetricSpec("ops",
               "Total amount of operations per second to this bucket"),
    MetricSpec("vb_active_eject",
               "Number of items per second being ejected to disk from active vBuckets in this bucket"),
    MetricSpec("vb_active_itm_memory",
               "Amount of active user data cached in RAM in this bucket"),
    MetricSpec("vb_active_meta_data_memory",
               "Amount of active item metadata consuming RAM in this bucket"),
    MetricSpec("vb_active_num",
               "Number of vBuckets in the active state for this bucket"),
    MetricSpec("vb_active_num_non_resident",
               "Number of non resident vBuckets in the active state for this bucket"),
    MetricSpec("vb_active_ops_create",
               "New items per second being inserted into active vBuckets in this bucket"),
    MetricSpec("vb_active_ops_update",
               "Number of items updated on active vBucket per second for this bucket"),
    MetricSpec("vb_active_queue_age",
               "Sum of disk queue item age in milliseconds"),
    MetricSpec("vb_active_queue_drain",
               "Number of active items per second being written to disk in this bucket"),
    MetricSpec("vb_active_queue_fill",
               "Number of active items per second being put on the active item disk queue in this bucket"),
    MetricSpec("vb_active_queue_size",
               "Number of active items waiting to be written to disk in this bucket"),
    MetricSpec("vb_active_queue_items",
               "Latest vb_active_queue_items sample for this bucket on this node"),
    MetricSpec("vb_pending_curr_items",
               "Number of items in pending vBuckets in this bucket and should be transient during rebalancing"),
    MetricSpec("vb_pending_eject",
               "Number of items per second being ejected to disk from pending vBuckets in this bucket and should be transient during rebalancing"),
    MetricSpec("vb_pending_itm_memory",
               "Amount of pending user data cached in RAM in this bucket and should be transient during rebalancing"),
    MetricSpec("vb_pending_meta_data_memory",
               "Amount of pending item metadata consuming RAM in this bucket and should be transient during rebalancing"),
    MetricSpec("vb_pending_num",
               "Number of vBuckets in the pending state for this bucket and should be transient during rebalancing"),
    MetricSpec("vb_pending_num_non_resident",
               "Number of non resident vBuckets in the pending state for this bucket"),
    MetricSpec("vb_pending_ops_create",
               "New items per second being instead into pending vBuckets in this bucket and should be transient during rebalancing"),
    MetricSpec("vb_pending_ops_update",
               "Number of items updated on pending vBucket per second for this bucket"),
    MetricSpec("vb_pending_queue_age",
               "Sum of disk pending queue item age in milliseconds"),
    MetricSpec("vb_pending_queue_drain",
               "Number of pending items per second being written to disk in this bucket and should be transient during rebalancing"),
    MetricSpec("vb_pending_queue_fill",
               "Number of pending items per second being put on the pending item disk queue in this bucket and should be transient during rebalancing"),
    MetricSpec("vb_pending_queue_size",
               "Number of pending items waiting to be written to disk in this bucket and should be transient during rebalancing"),
    MetricSpec("vb_replica_curr_items",
               "Number of items in replica vBuckets in this bucket"),
    MetricSpec("vb_replica_eject",
               "Number of items per second being ejected to disk from replica vBuckets in this bucket"),
    MetricSpec("vb_replica_itm_memory",
               "Amount of replica user data cached in RAM in this bucket"),
    MetricSpec("vb_replica_meta_data_memory",
               "Amount of replica item metadata consuming in RAM in this bucket"),
    MetricSpec("vb_replica_num",
               "Number of vBuckets in the replica state for this bucket"),
    MetricSpec("vb_replica_num_non_resident",
               "Latest vb_replica_num_non_resident sample for this bucket on this node"),
    MetricSpec("vb_replica_ops_create",
               "New items per second being inserted into replica vBuckets in this bucket"),
    MetricSpec("vb_replica_ops_update",
               "Number of items updated on replica vBucket per second for this bucket"),
    MetricSpec("vb_replica_queue_age",
               "Sum of disk replica queue item age in milliseconds"),
    MetricSpec("vb_replica_queue_drain",
               "Number of replica items per second being written to disk in this bucket"),
    MetricSpec("vb_replica_queue_fill",
               "Number of replica items per second being put on the replica item disk queue in this bucket"),
    MetricSpec("vb_replica_queue_size",
               "Number of replica items waiting to be written to disk in this bucket"),
    MetricSpec("vb_total_queue_age",
               "Latest vb_total_queue_age sample for this bucket on this node"),
    MetricSpec("vb_avg_active_queue_age",
               "Sum of disk queue item age in milliseconds"),
    MetricSpec("vb_avg_replica_queue_age",
               "Average age in seconds of replica items in the replica item queue for this bucket"),
    MetricSpec("vb_avg_pending_queue_age",
               "Average age in seconds of pending items in the pending item queue for this bucket and should be transient during rebalancing"),
    MetricSpec("vb_avg_total_queue_age",
               "Average age in seconds of all items in the disk write queue for this bucket"),
    MetricSpec("vb_active_resident_items_ratio",
               "Percentage of active items cached in RAM in this bucket"),
    MetricSpec("vb_replica_resident_items_ratio",
               "Percentage of active items cached in RAM in this bucket"),
    MetricSpec("vb_pending_resident_items_ratio",
               "Percentage of items in pending state vbuckets cached in RAM in this bucket"),
    MetricSpec("xdc_ops",
               "Total XDCR operations per second for this bucket"),
    MetricSpec("cpu_idle_ms",
               "CPU idle milliseconds"),
    MetricSpec("cpu_local_ms",
               "Latest cpu_local_ms sample for this bucket on this node"),
    MetricSpec("cpu_utilization_rate",
               "Percentage of CPU in use across all available cores on this server"),
    MetricSpec("hibernated_requests",
               "Number of streaming requests on port 8091 now idle"),
    MetricSpec("hibernated_waked",
               "Rate of streaming request wakeups on port 8091"),
    MetricSpec("mem_actual_free",
               "Amount of RAM available on this server"),
    MetricSpec("mem_actual_used",
               "Latest mem_actual_used sample for this bucket on this node"),
    MetricSpec("mem_free",
               "Amount of Memory free"),
    MetricSpec("mem_total",
               "Latest mem_total sample for this bucket on this node"),
    MetricSpec("mem_used_sys",
               "Latest mem_used_sys sample for this bucket on this node"),
    MetricSpec("rest_requests",
               "Rate of http requests on port 8091"),
    MetricSpec("swap_total",
               "Total amount of swap available"),
    MetricSpec("swap_used",
               "Amount of swap space in use on this server"),
)


class PerNodeBucketMetrics:
    """
    Owns one labeled gauge per tracked statistic.

    Gauges are registered once, on construction, in the given registry
    (the process-wide default registry unless one is passed).
    """

    def __init__(
        self,
        registry: CollectorRegistry = REGISTRY,
        namespace: str = DEFAULT_NAMESPACE,
        specs: Sequence[MetricSpec] = PERNODE_BUCKET_METRICS
    ):
        self.registry = registry
        self.namespace = namespace
        self.specs = tuple(specs)
        self.gauges: Dict[str, Gauge] = {
            spec.field: Gauge(
                spec.metric_name,
                spec.help,
                LABEL_NAMES,
                namespace=namespace,
                registry=registry
            )
            for spec in self.specs
        }

    def full_name(self, field: str) -> str:
        """Exported metric name for a stats field."""
        spec = next(s for s in self.specs if s.field == field)
        return f"{self.namespace}_{spec.metric_name}"

    def publish(
        self,
        field: str,
        series: Sequence[float],
        bucket: str,
        node: str,
        cluster: str
    ) -> Optional[float]:
        """
        Set a gauge to the newest value of a series.

        An empty series leaves the gauge untouched, so the last observed
        value stays exported.

        Returns:
            Optional[float]: The value written, or None if nothing was written
        """
        value = latest_sample(series)
        if value is None:
            return None
        self.gauges[field].labels(bucket, node, cluster).set(value)
        return value

    def publish_samples(
        self,
        samples: Mapping[str, Any],
        bucket: str,
        node: str,
        cluster: str
    ) -> Dict[str, float]:
        """
        Publish every tracked field found in a stats samples mapping.

        Args:
            samples: op.samples section of a per-node bucket stats payload
            bucket: Bucket label value
            node: Node label value
            cluster: Cluster label value

        Returns:
            Dict[str, float]: Field name to value for every gauge written
        """
        written = {}
        for spec in self.specs:
            series = extract_series(format_series(samples.get(spec.field)))
            value = self.publish(spec.field, series, bucket, node, cluster)
            if value is not None:
                written[spec.field] = value
        return written
