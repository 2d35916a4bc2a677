"""
Metric descriptors published for every scraped cluster.

Descriptors are built once per collector from the engine's namespace, so two
collectors for different engines never share metric names.
"""

from __future__ import annotations

from dataclasses import dataclass

from prometheus_client.core import GaugeMetricFamily

from ..models import Engine

CLUSTER_LABEL = "cluster_name"

# (ClusterStats field, metric suffix, help text)
STAT_METRICS = (
    ("running_queries", "running_queries", "Running requests of the {engine} cluster."),
    ("blocked_queries", "blocked_queries", "Blocked queries of the {engine} cluster."),
    ("queued_queries", "queued_queries", "Queued queries of the {engine} cluster."),
    ("active_workers", "active_workers", "Active workers of the {engine} cluster."),
    ("running_drivers", "running_drivers", "Running drivers of the {engine} cluster."),
    ("reserved_memory", "reserved_memory", "Reserved memory of the {engine} cluster."),
    ("total_input_rows", "total_input_rows", "Total input rows of the {engine} cluster."),
    ("total_input_bytes", "total_input_bytes", "Total input bytes of the {engine} cluster."),
    ("total_cpu_time_secs", "total_cpu_time_secs", "Total cpu time of the {engine} cluster."),
)


@dataclass(frozen=True)
class MetricDescriptor:
    """Name, help text and source field of one gauge."""

    name: str
    documentation: str
    field: str | None = None

    def family(self) -> GaugeMetricFamily:
        """Return an empty gauge family for this descriptor."""
        return GaugeMetricFamily(self.name, self.documentation, labels=[CLUSTER_LABEL])


@dataclass(frozen=True)
class ClusterMetrics:
    """Full set of descriptors for one engine."""

    stats: tuple[MetricDescriptor, ...]
    up: MetricDescriptor

    @classmethod
    def for_engine(cls, engine: Engine) -> ClusterMetrics:
        namespace = engine.metric_namespace
        stats = tuple(
            MetricDescriptor(
                name=f"{namespace}_{suffix}",
                documentation=documentation.format(engine=engine.value),
                field=field,
            )
            for field, suffix, documentation in STAT_METRICS
        )
        up = MetricDescriptor(
            name=f"{namespace}_up",
            documentation=f"{engine.value.capitalize()} health check.",
        )
        return cls(stats=stats, up=up)

    def all(self) -> tuple[MetricDescriptor, ...]:
        return (*self.stats, self.up)
