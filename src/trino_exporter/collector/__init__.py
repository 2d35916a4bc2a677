"""Per-cluster statistics collection."""

from .client import CoordinatorClient
from .collector import ClusterCollector
from .metrics import CLUSTER_LABEL, ClusterMetrics, MetricDescriptor

__all__ = [
    "CLUSTER_LABEL",
    "ClusterCollector",
    "ClusterMetrics",
    "CoordinatorClient",
    "MetricDescriptor",
]
