"""
Trino Exporter

Discovers Trino and Presto clusters (static list, Amazon EMR, Kubernetes),
polls each coordinator for live statistics, and exposes them to Prometheus.
"""

from .collector import ClusterCollector
from .config import ExporterSettings
from .discovery import (
    CachedClusterProvider,
    ClusterProvider,
    EMRClusterProvider,
    KubernetesClusterProvider,
    MultiClusterProvider,
    StaticClusterProvider,
)
from .exceptions import (
    ClusterScrapeError,
    DiscoveryError,
    DuplicateClusterNameError,
    ExporterError,
    LoginError,
    NoMasterFoundError,
    UnrecognizedTopologyError,
)
from .models import ClusterInfo, ClusterStats, Distribution, Engine

__version__ = "0.3.0"

__all__ = [
    "CachedClusterProvider",
    "ClusterCollector",
    "ClusterInfo",
    "ClusterProvider",
    "ClusterScrapeError",
    "ClusterStats",
    "DiscoveryError",
    "Distribution",
    "DuplicateClusterNameError",
    "EMRClusterProvider",
    "Engine",
    "ExporterError",
    "ExporterSettings",
    "KubernetesClusterProvider",
    "LoginError",
    "MultiClusterProvider",
    "NoMasterFoundError",
    "StaticClusterProvider",
    "UnrecognizedTopologyError",
]
