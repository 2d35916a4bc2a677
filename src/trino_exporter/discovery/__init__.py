"""
Cluster discovery.

Providers answer which coordinators exist right now. They can be cached
individually and merged into one result with MultiClusterProvider.
"""

from .base import ClusterProvider
from .cache import CachedClusterProvider, CacheEntry, TTLCache
from .emr import EMRClusterProvider
from .factory import create_cluster_provider
from .k8s import KubernetesClusterProvider
from .multi import MultiClusterProvider
from .static import StaticClusterProvider

__all__ = [
    "CacheEntry",
    "CachedClusterProvider",
    "ClusterProvider",
    "EMRClusterProvider",
    "KubernetesClusterProvider",
    "MultiClusterProvider",
    "StaticClusterProvider",
    "TTLCache",
    "create_cluster_provider",
]
