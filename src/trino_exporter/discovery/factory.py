from __future__ import annotations

"""
Factory helpers for assembling the provider chain from settings.
"""

import logging

from ..config import ExporterSettings
from ..models import Distribution, Engine
from .base import ClusterProvider
from .cache import CachedClusterProvider
from .emr import EMRClusterProvider
from .k8s import KubernetesClusterProvider
from .multi import MultiClusterProvider
from .static import StaticClusterProvider

logger = logging.getLogger(__name__)


def create_cluster_provider(settings: ExporterSettings) -> ClusterProvider:
    """Build the aggregated provider described by settings.

    The static list comes first, then EMR, then Kubernetes. Autodiscovery
    sources are wrapped in a cache with their own TTL. Without an explicit
    cluster list, enabling autodiscovery drops the local default address.
    """
    providers = MultiClusterProvider()

    clusters = settings.static_clusters
    if clusters.strip():
        distribution = Distribution.PRESTODB if settings.engine is Engine.PRESTO else None
        providers.add(StaticClusterProvider(clusters, distribution=distribution))

    if settings.aws_autodiscovery:
        emr = EMRClusterProvider.from_session(
            engine=settings.engine,
            region_name=settings.aws_region,
            profile_name=settings.aws_profile,
            cluster_states=settings.aws_cluster_states,
        )
        providers.add(
            CachedClusterProvider(emr, settings.aws_cache_ttl, settings.cache_sweep_interval)
        )

    if settings.k8s_autodiscovery:
        kubernetes = KubernetesClusterProvider.from_config(
            kubeconfig=settings.kubeconfig,
            cluster_domain=settings.k8s_cluster_domain,
            label_selector=settings.k8s_service_label_selector,
            port_name=settings.k8s_service_port_name,
            engine=settings.engine,
        )
        providers.add(
            CachedClusterProvider(kubernetes, settings.k8s_cache_ttl, settings.cache_sweep_interval)
        )

    logger.info("Cluster providers: %s", providers.source)
    return providers
