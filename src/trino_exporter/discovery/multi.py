from __future__ import annotations

"""
Aggregating provider that merges several discovery sources.
"""

import builtins
import logging

from ..exceptions import DuplicateClusterNameError
from ..models import DiscoveryResult
from .base import ClusterProvider

logger = logging.getLogger(__name__)


class MultiClusterProvider(ClusterProvider):
    """Merge the results of an ordered list of providers.

    Providers are asked in list order. The first failing provider fails the
    whole call, and a cluster name reported by two providers is rejected
    rather than silently overwritten.
    """

    def __init__(self, providers: builtins.list[ClusterProvider] | None = None):
        self.providers: builtins.list[ClusterProvider] = list(providers or [])

    def add(self, provider: ClusterProvider) -> None:
        """Append a provider to the end of the chain."""
        self.providers.append(provider)

    @property
    def source(self) -> str:
        return "+".join(provider.source for provider in self.providers) or "empty"

    async def provide(self) -> DiscoveryResult:
        clusters: DiscoveryResult = {}

        for provider in self.providers:
            try:
                provided = await provider.provide()
            except Exception as e:
                logger.error("Cluster discovery failed in %s: %s", provider.source, e)
                raise

            for name, cluster in provided.items():
                if name in clusters:
                    raise DuplicateClusterNameError(name)
                clusters[name] = cluster

        return clusters
