from __future__ import annotations

"""
Provider for an operator supplied, comma separated list of coordinators.
"""

import logging

from ..models import ClusterInfo, DiscoveryResult, Distribution
from .base import ClusterProvider

logger = logging.getLogger(__name__)


class StaticClusterProvider(ClusterProvider):
    """Static cluster list, keyed by the raw address."""

    def __init__(self, clusters: str, distribution: Distribution | None = None):
        self.clusters = clusters
        self.distribution = distribution

    @property
    def source(self) -> str:
        return "static"

    def addresses(self) -> list[str]:
        """Split the configured list, ignoring blank entries."""
        return [address.strip() for address in self.clusters.split(",") if address.strip()]

    async def provide(self) -> DiscoveryResult:
        clusters: DiscoveryResult = {}
        for address in self.addresses():
            clusters[address] = ClusterInfo(host=address, distribution=self.distribution)

        logger.debug("Static provider returned %d clusters", len(clusters))
        return clusters
