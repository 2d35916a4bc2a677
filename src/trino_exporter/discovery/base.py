from __future__ import annotations

"""
Abstract base for cluster providers.

Every discovery backend answers the same question, which coordinators exist
right now, so aggregation and caching can wrap any of them without knowing
which infrastructure API sits behind it.
"""

from abc import ABC, abstractmethod

from ..models import DiscoveryResult


class ClusterProvider(ABC):
    """Abstract cluster provider."""

    @abstractmethod
    async def provide(self) -> DiscoveryResult:
        """Return a fresh mapping of cluster name to ClusterInfo.

        Raises:
            DiscoveryError: If the backing infrastructure cannot be queried.
        """

    @property
    def source(self) -> str:
        """Short label used in log lines."""
        return type(self).__name__

    def __repr__(self) -> str:
        return f"<{self.source}>"
