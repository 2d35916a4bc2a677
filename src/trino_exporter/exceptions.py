"""
Exporter Exceptions

Error hierarchy shared by the discovery providers and the cluster collector.
"""


class ExporterError(Exception):
    """Base exception for exporter errors."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class DiscoveryError(ExporterError):
    """Raised when a provider cannot establish its cluster list."""


class UnrecognizedTopologyError(DiscoveryError):
    """Raised when an EMR cluster uses an unknown instance collection type."""

    def __init__(self, cluster_id: str, collection_type: str | None):
        super().__init__(f"unrecognized instance collection type {collection_type} for cluster {cluster_id}")
        self.cluster_id = cluster_id
        self.collection_type = collection_type


class NoMasterFoundError(DiscoveryError):
    """Raised when an EMR cluster topology yields no master instance."""

    def __init__(self, cluster_id: str):
        super().__init__(f"no master instance found for cluster {cluster_id}")
        self.cluster_id = cluster_id


class DuplicateClusterNameError(DiscoveryError):
    """Raised when two providers report the same cluster name."""

    def __init__(self, cluster_name: str):
        super().__init__(f"duplicated cluster name between providers: {cluster_name}")
        self.cluster_name = cluster_name


class ClusterScrapeError(ExporterError):
    """Raised when statistics cannot be read from a single cluster."""

    def __init__(self, message: str, cluster_name: str | None = None, cause: Exception | None = None):
        super().__init__(message, cause)
        self.cluster_name = cluster_name


class LoginError(ClusterScrapeError):
    """Raised when the coordinator UI login does not hand out a session cookie."""
