from __future__ import annotations

"""
Kubernetes backed cluster discovery.

Every namespace is searched for services matching a label selector. A
matching service must expose the named coordinator port; its in-cluster DNS
name becomes the coordinator URL.
"""

import asyncio
import builtins
import logging
from typing import Any

from kubernetes import client
from kubernetes import config as k8s_config
from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

from ..exceptions import DiscoveryError
from ..models import ClusterInfo, DiscoveryResult, Distribution, Engine
from .base import ClusterProvider

logger = logging.getLogger(__name__)

COORDINATOR_PORT_NAME = "http-coord"
DISTRIBUTION_LABEL = "presto.distribution"

_LABEL_DISTRIBUTIONS = {
    "prestodb": Distribution.PRESTODB,
    "prestosql": Distribution.PRESTOSQL,
}


def distribution_from_labels(labels: builtins.dict[str, str] | None) -> Distribution:
    """Map the distribution label of a service onto a Distribution."""
    labels = labels or {}
    if DISTRIBUTION_LABEL not in labels:
        return Distribution.PRESTOSQL
    return _LABEL_DISTRIBUTIONS.get(labels[DISTRIBUTION_LABEL], Distribution.UNKNOWN)


class KubernetesClusterProvider(ClusterProvider):
    """Discover coordinators exposed as Kubernetes services."""

    def __init__(
        self,
        core_api: Any,
        cluster_domain: str = "cluster.local",
        label_selector: str = "",
        port_name: str = COORDINATOR_PORT_NAME,
        engine: Engine = Engine.TRINO,
    ):
        self.core_api = core_api
        self.cluster_domain = cluster_domain
        self.label_selector = label_selector
        self.port_name = port_name
        self.engine = engine

    @classmethod
    def from_config(cls, kubeconfig: str | None = None, **kwargs: Any) -> KubernetesClusterProvider:
        """Build a provider from in-cluster credentials or a kubeconfig file.

        Configuration errors propagate; the exporter cannot run without them.
        """
        if kubeconfig:
            k8s_config.load_kube_config(config_file=kubeconfig)
        else:
            k8s_config.load_incluster_config()

        return cls(client.CoreV1Api(), **kwargs)

    @property
    def source(self) -> str:
        return "kubernetes"

    async def provide(self) -> DiscoveryResult:
        return await asyncio.to_thread(self.list_coordinators)

    def list_coordinators(self) -> DiscoveryResult:
        """Resolve every matching coordinator service in every namespace."""
        coordinators: DiscoveryResult = {}

        try:
            namespaces = self.core_api.list_namespace()

            for namespace in namespaces.items:
                services = self.core_api.list_namespaced_service(
                    namespace.metadata.name, label_selector=self.label_selector
                )

                for service in services.items:
                    cluster = self._service_to_cluster(service)
                    if cluster is None:
                        continue

                    name = f"{service.metadata.namespace},{service.metadata.name}"
                    coordinators[name] = cluster

        except (ApiException, HTTPError) as e:
            raise DiscoveryError(f"Kubernetes cluster discovery failed: {e}", cause=e) from e

        logger.info("Discovered %d %s clusters on Kubernetes", len(coordinators), self.engine.value)
        return coordinators

    def _service_to_cluster(self, service: Any) -> ClusterInfo | None:
        """Convert a Kubernetes service into ClusterInfo."""
        metadata = service.metadata
        port = self._port_by_name(service)

        if port is None:
            logger.warning(
                "Service %s/%s has no port named %s, skipping",
                metadata.namespace,
                metadata.name,
                self.port_name,
            )
            return None

        url = f"http://{metadata.name}.{metadata.namespace}.svc.{self.cluster_domain}:{port.port}"

        distribution = None
        if self.engine is Engine.PRESTO:
            distribution = distribution_from_labels(metadata.labels)

        logger.debug("Found coordinator service %s at %s", metadata.name, url)
        return ClusterInfo(host=url, distribution=distribution)

    def _port_by_name(self, service: Any) -> Any | None:
        for port in (service.spec.ports if service.spec else None) or []:
            if port.name == self.port_name:
                return port
        return None
