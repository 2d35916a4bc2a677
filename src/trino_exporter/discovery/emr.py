from __future__ import annotations

"""
Amazon EMR backed cluster discovery.

Lists EMR clusters in a ready state, keeps those with the query engine
installed, and resolves the private address of each cluster's master node,
which runs the coordinator.
"""

import asyncio
import builtins
import logging
from collections.abc import Iterable
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import DiscoveryError, NoMasterFoundError, UnrecognizedTopologyError
from ..models import ClusterInfo, DiscoveryResult, Distribution, Engine
from .base import ClusterProvider

logger = logging.getLogger(__name__)

COORDINATOR_PORT = 8889

INSTANCE_GROUP = "INSTANCE_GROUP"
INSTANCE_FLEET = "INSTANCE_FLEET"
MASTER = "MASTER"

# Lower-cased EMR application name -> distribution tag, per engine.
ENGINE_APPLICATIONS: builtins.dict[Engine, builtins.dict[str, Distribution | None]] = {
    Engine.PRESTO: {
        "presto": Distribution.PRESTODB,
        "prestosql": Distribution.PRESTOSQL,
    },
    Engine.TRINO: {
        "trino": None,
    },
}


class EMRClusterProvider(ClusterProvider):
    """Discover coordinators running on Amazon EMR."""

    def __init__(
        self,
        emr_client: Any,
        engine: Engine = Engine.TRINO,
        cluster_states: Iterable[str] = ("WAITING",),
        coordinator_port: int = COORDINATOR_PORT,
    ):
        self.emr = emr_client
        self.engine = engine
        self.cluster_states = list(cluster_states)
        self.coordinator_port = coordinator_port
        self.applications = ENGINE_APPLICATIONS[engine]

    @classmethod
    def from_session(
        cls,
        engine: Engine = Engine.TRINO,
        region_name: str | None = None,
        profile_name: str | None = None,
        **kwargs: Any,
    ) -> EMRClusterProvider:
        """Build a provider from the default boto3 credential chain."""
        session_kwargs = {}
        if profile_name:
            session_kwargs["profile_name"] = profile_name
        if region_name:
            session_kwargs["region_name"] = region_name

        session = boto3.Session(**session_kwargs)
        return cls(session.client("emr"), engine=engine, **kwargs)

    @property
    def source(self) -> str:
        return "emr"

    async def provide(self) -> DiscoveryResult:
        return await asyncio.to_thread(self.list_coordinators)

    def list_coordinators(self) -> DiscoveryResult:
        """Resolve the coordinator address of every candidate cluster."""
        coordinators: DiscoveryResult = {}

        try:
            for cluster in self.list_candidate_clusters():
                master_address = self.get_master_address(cluster)
                coordinators[cluster["Name"]] = ClusterInfo(
                    host=f"http://{master_address}:{self.coordinator_port}",
                    distribution=self.installed_distribution(cluster),
                )
        except (BotoCoreError, ClientError) as e:
            raise DiscoveryError(f"EMR cluster discovery failed: {e}", cause=e) from e

        logger.info("Discovered %d %s clusters on EMR", len(coordinators), self.engine.value)
        return coordinators

    def list_candidate_clusters(self) -> builtins.list[builtins.dict[str, Any]]:
        """List described clusters that have the engine installed.

        A cluster whose description cannot be fetched is skipped so one broken
        cluster does not hide the others.
        """
        candidates = []
        paginator = self.emr.get_paginator("list_clusters")

        for page in paginator.paginate(ClusterStates=self.cluster_states):
            for summary in page.get("Clusters", []):
                try:
                    cluster = self.emr.describe_cluster(ClusterId=summary["Id"])["Cluster"]
                except (BotoCoreError, ClientError) as e:
                    logger.warning("Skipping EMR cluster %s, describe failed: %s", summary.get("Id"), e)
                    continue

                if self.installed_application(cluster) is None:
                    continue

                candidates.append(cluster)

        return candidates

    def installed_application(self, cluster: builtins.dict[str, Any]) -> str | None:
        """Return the lower-cased name of the installed engine application."""
        for application in cluster.get("Applications", []):
            name = application.get("Name", "").lower()
            if name in self.applications:
                return name
        return None

    def installed_distribution(self, cluster: builtins.dict[str, Any]) -> Distribution | None:
        name = self.installed_application(cluster)
        if name is None:
            return None
        return self.applications[name]

    def get_master_address(self, cluster: builtins.dict[str, Any]) -> str:
        """Return the private IP address of the cluster master node."""
        cluster_id = cluster["Id"]
        collection_type = cluster.get("InstanceCollectionType")

        if collection_type == INSTANCE_GROUP:
            instances = self._master_instances_from_groups(cluster_id)
        elif collection_type == INSTANCE_FLEET:
            instances = self._master_instances_from_fleet(cluster_id)
        else:
            raise UnrecognizedTopologyError(cluster_id, collection_type)

        for instance in instances:
            address = instance.get("PrivateIpAddress")
            if address:
                return address

        raise NoMasterFoundError(cluster_id)

    def _master_instances_from_fleet(self, cluster_id: str) -> builtins.list[builtins.dict[str, Any]]:
        response = self.emr.list_instances(ClusterId=cluster_id, InstanceFleetType=MASTER)
        return response.get("Instances", [])

    def _master_instances_from_groups(self, cluster_id: str) -> builtins.list[builtins.dict[str, Any]]:
        groups = self.emr.list_instance_groups(ClusterId=cluster_id).get("InstanceGroups", [])

        for group in groups:
            if group.get("InstanceGroupType") != MASTER:
                continue

            instances = self.emr.list_instances(ClusterId=cluster_id, InstanceGroupId=group["Id"])
            if instances.get("Instances"):
                return instances["Instances"]

        return []
