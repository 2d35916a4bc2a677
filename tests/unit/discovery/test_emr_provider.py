from typing import Any
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from trino_exporter.discovery.emr import EMRClusterProvider
from trino_exporter.exceptions import (
    DiscoveryError,
    NoMasterFoundError,
    UnrecognizedTopologyError,
)
from trino_exporter.models import Distribution, Engine


def _client_error(operation: str, code: str = "ThrottlingException") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "Rate exceeded"}}, operation)


def _cluster(
    cluster_id: str,
    name: str,
    applications: list[str],
    collection_type: str = "INSTANCE_GROUP",
) -> dict[str, Any]:
    return {
        "Id": cluster_id,
        "Name": name,
        "InstanceCollectionType": collection_type,
        "Applications": [{"Name": app} for app in applications],
    }


def _emr_client(clusters: list[dict[str, Any]], failing_describe: set[str] | None = None) -> MagicMock:
    """Build a fake EMR client; every cluster's master has IP 10.0.<n>.10."""
    failing_describe = failing_describe or set()
    by_id = {cluster["Id"]: cluster for cluster in clusters}
    addresses = {cluster["Id"]: f"10.0.{index}.10" for index, cluster in enumerate(clusters, start=1)}

    def describe_cluster(ClusterId: str) -> dict[str, Any]:
        if ClusterId in failing_describe:
            raise _client_error("DescribeCluster")
        return {"Cluster": by_id[ClusterId]}

    def list_instance_groups(ClusterId: str) -> dict[str, Any]:
        return {
            "InstanceGroups": [
                {"Id": f"ig-core-{ClusterId}", "InstanceGroupType": "CORE"},
                {"Id": f"ig-master-{ClusterId}", "InstanceGroupType": "MASTER"},
            ]
        }

    def list_instances(ClusterId: str, **kwargs: Any) -> dict[str, Any]:
        if kwargs.get("InstanceGroupId") == f"ig-master-{ClusterId}" or kwargs.get("InstanceFleetType") == "MASTER":
            return {"Instances": [{"Id": "i-master", "PrivateIpAddress": addresses[ClusterId]}]}
        return {"Instances": []}

    paginator = MagicMock()
    paginator.paginate.return_value = [
        {"Clusters": [{"Id": cluster["Id"]} for cluster in clusters[:1]]},
        {"Clusters": [{"Id": cluster["Id"]} for cluster in clusters[1:]]},
    ]

    emr = MagicMock()
    emr.get_paginator.return_value = paginator
    emr.describe_cluster.side_effect = describe_cluster
    emr.list_instance_groups.side_effect = list_instance_groups
    emr.list_instances.side_effect = list_instances
    return emr


@pytest.mark.asyncio
async def test_emr_provider_resolves_trino_coordinators() -> None:
    emr = _emr_client(
        [
            _cluster("j-1", "analytics", ["Hadoop", "Trino"]),
            _cluster("j-2", "spark-only", ["Spark"]),
            _cluster("j-3", "reporting", ["TRINO"], collection_type="INSTANCE_FLEET"),
        ]
    )
    provider = EMRClusterProvider(emr, engine=Engine.TRINO)

    clusters = await provider.provide()

    assert set(clusters) == {"analytics", "reporting"}
    assert clusters["analytics"].host == "http://10.0.1.10:8889"
    assert clusters["reporting"].host == "http://10.0.3.10:8889"
    assert clusters["analytics"].distribution is None
    emr.get_paginator.return_value.paginate.assert_called_once_with(ClusterStates=["WAITING"])


def test_emr_provider_maps_presto_applications_to_distributions() -> None:
    emr = _emr_client(
        [
            _cluster("j-1", "legacy", ["Presto"]),
            _cluster("j-2", "modern", ["PrestoSQL"]),
            _cluster("j-3", "trino", ["Trino"]),
        ]
    )
    provider = EMRClusterProvider(emr, engine=Engine.PRESTO)

    clusters = provider.list_coordinators()

    assert clusters["legacy"].distribution is Distribution.PRESTODB
    assert clusters["modern"].distribution is Distribution.PRESTOSQL
    assert "trino" not in clusters


def test_emr_provider_skips_clusters_whose_describe_fails() -> None:
    emr = _emr_client(
        [
            _cluster("j-1", "broken", ["Trino"]),
            _cluster("j-2", "healthy", ["Trino"]),
        ],
        failing_describe={"j-1"},
    )

    clusters = EMRClusterProvider(emr).list_coordinators()

    assert list(clusters) == ["healthy"]


def test_emr_provider_rejects_unknown_topology() -> None:
    emr = _emr_client([_cluster("j-1", "odd", ["Trino"], collection_type="INSTANCE_MAGIC")])

    with pytest.raises(UnrecognizedTopologyError) as excinfo:
        EMRClusterProvider(emr).list_coordinators()

    assert excinfo.value.collection_type == "INSTANCE_MAGIC"


def test_emr_provider_fails_when_no_master_is_found() -> None:
    emr = _emr_client([_cluster("j-1", "headless", ["Trino"])])
    emr.list_instances.side_effect = lambda ClusterId, **kwargs: {"Instances": []}

    with pytest.raises(NoMasterFoundError, match="j-1"):
        EMRClusterProvider(emr).list_coordinators()


def test_emr_provider_master_lookup_errors_fail_the_call() -> None:
    emr = _emr_client(
        [
            _cluster("j-1", "analytics", ["Trino"]),
            _cluster("j-2", "reporting", ["Trino"]),
        ]
    )
    emr.list_instance_groups.side_effect = _client_error("ListInstanceGroups", code="AccessDeniedException")

    with pytest.raises(DiscoveryError) as excinfo:
        EMRClusterProvider(emr).list_coordinators()

    assert isinstance(excinfo.value.cause, ClientError)


def test_emr_provider_listing_errors_are_wrapped() -> None:
    emr = MagicMock()
    emr.get_paginator.return_value.paginate.side_effect = _client_error("ListClusters")

    with pytest.raises(DiscoveryError, match="EMR cluster discovery failed"):
        EMRClusterProvider(emr, cluster_states=["RUNNING", "WAITING"]).list_coordinators()
