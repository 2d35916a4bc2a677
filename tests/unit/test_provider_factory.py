from unittest.mock import MagicMock, patch

import pytest

from trino_exporter.config import ExporterSettings
from trino_exporter.discovery.cache import CachedClusterProvider
from trino_exporter.discovery.factory import create_cluster_provider
from trino_exporter.discovery.multi import MultiClusterProvider
from trino_exporter.discovery.static import StaticClusterProvider
from trino_exporter.models import Distribution, Engine


def test_static_only_chain() -> None:
    provider = create_cluster_provider(ExporterSettings(clusters="10.0.0.1:8889", engine=Engine.PRESTO))

    assert isinstance(provider, MultiClusterProvider)
    [static] = provider.providers
    assert isinstance(static, StaticClusterProvider)
    assert static.distribution is Distribution.PRESTODB


def test_autodiscovery_sources_are_cached_in_order() -> None:
    settings = ExporterSettings(
        clusters="",
        aws_autodiscovery=True,
        k8s_autodiscovery=True,
        aws_cache_ttl=1800.0,
        k8s_cache_ttl=300.0,
    )
    emr = MagicMock(source="emr")
    kubernetes = MagicMock(source="kubernetes")

    with (
        patch("trino_exporter.discovery.factory.EMRClusterProvider.from_session", return_value=emr) as from_session,
        patch(
            "trino_exporter.discovery.factory.KubernetesClusterProvider.from_config", return_value=kubernetes
        ) as from_config,
    ):
        provider = create_cluster_provider(settings)

    assert [type(p) for p in provider.providers] == [CachedClusterProvider, CachedClusterProvider]
    assert provider.providers[0].provider is emr
    assert provider.providers[0].ttl == 1800.0
    assert provider.providers[1].provider is kubernetes
    assert provider.providers[1].ttl == 300.0
    from_session.assert_called_once_with(
        engine=Engine.TRINO, region_name=None, profile_name=None, cluster_states=["WAITING"]
    )
    assert from_config.call_args.kwargs["label_selector"] == ""


@pytest.mark.asyncio
async def test_empty_configuration_discovers_nothing() -> None:
    provider = create_cluster_provider(ExporterSettings(clusters=" "))

    assert await provider.provide() == {}


@pytest.mark.parametrize("autodiscovery", ["aws_autodiscovery", "k8s_autodiscovery"])
def test_autodiscovery_replaces_default_cluster(autodiscovery: str) -> None:
    with (
        patch("trino_exporter.discovery.factory.EMRClusterProvider.from_session", return_value=MagicMock(source="emr")),
        patch(
            "trino_exporter.discovery.factory.KubernetesClusterProvider.from_config",
            return_value=MagicMock(source="kubernetes"),
        ),
    ):
        provider = create_cluster_provider(ExporterSettings(**{autodiscovery: True}))

    [cached] = provider.providers
    assert isinstance(cached, CachedClusterProvider)


def test_explicit_clusters_are_kept_alongside_autodiscovery() -> None:
    settings = ExporterSettings(clusters="10.0.0.1:8889", aws_autodiscovery=True, aws_profile="analytics")

    with patch(
        "trino_exporter.discovery.factory.EMRClusterProvider.from_session", return_value=MagicMock(source="emr")
    ) as from_session:
        provider = create_cluster_provider(settings)

    assert [p.source for p in provider.providers] == ["static", "cached(emr)"]
    assert from_session.call_args.kwargs["profile_name"] == "analytics"


@pytest.mark.asyncio
async def test_default_cluster_without_autodiscovery() -> None:
    provider = create_cluster_provider(ExporterSettings())

    assert list(await provider.provide()) == ["127.0.0.1:8889"]
