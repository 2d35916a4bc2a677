import pytest
from aiohttp.test_utils import TestClient, TestServer
from fakes import FixedProvider
from prometheus_client import CollectorRegistry

from trino_exporter.collector.collector import ClusterCollector
from trino_exporter.server import create_app


@pytest.mark.asyncio
async def test_metrics_endpoint_serves_registry() -> None:
    registry = CollectorRegistry()
    registry.register(ClusterCollector(FixedProvider()))

    async with TestClient(TestServer(create_app(registry, "/custom-metrics"))) as client:
        response = await client.get("/custom-metrics")
        body = await response.text()

        landing = await client.get("/")
        landing_body = await landing.text()

    assert response.status == 200
    assert response.headers["Content-Type"].startswith("text/plain")
    assert "# TYPE trino_cluster_up gauge" in body
    assert landing.status == 200
    assert 'href="/custom-metrics"' in landing_body
