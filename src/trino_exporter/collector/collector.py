"""
Prometheus collector for discovered query engine clusters.

Each scrape resolves the current cluster list, reads every coordinator
concurrently, and converts the outcomes into gauge families. A failing
cluster only loses its own series and reports up=0; a failing discovery
leaves the whole scrape empty.
"""

from __future__ import annotations

import asyncio
import builtins
import logging
from collections.abc import Iterator

import aiohttp
from prometheus_client.core import GaugeMetricFamily

from ..discovery.base import ClusterProvider
from ..exceptions import ClusterScrapeError, DiscoveryError
from ..models import ClusterInfo, Engine, ScrapeOutcome
from .client import CoordinatorClient
from .metrics import ClusterMetrics

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
DEFAULT_MAX_CONCURRENCY = 8


class ClusterCollector:
    """Custom collector publishing coordinator statistics per cluster."""

    def __init__(
        self,
        provider: ClusterProvider,
        engine: Engine = Engine.TRINO,
        timeout: float = DEFAULT_TIMEOUT,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ):
        self.provider = provider
        self.engine = engine
        self.timeout = timeout
        self.max_concurrency = max_concurrency
        self.metrics = ClusterMetrics.for_engine(engine)

    def describe(self) -> Iterator[GaugeMetricFamily]:
        for descriptor in self.metrics.all():
            yield descriptor.family()

    def collect(self) -> Iterator[GaugeMetricFamily]:
        try:
            outcomes = asyncio.run(self.scrape())
        except DiscoveryError as e:
            logger.error("Cluster discovery failed, skipping scrape: %s", e)
            return

        yield from self.build_families(outcomes)

    async def scrape(self) -> builtins.list[ScrapeOutcome]:
        """Discover clusters and collect each of them independently.

        Raises:
            DiscoveryError: If the cluster list cannot be established.
        """
        clusters = await self.provider.provide()
        if not clusters:
            logger.warning("No clusters discovered by %s", self.provider.source)
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency)
        timeout = aiohttp.ClientTimeout(total=self.timeout)

        # No cookie jar: each cluster only ever sees its own login cookie.
        async with aiohttp.ClientSession(timeout=timeout, cookie_jar=aiohttp.DummyCookieJar()) as session:
            client = CoordinatorClient(session, self.engine)
            outcomes = await asyncio.gather(
                *(
                    self._scrape_cluster(client, semaphore, name, cluster)
                    for name, cluster in sorted(clusters.items())
                )
            )

        up = sum(1 for outcome in outcomes if outcome.up)
        logger.debug("Scraped %d/%d clusters", up, len(outcomes))
        return list(outcomes)

    async def _scrape_cluster(
        self,
        client: CoordinatorClient,
        semaphore: asyncio.Semaphore,
        name: str,
        cluster: ClusterInfo,
    ) -> ScrapeOutcome:
        async with semaphore:
            try:
                stats = await client.fetch_stats(cluster)
            except (ClusterScrapeError, aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.error("Failed to collect cluster %s at %s: %s", name, cluster.host, str(e) or type(e).__name__)
                return ScrapeOutcome(cluster_name=name, error=e)
            except Exception as e:
                logger.exception("Unexpected error collecting cluster %s at %s", name, cluster.host)
                return ScrapeOutcome(cluster_name=name, error=e)

        return ScrapeOutcome(cluster_name=name, stats=stats)

    def build_families(self, outcomes: builtins.list[ScrapeOutcome]) -> builtins.list[GaugeMetricFamily]:
        """Convert scrape outcomes into gauge families."""
        families = [(descriptor, descriptor.family()) for descriptor in self.metrics.stats]
        up = self.metrics.up.family()

        for outcome in outcomes:
            labels = [outcome.cluster_name]

            if outcome.stats is not None:
                for descriptor, family in families:
                    family.add_metric(labels, getattr(outcome.stats, descriptor.field))

            up.add_metric(labels, 1.0 if outcome.up else 0.0)

        return [family for _, family in families] + [up]
