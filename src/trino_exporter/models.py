"""
Core data model for discovered clusters and their statistics.

ClusterInfo describes how to reach one coordinator, ClusterStats mirrors the
JSON document a coordinator serves, and ScrapeOutcome records what happened
to one cluster during one scrape.
"""

from __future__ import annotations

import builtins
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Engine(Enum):
    """Query engine API flavours the collector can talk to."""

    PRESTO = "presto"
    TRINO = "trino"

    @property
    def metric_namespace(self) -> str:
        return f"{self.value}_cluster"

    @property
    def requires_login(self) -> bool:
        return self is Engine.TRINO

    @property
    def stats_path(self) -> str:
        if self is Engine.TRINO:
            return "/ui/api/stats"
        return "/v1/cluster"


class Distribution(Enum):
    """Presto distribution running on a coordinator."""

    PRESTODB = "prestodb"
    PRESTOSQL = "prestosql"
    UNKNOWN = ""


@dataclass(frozen=True)
class ClusterInfo:
    """Address and metadata of one discovered coordinator."""

    host: str
    distribution: Distribution | None = None

    @property
    def base_url(self) -> str:
        """Return the host with a scheme, defaulting to plain HTTP."""
        if "://" in self.host:
            return self.host.rstrip("/")
        return f"http://{self.host.rstrip('/')}"


# Cluster name -> ClusterInfo, produced fresh by every provider call.
DiscoveryResult = builtins.dict[str, ClusterInfo]


class ClusterStats(BaseModel):
    """Statistics document served by a coordinator."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    running_queries: float = Field(alias="runningQueries")
    blocked_queries: float = Field(alias="blockedQueries")
    queued_queries: float = Field(alias="queuedQueries")
    active_workers: float = Field(alias="activeWorkers")
    running_drivers: float = Field(alias="runningDrivers")
    reserved_memory: float = Field(alias="reservedMemory")
    total_input_rows: float = Field(alias="totalInputRows")
    total_input_bytes: float = Field(alias="totalInputBytes")
    total_cpu_time_secs: float = Field(alias="totalCpuTimeSecs")


@dataclass
class ScrapeOutcome:
    """Result of collecting one cluster during one scrape."""

    cluster_name: str
    stats: ClusterStats | None = None
    error: Exception | None = None

    @property
    def up(self) -> bool:
        return self.stats is not None
