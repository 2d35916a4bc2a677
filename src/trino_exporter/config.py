"""Strongly typed exporter configuration."""

from __future__ import annotations

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import Engine

DEFAULT_CLUSTERS = "127.0.0.1:8889"


class ExporterSettings(BaseSettings):
    """Runtime configuration loaded from environment variables and `.env` files."""

    model_config = SettingsConfigDict(env_prefix="TRINO_EXPORTER_", env_file=".env", extra="ignore")

    engine: Engine = Field(default=Engine.TRINO, description="Query engine API dialect to scrape")

    bind_address: str = Field(default="0.0.0.0", description="Web server bind address")
    port: int = Field(default=9999, description="Web server port", ge=1, le=65535)
    metrics_path: str = Field(default="/metrics", description="Exporter metrics path")

    clusters: str | None = Field(
        default=None,
        description=f"Clusters to monitor separated by ','; {DEFAULT_CLUSTERS} unless autodiscovery is enabled",
    )

    aws_autodiscovery: bool = Field(
        default=False, description="Autodiscover clusters on EMR (may require permissions)"
    )
    aws_region: str | None = Field(default=None, description="AWS region for EMR discovery")
    aws_profile: str | None = Field(
        default=None, description="AWS shared credentials profile for EMR discovery"
    )
    aws_cluster_states: list[str] = Field(
        default_factory=lambda: ["WAITING"], description="EMR cluster states to consider"
    )
    aws_cache_ttl: float = Field(default=1800.0, description="Seconds to cache EMR discovery", gt=0)

    k8s_autodiscovery: bool = Field(
        default=False, description="Autodiscover coordinator services in Kubernetes"
    )
    k8s_cluster_domain: str = Field(default="cluster.local", description="Kubernetes cluster domain")
    k8s_service_label_selector: str = Field(
        default="", description="Label selector for coordinator services"
    )
    k8s_service_port_name: str = Field(default="http-coord", description="Coordinator service port name")
    kubeconfig: str | None = Field(
        default=None, description="Kubeconfig file; in-cluster configuration when unset"
    )
    k8s_cache_ttl: float = Field(default=600.0, description="Seconds to cache Kubernetes discovery", gt=0)

    cache_sweep_interval: float = Field(
        default=3600.0, description="Seconds between sweeps of expired discovery results", gt=0
    )

    scrape_timeout: float = Field(default=10.0, description="Per-request timeout in seconds", gt=0)
    max_concurrency: int = Field(default=8, description="Clusters scraped in parallel", ge=1)

    log_level: str = Field(default="INFO", description="Application log level")

    @field_validator("engine", mode="before")
    @classmethod
    def _normalize_engine(cls, value: object) -> object:
        if isinstance(value, str):
            return value.lower()
        return value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
        upper_value = value.upper()
        if upper_value not in allowed:
            msg = f"Invalid log level '{value}'. Choose one of: {', '.join(sorted(allowed))}."
            raise ValueError(msg)
        return upper_value

    @field_validator("metrics_path")
    @classmethod
    def _validate_metrics_path(cls, value: str) -> str:
        if not value.startswith("/"):
            return f"/{value}"
        return value

    @model_validator(mode="after")
    def _validate_cache_windows(self) -> ExporterSettings:
        for name in ("aws_cache_ttl", "k8s_cache_ttl"):
            if getattr(self, name) >= self.cache_sweep_interval:
                msg = f"{name} must be shorter than cache_sweep_interval ({self.cache_sweep_interval}s)"
                raise ValueError(msg)
        return self

    @property
    def bind(self) -> tuple[str, int]:
        """Return separate host/port for the metrics server."""
        return self.bind_address, self.port

    @property
    def static_clusters(self) -> str:
        """Static cluster list, with the local default only when nothing is autodiscovered."""
        if self.clusters is not None:
            return self.clusters
        if self.aws_autodiscovery or self.k8s_autodiscovery:
            return ""
        return DEFAULT_CLUSTERS
