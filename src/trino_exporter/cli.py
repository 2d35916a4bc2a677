"""
Command line entry point for the exporter.
"""

import logging
import sys

import click
from botocore.exceptions import BotoCoreError
from kubernetes.config import ConfigException
from prometheus_client import CollectorRegistry
from pydantic import ValidationError

from . import __version__
from .collector import ClusterCollector
from .config import ExporterSettings
from .discovery import create_cluster_provider
from .logging_config import configure_logging
from .models import Engine
from .server import run_server

logger = logging.getLogger("trino_exporter")


def load_settings(**overrides) -> ExporterSettings:
    """Merge command line overrides over environment configuration."""
    values = {key: value for key, value in overrides.items() if value is not None}
    return ExporterSettings(**values)


@click.command()
@click.version_option(__version__, prog_name="trino-exporter")
@click.option(
    "--engine",
    type=click.Choice([engine.value for engine in Engine]),
    help="Query engine API dialect to scrape",
)
@click.option("--addr", "bind_address", help="Web server bind address")
@click.option("--port", type=int, help="Web server port")
@click.option("--path", "metrics_path", help="Exporter metrics path")
@click.option("--cluster", "clusters", help="Clusters to monitor separated by ','")
@click.option(
    "--aws-autodiscovery/--no-aws-autodiscovery",
    default=None,
    help="Autodiscover clusters on EMR (may require permissions)",
)
@click.option("--aws-region", help="AWS region for EMR discovery")
@click.option("--aws-profile", help="AWS credentials profile for EMR discovery")
@click.option(
    "--k8s-autodiscovery/--no-k8s-autodiscovery",
    default=None,
    help="Autodiscover coordinator services in Kubernetes",
)
@click.option("--k8s-cluster-domain", help="Kubernetes cluster domain")
@click.option(
    "--k8s-svc-label-selector", "k8s_service_label_selector", help="Label selector for coordinator services"
)
@click.option("--k8s-svc-port-name", "k8s_service_port_name", help="Coordinator service port name")
@click.option(
    "--kubeconfig",
    type=click.Path(exists=True, dir_okay=False),
    help="Kubeconfig file (defaults to in-cluster configuration)",
)
@click.option("--scrape-timeout", type=float, help="Per-request timeout in seconds")
@click.option("--log-level", help="Application log level")
def main(**overrides):
    """Export Trino and Presto cluster statistics to Prometheus."""
    try:
        settings = load_settings(**overrides)
    except ValidationError as e:
        raise click.UsageError(str(e)) from e

    configure_logging(settings.log_level)

    try:
        provider = create_cluster_provider(settings)
    except (ConfigException, BotoCoreError) as e:
        logger.critical("Unable to initialise cluster discovery: %s", e)
        sys.exit(1)

    registry = CollectorRegistry()
    registry.register(
        ClusterCollector(
            provider,
            engine=settings.engine,
            timeout=settings.scrape_timeout,
            max_concurrency=settings.max_concurrency,
        )
    )

    host, port = settings.bind
    run_server(registry, host, port, settings.metrics_path)


if __name__ == "__main__":
    main()
