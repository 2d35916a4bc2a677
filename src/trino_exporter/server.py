"""
Metrics exposition endpoint.

Serves the registry in the Prometheus text format from an aiohttp
application. Collection blocks on network I/O, so the registry is rendered
in the default executor and the event loop stays free for other requests.
"""

from __future__ import annotations

import asyncio
import logging

from aiohttp import web
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest

logger = logging.getLogger(__name__)

REGISTRY_KEY = web.AppKey("registry", CollectorRegistry)
METRICS_PATH_KEY = web.AppKey("metrics_path", str)

LANDING_PAGE = """<html>
<head><title>Trino Exporter</title></head>
<body>
<h1>Trino Exporter</h1>
<p><a href="{path}">Metrics</a></p>
</body>
</html>
"""


async def metrics_handler(request: web.Request) -> web.Response:
    registry = request.app[REGISTRY_KEY]
    loop = asyncio.get_running_loop()
    output = await loop.run_in_executor(None, generate_latest, registry)
    return web.Response(body=output, headers={"Content-Type": CONTENT_TYPE_LATEST})


async def landing_handler(request: web.Request) -> web.Response:
    path = request.app[METRICS_PATH_KEY]
    return web.Response(text=LANDING_PAGE.format(path=path), content_type="text/html")


def create_app(registry: CollectorRegistry, metrics_path: str = "/metrics") -> web.Application:
    """Create the exposition application."""
    app = web.Application()
    app[REGISTRY_KEY] = registry
    app[METRICS_PATH_KEY] = metrics_path

    app.router.add_get(metrics_path, metrics_handler)
    if metrics_path != "/":
        app.router.add_get("/", landing_handler)

    return app


def run_server(registry: CollectorRegistry, host: str, port: int, metrics_path: str = "/metrics") -> None:
    """Serve the registry until the process is interrupted."""
    app = create_app(registry, metrics_path)
    logger.info("Started metrics server on %s:%d%s", host, port, metrics_path)
    web.run_app(app, host=host, port=port, print=None, access_log=None)
