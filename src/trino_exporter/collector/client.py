"""
HTTP protocol spoken with a single coordinator.

Presto serves its statistics unauthenticated at /v1/cluster. Trino serves them
from the web UI API, which needs a session cookie obtained by logging in with
a synthetic user and no password.
"""

from __future__ import annotations

import logging

import aiohttp
from pydantic import ValidationError

from ..exceptions import ClusterScrapeError, LoginError
from ..models import ClusterInfo, ClusterStats, Engine

logger = logging.getLogger(__name__)

LOGIN_PATH = "/ui/login"
LOGIN_USER = "exporter"


class CoordinatorClient:
    """Read cluster statistics from coordinators over a shared session."""

    def __init__(self, session: aiohttp.ClientSession, engine: Engine = Engine.TRINO):
        self.session = session
        self.engine = engine

    async def fetch_stats(self, cluster: ClusterInfo) -> ClusterStats:
        """Fetch and parse the statistics document of one cluster.

        Raises:
            LoginError: If the coordinator does not hand out a session cookie.
            ClusterScrapeError: On a non-200 status or a malformed document.
            aiohttp.ClientError: On transport failures.
        """
        headers = {}
        if self.engine.requires_login:
            headers["Cookie"] = await self.login(cluster)

        url = f"{cluster.base_url}{self.engine.stats_path}"
        async with self.session.get(url, headers=headers, allow_redirects=False) as response:
            if response.status != 200:
                raise ClusterScrapeError(f"unexpected status code {response.status} != 200 from {url}")
            body = await response.read()

        try:
            return ClusterStats.model_validate_json(body)
        except ValidationError as e:
            raise ClusterScrapeError(f"malformed statistics document from {url}", cause=e) from e

    async def login(self, cluster: ClusterInfo) -> str:
        """Log into the coordinator web UI and return the raw Set-Cookie value."""
        url = f"{cluster.base_url}{LOGIN_PATH}"
        form = {"username": LOGIN_USER, "password": "", "redirectPath": ""}

        # The UI answers with a redirect; the cookie is on that response.
        async with self.session.post(url, data=form, allow_redirects=False) as response:
            cookie = response.headers.get("Set-Cookie")

        if not cookie:
            raise LoginError(f"no Set-Cookie header present in response from {url}")

        logger.debug("Logged into %s", cluster.base_url)
        return cookie
