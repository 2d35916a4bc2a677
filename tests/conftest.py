"""
Global pytest configuration and fixtures for exporter testing.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer
from fakes import CoordinatorState, make_coordinator_app


@pytest.fixture
def coordinator_state() -> CoordinatorState:
    return CoordinatorState()


@pytest_asyncio.fixture
async def coordinator(coordinator_state: CoordinatorState) -> AsyncGenerator[TestServer, None]:
    """A healthy fake coordinator."""
    server = TestServer(make_coordinator_app(coordinator_state))
    await server.start_server()
    yield server
    await server.close()


@pytest_asyncio.fixture
async def failing_coordinator() -> AsyncGenerator[TestServer, None]:
    """A coordinator answering every stats request with HTTP 500."""
    server = TestServer(make_coordinator_app(CoordinatorState(), stats={"error": "boom"}, stats_status=500))
    await server.start_server()
    yield server
    await server.close()
