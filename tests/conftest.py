"""Pytest fixtures for keyed-metrics tests."""

from collections.abc import AsyncIterator, Iterator
import os

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("KEYED_METRICS_ENABLED", "true")
os.environ.setdefault("KEYED_METRICS_LOG_LEVEL", "DEBUG")

from keyed_metrics.counters.keys import KeyTypeRegistry
from keyed_metrics.lib.metrics import METRICS, MetricsRegistry
from keyed_metrics.main import app as fastapi_app


@pytest.fixture(scope="session")
def app() -> FastAPI:
    """Return the FastAPI application instance."""
    return fastapi_app


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Provide an `httpx.AsyncClient` wired to the FastAPI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture(autouse=True)
def reset_runtime(app: FastAPI) -> Iterator[None]:
    """Reset process-wide metrics and tracked counters across tests."""

    reporter = getattr(app.state, "reporter", None)
    METRICS.reset()
    if reporter is not None:
        reporter.reset()
    yield
    METRICS.reset()
    if reporter is not None:
        reporter.reset()


@pytest.fixture()
def registry() -> MetricsRegistry:
    """A private, enabled metrics context."""
    return MetricsRegistry(enabled=True)


@pytest.fixture()
def key_types() -> KeyTypeRegistry:
    """An empty key type registry."""
    return KeyTypeRegistry()
