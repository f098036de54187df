from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Optional

import pytest

from brainsait_mcp.catalog import ContentRegistry, build_registry
from brainsait_mcp.client import HealthcareClient
from brainsait_mcp.config import Settings
from brainsait_mcp.server import HealthcareServer
from brainsait_mcp.transports import InProcessClientHandle


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep BRAINSAIT_* variables of the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("BRAINSAIT_"):
            monkeypatch.delenv(key)


@pytest.fixture
def make_settings() -> Callable[..., Settings]:
    def factory(**overrides: Any) -> Settings:
        return Settings(_env_file=None, **overrides)

    return factory


@pytest.fixture
def settings(make_settings: Callable[..., Settings]) -> Settings:
    return make_settings()


@pytest.fixture
def registry() -> ContentRegistry:
    return build_registry()


@asynccontextmanager
async def _connected_client(
    client_settings: Settings,
    server_settings: Optional[Settings] = None,
) -> AsyncIterator[HealthcareClient]:
    server = HealthcareServer(server_settings or client_settings)
    client = HealthcareClient(client_settings)
    await client.connect(InProcessClientHandle(server.mcp_server))
    try:
        yield client
    finally:
        await client.disconnect()


@pytest.fixture
def connected_client():
    """
    Async context manager connecting a client to an in-process server.

    Used inside the test body so the session's task groups open and close
    in the test's own task.
    """
    return _connected_client
