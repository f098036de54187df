from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional, Union

import httpx
import uvicorn
from mcp.client.streamable_http import streamablehttp_client
from mcp.server import Server

from ..config import Settings
from ..errors import InvalidTransportParameters
from ..http_server import create_http_app
from ..models import EdgeWorker, HttpEndpoint
from .base import ClientTransportHandle, ServerTransportHandle, StreamPair

logger = logging.getLogger(__name__)


def parse_http_url(url: Optional[str]) -> httpx.URL:
    """Validate an endpoint URL: http(s) scheme and a host are required."""
    if not url:
        raise InvalidTransportParameters("An endpoint URL is required")
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise InvalidTransportParameters(f"Invalid endpoint URL '{url}': {e}") from e
    if parsed.scheme not in ("http", "https"):
        raise InvalidTransportParameters(f"Endpoint URL must use http or https: '{url}'")
    if not parsed.host:
        raise InvalidTransportParameters(f"Endpoint URL has no host: '{url}'")
    return parsed


class HttpClientHandle(ClientTransportHandle):
    """
    MCP streamable-HTTP client.

    Also used for edge workers, which only add a bearer token.
    """

    def __init__(self, kind: Union[HttpEndpoint, EdgeWorker], headers: Optional[Dict[str, str]] = None) -> None:
        super().__init__(kind)
        self.url = str(parse_http_url(kind.url))
        self.headers = headers or {}

    @asynccontextmanager
    async def _open(self) -> AsyncIterator[StreamPair]:
        async with streamablehttp_client(self.url, headers=self.headers) as (
            read_stream,
            write_stream,
            _get_session_id,
        ):
            yield read_stream, write_stream


def edge_worker_handle(kind: EdgeWorker) -> HttpClientHandle:
    if not kind.api_token:
        raise InvalidTransportParameters("Edge worker transport requires an API token")
    return HttpClientHandle(kind, headers={"Authorization": f"Bearer {kind.api_token}"})


class HttpServerHandle(ServerTransportHandle):
    """
    FastAPI application served by uvicorn on the endpoint's host and port.

    uvicorn installs its own SIGINT/SIGTERM handling and drains in-flight
    requests on exit.
    """

    handles_signals = True

    def __init__(self, kind: HttpEndpoint, settings: Settings) -> None:
        super().__init__(kind)
        parsed = parse_http_url(kind.url)
        self.settings = settings
        self.host = parsed.host
        self.port = parsed.port or (443 if parsed.scheme == "https" else 80)
        self.path = parsed.path if parsed.path not in ("", "/") else "/mcp"
        self.tls = parsed.scheme == "https"
        if self.tls and not (settings.tls_certfile and settings.tls_keyfile):
            raise InvalidTransportParameters(
                "HTTPS endpoint requires tls_certfile and tls_keyfile"
            )
        self._uvicorn: Optional[uvicorn.Server] = None

    async def _serve(self, server: Server) -> None:
        app = create_http_app(server, self.settings, mcp_path=self.path)
        config = uvicorn.Config(
            app,
            host=self.host,
            port=self.port,
            log_level=self.settings.log_level.lower(),
            access_log=True,
            ssl_certfile=self.settings.tls_certfile if self.tls else None,
            ssl_keyfile=self.settings.tls_keyfile if self.tls else None,
        )
        self._uvicorn = uvicorn.Server(config)
        logger.info("HTTP transport listening on %s:%d%s", self.host, self.port, self.path)
        await self._uvicorn.serve()

    async def _on_close(self) -> None:
        if self._uvicorn is not None:
            self._uvicorn.should_exit = True
