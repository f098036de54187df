from __future__ import annotations

import contextlib
import logging
from typing import Any, AsyncIterator, Dict

from fastapi import FastAPI
from mcp.server import Server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.types import Receive, Scope, Send

from .config import Settings

logger = logging.getLogger(__name__)


class StreamableHTTPEndpoint:
    """ASGI endpoint handing every request to the MCP session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager) -> None:
        self.session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.session_manager.handle_request(scope, receive, send)


def create_http_app(
    server: Server,
    settings: Settings,
    mcp_path: str = "/mcp",
) -> FastAPI:
    """
    Create the FastAPI app that exposes the MCP server over streamable HTTP.

    MCP over streamable HTTP:
    - Clients POST JSON-RPC messages to `mcp_path`
    - Responses come back as JSON or as an SSE stream
    - A session id header ties requests to one MCP session

    `/health` and `/` are plain JSON endpoints for load balancers and humans.
    """
    session_manager = StreamableHTTPSessionManager(app=server)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with session_manager.run():
            logger.info("MCP session manager started")
            yield
        logger.info("MCP session manager stopped")

    app = FastAPI(
        title=settings.application_name,
        version=settings.version,
        description="BrainSAIT healthcare MCP server",
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "service": settings.application_name}

    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Root endpoint with service info."""
        return {
            "service": settings.application_name,
            "version": settings.version,
            "protocol": "mcp",
            "transport": "streamable-http",
            "hipaa_mode": settings.compliant_mode,
            "encryption": settings.encryption_enabled,
            "languages": sorted(settings.supported_languages),
            "endpoints": {
                "health": "/health",
                "mcp": mcp_path,
            },
        }

    app.add_route(mcp_path, StreamableHTTPEndpoint(session_manager))
    return app
