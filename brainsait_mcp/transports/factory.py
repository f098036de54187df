from __future__ import annotations

import logging
import sys
from typing import Optional

from .. import compliance
from ..config import Settings
from ..errors import InvalidTransportParameters, UnsupportedTransport
from ..models import (
    Cloud,
    Cloudflare,
    DeploymentEnvironment,
    Development,
    EdgeWorker,
    HttpEndpoint,
    LocalTransport,
    RaspberryPi,
    SecuredSocket,
    TransportKind,
    TransportRole,
)
from .base import TransportHandle
from .http import HttpClientHandle, HttpServerHandle, edge_worker_handle
from .socket import SocketClientHandle, SocketServerHandle
from .stdio import StdioClientHandle, StdioServerHandle

logger = logging.getLogger(__name__)

# Runtimes without subprocesses or raw sockets (Pyodide, WASI).
SANDBOXED_PLATFORMS = ("emscripten", "wasi")

TRANSPORT_NAMES = ("stdio", "http", "network", "edge-worker")


def _sandboxed() -> bool:
    return sys.platform in SANDBOXED_PLATFORMS


def validate_security(kind: TransportKind, settings: Settings) -> None:
    """
    Enforce the minimum transport security for compliant mode.

    Raises ComplianceViolation; must run before any message is sent.
    """
    compliance.check_transport(settings, kind)


def open_transport(
    kind: TransportKind,
    settings: Settings,
    role: TransportRole = TransportRole.CLIENT,
) -> TransportHandle:
    """
    Create the transport handle for `kind` in the given role.

    Security validation runs first. Raises UnsupportedTransport when the
    kind has no implementation for the role on this runtime, and
    InvalidTransportParameters when the kind's fields are missing or invalid.
    """
    validate_security(kind, settings)

    if isinstance(kind, LocalTransport):
        if role is TransportRole.SERVER:
            return StdioServerHandle(kind)
        if _sandboxed():
            raise UnsupportedTransport(f"Stdio transport not available on {sys.platform}")
        return StdioClientHandle(kind, settings)

    if isinstance(kind, HttpEndpoint):
        if role is TransportRole.SERVER:
            return HttpServerHandle(kind, settings)
        return HttpClientHandle(kind)

    if isinstance(kind, SecuredSocket):
        if _sandboxed():
            raise UnsupportedTransport(f"Network transport not available on {sys.platform}")
        if role is TransportRole.SERVER:
            return SocketServerHandle(kind, settings)
        return SocketClientHandle(kind, settings)

    if isinstance(kind, EdgeWorker):
        if role is TransportRole.SERVER:
            raise UnsupportedTransport("Edge worker transport is client-only; the worker hosts the server")
        return edge_worker_handle(kind)

    raise UnsupportedTransport(f"Unknown transport kind: {kind!r}")


def transport_kind_from_options(
    name: str,
    host: str = "localhost",
    port: int = 8080,
    url: Optional[str] = None,
    edge_worker_url: Optional[str] = None,
    edge_worker_token: Optional[str] = None,
) -> TransportKind:
    """Map CLI transport options to a transport kind."""
    normalized = (name or "").strip().lower()
    if normalized == "stdio":
        return LocalTransport()
    if normalized == "http":
        return HttpEndpoint(url=url or f"http://{host}:{port}/mcp")
    if normalized == "network":
        return SecuredSocket(host=host, port=port)
    if normalized in ("edge-worker", "cloudflare"):
        if not edge_worker_url:
            raise InvalidTransportParameters(
                "Edge worker transport requires --edge-worker-url and --edge-worker-token"
            )
        return EdgeWorker(url=edge_worker_url, api_token=edge_worker_token)
    raise InvalidTransportParameters(f"Unknown transport type: {name}")


def kind_from_settings(settings: Settings) -> TransportKind:
    return transport_kind_from_options(
        settings.transport,
        host=settings.host,
        port=settings.port,
        url=settings.url,
        edge_worker_url=settings.edge_worker_url,
        edge_worker_token=settings.edge_worker_token,
    )


def recommended_transport(
    environment: DeploymentEnvironment,
    settings: Optional[Settings] = None,
) -> TransportKind:
    """
    Pick the transport kind that suits a deployment environment.

    With `settings` the recommendation is also run through
    `validate_security`, so a plaintext cloud URL in compliant mode raises
    ComplianceViolation here rather than at connect time.
    """
    if isinstance(environment, Development):
        kind: TransportKind = LocalTransport()
    elif isinstance(environment, RaspberryPi):
        kind = SecuredSocket(host=environment.host, port=environment.port)
    elif isinstance(environment, Cloudflare):
        kind = EdgeWorker(url=environment.worker_url, api_token=environment.api_token)
    elif isinstance(environment, Cloud):
        kind = HttpEndpoint(url=environment.url)
    else:
        raise InvalidTransportParameters(f"Unknown deployment environment: {environment!r}")

    if settings is not None:
        validate_security(kind, settings)
    logger.debug("Recommended %s transport for %s", kind.name, type(environment).__name__)
    return kind
