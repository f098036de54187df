"""
Transport selection.

`open_transport()` validates a transport kind against the compliance settings
and returns the handle for the requested role:

- stdio: local pipe (subprocess for clients, stdin/stdout for servers)
- http: MCP streamable HTTP (FastAPI + uvicorn on the server side)
- network: TLS socket with newline-delimited JSON-RPC
- edge-worker: streamable HTTP with a bearer token, client only
"""

from .base import ClientTransportHandle, ServerTransportHandle, TransportHandle
from .factory import (
    TRANSPORT_NAMES,
    kind_from_settings,
    open_transport,
    recommended_transport,
    transport_kind_from_options,
    validate_security,
)
from .memory import InProcessClientHandle

__all__ = [
    "ClientTransportHandle",
    "InProcessClientHandle",
    "ServerTransportHandle",
    "TRANSPORT_NAMES",
    "TransportHandle",
    "kind_from_settings",
    "open_transport",
    "recommended_transport",
    "transport_kind_from_options",
    "validate_security",
]
