"""
TLS socket transport.

JSON-RPC messages travel newline-delimited over a TLS-wrapped TCP stream,
the same framing the MCP stdio transport uses. `TCP_NODELAY` is set on both
ends for low-latency exchanges. The server runs one MCP session per accepted
connection; sessions share nothing but the (read-only) server.
"""

from __future__ import annotations

import logging
import socket
import ssl
from contextlib import asynccontextmanager
from functools import partial
from typing import AsyncIterator

import anyio
from anyio.abc import ByteStream, SocketAttribute
from anyio.streams.buffered import BufferedByteReceiveStream
from anyio.streams.tls import TLSListener
from mcp import types
from mcp.server import Server
from mcp.shared.message import SessionMessage
from pydantic import ValidationError

from ..config import Settings
from ..errors import InvalidTransportParameters
from ..models import SecuredSocket
from .base import ClientTransportHandle, ServerTransportHandle, StreamPair

logger = logging.getLogger(__name__)

MAX_MESSAGE_BYTES = 10 * 1024 * 1024  # 10 MB
DELIMITER = b"\n"


def validate_endpoint(kind: SecuredSocket) -> None:
    if not kind.host:
        raise InvalidTransportParameters("Network transport requires a host")
    if not isinstance(kind.port, int) or not 0 < kind.port < 65536:
        raise InvalidTransportParameters(f"Invalid port for network transport: {kind.port!r}")


def set_no_delay(stream: ByteStream) -> None:
    raw = stream.extra(SocketAttribute.raw_socket, None)
    if raw is not None and raw.family in (socket.AF_INET, socket.AF_INET6):
        raw.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)


def client_ssl_context(settings: Settings) -> ssl.SSLContext:
    try:
        return ssl.create_default_context(cafile=settings.tls_cafile)
    except (OSError, ssl.SSLError) as e:
        raise InvalidTransportParameters(f"Cannot load CA file: {e}") from e


def server_ssl_context(settings: Settings) -> ssl.SSLContext:
    if not (settings.tls_certfile and settings.tls_keyfile):
        raise InvalidTransportParameters(
            "Network transport server requires tls_certfile and tls_keyfile"
        )
    context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    try:
        context.load_cert_chain(settings.tls_certfile, settings.tls_keyfile)
    except (OSError, ssl.SSLError) as e:
        raise InvalidTransportParameters(f"Cannot load TLS certificate: {e}") from e
    return context


@asynccontextmanager
async def message_streams(stream: ByteStream) -> AsyncIterator[StreamPair]:
    """Bridge a byte stream to the MCP session's memory object streams."""
    read_writer, read_stream = anyio.create_memory_object_stream(0)
    write_stream, write_reader = anyio.create_memory_object_stream(0)
    buffered = BufferedByteReceiveStream(stream)

    async def pump_in() -> None:
        async with read_writer:
            while True:
                try:
                    line = await buffered.receive_until(DELIMITER, MAX_MESSAGE_BYTES)
                except (
                    anyio.EndOfStream,
                    anyio.IncompleteRead,
                    anyio.DelimiterNotFound,
                    anyio.BrokenResourceError,
                    anyio.ClosedResourceError,
                ):
                    return
                if not line.strip():
                    continue
                try:
                    message = types.JSONRPCMessage.model_validate_json(line)
                except ValidationError as exc:
                    await read_writer.send(exc)
                    continue
                await read_writer.send(SessionMessage(message))

    async def pump_out() -> None:
        async with write_reader:
            async for session_message in write_reader:
                payload = session_message.message.model_dump_json(by_alias=True, exclude_none=True)
                try:
                    await stream.send(payload.encode("utf-8") + DELIMITER)
                except (anyio.BrokenResourceError, anyio.ClosedResourceError):
                    logger.debug("Peer went away with %d bytes unsent", len(payload))
                    return

    async with anyio.create_task_group() as tg:
        tg.start_soon(pump_in)
        tg.start_soon(pump_out)
        try:
            yield read_stream, write_stream
        finally:
            tg.cancel_scope.cancel()


class SocketClientHandle(ClientTransportHandle):
    def __init__(self, kind: SecuredSocket, settings: Settings) -> None:
        super().__init__(kind)
        validate_endpoint(kind)
        self.host = kind.host
        self.port = kind.port
        self.ssl_context = client_ssl_context(settings)

    @asynccontextmanager
    async def _open(self) -> AsyncIterator[StreamPair]:
        stream = await anyio.connect_tcp(
            self.host,
            self.port,
            tls=True,
            ssl_context=self.ssl_context,
            tls_standard_compatible=False,
        )
        async with stream:
            set_no_delay(stream)
            async with message_streams(stream) as streams:
                yield streams


class SocketServerHandle(ServerTransportHandle):
    def __init__(self, kind: SecuredSocket, settings: Settings) -> None:
        super().__init__(kind)
        validate_endpoint(kind)
        self.host = kind.host
        self.port = kind.port
        self.ssl_context = server_ssl_context(settings)

    async def _serve(self, server: Server) -> None:
        listener = TLSListener(
            await anyio.create_tcp_listener(local_host=self.host, local_port=self.port),
            self.ssl_context,
            standard_compatible=False,
        )
        logger.info("Network transport listening on %s:%d (TLS)", self.host, self.port)
        async with listener:
            await listener.serve(partial(self._handle_connection, server))

    async def _handle_connection(self, server: Server, stream: ByteStream) -> None:
        peer = stream.extra(SocketAttribute.remote_address, None)
        logger.info("Connection from %s", peer)
        # a dropped peer ends its own session, never the listener
        try:
            async with stream:
                set_no_delay(stream)
                async with message_streams(stream) as (read_stream, write_stream):
                    await server.run(
                        read_stream,
                        write_stream,
                        server.create_initialization_options(),
                    )
        except* (
            anyio.BrokenResourceError,
            anyio.ClosedResourceError,
            ssl.SSLError,
            ConnectionError,
        ) as group:
            logger.warning("Connection %s dropped: %r", peer, group.exceptions[0])
        else:
            logger.info("Connection closed: %s", peer)
