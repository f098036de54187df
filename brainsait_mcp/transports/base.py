from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import AsyncIterator, Optional, Tuple

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from mcp.server import Server

from ..models import TransportKind

logger = logging.getLogger(__name__)

ReadStream = MemoryObjectReceiveStream  # of SessionMessage | Exception
WriteStream = MemoryObjectSendStream  # of SessionMessage
StreamPair = Tuple[ReadStream, WriteStream]

__all__ = [
    "ClientTransportHandle",
    "ServerTransportHandle",
    "StreamPair",
    "TransportHandle",
]


class TransportHandle(ABC):
    """
    A channel bound to one transport kind.

    The component that opened the handle owns it and closes it exactly once;
    further `aclose()` calls are no-ops.
    """

    def __init__(self, kind: TransportKind) -> None:
        self.kind = kind
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self._on_close()
        logger.info("Transport closed: %s", self.kind.name)

    async def _on_close(self) -> None:
        return None


class ClientTransportHandle(TransportHandle):
    """
    Client side: yields the MCP read/write streams for one session.

    Leaving the `connect()` block closes the handle. Closing it earlier from
    elsewhere closes the write stream, so no further request can be sent.
    """

    def __init__(self, kind: TransportKind) -> None:
        super().__init__(kind)
        self._streams: Optional[StreamPair] = None

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[StreamPair]:
        if self._closed:
            raise RuntimeError(f"Transport {self.kind.name} is already closed")
        try:
            async with self._open() as (read_stream, write_stream):
                self._streams = (read_stream, write_stream)
                logger.info("Transport connected: %s", self.kind.name)
                yield read_stream, write_stream
        finally:
            self._streams = None
            await self.aclose()

    async def _on_close(self) -> None:
        if self._streams is not None:
            self._streams[1].close()

    @abstractmethod
    def _open(self) -> AbstractAsyncContextManager[StreamPair]:
        ...


class ServerTransportHandle(TransportHandle):
    """Server side: runs MCP sessions until the handle is closed."""

    handles_signals = False

    def __init__(self, kind: TransportKind) -> None:
        super().__init__(kind)
        self._cancel_scope: Optional[anyio.CancelScope] = None

    async def serve(self, server: Server) -> None:
        if self._closed:
            raise RuntimeError(f"Transport {self.kind.name} is already closed")
        with anyio.CancelScope() as scope:
            self._cancel_scope = scope
            await self._serve(server)

    async def _on_close(self) -> None:
        if self._cancel_scope is not None:
            self._cancel_scope.cancel()

    @abstractmethod
    async def _serve(self, server: Server) -> None:
        ...
