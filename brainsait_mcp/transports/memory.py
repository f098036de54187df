from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import anyio
from mcp.server import Server
from mcp.shared.memory import create_client_server_memory_streams

from ..models import LocalTransport
from .base import ClientTransportHandle, StreamPair


class InProcessClientHandle(ClientTransportHandle):
    """
    Local channel to a server living in the same process.

    The server session runs in a background task for as long as the client
    stays connected.
    """

    def __init__(self, server: Server) -> None:
        super().__init__(LocalTransport())
        self.server = server

    @asynccontextmanager
    async def _open(self) -> AsyncIterator[StreamPair]:
        async with create_client_server_memory_streams() as (client_streams, server_streams):
            async with anyio.create_task_group() as tg:
                tg.start_soon(self._run_server, *server_streams)
                try:
                    yield client_streams
                finally:
                    tg.cancel_scope.cancel()

    async def _run_server(self, read_stream, write_stream) -> None:
        await self.server.run(
            read_stream,
            write_stream,
            self.server.create_initialization_options(),
            raise_exceptions=False,
        )
