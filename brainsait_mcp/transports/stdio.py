from __future__ import annotations

import os
import shlex
import sys
from contextlib import AbstractAsyncContextManager
from typing import Dict, List

from mcp import StdioServerParameters
from mcp.client.stdio import stdio_client
from mcp.server import Server
from mcp.server.stdio import stdio_server

from ..config import Settings
from ..errors import InvalidTransportParameters
from ..models import LocalTransport
from .base import ClientTransportHandle, ServerTransportHandle, StreamPair

SERVER_MODULE = "brainsait_mcp.main"


def server_parameters(kind: LocalTransport, settings: Settings) -> StdioServerParameters:
    """
    Command used to spawn the server for a local pipe.

    Without an explicit command the bundled server runs under the current
    interpreter with the client's compliance flags.
    """
    env: Dict[str, str] = dict(os.environ)
    if kind.command:
        return StdioServerParameters(command=kind.command, args=list(kind.args), env=env)
    if settings.server_command:
        parts = shlex.split(settings.server_command)
        if not parts:
            raise InvalidTransportParameters("Server command is empty")
        return StdioServerParameters(command=parts[0], args=parts[1:], env=env)

    env.update(
        {
            "BRAINSAIT_COMPLIANT_MODE": str(settings.compliant_mode).lower(),
            "BRAINSAIT_ENCRYPTION_ENABLED": str(settings.encryption_enabled).lower(),
            "BRAINSAIT_LOG_LEVEL": settings.log_level,
        }
    )
    args: List[str] = ["-m", SERVER_MODULE, "--transport", "stdio"]
    return StdioServerParameters(command=sys.executable, args=args, env=env)


class StdioClientHandle(ClientTransportHandle):
    """Spawns the server as a subprocess and talks to it over its stdio."""

    def __init__(self, kind: LocalTransport, settings: Settings) -> None:
        super().__init__(kind)
        self.parameters = server_parameters(kind, settings)

    def _open(self) -> AbstractAsyncContextManager[StreamPair]:
        return stdio_client(self.parameters)


class StdioServerHandle(ServerTransportHandle):
    """Serves a single MCP session on this process's stdin/stdout."""

    async def _serve(self, server: Server) -> None:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
