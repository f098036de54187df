from __future__ import annotations

import logging
from typing import Any, Awaitable, Dict, Iterable, List, Optional, TypeVar

from mcp import types
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from pydantic import AnyUrl

from .catalog import ContentRegistry, build_registry
from .config import Settings
from .dispatcher import LANGUAGE_ARGUMENT, RequestDispatcher
from .errors import HealthcareMCPError
from .models import PromptDefinition, ResourceDefinition, ToolDefinition
from .transports import ServerTransportHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _dispatch(operation: Awaitable[T]) -> T:
    """Await a dispatcher call, turning typed errors into JSON-RPC errors."""
    try:
        return await operation
    except HealthcareMCPError as e:
        logger.warning("Request rejected: %s: %s", type(e).__name__, e)
        raise e.to_mcp_error() from e


def to_mcp_prompt(definition: PromptDefinition) -> types.Prompt:
    return types.Prompt(
        name=definition.id,
        description=definition.description,
        arguments=[
            types.PromptArgument(
                name=name,
                description=description,
                required=name != LANGUAGE_ARGUMENT,
            )
            for name, description in definition.argument_specs.items()
        ],
    )


def to_mcp_resource(definition: ResourceDefinition) -> types.Resource:
    return types.Resource(
        uri=AnyUrl(definition.uri),
        name=definition.name,
        description=definition.description,
        mimeType=definition.mime_type,
    )


class HealthcareServer:
    """
    BrainSAIT healthcare MCP server.

    Owns one content registry, the dispatcher built over it and the MCP
    protocol server those are bound into. One instance serves one transport
    handle at a time.
    """

    def __init__(
        self,
        settings: Settings,
        registry: Optional[ContentRegistry] = None,
    ) -> None:
        self._settings = settings
        self._registry = registry if registry is not None else build_registry()
        self.dispatcher = RequestDispatcher(settings, self._registry)
        self.mcp_server = self._create_mcp_server()
        self._handle: Optional[ServerTransportHandle] = None

        logger.info(
            "BrainSAIT Healthcare MCP Server initialized: application=%s version=%s "
            "hipaa_mode=%s encryption=%s",
            settings.application_name,
            settings.version,
            settings.compliant_mode,
            settings.encryption_enabled,
        )
        logger.info(
            "Medical content initialized: prompts=%d resources=%d tools=%d",
            len(self._registry.list_prompts()),
            len(self._registry.list_resources()),
            len(self._registry.list_tools()),
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def registry(self) -> ContentRegistry:
        return self._registry

    def to_mcp_tool(self, definition: ToolDefinition) -> types.Tool:
        return types.Tool(
            name=definition.id,
            description=definition.description,
            inputSchema=self._registry.tool_input_schema(definition.id),
        )

    def _create_mcp_server(self) -> Server:
        server = Server(self._settings.application_name, version=self._settings.version)
        dispatcher = self.dispatcher

        @server.list_prompts()
        async def list_prompts() -> List[types.Prompt]:
            definitions = await _dispatch(dispatcher.list_prompts())
            return [to_mcp_prompt(d) for d in definitions]

        @server.get_prompt()
        async def get_prompt(
            name: str,
            arguments: Optional[Dict[str, str]],
        ) -> types.GetPromptResult:
            text = await _dispatch(dispatcher.get_prompt(name, arguments or {}))
            return types.GetPromptResult(
                description=text,
                messages=[
                    types.PromptMessage(
                        role="assistant",
                        content=types.TextContent(type="text", text=text),
                    )
                ],
            )

        @server.list_resources()
        async def list_resources() -> List[types.Resource]:
            definitions = await _dispatch(dispatcher.list_resources())
            return [to_mcp_resource(d) for d in definitions]

        @server.read_resource()
        async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
            payload = await _dispatch(dispatcher.read_resource(str(uri)))
            return [ReadResourceContents(content=payload.text, mime_type=payload.mime_type)]

        @server.list_tools()
        async def list_tools() -> List[types.Tool]:
            definitions = await _dispatch(dispatcher.list_tools())
            return [self.to_mcp_tool(d) for d in definitions]

        # Registered directly: the call_tool() decorator folds every exception
        # into an isError result, which would erase the error type.
        async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
            arguments: Dict[str, Any] = request.params.arguments or {}
            text = await _dispatch(dispatcher.call_tool(request.params.name, arguments))
            return types.ServerResult(
                types.CallToolResult(
                    content=[types.TextContent(type="text", text=text)],
                    isError=False,
                )
            )

        server.request_handlers[types.CallToolRequest] = call_tool
        logger.info("MCP server handlers configured")
        return server

    async def serve(self, handle: ServerTransportHandle) -> None:
        """Serve MCP sessions on `handle` until it is closed."""
        if self._handle is not None:
            raise RuntimeError("Server is already bound to a transport")
        self._handle = handle
        logger.info("BrainSAIT Healthcare MCP Server started (transport=%s)", handle.kind.name)
        try:
            await handle.serve(self.mcp_server)
        finally:
            logger.info("BrainSAIT Healthcare MCP Server stopped")

    async def shutdown(self) -> None:
        """
        Graceful stop: refuse new operations, let in-flight ones finish, then
        close the transport handle. Safe to call more than once.
        """
        gate = self.dispatcher.gate
        if gate.closing:
            return
        logger.info("Shutting down: %d operation(s) in flight", gate.in_flight)
        gate.close()
        await gate.wait_idle()
        if self._handle is not None:
            await self._handle.aclose()
