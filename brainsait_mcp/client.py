"""
Healthcare MCP client.

Wraps an `mcp.ClientSession` opened over one transport handle. Parameters are
narrowed to the supported value shapes before they are sent, remote errors
come back as the same typed errors the server raised, and every text result
is shaped for display in the requested language.
"""

from __future__ import annotations

import base64
import logging
from contextlib import AsyncExitStack
from typing import Any, List, Mapping, Optional

import anyio
from mcp import ClientSession, types
from mcp.shared.exceptions import McpError
from pydantic import AnyUrl

from .compliance import ENCRYPTION_ASSERTION, HIPAA_MODE_FLAG
from .config import Settings
from .dispatcher import LANGUAGE_ARGUMENT
from .errors import (
    ComplianceViolation,
    EncryptionRequired,
    NotConnected,
    ResourceAccessDenied,
    ToolExecutionFailed,
    from_error_data,
)
from .language import Language, shape_for_display
from .models import marshal_parameters, marshal_prompt_arguments
from .transports import ClientTransportHandle

logger = logging.getLogger(__name__)


class HealthcareClient:
    """
    BrainSAIT healthcare MCP client.

    One client is bound to one transport handle at a time. `connect()` and
    `disconnect()` must be awaited from the same task and are idempotent.
    Operations are serialized: each runs to completion before the next starts.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._lock = anyio.Lock()
        self._stack: Optional[AsyncExitStack] = None
        self._session: Optional[ClientSession] = None
        self._handle: Optional[ClientTransportHandle] = None

        logger.info(
            "BrainSAIT Healthcare MCP Client initialized: application=%s version=%s languages=%s",
            settings.application_name,
            settings.version,
            sorted(settings.supported_languages),
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def connected(self) -> bool:
        return self._session is not None

    async def connect(self, handle: ClientTransportHandle) -> None:
        if self._session is not None:
            return
        stack = AsyncExitStack()
        try:
            read_stream, write_stream = await stack.enter_async_context(handle.connect())
            session = await stack.enter_async_context(ClientSession(read_stream, write_stream))
            await session.initialize()
        except BaseException:
            await stack.aclose()
            raise
        self._stack = stack
        self._session = session
        self._handle = handle
        logger.info("Connected to MCP server (transport=%s)", handle.kind.name)

    async def disconnect(self) -> None:
        if self._stack is None:
            return
        stack, self._stack = self._stack, None
        self._session = None
        self._handle = None
        await stack.aclose()
        logger.info("Disconnected from MCP server")

    async def __aenter__(self) -> "HealthcareClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.disconnect()

    def _require_session(self) -> ClientSession:
        if self._session is None:
            raise NotConnected()
        return self._session

    async def _call(self, operation: str, coro_factory) -> Any:
        async with self._lock:
            session = self._require_session()
            try:
                return await coro_factory(session)
            except McpError as e:
                typed = from_error_data(e.error)
                if typed is None:
                    raise
                logger.warning("%s failed: %s: %s", operation, type(typed).__name__, typed)
                raise typed from e

    async def list_prompts(self) -> List[types.Prompt]:
        result = await self._call("prompts/list", lambda s: s.list_prompts())
        logger.debug("Retrieved medical prompts: count=%d", len(result.prompts))
        return list(result.prompts)

    async def list_resources(self) -> List[types.Resource]:
        result = await self._call("resources/list", lambda s: s.list_resources())
        logger.debug("Retrieved medical resources: count=%d", len(result.resources))
        return list(result.resources)

    async def list_tools(self) -> List[types.Tool]:
        result = await self._call("tools/list", lambda s: s.list_tools())
        logger.debug("Retrieved healthcare tools: count=%d", len(result.tools))
        return list(result.tools)

    async def consult(
        self,
        prompt_name: str,
        patient_data: Mapping[str, Any],
        language: Language = Language.ENGLISH,
    ) -> str:
        """
        Run a medical consultation prompt.

        Refused locally, without a round trip, unless compliant mode is on.
        """
        if not self._settings.compliant_mode:
            raise ComplianceViolation("HIPAA compliance not enabled")

        arguments = dict(patient_data)
        arguments[LANGUAGE_ARGUMENT] = language.value
        arguments[ENCRYPTION_ASSERTION] = self._settings.encryption_enabled
        wire_arguments = marshal_prompt_arguments(arguments)

        result: types.GetPromptResult = await self._call(
            "prompts/get",
            lambda s: s.get_prompt(prompt_name, arguments=wire_arguments),
        )
        response = shape_for_display(result.description or "No response", language)

        logger.info(
            "Medical consultation completed: prompt=%s language=%s patient_data_fields=%d",
            prompt_name,
            language.value,
            len(patient_data),
        )
        return response

    async def run_tool(
        self,
        tool_name: str,
        parameters: Mapping[str, Any],
        language: Language = Language.ENGLISH,
    ) -> str:
        arguments = dict(parameters)
        arguments[LANGUAGE_ARGUMENT] = language.value
        arguments[HIPAA_MODE_FLAG] = self._settings.compliant_mode
        wire_arguments = marshal_parameters(arguments)

        result: types.CallToolResult = await self._call(
            "tools/call",
            lambda s: s.call_tool(tool_name, arguments=wire_arguments),
        )
        text = "\n".join(
            block.text for block in result.content if isinstance(block, types.TextContent)
        )
        if result.isError:
            raise ToolExecutionFailed(text or f"Tool '{tool_name}' failed")

        logger.info(
            "Healthcare tool executed: tool=%s language=%s parameters=%d",
            tool_name,
            language.value,
            len(parameters),
        )
        return shape_for_display(text, language)

    async def access_resource(self, uri: str) -> bytes:
        """
        Read a medical resource.

        Refused locally unless encryption is enabled. Text content is returned
        UTF-8 encoded, blob content base64-decoded.
        """
        if not self._settings.encryption_enabled:
            raise EncryptionRequired()

        result: types.ReadResourceResult = await self._call(
            "resources/read",
            lambda s: s.read_resource(AnyUrl(uri)),
        )
        if not result.contents:
            raise ResourceAccessDenied(f"No content returned for {uri}")

        logger.info("Medical resource accessed: uri=%s", uri)
        content = result.contents[0]
        if isinstance(content, types.TextResourceContents):
            return content.text.encode("utf-8")
        if isinstance(content, types.BlobResourceContents):
            return base64.b64decode(content.blob)
        return b""
