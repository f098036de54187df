"""
Request dispatcher.

Resolves the MCP operation kinds against one server's content registry:

- prompts/list, resources/list, tools/list: plain registry reads
- prompts/get: lookup -> compliance gate -> template -> shaping
- resources/read: lookup -> encryption gate -> payload
- tools/call: lookup -> tool gate -> parameter validation -> analyzer -> shaping

The dispatcher holds no state across operations besides the frozen registry
and the operation gate used for cooperative shutdown.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, List, Mapping, Optional

import anyio
from pydantic import ValidationError

from . import compliance
from .catalog import ContentRegistry
from .config import Settings
from .errors import (
    InvalidToolArguments,
    ResourceAccessDenied,
    ServerShuttingDown,
    UnknownPrompt,
    UnknownTool,
)
from .language import Language, detect_language, shape_for_display
from .models import PromptDefinition, ResourceDefinition, ToolDefinition

logger = logging.getLogger(__name__)

LANGUAGE_ARGUMENT = "language"


@dataclass(frozen=True)
class ResourcePayload:
    uri: str
    text: str
    mime_type: str


class OperationGate:
    """
    Tracks in-flight operations so shutdown can stop new ones and wait for
    the running ones to finish.
    """

    def __init__(self) -> None:
        self._in_flight = 0
        self._closing = False
        self._idle: Optional[anyio.Event] = None

    @property
    def closing(self) -> bool:
        return self._closing

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @asynccontextmanager
    async def operation(self, name: str) -> AsyncIterator[None]:
        if self._closing:
            raise ServerShuttingDown(f"Server is shutting down, rejected {name}")
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._in_flight == 0 and self._idle is not None:
                self._idle.set()

    def close(self) -> None:
        self._closing = True

    async def wait_idle(self) -> None:
        if self._in_flight == 0:
            return
        if self._idle is None:
            self._idle = anyio.Event()
        await self._idle.wait()


def resolve_language(arguments: Mapping[str, Any]) -> Language:
    """
    Language requested by the caller.

    An explicit `language` code wins (unrecognised codes mean English).
    Otherwise the language is detected from the other argument values, and
    undetectable text falls back to English.
    """
    code = arguments.get(LANGUAGE_ARGUMENT)
    if isinstance(code, str) and code:
        return Language.parse(code)
    text = " ".join(
        str(value)
        for key, value in arguments.items()
        if key != LANGUAGE_ARGUMENT and isinstance(value, (str, list))
    )
    detected = detect_language(text)
    return Language.ENGLISH if detected is Language.UNKNOWN else detected


class RequestDispatcher:
    def __init__(self, settings: Settings, registry: ContentRegistry) -> None:
        self._settings = settings
        self._registry = registry
        self.gate = OperationGate()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def registry(self) -> ContentRegistry:
        return self._registry

    async def list_prompts(self) -> List[PromptDefinition]:
        async with self.gate.operation("prompts/list"):
            return self._registry.list_prompts()

    async def list_resources(self) -> List[ResourceDefinition]:
        async with self.gate.operation("resources/list"):
            return self._registry.list_resources()

    async def list_tools(self) -> List[ToolDefinition]:
        async with self.gate.operation("tools/list"):
            return self._registry.list_tools()

    async def get_prompt(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None,
        language: Optional[Language] = None,
    ) -> str:
        arguments = arguments or {}
        async with self.gate.operation("prompts/get"):
            entry = self._registry.lookup_prompt(name)
            if entry is None:
                raise UnknownPrompt(name)

            compliance.check_prompt_access(self._settings, arguments)

            if entry.generator is None:
                logger.error("Prompt '%s' is registered without a generator", name)
                raise UnknownPrompt(name)

            language = language or resolve_language(arguments)
            compliance.check_language(self._settings, language)

            text = entry.generator(arguments, language)
            logger.info("Generated prompt '%s' (language=%s)", name, language.value)
            return shape_for_display(text, language)

    async def read_resource(self, uri: str) -> ResourcePayload:
        async with self.gate.operation("resources/read"):
            entry = self._registry.lookup_resource(uri)
            if entry is None:
                raise ResourceAccessDenied(f"Unknown medical resource: {uri}")

            compliance.check_resource_access(self._settings, entry.definition)

            content = entry.loader() if entry.loader is not None else None
            if not content:
                raise ResourceAccessDenied(f"No content available for {uri}")

            logger.info(
                "Medical resource read: %s (encrypted=%s)",
                uri,
                entry.definition.requires_encryption,
            )
            return ResourcePayload(
                uri=uri,
                text=content,
                mime_type=entry.definition.mime_type,
            )

    async def call_tool(
        self,
        name: str,
        arguments: Optional[Mapping[str, Any]] = None,
        language: Optional[Language] = None,
    ) -> str:
        arguments = arguments or {}
        async with self.gate.operation("tools/call"):
            entry = self._registry.lookup_tool(name)
            if entry is None or entry.analyzer is None:
                raise UnknownTool(name)

            compliance.check_tool_access(self._settings, arguments)

            params: Any = dict(arguments)
            if entry.params_model is not None:
                try:
                    params = entry.params_model.model_validate(arguments)
                except ValidationError as e:
                    raise InvalidToolArguments(
                        f"Invalid arguments for '{name}': {e.error_count()} error(s): "
                        + "; ".join(
                            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                            for err in e.errors()
                        )
                    ) from e

            language = language or resolve_language(arguments)
            compliance.check_language(self._settings, language)

            text = entry.analyzer(params, language)
            logger.info("Executed tool '%s' (language=%s)", name, language.value)
            return shape_for_display(text, language)
