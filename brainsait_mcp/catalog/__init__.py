"""
Content registry.

Each module in this package exposes a `register_*(registry)` function that
adds its definitions to the registry owned by one server instance. The
registry is frozen once populated; lookups and listings never mutate it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from pydantic import BaseModel

from ..language import Language
from ..models import PromptDefinition, ResourceDefinition, ToolDefinition

PromptGenerator = Callable[[Mapping[str, Any], Language], str]
ResourceLoader = Callable[[], Optional[str]]
ToolAnalyzer = Callable[[Any, Language], str]


@dataclass(frozen=True)
class RegisteredPrompt:
    definition: PromptDefinition
    generator: Optional[PromptGenerator] = None


@dataclass(frozen=True)
class RegisteredResource:
    definition: ResourceDefinition
    loader: Optional[ResourceLoader] = None


@dataclass(frozen=True)
class RegisteredTool:
    definition: ToolDefinition
    analyzer: Optional[ToolAnalyzer] = None
    params_model: Optional[Type[BaseModel]] = None


class ContentRegistry:
    """
    In-memory catalog mapping prompt ids, resource URIs and tool ids to their
    definitions and handlers. Listings keep insertion order.
    """

    def __init__(self) -> None:
        self._prompts: Dict[str, RegisteredPrompt] = {}
        self._resources: Dict[str, RegisteredResource] = {}
        self._tools: Dict[str, RegisteredTool] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def _check_open(self) -> None:
        if self._frozen:
            raise RuntimeError("Content registry is frozen")

    def add_prompt(
        self,
        definition: PromptDefinition,
        generator: Optional[PromptGenerator] = None,
    ) -> None:
        self._check_open()
        if definition.id in self._prompts:
            raise ValueError(f"Prompt '{definition.id}' already registered")
        self._prompts[definition.id] = RegisteredPrompt(definition, generator)

    def add_resource(
        self,
        definition: ResourceDefinition,
        loader: Optional[ResourceLoader] = None,
    ) -> None:
        self._check_open()
        if definition.uri in self._resources:
            raise ValueError(f"Resource '{definition.uri}' already registered")
        self._resources[definition.uri] = RegisteredResource(definition, loader)

    def add_tool(
        self,
        definition: ToolDefinition,
        analyzer: Optional[ToolAnalyzer] = None,
        params_model: Optional[Type[BaseModel]] = None,
    ) -> None:
        self._check_open()
        if definition.id in self._tools:
            raise ValueError(f"Tool '{definition.id}' already registered")
        self._tools[definition.id] = RegisteredTool(definition, analyzer, params_model)

    def list_prompts(self) -> List[PromptDefinition]:
        return [entry.definition for entry in self._prompts.values()]

    def list_resources(self) -> List[ResourceDefinition]:
        return [entry.definition for entry in self._resources.values()]

    def list_tools(self) -> List[ToolDefinition]:
        return [entry.definition for entry in self._tools.values()]

    def lookup_prompt(self, prompt_id: str) -> Optional[RegisteredPrompt]:
        return self._prompts.get(prompt_id)

    def lookup_resource(self, uri: str) -> Optional[RegisteredResource]:
        return self._resources.get(uri)

    def lookup_tool(self, tool_id: str) -> Optional[RegisteredTool]:
        return self._tools.get(tool_id)

    def tool_input_schema(self, tool_id: str) -> Dict[str, Any]:
        """
        JSON schema advertised for a tool: the parameter model's schema when
        one is bound, otherwise an open object built from the descriptions.
        """
        entry = self._tools[tool_id]
        if entry.params_model is not None:
            return entry.params_model.model_json_schema()
        return {
            "type": "object",
            "properties": {
                name: {"description": description}
                for name, description in entry.definition.input_schema.items()
            },
            "additionalProperties": True,
        }


def build_registry() -> ContentRegistry:
    """Populate and freeze a registry with the reference medical catalog."""
    from . import prompts, resources, tools

    registry = ContentRegistry()
    prompts.register_prompts(registry)
    resources.register_resources(registry)
    tools.register_tools(registry)
    registry.freeze()
    return registry
