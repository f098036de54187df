from __future__ import annotations

from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class PromptDefinition(BaseModel):
    """A medical prompt exposed through prompts/list and prompts/get."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    argument_specs: Dict[str, str] = Field(
        default_factory=dict,
        description="Ordered mapping of argument name to description.",
    )


class ResourceDefinition(BaseModel):
    """A medical resource addressed by a unique URI."""

    model_config = ConfigDict(frozen=True)

    uri: str
    name: str
    description: str
    mime_type: str = "text/plain"
    requires_encryption: bool = False


class ToolDefinition(BaseModel):
    """A healthcare tool exposed through tools/list and tools/call."""

    model_config = ConfigDict(frozen=True)

    id: str
    description: str
    input_schema: Dict[str, str] = Field(
        default_factory=dict,
        description="Mapping of parameter name to description.",
    )
