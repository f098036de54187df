"""
Parameter values exchanged with prompts and tools.

Caller-supplied dictionaries are narrowed to a closed set of shapes before
they leave the client:

    str | int | bool | list[str] | dict[str, <same>]

Anything else (floats, None, arbitrary objects, mixed lists) is rejected with
`UnsupportedParameterType` instead of being stringified.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field

from ..errors import UnsupportedParameterType

ParameterValue = Union[str, int, bool, List[str], Dict[str, Any]]


def to_parameter_value(key: str, value: Any) -> ParameterValue:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        items = list(value)
        if all(isinstance(item, str) for item in items):
            return items
        raise UnsupportedParameterType(
            f"Parameter '{key}' must be a sequence of strings"
        )
    if isinstance(value, Mapping):
        nested: Dict[str, Any] = {}
        for nested_key, nested_value in value.items():
            if not isinstance(nested_key, str):
                raise UnsupportedParameterType(
                    f"Parameter '{key}' has a non-string key {nested_key!r}"
                )
            nested[nested_key] = to_parameter_value(f"{key}.{nested_key}", nested_value)
        return nested
    raise UnsupportedParameterType(
        f"Parameter '{key}' has unsupported type {type(value).__name__}"
    )


def marshal_parameters(parameters: Mapping[str, Any]) -> Dict[str, ParameterValue]:
    """Validate every value of a tool parameter mapping."""
    return {key: to_parameter_value(key, value) for key, value in parameters.items()}


def to_prompt_argument(key: str, value: Any) -> str:
    """
    Encode one value as an MCP prompt argument.

    Prompt arguments travel as strings: booleans become `true`/`false`,
    integers their decimal form, sequences and mappings JSON.
    """
    checked = to_parameter_value(key, value)
    if isinstance(checked, bool):
        return "true" if checked else "false"
    if isinstance(checked, int):
        return str(checked)
    if isinstance(checked, str):
        return checked
    return json.dumps(checked, ensure_ascii=False)


def marshal_prompt_arguments(arguments: Mapping[str, Any]) -> Dict[str, str]:
    return {key: to_prompt_argument(key, value) for key, value in arguments.items()}


def is_true_flag(value: Any) -> bool:
    """True for boolean `True` or the wire string `"true"` (any case)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


class ToolParams(BaseModel):
    """Fields every healthcare tool accepts."""

    model_config = ConfigDict(extra="ignore")

    language: str = Field(default="en", description="Preferred language (ar/en)")
    hipaa_mode: bool = Field(
        default=False,
        description="Caller's HIPAA compliance mode.",
    )


class DrugInteractionParams(ToolParams):
    medications: List[str] = Field(default_factory=list, description="List of medications")
    patient_age: int = Field(default=0, ge=0, le=150, description="Patient age")


class SymptomAnalysisParams(ToolParams):
    symptoms: List[str] = Field(default_factory=list, description="List of symptoms")
    duration: str = Field(default="", description="Duration of symptoms")
    severity: int = Field(default=1, ge=1, le=10, description="Severity level (1-10)")
