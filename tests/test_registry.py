"""Tests for the content registry"""
import pytest

from brainsait_mcp.catalog import ContentRegistry
from brainsait_mcp.catalog.prompts import PromptId
from brainsait_mcp.catalog.resources import ResourceUri
from brainsait_mcp.catalog.tools import ToolId
from brainsait_mcp.models import PromptDefinition, ToolDefinition


class TestReferenceCatalog:
    """Tests for the catalog built by build_registry"""

    def test_prompts_in_registration_order(self, registry):
        assert [p.id for p in registry.list_prompts()] == [
            PromptId.ARABIC_MEDICAL_CONSULTATION.value,
            PromptId.CLINICAL_DECISION_SUPPORT.value,
        ]

    def test_resources(self, registry):
        resources = {r.uri: r for r in registry.list_resources()}
        assert resources[ResourceUri.PATIENT_DATA.value].requires_encryption is True
        assert resources[ResourceUri.PATIENT_DATA.value].mime_type == "application/json"
        assert resources[ResourceUri.LITERATURE.value].requires_encryption is False

    def test_tools(self, registry):
        assert [t.id for t in registry.list_tools()] == [
            ToolId.DRUG_INTERACTION_CHECKER.value,
            ToolId.SYMPTOM_ANALYZER.value,
        ]

    def test_registry_is_frozen(self, registry):
        assert registry.frozen
        with pytest.raises(RuntimeError):
            registry.add_prompt(PromptDefinition(id="late", description=""))

    def test_unknown_lookups_return_none(self, registry):
        assert registry.lookup_prompt("does-not-exist") is None
        assert registry.lookup_resource("brainsait://medical/none") is None
        assert registry.lookup_tool("does-not-exist") is None

    def test_tool_schema_comes_from_parameter_model(self, registry):
        schema = registry.tool_input_schema(ToolId.DRUG_INTERACTION_CHECKER.value)
        assert schema["type"] == "object"
        assert "medications" in schema["properties"]
        assert "patient_age" in schema["properties"]


class TestContentRegistry:
    """Tests for ContentRegistry registration rules"""

    def test_duplicate_prompt_rejected(self):
        registry = ContentRegistry()
        registry.add_prompt(PromptDefinition(id="p", description=""))
        with pytest.raises(ValueError):
            registry.add_prompt(PromptDefinition(id="p", description="again"))

    def test_schema_without_parameter_model(self):
        registry = ContentRegistry()
        registry.add_tool(
            ToolDefinition(id="t", description="", input_schema={"query": "Search query"}),
            lambda params, language: "ok",
        )
        schema = registry.tool_input_schema("t")
        assert schema["properties"] == {"query": {"description": "Search query"}}
        assert schema["additionalProperties"] is True
