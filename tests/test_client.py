"""End-to-end tests: HealthcareClient against an in-process MCP server"""
import json
from unittest.mock import AsyncMock, patch

import pytest
from mcp import types

from brainsait_mcp.catalog.prompts import PromptId
from brainsait_mcp.catalog.resources import ResourceUri
from brainsait_mcp.catalog.tools import ToolId
from brainsait_mcp.client import HealthcareClient
from brainsait_mcp.errors import (
    ComplianceViolation,
    EncryptionRequired,
    InvalidToolArguments,
    NotConnected,
    ResourceAccessDenied,
    ServerShuttingDown,
    ToolExecutionFailed,
    UnknownPrompt,
    UnknownTool,
    UnsupportedParameterType,
)
from brainsait_mcp.language import LEFT_TO_RIGHT_OVERRIDE, POP_DIRECTIONAL_FORMATTING, RIGHT_TO_LEFT_OVERRIDE, Language
from brainsait_mcp.server import HealthcareServer
from brainsait_mcp.transports import InProcessClientHandle


class TestListings:
    """Tests for prompts/list, tools/list and resources/list"""

    @pytest.mark.asyncio
    async def test_list_prompts(self, settings, connected_client):
        async with connected_client(settings) as client:
            prompts = await client.list_prompts()
        assert [p.name for p in prompts] == [
            PromptId.ARABIC_MEDICAL_CONSULTATION.value,
            PromptId.CLINICAL_DECISION_SUPPORT.value,
        ]
        arguments = {a.name: a.required for a in prompts[0].arguments}
        assert arguments == {"patient_symptoms": True, "medical_history": True, "language": False}

    @pytest.mark.asyncio
    async def test_list_tools_advertises_schema(self, settings, connected_client):
        async with connected_client(settings) as client:
            tools = await client.list_tools()
        schemas = {t.name: t.inputSchema for t in tools}
        assert "medications" in schemas[ToolId.DRUG_INTERACTION_CHECKER.value]["properties"]
        assert "severity" in schemas[ToolId.SYMPTOM_ANALYZER.value]["properties"]

    @pytest.mark.asyncio
    async def test_list_resources(self, settings, connected_client):
        async with connected_client(settings) as client:
            resources = await client.list_resources()
        assert {str(r.uri) for r in resources} == {u.value for u in ResourceUri}


class TestConsult:
    """Tests for HealthcareClient.consult"""

    @pytest.mark.asyncio
    async def test_arabic_consultation(self, settings, connected_client):
        async with connected_client(settings) as client:
            result = await client.consult(
                PromptId.ARABIC_MEDICAL_CONSULTATION.value,
                {"patient_symptoms": "صداع", "medical_history": "none"},
                Language.ARABIC,
            )
        assert "صداع" in result
        assert result.startswith(RIGHT_TO_LEFT_OVERRIDE)
        assert result.endswith(POP_DIRECTIONAL_FORMATTING)
        assert not result.startswith(RIGHT_TO_LEFT_OVERRIDE * 2)

    @pytest.mark.asyncio
    async def test_refused_locally_without_compliance(self, make_settings):
        client = HealthcareClient(make_settings(compliant_mode=False))
        # not connected: a round trip would raise NotConnected instead
        with pytest.raises(ComplianceViolation):
            await client.consult(PromptId.ARABIC_MEDICAL_CONSULTATION.value, {"patient_symptoms": "x"})

    @pytest.mark.asyncio
    async def test_server_requires_encryption_assertion(self, make_settings, connected_client):
        # client without encryption asserts require_encryption=false
        async with connected_client(make_settings(encryption_enabled=False), make_settings()) as client:
            with pytest.raises(ComplianceViolation):
                await client.consult(
                    PromptId.CLINICAL_DECISION_SUPPORT.value,
                    {"patient_data": "data", "diagnosis_request": "request"},
                )

    @pytest.mark.asyncio
    async def test_unknown_prompt(self, settings, connected_client):
        async with connected_client(settings) as client:
            with pytest.raises(UnknownPrompt) as exc_info:
                await client.consult("does-not-exist", {})
        assert "does-not-exist" in str(exc_info.value)
        assert exc_info.value.name == "does-not-exist"

    @pytest.mark.asyncio
    async def test_unsupported_parameter_never_sent(self, settings, connected_client):
        async with connected_client(settings) as client:
            with patch.object(client._session, "get_prompt", new=AsyncMock()) as get_prompt:
                with pytest.raises(UnsupportedParameterType):
                    await client.consult(PromptId.CLINICAL_DECISION_SUPPORT.value, {"weight": 72.5})
            get_prompt.assert_not_called()


class TestRunTool:
    """Tests for HealthcareClient.run_tool"""

    @pytest.mark.asyncio
    async def test_drug_interaction_checker(self, settings, connected_client):
        async with connected_client(settings) as client:
            result = await client.run_tool(
                ToolId.DRUG_INTERACTION_CHECKER.value,
                {"medications": ["Aspirin", "Ibuprofen"], "patient_age": 45},
                Language.ENGLISH,
            )
        assert "Aspirin" in result
        assert "Ibuprofen" in result
        assert result.startswith(LEFT_TO_RIGHT_OVERRIDE)

    @pytest.mark.asyncio
    async def test_symptom_analyzer_in_arabic(self, settings, connected_client):
        async with connected_client(settings) as client:
            result = await client.run_tool(
                ToolId.SYMPTOM_ANALYZER.value,
                {"symptoms": ["حمى"], "duration": "يومين", "severity": 4},
                Language.ARABIC,
            )
        assert "حمى" in result
        assert result.startswith(RIGHT_TO_LEFT_OVERRIDE)

    @pytest.mark.asyncio
    async def test_unknown_tool(self, settings, connected_client):
        async with connected_client(settings) as client:
            with pytest.raises(UnknownTool) as exc_info:
                await client.run_tool("does-not-exist", {})
        assert exc_info.value.name == "does-not-exist"

    @pytest.mark.asyncio
    async def test_invalid_arguments(self, settings, connected_client):
        async with connected_client(settings) as client:
            with pytest.raises(InvalidToolArguments):
                await client.run_tool(ToolId.DRUG_INTERACTION_CHECKER.value, {"patient_age": 500})

    @pytest.mark.asyncio
    async def test_error_result_raises(self, settings, connected_client):
        failed = types.CallToolResult(
            content=[types.TextContent(type="text", text="analyzer crashed")],
            isError=True,
        )
        async with connected_client(settings) as client:
            with patch.object(client._session, "call_tool", new=AsyncMock(return_value=failed)):
                with pytest.raises(ToolExecutionFailed, match="analyzer crashed"):
                    await client.run_tool(ToolId.SYMPTOM_ANALYZER.value, {"symptoms": ["fever"]})

    @pytest.mark.asyncio
    async def test_enforced_tool_compliance(self, make_settings, connected_client):
        server_settings = make_settings(enforce_tool_compliance=True)
        async with connected_client(make_settings(compliant_mode=False), server_settings) as client:
            with pytest.raises(ComplianceViolation):
                await client.run_tool(ToolId.DRUG_INTERACTION_CHECKER.value, {"medications": ["Aspirin"]})


class TestAccessResource:
    """Tests for HealthcareClient.access_resource"""

    @pytest.mark.asyncio
    async def test_patient_data(self, settings, connected_client):
        async with connected_client(settings) as client:
            data = await client.access_resource(ResourceUri.PATIENT_DATA.value)
        assert json.loads(data.decode("utf-8")) == {
            "patient_id": "encrypted_data",
            "access_level": "hipaa_compliant",
        }

    @pytest.mark.asyncio
    async def test_refused_locally_without_encryption(self, make_settings):
        client = HealthcareClient(make_settings(encryption_enabled=False))
        with pytest.raises(EncryptionRequired):
            await client.access_resource(ResourceUri.LITERATURE.value)

    @pytest.mark.asyncio
    async def test_server_without_encryption(self, make_settings, connected_client):
        async with connected_client(make_settings(), make_settings(encryption_enabled=False)) as client:
            with pytest.raises(EncryptionRequired):
                await client.access_resource(ResourceUri.PATIENT_DATA.value)
            literature = await client.access_resource(ResourceUri.LITERATURE.value)
        assert literature == b"Medical literature and guidelines database access granted"

    @pytest.mark.asyncio
    async def test_unknown_resource(self, settings, connected_client):
        async with connected_client(settings) as client:
            with pytest.raises(ResourceAccessDenied):
                await client.access_resource("brainsait://medical/unknown")


class TestConnection:
    """Tests for connect/disconnect"""

    @pytest.mark.asyncio
    async def test_operations_need_a_connection(self, settings):
        client = HealthcareClient(settings)
        with pytest.raises(NotConnected):
            await client.list_prompts()

    @pytest.mark.asyncio
    async def test_connect_and_disconnect_are_idempotent(self, settings):
        server = HealthcareServer(settings)
        client = HealthcareClient(settings)
        handle = InProcessClientHandle(server.mcp_server)

        await client.connect(handle)
        await client.connect(InProcessClientHandle(server.mcp_server))
        assert client.connected
        assert len(await client.list_tools()) == 2

        await client.disconnect()
        await client.disconnect()
        assert not client.connected
        assert handle.closed
        with pytest.raises(NotConnected):
            await client.list_tools()

    @pytest.mark.asyncio
    async def test_server_shutdown_rejects_new_operations(self, settings):
        server = HealthcareServer(settings)
        async with HealthcareClient(settings) as client:
            await client.connect(InProcessClientHandle(server.mcp_server))
            await server.shutdown()
            with pytest.raises(ServerShuttingDown):
                await client.list_prompts()
