"""Tests for settings, compliance predicates and per-operation gates"""
import logging

import pytest
from pydantic import ValidationError

from brainsait_mcp import compliance
from brainsait_mcp.config import Settings, load_settings
from brainsait_mcp.errors import ComplianceViolation, EncryptionRequired
from brainsait_mcp.language import Language
from brainsait_mcp.models import (
    EdgeWorker,
    HttpEndpoint,
    LocalTransport,
    ResourceDefinition,
    SecuredSocket,
)


class TestSettings:
    """Tests for Settings defaults and loading"""

    def test_defaults(self, settings):
        assert settings.application_name == "BrainSAIT-Healthcare"
        assert settings.version == "1.0.0"
        assert settings.supported_languages == frozenset({"ar", "en"})
        assert settings.compliant_mode is True
        assert settings.encryption_enabled is True
        assert settings.enforce_tool_compliance is False

    def test_settings_are_frozen(self, settings):
        with pytest.raises(ValidationError):
            settings.compliant_mode = False

    def test_environment_prefix(self, monkeypatch):
        monkeypatch.setenv("BRAINSAIT_COMPLIANT_MODE", "false")
        monkeypatch.setenv("BRAINSAIT_PORT", "9443")
        loaded = Settings(_env_file=None)
        assert loaded.compliant_mode is False
        assert loaded.port == 9443

    def test_load_settings_drops_unset_overrides(self, monkeypatch):
        monkeypatch.setenv("BRAINSAIT_HOST", "example.org")
        loaded = load_settings(host=None, port=1234)
        assert loaded.host == "example.org"
        assert loaded.port == 1234

    def test_supports(self, settings):
        assert settings.supports("ar")
        assert not settings.supports("fr")


class TestTransportSecurity:
    """Tests for is_secure_enough and check_transport"""

    def test_local_always_accepted(self, settings):
        assert compliance.is_secure_enough(settings, LocalTransport())

    def test_plain_http_rejected_in_compliant_mode(self, settings):
        with pytest.raises(ComplianceViolation, match="HTTPS required"):
            compliance.check_transport(settings, HttpEndpoint(url="http://example.org/mcp"))

    def test_https_accepted_in_compliant_mode(self, settings):
        compliance.check_transport(settings, HttpEndpoint(url="https://example.org/mcp"))

    def test_plain_http_accepted_without_compliance(self, make_settings):
        relaxed = make_settings(compliant_mode=False)
        assert compliance.is_secure_enough(relaxed, HttpEndpoint(url="http://example.org/mcp"))

    def test_secured_socket_requires_encryption(self, make_settings):
        kind = SecuredSocket(host="localhost", port=8443)
        assert compliance.is_secure_enough(make_settings(), kind)
        with pytest.raises(ComplianceViolation, match="Encryption required"):
            compliance.check_transport(make_settings(encryption_enabled=False), kind)

    def test_edge_worker_accepted(self, settings):
        kind = EdgeWorker(url="https://worker.example.org", api_token="token")
        assert compliance.is_secure_enough(settings, kind)


class TestOperationGates:
    """Tests for the per-operation gate functions"""

    def test_prompt_requires_encryption_assertion(self, settings):
        with pytest.raises(ComplianceViolation):
            compliance.check_prompt_access(settings, {"patient_symptoms": "x"})

    @pytest.mark.parametrize("flag", [True, "true", "TRUE"])
    def test_prompt_accepts_true_assertion(self, settings, flag):
        compliance.check_prompt_access(settings, {"require_encryption": flag})

    @pytest.mark.parametrize("flag", [False, "false", "yes", 1])
    def test_prompt_rejects_other_assertions(self, settings, flag):
        with pytest.raises(ComplianceViolation):
            compliance.check_prompt_access(settings, {"require_encryption": flag})

    def test_prompt_gate_is_open_without_compliance(self, make_settings):
        compliance.check_prompt_access(make_settings(compliant_mode=False), {})

    def test_resource_requiring_encryption(self, make_settings):
        definition = ResourceDefinition(
            uri="brainsait://medical/patient-data",
            name="Patient Data Repository",
            description="",
            requires_encryption=True,
        )
        with pytest.raises(EncryptionRequired):
            compliance.check_resource_access(make_settings(encryption_enabled=False), definition)
        compliance.check_resource_access(make_settings(encryption_enabled=True), definition)

    def test_tool_gate_off_by_default(self, settings):
        compliance.check_tool_access(settings, {"hipaa_mode": False})

    def test_tool_gate_when_enforced(self, make_settings):
        strict = make_settings(enforce_tool_compliance=True)
        with pytest.raises(ComplianceViolation):
            compliance.check_tool_access(strict, {"hipaa_mode": False})
        compliance.check_tool_access(strict, {"hipaa_mode": True})

    def test_unsupported_language_only_warns(self, make_settings, caplog):
        english_only = make_settings(supported_languages=frozenset({"en"}))
        with caplog.at_level(logging.WARNING, logger="brainsait_mcp.compliance"):
            compliance.check_language(english_only, Language.ARABIC)
        assert "not in supported languages" in caplog.text
