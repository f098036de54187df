"""
Compliance gate.

Two pure predicates over the settings, plus one gate per operation kind. Each
gate is called first thing by the operation it protects and raises a typed
error instead of returning a flag.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from .config import Settings
from .errors import ComplianceViolation, EncryptionRequired
from .language import Language
from .models import (
    EdgeWorker,
    HttpEndpoint,
    LocalTransport,
    ResourceDefinition,
    SecuredSocket,
    TransportKind,
    is_true_flag,
)

logger = logging.getLogger(__name__)

ENCRYPTION_ASSERTION = "require_encryption"
HIPAA_MODE_FLAG = "hipaa_mode"


def _is_https(url: str) -> bool:
    try:
        return httpx.URL(url).scheme == "https"
    except httpx.InvalidURL:
        return False


def is_secure_enough(settings: Settings, kind: TransportKind) -> bool:
    """Whether `kind` meets the minimum security bar under `settings`."""
    if not settings.compliant_mode:
        return True
    if isinstance(kind, LocalTransport):
        return True
    if isinstance(kind, HttpEndpoint):
        return _is_https(kind.url)
    if isinstance(kind, SecuredSocket):
        return settings.encryption_enabled
    if isinstance(kind, EdgeWorker):
        # TLS is terminated by the edge platform
        return True
    return False


def requires_encryption_assertion(settings: Settings) -> bool:
    return settings.compliant_mode


def check_transport(settings: Settings, kind: TransportKind) -> None:
    if is_secure_enough(settings, kind):
        return
    if isinstance(kind, HttpEndpoint):
        raise ComplianceViolation("HTTPS required for HIPAA compliance")
    if isinstance(kind, SecuredSocket):
        raise ComplianceViolation("Encryption required for network transport")
    raise ComplianceViolation(f"Transport {kind!r} is not allowed in compliant mode")


def check_prompt_access(settings: Settings, arguments: Mapping[str, Any]) -> None:
    if not requires_encryption_assertion(settings):
        return
    if not is_true_flag(arguments.get(ENCRYPTION_ASSERTION)):
        raise ComplianceViolation("Encryption required for medical data")


def check_resource_access(settings: Settings, definition: ResourceDefinition) -> None:
    if definition.requires_encryption and not settings.encryption_enabled:
        raise EncryptionRequired(
            f"Encryption is required to read {definition.uri}"
        )


def check_tool_access(settings: Settings, arguments: Mapping[str, Any]) -> None:
    """
    Tool calls are not gated unless `enforce_tool_compliance` is set, in
    which case a compliant server requires `hipaa_mode: true`.
    """
    if not (settings.compliant_mode and settings.enforce_tool_compliance):
        return
    if not is_true_flag(arguments.get(HIPAA_MODE_FLAG)):
        raise ComplianceViolation("HIPAA mode required for healthcare tools")


def check_language(settings: Settings, language: Language) -> None:
    # Unsupported languages are flagged, never rejected.
    if not settings.supports(language.value):
        logger.warning(
            "Language '%s' is not in supported languages %s",
            language.value,
            sorted(settings.supported_languages),
        )
