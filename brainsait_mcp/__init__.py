"""
BrainSAIT healthcare MCP package.

This package exposes an MCP server and client for bilingual (Arabic/English)
healthcare assistance:
- Medical prompts (consultation, clinical decision support)
- Medical resources (patient data, literature)
- Healthcare tools (drug interactions, symptom analysis)
- HIPAA-style compliance gates on transports, prompts, resources and tools
- Transports: stdio, streamable HTTP, TLS socket and edge workers

Responses are deterministic templates; no medical reasoning happens here.
"""

from .client import HealthcareClient
from .config import Settings, configure_logging, load_settings
from .errors import (
    ComplianceViolation,
    EncryptionRequired,
    HealthcareMCPError,
    InvalidToolArguments,
    InvalidTransportParameters,
    NotConnected,
    ResourceAccessDenied,
    ServerShuttingDown,
    ToolExecutionFailed,
    UnknownPrompt,
    UnknownTool,
    UnsupportedLanguage,
    UnsupportedParameterType,
    UnsupportedTransport,
)
from .language import Language, detect_language, shape_for_display
from .server import HealthcareServer

__version__ = "1.0.0"

__all__ = [
    "ComplianceViolation",
    "EncryptionRequired",
    "HealthcareClient",
    "HealthcareMCPError",
    "HealthcareServer",
    "InvalidToolArguments",
    "InvalidTransportParameters",
    "Language",
    "NotConnected",
    "ResourceAccessDenied",
    "ServerShuttingDown",
    "Settings",
    "ToolExecutionFailed",
    "UnknownPrompt",
    "UnknownTool",
    "UnsupportedLanguage",
    "UnsupportedParameterType",
    "UnsupportedTransport",
    "configure_logging",
    "detect_language",
    "load_settings",
    "shape_for_display",
]
