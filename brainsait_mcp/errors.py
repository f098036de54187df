"""
Typed errors raised by the transport layer, the dispatcher and the client.

Every error carries a JSON-RPC application error code so it can cross the MCP
wire as an `McpError` and be rebuilt as the same type on the client side.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Type

from mcp.shared.exceptions import McpError
from mcp.types import ErrorData


class HealthcareMCPError(Exception):
    """Base class for all BrainSAIT MCP errors."""

    code: int = -32000
    default_message: str = "BrainSAIT MCP error"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)

    def to_error_data(self) -> ErrorData:
        data: Dict[str, Any] = {"type": type(self).__name__}
        name = getattr(self, "name", None)
        if name is not None:
            data["name"] = name
        return ErrorData(code=self.code, message=self.message, data=data)

    def to_mcp_error(self) -> McpError:
        return McpError(self.to_error_data())


class UnsupportedTransport(HealthcareMCPError):
    code = -32010
    default_message = "Transport type not supported on this platform"


class InvalidTransportParameters(HealthcareMCPError):
    code = -32011
    default_message = "Invalid transport parameters"


class ComplianceViolation(HealthcareMCPError):
    code = -32020
    default_message = "HIPAA compliance violation detected"


class EncryptionRequired(HealthcareMCPError):
    code = -32021
    default_message = "Encryption is required for healthcare data"


class UnknownPrompt(HealthcareMCPError):
    code = -32030
    default_message = "Unknown medical prompt requested"
    name: Optional[str] = None

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown medical prompt requested: {name}")


class UnknownTool(UnknownPrompt):
    # also caught by `except UnknownPrompt`
    code = -32031
    default_message = "Unknown healthcare tool requested"
    name: Optional[str] = None

    def __init__(self, name: str) -> None:
        self.name = name
        HealthcareMCPError.__init__(self, f"Unknown healthcare tool requested: {name}")


class ResourceAccessDenied(HealthcareMCPError):
    code = -32032
    default_message = "Access to medical data denied"


class UnsupportedLanguage(HealthcareMCPError):
    # Reserved: detection falls back to Language.UNKNOWN instead of raising.
    code = -32040
    default_message = "Unsupported language specified"


class UnsupportedParameterType(HealthcareMCPError):
    code = -32041
    default_message = "Unsupported parameter type"


class InvalidToolArguments(HealthcareMCPError):
    code = -32042
    default_message = "Invalid tool arguments"


class ToolExecutionFailed(HealthcareMCPError):
    code = -32043
    default_message = "Healthcare tool execution failed"


class NotConnected(HealthcareMCPError):
    code = -32050
    default_message = "Client is not connected to an MCP server"


class ServerShuttingDown(HealthcareMCPError):
    code = -32051
    default_message = "Server is shutting down"


_ERROR_TYPES: Dict[str, Type[HealthcareMCPError]] = {
    cls.__name__: cls
    for cls in (
        UnsupportedTransport,
        InvalidTransportParameters,
        ComplianceViolation,
        EncryptionRequired,
        UnknownPrompt,
        UnknownTool,
        ResourceAccessDenied,
        UnsupportedLanguage,
        UnsupportedParameterType,
        InvalidToolArguments,
        ToolExecutionFailed,
        NotConnected,
        ServerShuttingDown,
    )
}


def from_error_data(error: ErrorData) -> Optional[HealthcareMCPError]:
    """
    Rebuild a typed error from JSON-RPC error data.

    Returns None when the error did not originate from this package.
    """
    data: Any = error.data
    if not isinstance(data, dict):
        return None
    cls = _ERROR_TYPES.get(data.get("type", ""))
    if cls is None:
        return None
    exc = cls.__new__(cls)
    Exception.__init__(exc, error.message)
    if isinstance(exc, UnknownPrompt):
        exc.name = data.get("name")
    return exc
