from __future__ import annotations

import logging
import sys
from typing import Any, FrozenSet, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the BrainSAIT healthcare MCP server and client.

    All values are loaded from environment variables with `BRAINSAIT_` prefix.
    You can also use a `.env` file during development. The object is frozen:
    it is built once per process and only read afterwards.
    """

    model_config = SettingsConfigDict(
        env_prefix="BRAINSAIT_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    # General
    application_name: str = "BrainSAIT-Healthcare"
    version: str = "1.0.0"
    supported_languages: FrozenSet[str] = frozenset({"ar", "en"})
    log_level: str = "INFO"

    # Compliance
    compliant_mode: bool = True
    encryption_enabled: bool = True
    enforce_tool_compliance: bool = False

    # Transport
    transport: str = "stdio"  # "stdio", "http", "network" or "edge-worker"
    host: str = "localhost"
    port: int = 8080
    url: Optional[str] = None
    edge_worker_url: Optional[str] = None
    edge_worker_token: Optional[str] = None
    server_command: Optional[str] = None

    # TLS (secured socket and https endpoints)
    tls_certfile: Optional[str] = None
    tls_keyfile: Optional[str] = None
    tls_cafile: Optional[str] = None

    def supports(self, language_code: str) -> bool:
        return language_code in self.supported_languages


def load_settings(**overrides: Any) -> Settings:
    """
    Build settings from the environment, letting explicit values win.

    `None` overrides are dropped so unset CLI flags fall back to the
    environment and defaults.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**values)


def configure_logging(level: str = "INFO") -> None:
    # stderr only: stdout carries the stdio transport
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
