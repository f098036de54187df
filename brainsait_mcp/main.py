from __future__ import annotations

import argparse
import logging
import signal
from typing import Any, Dict, Optional

import anyio

from .catalog import ContentRegistry
from .config import Settings, configure_logging, load_settings
from .errors import HealthcareMCPError
from .models import TransportRole
from .server import HealthcareServer
from .transports import TRANSPORT_NAMES, kind_from_settings, open_transport

logger = logging.getLogger(__name__)


def create_server(
    settings: Settings,
    registry: Optional[ContentRegistry] = None,
) -> HealthcareServer:
    """
    Create the healthcare MCP server with the reference prompts, resources
    and tools registered.
    """
    return HealthcareServer(settings, registry=registry)


def add_connection_arguments(parser: argparse.ArgumentParser) -> None:
    """Flags shared by the server and client CLIs. Unset flags fall back to BRAINSAIT_* env."""
    parser.add_argument(
        "--transport",
        choices=TRANSPORT_NAMES + ("cloudflare",),
        default=None,
        help="Transport type (default: stdio)",
    )
    parser.add_argument("--host", default=None, help="Host for http/network transports (default: localhost)")
    parser.add_argument("--port", type=int, default=None, help="Port for http/network transports (default: 8080)")
    parser.add_argument("--url", default=None, help="Full endpoint URL for the http transport")
    parser.add_argument(
        "--compliant",
        dest="compliant_mode",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable HIPAA compliance mode (default: on)",
    )
    parser.add_argument(
        "--encryption",
        dest="encryption_enabled",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable encryption (default: on)",
    )
    parser.add_argument("--languages", default=None, help="Comma-separated supported languages (default: ar,en)")
    parser.add_argument("--application-name", default=None, help="Application name")
    parser.add_argument("--log-level", default=None, help="Logging level (default: INFO)")


def parse_languages(value: Optional[str]) -> Optional[frozenset]:
    if value is None:
        return None
    return frozenset(code.strip().lower() for code in value.split(",") if code.strip())


def settings_from_args(args: argparse.Namespace, **extra: Any) -> Settings:
    overrides: Dict[str, Any] = {
        "transport": args.transport,
        "host": args.host,
        "port": args.port,
        "url": args.url,
        "compliant_mode": args.compliant_mode,
        "encryption_enabled": args.encryption_enabled,
        "supported_languages": parse_languages(args.languages),
        "application_name": args.application_name,
        "log_level": args.log_level,
    }
    overrides.update(extra)
    return load_settings(**overrides)


async def _watch_signals(server: HealthcareServer) -> None:
    with anyio.open_signal_receiver(signal.SIGINT, signal.SIGTERM) as signals:
        async for signum in signals:
            logger.info("Received %s, shutting down", signal.Signals(signum).name)
            await server.shutdown()
            return


async def run_server(settings: Settings) -> None:
    """Open the configured server transport and serve until shut down."""
    server = create_server(settings)
    handle = open_transport(kind_from_settings(settings), settings, role=TransportRole.SERVER)

    if handle.handles_signals:
        await server.serve(handle)
        return

    async with anyio.create_task_group() as tg:
        tg.start_soon(_watch_signals, server)
        await server.serve(handle)
        tg.cancel_scope.cancel()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brainsait-server",
        description="BrainSAIT healthcare MCP server",
    )
    add_connection_arguments(parser)
    parser.add_argument("--tls-certfile", default=None, help="TLS certificate for https/network transports")
    parser.add_argument("--tls-keyfile", default=None, help="TLS private key for https/network transports")
    return parser


def main() -> None:
    """
    Entrypoint for running the MCP server.

    Supports four transport modes:
    - stdio: For direct process-to-process communication (default)
    - http: Streamable HTTP behind FastAPI/uvicorn
    - network: TLS socket, one session per connection
    - edge-worker: client-only, rejected here
    """
    parser = build_parser()
    args = parser.parse_args()
    settings = settings_from_args(
        args,
        tls_certfile=args.tls_certfile,
        tls_keyfile=args.tls_keyfile,
    )
    configure_logging(settings.log_level)

    try:
        anyio.run(run_server, settings)
    except HealthcareMCPError as e:
        parser.exit(1, f"Error: {e}\n")
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
