from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class TransportRole(str, Enum):
    CLIENT = "client"
    SERVER = "server"


@dataclass(frozen=True)
class LocalTransport:
    """
    Local pipe (stdio).

    For the client role `command`/`args` name the server process to spawn;
    when omitted the bundled server entry point is used.
    """

    command: Optional[str] = None
    args: Tuple[str, ...] = field(default_factory=tuple)

    name = "stdio"


@dataclass(frozen=True)
class HttpEndpoint:
    url: str

    name = "http"


@dataclass(frozen=True)
class SecuredSocket:
    host: str
    port: int

    name = "network"


@dataclass(frozen=True)
class EdgeWorker:
    url: str
    api_token: Optional[str] = field(default=None, repr=False)

    name = "edge-worker"


TransportKind = Union[LocalTransport, HttpEndpoint, SecuredSocket, EdgeWorker]


@dataclass(frozen=True)
class Development:
    """A developer workstation."""


@dataclass(frozen=True)
class RaspberryPi:
    """An on-premises edge device reachable on the local network."""

    host: str
    port: int


@dataclass(frozen=True)
class Cloudflare:
    worker_url: str
    api_token: str = field(repr=False)


@dataclass(frozen=True)
class Cloud:
    url: str


DeploymentEnvironment = Union[Development, RaspberryPi, Cloudflare, Cloud]
