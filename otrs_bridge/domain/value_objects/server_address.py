"""
Server Address and Credentials Value Objects

Architectural Intent:
- Immutable value objects for the remote ticketing endpoint
- ServerAddress accepts the notifier's 'host[:port]' form, including IPv6
  bracket notation
- Credentials keep the password out of repr() so it never reaches a log line
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Credentials:
    user: str
    password: str = field(repr=False)

    def __post_init__(self) -> None:
        if not self.user:
            raise ValueError("Credentials user cannot be empty")


@dataclass(frozen=True)
class ServerAddress:
    """
    Value Object representing the ticketing server as host and optional port.
    """
    host: str
    port: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.host:
            raise ValueError("Server host cannot be empty")
        if self.port is not None and not (1 <= self.port <= 65535):
            raise ValueError(f"Port must be 1-65535, got {self.port}")

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is None:
            return host
        return f"{host}:{self.port}"

    @staticmethod
    def parse(address: str) -> "ServerAddress":
        """
        Parses 'host', 'host:port' or '[v6addr]:port' into a ServerAddress.
        """
        host = address.strip()
        port: Optional[int] = None

        if host.startswith("["):
            bracket_end = host.find("]")
            if bracket_end == -1:
                raise ValueError(f"Unterminated IPv6 bracket in: {address}")
            remainder = host[bracket_end + 1:]
            host = host[1:bracket_end]
            if remainder.startswith(":"):
                port = int(remainder[1:])
        elif host.count(":") == 1:
            host, _, port_part = host.partition(":")
            try:
                port = int(port_part)
            except ValueError:
                raise ValueError(f"Invalid port in server address: {address}")

        return ServerAddress(host=host, port=port)
