"""
OTRS SOAP Adapter

Architectural Intent:
- Implements TicketGatewayPort against the OTRS GenericTicketConnector
  web service
- Uses stdlib urllib for the HTTP layer (no external dependencies)
- Resolves the server host before the call, so DNS trouble is reported as
  its own failure instead of a generic transport error

Design Decisions:
- Blocking DNS and HTTP calls run in the default executor, keeping the
  port async like every other adapter
- HTTP timeout is finite and configurable
- HTTP error bodies are inspected for a SOAP Fault before falling back to
  the status line
"""

import asyncio
import logging
import socket
import urllib.error
import urllib.request
from typing import Callable

from otrs_bridge.domain.entities.ticket import TicketPayload, TicketResult
from otrs_bridge.domain.errors import RemoteFault, ResolutionError
from otrs_bridge.domain.value_objects.server_address import Credentials, ServerAddress
from otrs_bridge.infrastructure.adapters.soap_codec import (
    TICKET_CONNECTOR_NS,
    build_request,
    parse_fault,
    parse_response,
)

logger = logging.getLogger(__name__)

DEFAULT_WEBSERVICE_PATH = "/otrs/nph-genericinterface.pl/Webservice/GenericTicketConnector"


def resolve_host(host: str) -> str:
    """Resolve host to its first IP address."""
    try:
        infos = socket.getaddrinfo(host, None)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolutionError(host, str(e)) from e
    if not infos:
        raise ResolutionError(host)
    return infos[0][4][0]


class OTRSSoapAdapter:
    """OTRS GenericTicketConnector gateway."""

    def __init__(
        self,
        scheme: str = "http",
        webservice_path: str = DEFAULT_WEBSERVICE_PATH,
        namespace: str = TICKET_CONNECTOR_NS,
        timeout_seconds: float = 30.0,
        resolver: Callable[[str], str] = resolve_host,
    ) -> None:
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")
        self._scheme = scheme
        self._webservice_path = "/" + webservice_path.lstrip("/")
        self._namespace = namespace
        self._timeout = timeout_seconds
        self._resolver = resolver

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def endpoint_url(self, server: ServerAddress) -> str:
        return f"{self._scheme}://{server}{self._webservice_path}"

    async def submit(
        self,
        payload: TicketPayload,
        credentials: Credentials,
        server: ServerAddress,
    ) -> TicketResult:
        loop = asyncio.get_running_loop()

        ip_address = await loop.run_in_executor(None, self._resolver, server.host)
        logger.info("OTRS Server is %s (%s)", server, ip_address)

        self._log_payload(payload)

        operation = payload.operation.value
        url = self.endpoint_url(server)
        logger.info("SOAP %s at %s", operation, url)

        request_body = build_request(payload, credentials, self._namespace)
        content = await loop.run_in_executor(
            None, self._post, url, operation, request_body
        )
        result = parse_response(content, payload.operation)
        logger.info("SOAP transaction successful")
        return result

    def _post(self, url: str, operation: str, body: bytes) -> bytes:
        request = urllib.request.Request(
            url,
            data=body,
            method="POST",
            headers={
                "Content-Type": "text/xml; charset=utf-8",
                "SOAPAction": f'"{self._namespace}#{operation}"',
            },
        )
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                return response.read()
        except urllib.error.HTTPError as e:
            fault = parse_fault(e.read() or b"")
            if fault is not None:
                raise fault from e
            raise RemoteFault(str(e.code), str(e.reason)) from e
        except urllib.error.URLError as e:
            raise RemoteFault("Transport", str(e.reason)) from e
        except OSError as e:
            raise RemoteFault("Transport", str(e)) from e

    @staticmethod
    def _log_payload(payload: TicketPayload) -> None:
        for group, fields in (
            ("TicketData", payload.ticket),
            ("ArticleData", payload.article),
            ("DynamicField", payload.dynamic_fields),
        ):
            for name, value in fields.items():
                for line in value.split("\n"):
                    logger.debug("%s %s = %s", group, name, line)
