"""
GenericTicketConnector SOAP Codec

Architectural Intent:
- Serializes a TicketPayload into a SOAP 1.1 request envelope
- Parses response envelopes into a TicketResult or a typed GatewayError
- Pure functions over bytes: no I/O, so the wire format is tested directly

Design Decisions:
- Uses stdlib xml.etree.ElementTree; element text is escaped by the
  serializer, so arbitrary plugin output is safe inside the body
- The operation element is namespace-qualified, its children are not
- Responses are matched on local element names, ignoring prefixes
"""

from __future__ import annotations
import xml.etree.ElementTree as ET
from typing import Optional

from otrs_bridge.domain.entities.ticket import TicketOperation, TicketPayload, TicketResult
from otrs_bridge.domain.errors import ApplicationError, RemoteFault
from otrs_bridge.domain.value_objects.server_address import Credentials

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"
TICKET_CONNECTOR_NS = "http://www.otrs.org/TicketConnector/"

ET.register_namespace("soap", SOAP_ENV_NS)


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child(element: ET.Element, name: str) -> Optional[ET.Element]:
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _child_text(element: ET.Element, name: str) -> str:
    child = _child(element, name)
    if child is None or child.text is None:
        return ""
    return child.text.strip()


def _append(parent: ET.Element, name: str, value: str) -> ET.Element:
    element = ET.SubElement(parent, name)
    element.text = value
    return element


def build_request(
    payload: TicketPayload,
    credentials: Credentials,
    namespace: str = TICKET_CONNECTOR_NS,
) -> bytes:
    """Render the TicketCreate/TicketUpdate request envelope."""
    envelope = ET.Element(f"{{{SOAP_ENV_NS}}}Envelope")
    body = ET.SubElement(envelope, f"{{{SOAP_ENV_NS}}}Body")
    operation = ET.SubElement(body, f"{{{namespace}}}{payload.operation.value}")

    _append(operation, "UserLogin", credentials.user)
    _append(operation, "Password", credentials.password)
    _append(operation, "TicketID", str(payload.ticket_id) if payload.ticket_id else "")
    _append(operation, "TicketNumber", "")

    ticket = ET.SubElement(operation, "Ticket")
    for name, value in payload.ticket.items():
        _append(ticket, name, value)

    article = ET.SubElement(operation, "Article")
    for name, value in payload.article.items():
        _append(article, name, value)

    # Dynamic fields must already be defined on the OTRS side.
    for name in sorted(payload.dynamic_fields):
        dynamic_field = ET.SubElement(operation, "DynamicField")
        _append(dynamic_field, "Name", name)
        _append(dynamic_field, "Value", payload.dynamic_fields[name])

    return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)


def _parse_body(content: bytes) -> ET.Element:
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise RemoteFault("Client.Parse", f"Malformed SOAP response: {e}") from e
    body = _child(root, "Body")
    if body is None:
        raise RemoteFault("Client.Parse", "SOAP response has no Body")
    return body


def parse_fault(content: bytes) -> Optional[RemoteFault]:
    """Return the SOAP Fault carried by content, if any."""
    try:
        body = _parse_body(content)
    except RemoteFault:
        return None
    fault = _child(body, "Fault")
    if fault is None:
        return None
    return RemoteFault(
        _child_text(fault, "faultcode") or "Server",
        _child_text(fault, "faultstring"),
    )


def _optional_int(value: str) -> Optional[int]:
    return int(value) if value else None


def parse_response(content: bytes, operation: TicketOperation) -> TicketResult:
    """Extract the ticket identifiers from a successful HTTP response.

    Raises:
        RemoteFault: the envelope is malformed, carries a Fault, or lacks the
            operation's response element.
        ApplicationError: the response element embeds an OTRS Error.
    """
    body = _parse_body(content)

    fault = _child(body, "Fault")
    if fault is not None:
        raise RemoteFault(
            _child_text(fault, "faultcode") or "Server",
            _child_text(fault, "faultstring"),
        )

    response = _child(body, operation.response_name)
    if response is None:
        raise RemoteFault(
            "Client.Parse", f"No {operation.response_name} in SOAP response"
        )

    error = _child(response, "Error")
    if error is not None:
        raise ApplicationError(
            _child_text(error, "ErrorCode"),
            _child_text(error, "ErrorMessage"),
            response=operation.response_name,
        )

    try:
        ticket_id = int(_child_text(response, "TicketID"))
        article_id = _optional_int(_child_text(response, "ArticleID"))
    except ValueError as e:
        raise RemoteFault(
            "Client.Parse", f"Invalid identifier in {operation.response_name}: {e}"
        ) from e

    return TicketResult(
        ticket_id=ticket_id,
        ticket_number=_child_text(response, "TicketNumber"),
        article_id=article_id,
    )
