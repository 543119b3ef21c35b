"""
Ticket Gateway Port

Architectural Intent:
- Port interface for the remote helpdesk ticketing service
- One call per invocation: create or update, decided by the payload
- Failures surface as GatewayError subclasses (resolution, transport fault,
  application error)
"""

from typing import Protocol, runtime_checkable

from otrs_bridge.domain.entities.ticket import TicketPayload, TicketResult
from otrs_bridge.domain.value_objects.server_address import Credentials, ServerAddress


@runtime_checkable
class TicketGatewayPort(Protocol):
    """Port for submitting ticket payloads to the helpdesk."""

    async def submit(
        self,
        payload: TicketPayload,
        credentials: Credentials,
        server: ServerAddress,
    ) -> TicketResult:
        """Issue the create/update call and return the remote identifiers."""
        ...
