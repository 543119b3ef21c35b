"""
Domain Ports Package

Architectural Intent:
- Contains port interfaces (abstract contracts) for external dependencies
- Ports define what the domain needs, adapters implement how
- Follows Hexagonal Architecture principles
"""

from otrs_bridge.domain.ports.ledger_port import ProblemLedgerPort
from otrs_bridge.domain.ports.ticket_gateway_port import TicketGatewayPort
from otrs_bridge.domain.ports.event_history_port import EventHistoryPort

__all__ = [
    "ProblemLedgerPort",
    "TicketGatewayPort",
    "EventHistoryPort",
]
