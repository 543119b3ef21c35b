"""
Domain Services Package

Architectural Intent:
- Contains domain services implementing the create-or-update logic
- Pure functions and stateless services; all I/O lives behind ports
"""

from otrs_bridge.domain.services.option_normalizer import (
    Invocation,
    normalize_options,
    event_info_from_options,
    DEFAULT_STATE_BY_EVENT_TYPE,
)
from otrs_bridge.domain.services.reconciliation_policy import (
    ReconciliationPolicy,
    TicketDefaults,
)

__all__ = [
    "Invocation",
    "normalize_options",
    "event_info_from_options",
    "DEFAULT_STATE_BY_EVENT_TYPE",
    "ReconciliationPolicy",
    "TicketDefaults",
]
