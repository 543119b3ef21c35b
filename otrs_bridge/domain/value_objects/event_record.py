"""
Event Record Value Object

Architectural Intent:
- Immutable, normalized view of one monitoring notification
- Built once per invocation by the option normalizer, never mutated
- Renders its event fields under stable display names for the ticket body
  and the CSV history
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass(frozen=True)
class TicketOverrides:
    """Ticket attributes supplied explicitly by the caller."""
    queue: str = ""
    priority: str = ""
    type: str = ""
    state: str = ""
    service: str = ""
    customer: str = ""


@dataclass(frozen=True)
class EventRecord:
    problem_id: int
    event_type: str
    event_date: str
    host_name: str
    host_address: str
    event_state: str
    event_output: str
    problem_id_last: int = 0
    service_desc: str = ""
    overrides: TicketOverrides = field(default_factory=TicketOverrides)

    def __post_init__(self) -> None:
        if self.problem_id < 0 or self.problem_id_last < 0:
            raise ValueError("Problem ids must be non-negative")

    @property
    def target_state(self) -> str:
        return self.overrides.state

    def event_info(self) -> dict[str, str]:
        """Event fields keyed by display name, in sorted name order."""
        info = {
            "ProblemID": str(self.problem_id),
            "ProblemIDLast": str(self.problem_id_last),
            "EventType": self.event_type,
            "EventDate": self.event_date,
            "EventHostName": self.host_name,
            "EventHostAddress": self.host_address,
            "EventServiceDesc": self.service_desc,
            "EventState": self.event_state,
            "EventOutput": self.event_output,
        }
        return {name: info[name] for name in sorted(info)}
