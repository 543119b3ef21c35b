"""
Reconciliation Policy

Architectural Intent:
- Domain service deciding create-vs-update for a monitoring problem
- Computes the complete outbound field set for either operation
- Defaults are injected, not global, so tests control them fully

Domain Logic:
- A ledger hit means the problem already has a ticket: update it, and only
  touch its State when the event carries a target state
- A ledger miss opens a new ticket with queue/priority/type/state/service
  taken from overrides or defaults, plus the problem's dynamic fields
- Title, subject, body, customer and article metadata are common to both
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from otrs_bridge.domain.entities.ledger_entry import LedgerEntry
from otrs_bridge.domain.entities.ticket import TicketOperation, TicketPayload
from otrs_bridge.domain.value_objects.event_record import EventRecord

# GenericTicketConnector field catalogue: which group each field travels in.
TICKET_FIELDS = (
    "Title",
    "QueueID",
    "Queue",
    "TypeID",
    "Type",
    "ServiceID",
    "Service",
    "SLAID",
    "SLA",
    "StateID",
    "State",
    "PriorityID",
    "Priority",
    "OwnerID",
    "Owner",
    "ResponsibleID",
    "Responsible",
    "CustomerUser",
)

ARTICLE_FIELDS = (
    "ArticleTypeID",
    "ArticleType",
    "SenderTypeID",
    "SenderType",
    "Subject",
    "Body",
    "ContentType",
    "Charset",
    "MimeType",
    "HistoryType",
    "HistoryComment",
    "AutoResponseType",
    "TimeUnit",
    "NoAgentNotify",
    "ForceNotificationToUserID",
    "ExcludeNotificationToUserID",
    "ExcludeMuteNotificationToUserID",
)

CONTENT_TYPE = "text/plain; charset=utf8"
SENDER_TYPE = "system"


@dataclass(frozen=True)
class TicketDefaults:
    """Values used for a new ticket when the caller supplies no override."""
    queue: str = "REPAD-Monitoramento"
    priority_id: str = "3"
    type: str = "Incident"
    state: str = "new"
    customer_user: str = "unknown"
    service: str = ""


def build_title(event: EventRecord) -> str:
    title = f"{event.event_type}: {event.host_name}"
    if event.service_desc:
        title += f"/{event.service_desc}"
    return f"{title} is {event.event_state}"


def build_body(event: EventRecord) -> str:
    lines = [f"{name} = {value}\n" for name, value in event.event_info().items()]
    return event.event_output + "\n\n" + "".join(lines)


def _split_fields(fields: dict[str, str]) -> tuple[dict[str, str], dict[str, str]]:
    ticket = {name: fields[name] for name in TICKET_FIELDS if name in fields}
    article = {name: fields[name] for name in ARTICLE_FIELDS if name in fields}
    return ticket, article


class ReconciliationPolicy:
    """
    Decides whether an event opens a new ticket or updates the existing one.
    """

    def __init__(self, defaults: Optional[TicketDefaults] = None):
        self._defaults = defaults or TicketDefaults()

    @property
    def defaults(self) -> TicketDefaults:
        return self._defaults

    def reconcile(
        self,
        event: EventRecord,
        existing: Optional[LedgerEntry],
    ) -> TicketPayload:
        overrides = event.overrides
        defaults = self._defaults
        fields: dict[str, str] = {}
        dynamic_fields: dict[str, str] = {}

        if existing is not None:
            operation = TicketOperation.UPDATE
            if event.target_state:
                fields["State"] = event.target_state
        else:
            operation = TicketOperation.CREATE
            fields.update({
                "Queue": overrides.queue or defaults.queue,
                "PriorityID": overrides.priority or defaults.priority_id,
                "Type": overrides.type or defaults.type,
                "State": overrides.state or defaults.state,
                "Service": overrides.service or defaults.service,
            })
            dynamic_fields = {
                "ProblemID": str(event.problem_id),
                "HostName": event.host_name,
                "HostAddress": event.host_address,
                "ServiceDesc": event.service_desc,
            }

        title = build_title(event)
        fields.update({
            "CustomerUser": overrides.customer or defaults.customer_user,
            "ContentType": CONTENT_TYPE,
            "SenderType": SENDER_TYPE,
            "Title": title,
            "Subject": title,
            "Body": build_body(event),
        })

        ticket, article = _split_fields(fields)
        return TicketPayload(
            operation=operation,
            ticket_id=existing.ticket_id if existing is not None else None,
            ticket=ticket,
            article=article,
            dynamic_fields=dynamic_fields,
        )
