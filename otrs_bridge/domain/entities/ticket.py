"""
Ticket Module

Architectural Intent:
- TicketPayload is the transient, fully computed request for one invocation
- The operation kind decides which remote call is issued and whether the
  ledger is written afterwards
- Empty values never reach the wire: the remote side treats an absent field
  as "no change" on update and applies its own defaults on create
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional


class TicketOperation(Enum):
    CREATE = "TicketCreate"
    UPDATE = "TicketUpdate"

    @property
    def response_name(self) -> str:
        return f"{self.value}Response"


def _present(fields: Mapping[str, Any]) -> dict[str, str]:
    return {
        name: str(value)
        for name, value in fields.items()
        if value not in ("", 0, "0", None)
    }


@dataclass(frozen=True)
class TicketPayload:
    operation: TicketOperation
    ticket: dict[str, str] = field(default_factory=dict)
    article: dict[str, str] = field(default_factory=dict)
    dynamic_fields: dict[str, str] = field(default_factory=dict)
    ticket_id: Optional[int] = None

    def __post_init__(self) -> None:
        if self.operation is TicketOperation.UPDATE and not self.ticket_id:
            raise ValueError("TicketUpdate requires a ticket_id")
        if self.operation is TicketOperation.CREATE and self.ticket_id:
            raise ValueError("TicketCreate cannot carry a ticket_id")
        if self.operation is TicketOperation.UPDATE and self.dynamic_fields:
            raise ValueError("Dynamic fields are only attached on TicketCreate")
        object.__setattr__(self, "ticket", _present(self.ticket))
        object.__setattr__(self, "article", _present(self.article))
        object.__setattr__(self, "dynamic_fields", _present(self.dynamic_fields))

    @property
    def is_create(self) -> bool:
        return self.operation is TicketOperation.CREATE


@dataclass(frozen=True)
class TicketResult:
    ticket_id: int
    ticket_number: str
    article_id: Optional[int] = None

    def __str__(self) -> str:
        return (
            f"TicketID {self.ticket_id} (TicketNumber {self.ticket_number}, "
            f"ArticleID {self.article_id})"
        )
