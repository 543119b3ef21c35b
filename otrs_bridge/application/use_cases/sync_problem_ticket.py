"""
Sync Problem Ticket Use Case

Architectural Intent:
- Orchestrates one invocation: ledger lookup, reconciliation, remote call,
  ledger insert on creation
- Tracks the stage reached so a failure can be reported against it
- No retries: the monitoring system re-invokes on its own schedule

Stages (START until the first run; an Invocation is validated by
construction, so each run begins at VALIDATED):
  START -> VALIDATED -> LEDGER_CHECKED -> PAYLOAD_BUILT -> SUBMITTED
        -> SUCCEEDED | FAILED
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from otrs_bridge.domain.entities.ledger_entry import LedgerEntry
from otrs_bridge.domain.entities.ticket import TicketOperation, TicketResult
from otrs_bridge.domain.errors import StorageError
from otrs_bridge.domain.ports.ledger_port import ProblemLedgerPort
from otrs_bridge.domain.ports.ticket_gateway_port import TicketGatewayPort
from otrs_bridge.domain.services.option_normalizer import Invocation
from otrs_bridge.domain.services.reconciliation_policy import ReconciliationPolicy
from otrs_bridge.infrastructure.logging import notice

logger = logging.getLogger(__name__)


class SyncStage(Enum):
    START = auto()
    VALIDATED = auto()
    LEDGER_CHECKED = auto()
    PAYLOAD_BUILT = auto()
    SUBMITTED = auto()
    SUCCEEDED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class TicketSyncResult:
    operation: TicketOperation
    ticket: TicketResult
    ledger_entry: Optional[LedgerEntry] = None

    @property
    def created(self) -> bool:
        return self.operation is TicketOperation.CREATE


class SyncProblemTicket:
    def __init__(
        self,
        ledger: ProblemLedgerPort,
        policy: ReconciliationPolicy,
        gateway: TicketGatewayPort,
    ):
        self.ledger = ledger
        self.policy = policy
        self.gateway = gateway
        self.stage = SyncStage.START
        self.failed_at: Optional[SyncStage] = None

    def _advance(self, stage: SyncStage) -> None:
        logger.debug("Stage %s -> %s", self.stage.name, stage.name)
        self.stage = stage

    async def execute(self, invocation: Invocation) -> TicketSyncResult:
        self.stage = SyncStage.VALIDATED
        self.failed_at = None
        try:
            result = await self._run(invocation)
        except Exception:
            self.failed_at = self.stage
            self._advance(SyncStage.FAILED)
            raise
        self._advance(SyncStage.SUCCEEDED)
        return result

    async def _run(self, invocation: Invocation) -> TicketSyncResult:
        event = invocation.event

        existing = self.ledger.find(event.problem_id)
        if existing is not None:
            logger.info("Found ProblemID %s in database", event.problem_id)
            logger.info(
                "Updating TicketID %s (TicketNumber %s)",
                existing.ticket_id,
                existing.ticket_number,
            )
        else:
            logger.debug("ProblemID %s not found in database", event.problem_id)
            logger.info("Creating new OTRS Ticket for ProblemID %s", event.problem_id)
        self._advance(SyncStage.LEDGER_CHECKED)

        payload = self.policy.reconcile(event, existing)
        if not payload.is_create and "State" in payload.ticket:
            notice(logger, 'Updating Ticket State to "%s"', payload.ticket["State"])
        self._advance(SyncStage.PAYLOAD_BUILT)

        ticket = await self.gateway.submit(
            payload, invocation.credentials, invocation.server
        )
        self._advance(SyncStage.SUBMITTED)

        if not payload.is_create:
            logger.info("Updated %s", ticket)
            return TicketSyncResult(operation=payload.operation, ticket=ticket)

        logger.info("Created %s", ticket)
        logger.info(
            "Adding TicketID %s and ProblemID %s to ledger",
            ticket.ticket_id,
            event.problem_id,
        )
        try:
            entry = self.ledger.insert(
                event.problem_id, ticket.ticket_id, ticket.ticket_number
            )
        except StorageError:
            logger.critical(
                "TicketID %s (TicketNumber %s) was created but is not recorded for "
                "ProblemID %s; the next event for this problem will open a new ticket",
                ticket.ticket_id,
                ticket.ticket_number,
                event.problem_id,
            )
            raise
        return TicketSyncResult(
            operation=payload.operation, ticket=ticket, ledger_entry=entry
        )
