"""
Composition Root

Architectural Intent:
- Dependency injection composition root for otrs-bridge
- Single place where adapters, policy and use case are wired together
- No adapter instantiation should occur outside this module (except tests)

Design Decisions:
- Uses a simple dataclass container instead of a DI framework
- Factory function builds everything from a BridgeConfig
- The ledger is not connected here; the CLI opens it only once validation
  has passed
"""

from dataclasses import dataclass
from typing import Optional

from otrs_bridge.application.use_cases.sync_problem_ticket import SyncProblemTicket
from otrs_bridge.domain.services.reconciliation_policy import ReconciliationPolicy
from otrs_bridge.infrastructure.adapters.otrs_soap_adapter import OTRSSoapAdapter
from otrs_bridge.infrastructure.config import BridgeConfig, load_config
from otrs_bridge.infrastructure.history.csv_history import CSVEventHistory
from otrs_bridge.infrastructure.repositories.sqlite_ledger import SQLiteProblemLedger


@dataclass
class BridgeContainer:
    """DI container holding all wired dependencies."""

    config: BridgeConfig
    ledger: SQLiteProblemLedger
    history: CSVEventHistory
    gateway: OTRSSoapAdapter
    policy: ReconciliationPolicy
    sync_ticket: SyncProblemTicket


def create_container(
    config: Optional[BridgeConfig] = None,
    timeout_seconds: Optional[float] = None,
) -> BridgeContainer:
    """Create and wire all dependencies."""
    config = config or load_config()

    ledger = SQLiteProblemLedger(config.paths.ledger_file)
    history = CSVEventHistory(config.paths.history_file)
    gateway = OTRSSoapAdapter(
        scheme=config.otrs.scheme,
        webservice_path=config.otrs.webservice_path,
        namespace=config.otrs.namespace,
        timeout_seconds=timeout_seconds or config.otrs.timeout_seconds,
    )
    policy = ReconciliationPolicy(config.ticket_defaults)
    sync_ticket = SyncProblemTicket(ledger, policy, gateway)

    return BridgeContainer(
        config=config,
        ledger=ledger,
        history=history,
        gateway=gateway,
        policy=policy,
        sync_ticket=sync_ticket,
    )
