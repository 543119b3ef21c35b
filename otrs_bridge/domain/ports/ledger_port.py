"""
Problem Ledger Port

Architectural Intent:
- Port interface for the durable problem id -> ticket id mapping
- Lookup is read-only and happens before the remote call
- Entries are only ever inserted, after a successful ticket creation

Design Decisions:
- Uses Protocol for structural typing (no inheritance needed)
- Synchronous: the backing store is a local file, not a remote service
"""

from typing import Optional, Protocol, runtime_checkable

from otrs_bridge.domain.entities.ledger_entry import LedgerEntry


@runtime_checkable
class ProblemLedgerPort(Protocol):
    """Port for the local problem-to-ticket ledger."""

    def find(self, problem_id: int) -> Optional[LedgerEntry]:
        """Return the entry for problem_id, or None if never seen."""
        ...

    def insert(self, problem_id: int, ticket_id: int, ticket_number: str) -> LedgerEntry:
        """Store a new entry. Raises DuplicateKeyError if problem_id exists."""
        ...
