"""
SQLite Problem Ledger

Architectural Intent:
- Implements ProblemLedgerPort on a single SQLite file (stdlib, zero external deps)
- Maps monitoring problem ids to the OTRS ticket created for them
- Auto-creates its table on first use

Design Decisions:
- ProblemID is the primary key, so a second insert for the same problem
  fails at the database level and leaves the stored row untouched
- TicketNumber stored as TEXT: OTRS ticket numbers are digit strings that
  may carry leading zeros
- Every sqlite3.Error surfaces as StorageError
"""

from __future__ import annotations
import sqlite3
import logging
from typing import Optional

from otrs_bridge.domain.entities.ledger_entry import LedgerEntry
from otrs_bridge.domain.errors import DuplicateKeyError, StorageError

logger = logging.getLogger(__name__)

LEDGER_TABLE = "TicketIDAssoc"


class SQLiteProblemLedger:
    """Problem ledger persisted in SQLite."""

    def __init__(self, db_path: str = "otrs-ticket.sqlite"):
        self._db_path = db_path
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def db_path(self) -> str:
        return self._db_path

    def connect(self) -> None:
        """Open database connection and create tables."""
        try:
            self._conn = sqlite3.connect(self._db_path)
            self._conn.execute("PRAGMA foreign_keys=ON")
            self._conn.row_factory = sqlite3.Row
            self._create_tables()
        except sqlite3.Error as e:
            self.close()
            raise StorageError(f"Cannot open ledger {self._db_path}: {e}") from e
        logger.debug("Problem ledger connected: %s", self._db_path)

    def close(self) -> None:
        """Close database connection."""
        if self._conn:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "SQLiteProblemLedger":
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _create_tables(self) -> None:
        """Create tables if they don't exist."""
        assert self._conn is not None
        self._conn.executescript(f"""
            CREATE TABLE IF NOT EXISTS {LEDGER_TABLE} (
                ProblemID INTEGER PRIMARY KEY,
                TicketID INTEGER NOT NULL,
                TicketNumber TEXT
            );
        """)

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.connect()
        assert self._conn is not None
        return self._conn

    def find(self, problem_id: int) -> Optional[LedgerEntry]:
        """Look up the ticket previously created for a problem."""
        conn = self._connection()
        try:
            row = conn.execute(
                f"SELECT ProblemID, TicketID, TicketNumber FROM {LEDGER_TABLE} "
                "WHERE ProblemID = ?",
                (problem_id,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Ledger lookup for ProblemID {problem_id} failed: {e}") from e
        if row is None:
            return None
        return LedgerEntry(
            problem_id=row["ProblemID"],
            ticket_id=row["TicketID"],
            ticket_number=row["TicketNumber"] or "",
        )

    def insert(self, problem_id: int, ticket_id: int, ticket_number: str) -> LedgerEntry:
        """Record the ticket created for a problem."""
        conn = self._connection()
        try:
            with conn:
                conn.execute(
                    f"INSERT INTO {LEDGER_TABLE} (ProblemID, TicketID, TicketNumber) "
                    "VALUES (?, ?, ?)",
                    (problem_id, ticket_id, ticket_number),
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateKeyError(problem_id) from e
        except sqlite3.Error as e:
            raise StorageError(f"Ledger insert for ProblemID {problem_id} failed: {e}") from e
        return LedgerEntry(problem_id, ticket_id, ticket_number)
