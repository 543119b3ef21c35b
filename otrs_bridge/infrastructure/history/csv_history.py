"""
CSV Event History

Architectural Intent:
- Implements EventHistoryPort as an append-only CSV file
- Keeps a record of every invocation, including ones that fail validation
- Header row is written once, when the file is new or empty
"""

import csv
import logging
import os
from typing import Mapping

from otrs_bridge.domain.errors import StorageError

logger = logging.getLogger(__name__)


class CSVEventHistory:
    def __init__(self, path: str = "otrs-ticket.csv") -> None:
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def append(self, fields: Mapping[str, str]) -> None:
        logger.debug("Saving event_info fields to %s.", self._path)
        try:
            with open(self._path, "a", newline="", encoding="utf-8") as f:
                writer = csv.writer(f, quoting=csv.QUOTE_ALL)
                if os.path.getsize(self._path) == 0:
                    writer.writerow(list(fields))
                writer.writerow(list(fields.values()))
        except OSError as e:
            raise StorageError(f"Error opening {self._path}: {e}") from e
