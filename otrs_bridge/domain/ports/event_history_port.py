from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class EventHistoryPort(Protocol):
    """Port for the append-only record of every invocation's event fields."""

    def append(self, fields: Mapping[str, str]) -> None:
        ...
