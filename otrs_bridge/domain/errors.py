"""
Domain Errors

Architectural Intent:
- Single error taxonomy for every stage of a ticket sync invocation
- Validation, storage and gateway failures are distinct types so the CLI
  can pick a log severity per family
- None of these are recovered internally; they abort the invocation
"""

from typing import Iterable, Mapping, Optional


class BridgeError(Exception):
    """Base class for all otrs-bridge failures."""


class ValidationError(BridgeError):
    """Options are missing, empty or malformed. Lists every violation."""

    def __init__(
        self,
        missing: Iterable[str] = (),
        invalid: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.missing = tuple(missing)
        self.invalid = dict(invalid or {})
        problems = []
        if self.missing:
            problems.append("missing or empty: " + ", ".join(self.missing))
        for name, reason in self.invalid.items():
            problems.append(f"invalid {name}: {reason}")
        super().__init__("Invalid arguments (" + "; ".join(problems) + ")")


class ConfigError(BridgeError):
    """Configuration file or environment holds an unusable value."""


class StorageError(BridgeError):
    """Ledger or history file could not be opened, read or written."""


class DuplicateKeyError(StorageError):
    def __init__(self, problem_id: int) -> None:
        self.problem_id = problem_id
        super().__init__(f"ProblemID {problem_id} already present in ledger")


class GatewayError(BridgeError):
    """Base class for failures talking to the ticketing service."""


class ResolutionError(GatewayError):
    def __init__(self, host: str, reason: str = "") -> None:
        self.host = host
        message = f"Failed to resolve IP of {host}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class RemoteFault(GatewayError):
    """Transport-level failure: connection error, HTTP error or SOAP Fault."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


class ApplicationError(GatewayError):
    """Well-formed response that carries an embedded OTRS Error element."""

    def __init__(self, code: str, message: str, response: str = "") -> None:
        self.code = code
        self.message = message
        self.response = response
        super().__init__(f"{code} = {message}")
