"""
Option Normalizer

Architectural Intent:
- Turns the notifier's raw option mapping into a validated Invocation
- Pure function over its input: the raw mapping is never mutated
- Two explicit phases: normalize-with-fallback, then default-if-absent

Domain Logic:
- Problem ids are sanitized (non-digits stripped) rather than rejected
- A problem id of 0 falls back to the previous problem id
- The target ticket state defaults from the event type when not given
- Validation reports every missing option at once
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from otrs_bridge.domain.errors import ValidationError
from otrs_bridge.domain.value_objects.event_record import EventRecord, TicketOverrides
from otrs_bridge.domain.value_objects.server_address import Credentials, ServerAddress

DEFAULT_STATE_BY_EVENT_TYPE: Mapping[str, str] = {
    "ACKNOWLEDGEMENT": "Aberto",
    "RECOVERY": "recovered",
}

REQUIRED_OPTIONS = tuple(sorted((
    "otrs_user",
    "otrs_pass",
    "otrs_server",
    "problem_id",
    "event_type",
    "event_date",
    "event_host",
    "event_addr",
    "event_state",
    "event_output",
)))

# Nagios renders "$SERVICEACKAUTHOR$ $SERVICEACKCOMMENT$" this way for host notifications
_EMPTY_DESC_PLACEHOLDER = "$ $"

_NON_DIGITS = re.compile(r"[^0-9]")


@dataclass(frozen=True)
class Invocation:
    """Everything one run needs: the event plus where and as whom to send it."""
    event: EventRecord
    credentials: Credentials
    server: ServerAddress


def sanitize_problem_id(value: Optional[str]) -> int:
    digits = _NON_DIGITS.sub("", value or "")
    return int(digits) if digits else 0


def resolve_problem_id(problem_id: int, problem_id_last: int) -> int:
    if problem_id == 0 and problem_id_last > 0:
        return problem_id_last
    return problem_id


def default_target_state(
    event_type: str,
    explicit_state: str,
    state_by_event_type: Mapping[str, str],
) -> str:
    if explicit_state:
        return explicit_state
    return state_by_event_type.get(event_type, "") or ""


def _text(raw: Mapping[str, Optional[str]], key: str) -> str:
    value = raw.get(key)
    return "" if value is None else str(value)


def _event_fields(raw: Mapping[str, Optional[str]]) -> dict[str, Any]:
    """Normalized EventRecord keyword arguments, without any validation."""
    problem_id_last = sanitize_problem_id(raw.get("problem_id_last"))
    service_desc = _text(raw, "event_desc")
    if service_desc == _EMPTY_DESC_PLACEHOLDER:
        service_desc = ""
    return {
        "problem_id": resolve_problem_id(
            sanitize_problem_id(raw.get("problem_id")), problem_id_last
        ),
        "problem_id_last": problem_id_last,
        "event_type": _text(raw, "event_type"),
        "event_date": _text(raw, "event_date"),
        "host_name": _text(raw, "event_host"),
        "host_address": _text(raw, "event_addr"),
        "service_desc": service_desc,
        "event_state": _text(raw, "event_state"),
        "event_output": _text(raw, "event_output"),
    }


def missing_options(raw: Mapping[str, Optional[str]]) -> list[str]:
    """Required options that are absent or empty after normalization."""
    fields = _event_fields(raw)
    missing = []
    for key in REQUIRED_OPTIONS:
        if key == "problem_id":
            present = fields["problem_id"] > 0
        else:
            present = bool(_text(raw, key))
        if not present:
            missing.append(key)
    return missing


def normalize_options(
    raw: Mapping[str, Optional[str]],
    state_by_event_type: Optional[Mapping[str, str]] = None,
) -> Invocation:
    """Validate and default raw options into an Invocation.

    Args:
        raw: Option name -> string value (or None when absent).
        state_by_event_type: Event type -> default target ticket state.

    Raises:
        ValidationError: listing every required option that is missing or empty.
    """
    if state_by_event_type is None:
        state_by_event_type = DEFAULT_STATE_BY_EVENT_TYPE

    missing = missing_options(raw)
    invalid = {}
    server = None
    if "otrs_server" not in missing:
        try:
            server = ServerAddress.parse(_text(raw, "otrs_server"))
        except ValueError as e:
            invalid["otrs_server"] = str(e)
    if missing or invalid:
        raise ValidationError(missing, invalid)
    assert server is not None

    fields = _event_fields(raw)
    overrides = TicketOverrides(
        queue=_text(raw, "otrs_queue"),
        priority=_text(raw, "otrs_priority"),
        type=_text(raw, "otrs_type"),
        state=default_target_state(
            fields["event_type"], _text(raw, "otrs_state"), state_by_event_type
        ),
        service=_text(raw, "otrs_service"),
        customer=_text(raw, "otrs_customer"),
    )

    return Invocation(
        event=EventRecord(overrides=overrides, **fields),
        credentials=Credentials(
            user=_text(raw, "otrs_user"), password=_text(raw, "otrs_pass")
        ),
        server=server,
    )


def event_info_from_options(raw: Mapping[str, Optional[str]]) -> dict[str, str]:
    """EventRecord.event_info() for options that may not pass validation.

    The history log records every invocation, including incomplete ones.
    """
    return EventRecord(**_event_fields(raw)).event_info()
