"""
CLI Module

Architectural Intent:
- Command-line entry point called by the monitoring notifier, once per alert
- Delegates to the sync use case via the composition root
- Maps every failure family to a log severity and exit code 1
- Supports --verbose for debug output on the console
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from otrs_bridge import composition_root
from otrs_bridge.domain.errors import (
    ApplicationError,
    ConfigError,
    GatewayError,
    StorageError,
    ValidationError,
)
from otrs_bridge.domain.services.option_normalizer import (
    event_info_from_options,
    normalize_options,
)
from otrs_bridge.infrastructure.config import BridgeConfig, load_config
from otrs_bridge.infrastructure.logging import REDACTED, configure_logging, level_from_name

__version__ = "1.3.0"

logger = logging.getLogger("otrs_bridge.cli")

PROG = "otrs-ticket"

EVENT_OPTIONS = (
    ("otrs_user", "OTRS agent login"),
    ("otrs_pass", "OTRS agent password"),
    ("otrs_server", "OTRS server as host[:port]"),
    ("problem_id", "Monitoring problem id ($HOSTPROBLEMID$ / $SERVICEPROBLEMID$)"),
    ("problem_id_last", "Previous problem id, used when problem_id is 0"),
    ("event_type", "Notification type (PROBLEM, RECOVERY, ACKNOWLEDGEMENT, ...)"),
    ("event_date", "Event date and time"),
    ("event_host", "Host name"),
    ("event_addr", "Host address"),
    ("event_desc", "Service description (empty for host notifications)"),
    ("event_state", "Host or service state"),
    ("event_output", "Plugin output"),
    ("otrs_customer", "Ticket CustomerUser"),
    ("otrs_queue", "Ticket Queue for new tickets"),
    ("otrs_priority", "Ticket PriorityID for new tickets"),
    ("otrs_type", "Ticket Type for new tickets"),
    ("otrs_state", "Ticket State (overrides the event type default)"),
    ("otrs_service", "Ticket Service for new tickets"),
)

SECRET_OPTIONS = frozenset({"otrs_pass"})


def _positive_float(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {value!r}")
    if seconds <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Create and update OTRS tickets from monitoring notifications",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug output on the console"
    )
    parser.add_argument(
        "--config", "-c", default=None, help="Path to JSON config file"
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="OTRS request timeout in seconds",
    )
    parser.add_argument(
        "--json-log", action="store_true", help="Emit log records as JSON"
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    for name, help_text in EVENT_OPTIONS:
        parser.add_argument(
            f"--{name}",
            f"--{name.replace('_', '-')}",
            dest=name,
            default=None,
            help=help_text,
        )
    return parser


def _log_arguments(raw: dict) -> None:
    for name in sorted(raw):
        if raw[name] is None:
            continue
        value = REDACTED if name in SECRET_OPTIONS else raw[name]
        logger.debug("Argument %s = %s", name, value)


async def run(raw: dict, container: "composition_root.BridgeContainer") -> int:
    """Run one invocation and return its exit code."""
    try:
        container.history.append(event_info_from_options(raw))
    except StorageError as e:
        logger.critical("%s", e)
        return 1

    try:
        invocation = normalize_options(raw, container.config.state_by_event_type)
    except ValidationError as e:
        for name in e.missing:
            logger.error("Required argument %s not defined or empty!", name)
        for name, reason in e.invalid.items():
            logger.error("Invalid argument %s: %s", name, reason)
        return 1

    _log_arguments(raw)

    try:
        container.ledger.connect()
        await container.sync_ticket.execute(invocation)
    except ApplicationError as e:
        logger.error("Error found in %s", e.response or "response")
        logger.error("%s = %s", e.code, e.message)
        return 1
    except (StorageError, GatewayError) as e:
        logger.critical("%s", e)
        return 1
    finally:
        container.ledger.close()
    return 0


def _load_config(path: Optional[str]) -> tuple[BridgeConfig, Optional[ConfigError]]:
    """Load config, keeping defaults around so a bad config can still be logged."""
    try:
        return load_config(path), None
    except ConfigError as e:
        return BridgeConfig(), e


async def async_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config, config_error = _load_config(args.config)
    configure_logging(
        level=logging.DEBUG if args.verbose else level_from_name(config.log_level),
        # Paths from a rejected config are not trusted; console only.
        log_file=None if config_error else config.paths.log_file,
        json_format=args.json_log,
    )

    logger.info("START of %s v%s script", PROG, __version__)
    try:
        if config_error is not None:
            logger.critical("%s", config_error)
            return 1
        container = composition_root.create_container(config, args.timeout)
        raw = {name: getattr(args, name) for name, _ in EVENT_OPTIONS}
        return await run(raw, container)
    finally:
        logger.info("END of %s v%s script", PROG, __version__)


def main():
    sys.exit(asyncio.run(async_main()))


if __name__ == "__main__":
    main()
