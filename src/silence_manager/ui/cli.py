from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from silence_manager import __version__
from silence_manager.app import run_reconciliation
from silence_manager.config import ConfigurationError, configure_logging
from silence_manager.domain.reconciliation import ReconcileAbortedError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from silence_manager.domain.reconciliation import ReconcileResult

log = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Keep Alertmanager silences and Jira tickets in sync"
    )
    parser.add_argument(
        "--no-check-alerts",
        dest="check_alerts",
        action="store_false",
        default=None,
        help="Skip reopening closed tickets whose alerts fire again (overrides SYNC_CHECK_ALERTS)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Root log level (default: %(default)s)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(list(argv))


def _report(result: ReconcileResult) -> None:
    log.info("=== Synchronization Results ===")
    log.info("Silences extended: %d", result.silences_extended)
    log.info("Silences deleted: %d", result.silences_deleted)
    log.info("Silences created: %d", result.silences_created)
    log.info("Tickets reopened: %d", result.tickets_reopened)
    log.info("Errors: %d", len(result.errors))
    for index, error in enumerate(result.errors, start=1):
        log.error("  %d. %s", index, error)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=getattr(logging, parsed_args.log_level))
    log.info(f"Starting silence-manager version={__version__}")

    try:
        result = run_reconciliation(check_alerts=parsed_args.check_alerts)
    except ConfigurationError:
        log.exception("Invalid configuration")
        sys.exit(2)
    except ReconcileAbortedError:
        log.exception("Synchronization aborted")
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during sync")
        sys.exit(1)

    _report(result)
    if not result.ok:
        sys.exit(1)
    log.info("Synchronization completed successfully")


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point with `.env` loading and SIGINT handling."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
