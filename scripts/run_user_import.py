"""
Run the user bulk import from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from contextlib import ExitStack, closing

from app.config import get_user_import_settings
from app.connectors.bulk_create_connector import BulkCreateConnector
from app.errors import ImportConfigurationError, TerminalDeliveryError
from app.logging_utils import configure_logging
from app.services.user_import_service import build_user_import_run
from db.session import SessionLocal

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Export all users to the bulk create API.")
    parser.add_argument(
        "--status",
        dest="status",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Print one '.' per delivered user and one 'F' per rejected user.",
    )
    args = parser.parse_args(argv)

    configure_logging()
    settings = get_user_import_settings()

    try:
        with ExitStack() as stack:
            client = stack.enter_context(closing(BulkCreateConnector(settings=settings)))
            run = build_user_import_run(
                open_session=lambda: stack.enter_context(SessionLocal()),
                settings=settings,
                status_stream=sys.stdout if args.status else None,
                client=client,
            )
            summary = run.run()
    except ImportConfigurationError as exc:
        logger.error("User import aborted: %s", exc)
        return 2
    except TerminalDeliveryError as exc:
        logger.error("User import failed status=%s attempts=%s: %s", exc.status_code, exc.attempts, exc)
        return 1
    except RuntimeError as exc:
        # db.config and db.session report a missing or unsupported database URL this way.
        logger.error("User import aborted, database is not configured: %s", exc)
        return 2

    if args.status:
        print()
    payload = {
        "total_sent": summary.total_sent,
        "total_failed": summary.total_failed,
        "failed": summary.failed,
    }
    print(json.dumps(payload, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
