from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from config import get_settings_module

from .container import Container, build_container
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)


def create_app(**overrides) -> Container:
    """Load settings for APP_ENV, prepare the database if asked, and wire the container.

    Keyword overrides (``location``, ``capture``, ``clock``) go to build_container.
    """
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    backend = str(getattr(settings, "STORE_BACKEND", "mysql")).lower()
    db_config = getattr(settings, "DB_CONFIG")
    logger.info(
        "settings=%s backend=%s db=%s@%s:%s/%s",
        settings_module, backend,
        db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
    )

    if backend == "mysql" and bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    return build_container(settings, **overrides)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="attendance-guard")
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check-in", help="run the location + liveness check-in for a user")
    p_check.add_argument("user_id")

    p_ot = sub.add_parser("overtime", help="start or stop overtime for a user")
    p_ot.add_argument("action", choices=["start", "stop"])
    p_ot.add_argument("user_id")

    sub.add_parser("expire-corrections", help="expire approved corrections whose edit window ran out")

    args = parser.parse_args(argv)
    container = create_app()

    try:
        if args.command == "check-in":
            challenge = container.attendance_service.daily_challenge()
            print(f"Today's challenge: {challenge}")
            outcome = container.check_in_workflow.check_in(args.user_id, challenge_text=challenge)
            if outcome.checked_in:
                print(f"Checked in at {outcome.record.in_time:%I:%M %p}: {outcome.record.status.value}")
            else:
                reason = outcome.decision.reason.value if outcome.decision.reason else ""
                print(f"{outcome.decision.action.value} {reason}".strip())
        elif args.command == "overtime":
            if args.action == "start":
                record = container.overtime_workflow.start(args.user_id)
                print(f"Overtime started at {record.overtime.start_time:%I:%M %p}")
            else:
                record = container.overtime_workflow.stop(args.user_id)
                print(f"Overtime: {record.overtime.hours:.2f} hours")
        else:
            print(f"Expired {container.correction_service.expire_lapsed()} correction(s)")
    except DomainError as e:
        logger.error("%s failed: %s", args.command, e)
        print(str(e), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
