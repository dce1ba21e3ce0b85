from __future__ import annotations

import argparse
import logging
import sys
from datetime import date

from planner.infra.db import init_db
from planner.infra.logging import setup_logging
from planner.infra.repository import TaskRepository
from planner.services.task_service import RecurrenceReport, TaskService

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="planner",
        description="Report recurring tasks with their schedule and next occurrence.",
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Reference date for the activity check (YYYY-MM-DD, default: today)",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser.parse_args(argv)


def format_report_line(report: RecurrenceReport) -> str:
    task = report.task
    next_text = report.next_date.isoformat() if report.next_date else "-"
    state = "active" if report.active else "ended"
    return f"#{task.id} {task.name}: {report.summary}; next {next_text} ({state})"


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.log_level)
    try:
        init_db()
    except Exception as exc:  # noqa: BLE001
        logger.error("Database is not reachable: %s", exc)
        return 1

    service = TaskService(TaskRepository())
    reports = service.list_recurring(args.today)
    for report in reports:
        print(format_report_line(report))
    logger.info("Reported %d recurring task(s)", len(reports))
    return 0


if __name__ == "__main__":
    sys.exit(main())
