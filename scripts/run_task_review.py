"""Run the recurring task review: re-open overdue done tasks and notify members.

Usage:
    python -m scripts.run_task_review            # one run, exit 1 on failure
    python -m scripts.run_task_review --loop     # run every TASK_REVIEW_INTERVAL_SECONDS
Requires Postgres (DATABASE_URL). Email and in-app backends default to log-only.
"""

import argparse
import asyncio
import sys

from review_engine.core.config import get_settings
from review_engine.scheduler import (
    configure_runtime,
    run_forever,
    run_task_review_once,
    shutdown_runtime,
)
from review_engine.shared.telemetry.logging import get_logger

logger = get_logger("scripts.run_task_review")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the recurring task review.")
    parser.add_argument(
        "--loop",
        action="store_true",
        help="Keep running, sleeping TASK_REVIEW_INTERVAL_SECONDS between runs.",
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Override the loop interval in seconds.",
    )
    return parser.parse_args(argv)


async def main(argv: list[str]) -> int:
    """Run once (or loop) and return the process exit code."""
    args = _parse_args(argv)
    settings = get_settings()
    configure_runtime(settings)
    try:
        if args.loop:
            await run_forever(args.interval, settings=settings)
            return 0
        result = await run_task_review_once(settings=settings)
    except Exception:
        logger.exception("Task review run failed")
        return 1
    finally:
        await shutdown_runtime()

    print(
        f"{result.message} "
        f"(checked={result.total_tasks_checked}, "
        f"notified={result.notifications_sent}, "
        f"failed_notifications={result.notifications_failed}, "
        f"skipped={result.notifications_skipped})"
    )
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
