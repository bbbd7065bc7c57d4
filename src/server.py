"""Local timer runner for the dispatch periodic jobs.

In production the platform scheduler calls ``POST /jobs/order-reminders``
and ``POST /jobs/daily-digest``. This runner plays that role on a single
host:
- ReminderScanner: every REMINDER_SCAN_MINUTES (5), aligned to the interval
- DailyDigestJob: once a day at DIGEST_HOUR (7) in the operating timezone

Usage:
    python src/server.py                  # Run both jobs
    python src/server.py --job reminders  # Run only the reminder scanner
    python src/server.py --job digest     # Run only the daily digest
"""

import argparse
import asyncio
from datetime import datetime, time, timedelta

import structlog

from dispatch.config import get_settings
from dispatch.domain import dispatch
from dispatch.jobs.clock import now_local
from dispatch.jobs.digest import DailyDigestJob
from dispatch.jobs.reminders import ReminderScanner
from dispatch.utils.logging import bind_invocation, configure_logging

logger = structlog.get_logger(__name__)


def seconds_until_next_scan(now: datetime, interval_minutes: int) -> float:
    """Sleep until the next wall-clock multiple of the interval."""
    interval = interval_minutes * 60
    elapsed = (now.minute * 60 + now.second + now.microsecond / 1_000_000) % interval
    return interval - elapsed


def seconds_until_digest(now: datetime, hour: int) -> float:
    target = datetime.combine(now.date(), time(hour), tzinfo=now.tzinfo)
    if target <= now:
        target = datetime.combine(now.date() + timedelta(days=1), time(hour), tzinfo=now.tzinfo)
    return (target - now).total_seconds()


async def _run_job(name, job_coroutine):
    # Job runs are never cancelled mid-run; a failed run waits for the next tick
    bind_invocation(trigger=name)
    try:
        with dispatch.domain_context():
            await job_coroutine()
    except Exception:
        logger.exception("Periodic job failed", job=name)


async def run_reminders():
    settings = get_settings()
    scanner = ReminderScanner(settings=settings)
    while True:
        await asyncio.sleep(seconds_until_next_scan(now_local(settings.tz), settings.reminder_scan_minutes))
        await _run_job("order_reminders", scanner.scan)


async def run_digest():
    settings = get_settings()
    job = DailyDigestJob(settings=settings)
    while True:
        await asyncio.sleep(seconds_until_digest(now_local(settings.tz), settings.digest_hour))
        await _run_job("daily_digest", job.run)


async def run(job_names):
    runners = {"reminders": run_reminders, "digest": run_digest}
    await asyncio.gather(*(runners[name]() for name in job_names))


def main():
    parser = argparse.ArgumentParser(description="Dispatch periodic job runner")
    parser.add_argument(
        "--job",
        choices=["reminders", "digest"],
        help="Run a single job (default: run all)",
    )
    args = parser.parse_args()

    configure_logging()
    dispatch.init()

    job_names = [args.job] if args.job else ["reminders", "digest"]

    asyncio.run(run(job_names))


if __name__ == "__main__":
    main()
