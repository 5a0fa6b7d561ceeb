"""
Telegram Jobs - Scheduled Daily Report

This module registers the daily report with python-telegram-bot's
JobQueue and implements the job callback. The callback catches and logs
every failure so one bad tick never unschedules the job; missed ticks
(process down at 14:00) are not replayed.

Files that USE this module:
- tasabot.app (registers the daily report after the server is bound)
- tests.test_jobs (unit tests)

Files that this module USES:
- tasabot.application.report_service (ReportService for the pipeline)
- tasabot.domain.models (ReportKind)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

import logging  # Standard library for logging messages
from datetime import datetime, time, timezone  # Date/time utilities for scheduling
from typing import TYPE_CHECKING, Optional  # Type hints for optional values
from zoneinfo import ZoneInfo  # IANA timezones

from telegram.ext import ContextTypes, Job, JobQueue  # Telegram job queue types

from tasabot.domain.models import ReportKind

if TYPE_CHECKING:
    from tasabot.application.report_service import ReportService

DAILY_JOB_NAME = "daily_report"
SCHEDULE_TZ = ZoneInfo("Etc/GMT-3")  # UTC+3

logger = logging.getLogger(__name__)


async def daily_report_job(context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Send the daily report.

    Args:
        context: Job context; context.job.data holds the ReportService
    """
    now = datetime.now(timezone.utc)
    logger.info(
        "[%s] Running scheduled daily report (%s UTC+3)",
        now.astimezone(SCHEDULE_TZ).strftime("%d/%m/%Y %H:%M:%S"),
        context.job.name if context.job else DAILY_JOB_NAME,
    )
    service: ReportService = context.job.data
    try:
        await service.send(ReportKind.DAILY, now=now)
    except Exception as e:
        logger.exception("Error inside the scheduled daily report: %s (type: %s)", e, type(e).__name__)


class DailyReportScheduler:
    """Owns the single daily report job for the process lifetime."""

    def __init__(self, job_queue: JobQueue, hour: int = 14, minute: int = 0):
        self.job_queue = job_queue
        self.run_at = time(hour, minute, 0, tzinfo=SCHEDULE_TZ)
        self.job: Optional[Job] = None

    def register(self, service: ReportService) -> Job:
        """
        Schedule the daily report; later calls return the existing job.

        Args:
            service: Report pipeline passed to every tick as job data

        Returns:
            The scheduled Job
        """
        if self.job is not None:
            logger.warning("Daily report already scheduled; ignoring second registration")
            return self.job

        self.job = self.job_queue.run_daily(
            callback=daily_report_job,
            time=self.run_at,
            name=DAILY_JOB_NAME,
            data=service,
        )
        logger.info(
            "Daily report scheduled at %02d:%02d UTC+3",
            self.run_at.hour,
            self.run_at.minute,
        )
        return self.job
