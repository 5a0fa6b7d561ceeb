"""
Report Service - Fetch, Format and Deliver One Report

This module contains the report pipeline used by both the startup
notification and the daily job: fetch the quote (unless the rate API is
not configured), build the caption, and hand it to the notifier. Rate
failures are captured as FetchResult values so the caption degrades
instead of the send failing.

Files that USE this module:
- tasabot.app (startup report)
- tasabot.adapters.telegram.jobs (daily report job)
- tests.test_report_service (unit tests)

Files that this module USES:
- tasabot.adapters.providers.base (RateProvider contract)
- tasabot.adapters.formatting.formatter (build_report, fallback_banner)
- tasabot.adapters.telegram.notifier (TelegramNotifier)
- tasabot.domain (FetchResult, ReportKind, DeliveryOutcome, errors)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

import asyncio  # Run the blocking HTTP call off the event loop
import logging  # Standard library for logging messages
from datetime import datetime  # Injectable clock for captions
from typing import Optional  # Type hints for optional values

from tasabot.adapters.formatting.formatter import build_report, fallback_banner
from tasabot.adapters.providers.base import RateProvider
from tasabot.adapters.telegram.notifier import TelegramNotifier
from tasabot.domain.errors import InvalidRateData, RateFetchError
from tasabot.domain.models import DeliveryOutcome, FetchResult, ReportKind

logger = logging.getLogger(__name__)


class ReportService:
    """
    Builds and delivers startup and daily rate reports.

    Each call is independent: one fetch attempt, one send attempt and at
    most one text fallback. Nothing is retried or remembered between calls.
    """

    def __init__(
        self,
        notifier: TelegramNotifier,
        provider: Optional[RateProvider] = None,
        image_url: Optional[str] = None,
    ):
        """
        Args:
            notifier: Delivers the caption to Telegram
            provider: Rate provider, or None when the rate API is not configured
            image_url: Photo sent with each report, or None for text-only reports
        """
        self.notifier = notifier
        self.provider = provider
        self.image_url = image_url

    async def fetch(self) -> FetchResult:
        """
        Fetch the current quote without raising.

        Returns:
            FetchResult.ok, .unconfigured (no network call made),
            .invalid (bad data) or .failed (unreachable / HTTP error)
        """
        if self.provider is None:
            logger.warning("Cannot fetch rates: PYDOLARVE_API_URL is not defined")
            return FetchResult.unconfigured()

        loop = asyncio.get_running_loop()
        try:
            quote = await loop.run_in_executor(None, self.provider.fetch_quote)
        except InvalidRateData as e:
            logger.warning("No valid prices from the rate API (BCV or Paralelo not numeric): %s", e)
            return FetchResult.invalid(str(e))
        except RateFetchError as e:
            logger.error("Error fetching dollar rates (%s): %s", type(e).__name__, e)
            return FetchResult.failed(str(e))
        return FetchResult.ok(quote)

    async def send(self, kind: ReportKind, now: Optional[datetime] = None) -> DeliveryOutcome:
        """
        Run the whole pipeline for one report.

        Args:
            kind: Startup or daily report
            now: Clock override for the date stamp

        Returns:
            DeliveryOutcome of the Telegram send
        """
        logger.info("Starting %s report", kind.value)
        result = await self.fetch()
        report = build_report(kind, result, now)
        outcome = await self.notifier.send_report(
            report.caption,
            self.image_url,
            fallback_banner(kind),
            label=f"{kind.value} report",
        )
        logger.info(
            "%s report finished: body=%s outcome=%s",
            kind.value.capitalize(),
            report.body_kind.value,
            outcome.value,
        )
        return outcome
