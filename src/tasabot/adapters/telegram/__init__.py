"""
Telegram Adapters - Bot Interface

This package contains Telegram bot adapters:
- Bot application builder
- Report notifier
- Scheduled jobs
"""

from tasabot.adapters.telegram.bot import build_application
from tasabot.adapters.telegram.jobs import DailyReportScheduler, daily_report_job
from tasabot.adapters.telegram.notifier import TelegramNotifier, handle_telegram_error

__all__ = [
    "build_application",
    "DailyReportScheduler",
    "daily_report_job",
    "TelegramNotifier",
    "handle_telegram_error",
]
