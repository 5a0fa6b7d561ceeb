# src/tasabot/app.py
"""
Application Entry Point - Bot Initialization and Startup

This module serves as the composition root for TasaBot. It loads the
configuration, builds the Telegram application, binds the HTTP liveness
listener, sends the startup report and schedules the daily report. All
process-lifetime handles live on one AppContext that is passed to the
bootstrap and shutdown code.

Files that USE this module:
- python -m tasabot / the tasabot console script

Files that this module USES:
- tasabot.shared.logging_conf (setup_logging for logging configuration)
- tasabot.config (get_settings for configuration management)
- tasabot.adapters.telegram (application builder, notifier, daily scheduler)
- tasabot.adapters.http (liveness app and port-retry binding)
- tasabot.adapters.providers (pydolarve rate provider)
- tasabot.application.report_service (report pipeline)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import asyncio  # Event loop, tasks and signal integration
import logging  # Standard library for logging messages and errors
import os  # Hard process exit for the emergency timer
import signal  # Process signals for graceful shutdown
import socket  # Listening socket handle
import sys  # System-specific parameters and functions for exit codes
from dataclasses import dataclass, field  # Process-lifetime context object
from typing import Any, Dict, Optional  # Type hints

from pydantic import ValidationError  # Raised by Settings on missing/invalid values
from telegram.error import TelegramError  # Telegram API error base class
from telegram.ext import Application  # Telegram bot application class

from tasabot.adapters.http.server import (
    ListenerServer,
    bind_listener,
    build_http_server,
    create_http_app,
)
from tasabot.adapters.providers.pydolarve import PyDolarVeProvider
from tasabot.adapters.telegram.bot import build_application
from tasabot.adapters.telegram.jobs import DailyReportScheduler
from tasabot.adapters.telegram.notifier import TelegramNotifier
from tasabot.application.report_service import ReportService
from tasabot.config.settings import Settings, get_settings
from tasabot.domain.errors import PortRetryExhausted
from tasabot.domain.models import ReportKind
from tasabot.shared.logging_conf import setup_logging

logger = logging.getLogger(__name__)

# Safety net when an error-driven shutdown stalls
EMERGENCY_EXIT_SECONDS = 2.0


@dataclass
class AppContext:
    """
    Process-lifetime state shared by bootstrap and shutdown.

    The listener, HTTP server and daily job are each set once by their
    owner and only read afterwards.
    """
    settings: Settings
    application: Application
    notifier: TelegramNotifier
    reports: ReportService
    scheduler: DailyReportScheduler
    listener: Optional[socket.socket] = None
    http_server: Optional[ListenerServer] = None
    server_task: Optional[asyncio.Task] = None
    shutdown_event: asyncio.Event = field(default_factory=asyncio.Event)
    shutdown_reason: str = ""
    exit_code: int = 0

    @property
    def port(self) -> Optional[int]:
        """Port of the bound listener, or None before binding."""
        if self.listener is None or self.listener.fileno() == -1:
            return None
        return self.listener.getsockname()[1]

    def request_shutdown(self, reason: str, failed: bool = False) -> None:
        """Ask the main task to shut down; the first reason wins."""
        if failed:
            self.exit_code = 1
        if self.shutdown_event.is_set():
            return
        self.shutdown_reason = reason
        self.shutdown_event.set()


def build_context(settings: Settings, application: Application) -> AppContext:
    """Wire the notifier, provider, report pipeline and scheduler."""
    notifier = TelegramNotifier(
        application.bot,
        chat_id=settings.chat_id,
        message_thread_id=settings.message_thread_id,
    )
    provider = None
    if settings.rate_api_url:
        provider = PyDolarVeProvider(settings.rate_api_url, timeout=settings.http_timeout_seconds)
    reports = ReportService(notifier, provider=provider, image_url=settings.image_url)
    scheduler = DailyReportScheduler(
        application.job_queue,
        hour=settings.daily_hour,
        minute=settings.daily_minute,
    )
    return AppContext(
        settings=settings,
        application=application,
        notifier=notifier,
        reports=reports,
        scheduler=scheduler,
    )


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, ctx: AppContext) -> None:
    for sig, label in ((signal.SIGTERM, "SIGTERM"), (signal.SIGINT, "SIGINT (Ctrl+C)")):
        try:
            loop.add_signal_handler(sig, ctx.request_shutdown, label)
        except NotImplementedError:
            # Windows event loops have no add_signal_handler
            signal.signal(
                sig,
                lambda _signum, _frame, label=label: loop.call_soon_threadsafe(ctx.request_shutdown, label),
            )


def _force_exit() -> None:
    logger.error("Shutdown did not complete in time, forcing exit.")
    logging.shutdown()
    os._exit(1)


def _loop_exception_handler(ctx: AppContext, loop: asyncio.AbstractEventLoop, context: Dict[str, Any]) -> None:
    """Log unhandled async errors and drive an emergency shutdown."""
    error = context.get("exception")
    logger.error(
        "Unhandled error in event loop: %s",
        context.get("message", "unknown"),
        exc_info=(type(error), error, error.__traceback__) if error is not None else None,
    )
    if not ctx.shutdown_event.is_set():
        loop.call_later(EMERGENCY_EXIT_SECONDS, _force_exit)
    ctx.request_shutdown("unhandled error", failed=True)


def _watch_server_task(ctx: AppContext, task: asyncio.Task) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error("HTTP server stopped with an error: %s", error, exc_info=error)
        ctx.request_shutdown("HTTP server failure", failed=True)
    elif not ctx.shutdown_event.is_set():
        logger.warning("HTTP server exited unexpectedly")
        ctx.request_shutdown("HTTP server exit", failed=True)


async def shutdown(ctx: AppContext) -> int:
    """
    Close the HTTP server, stop the Telegram application and pick the exit code.

    Returns:
        0 after a clean close, 1 if the close timed out or shutdown was error-driven
    """
    logger.info("%s signal received: closing HTTP server...", ctx.shutdown_reason or "Shutdown")
    exit_code = ctx.exit_code

    if ctx.http_server is None or ctx.server_task is None:
        logger.info("No active server to close.")
    else:
        ctx.http_server.should_exit = True
        try:
            await asyncio.wait_for(asyncio.shield(ctx.server_task), timeout=ctx.settings.shutdown_grace_seconds)
            logger.info("HTTP server closed.")
        except asyncio.TimeoutError:
            logger.error("Server close timed out, forcing exit.")
            ctx.server_task.cancel()
            exit_code = 1
        except Exception as e:
            logger.error("HTTP server failed while closing: %s", e)
            exit_code = 1

    if ctx.listener is not None:
        ctx.listener.close()

    # The daily job ends with the JobQueue here; it is not cancelled on its own
    try:
        if ctx.application.running:
            await ctx.application.stop()
        await ctx.application.shutdown()
    except Exception as e:
        logger.error("Error while stopping the Telegram application: %s", e)

    return exit_code


async def run(ctx: AppContext) -> int:
    """
    Bootstrap the process and block until shutdown.

    Returns:
        Process exit code
    """
    loop = asyncio.get_running_loop()
    _install_signal_handlers(loop, ctx)
    loop.set_exception_handler(lambda lp, context: _loop_exception_handler(ctx, lp, context))

    try:
        ctx.listener = await bind_listener(
            ctx.settings.host,
            ctx.settings.port,
            max_attempts=ctx.settings.max_port_attempts,
        )
    except PortRetryExhausted as e:
        logger.error("%s. Exiting.", e)
        return 1
    except OSError as e:
        logger.error("Fatal server startup error: %s", e)
        return 1

    ctx.http_server = build_http_server(
        create_http_app(lambda: ctx.port),
        grace_seconds=ctx.settings.shutdown_grace_seconds,
    )
    ctx.server_task = asyncio.create_task(ctx.http_server.serve(sockets=[ctx.listener]), name="http-server")
    ctx.server_task.add_done_callback(lambda task: _watch_server_task(ctx, task))
    while not ctx.http_server.started and not ctx.server_task.done():
        await asyncio.sleep(0.05)
    logger.info("API server running on http://localhost:%d", ctx.port)

    try:
        await ctx.application.initialize()
    except TelegramError as e:
        logger.error("Failed to initialize Telegram Bot instance: %s (type: %s)", e, type(e).__name__)
        logger.error("   Make sure TELEGRAM_BOT_TOKEN is correct and api.telegram.org is reachable.")
        ctx.request_shutdown("Telegram initialization failure", failed=True)
        return await shutdown(ctx)
    logger.info("Telegram Bot initialized.")

    await ctx.application.start()

    try:
        await ctx.reports.send(ReportKind.STARTUP)
    except Exception as e:
        logger.exception("Startup report failed: %s", e)

    ctx.scheduler.register(ctx.reports)

    await ctx.shutdown_event.wait()
    return await shutdown(ctx)


def _log_config_error(error: ValidationError) -> None:
    logger.error("CRITICAL ERROR: configuration is missing or invalid.")
    for item in error.errors():
        name = ".".join(str(part) for part in item.get("loc", ())) or "settings"
        logger.error("   %s: %s", name, item.get("msg"))
    logger.error("   The bot cannot start without TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID (.env or environment).")


def main() -> None:
    """
    Initialize and run the notifier.

    This function:
    1. Sets up logging and validates configuration
    2. Creates the Telegram application instance
    3. Binds the HTTP listener (with port retry) and serves GET /
    4. Sends the startup report and schedules the daily report
    5. Runs until SIGINT/SIGTERM or an unhandled error
    """
    setup_logging(level=logging.INFO)

    try:
        settings = get_settings()
    except ValidationError as e:
        _log_config_error(e)
        sys.exit(1)

    if settings.log_file or settings.log_dir:
        setup_logging(
            level=logging.INFO,
            log_file=settings.log_file,
            log_dir=settings.log_dir,
            max_bytes=settings.log_max_bytes,
            backup_count=settings.log_backup_count,
        )

    for warning in settings.missing_optional():
        logger.warning("Optional: %s", warning)

    try:
        application = build_application(settings.bot_token)
    except Exception as e:
        logger.error("Failed to initialize Telegram Bot instance: %s (type: %s)", e, type(e).__name__)
        sys.exit(1)

    ctx = build_context(settings, application)

    try:
        exit_code = asyncio.run(run(ctx))
    except Exception as e:
        logger.exception("Unexpected error during bot operation: %s (type: %s)", e, type(e).__name__)
        exit_code = 1

    logger.info("Exiting with status %d", exit_code)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
