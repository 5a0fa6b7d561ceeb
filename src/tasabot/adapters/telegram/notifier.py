"""
Telegram Notifier - Photo Delivery with Text Fallback

Sends a report caption to the configured chat (and optional forum topic).
With an image the caption goes out as a photo; if Telegram rejects the
photo, one plain-text message carrying the same caption behind an error
banner is sent instead. Failures are logged and reported through
DeliveryOutcome, never raised.

Files that USE this module:
- tasabot.application.report_service (delivers every report)
- tasabot.app (constructs the notifier from settings)
- tests.test_notifier (unit tests)

Files that this module USES:
- tasabot.domain.models (DeliveryOutcome)
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from telegram import Bot  # Telegram Bot API client
from telegram.constants import ParseMode  # Markdown parse mode constant
from telegram.error import (  # Telegram API error exceptions
    BadRequest,
    Forbidden,
    InvalidToken,
    NetworkError,
    RetryAfter,
    TelegramError,
    TimedOut,
)

from tasabot.domain.models import DeliveryOutcome

logger = logging.getLogger(__name__)


def handle_telegram_error(action: str, error: Exception) -> None:
    """
    Log a Telegram failure with as much structured context as available.

    Args:
        action: Description of what was being sent
        error: Exception raised by python-telegram-bot
    """
    logger.error("Error %s: %s (type: %s)", action, error, type(error).__name__)
    if isinstance(error, RetryAfter):
        logger.error("   Telegram flood control: retry after %s seconds", error.retry_after)
    elif isinstance(error, TimedOut):
        logger.error("   Request to the Telegram API timed out")
    elif isinstance(error, NetworkError) and not isinstance(error, BadRequest):
        logger.error("   Network error talking to the Telegram API: %s", error.message)
    elif isinstance(error, (BadRequest, Forbidden, InvalidToken)):
        logger.error("   Telegram API rejected the request: %s", error.message)
    logger.error(
        "   (Check TELEGRAM_BOT_TOKEN, TELEGRAM_CHAT_ID, thread ID, bot permissions in chat, "
        "network connectivity)"
    )


class TelegramNotifier:
    """Delivers report captions to one fixed chat destination."""

    def __init__(
        self,
        bot: Bot,
        chat_id: Union[int, str],
        message_thread_id: Optional[int] = None,
    ):
        self.bot = bot
        self.chat_id = chat_id
        self.message_thread_id = message_thread_id

    def _options(self) -> Dict[str, Any]:
        options: Dict[str, Any] = {"parse_mode": ParseMode.MARKDOWN}
        if self.message_thread_id is not None:
            options["message_thread_id"] = self.message_thread_id
        return options

    async def send_text(self, text: str, action: str) -> bool:
        """Send a plain-text message; return True on success."""
        try:
            await self.bot.send_message(chat_id=self.chat_id, text=text, **self._options())
        except TelegramError as e:
            handle_telegram_error(action, e)
            return False
        return True

    async def send_report(
        self,
        caption: str,
        image_url: Optional[str],
        fallback_banner: str,
        label: str = "report",
    ) -> DeliveryOutcome:
        """
        Send a report as a captioned photo, falling back to text once.

        Args:
            caption: Markdown caption
            image_url: Photo URL or file_id; when None the caption is sent as text
            fallback_banner: Banner prepended to the caption in the text fallback
            label: Short name of the report for log lines

        Returns:
            DeliveryOutcome describing what reached the chat
        """
        if not image_url:
            if await self.send_text(caption, f"sending {label} text"):
                logger.info("%s sent as text (no image configured)", label.capitalize())
                return DeliveryOutcome.SUCCESS
            return DeliveryOutcome.TOTAL_FAILURE

        try:
            await self.bot.send_photo(
                chat_id=self.chat_id,
                photo=image_url,
                caption=caption,
                **self._options(),
            )
            logger.info("%s photo with caption sent successfully", label.capitalize())
            return DeliveryOutcome.SUCCESS
        except TelegramError as e:
            handle_telegram_error(f"sending {label} photo", e)

        if await self.send_text(f"{fallback_banner}\n\n{caption}", f"sending {label} fallback text"):
            logger.info("Fallback text message for %s sent", label)
            return DeliveryOutcome.FALLBACK_SENT
        return DeliveryOutcome.TOTAL_FAILURE
