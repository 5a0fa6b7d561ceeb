"""
Notifier Tests - Unit Tests for Telegram Delivery

Tests the photo send, the single text fallback and the thread-id option.

Files that this module USES:
- tasabot.adapters.telegram.notifier (TelegramNotifier)
- tasabot.domain.models (DeliveryOutcome)
- unittest.mock (AsyncMock for the bot)
"""
import asyncio  # Drive coroutines from sync tests
import logging  # Log level constants for caplog

from unittest.mock import AsyncMock, Mock  # Mock bot without real API calls

from telegram.constants import ParseMode  # Markdown parse mode constant
from telegram.error import BadRequest, RetryAfter, TimedOut  # Telegram API errors

from tasabot.adapters.telegram.notifier import TelegramNotifier, handle_telegram_error
from tasabot.domain.models import DeliveryOutcome

IMAGE = "https://example.com/banner.png"
BANNER = "⚠️ *Error al enviar foto de inicio.*"


def _bot():
    bot = Mock()
    bot.send_photo = AsyncMock()
    bot.send_message = AsyncMock()
    return bot


class TestSendReport:
    def test_photo_success(self):
        bot = _bot()
        notifier = TelegramNotifier(bot, chat_id="-1001234567890")

        outcome = asyncio.run(notifier.send_report("caption", IMAGE, BANNER))

        assert outcome is DeliveryOutcome.SUCCESS
        bot.send_photo.assert_awaited_once_with(
            chat_id="-1001234567890",
            photo=IMAGE,
            caption="caption",
            parse_mode=ParseMode.MARKDOWN,
        )
        bot.send_message.assert_not_awaited()

    def test_thread_id_included_only_when_configured(self):
        bot = _bot()
        notifier = TelegramNotifier(bot, chat_id="-1001234567890", message_thread_id=77)

        asyncio.run(notifier.send_report("caption", IMAGE, BANNER))

        assert bot.send_photo.call_args.kwargs["message_thread_id"] == 77

    def test_photo_failure_sends_one_fallback(self):
        bot = _bot()
        bot.send_photo.side_effect = BadRequest("Wrong file identifier/http url specified")
        notifier = TelegramNotifier(bot, chat_id="-1001234567890")

        outcome = asyncio.run(notifier.send_report("caption", IMAGE, BANNER))

        assert outcome is DeliveryOutcome.FALLBACK_SENT
        bot.send_message.assert_awaited_once()
        assert bot.send_message.call_args.kwargs["text"] == f"{BANNER}\n\ncaption"
        assert bot.send_message.call_args.kwargs["parse_mode"] == ParseMode.MARKDOWN

    def test_fallback_failure_stops_there(self, caplog):
        bot = _bot()
        bot.send_photo.side_effect = TimedOut()
        bot.send_message.side_effect = TimedOut()
        notifier = TelegramNotifier(bot, chat_id="-1001234567890")

        with caplog.at_level(logging.ERROR):
            outcome = asyncio.run(notifier.send_report("caption", IMAGE, BANNER))

        assert outcome is DeliveryOutcome.TOTAL_FAILURE
        assert bot.send_photo.await_count == 1
        assert bot.send_message.await_count == 1
        assert "fallback" in caplog.text

    def test_no_image_sends_text(self):
        bot = _bot()
        notifier = TelegramNotifier(bot, chat_id="@tasas_ve")

        outcome = asyncio.run(notifier.send_report("caption", None, BANNER))

        assert outcome is DeliveryOutcome.SUCCESS
        bot.send_photo.assert_not_awaited()
        assert bot.send_message.call_args.kwargs["text"] == "caption"

    def test_no_image_text_failure(self):
        bot = _bot()
        bot.send_message.side_effect = BadRequest("chat not found")
        notifier = TelegramNotifier(bot, chat_id="@tasas_ve")

        outcome = asyncio.run(notifier.send_report("caption", None, BANNER))

        assert outcome is DeliveryOutcome.TOTAL_FAILURE
        assert bot.send_message.await_count == 1


class TestHandleTelegramError:
    def test_logs_retry_after(self, caplog):
        with caplog.at_level(logging.ERROR):
            handle_telegram_error("sending photo", RetryAfter(30))
        assert "Flood control" in caplog.text
        assert "TELEGRAM_CHAT_ID" in caplog.text

    def test_logs_bad_request(self, caplog):
        with caplog.at_level(logging.ERROR):
            handle_telegram_error("sending photo", BadRequest("chat not found"))
        assert "rejected" in caplog.text
        assert "chat not found" in caplog.text
