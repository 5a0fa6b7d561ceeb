"""
Telegram Bot - Application Builder

The bot only sends messages, so the application is built without an
updater; its JobQueue still runs once the application is started.
"""

from __future__ import annotations

from telegram.ext import Application


def build_application(bot_token: str) -> Application:
    """
    Build Telegram bot application.

    Args:
        bot_token: Telegram bot token

    Returns:
        Configured Application instance

    Raises:
        telegram.error.InvalidToken: If the token is rejected by the Bot constructor
    """
    return Application.builder().token(bot_token).updater(None).build()
