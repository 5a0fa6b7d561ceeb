"""
Input Validation Utilities - Configuration Validation

This module validates bot tokens, chat IDs and URLs so that a malformed
environment fails at startup instead of on the first Telegram call.

Files that USE this module:
- tasabot.config.settings (uses validation functions in Settings field validators)

Files that this module USES:
- None (pure utility functions)
"""
import re


def validate_chat_id(chat_id: str) -> bool:
    """
    Validate Telegram chat ID format.

    Args:
        chat_id: Chat ID to validate

    Returns:
        True if valid, False otherwise
    """
    if not chat_id:
        return False

    # Chat IDs can be:
    # - @channelname (public channels)
    # - -1001234567890 (supergroups/channels), -123456 (basic groups)
    # - 123456789 (user IDs)
    if chat_id.startswith('@'):
        return bool(re.match(r'^@[a-zA-Z0-9_]+$', chat_id))
    return bool(re.match(r'^-?\d+$', chat_id))


def validate_bot_token(token: str) -> bool:
    """
    Validate Telegram bot token format.

    Args:
        token: Bot token to validate

    Returns:
        True if valid, False otherwise
    """
    if not token:
        return False

    # Bot tokens should be in format: 123456789:ABCDEFghijklmnopQRSTUVwxyz
    pattern = r'^\d{5,}:[A-Za-z0-9_-]{35}$'
    return bool(re.match(pattern, token))


def validate_http_url(url: str) -> bool:
    """Return True if url looks like an absolute http(s) URL."""
    if not url:
        return False
    return bool(re.match(r'^https?://[^\s/]+', url.strip()))
