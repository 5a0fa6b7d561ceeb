"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation
- Logging configuration
"""

from tasabot.shared.validators import (
    validate_bot_token,
    validate_chat_id,
    validate_http_url,
)

__all__ = [
    "validate_bot_token",
    "validate_chat_id",
    "validate_http_url",
]
