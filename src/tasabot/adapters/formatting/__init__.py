"""
Formatting Adapters - Message Formatting

This package contains message formatting adapters for Telegram output.
"""

from tasabot.adapters.formatting.formatter import (
    build_caption,
    build_report,
    fallback_banner,
)

__all__ = [
    "build_caption",
    "build_report",
    "fallback_banner",
]
