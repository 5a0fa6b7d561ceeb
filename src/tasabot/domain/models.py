"""
Domain Models - Pure Business Objects

This module contains domain models for the rate report:
- Rate quotes decoded from the rate API
- Fetch results (quote, unconfigured, or failure)
- Reports built for each send
- Delivery outcomes of a send

Files that USE this module:
- tasabot.application.* (report pipeline)
- tasabot.adapters.* (provider, formatter and notifier)
- tests.* (tests use domain models for test data)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass  # Decorator for creating data classes
from datetime import datetime  # Date/time utilities for timestamps
from decimal import Decimal, ROUND_HALF_UP  # Precise decimal arithmetic for rates
from enum import Enum  # Enumerations for kinds and outcomes
from typing import Optional  # Type hints for optional values

TWO_PLACES = Decimal("0.01")


def round2(value: Decimal) -> Decimal:
    """Round a rate to 2 decimal places, half-up."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


class ReportKind(str, Enum):
    """Which report is being built."""
    STARTUP = "startup"
    DAILY = "daily"


class BodyKind(str, Enum):
    """What the report body carries."""
    FULL_RATES = "full-rates"
    NO_RATES = "no-rates-available"
    FETCH_ERROR = "fetch-error"
    UNCONFIGURED = "api-unconfigured"


class FetchStatus(str, Enum):
    OK = "ok"
    UNCONFIGURED = "unconfigured"
    INVALID_DATA = "invalid-data"
    FAILED = "failed"


class DeliveryOutcome(str, Enum):
    """Result of one report delivery."""
    SUCCESS = "success"
    FALLBACK_SENT = "photo-failed-text-fallback-sent"
    TOTAL_FAILURE = "total-failure"


@dataclass(frozen=True)
class RateQuote:
    """
    BCV and parallel-market dollar rates in Bolívares.

    Attributes:
        primary_rate: Official BCV rate
        secondary_rate: Parallel-market (EnParaleloVzla) rate
        fetched_at: When the quote was fetched (timezone-aware)
    """
    primary_rate: Decimal
    secondary_rate: Decimal
    fetched_at: datetime

    @property
    def average_rate(self) -> Decimal:
        """Arithmetic mean of both rates."""
        return (self.primary_rate + self.secondary_rate) / 2


@dataclass(frozen=True)
class FetchResult:
    """
    Outcome of one rate fetch, captured as a value.

    Attributes:
        status: FetchStatus of the attempt
        quote: RateQuote when status is OK
        reason: Human-readable failure reason for logs
    """
    status: FetchStatus
    quote: Optional[RateQuote] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, quote: RateQuote) -> "FetchResult":
        return cls(FetchStatus.OK, quote=quote)

    @classmethod
    def unconfigured(cls) -> "FetchResult":
        return cls(FetchStatus.UNCONFIGURED, reason="rate API URL not configured")

    @classmethod
    def invalid(cls, reason: str) -> "FetchResult":
        return cls(FetchStatus.INVALID_DATA, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "FetchResult":
        return cls(FetchStatus.FAILED, reason=reason)


@dataclass(frozen=True)
class Report:
    """
    A report ready to be rendered as a Telegram caption.

    Attributes:
        kind: Startup or daily report
        title: Title line (empty for the startup report)
        timestamp_text: Localized date (startup) or date+time (daily)
        body: Rendered body text
        body_kind: Which body variant was rendered
    """
    kind: ReportKind
    title: str
    timestamp_text: str
    body: str
    body_kind: BodyKind

    @property
    def caption(self) -> str:
        parts = [f"🗓️ *Fecha:* {self.timestamp_text}"]
        if self.title:
            parts.append(self.title)
        if self.body:
            parts.append(self.body)
        return "\n\n".join(parts)
