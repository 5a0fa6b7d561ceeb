"""
Domain Layer - Pure Business Objects

This package contains domain models and business rules.
No dependencies on infrastructure or external systems.
"""

from tasabot.domain.models import (
    BodyKind,
    DeliveryOutcome,
    FetchResult,
    FetchStatus,
    RateQuote,
    Report,
    ReportKind,
    round2,
)
from tasabot.domain.errors import (
    ApiError,
    ApiUnreachable,
    DomainError,
    InvalidRateData,
    PortRetryExhausted,
    RateFetchError,
)

__all__ = [
    "RateQuote",
    "FetchResult",
    "FetchStatus",
    "Report",
    "ReportKind",
    "BodyKind",
    "DeliveryOutcome",
    "round2",
    "DomainError",
    "RateFetchError",
    "ApiUnreachable",
    "ApiError",
    "InvalidRateData",
    "PortRetryExhausted",
]
