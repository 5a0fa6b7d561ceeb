"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions for rate fetching,
startup configuration and listener binding.
"""

from typing import Optional


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class RateFetchError(DomainError):
    """Base class for non-fatal failures while fetching rates."""
    pass


class ApiUnreachable(RateFetchError):
    """Raised when the rate API cannot be reached (network error or timeout)."""
    pass


class ApiError(RateFetchError):
    """Raised when the rate API answers with a non-2xx status."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Rate API returned HTTP {status_code}")


class InvalidRateData(RateFetchError):
    """Raised when the rate fields are missing or not finite numbers."""
    pass


class PortRetryExhausted(DomainError):
    """Raised when no free port was found within the retry budget."""

    def __init__(self, first_port: int, last_port: int):
        self.first_port = first_port
        self.last_port = last_port
        super().__init__(
            f"Failed to find an available port after trying from {first_port} up to {last_port}"
        )
