"""
Provider Adapters - External API Clients

This package contains the adapter for the pydolarve rate-quotation API.
"""

from tasabot.adapters.providers.base import RateProvider
from tasabot.adapters.providers.pydolarve import PyDolarVeProvider, decode_monitors

__all__ = [
    "RateProvider",
    "PyDolarVeProvider",
    "decode_monitors",
]
