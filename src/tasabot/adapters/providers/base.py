"""
Base Provider Interface for Dollar Rate Providers

Files that USE this module:
- tasabot.adapters.providers.pydolarve (PyDolarVeProvider implements RateProvider)
- tasabot.application.report_service (depends on the RateProvider contract)

Files that this module USES:
- tasabot.domain.models (RateQuote)
"""
from abc import ABC, abstractmethod

from tasabot.domain.models import RateQuote


class RateProvider(ABC):
    @abstractmethod
    def fetch_quote(self) -> RateQuote:
        """Return the current BCV/parallel quote or raise a RateFetchError."""
        raise NotImplementedError
