"""
Report Service Tests - Unit Tests for the Report Pipeline

Files that this module USES:
- tasabot.application.report_service (ReportService)
- tasabot.domain (FetchStatus, ReportKind, errors)
- unittest.mock (Mock provider and notifier)
"""
import asyncio  # Drive coroutines from sync tests

from datetime import datetime, timezone  # Fixed clock
from decimal import Decimal  # Exact rate values
from unittest.mock import AsyncMock, Mock, patch  # Mock objects and patching

from tasabot.application.report_service import ReportService
from tasabot.domain.errors import ApiError, ApiUnreachable, InvalidRateData
from tasabot.domain.models import DeliveryOutcome, FetchStatus, RateQuote, ReportKind

NOW = datetime(2024, 5, 10, 11, 0, tzinfo=timezone.utc)
IMAGE = "https://example.com/banner.png"


def _notifier(outcome=DeliveryOutcome.SUCCESS):
    notifier = Mock()
    notifier.send_report = AsyncMock(return_value=outcome)
    return notifier


class TestFetch:
    def test_ok(self, quote):
        provider = Mock()
        provider.fetch_quote.return_value = quote
        service = ReportService(_notifier(), provider=provider)

        result = asyncio.run(service.fetch())

        assert result.status is FetchStatus.OK
        assert result.quote == quote

    @patch('tasabot.adapters.providers.pydolarve.requests.get')
    def test_unconfigured_makes_no_network_call(self, mock_get):
        service = ReportService(_notifier(), provider=None)

        result = asyncio.run(service.fetch())

        assert result.status is FetchStatus.UNCONFIGURED
        mock_get.assert_not_called()

    def test_invalid_data(self):
        provider = Mock()
        provider.fetch_quote.side_effect = InvalidRateData("bcv price missing")
        result = asyncio.run(ReportService(_notifier(), provider=provider).fetch())
        assert result.status is FetchStatus.INVALID_DATA
        assert "bcv" in result.reason

    def test_unreachable_and_http_errors_are_failures(self):
        for error in (ApiUnreachable("timeout"), ApiError(500, "oops")):
            provider = Mock()
            provider.fetch_quote.side_effect = error
            result = asyncio.run(ReportService(_notifier(), provider=provider).fetch())
            assert result.status is FetchStatus.FAILED


class TestSend:
    def test_startup_with_rates(self, quote):
        provider = Mock()
        provider.fetch_quote.return_value = quote
        notifier = _notifier()
        service = ReportService(notifier, provider=provider, image_url=IMAGE)

        outcome = asyncio.run(service.send(ReportKind.STARTUP, now=NOW))

        assert outcome is DeliveryOutcome.SUCCESS
        caption, image, banner = notifier.send_report.call_args.args
        assert "*Promedio:* 38.25 Bs" in caption
        assert caption.startswith("🗓️ *Fecha:* 10/05/2024")
        assert image == IMAGE
        assert banner == "⚠️ *Error al enviar foto de inicio.*"

    def test_daily_unconfigured(self):
        notifier = _notifier()
        service = ReportService(notifier, provider=None, image_url=IMAGE)

        asyncio.run(service.send(ReportKind.DAILY, now=NOW))

        caption, _, banner = notifier.send_report.call_args.args
        assert "(URL de API no configurada para tasas)" in caption
        assert "📊 *Reporte Diario*" in caption
        assert banner == "⚠️ *Error al enviar foto del reporte diario.*"

    def test_partial_data_never_renders_numbers(self):
        provider = Mock()
        provider.fetch_quote.side_effect = InvalidRateData("paralelo not numeric")
        notifier = _notifier()

        asyncio.run(ReportService(notifier, provider=provider).send(ReportKind.DAILY, now=NOW))

        caption = notifier.send_report.call_args.args[0]
        assert "No se pudieron obtener las tasas actuales" in caption
        assert "Bs" not in caption

    def test_returns_notifier_outcome(self):
        notifier = _notifier(DeliveryOutcome.FALLBACK_SENT)
        outcome = asyncio.run(ReportService(notifier).send(ReportKind.STARTUP, now=NOW))
        assert outcome is DeliveryOutcome.FALLBACK_SENT

    def test_oversized_quote_still_sends_report(self):
        provider = Mock()
        provider.fetch_quote.return_value = RateQuote(Decimal("1e30"), Decimal("2"), NOW)
        notifier = _notifier()

        outcome = asyncio.run(ReportService(notifier, provider=provider).send(ReportKind.DAILY, now=NOW))

        assert outcome is DeliveryOutcome.SUCCESS
        notifier.send_report.assert_awaited_once()
        caption = notifier.send_report.call_args.args[0]
        assert "No se pudieron obtener las tasas actuales" in caption
