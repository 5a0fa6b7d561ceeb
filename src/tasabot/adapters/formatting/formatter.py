"""
Message Formatter - Report Captions

This module turns a FetchResult into the Spanish-language caption posted
to Telegram. Captions use Telegram's legacy Markdown (*bold*) for both
report kinds. The startup report is stamped with the date in Caracas
time; the daily report with date and time in UTC+3.

Files that USE this module:
- tasabot.application.report_service (builds the caption for each send)
- tests.test_formatter (unit tests)

Files that this module USES:
- tasabot.domain.models (FetchResult, Report, ReportKind, BodyKind)
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import InvalidOperation
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from tasabot.domain.models import (
    BodyKind,
    FetchResult,
    FetchStatus,
    RateQuote,
    Report,
    ReportKind,
    round2,
)

logger = logging.getLogger(__name__)

STARTUP_TZ = "America/Caracas"
DAILY_TZ = "Etc/GMT-3"  # POSIX sign is inverted: this is UTC+3

READY_LINE = "⚡️ Bot iniciado y listo."
DAILY_TITLE = "📊 *Reporte Diario*"
NO_RATES_LINE = "⚠️ No se pudieron obtener las tasas actuales."

_FETCH_ERROR = {
    ReportKind.STARTUP: "⚠️ Error al obtener las tasas.",
    ReportKind.DAILY: "⚠️ Error al obtener las tasas actuales.",
}
_UNCONFIGURED = {
    ReportKind.STARTUP: "(URL de API no configurada)",
    ReportKind.DAILY: "(URL de API no configurada para tasas)",
}
_FALLBACK_BANNER = {
    ReportKind.STARTUP: "⚠️ *Error al enviar foto de inicio.*",
    ReportKind.DAILY: "⚠️ *Error al enviar foto del reporte diario.*",
}
_DATE_UNAVAILABLE = {
    ReportKind.STARTUP: "[Fecha no disponible]",
    ReportKind.DAILY: "[Fecha/Hora no disponible]",
}


def format_timestamp(kind: ReportKind, now: datetime) -> str:
    """
    Format the report date stamp.

    Startup: dd/mm/YYYY in Caracas time.
    Daily: dd/mm/YYYY, HH:MM (24h) in UTC+3, suffixed with "(UTC+3)".

    Args:
        kind: Report kind selecting timezone and format
        now: Timezone-aware current time (naive values are taken as UTC)

    Returns:
        Formatted date text, or a placeholder if formatting fails
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    try:
        if kind is ReportKind.STARTUP:
            return now.astimezone(ZoneInfo(STARTUP_TZ)).strftime("%d/%m/%Y")
        local = now.astimezone(ZoneInfo(DAILY_TZ))
        return f"{local.strftime('%d/%m/%Y, %H:%M')} (UTC+3)"
    except (ZoneInfoNotFoundError, ValueError, OverflowError) as e:
        logger.error("Failed to format report date (%s): %s", kind.value, e)
        return _DATE_UNAVAILABLE[kind]


def rates_block(quote: RateQuote) -> str:
    """Render both rates and their average, each rounded to 2 decimals."""
    return (
        "*Cotización (VEN 🇻🇪)*\n\n"
        f"*BCV:* {round2(quote.primary_rate)} Bs\n"
        f"*Paralelo:* {round2(quote.secondary_rate)} Bs\n"
        f"*Promedio:* {round2(quote.average_rate)} Bs"
    )


def _body(kind: ReportKind, result: FetchResult) -> tuple[str, BodyKind]:
    startup = kind is ReportKind.STARTUP

    status = result.status
    if status is FetchStatus.OK and result.quote is not None:
        try:
            return rates_block(result.quote), BodyKind.FULL_RATES
        except InvalidOperation as e:
            logger.error("Rates cannot be rendered with 2 decimals: %s", e)
            status = FetchStatus.INVALID_DATA

    if status is FetchStatus.UNCONFIGURED:
        if startup:
            return f"{READY_LINE} {_UNCONFIGURED[kind]}", BodyKind.UNCONFIGURED
        return _UNCONFIGURED[kind], BodyKind.UNCONFIGURED

    if status is FetchStatus.FAILED:
        text, body_kind = _FETCH_ERROR[kind], BodyKind.FETCH_ERROR
    else:
        text, body_kind = NO_RATES_LINE, BodyKind.NO_RATES

    if startup:
        text = f"{text}\n\n{READY_LINE}"
    return text, body_kind


def build_report(kind: ReportKind, result: FetchResult, now: Optional[datetime] = None) -> Report:
    """
    Build the report for one send.

    Args:
        kind: Startup or daily report
        result: Outcome of the rate fetch
        now: Current time (defaults to now, UTC)

    Returns:
        Immutable Report whose caption is ready to send
    """
    now = now or datetime.now(timezone.utc)
    body, body_kind = _body(kind, result)
    return Report(
        kind=kind,
        title=DAILY_TITLE if kind is ReportKind.DAILY else "",
        timestamp_text=format_timestamp(kind, now),
        body=body,
        body_kind=body_kind,
    )


def build_caption(kind: ReportKind, result: FetchResult, now: Optional[datetime] = None) -> str:
    """Shortcut for build_report(...).caption."""
    return build_report(kind, result, now).caption


def fallback_banner(kind: ReportKind) -> str:
    """Banner the notifier puts above the caption when the photo send fails."""
    return _FALLBACK_BANNER[kind]
