"""
Shared pytest fixtures: settings built without touching the real environment
and a sample rate quote.
"""
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from tasabot.config.settings import Settings
from tasabot.domain.models import RateQuote

BOT_TOKEN = "123456789:" + "A" * 35

_ENV_VARS = [
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
    "TELEGRAM_MESSAGE_THREAD_ID",
    "TELEGRAM_IMAGE_URL",
    "PYDOLARVE_API_URL",
    "PORT",
    "HOST",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings():
    def _make(**overrides):
        values = {
            "TELEGRAM_BOT_TOKEN": BOT_TOKEN,
            "TELEGRAM_CHAT_ID": "-1001234567890",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def quote():
    return RateQuote(
        primary_rate=Decimal("36.50"),
        secondary_rate=Decimal("40.00"),
        fetched_at=datetime(2024, 5, 10, 11, 0, tzinfo=timezone.utc),
    )
