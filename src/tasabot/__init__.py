# src/tasabot/__init__.py
"""
TasaBot - Venezuelan Dollar Rate Telegram Notifier

A small Telegram bot that posts the BCV and parallel-market dollar rates
(plus their average) to a chat when it starts and once a day at 14:00 UTC+3,
while exposing a plain-text liveness endpoint over HTTP.
"""

__version__ = "1.0.0"
