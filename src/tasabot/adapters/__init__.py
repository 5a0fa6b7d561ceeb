"""
Adapters Layer - External Integrations

This package contains adapters for external systems:
- Rate API provider
- Message formatting
- Telegram notifier and jobs
- HTTP liveness server
"""
