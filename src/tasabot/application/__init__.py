"""
Application Layer - Use Cases and Services

This package contains the report pipeline that ties the rate provider,
the formatter and the notifier together.
"""

from tasabot.application.report_service import ReportService

__all__ = ["ReportService"]
