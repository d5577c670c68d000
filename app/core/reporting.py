"""
Default error-reporting sink.

Routes reported errors into the logging pipeline configured in
settings.LOGGING, so they land in the console and rotating file handlers
alongside the rest of the application logs.

Another sink can be installed by naming its class in the ERROR_REPORTER
setting (a dotted path); get_error_reporter() builds it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.conf import settings
from django.utils.module_loading import import_string

if TYPE_CHECKING:
    from core.protocols import ErrorReporter


class LoggingErrorReporter:
    """
    ErrorReporter that writes to a dedicated logger at ERROR level.

    Usage:
        reporter = LoggingErrorReporter()
        reporter.report_error("Opening unsupported XYZ checkout")
    """

    def __init__(self, logger_name: str = "errors"):
        self.logger = logging.getLogger(logger_name)

    def report_error(self, message: str) -> None:
        self.logger.error(message, extra={"reported": True})


def get_error_reporter() -> ErrorReporter:
    """Build the reporter named by ERROR_REPORTER, or the logging one."""
    path = getattr(settings, "ERROR_REPORTER", "")
    if not path:
        return LoggingErrorReporter()
    return import_string(path)()
