"""
Protocol definitions for generic infrastructure services.

This module defines Protocol classes that specify interfaces
for generic infrastructure concerns like error reporting.

Protocols define contracts that services must fulfill, enabling:
- Duck typing with static type checking
- Dependency inversion (depend on abstractions, not concretions)
- Easy mocking in tests

Available Protocols:
    ErrorReporter: Fire-and-forget observability sink

Usage:
    from core.protocols import ErrorReporter

    def risky_operation(reporter: ErrorReporter):
        if something_unusual:
            reporter.report_error("Unusual path taken")

    class ListReporter:
        def __init__(self):
            self.messages = []

        def report_error(self, message):
            self.messages.append(message)

    # ListReporter is a valid ErrorReporter
    # even without explicit inheritance (duck typing)
    reporter: ErrorReporter = ListReporter()

Note:
    - Protocols are primarily for type checking
    - @runtime_checkable allows isinstance() checks
    - For payment collaborators (exchange rates), see payments.adapters
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ErrorReporter(Protocol):
    """
    Protocol for error-reporting sinks.

    Reporting is fire-and-forget: implementations must not raise,
    and callers never wait on delivery.
    """

    def report_error(self, message: str) -> None:
        """
        Record a non-fatal error for later investigation.

        Args:
            message: Human-readable description of what happened
        """
        ...
