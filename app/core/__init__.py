"""
Core Application - Infrastructure & Base Classes

This app contains infrastructure code shared by the domain apps:

- Generic, reusable base classes (no domain-specific logic)
- Clear extension points for domain apps
- Infrastructure concerns separated from business logic

Services (import from core.services):
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes and HTTP status
    - ValidationError: Input validation failures
    - PermissionDeniedError: Authentication/authorization failures
    - ExternalServiceError: Third-party service failures

Protocols (import from core.protocols):
    - ErrorReporter: Fire-and-forget error-reporting sink

Reporting (import from core.reporting):
    - LoggingErrorReporter: ErrorReporter backed by the logging pipeline
    - get_error_reporter: The reporter named by the ERROR_REPORTER setting

Usage:
    from core.exceptions import PermissionDeniedError
    from core.reporting import LoggingErrorReporter
    from core.services import ServiceResult

Note:
    - Business logic should NOT go here. Extend core classes in your domain apps.
"""

# Services (no Django dependencies)
from .services import ServiceResult

# Exceptions (no Django dependencies)
from .exceptions import (
    BaseApplicationError,
    ExternalServiceError,
    PermissionDeniedError,
    ValidationError,
)

# Protocols (no Django dependencies)
from .protocols import ErrorReporter

# Reporting (reads settings lazily)
from .reporting import LoggingErrorReporter, get_error_reporter

__all__ = [
    # Services
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "ValidationError",
    "PermissionDeniedError",
    "ExternalServiceError",
    # Protocols
    "ErrorReporter",
    # Reporting
    "LoggingErrorReporter",
    "get_error_reporter",
]
