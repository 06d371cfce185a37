"""
CareFlow Common Library.

Provides shared domain primitives, exceptions, and logging configuration
used across CareFlow packages.

Modules:
    domain: MedicalEntity base class
    exceptions: Structured exception hierarchy
    observability: structlog configuration
"""

from .domain.entity import MedicalEntity, format_pydantic_errors, utc_now
from .exceptions import (
    CareFlowError,
    DomainError,
    EntityNotFoundError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    ValidationError,
)
from .observability import LogLevel, ObservabilitySettings, configure_logging

__version__ = "1.0.0"

__all__ = [
    # Version
    "__version__",
    # Domain
    "MedicalEntity",
    "format_pydantic_errors",
    "utc_now",
    # Exceptions
    "CareFlowError",
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorContext",
    "DomainError",
    "ValidationError",
    "EntityNotFoundError",
    # Observability
    "LogLevel",
    "ObservabilitySettings",
    "configure_logging",
]
