"""
CareFlow Exception Hierarchy.
Structured exception handling with correlation tracking.
"""
from __future__ import annotations
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from pydantic import BaseModel, Field
import structlog

logger = structlog.get_logger(__name__)


class ErrorSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class ErrorContext(BaseModel):
    """Structured context for error tracking."""
    correlation_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    service_name: str = Field(default="careflow")
    operation: str | None = None
    patient_id: str | None = None
    additional_data: dict[str, Any] = Field(default_factory=dict)
    model_config = {"frozen": True}

    def with_operation(self, operation: str) -> ErrorContext:
        return self.model_copy(update={"operation": operation})

    def with_patient(self, patient_id: str) -> ErrorContext:
        return self.model_copy(update={"patient_id": patient_id})


class CareFlowError(Exception):
    """Base exception for all CareFlow errors with structured tracking."""
    error_code: str = "CAREFLOW_ERROR"
    category: ErrorCategory = ErrorCategory.INTERNAL
    severity: ErrorSeverity = ErrorSeverity.MEDIUM

    def __init__(self, message: str, *, user_message: str | None = None,
                 context: ErrorContext | None = None, cause: Exception | None = None,
                 details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.user_message = user_message or "An error occurred. Please try again."
        self.context = context or ErrorContext()
        self.cause = cause
        self.details = details or {}
        self._log_error()

    def _log_error(self) -> None:
        log_data = {
            "error_code": self.error_code, "category": self.category.value,
            "severity": self.severity.value, "correlation_id": self.context.correlation_id,
            "operation": self.context.operation, "details": self.details,
        }
        if self.context.patient_id:
            log_data["patient_id"] = self.context.patient_id
        if self.cause:
            log_data["cause_type"] = type(self.cause).__name__
            log_data["cause_message"] = str(self.cause)
        if self.severity in (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL):
            logger.error(self.message, **log_data)
        else:
            logger.warning(self.message, **log_data)

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"code": self.error_code, "message": self.user_message,
                          "correlation_id": self.context.correlation_id,
                          "timestamp": self.context.timestamp.isoformat()}}

    def to_internal_dict(self) -> dict[str, Any]:
        result = self.to_dict()
        result["internal"] = {"message": self.message, "category": self.category.value,
                              "severity": self.severity.value, "details": self.details,
                              "operation": self.context.operation}
        if self.cause:
            result["internal"]["cause"] = {"type": type(self.cause).__name__,
                                           "message": str(self.cause)}
        return result


class DomainError(CareFlowError):
    error_code = "DOMAIN_ERROR"
    category = ErrorCategory.BUSINESS_RULE
    severity = ErrorSeverity.MEDIUM


class ValidationError(DomainError):
    error_code = "VALIDATION_ERROR"
    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.LOW

    def __init__(self, message: str, *, field: str | None = None, value: Any = None,
                 constraint: str | None = None, **kwargs: Any) -> None:
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if constraint:
            details["constraint"] = constraint
        user_message = kwargs.pop("user_message", None) or (
            f"Invalid value for {field}" if field else "Validation failed"
        )
        super().__init__(message, user_message=user_message, details=details, **kwargs)
        self.field, self.value, self.constraint = field, value, constraint


class EntityNotFoundError(DomainError):
    error_code = "ENTITY_NOT_FOUND"
    category = ErrorCategory.NOT_FOUND
    severity = ErrorSeverity.LOW

    def __init__(self, entity_type: str, entity_id: str, *, message: str | None = None,
                 **kwargs: Any) -> None:
        message = message or f"{entity_type} with ID '{entity_id}' not found"
        user_message = f"The requested {entity_type.lower()} was not found"
        details = kwargs.pop("details", {})
        details.update({"entity_type": entity_type, "entity_id": entity_id})
        super().__init__(message, user_message=user_message, details=details, **kwargs)
        self.entity_type, self.entity_id = entity_type, entity_id
