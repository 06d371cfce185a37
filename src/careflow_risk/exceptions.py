"""
CareFlow Risk - domain exceptions.
Validation failures and lookup failures are kept in separate branches of
the hierarchy so callers can tell bad input from missing configuration.
"""
from __future__ import annotations
from typing import Any

from careflow_common.exceptions import EntityNotFoundError, ValidationError


class InvalidPatientDataError(ValidationError):
    error_code = "INVALID_PATIENT_DATA"

    def __init__(self, message: str = "Invalid patient data provided", **kwargs: Any) -> None:
        super().__init__(message, user_message="Please check the patient details", **kwargs)


class InvalidSymptomReportError(ValidationError):
    error_code = "INVALID_SYMPTOM_DATA"

    def __init__(self, message: str = "Invalid symptom data", **kwargs: Any) -> None:
        super().__init__(message, user_message="Please check the symptom report", **kwargs)


class InvalidProtocolError(ValidationError):
    error_code = "INVALID_SURGERY_PROTOCOL"

    def __init__(self, message: str = "Invalid surgery protocol", **kwargs: Any) -> None:
        super().__init__(message, user_message="Surgery protocol definition is invalid", **kwargs)

    @property
    def errors(self) -> list[str]:
        """Individual rule violations behind this failure."""
        return list(self.details.get("errors", []))


class ProtocolNotFoundError(EntityNotFoundError):
    error_code = "PROTOCOL_NOT_FOUND"

    def __init__(self, surgery_type: str, **kwargs: Any) -> None:
        super().__init__(
            "SurgeryProtocol", surgery_type,
            message=f"No protocol registered for surgery type: {surgery_type}",
            **kwargs,
        )
        self.surgery_type = surgery_type
