"""
CareFlow Risk - Symptom value objects.
Point-in-time recovery observations and the input bundle handed to the
risk engine.
"""
from __future__ import annotations
from datetime import datetime
from typing import Self
from pydantic import BaseModel, ConfigDict, Field

from ..validation import (
    MOBILITY_RANGE,
    PAIN_RANGE,
    validate_mobility_score,
    validate_pain_level,
    validate_temperature,
)
from .enums import SurgeryType, WoundCondition


def _clamp(value: int, bounds: tuple[int, int]) -> int:
    return max(bounds[0], min(bounds[1], value))


class SymptomReport(BaseModel):
    """Immutable symptom observation reported by or for a patient.

    Field types are enforced on construction; clinical bounds are checked by
    ``is_valid`` so that an out-of-range report can still be represented,
    rejected with a domain error, or clamped by an import policy.
    """
    pain_level: int
    mobility_score: int | None = None
    wound_condition: WoundCondition | None = None
    temperature: float | None = None
    notes: str | None = None
    reported_at: datetime

    model_config = ConfigDict(frozen=True)

    def validation_errors(self) -> list[str]:
        errors: list[str] = []
        if not validate_pain_level(self.pain_level):
            errors.append(f"Pain level {self.pain_level} must be between 1 and 10")
        if not validate_mobility_score(self.mobility_score):
            errors.append(f"Mobility score {self.mobility_score} must be between 1 and 10")
        if not validate_temperature(self.temperature):
            errors.append(f"Temperature {self.temperature} must be between 35 and 42 C")
        if self.wound_condition is None:
            errors.append("Wound condition is required")
        return errors

    def is_valid(self) -> bool:
        """Check clinical bounds and required fields."""
        return not self.validation_errors()

    def clamped(self) -> Self:
        """Copy with pain and mobility pulled into the 1-10 scale."""
        update: dict[str, int] = {"pain_level": _clamp(self.pain_level, PAIN_RANGE)}
        if self.mobility_score is not None:
            update["mobility_score"] = _clamp(self.mobility_score, MOBILITY_RANGE)
        return self.model_copy(update=update)


class RiskInputs(BaseModel):
    """Snapshot of a patient's state consumed by the risk engine."""
    surgery_type: SurgeryType
    recovery_day: int = Field(..., ge=0)
    symptoms: SymptomReport
    previous_symptoms: list[SymptomReport] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def preceding_report(self) -> SymptomReport | None:
        """The report made immediately before the current one, if any."""
        return self.previous_symptoms[-1] if self.previous_symptoms else None
