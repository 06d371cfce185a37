"""
CareFlow Risk - Assessment value objects and aggregation.

Risk level and urgency are computed independently from the same factor
list and may legitimately diverge.
"""
from __future__ import annotations
from collections import Counter
from datetime import datetime
from typing import Any, Iterable
from pydantic import BaseModel, ConfigDict, Field

from ..config import RiskEngineSettings
from .enums import FactorSeverity, RiskFactorType, RiskLevel, SurgeryType, UrgencyLevel

CRITICAL_SEVERE_COUNT = 4
HIGH_MODERATE_COUNT = 3
MEDIUM_URGENCY_MODERATE_COUNT = 2


class RiskFactor(BaseModel):
    """One finding produced by a risk scanner."""
    id: str
    type: RiskFactorType
    severity: FactorSeverity
    description: str
    clinical_significance: str
    guideline_reference: str | None = None
    day_deviation: float | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def indicates_infection(self) -> bool:
        return self.type == RiskFactorType.WOUND and "infection" in self.description.lower()


class RiskAssessmentResult(BaseModel):
    """Structured outcome of a single risk assessment."""
    patient_id: str
    surgery_type: SurgeryType
    recovery_day: int
    overall_risk_level: RiskLevel
    risk_factors: list[RiskFactor] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    urgency_level: UrgencyLevel
    assessment_timestamp: datetime
    next_review_in_hours: int

    model_config = ConfigDict(frozen=True)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def _severity_counts(factors: Iterable[RiskFactor]) -> Counter[FactorSeverity]:
    return Counter(factor.severity for factor in factors)


def determine_overall_risk_level(factors: Iterable[RiskFactor]) -> RiskLevel:
    """CRITICAL at 4+ severe; HIGH at 1+ severe or 3+ moderate; MODERATE at 1+ moderate."""
    counts = _severity_counts(factors)
    severe, moderate = counts[FactorSeverity.SEVERE], counts[FactorSeverity.MODERATE]
    if severe >= CRITICAL_SEVERE_COUNT:
        return RiskLevel.CRITICAL
    if severe >= 1 or moderate >= HIGH_MODERATE_COUNT:
        return RiskLevel.HIGH
    if moderate >= 1:
        return RiskLevel.MODERATE
    return RiskLevel.LOW


def determine_urgency_level(factors: Iterable[RiskFactor]) -> UrgencyLevel:
    """Fever together with a wound infection is always IMMEDIATE."""
    factors = list(factors)
    counts = _severity_counts(factors)
    has_fever = any(f.type == RiskFactorType.TEMPERATURE for f in factors)
    has_infection = any(f.indicates_infection for f in factors)

    if counts[FactorSeverity.SEVERE] >= CRITICAL_SEVERE_COUNT or (has_fever and has_infection):
        return UrgencyLevel.IMMEDIATE
    if has_fever or counts[FactorSeverity.SEVERE] >= 1:
        return UrgencyLevel.HIGH
    if counts[FactorSeverity.MODERATE] >= MEDIUM_URGENCY_MODERATE_COUNT:
        return UrgencyLevel.MEDIUM
    return UrgencyLevel.LOW


def calculate_next_review_hours(risk_level: RiskLevel, recovery_day: int,
                                settings: RiskEngineSettings | None = None) -> int:
    settings = settings or RiskEngineSettings()
    if risk_level == RiskLevel.CRITICAL:
        return settings.review_hours_critical
    if risk_level == RiskLevel.HIGH:
        return settings.review_hours_high
    if risk_level == RiskLevel.MODERATE:
        return settings.review_hours_moderate
    if recovery_day <= settings.early_recovery_days:
        return settings.review_hours_low_early
    return settings.review_hours_low_late
