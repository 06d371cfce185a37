"""
CareFlow Risk - Canonical Enums.

Closed vocabularies for surgery categories, risk grading and symptom
reporting. Values are the strings used on the wire.
"""

from __future__ import annotations

from enum import Enum


class SurgeryType(str, Enum):
    """Surgery categories with recovery protocols."""

    KNEE_REPLACEMENT = "KNEE_REPLACEMENT"
    HIP_REPLACEMENT = "HIP_REPLACEMENT"
    ABDOMINAL_SURGERY = "ABDOMINAL_SURGERY"
    CARDIAC_BYPASS = "CARDIAC_BYPASS"
    APPENDECTOMY = "APPENDECTOMY"
    HERNIA_REPAIR = "HERNIA_REPAIR"
    SPINAL_SURGERY = "SPINAL_SURGERY"
    GALLBLADDER_REMOVAL = "GALLBLADDER_REMOVAL"
    C_SECTION = "C_SECTION"
    PROSTATE_SURGERY = "PROSTATE_SURGERY"
    BREAST_SURGERY = "BREAST_SURGERY"
    ENT_SURGERY = "ENT_SURGERY"
    EYE_SURGERY = "EYE_SURGERY"
    DENTAL_SURGERY = "DENTAL_SURGERY"
    MINOR_ORTHOPEDIC = "MINOR_ORTHOPEDIC"


class RiskLevel(str, Enum):
    """Overall risk classification.

    Values (ascending severity): LOW < MODERATE < HIGH < CRITICAL.
    """

    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    def to_factor_severity(self) -> FactorSeverity:
        """Map a declared rule level onto a risk-factor severity.

        LOW -> mild, MODERATE -> moderate, HIGH and CRITICAL -> severe.
        """
        return _FACTOR_SEVERITY_BY_RISK_LEVEL[self]


class WoundCondition(str, Enum):
    """Patient-reported state of the surgical wound."""

    NORMAL = "normal"
    REDNESS = "redness"
    SWELLING = "swelling"
    DISCHARGE = "discharge"
    INFECTION = "infection"


class FactorSeverity(str, Enum):
    """Severity of a single risk factor."""

    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"

    @classmethod
    def from_deviation(cls, deviation: float) -> FactorSeverity:
        """Grade a distance outside the expected range: 1 mild, 2 moderate, 3+ severe."""
        if deviation >= 3:
            return cls.SEVERE
        if deviation >= 2:
            return cls.MODERATE
        return cls.MILD


_FACTOR_SEVERITY_BY_RISK_LEVEL: dict[RiskLevel, FactorSeverity] = {
    RiskLevel.LOW: FactorSeverity.MILD,
    RiskLevel.MODERATE: FactorSeverity.MODERATE,
    RiskLevel.HIGH: FactorSeverity.SEVERE,
    RiskLevel.CRITICAL: FactorSeverity.SEVERE,
}


class RiskFactorType(str, Enum):
    """Which scanner produced a risk factor."""

    PAIN = "pain"
    MOBILITY = "mobility"
    WOUND = "wound"
    TEMPERATURE = "temperature"
    SYSTEMIC = "systemic"
    CUSTOM = "custom"


class UrgencyLevel(str, Enum):
    """How quickly the care team should act on an assessment."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    IMMEDIATE = "immediate"


class AgeGroup(str, Enum):
    """Coarse age bands used by risk reporting."""

    YOUNG = "young"
    ADULT = "adult"
    SENIOR = "senior"


class ImportPolicy(str, Enum):
    """How bulk-imported symptom reports treat out-of-range scores."""

    CLAMP = "clamp"
    REJECT = "reject"
