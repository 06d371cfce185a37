"""
CareFlow Risk - Recommendation templates.
Groups risk factors by type and appends guidance for the overall level.
"""
from __future__ import annotations
from typing import Sequence

from .enums import FactorSeverity, RiskFactorType, RiskLevel
from .scoring import RiskFactor, determine_overall_risk_level

_SEVERE_PAIN = (
    "Immediate pain management intervention required",
    "Consider opioid analgesic adjustment",
)
_PAIN = (
    "Adjust pain medication schedule",
    "Implement non-pharmacological pain management",
)
_SEVERE_MOBILITY = (
    "Urgent physical therapy consultation needed",
    "Assistive device evaluation required",
)
_MOBILITY = (
    "Increase physical therapy frequency",
    "Review mobility aid requirements",
)
_INFECTION = (
    "Start empiric antibiotic therapy",
    "Wound culture and sensitivity testing",
)
_TEMPERATURE = (
    "Complete blood count and cultures",
    "Infectious disease consultation",
)
_BY_LEVEL: dict[RiskLevel, tuple[str, ...]] = {
    RiskLevel.CRITICAL: (
        "Immediate medical attention required",
        "Contact emergency services",
        "Prepare for possible hospital admission",
        "Arrange immediate medical evaluation",
    ),
    RiskLevel.HIGH: (
        "Seek immediate medical evaluation",
        "Monitor symptoms closely",
        "Consider urgent care visit",
    ),
    RiskLevel.MODERATE: (),
    RiskLevel.LOW: (
        "Continue current recovery plan",
        "Maintain routine follow-up appointments",
    ),
}


def _of_type(factors: Sequence[RiskFactor], factor_type: RiskFactorType) -> list[RiskFactor]:
    return [f for f in factors if f.type == factor_type]


def _any_severe(factors: Sequence[RiskFactor]) -> bool:
    return any(f.severity == FactorSeverity.SEVERE for f in factors)


def generate_recommendations(factors: Sequence[RiskFactor],
                             risk_level: RiskLevel | None = None) -> list[str]:
    """Recommendations for a factor list, in pain/mobility/wound/temperature order."""
    recommendations: list[str] = []

    pain = _of_type(factors, RiskFactorType.PAIN)
    if pain:
        recommendations.extend(_SEVERE_PAIN if _any_severe(pain) else _PAIN)

    mobility = _of_type(factors, RiskFactorType.MOBILITY)
    if mobility:
        recommendations.extend(_SEVERE_MOBILITY if _any_severe(mobility) else _MOBILITY)

    wound = _of_type(factors, RiskFactorType.WOUND)
    if wound:
        recommendations.append("Immediate wound assessment required")
        if any(f.indicates_infection for f in wound):
            recommendations.extend(_INFECTION)
        recommendations.append("Consider surgical consultation")

    if _of_type(factors, RiskFactorType.TEMPERATURE):
        recommendations.extend(_TEMPERATURE)

    if risk_level is None:
        risk_level = determine_overall_risk_level(factors)
    recommendations.extend(_BY_LEVEL[risk_level])
    return recommendations
