"""
CareFlow Risk - Risk Assessment Engine.

Looks up the protocol for a patient's surgery type, runs the independent
risk scanners over the current symptom report, aggregates the resulting
factors and keeps a bounded per-patient history of assessments.

Scanners:
    pain         deviation above the expected range, absolute high pain, rising trend
    mobility     deviation below the expected range, very low mobility
    wound        any reported non-normal wound condition
    systemic     elevated or high temperature
    protocol     structured criteria of the protocol's applicable rules
"""
from __future__ import annotations
from collections import deque
from datetime import datetime
from typing import Iterable
from uuid import uuid4
import structlog

from careflow_common.domain.entity import utc_now

from ..config import RiskEngineSettings, get_settings
from ..exceptions import ProtocolNotFoundError
from .catalog import default_protocols
from .enums import FactorSeverity, RiskFactorType, SurgeryType, WoundCondition
from .patient import Patient
from .protocol import SurgeryProtocol
from .recommendations import generate_recommendations
from .scoring import (
    RiskAssessmentResult,
    RiskFactor,
    calculate_next_review_hours,
    determine_overall_risk_level,
    determine_urgency_level,
)
from .symptoms import RiskInputs

logger = structlog.get_logger(__name__)

HIGH_PAIN_THRESHOLD = 8
PAIN_TREND_MODERATE = 3
PAIN_TREND_SEVERE = 5
LOW_MOBILITY_THRESHOLD = 3
FEVER_HIGH_C = 38.5
FEVER_ELEVATED_C = 37.5

_WOUND_SEVERITY: dict[WoundCondition, FactorSeverity] = {
    WoundCondition.REDNESS: FactorSeverity.MILD,
    WoundCondition.SWELLING: FactorSeverity.MILD,
    WoundCondition.DISCHARGE: FactorSeverity.MODERATE,
    WoundCondition.INFECTION: FactorSeverity.SEVERE,
}
_WOUND_SIGNIFICANCE: dict[WoundCondition, str] = {
    WoundCondition.REDNESS: "May indicate early inflammation or infection",
    WoundCondition.SWELLING: "Expected post-operative finding, but excessive swelling needs evaluation",
    WoundCondition.DISCHARGE: "May indicate infection or wound healing issues",
    WoundCondition.INFECTION: "Requires immediate medical intervention",
}


def _factor_id(prefix: str) -> str:
    return f"{prefix}-{uuid4().hex[:12]}"


class RiskAssessmentEngine:
    """Rule-based post-operative risk assessment.

    Each engine owns its protocol registry and assessment history; nothing
    is shared between instances.
    """

    def __init__(self, settings: RiskEngineSettings | None = None) -> None:
        self._settings = settings or get_settings()
        self._protocols: dict[SurgeryType, SurgeryProtocol] = {}
        self._history: dict[str, deque[RiskAssessmentResult]] = {}

    @property
    def settings(self) -> RiskEngineSettings:
        return self._settings

    # ------------------------------------------------------------------
    # Protocol registry
    # ------------------------------------------------------------------

    def register_protocol(self, protocol: SurgeryProtocol) -> None:
        """Register or replace the protocol for its surgery type."""
        replaced = self._protocols.get(protocol.surgery_type)
        self._protocols[protocol.surgery_type] = protocol
        logger.info("protocol_registered", protocol_id=protocol.id,
                    surgery_type=protocol.surgery_type.value,
                    replaced=replaced.id if replaced is not None else None)

    def get_protocol(self, surgery_type: SurgeryType | str) -> SurgeryProtocol:
        try:
            return self._protocols[SurgeryType(surgery_type)]
        except (KeyError, ValueError):
            raise ProtocolNotFoundError(str(getattr(surgery_type, "value", surgery_type))) from None

    def get_registered_protocols(self) -> list[SurgeryType]:
        return list(self._protocols)

    # ------------------------------------------------------------------
    # Assessment
    # ------------------------------------------------------------------

    def assess_patient_risk(self, patient: Patient, as_of: datetime | None = None) -> RiskAssessmentResult:
        """Assess a patient against their surgery protocol and record the result."""
        protocol = self.get_protocol(patient.surgery_type)
        if not protocol.is_active:
            logger.warning("assessing_with_inactive_protocol", protocol_id=protocol.id,
                           patient_id=patient.id)

        inputs = patient.get_risk_inputs(as_of)
        factors = [
            *self._assess_pain_risk(inputs, protocol),
            *self._assess_mobility_risk(inputs, protocol),
            *self._assess_wound_risk(inputs),
            *self._assess_systemic_risk(inputs),
            *self._assess_protocol_rules(inputs, protocol),
        ]
        risk_level = determine_overall_risk_level(factors)
        result = RiskAssessmentResult(
            patient_id=patient.id,
            surgery_type=patient.surgery_type,
            recovery_day=inputs.recovery_day,
            overall_risk_level=risk_level,
            risk_factors=factors,
            recommendations=generate_recommendations(factors, risk_level),
            urgency_level=determine_urgency_level(factors),
            assessment_timestamp=as_of if as_of is not None else utc_now(),
            next_review_in_hours=calculate_next_review_hours(
                risk_level, inputs.recovery_day, self._settings),
        )
        self._record(result)
        logger.info("risk_assessed", patient_id=patient.id,
                    surgery_type=patient.surgery_type.value,
                    recovery_day=inputs.recovery_day,
                    risk_level=result.overall_risk_level.value,
                    urgency=result.urgency_level.value,
                    factor_count=len(factors))
        return result

    def _record(self, result: RiskAssessmentResult) -> None:
        history = self._history.get(result.patient_id)
        if history is None:
            history = deque(maxlen=self._settings.history_limit)
            self._history[result.patient_id] = history
        history.append(result)

    def get_assessment_history(self, patient_id: str) -> list[RiskAssessmentResult]:
        """Recorded assessments for a patient, oldest first."""
        return list(self._history.get(patient_id, ()))

    def clear_history(self) -> None:
        self._history.clear()
        logger.debug("assessment_history_cleared")

    # ------------------------------------------------------------------
    # Scanners
    # ------------------------------------------------------------------

    def _assess_pain_risk(self, inputs: RiskInputs, protocol: SurgeryProtocol) -> list[RiskFactor]:
        factors: list[RiskFactor] = []
        day, pain = inputs.recovery_day, inputs.symptoms.pain_level
        min_pain, max_pain = protocol.get_expected_pain(day)

        if pain > max_pain:
            deviation = pain - max_pain
            factors.append(RiskFactor(
                id=_factor_id("pain-above-expected"),
                type=RiskFactorType.PAIN,
                severity=FactorSeverity.from_deviation(deviation),
                description=f"Pain level {pain} exceeds expected range ({min_pain}-{max_pain}) for day {day}",
                clinical_significance="May indicate complications, inadequate pain control, or delayed healing",
                guideline_reference=f"{protocol.metadata.display_name} protocol, day {day}",
                day_deviation=deviation,
            ))

        already_severe = any(f.severity == FactorSeverity.SEVERE for f in factors)
        if pain >= HIGH_PAIN_THRESHOLD and not already_severe:
            factors.append(RiskFactor(
                id=_factor_id("high-pain"),
                type=RiskFactorType.PAIN,
                severity=FactorSeverity.SEVERE,
                description=f"Severe pain level ({pain}/10) reported",
                clinical_significance="Requires immediate medical evaluation and pain management intervention",
                guideline_reference="Post-operative pain management guidelines",
            ))

        previous = inputs.preceding_report
        if previous is not None:
            increase = pain - previous.pain_level
            if increase >= PAIN_TREND_MODERATE:
                factors.append(RiskFactor(
                    id=_factor_id("pain-trend"),
                    type=RiskFactorType.PAIN,
                    severity=FactorSeverity.SEVERE if increase >= PAIN_TREND_SEVERE else FactorSeverity.MODERATE,
                    description=f"Pain increased by {increase} points from previous assessment",
                    clinical_significance="Rapid pain escalation may indicate developing complications",
                    guideline_reference="Pain trend monitoring guidelines",
                ))
        return factors

    def _assess_mobility_risk(self, inputs: RiskInputs, protocol: SurgeryProtocol) -> list[RiskFactor]:
        mobility = inputs.symptoms.mobility_score
        if mobility is None:
            return []

        factors: list[RiskFactor] = []
        expected = protocol.get_expected_recovery(inputs.recovery_day)
        if expected is not None and expected.expected_mobility_range is not None:
            min_mobility, max_mobility = expected.expected_mobility_range
            if mobility < min_mobility:
                deviation = min_mobility - mobility
                factors.append(RiskFactor(
                    id=_factor_id("mobility-below-expected"),
                    type=RiskFactorType.MOBILITY,
                    severity=FactorSeverity.from_deviation(deviation),
                    description=f"Mobility score {mobility} below expected range ({min_mobility}-{max_mobility})",
                    clinical_significance="May indicate stiffness, pain limitation, or need for physical therapy",
                    guideline_reference=f"{protocol.metadata.display_name} mobility protocol",
                    day_deviation=-deviation,
                ))

        # Emitted even when the deviation check above already fired.
        if mobility <= LOW_MOBILITY_THRESHOLD:
            factors.append(RiskFactor(
                id=_factor_id("low-mobility"),
                type=RiskFactorType.MOBILITY,
                severity=FactorSeverity.MODERATE,
                description=f"Very low mobility score ({mobility}/10) reported",
                clinical_significance="May require physical therapy intervention and mobility assistance",
                guideline_reference="Post-operative mobility guidelines",
            ))
        return factors

    def _assess_wound_risk(self, inputs: RiskInputs) -> list[RiskFactor]:
        condition = inputs.symptoms.wound_condition
        if condition is None or condition == WoundCondition.NORMAL:
            return []
        return [RiskFactor(
            id=_factor_id(f"wound-{condition.value}"),
            type=RiskFactorType.WOUND,
            severity=_WOUND_SEVERITY[condition],
            description=f"Wound condition reported as: {condition.value}",
            clinical_significance=_WOUND_SIGNIFICANCE[condition],
            guideline_reference="Post-operative wound care guidelines",
        )]

    def _assess_systemic_risk(self, inputs: RiskInputs) -> list[RiskFactor]:
        temperature = inputs.symptoms.temperature
        if temperature is None or temperature < FEVER_ELEVATED_C:
            return []
        if temperature >= FEVER_HIGH_C:
            return [RiskFactor(
                id=_factor_id("high-temperature"),
                type=RiskFactorType.TEMPERATURE,
                severity=FactorSeverity.SEVERE,
                description=f"High temperature ({temperature:.1f}°C) detected",
                clinical_significance="May indicate infection or systemic inflammatory response",
                guideline_reference="Post-operative fever management",
            )]
        return [RiskFactor(
            id=_factor_id("elevated-temperature"),
            type=RiskFactorType.TEMPERATURE,
            severity=FactorSeverity.MILD,
            description=f"Elevated temperature ({temperature:.1f}°C) detected",
            clinical_significance="Requires monitoring for infection signs",
            guideline_reference="Post-operative temperature monitoring",
        )]

    def _assess_protocol_rules(self, inputs: RiskInputs, protocol: SurgeryProtocol) -> list[RiskFactor]:
        factors: list[RiskFactor] = []
        for rule in protocol.get_applicable_risk_rules(inputs.recovery_day):
            if not rule.is_triggered(inputs.symptoms, inputs.recovery_day):
                continue
            factors.append(RiskFactor(
                id=_factor_id(f"rule-{rule.id}"),
                type=RiskFactorType.CUSTOM,
                severity=rule.risk_level.to_factor_severity(),
                description=rule.condition,
                clinical_significance=f"Protocol rule triggered: {rule.action}",
                guideline_reference=f"{protocol.metadata.display_name} protocol rule",
            ))
        return factors


def create_default_engine(settings: RiskEngineSettings | None = None,
                          protocols: Iterable[SurgeryProtocol] | None = None) -> RiskAssessmentEngine:
    """Engine with the built-in protocols registered, unless settings disable them."""
    engine = RiskAssessmentEngine(settings)
    if protocols is None:
        protocols = default_protocols() if engine.settings.register_default_protocols else ()
    for protocol in protocols:
        engine.register_protocol(protocol)
    return engine
