"""CareFlow Risk domain package - patients, protocols and the assessment engine."""
from .catalog import create_abdominal_surgery_protocol, create_knee_replacement_protocol, default_protocols
from .engine import RiskAssessmentEngine, create_default_engine
from .enums import (
    AgeGroup,
    FactorSeverity,
    ImportPolicy,
    RiskFactorType,
    RiskLevel,
    SurgeryType,
    UrgencyLevel,
    WoundCondition,
)
from .patient import MedicalHistory, Patient, PatientProfile
from .protocol import ProtocolValidation, RecoveryCurvePoint, SurgeryMetadata, SurgeryProtocol
from .recommendations import generate_recommendations
from .rules import (
    MobilityBelowAfterDay,
    NarrativeCondition,
    PainAboveAfterDay,
    RiskRule,
    TemperatureAbove,
    parse_condition,
)
from .scoring import (
    RiskAssessmentResult,
    RiskFactor,
    calculate_next_review_hours,
    determine_overall_risk_level,
    determine_urgency_level,
)
from .symptoms import RiskInputs, SymptomReport

__all__ = [
    "AgeGroup",
    "FactorSeverity",
    "ImportPolicy",
    "RiskFactorType",
    "RiskLevel",
    "SurgeryType",
    "UrgencyLevel",
    "WoundCondition",
    "SymptomReport",
    "RiskInputs",
    "PatientProfile",
    "MedicalHistory",
    "Patient",
    "RiskRule",
    "PainAboveAfterDay",
    "TemperatureAbove",
    "MobilityBelowAfterDay",
    "NarrativeCondition",
    "parse_condition",
    "SurgeryMetadata",
    "RecoveryCurvePoint",
    "ProtocolValidation",
    "SurgeryProtocol",
    "create_knee_replacement_protocol",
    "create_abdominal_surgery_protocol",
    "default_protocols",
    "RiskFactor",
    "RiskAssessmentResult",
    "determine_overall_risk_level",
    "determine_urgency_level",
    "calculate_next_review_hours",
    "generate_recommendations",
    "RiskAssessmentEngine",
    "create_default_engine",
]
