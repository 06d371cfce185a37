"""
CareFlow Risk - post-operative recovery risk assessment.

Modules:
    validation: clinical bounds predicates
    config: engine settings from environment
    exceptions: risk domain errors
    domain: patients, surgery protocols, scoring and the assessment engine
"""

from .config import RiskEngineSettings, get_settings
from .domain import (
    FactorSeverity,
    ImportPolicy,
    Patient,
    PatientProfile,
    RiskAssessmentEngine,
    RiskAssessmentResult,
    RiskFactor,
    RiskLevel,
    SurgeryProtocol,
    SurgeryType,
    SymptomReport,
    UrgencyLevel,
    WoundCondition,
    create_default_engine,
)
from .exceptions import (
    InvalidPatientDataError,
    InvalidProtocolError,
    InvalidSymptomReportError,
    ProtocolNotFoundError,
)
from .validation import validate_mobility_score, validate_pain_level, validate_temperature

__version__ = "1.0.0"

__all__ = [
    "__version__",
    # Configuration
    "RiskEngineSettings",
    "get_settings",
    # Domain
    "FactorSeverity",
    "ImportPolicy",
    "Patient",
    "PatientProfile",
    "RiskAssessmentEngine",
    "RiskAssessmentResult",
    "RiskFactor",
    "RiskLevel",
    "SurgeryProtocol",
    "SurgeryType",
    "SymptomReport",
    "UrgencyLevel",
    "WoundCondition",
    "create_default_engine",
    # Exceptions
    "InvalidPatientDataError",
    "InvalidProtocolError",
    "InvalidSymptomReportError",
    "ProtocolNotFoundError",
    # Validation
    "validate_pain_level",
    "validate_mobility_score",
    "validate_temperature",
]
