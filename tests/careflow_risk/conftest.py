"""Shared fixtures for risk domain tests."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Callable

import pytest

from careflow_risk.config import RiskEngineSettings
from careflow_risk.domain import (
    Patient,
    PatientProfile,
    RiskAssessmentEngine,
    SurgeryProtocol,
    SurgeryType,
    SymptomReport,
    WoundCondition,
    create_default_engine,
    create_knee_replacement_protocol,
)

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def profile() -> PatientProfile:
    return PatientProfile(first_name="Ada", last_name="Lovelace", age=58, email="ada@example.org")


@pytest.fixture
def make_symptoms() -> Callable[..., SymptomReport]:
    def _make(**overrides: Any) -> SymptomReport:
        data: dict[str, Any] = {
            "pain_level": 4,
            "mobility_score": 6,
            "wound_condition": WoundCondition.NORMAL,
            "temperature": 36.8,
            "reported_at": NOW,
        }
        data.update(overrides)
        return SymptomReport(**data)
    return _make


@pytest.fixture
def symptoms(make_symptoms: Callable[..., SymptomReport]) -> SymptomReport:
    return make_symptoms()


@pytest.fixture
def make_patient(profile: PatientProfile, make_symptoms: Callable[..., SymptomReport]) -> Callable[..., Patient]:
    """Patient whose surgery happened ``day`` whole days before NOW."""
    def _make(day: int = 5, patient_id: str = "patient-001",
              surgery_type: SurgeryType = SurgeryType.KNEE_REPLACEMENT, **symptom_overrides: Any) -> Patient:
        return Patient.create(
            patient_id=patient_id,
            profile=profile,
            surgery_type=surgery_type,
            surgery_date=NOW - timedelta(days=day),
            initial_symptoms=make_symptoms(**symptom_overrides),
        )
    return _make


@pytest.fixture
def knee_protocol() -> SurgeryProtocol:
    return create_knee_replacement_protocol()


@pytest.fixture
def settings() -> RiskEngineSettings:
    return RiskEngineSettings()


@pytest.fixture
def engine(settings: RiskEngineSettings) -> RiskAssessmentEngine:
    return create_default_engine(settings)
