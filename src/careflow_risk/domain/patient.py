"""
CareFlow Risk - Patient entity.
Owns identity, profile, surgery metadata and the full symptom history, and
keeps every report it accepts within clinical bounds.
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, ClassVar, Iterable, Mapping
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
import structlog

from careflow_common.domain.entity import MedicalEntity, format_pydantic_errors, utc_now

from ..exceptions import InvalidPatientDataError, InvalidSymptomReportError
from .enums import AgeGroup, ImportPolicy, SurgeryType, WoundCondition
from .symptoms import RiskInputs, SymptomReport

logger = structlog.get_logger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60
RELEVANT_ALLERGIES = frozenset({"penicillin", "aspirin", "nsaids", "anesthesia"})


def _align_awareness(moment: datetime, reference: datetime) -> datetime:
    """Match the tz-awareness of ``reference``; naive values are read as UTC."""
    if reference.tzinfo is None and moment.tzinfo is not None:
        return moment.astimezone(timezone.utc).replace(tzinfo=None)
    if reference.tzinfo is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class PatientProfile(BaseModel):
    """Contact and demographic details."""
    first_name: str
    last_name: str
    age: int
    email: str
    phone: str | None = None
    emergency_contact: str | None = None

    model_config = ConfigDict(frozen=True)


class MedicalHistory(BaseModel):
    """Background relevant to recovery; every list is optional."""
    previous_surgeries: list[SurgeryType] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    medications: list[str] = Field(default_factory=list)
    chronic_conditions: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


def _coerce_report(report: SymptomReport | Mapping[str, Any]) -> SymptomReport:
    if isinstance(report, SymptomReport):
        return report
    try:
        return SymptomReport.model_validate(report)
    except PydanticValidationError as exc:
        errors = format_pydantic_errors(exc)
        raise InvalidSymptomReportError(
            f"Invalid symptom data: {', '.join(errors)}", cause=exc, details={"errors": errors},
        ) from exc


class Patient(MedicalEntity):
    """Patient in post-operative recovery.

    ``symptom_history`` is ordered oldest first and always ends with
    ``current_symptoms``; it starts out holding only the initial report.
    """
    profile: PatientProfile
    medical_history: MedicalHistory = Field(default_factory=MedicalHistory)
    surgery_type: SurgeryType
    surgery_date: datetime
    current_symptoms: SymptomReport
    symptom_history: list[SymptomReport] = Field(default_factory=list)
    doctor_id: str | None = None

    _entity_type: ClassVar[str] = "Patient"
    invalid_error: ClassVar[type[InvalidPatientDataError]] = InvalidPatientDataError
    invalid_message: ClassVar[str] = "Invalid patient data provided"

    @model_validator(mode="after")
    def seed_history(self) -> Patient:
        """Start the history with the initial report."""
        if not self.symptom_history:
            self.symptom_history.append(self.current_symptoms)
        return self

    @classmethod
    def create(
        cls,
        patient_id: str,
        profile: PatientProfile | Mapping[str, Any],
        surgery_type: SurgeryType | str,
        surgery_date: datetime,
        initial_symptoms: SymptomReport | Mapping[str, Any],
        medical_history: MedicalHistory | Mapping[str, Any] | None = None,
        doctor_id: str | None = None,
    ) -> Patient:
        """Admit a patient with their first symptom report."""
        data: dict[str, Any] = {
            "id": patient_id,
            "profile": profile,
            "surgery_type": surgery_type,
            "surgery_date": surgery_date,
            "current_symptoms": initial_symptoms,
            "doctor_id": doctor_id,
        }
        if medical_history is not None:
            data["medical_history"] = medical_history
        return cls(**data)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validation_errors(self) -> list[str]:
        errors = super().validation_errors()
        profile = self.profile
        if not profile.first_name.strip():
            errors.append("First name is required")
        if not profile.last_name.strip():
            errors.append("Last name is required")
        if not 0 <= profile.age <= 150:
            errors.append(f"Age {profile.age} must be between 0 and 150")
        if not profile.email.strip():
            errors.append("Email is required")
        errors.extend(self.current_symptoms.validation_errors())
        if self.symptom_history and self.symptom_history[-1] != self.current_symptoms:
            errors.append("Symptom history must end with the current report")
        return errors

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def full_name(self) -> str:
        return f"{self.profile.first_name} {self.profile.last_name}"

    def get_recovery_day(self, as_of: datetime | None = None) -> int:
        """Whole days since surgery; 0 on the day of surgery or before it."""
        as_of = _align_awareness(as_of or utc_now(), self.surgery_date)
        elapsed = (as_of - self.surgery_date).total_seconds()
        return max(int(elapsed // SECONDS_PER_DAY), 0)

    def get_age_group(self) -> AgeGroup:
        if self.profile.age < 40:
            return AgeGroup.YOUNG
        if self.profile.age < 65:
            return AgeGroup.ADULT
        return AgeGroup.SENIOR

    def has_high_risk_factors(self) -> bool:
        """Red flags in the current report alone."""
        symptoms = self.current_symptoms
        if symptoms.pain_level >= 8:
            return True
        if symptoms.temperature is not None and symptoms.temperature > 38:
            return True
        if symptoms.wound_condition == WoundCondition.INFECTION:
            return True
        return symptoms.mobility_score is not None and symptoms.mobility_score <= 3

    def has_relevant_allergies(self) -> bool:
        """Allergies that constrain post-operative analgesia or anaesthesia."""
        return any(a.strip().lower() in RELEVANT_ALLERGIES for a in self.medical_history.allergies)

    def get_risk_inputs(self, as_of: datetime | None = None) -> RiskInputs:
        return RiskInputs(
            surgery_type=self.surgery_type,
            recovery_day=self.get_recovery_day(as_of),
            symptoms=self.current_symptoms,
            previous_symptoms=self.symptom_history[:-1],
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def update_symptoms(self, report: SymptomReport | Mapping[str, Any]) -> None:
        """Record a new report, rejecting anything outside clinical bounds."""
        self._accept(_coerce_report(report))

    record_symptom_report = update_symptoms

    def import_symptom_report(self, report: SymptomReport | Mapping[str, Any],
                              policy: ImportPolicy = ImportPolicy.CLAMP) -> None:
        """Load a report from seeding or batch data under an explicit policy."""
        self.import_symptom_reports([report], policy=policy)

    def import_symptom_reports(self, reports: Iterable[SymptomReport | Mapping[str, Any]],
                               policy: ImportPolicy = ImportPolicy.CLAMP) -> int:
        """Bulk-load reports in order; nothing is applied if any report is rejected."""
        prepared: list[SymptomReport] = []
        for index, raw in enumerate(reports):
            report = _coerce_report(raw)
            if policy == ImportPolicy.CLAMP:
                report = report.clamped()
            errors = report.validation_errors()
            if errors:
                raise InvalidSymptomReportError(
                    f"Invalid symptom data at position {index}: {', '.join(errors)}",
                    details={"errors": errors, "position": index, "policy": policy.value},
                )
            prepared.append(report)
        for report in prepared:
            self._append(report)
        if prepared:
            self.touch()
        logger.debug("symptom_reports_imported", patient_id=self.id,
                     count=len(prepared), policy=policy.value)
        return len(prepared)

    def _accept(self, report: SymptomReport) -> None:
        errors = report.validation_errors()
        if errors:
            raise InvalidSymptomReportError(
                f"Invalid symptom data: {', '.join(errors)}", details={"errors": errors},
            )
        self._append(report)
        self.touch()

    def _append(self, report: SymptomReport) -> None:
        self.symptom_history.append(report)
        self.current_symptoms = report

    def assign_doctor(self, doctor_id: str) -> None:
        self.doctor_id = doctor_id
        self.touch()

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
