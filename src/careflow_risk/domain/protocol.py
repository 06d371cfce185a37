"""
CareFlow Risk - Surgery protocol entity.

Per-surgery reference data: a sparse expected-recovery curve, interpolated
between known days, and a set of day-windowed risk rules.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Iterable, Mapping
from pydantic import BaseModel, ConfigDict, Field
import structlog

from careflow_common.domain.entity import MedicalEntity, utc_now

from ..exceptions import InvalidProtocolError
from .enums import SurgeryType
from .rules import RiskRule

logger = structlog.get_logger(__name__)

MAX_CURVE_GAP_DAYS = 7
FULL_PAIN_RANGE = (0, 10)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _lerp_range(lower: tuple[int, int], upper: tuple[int, int], ratio: float) -> tuple[int, int]:
    return (
        _round_half_up(lower[0] + ratio * (upper[0] - lower[0])),
        _round_half_up(lower[1] + ratio * (upper[1] - lower[1])),
    )


def _ordered_union(first: Iterable[str], second: Iterable[str]) -> list[str]:
    return list(dict.fromkeys([*first, *second]))


class SurgeryMetadata(BaseModel):
    """Display and reference information for a surgery type."""
    display_name: str
    description: str
    typical_duration: int = Field(..., description="Typical recovery duration in days")
    common_complications: list[str] = Field(default_factory=list)
    warning_signs: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class RecoveryCurvePoint(BaseModel):
    """Expected recovery on one post-operative day."""
    day: int
    expected_pain_range: tuple[int, int]
    expected_mobility_range: tuple[int, int] | None = None
    warning_signs: list[str] = Field(default_factory=list)
    complications: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


@dataclass
class ProtocolValidation:
    """Outcome of checking a protocol definition."""
    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class SurgeryProtocol(MedicalEntity):
    """Expected recovery pattern and risk rules for one surgery type."""
    surgery_type: SurgeryType
    metadata: SurgeryMetadata
    recovery_curve: list[RecoveryCurvePoint]
    risk_rules: list[RiskRule] = Field(default_factory=list)
    is_active: bool = True
    version: str = "1.0"
    last_updated: datetime = Field(default_factory=utc_now)

    _entity_type: ClassVar[str] = "SurgeryProtocol"
    invalid_error: ClassVar[type[InvalidProtocolError]] = InvalidProtocolError
    invalid_message: ClassVar[str] = "Invalid surgery protocol"

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def perform_validation(self) -> ProtocolValidation:
        """Check every invariant, collecting errors and advisory warnings."""
        errors = super().validation_errors()
        warnings: list[str] = []

        if not self.metadata.display_name.strip():
            errors.append("Display name is required")
        if not self.metadata.description.strip():
            errors.append("Description is required")
        if self.metadata.typical_duration <= 0:
            errors.append("Typical duration must be positive")

        if not self.recovery_curve:
            errors.append("Recovery curve cannot be empty")
        else:
            days = sorted(point.day for point in self.recovery_curve)
            for previous, current in zip(days, days[1:]):
                if current - previous > MAX_CURVE_GAP_DAYS:
                    warnings.append(f"Large gap in recovery curve between day {previous} and {current}")
            for point in self.recovery_curve:
                min_pain, max_pain = point.expected_pain_range
                if point.day < 0:
                    errors.append(f"Recovery curve day {point.day} cannot be negative")
                if min_pain < 0 or max_pain > 10:
                    errors.append(f"Pain range must be between 0-10 for day {point.day}")
                if min_pain > max_pain:
                    errors.append(f"Min pain cannot be greater than max pain for day {point.day}")

        if not self.risk_rules:
            warnings.append("No risk rules defined")
        for index, rule in enumerate(self.risk_rules):
            if not rule.id.strip():
                errors.append(f"Risk rule {index} must have valid ID")
            if not rule.condition.strip():
                errors.append(f"Risk rule {index} must have condition")
            if not rule.action.strip():
                errors.append(f"Risk rule {index} must have action")

        return ProtocolValidation(is_valid=not errors, errors=errors, warnings=warnings)

    def validation_errors(self) -> list[str]:
        return self.perform_validation().errors

    # ------------------------------------------------------------------
    # Recovery curve queries
    # ------------------------------------------------------------------

    def get_expected_recovery(self, day: int) -> RecoveryCurvePoint | None:
        """Expected recovery for ``day``, interpolating between known points.

        Outside the curve's span the nearest point is returned unchanged.
        """
        if not self.recovery_curve:
            return None
        for point in self.recovery_curve:
            if point.day == day:
                return point

        ordered = sorted(self.recovery_curve, key=lambda p: p.day)
        lower = next((p for p in reversed(ordered) if p.day < day), None)
        upper = next((p for p in ordered if p.day > day), None)

        if lower is not None and upper is not None:
            ratio = (day - lower.day) / (upper.day - lower.day)
            mobility = None
            if lower.expected_mobility_range and upper.expected_mobility_range:
                mobility = _lerp_range(lower.expected_mobility_range,
                                       upper.expected_mobility_range, ratio)
            return RecoveryCurvePoint(
                day=day,
                expected_pain_range=_lerp_range(lower.expected_pain_range,
                                                upper.expected_pain_range, ratio),
                expected_mobility_range=mobility,
                warning_signs=_ordered_union(lower.warning_signs, upper.warning_signs),
                complications=_ordered_union(lower.complications, upper.complications),
            )

        return min(ordered, key=lambda p: abs(p.day - day))

    def get_expected_pain(self, day: int) -> tuple[int, int]:
        expected = self.get_expected_recovery(day)
        if expected is None:
            return FULL_PAIN_RANGE
        return expected.expected_pain_range

    def is_pain_within_expected_range(self, day: int, pain_level: float) -> bool:
        expected = self.get_expected_recovery(day)
        if expected is None:
            return True
        min_pain, max_pain = expected.expected_pain_range
        return min_pain <= pain_level <= max_pain

    def get_pain_deviation(self, day: int, pain_level: float) -> float:
        """Distance outside the expected pain range; 0 inside it."""
        min_pain, max_pain = self.get_expected_pain(day)
        if pain_level < min_pain:
            return min_pain - pain_level
        if pain_level > max_pain:
            return pain_level - max_pain
        return 0

    def get_applicable_risk_rules(self, day: int) -> list[RiskRule]:
        return [rule for rule in self.risk_rules if rule.applies_on(day)]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def update_protocol(
        self,
        metadata: Mapping[str, Any] | SurgeryMetadata | None = None,
        recovery_curve: Iterable[RecoveryCurvePoint | Mapping[str, Any]] | None = None,
        risk_rules: Iterable[RiskRule | Mapping[str, Any]] | None = None,
    ) -> None:
        """Merge new definitions; the protocol is left untouched if the result is invalid."""
        data = self.model_dump()
        if metadata is not None:
            if isinstance(metadata, SurgeryMetadata):
                metadata = metadata.model_dump(exclude_unset=True)
            data["metadata"] = {**data["metadata"], **metadata}
        if recovery_curve is not None:
            data["recovery_curve"] = list(recovery_curve)
        if risk_rules is not None:
            data["risk_rules"] = list(risk_rules)

        candidate, errors, cause = type(self).build_candidate(data)
        if errors:
            raise InvalidProtocolError(
                f"Invalid protocol update: {', '.join(errors)}",
                cause=cause,
                details={"entity_type": self.get_entity_type(), "errors": errors},
            ) from cause

        self.metadata = candidate.metadata
        self.recovery_curve = candidate.recovery_curve
        self.risk_rules = candidate.risk_rules
        self.last_updated = utc_now()
        self.touch()
        logger.info("protocol_updated", protocol_id=self.id,
                    surgery_type=self.surgery_type.value, version=self.version)

    def activate(self) -> None:
        self.is_active = True
        self.touch()

    def deactivate(self) -> None:
        self.is_active = False
        self.touch()

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
