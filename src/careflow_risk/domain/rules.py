"""
CareFlow Risk - Protocol risk rules.

A rule pairs a human-readable condition with a structured criterion. The
criterion is a tagged variant evaluated by dispatch; the condition text is
kept for display and, when no criterion is supplied, parsed once against
the supported phrasings:

    "Pain level > N after day D"
    "Temperature > N"
    "Mobility score < N after day D"

Any other text becomes a NarrativeCondition, which never fires.
"""
from __future__ import annotations
import re
from typing import Annotated, Any, Literal, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import RiskLevel
from .symptoms import SymptomReport

_PAIN_AFTER_DAY = re.compile(r"Pain level > (\d+) after day (\d+)")
_TEMPERATURE_ABOVE = re.compile(r"Temperature > (\d+(?:\.\d+)?)")
_MOBILITY_AFTER_DAY = re.compile(r"Mobility score < (\d+) after day (\d+)")


class PainAboveAfterDay(BaseModel):
    """Pain strictly above ``threshold`` once recovery is past ``after_day``."""
    kind: Literal["pain_above_after_day"] = "pain_above_after_day"
    threshold: int
    after_day: int
    model_config = ConfigDict(frozen=True)

    def matches(self, symptoms: SymptomReport, recovery_day: int) -> bool:
        return symptoms.pain_level > self.threshold and recovery_day > self.after_day


class TemperatureAbove(BaseModel):
    """Temperature strictly above ``threshold`` (Celsius)."""
    kind: Literal["temperature_above"] = "temperature_above"
    threshold: float
    model_config = ConfigDict(frozen=True)

    def matches(self, symptoms: SymptomReport, recovery_day: int) -> bool:
        return symptoms.temperature is not None and symptoms.temperature > self.threshold


class MobilityBelowAfterDay(BaseModel):
    """Mobility strictly below ``threshold`` once recovery is past ``after_day``."""
    kind: Literal["mobility_below_after_day"] = "mobility_below_after_day"
    threshold: int
    after_day: int
    model_config = ConfigDict(frozen=True)

    def matches(self, symptoms: SymptomReport, recovery_day: int) -> bool:
        return (
            symptoms.mobility_score is not None
            and symptoms.mobility_score < self.threshold
            and recovery_day > self.after_day
        )


class NarrativeCondition(BaseModel):
    """Condition with no structured form; shown to clinicians, never evaluated."""
    kind: Literal["narrative"] = "narrative"
    model_config = ConfigDict(frozen=True)

    def matches(self, symptoms: SymptomReport, recovery_day: int) -> bool:
        return False


RuleCriterion = Annotated[
    Union[PainAboveAfterDay, TemperatureAbove, MobilityBelowAfterDay, NarrativeCondition],
    Field(discriminator="kind"),
]


def parse_condition(condition: str) -> PainAboveAfterDay | TemperatureAbove | MobilityBelowAfterDay | NarrativeCondition:
    """Derive a criterion from condition text."""
    if match := _PAIN_AFTER_DAY.search(condition):
        return PainAboveAfterDay(threshold=int(match.group(1)), after_day=int(match.group(2)))
    if match := _TEMPERATURE_ABOVE.search(condition):
        return TemperatureAbove(threshold=float(match.group(1)))
    if match := _MOBILITY_AFTER_DAY.search(condition):
        return MobilityBelowAfterDay(threshold=int(match.group(1)), after_day=int(match.group(2)))
    return NarrativeCondition()


class RiskRule(BaseModel):
    """Protocol-specific rule, optionally limited to a window of recovery days."""
    id: str
    condition: str
    risk_level: RiskLevel
    action: str
    day_range: tuple[int, int] | None = None
    criterion: RuleCriterion

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def derive_criterion(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("criterion") is None:
            condition = data.get("condition")
            data = {**data, "criterion": parse_condition(condition if isinstance(condition, str) else "")}
        return data

    def applies_on(self, day: int) -> bool:
        """True when the rule has no window or ``day`` falls inside it (inclusive)."""
        if self.day_range is None:
            return True
        min_day, max_day = self.day_range
        return min_day <= day <= max_day

    def is_triggered(self, symptoms: SymptomReport, recovery_day: int) -> bool:
        return self.criterion.matches(symptoms, recovery_day)
