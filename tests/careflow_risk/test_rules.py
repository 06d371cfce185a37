"""
Unit tests for protocol risk rules and their criteria.
"""

from __future__ import annotations

from typing import Callable

import pytest
from pydantic import ValidationError as PydanticValidationError

from careflow_risk.domain import (
    FactorSeverity,
    MobilityBelowAfterDay,
    NarrativeCondition,
    PainAboveAfterDay,
    RiskLevel,
    RiskRule,
    SymptomReport,
    TemperatureAbove,
    parse_condition,
)


class TestParseCondition:
    """Tests for deriving criteria from condition text."""

    def test_pain_after_day(self) -> None:
        """Test the pain template."""
        assert parse_condition("Pain level > 7 after day 5") == PainAboveAfterDay(threshold=7, after_day=5)

    def test_temperature(self) -> None:
        """Test the temperature template with a unit suffix."""
        assert parse_condition("Temperature > 38°C") == TemperatureAbove(threshold=38.0)
        assert parse_condition("Temperature > 38.5") == TemperatureAbove(threshold=38.5)

    def test_mobility_after_day(self) -> None:
        """Test the mobility template."""
        assert parse_condition("Mobility score < 3 after day 7") == MobilityBelowAfterDay(threshold=3, after_day=7)

    @pytest.mark.parametrize("text", [
        "Vomiting or abdominal distension after day 3",
        "Wound redness, discharge or separation",
        "pain level > 7 after day 5",
        "",
    ])
    def test_unsupported_text_is_narrative(self, text: str) -> None:
        """Test anything outside the templates never fires."""
        assert isinstance(parse_condition(text), NarrativeCondition)


class TestCriteria:
    """Tests for criterion evaluation."""

    def test_pain_strict_thresholds(self, make_symptoms: Callable[..., SymptomReport]) -> None:
        """Test both pain and day comparisons are strict."""
        criterion = PainAboveAfterDay(threshold=7, after_day=5)

        assert criterion.matches(make_symptoms(pain_level=8), 6)
        assert not criterion.matches(make_symptoms(pain_level=7), 6)
        assert not criterion.matches(make_symptoms(pain_level=8), 5)

    def test_temperature_requires_reading(self, make_symptoms: Callable[..., SymptomReport]) -> None:
        """Test a missing temperature never matches."""
        criterion = TemperatureAbove(threshold=38.0)

        assert criterion.matches(make_symptoms(temperature=38.2), 1)
        assert not criterion.matches(make_symptoms(temperature=38.0), 1)
        assert not criterion.matches(make_symptoms(temperature=None), 1)

    def test_mobility_requires_score(self, make_symptoms: Callable[..., SymptomReport]) -> None:
        """Test a missing mobility score never matches."""
        criterion = MobilityBelowAfterDay(threshold=3, after_day=7)

        assert criterion.matches(make_symptoms(mobility_score=2), 8)
        assert not criterion.matches(make_symptoms(mobility_score=3), 8)
        assert not criterion.matches(make_symptoms(mobility_score=2), 7)
        assert not criterion.matches(make_symptoms(mobility_score=None), 8)

    def test_narrative_never_matches(self, make_symptoms: Callable[..., SymptomReport]) -> None:
        """Test narrative conditions are display only."""
        assert not NarrativeCondition().matches(make_symptoms(pain_level=10, temperature=41.0), 20)


class TestRiskRule:
    """Tests for RiskRule."""

    def test_criterion_derived_from_condition(self) -> None:
        """Test the criterion is parsed once at construction."""
        rule = RiskRule(id="r1", condition="Temperature > 38°C", risk_level=RiskLevel.HIGH, action="Evaluate")

        assert rule.criterion == TemperatureAbove(threshold=38.0)

    def test_explicit_criterion_wins(self) -> None:
        """Test an explicit criterion is kept over the text."""
        rule = RiskRule(
            id="r1",
            condition="Fever",
            risk_level="HIGH",
            action="Evaluate",
            criterion={"kind": "temperature_above", "threshold": 37.9},
        )

        assert rule.criterion == TemperatureAbove(threshold=37.9)
        assert rule.risk_level == RiskLevel.HIGH

    def test_unknown_criterion_kind(self) -> None:
        """Test the discriminator rejects unknown kinds."""
        with pytest.raises(PydanticValidationError):
            RiskRule(id="r1", condition="x", risk_level="LOW", action="y", criterion={"kind": "heart_rate"})

    def test_unknown_risk_level(self) -> None:
        """Test an unrecognised risk level is rejected."""
        with pytest.raises(PydanticValidationError):
            RiskRule(id="r1", condition="x", risk_level="SEVERE", action="y")

    @pytest.mark.parametrize("level,severity", [
        (RiskLevel.LOW, FactorSeverity.MILD),
        (RiskLevel.MODERATE, FactorSeverity.MODERATE),
        (RiskLevel.HIGH, FactorSeverity.SEVERE),
        (RiskLevel.CRITICAL, FactorSeverity.SEVERE),
    ])
    def test_rule_level_to_factor_severity(self, level: RiskLevel, severity: FactorSeverity) -> None:
        """Test every rule level maps onto a factor severity."""
        assert level.to_factor_severity() is severity

    @pytest.mark.parametrize("day,expected", [(4, False), (5, True), (10, True), (14, True), (15, False)])
    def test_day_window_inclusive(self, day: int, expected: bool) -> None:
        """Test the applicability window includes both ends."""
        rule = RiskRule(id="r1", condition="x", risk_level="LOW", action="y", day_range=(5, 14))

        assert rule.applies_on(day) is expected

    def test_no_window_always_applies(self) -> None:
        """Test a rule without a window applies every day."""
        rule = RiskRule(id="r1", condition="x", risk_level="LOW", action="y")

        assert rule.applies_on(0)
        assert rule.applies_on(365)

    def test_is_triggered(self, make_symptoms: Callable[..., SymptomReport]) -> None:
        """Test triggering delegates to the criterion."""
        rule = RiskRule(id="r1", condition="Pain level > 7 after day 5", risk_level="MODERATE", action="y")

        assert rule.is_triggered(make_symptoms(pain_level=9), 8)
        assert not rule.is_triggered(make_symptoms(pain_level=9), 4)

    def test_serialization_keeps_kind(self) -> None:
        """Test the criterion tag survives a dump and reload."""
        rule = RiskRule(id="r1", condition="Mobility score < 3 after day 7", risk_level="MODERATE", action="y")
        restored = RiskRule.model_validate(rule.model_dump(mode="json"))

        assert restored == rule
        assert rule.model_dump(mode="json")["criterion"]["kind"] == "mobility_below_after_day"
