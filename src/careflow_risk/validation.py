"""
CareFlow Risk - clinical bounds checks.
Pure predicates shared by every symptom validity check.
"""
from __future__ import annotations
import math
from typing import Any

PAIN_RANGE = (1, 10)
MOBILITY_RANGE = (1, 10)
TEMPERATURE_RANGE_C = (35.0, 42.0)


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value)


def _within(value: Any, bounds: tuple[float, float]) -> bool:
    return _is_number(value) and bounds[0] <= value <= bounds[1]


def validate_pain_level(pain_level: Any) -> bool:
    """True iff pain_level is a number on the 1-10 scale."""
    return _within(pain_level, PAIN_RANGE)


def validate_mobility_score(mobility_score: Any = None) -> bool:
    """True iff mobility_score is absent or a number on the 1-10 scale."""
    return mobility_score is None or _within(mobility_score, MOBILITY_RANGE)


def validate_temperature(temperature: Any = None) -> bool:
    """True iff temperature is absent or a plausible body temperature in Celsius."""
    return temperature is None or _within(temperature, TEMPERATURE_RANGE_C)
