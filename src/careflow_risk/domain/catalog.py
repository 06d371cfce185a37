"""
CareFlow Risk - Built-in surgery protocols.
Reference recovery curves and rules for the surgery types supported out of
the box. Deployments may register their own protocols instead.
"""
from __future__ import annotations

from .enums import RiskLevel, SurgeryType
from .protocol import RecoveryCurvePoint, SurgeryMetadata, SurgeryProtocol
from .rules import RiskRule


def create_knee_replacement_protocol() -> SurgeryProtocol:
    """Total knee arthroplasty recovery protocol."""
    return SurgeryProtocol(
        id="knee-replacement-v1",
        surgery_type=SurgeryType.KNEE_REPLACEMENT,
        version="1.0",
        metadata=SurgeryMetadata(
            display_name="Knee Replacement Surgery",
            description="Total knee arthroplasty recovery protocol",
            typical_duration=90,
            common_complications=["infection", "blood clots", "stiffness", "pain"],
            warning_signs=["fever", "severe swelling", "inability to move", "chest pain"],
        ),
        recovery_curve=[
            RecoveryCurvePoint(
                day=1, expected_pain_range=(7, 9), expected_mobility_range=(1, 3),
                warning_signs=["excessive swelling", "fever > 38°C", "severe pain > 8"],
                complications=["infection", "blood clots"],
            ),
            RecoveryCurvePoint(
                day=3, expected_pain_range=(5, 7), expected_mobility_range=(2, 4),
                warning_signs=["increasing pain", "wound discharge", "fever"],
                complications=["infection", "stiffness"],
            ),
            RecoveryCurvePoint(
                day=7, expected_pain_range=(3, 5), expected_mobility_range=(4, 6),
                warning_signs=["pain > 6", "persistent swelling", "redness"],
                complications=["stiffness", "slow recovery"],
            ),
            RecoveryCurvePoint(
                day=14, expected_pain_range=(2, 4), expected_mobility_range=(6, 8),
                warning_signs=["sudden increase in pain", "difficulty bearing weight"],
                complications=["adhesion formation"],
            ),
            RecoveryCurvePoint(
                day=30, expected_pain_range=(1, 3), expected_mobility_range=(7, 9),
                warning_signs=["persistent pain > 4", "limited range of motion"],
                complications=["arthrofibrosis"],
            ),
        ],
        risk_rules=[
            RiskRule(
                id="knee-high-pain-early",
                condition="Pain level > 7 after day 5",
                risk_level=RiskLevel.MODERATE,
                action="Consider pain management adjustment and evaluation",
                day_range=(5, 14),
            ),
            RiskRule(
                id="knee-fever",
                condition="Temperature > 38°C",
                risk_level=RiskLevel.HIGH,
                action="Immediate medical evaluation for infection",
                day_range=(1, 30),
            ),
            RiskRule(
                id="knee-immobility",
                condition="Mobility score < 3 after day 7",
                risk_level=RiskLevel.MODERATE,
                action="Physical therapy consultation",
                day_range=(7, 21),
            ),
        ],
    )


def create_abdominal_surgery_protocol() -> SurgeryProtocol:
    """General abdominal surgery recovery protocol."""
    return SurgeryProtocol(
        id="abdominal-surgery-v1",
        surgery_type=SurgeryType.ABDOMINAL_SURGERY,
        version="1.0",
        metadata=SurgeryMetadata(
            display_name="Abdominal Surgery",
            description="General abdominal surgery recovery protocol",
            typical_duration=60,
            common_complications=["infection", "bowel obstruction", "hernia", "bleeding"],
            warning_signs=["fever", "severe abdominal pain", "vomiting", "wound issues"],
        ),
        recovery_curve=[
            RecoveryCurvePoint(
                day=1, expected_pain_range=(6, 8), expected_mobility_range=(1, 2),
                warning_signs=["fever > 38°C", "severe abdominal pain", "vomiting"],
                complications=["infection", "bleeding"],
            ),
            RecoveryCurvePoint(
                day=3, expected_pain_range=(4, 6), expected_mobility_range=(2, 4),
                warning_signs=["persistent fever", "abdominal distension", "no bowel movement"],
                complications=["ileus", "infection"],
            ),
            RecoveryCurvePoint(
                day=7, expected_pain_range=(2, 4), expected_mobility_range=(4, 6),
                warning_signs=["wound separation", "persistent pain", "nausea"],
                complications=["wound infection", "hernia"],
            ),
            RecoveryCurvePoint(
                day=14, expected_pain_range=(1, 3), expected_mobility_range=(6, 8),
                warning_signs=["incisional hernia signs", "persistent bloating"],
                complications=["incisional hernia"],
            ),
            RecoveryCurvePoint(
                day=30, expected_pain_range=(0, 2), expected_mobility_range=(8, 10),
                warning_signs=["chronic pain", "activity limitation"],
                complications=["adhesions"],
            ),
        ],
        risk_rules=[
            RiskRule(
                id="abdominal-fever",
                condition="Temperature > 38°C",
                risk_level=RiskLevel.HIGH,
                action="Immediate evaluation for intra-abdominal infection",
                day_range=(1, 21),
            ),
            RiskRule(
                id="abdominal-obstruction",
                condition="Vomiting or abdominal distension after day 3",
                risk_level=RiskLevel.HIGH,
                action="Emergency evaluation for bowel obstruction",
                day_range=(3, 30),
            ),
            RiskRule(
                id="abdominal-wound-issues",
                condition="Wound redness, discharge or separation",
                risk_level=RiskLevel.MODERATE,
                action="Wound evaluation and possible intervention",
                day_range=(5, 21),
            ),
        ],
    )


def default_protocols() -> list[SurgeryProtocol]:
    """Fresh instances of every built-in protocol."""
    return [create_knee_replacement_protocol(), create_abdominal_surgery_protocol()]
