"""
CareFlow Domain Module.

Provides the identity-based ``MedicalEntity`` building block shared by
patients and surgery protocols.
"""

from .entity import MedicalEntity, format_pydantic_errors, utc_now

__all__ = [
    "MedicalEntity",
    "format_pydantic_errors",
    "utc_now",
]
