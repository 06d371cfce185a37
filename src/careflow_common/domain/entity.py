"""
CareFlow Base Entity Implementation.

Provides identity-based medical entities with:
- Non-empty string identity, immutable after creation
- Timestamps (created_at, updated_at)
- Domain validation run on every construction and assignment
- Equality based on identity
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

import structlog

from ..exceptions import ValidationError

logger = structlog.get_logger(__name__)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_pydantic_errors(exc: PydanticValidationError) -> list[str]:
    """Flatten a pydantic validation error into readable messages."""
    messages: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return messages


class MedicalEntity(BaseModel, ABC):
    """
    Base class for all medical entities.

    Entities are domain objects with a distinct identity that persists
    across state changes. Two entities are considered equal if they
    have the same identity, regardless of their attribute values.

    Construction and field assignment run pydantic type validation followed
    by the subclass's domain rules (``validation_errors``); any failure is
    raised as the subclass's ``invalid_error`` rather than a pydantic error.
    A rejected assignment leaves the previous value in place.
    """

    id: str = Field(..., frozen=True, description="Unique entity identifier")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
    )

    _entity_type: ClassVar[str] = "MedicalEntity"
    invalid_error: ClassVar[type[ValidationError]] = ValidationError
    invalid_message: ClassVar[str] = "Invalid entity data"

    def __init__(self, **data: Any) -> None:
        errors, cause = self._initialize(data)
        if errors:
            raise self._validation_failure(errors, cause=cause) from cause

    def _initialize(self, data: dict[str, Any]) -> tuple[list[str], Exception | None]:
        try:
            super().__init__(**data)
        except PydanticValidationError as exc:
            return format_pydantic_errors(exc), exc
        return self.validation_errors(), None

    @classmethod
    def build_candidate(cls, data: dict[str, Any]) -> tuple[Self, list[str], Exception | None]:
        """
        Validate ``data`` without raising.

        Returns the instance together with its error messages and the
        underlying pydantic error, if any. The instance is only usable
        when the error list is empty.
        """
        candidate = cls.__new__(cls)
        errors, cause = candidate._initialize(data)
        return candidate, errors, cause

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in type(self).model_fields:
            super().__setattr__(name, value)
            return
        previous = self.__dict__.get(name)
        try:
            super().__setattr__(name, value)
        except PydanticValidationError as exc:
            raise self._validation_failure(format_pydantic_errors(exc), cause=exc) from exc
        errors = self.validation_errors()
        if errors:
            self.__dict__[name] = previous
            raise self._validation_failure(errors)

    @classmethod
    def _validation_failure(cls, errors: list[str],
                            cause: Exception | None = None) -> ValidationError:
        return cls.invalid_error(
            f"{cls.invalid_message}: {', '.join(errors)}",
            cause=cause,
            details={"entity_type": cls.get_entity_type(), "errors": errors},
        )

    @classmethod
    def get_entity_type(cls) -> str:
        """Return the entity type name."""
        return getattr(cls, "_entity_type", cls.__name__)

    def validation_errors(self) -> list[str]:
        """Return the domain rule violations of the current state."""
        if not isinstance(self.id, str) or not self.id.strip():
            return ["Valid ID is required"]
        return []

    def is_valid(self) -> bool:
        """Re-check every domain rule without mutating the entity."""
        return not self.validation_errors()

    @abstractmethod
    def to_json(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict (ISO-8601 dates, enum values)."""

    @classmethod
    def from_json(cls, data: str | dict[str, Any]) -> Self:
        """Rebuild an entity through its constructor, re-running validation."""
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as exc:
                raise cls._validation_failure([f"malformed JSON: {exc.msg}"], cause=exc) from exc
        if not isinstance(data, dict):
            raise cls._validation_failure([f"expected a JSON object, got {type(data).__name__}"])
        return cls(**data)

    def touch(self) -> None:
        """Update the entity's modification timestamp."""
        self.updated_at = utc_now()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MedicalEntity):
            return False
        if not isinstance(other, type(self)):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))

    def __repr__(self) -> str:
        return f"{self.get_entity_type()}(id={self.id})"
