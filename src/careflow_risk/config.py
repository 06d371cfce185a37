"""
CareFlow Risk - Centralized Configuration.
Risk engine configuration with externalized environment support.
"""
from __future__ import annotations
from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from careflow_common.observability import ObservabilitySettings


class RiskEngineSettings(BaseSettings):
    """Risk assessment engine configuration from environment."""
    service_name: str = Field(default="careflow-risk")
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")
    history_limit: int = Field(default=30, ge=1, le=1000,
                               description="Assessments kept per patient")
    early_recovery_days: int = Field(default=7, ge=0,
                                     description="Last day reviewed on the short LOW-risk interval")
    review_hours_critical: int = Field(default=2, ge=1)
    review_hours_high: int = Field(default=4, ge=1)
    review_hours_moderate: int = Field(default=12, ge=1)
    review_hours_low_early: int = Field(default=24, ge=1)
    review_hours_low_late: int = Field(default=48, ge=1)
    register_default_protocols: bool = Field(default=True)
    model_config = SettingsConfigDict(
        env_prefix="RISK_ENGINE_", env_file=".env", extra="ignore", case_sensitive=False
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"Invalid log level: {v}")
        return upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        lower = v.lower()
        if lower not in {"json", "console"}:
            raise ValueError(f"Invalid log format: {v}")
        return lower

    def to_observability_settings(self) -> ObservabilitySettings:
        """Logging settings derived from this configuration."""
        return ObservabilitySettings(
            service_name=self.service_name,
            environment=self.environment,
            log_level=self.log_level,
            log_format=self.log_format,
        )


@lru_cache
def get_settings() -> RiskEngineSettings:
    """Get cached risk engine settings."""
    return RiskEngineSettings()
