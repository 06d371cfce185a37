"""
CareFlow Observability - structured logging configuration.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

import structlog
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ObservabilitySettings(BaseSettings):
    """Observability configuration from environment."""
    service_name: str = Field(default="careflow")
    environment: str = Field(default="development")
    log_level: LogLevel = Field(default=LogLevel.INFO)
    log_format: str = Field(default="json")
    model_config = SettingsConfigDict(env_prefix="OBSERVABILITY_", env_file=".env", extra="ignore")


_LOG_LEVELS = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.CRITICAL: logging.CRITICAL,
}


def configure_logging(settings: ObservabilitySettings | None = None) -> None:
    """Configure structured logging with structlog."""
    settings = settings or ObservabilitySettings()
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_service_context(settings.service_name, settings.environment),
    ]
    if settings.log_format == "json":
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            _LOG_LEVELS.get(settings.log_level, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def _add_service_context(service_name: str, environment: str) -> Callable[..., Any]:
    """Processor to add service context to logs."""
    def processor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict["service"] = service_name
        event_dict["environment"] = environment
        return event_dict
    return processor
