"""Configuration for clinic-records: settings and logging."""

from .settings import ClinicSettings, get_settings
from .logging_config import (
    LoggingConfig,
    LogFormat,
    LogVerbosity,
    setup_logging,
)

__all__ = [
    "ClinicSettings",
    "get_settings",
    "LoggingConfig",
    "LogFormat",
    "LogVerbosity",
    "setup_logging",
]
