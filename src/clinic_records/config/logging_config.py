"""Logging setup for clinic-records.

Logging is configured once through ``logging.config.dictConfig`` from three
settings:

- ``LOG_VERBOSITY``: QUIET, NORMAL, VERBOSE or DEBUG
- ``LOG_FORMAT``: simple, detailed or json
- ``ENABLE_SQL_LOGGING``: let generated SQL through at debug level
"""

import logging
import logging.config
from enum import Enum
from typing import Any, Dict, Optional

from .settings import ClinicSettings, get_settings

# Loggers that emit generated SQL at debug level
SQL_LOGGERS = ("asyncpg", "clinic_records.repositories", "clinic_records.database")

# Third-party loggers limited to errors
QUIET_LOGGERS = ("asyncio",)


class LogVerbosity(str, Enum):
    QUIET = "QUIET"
    NORMAL = "NORMAL"
    VERBOSE = "VERBOSE"
    DEBUG = "DEBUG"

    @property
    def level(self) -> str:
        return _VERBOSITY_LEVELS[self]

    @classmethod
    def parse(cls, value: str) -> "LogVerbosity":
        """Unknown values fall back to NORMAL."""
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.NORMAL


_VERBOSITY_LEVELS = {
    LogVerbosity.QUIET: "ERROR",
    LogVerbosity.NORMAL: "WARNING",
    LogVerbosity.VERBOSE: "INFO",
    LogVerbosity.DEBUG: "DEBUG",
}


class LogFormat(str, Enum):
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"

    @property
    def pattern(self) -> str:
        return _FORMAT_PATTERNS[self]


_FORMAT_PATTERNS = {
    LogFormat.SIMPLE: "%(asctime)s %(levelname)-8s %(message)s",
    LogFormat.DETAILED: "%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d] %(message)s",
    LogFormat.JSON: (
        '{"time": "%(asctime)s", "level": "%(levelname)s", '
        '"logger": "%(name)s", "message": "%(message)s"}'
    ),
}


def _logger_entry(level: str) -> Dict[str, Any]:
    return {"level": level, "handlers": ["stdout"], "propagate": False}


class LoggingConfig:
    """Builds and applies the dictConfig mapping for the library."""

    @staticmethod
    def build_config(
        verbosity: str = LogVerbosity.NORMAL.value,
        log_format: str = LogFormat.SIMPLE.value,
        enable_sql_logging: bool = False,
    ) -> Dict[str, Any]:
        """Return the dictConfig mapping for the given options."""
        level = LogVerbosity.parse(verbosity).level
        try:
            pattern = LogFormat(str(log_format).lower()).pattern
        except ValueError:
            pattern = LogFormat.SIMPLE.pattern

        loggers = {name: _logger_entry("ERROR") for name in QUIET_LOGGERS}
        if not enable_sql_logging and level == "DEBUG":
            # Keep debug output for everything except generated SQL
            loggers.update({name: _logger_entry("INFO") for name in SQL_LOGGERS})

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "clinic": {"format": pattern, "datefmt": "%Y-%m-%d %H:%M:%S"},
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "formatter": "clinic",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"level": level, "handlers": ["stdout"]},
            "loggers": loggers,
        }

    @classmethod
    def configure(cls, settings: Optional[ClinicSettings] = None) -> Dict[str, Any]:
        """Apply the logging configuration derived from settings and return it."""
        settings = settings or get_settings()
        config = cls.build_config(
            settings.log_verbosity,
            settings.log_format,
            settings.enable_sql_logging,
        )
        logging.config.dictConfig(config)
        logging.getLogger(__name__).debug(
            f"Logging configured: verbosity={settings.log_verbosity}, "
            f"format={settings.log_format}, sql={settings.enable_sql_logging}"
        )
        return config


def setup_logging() -> None:
    """Configure logging from the environment; called when the package is imported."""
    LoggingConfig.configure()
