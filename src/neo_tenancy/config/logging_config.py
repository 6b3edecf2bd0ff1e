"""Logging configuration for neo-tenancy.

The level comes from ``LOG_LEVEL`` when set, otherwise from
``LOG_VERBOSITY``, otherwise from ``TenancySettings.log_level``. Every
handler passes records through the secret redaction filter so DSNs and
passwords never reach the log stream.
"""

import logging
import logging.config
import os
from enum import Enum
from typing import Any, Dict, Optional

from .settings import TenancySettings, get_settings


class LogVerbosity(str, Enum):
    """Log verbosity modes."""
    QUIET = "QUIET"      # errors only
    NORMAL = "NORMAL"    # info, probe chatter suppressed
    VERBOSE = "VERBOSE"  # info, including every probe and connection
    DEBUG = "DEBUG"


class LogFormat(str, Enum):
    """Log format options."""
    SIMPLE = "simple"
    DETAILED = "detailed"
    JSON = "json"


VERBOSITY_LEVELS = {
    LogVerbosity.QUIET: "ERROR",
    LogVerbosity.NORMAL: "INFO",
    LogVerbosity.VERBOSE: "INFO",
    LogVerbosity.DEBUG: "DEBUG",
}

REDACTION_FILTER = "neo_tenancy.features.database.utils.error_handling.SecretRedactionFilter"


class LoggingConfig:
    """Builds and applies the dictConfig for the service."""

    # One line per probe or target connection; kept at WARNING unless VERBOSE
    PROBE_MODULES = [
        "neo_tenancy.features.database.repositories.connection_probe",
        "neo_tenancy.features.database.utils.connection_factory",
        "neo_tenancy.features.feature_flags.services.feature_table_manager",
    ]

    THIRD_PARTY_LEVELS = {
        "asyncpg": "WARNING",
        "httpx": "ERROR",
        "httpcore": "ERROR",
        "uvicorn.access": "WARNING",
    }

    FORMATS = {
        LogFormat.SIMPLE: "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        LogFormat.DETAILED: "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        LogFormat.JSON: '{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
    }

    @classmethod
    def resolve_level(cls, settings: TenancySettings) -> str:
        explicit = os.getenv("LOG_LEVEL")
        if explicit:
            return explicit.upper()
        verbosity = os.getenv("LOG_VERBOSITY")
        if verbosity:
            try:
                return VERBOSITY_LEVELS[LogVerbosity(verbosity.upper())]
            except ValueError:
                pass
        return settings.log_level.upper()

    @classmethod
    def build(cls, settings: Optional[TenancySettings] = None) -> Dict[str, Any]:
        """Build a dictConfig mapping."""
        settings = settings or get_settings()
        level = cls.resolve_level(settings)
        verbose = os.getenv("LOG_VERBOSITY", "").upper() in (LogVerbosity.VERBOSE.value, LogVerbosity.DEBUG.value)

        try:
            log_format = LogFormat(os.getenv("LOG_FORMAT", settings.log_format).lower())
        except ValueError:
            log_format = LogFormat.SIMPLE

        loggers: Dict[str, Dict[str, Any]] = {
            module: {"level": module_level} for module, module_level in cls.THIRD_PARTY_LEVELS.items()
        }
        if not verbose and level != "DEBUG":
            for module in cls.PROBE_MODULES:
                loggers[module] = {"level": "WARNING"}

        return {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "redact_secrets": {"()": REDACTION_FILTER},
            },
            "formatters": {
                "default": {
                    "format": cls.FORMATS[log_format],
                    "datefmt": "%Y-%m-%d %H:%M:%S",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "default",
                    "filters": ["redact_secrets"],
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": level,
                "handlers": ["console"],
            },
            "loggers": loggers,
        }

    @classmethod
    def configure(cls, settings: Optional[TenancySettings] = None) -> None:
        logging.config.dictConfig(cls.build(settings))


def setup_logging(settings: Optional[TenancySettings] = None) -> None:
    """Configure logging once at application startup."""
    LoggingConfig.configure(settings)
