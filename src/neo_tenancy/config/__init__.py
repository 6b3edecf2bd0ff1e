"""Configuration for neo-tenancy."""

from .constants import (
    DatabaseTopology,
    DatabaseStatus,
    ManagedBy,
    LicenseStatus,
    TenantType,
    DEFAULT_ADMIN_ROLES,
    ConstraintNames,
)
from .settings import TenancySettings, get_settings
from .logging_config import LoggingConfig, setup_logging

__all__ = [
    "DatabaseTopology",
    "DatabaseStatus",
    "ManagedBy",
    "LicenseStatus",
    "TenantType",
    "DEFAULT_ADMIN_ROLES",
    "ConstraintNames",
    "TenancySettings",
    "get_settings",
    "LoggingConfig",
    "setup_logging",
]
