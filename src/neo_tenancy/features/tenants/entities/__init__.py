"""Tenant entities."""

from .tenant import Tenant, AdminUser
from .license import LicensePlan, TenantLicense
from .protocols import TenantRepository, LicenseRepository

__all__ = [
    "Tenant",
    "AdminUser",
    "LicensePlan",
    "TenantLicense",
    "TenantRepository",
    "LicenseRepository",
]
