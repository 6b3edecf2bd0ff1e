"""Tenant repositories."""

from .tenant_repository import AsyncpgTenantRepository, map_tenant_unique_violation
from .license_repository import AsyncpgLicenseRepository

__all__ = ["AsyncpgTenantRepository", "AsyncpgLicenseRepository", "map_tenant_unique_violation"]
