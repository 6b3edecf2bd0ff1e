"""Protocol interfaces for tenant persistence.

Every method takes the connection of the current unit of work as its
first argument, so several repositories can share one transaction.
"""

from abc import abstractmethod
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from .license import LicensePlan, TenantLicense
from .tenant import Tenant


@runtime_checkable
class TenantRepository(Protocol):
    """Protocol for tenant data persistence operations."""

    @abstractmethod
    async def insert(self, conn: Any, tenant: Tenant) -> Tenant:
        """Insert a tenant. Unique violations raise a ConflictError subclass."""
        ...

    @abstractmethod
    async def find_by_id(self, conn: Any, tenant_id: str) -> Optional[Tenant]:
        ...

    @abstractmethod
    async def slug_exists(self, conn: Any, slug: str) -> bool:
        ...

    @abstractmethod
    async def routing_url_exists(self, conn: Any, routing_url: str) -> bool:
        ...

    @abstractmethod
    async def count(self, conn: Any) -> int:
        """Count all tenants, active or not."""
        ...

    @abstractmethod
    async def update_database_config(self, conn: Any, tenant: Tenant) -> Tenant:
        """Persist topology, connection, status and ownership fields in one statement."""
        ...

    @abstractmethod
    async def list_active_ids(self, conn: Any) -> List[str]:
        ...

    @abstractmethod
    async def count_by_database_status(self, conn: Any) -> Dict[str, int]:
        ...

    @abstractmethod
    async def deactivate(self, conn: Any, tenant_id: str) -> bool:
        ...


@runtime_checkable
class LicenseRepository(Protocol):
    """Protocol for license plan and tenant license persistence."""

    @abstractmethod
    async def find_plan_by_id(self, conn: Any, plan_id: str) -> Optional[LicensePlan]:
        ...

    @abstractmethod
    async def find_plan_by_name(self, conn: Any, name: str) -> Optional[LicensePlan]:
        ...

    @abstractmethod
    async def find_cheapest_active_plan(self, conn: Any) -> Optional[LicensePlan]:
        ...

    @abstractmethod
    async def insert_license(self, conn: Any, license: TenantLicense) -> TenantLicense:
        ...
