"""Tenant repository implementation using asyncpg.

Connection secrets are encrypted on write and decrypted on read; the
Tenant entity never sees ciphertext.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import asyncpg

from ....config.constants import ConstraintNames, DatabaseStatus, DatabaseTopology, ManagedBy, TenantType
from ....core.exceptions import ConflictError, SlugConflictError, UrlPrefixConflictError
from ....utils.encryption import SecretEncryption, get_encryption
from ...database.entities.connection_target import ConnectionTarget
from ..entities.protocols import TenantRepository
from ..entities.tenant import Tenant
from ..utils.queries import (
    TENANT_COUNT,
    TENANT_COUNT_BY_DATABASE_STATUS,
    TENANT_DEACTIVATE,
    TENANT_GET_BY_ID,
    TENANT_INSERT,
    TENANT_LIST_ACTIVE_IDS,
    TENANT_ROUTING_URL_EXISTS,
    TENANT_SLUG_EXISTS,
    TENANT_UPDATE_DATABASE_CONFIG,
)

logger = logging.getLogger(__name__)


def map_tenant_unique_violation(error: asyncpg.UniqueViolationError, tenant: Tenant) -> ConflictError:
    """Translate a unique-constraint violation on ``tenants`` into a conflict."""
    constraint = getattr(error, "constraint_name", None)
    if constraint == ConstraintNames.TENANT_SLUG:
        return SlugConflictError(tenant.slug)
    if constraint == ConstraintNames.TENANT_ROUTING_URL:
        return UrlPrefixConflictError(tenant.routing_url)
    return ConflictError(f"Tenant conflicts with an existing record ({constraint or 'unknown constraint'})")


class AsyncpgTenantRepository(TenantRepository):
    """Tenant persistence over an asyncpg connection."""

    def __init__(self, encryption: Optional[SecretEncryption] = None):
        self._encryption = encryption

    @property
    def encryption(self) -> SecretEncryption:
        if self._encryption is None:
            self._encryption = get_encryption()
        return self._encryption

    async def insert(self, conn: Any, tenant: Tenant) -> Tenant:
        try:
            row = await conn.fetchrow(TENANT_INSERT, tenant.id, tenant.name, tenant.slug,
                                      tenant.tenant_type.value, tenant.contact_email, tenant.contact_phone,
                                      *self._database_params(tenant),
                                      tenant.routing_url, tenant.last_checked_at, tenant.last_error,
                                      tenant.is_active, tenant.created_at, tenant.updated_at)
        except asyncpg.UniqueViolationError as e:
            logger.warning(f"Tenant insert for slug '{tenant.slug}' hit {e.constraint_name}")
            raise map_tenant_unique_violation(e, tenant) from e

        logger.info(f"Created tenant {tenant.id} ({tenant.slug})")
        return self._map_row_to_tenant(row)

    async def find_by_id(self, conn: Any, tenant_id: str) -> Optional[Tenant]:
        row = await conn.fetchrow(TENANT_GET_BY_ID, tenant_id)
        return self._map_row_to_tenant(row) if row else None

    async def slug_exists(self, conn: Any, slug: str) -> bool:
        return bool(await conn.fetchval(TENANT_SLUG_EXISTS, slug))

    async def routing_url_exists(self, conn: Any, routing_url: str) -> bool:
        return bool(await conn.fetchval(TENANT_ROUTING_URL_EXISTS, routing_url))

    async def count(self, conn: Any) -> int:
        return int(await conn.fetchval(TENANT_COUNT))

    async def update_database_config(self, conn: Any, tenant: Tenant) -> Tenant:
        tenant.updated_at = datetime.now(timezone.utc)
        params = self._database_params(tenant)
        row = await conn.fetchrow(TENANT_UPDATE_DATABASE_CONFIG, tenant.id, *params, tenant.last_checked_at,
                                  tenant.last_error, tenant.updated_at)
        return self._map_row_to_tenant(row)

    async def list_active_ids(self, conn: Any) -> List[str]:
        rows = await conn.fetch(TENANT_LIST_ACTIVE_IDS)
        return [row["id"] for row in rows]

    async def count_by_database_status(self, conn: Any) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for row in await conn.fetch(TENANT_COUNT_BY_DATABASE_STATUS):
            status = DatabaseStatus.parse(row["database_status"]).value
            counts[status] = counts.get(status, 0) + int(row["count"])
        return counts

    async def deactivate(self, conn: Any, tenant_id: str) -> bool:
        result = await conn.execute(TENANT_DEACTIVATE, tenant_id, datetime.now(timezone.utc))
        return result.endswith(" 1")

    def _database_params(self, tenant: Tenant) -> list:
        """Topology, status, connection columns, can_edit and managed_by in column order."""
        target = tenant.connection or ConnectionTarget()
        return [
            tenant.database_topology.value,
            tenant.database_status.value,
            target.host,
            target.port if target.host else None,
            target.database,
            target.user,
            self.encryption.encrypt(target.password),
            self.encryption.encrypt(target.url),
            target.ssl,
            tenant.can_edit_database,
            tenant.managed_by.value if tenant.managed_by else None,
        ]

    def _map_row_to_tenant(self, row: Any) -> Tenant:
        connection = None
        url = self.encryption.decrypt(row["database_url_encrypted"])
        if url or row["database_host"]:
            connection = ConnectionTarget(
                url=url,
                host=row["database_host"],
                port=row["database_port"] or 5432,
                database=row["database_name"],
                user=row["database_user"],
                password=self.encryption.decrypt(row["database_password_encrypted"]),
                ssl=bool(row["database_ssl"]),
            )

        return Tenant(
            id=row["id"],
            name=row["name"],
            slug=row["slug"],
            routing_url=row["routing_url"],
            tenant_type=TenantType(row["tenant_type"]),
            contact_email=row["contact_email"],
            contact_phone=row["contact_phone"],
            database_topology=DatabaseTopology(row["database_topology"]),
            database_status=DatabaseStatus.parse(row["database_status"]),
            connection=connection,
            can_edit_database=row["can_edit_database"],
            managed_by=ManagedBy(row["managed_by"]) if row["managed_by"] else None,
            last_checked_at=row["last_checked_at"],
            last_error=row["last_error"],
            is_active=row["is_active"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
