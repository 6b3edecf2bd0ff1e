"""Create a gated feature's tables in a tenant's target database.

The table set moves from absent to present exactly once. Creation runs
in one target transaction holding ``pg_advisory_xact_lock`` keyed by
the feature key, re-checks existence under the lock and executes only
guarded DDL, so racing callers observe ``already_existed`` instead of a
duplicate-object error.
"""

import asyncio
import hashlib
import logging
from typing import Any, Optional, Set

import asyncpg

from ....config.settings import TenancySettings, get_settings
from ....core.exceptions import SchemaError
from ...database.entities.database_protocols import TargetConnector
from ...database.utils.connection_factory import ConnectionFactory
from ...database.utils.error_handling import redact_secrets
from ...database.utils.queries import ADVISORY_XACT_LOCK, TABLES_EXISTING
from ...tenants.entities.tenant import Tenant
from .connection_target_resolver import ConnectionTargetResolver
from ..entities.results import FeatureTablesResult
from ..entities.table_sets import FeatureTableRegistry, FeatureTableSet, default_registry

logger = logging.getLogger(__name__)


def advisory_lock_key(feature_key: str) -> int:
    """Stable signed 64-bit key for a feature.

    Advisory locks are scoped to one database, so tenants sharing a
    database serialize on the same key.
    """
    digest = hashlib.blake2b(feature_key.encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, byteorder="big", signed=True)


class FeatureTableManager:
    """Ensures feature table sets exist in tenant target databases."""

    def __init__(
        self,
        registry: Optional[FeatureTableRegistry] = None,
        target_resolver: Optional[ConnectionTargetResolver] = None,
        connector: Optional[TargetConnector] = None,
        settings: Optional[TenancySettings] = None,
    ):
        self._settings = settings or get_settings()
        self._registry = registry or default_registry()
        self._target_resolver = target_resolver or ConnectionTargetResolver(self._settings)
        self._connector = connector or ConnectionFactory()

    @property
    def registry(self) -> FeatureTableRegistry:
        return self._registry

    def requires_tables(self, feature_key: str) -> bool:
        return self._registry.requires_tables(feature_key)

    async def feature_tables_exist(self, tenant: Tenant, feature_key: str) -> bool:
        """True when every table of the feature exists; True for features without tables.

        Raises:
            ConnectionError: target database unreachable or not configured
        """
        table_set = self._registry.get(feature_key)
        if table_set is None:
            return True

        conn = await self._connect(tenant)
        try:
            return not self._missing(table_set, await self._existing_tables(conn, table_set, feature_key))
        finally:
            await conn.close()

    async def ensure_feature_tables(self, tenant: Tenant, feature_key: str) -> FeatureTablesResult:
        """Create the feature's tables for a tenant if absent.

        Raises:
            ConnectionError: target database unreachable or not configured
            SchemaError: DDL failed; the target transaction was rolled back
        """
        table_set = self._registry.get(feature_key)
        if table_set is None:
            return FeatureTablesResult.not_required(feature_key)

        already = FeatureTablesResult(
            feature_key=feature_key,
            required=True,
            already_existed=True,
            tables=table_set.table_names,
        )

        conn = await self._connect(tenant)
        try:
            existing = await self._existing_tables(conn, table_set, feature_key)
            if not self._missing(table_set, existing):
                logger.debug(f"Tables for {feature_key} already exist for tenant {tenant.slug}")
                return already

            async with conn.transaction():
                await conn.execute(ADVISORY_XACT_LOCK, advisory_lock_key(feature_key))

                # Another caller may have finished while we waited for the lock
                existing = await self._existing_tables(conn, table_set, feature_key)
                missing = self._missing(table_set, existing)
                if not missing:
                    logger.info(f"Tables for {feature_key} were created concurrently for tenant {tenant.slug}")
                    return already

                await self._create_tables(conn, table_set, missing)
        finally:
            await conn.close()

        logger.info(f"Created {len(missing)} table(s) for {feature_key} for tenant {tenant.slug}: {missing}")
        return FeatureTablesResult(
            feature_key=feature_key,
            required=True,
            created=True,
            tables=table_set.table_names,
        )

    async def _connect(self, tenant: Tenant) -> Any:
        target = self._target_resolver.resolve(tenant)
        return await self._connector.create_connection(target, timeout=self._settings.probe_connect_timeout)

    async def _existing_tables(self, conn: Any, table_set: FeatureTableSet, feature_key: str) -> Set[str]:
        try:
            rows = await conn.fetch(TABLES_EXISTING, list(table_set.table_names))
        except asyncpg.PostgresError as e:
            raise SchemaError(feature_key, redact_secrets(str(e))) from e
        return {row["table_name"] for row in rows}

    @staticmethod
    def _missing(table_set: FeatureTableSet, existing: Set[str]) -> list:
        return [name for name in table_set.table_names if name not in existing]

    async def _create_tables(self, conn: Any, table_set: FeatureTableSet, missing: list) -> None:
        for table in table_set.tables:
            if table.name not in missing:
                continue
            for statement in table.statements:
                try:
                    await conn.execute(statement, timeout=self._settings.ddl_timeout)
                except asyncio.TimeoutError as e:
                    raise SchemaError(
                        table_set.feature_key,
                        f"DDL timed out after {self._settings.ddl_timeout:g}s",
                        table=table.name,
                    ) from e
                except asyncpg.PostgresError as e:
                    logger.error(f"DDL for {table_set.feature_key}.{table.name} failed: {e}")
                    raise SchemaError(table_set.feature_key, redact_secrets(str(e)), table=table.name) from e
