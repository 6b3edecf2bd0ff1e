"""Feature flag repository implementation using asyncpg."""

import logging
from typing import Any, Dict, List, Optional, Sequence

import asyncpg

from ....core.exceptions import FeatureKeyConflictError
from ....utils.uuid import generate_uuid_v7
from ..entities.feature import FeatureFlag, TenantFeature
from ..entities.protocols import FeatureRepository
from ..utils.queries import (
    FEATURE_FLAG_GET_BY_KEY,
    FEATURE_FLAG_GET_BY_KEYS,
    FEATURE_FLAG_INSERT,
    FEATURE_FLAG_LIST,
    FEATURE_FLAG_SET_DEFAULT_ENABLED,
    TENANT_FEATURE_LIST,
    TENANT_FEATURE_UPSERT,
)

logger = logging.getLogger(__name__)


class AsyncpgFeatureRepository(FeatureRepository):
    """Feature flag persistence over an asyncpg connection."""

    async def find_by_key(self, conn: Any, feature_key: str) -> Optional[FeatureFlag]:
        row = await conn.fetchrow(FEATURE_FLAG_GET_BY_KEY, feature_key)
        return self._map_row_to_flag(row) if row else None

    async def find_by_keys(self, conn: Any, feature_keys: Sequence[str]) -> List[FeatureFlag]:
        rows = await conn.fetch(FEATURE_FLAG_GET_BY_KEYS, list(feature_keys))
        return [self._map_row_to_flag(row) for row in rows]

    async def list_flags(self, conn: Any, category: Optional[str] = None) -> List[FeatureFlag]:
        rows = await conn.fetch(FEATURE_FLAG_LIST, category)
        return [self._map_row_to_flag(row) for row in rows]

    async def insert_flag(self, conn: Any, flag: FeatureFlag) -> FeatureFlag:
        try:
            row = await conn.fetchrow(
                FEATURE_FLAG_INSERT,
                flag.id, flag.feature_key, flag.name, flag.description, flag.category,
                flag.is_global, flag.default_enabled, flag.created_at, flag.updated_at,
            )
        except asyncpg.UniqueViolationError as e:
            raise FeatureKeyConflictError(flag.feature_key) from e

        logger.info(f"Created feature flag {flag.feature_key}")
        return self._map_row_to_flag(row)

    async def set_default_enabled(self, conn: Any, feature_key: str, enabled: bool) -> Optional[FeatureFlag]:
        row = await conn.fetchrow(FEATURE_FLAG_SET_DEFAULT_ENABLED, feature_key, enabled)
        return self._map_row_to_flag(row) if row else None

    async def upsert_tenant_feature(
        self,
        conn: Any,
        tenant_id: str,
        feature_id: str,
        is_enabled: bool,
        settings: Optional[Dict[str, Any]] = None,
    ) -> TenantFeature:
        row = await conn.fetchrow(
            TENANT_FEATURE_UPSERT, generate_uuid_v7(), tenant_id, feature_id, is_enabled, settings
        )
        return self._map_row_to_tenant_feature(row)

    async def list_tenant_features(self, conn: Any, tenant_id: str) -> List[TenantFeature]:
        rows = await conn.fetch(TENANT_FEATURE_LIST, tenant_id)
        return [self._map_row_to_tenant_feature(row) for row in rows]

    @staticmethod
    def _map_row_to_flag(row: Any) -> FeatureFlag:
        return FeatureFlag(
            id=row["id"],
            feature_key=row["feature_key"],
            name=row["name"],
            description=row["description"],
            category=row["category"],
            is_global=row["is_global"],
            default_enabled=row["default_enabled"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _map_row_to_tenant_feature(row: Any) -> TenantFeature:
        return TenantFeature(
            id=row["id"],
            tenant_id=row["tenant_id"],
            feature_id=row["feature_id"],
            is_enabled=row["is_enabled"],
            settings=row["settings"] or {},
            feature_key=row["feature_key"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
