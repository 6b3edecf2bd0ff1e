"""Enable and disable features for tenants.

Enabling a gated feature provisions its tables first; the grant is only
flipped to enabled after that succeeds. Disabling never drops tables.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ....config.settings import TenancySettings, get_settings
from ....core.exceptions import FeatureNotFoundError, NeoTenancyError, TenantNotFoundError
from ...database.entities.database_protocols import ControlPlaneStore
from ...tenants.entities.protocols import TenantRepository
from ...tenants.entities.tenant import Tenant
from ..entities.feature import FeatureFlag, TenantFeature
from ..entities.protocols import FeatureRepository
from ..entities.results import FeatureTablesResult, FeatureToggleResult
from .feature_table_manager import FeatureTableManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureToggle:
    """One entry of a bulk per-tenant update."""

    feature_key: str
    enabled: bool
    settings: Optional[Dict[str, Any]] = None


class TenantFeatureGate:
    """Consumer-facing feature toggling for tenants."""

    def __init__(
        self,
        store: ControlPlaneStore,
        tenant_repository: TenantRepository,
        feature_repository: FeatureRepository,
        table_manager: FeatureTableManager,
        settings: Optional[TenancySettings] = None,
    ):
        self._store = store
        self._tenants = tenant_repository
        self._features = feature_repository
        self._tables = table_manager
        self._rollout_concurrency = (settings or get_settings()).feature_rollout_concurrency

    def requires_tables(self, feature_key: str) -> bool:
        return self._tables.requires_tables(feature_key)

    async def set_feature(
        self,
        tenant_id: str,
        feature_key: str,
        enabled: bool,
        settings: Optional[Dict[str, Any]] = None,
    ) -> FeatureToggleResult:
        """Enable or disable one feature for one tenant.

        Raises:
            TenantNotFoundError, FeatureNotFoundError
            ConnectionError, SchemaError: enabling a gated feature failed;
                the grant is left untouched
        """
        tenant, flag = await self._load(tenant_id, feature_key)
        return await self._apply(tenant, flag, enabled, settings)

    async def ensure_feature_tables(self, tenant_id: str, feature_key: str) -> FeatureTablesResult:
        """Provision a feature's tables for a tenant without touching its grant."""
        tenant, _ = await self._load(tenant_id, feature_key)
        return await self._tables.ensure_feature_tables(tenant, feature_key)

    async def set_features(self, tenant_id: str, toggles: Sequence[FeatureToggle]) -> List[FeatureToggleResult]:
        """Apply several toggles to one tenant in order.

        A failing toggle is reported in its result and does not stop the
        remaining ones.
        """
        tenant = await self._load_tenant(tenant_id)
        results = []
        for toggle in toggles:
            try:
                flag = await self._load_flag(toggle.feature_key)
                results.append(await self._apply(tenant, flag, toggle.enabled, toggle.settings))
            except NeoTenancyError as e:
                logger.warning(f"Toggle {toggle.feature_key}={toggle.enabled} failed for tenant {tenant_id}: {e.message}")
                results.append(FeatureToggleResult(
                    tenant_id=tenant_id,
                    feature_key=toggle.feature_key,
                    enabled=False,
                    error=e.to_dict(),
                ))
        return results

    async def enable_for_tenants(self, feature_key: str, tenant_ids: Sequence[str]) -> List[FeatureToggleResult]:
        return await self._set_for_tenants(feature_key, tenant_ids, True)

    async def disable_for_tenants(self, feature_key: str, tenant_ids: Sequence[str]) -> List[FeatureToggleResult]:
        return await self._set_for_tenants(feature_key, tenant_ids, False)

    async def list_tenant_features(self, tenant_id: str) -> List[TenantFeature]:
        await self._load_tenant(tenant_id)
        async with self._store.connection() as conn:
            return await self._features.list_tenant_features(conn, tenant_id)

    async def _set_for_tenants(self, feature_key: str, tenant_ids: Sequence[str], enabled: bool) -> List[FeatureToggleResult]:
        """Toggle a feature across tenants concurrently, one outcome per tenant.

        At most ``feature_rollout_concurrency`` toggles run at once.
        """
        flag = await self._load_flag(feature_key)
        semaphore = asyncio.Semaphore(self._rollout_concurrency)

        async def toggle(tenant_id: str) -> FeatureToggleResult:
            async with semaphore:
                try:
                    tenant = await self._load_tenant(tenant_id)
                    return await self._apply(tenant, flag, enabled, None)
                except NeoTenancyError as e:
                    logger.warning(f"Setting {feature_key}={enabled} failed for tenant {tenant_id}: {e.message}")
                    return FeatureToggleResult(
                        tenant_id=tenant_id,
                        feature_key=feature_key,
                        enabled=False,
                        error=e.to_dict(),
                    )

        results = await asyncio.gather(*(toggle(tenant_id) for tenant_id in dict.fromkeys(tenant_ids)))
        succeeded = sum(1 for result in results if result.succeeded)
        logger.info(f"Set {feature_key}={enabled} for {succeeded}/{len(results)} tenant(s)")
        return list(results)

    async def _apply(
        self,
        tenant: Tenant,
        flag: FeatureFlag,
        enabled: bool,
        settings: Optional[Dict[str, Any]],
    ) -> FeatureToggleResult:
        tables = None
        if enabled:
            # Raises before the grant is written
            tables = await self._tables.ensure_feature_tables(tenant, flag.feature_key)

        async def write(conn: Any) -> TenantFeature:
            return await self._features.upsert_tenant_feature(conn, tenant.id, flag.id, enabled, settings)

        tenant_feature = await self._store.run_in_transaction(write)
        logger.info(f"Feature {flag.feature_key} {'enabled' if enabled else 'disabled'} for tenant {tenant.slug}")
        return FeatureToggleResult(
            tenant_id=tenant.id,
            feature_key=flag.feature_key,
            enabled=enabled,
            tenant_feature=tenant_feature,
            tables=tables,
        )

    async def _load(self, tenant_id: str, feature_key: str) -> Tuple[Tenant, FeatureFlag]:
        return await self._load_tenant(tenant_id), await self._load_flag(feature_key)

    async def _load_tenant(self, tenant_id: str) -> Tenant:
        async with self._store.connection() as conn:
            tenant = await self._tenants.find_by_id(conn, tenant_id)
        if tenant is None:
            raise TenantNotFoundError(tenant_id)
        return tenant

    async def _load_flag(self, feature_key: str) -> FeatureFlag:
        async with self._store.connection() as conn:
            flag = await self._features.find_by_key(conn, feature_key)
        if flag is None:
            raise FeatureNotFoundError(feature_key)
        return flag
