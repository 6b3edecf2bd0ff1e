"""Platform feature catalog: definitions and platform-wide rollout."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from ....core.exceptions import FeatureKeyConflictError, FeatureNotFoundError
from ....utils.uuid import generate_uuid_v7
from ...database.entities.database_protocols import ControlPlaneStore
from ...tenants.entities.protocols import TenantRepository
from ..entities.feature import FeatureFlag
from ..entities.protocols import FeatureRepository
from ..entities.results import FeatureToggleResult
from ..models.requests import FeatureDefinitionRequest
from .tenant_feature_gate import TenantFeatureGate

logger = logging.getLogger(__name__)


@dataclass
class BootstrapReport:
    created: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)


class FeatureCatalogService:
    """Manages feature flag definitions and rolls them out to tenants."""

    def __init__(
        self,
        store: ControlPlaneStore,
        feature_repository: FeatureRepository,
        tenant_repository: TenantRepository,
        feature_gate: TenantFeatureGate,
    ):
        self._store = store
        self._features = feature_repository
        self._tenants = tenant_repository
        self._gate = feature_gate

    async def bootstrap(self, definitions: Sequence[FeatureDefinitionRequest]) -> BootstrapReport:
        """Create flags whose keys do not exist yet; existing keys are skipped."""
        report = BootstrapReport()
        for definition in definitions:
            async with self._store.connection() as conn:
                existing = await self._features.find_by_key(conn, definition.feature_key)
            if existing is not None:
                report.skipped.append(definition.feature_key)
                continue
            try:
                await self._insert(definition)
            except FeatureKeyConflictError:
                # Lost a race with a concurrent bootstrap
                report.skipped.append(definition.feature_key)
                continue
            report.created.append(definition.feature_key)

        logger.info(f"Feature bootstrap: created {len(report.created)}, skipped {len(report.skipped)}")
        return report

    async def create_feature(
        self,
        definition: FeatureDefinitionRequest,
    ) -> Tuple[FeatureFlag, List[FeatureToggleResult]]:
        """Create a flag; global default-enabled flags are rolled out to all active tenants.

        Raises:
            FeatureKeyConflictError: the key already exists
        """
        flag = await self._insert(definition)
        rollout: List[FeatureToggleResult] = []
        if flag.is_global and flag.default_enabled:
            rollout = await self._gate.enable_for_tenants(flag.feature_key, await self._active_tenant_ids())
        return flag, rollout

    async def list_features(self, category: Optional[str] = None) -> List[FeatureFlag]:
        async with self._store.connection() as conn:
            return await self._features.list_flags(conn, category)

    async def get_feature(self, feature_key: str) -> FeatureFlag:
        async with self._store.connection() as conn:
            flag = await self._features.find_by_key(conn, feature_key)
        if flag is None:
            raise FeatureNotFoundError(feature_key)
        return flag

    async def enable_everywhere(self, feature_key: str) -> List[FeatureToggleResult]:
        await self._set_default(feature_key, True)
        return await self._gate.enable_for_tenants(feature_key, await self._active_tenant_ids())

    async def disable_everywhere(self, feature_key: str) -> List[FeatureToggleResult]:
        await self._set_default(feature_key, False)
        return await self._gate.disable_for_tenants(feature_key, await self._active_tenant_ids())

    async def _insert(self, definition: FeatureDefinitionRequest) -> FeatureFlag:
        flag = FeatureFlag(
            id=generate_uuid_v7(),
            feature_key=definition.feature_key,
            name=definition.name,
            description=definition.description,
            category=definition.category,
            is_global=definition.is_global,
            default_enabled=definition.default_enabled,
        )

        async def write(conn):
            return await self._features.insert_flag(conn, flag)

        return await self._store.run_in_transaction(write)

    async def _set_default(self, feature_key: str, enabled: bool) -> FeatureFlag:
        async def write(conn):
            return await self._features.set_default_enabled(conn, feature_key, enabled)

        flag = await self._store.run_in_transaction(write)
        if flag is None:
            raise FeatureNotFoundError(feature_key)
        return flag

    async def _active_tenant_ids(self) -> List[str]:
        async with self._store.connection() as conn:
            return await self._tenants.list_active_ids(conn)
