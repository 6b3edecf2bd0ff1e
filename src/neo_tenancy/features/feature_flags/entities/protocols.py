"""Protocol interfaces for feature flag persistence."""

from abc import abstractmethod
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from .feature import FeatureFlag, TenantFeature


@runtime_checkable
class FeatureRepository(Protocol):
    """Feature flags and per-tenant grants. Connection first, as for tenants."""

    @abstractmethod
    async def find_by_key(self, conn: Any, feature_key: str) -> Optional[FeatureFlag]:
        ...

    @abstractmethod
    async def find_by_keys(self, conn: Any, feature_keys: Sequence[str]) -> List[FeatureFlag]:
        ...

    @abstractmethod
    async def list_flags(self, conn: Any, category: Optional[str] = None) -> List[FeatureFlag]:
        ...

    @abstractmethod
    async def insert_flag(self, conn: Any, flag: FeatureFlag) -> FeatureFlag:
        """Insert a flag; an existing key raises FeatureKeyConflictError."""
        ...

    @abstractmethod
    async def set_default_enabled(self, conn: Any, feature_key: str, enabled: bool) -> Optional[FeatureFlag]:
        ...

    @abstractmethod
    async def upsert_tenant_feature(
        self,
        conn: Any,
        tenant_id: str,
        feature_id: str,
        is_enabled: bool,
        settings: Optional[Dict[str, Any]] = None,
    ) -> TenantFeature:
        """Create or update the single grant for (tenant, feature).

        ``settings=None`` keeps stored settings.
        """
        ...

    @abstractmethod
    async def list_tenant_features(self, conn: Any, tenant_id: str) -> List[TenantFeature]:
        ...
