"""Feature flag services."""

from .connection_target_resolver import ConnectionTargetResolver
from .feature_table_manager import FeatureTableManager, advisory_lock_key
from .tenant_feature_gate import TenantFeatureGate, FeatureToggle
from .feature_catalog_service import FeatureCatalogService, BootstrapReport

__all__ = [
    "ConnectionTargetResolver",
    "FeatureTableManager",
    "advisory_lock_key",
    "TenantFeatureGate",
    "FeatureToggle",
    "FeatureCatalogService",
    "BootstrapReport",
]
