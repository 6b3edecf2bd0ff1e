"""Feature flag entities."""

from .feature import FeatureFlag, TenantFeature, FEATURE_KEY_PATTERN
from .results import FeatureTablesResult, FeatureToggleResult
from .table_sets import (
    FeatureTable,
    FeatureTableSet,
    FeatureTableRegistry,
    FUND_MANAGEMENT,
    INVENTORY_MANAGEMENT,
    default_registry,
)
from .protocols import FeatureRepository

__all__ = [
    "FeatureFlag",
    "TenantFeature",
    "FEATURE_KEY_PATTERN",
    "FeatureTablesResult",
    "FeatureToggleResult",
    "FeatureTable",
    "FeatureTableSet",
    "FeatureTableRegistry",
    "FUND_MANAGEMENT",
    "INVENTORY_MANAGEMENT",
    "default_registry",
    "FeatureRepository",
]
