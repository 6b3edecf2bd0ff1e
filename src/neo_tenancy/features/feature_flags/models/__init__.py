"""Feature flag API models."""

from .requests import (
    FeatureDefinitionRequest,
    BulkFeatureDefinitionsRequest,
    FeatureToggleRequest,
    TenantFeatureToggle,
    BulkTenantFeaturesRequest,
    TenantIdsRequest,
)
from .responses import (
    FeatureFlagResponse,
    TenantFeatureResponse,
    FeatureTablesResponse,
    FeatureToggleResponse,
    BulkToggleResponse,
    CreateFeatureResponse,
    BootstrapResponse,
)

__all__ = [
    "FeatureDefinitionRequest",
    "BulkFeatureDefinitionsRequest",
    "FeatureToggleRequest",
    "TenantFeatureToggle",
    "BulkTenantFeaturesRequest",
    "TenantIdsRequest",
    "FeatureFlagResponse",
    "TenantFeatureResponse",
    "FeatureTablesResponse",
    "FeatureToggleResponse",
    "BulkToggleResponse",
    "CreateFeatureResponse",
    "BootstrapResponse",
]
