"""Feature flag routers."""

from .feature_router import feature_router, tenant_features_router, get_catalog_service, get_feature_gate

__all__ = ["feature_router", "tenant_features_router", "get_catalog_service", "get_feature_gate"]
