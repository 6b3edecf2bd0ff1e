"""Feature flag catalog and per-tenant feature endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from ..entities.feature import FeatureFlag, TenantFeature
from ..entities.results import FeatureToggleResult
from ..models.requests import (
    BulkFeatureDefinitionsRequest,
    BulkTenantFeaturesRequest,
    FeatureDefinitionRequest,
    FeatureToggleRequest,
    TenantIdsRequest,
)
from ..models.responses import (
    BootstrapResponse,
    BulkToggleResponse,
    CreateFeatureResponse,
    FeatureFlagResponse,
    FeatureTablesResponse,
    FeatureToggleResponse,
    TenantFeatureResponse,
)
from ..services.feature_catalog_service import FeatureCatalogService
from ..services.tenant_feature_gate import FeatureToggle, TenantFeatureGate

logger = logging.getLogger(__name__)

feature_router = APIRouter(
    prefix="/features",
    tags=["Features"],
    responses={
        404: {"description": "Feature not found"},
        409: {"description": "Feature key already exists"},
    }
)

tenant_features_router = APIRouter(
    prefix="/tenants",
    tags=["Tenant Features"],
    responses={
        404: {"description": "Tenant or feature not found"},
        500: {"description": "Feature tables could not be created"},
        503: {"description": "Tenant database unreachable"},
    }
)


# Placeholders overridden by the application via app.dependency_overrides

def get_catalog_service() -> FeatureCatalogService:
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Feature catalog service not configured."
    )


def get_feature_gate() -> TenantFeatureGate:
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Tenant feature gate not configured."
    )


def _flag_response(flag: FeatureFlag) -> FeatureFlagResponse:
    return FeatureFlagResponse.model_validate(flag.to_dict())


def _tenant_feature_response(tenant_feature: TenantFeature) -> TenantFeatureResponse:
    return TenantFeatureResponse.model_validate(tenant_feature.to_dict())


def _bulk_response(feature_key: Optional[str], results: List[FeatureToggleResult]) -> BulkToggleResponse:
    succeeded = sum(1 for result in results if result.succeeded)
    return BulkToggleResponse(
        feature_key=feature_key,
        total=len(results),
        succeeded=succeeded,
        failed=len(results) - succeeded,
        results=[FeatureToggleResponse.model_validate(result.to_dict()) for result in results],
    )


# Catalog

@feature_router.get("", response_model=List[FeatureFlagResponse])
async def list_features(
    category: Optional[str] = Query(None, description="Only flags of this category"),
    service: FeatureCatalogService = Depends(get_catalog_service)
) -> List[FeatureFlagResponse]:
    return [_flag_response(flag) for flag in await service.list_features(category)]


@feature_router.post("", response_model=CreateFeatureResponse, status_code=status.HTTP_201_CREATED)
async def create_feature(
    request: FeatureDefinitionRequest,
    service: FeatureCatalogService = Depends(get_catalog_service)
) -> CreateFeatureResponse:
    """Create a flag. Global default-enabled flags are rolled out to all active tenants."""
    flag, rollout = await service.create_feature(request)
    return CreateFeatureResponse(
        feature=_flag_response(flag),
        rollout=[FeatureToggleResponse.model_validate(result.to_dict()) for result in rollout],
    )


@feature_router.post("/bulk", response_model=BootstrapResponse)
async def bootstrap_features(
    request: BulkFeatureDefinitionsRequest,
    service: FeatureCatalogService = Depends(get_catalog_service)
) -> BootstrapResponse:
    """Create missing flags; existing keys are skipped."""
    report = await service.bootstrap(request.features)
    return BootstrapResponse(created=report.created, skipped=report.skipped)


@feature_router.get("/{feature_key}", response_model=FeatureFlagResponse)
async def get_feature(
    feature_key: str = Path(..., description="Feature key"),
    service: FeatureCatalogService = Depends(get_catalog_service)
) -> FeatureFlagResponse:
    return _flag_response(await service.get_feature(feature_key))


@feature_router.post("/{feature_key}/enable-all", response_model=BulkToggleResponse)
async def enable_everywhere(
    feature_key: str = Path(..., description="Feature key"),
    service: FeatureCatalogService = Depends(get_catalog_service)
) -> BulkToggleResponse:
    return _bulk_response(feature_key, await service.enable_everywhere(feature_key))


@feature_router.post("/{feature_key}/disable-all", response_model=BulkToggleResponse)
async def disable_everywhere(
    feature_key: str = Path(..., description="Feature key"),
    service: FeatureCatalogService = Depends(get_catalog_service)
) -> BulkToggleResponse:
    return _bulk_response(feature_key, await service.disable_everywhere(feature_key))


@feature_router.post("/{feature_key}/enable-for-tenants", response_model=BulkToggleResponse)
async def enable_for_tenants(
    request: TenantIdsRequest,
    feature_key: str = Path(..., description="Feature key"),
    gate: TenantFeatureGate = Depends(get_feature_gate)
) -> BulkToggleResponse:
    return _bulk_response(feature_key, await gate.enable_for_tenants(feature_key, request.tenant_ids))


@feature_router.post("/{feature_key}/disable-for-tenants", response_model=BulkToggleResponse)
async def disable_for_tenants(
    request: TenantIdsRequest,
    feature_key: str = Path(..., description="Feature key"),
    gate: TenantFeatureGate = Depends(get_feature_gate)
) -> BulkToggleResponse:
    return _bulk_response(feature_key, await gate.disable_for_tenants(feature_key, request.tenant_ids))


# Per-tenant

@tenant_features_router.get("/{tenant_id}/features", response_model=List[TenantFeatureResponse])
async def list_tenant_features(
    tenant_id: str = Path(..., description="Tenant ID"),
    gate: TenantFeatureGate = Depends(get_feature_gate)
) -> List[TenantFeatureResponse]:
    return [_tenant_feature_response(tf) for tf in await gate.list_tenant_features(tenant_id)]


@tenant_features_router.put("/{tenant_id}/features", response_model=BulkToggleResponse)
async def set_tenant_features(
    request: BulkTenantFeaturesRequest,
    tenant_id: str = Path(..., description="Tenant ID"),
    gate: TenantFeatureGate = Depends(get_feature_gate)
) -> BulkToggleResponse:
    """Apply several toggles; each outcome is reported separately."""
    toggles = [FeatureToggle(item.feature_key, item.enabled, item.settings) for item in request.features]
    return _bulk_response(None, await gate.set_features(tenant_id, toggles))


@tenant_features_router.put("/{tenant_id}/features/{feature_key}", response_model=FeatureToggleResponse)
async def set_tenant_feature(
    request: FeatureToggleRequest,
    tenant_id: str = Path(..., description="Tenant ID"),
    feature_key: str = Path(..., description="Feature key"),
    gate: TenantFeatureGate = Depends(get_feature_gate)
) -> FeatureToggleResponse:
    """Enable or disable a feature. Enabling creates missing feature tables first."""
    result = await gate.set_feature(tenant_id, feature_key, request.enabled, request.settings)
    return FeatureToggleResponse.model_validate(result.to_dict())


@tenant_features_router.post("/{tenant_id}/features/{feature_key}/tables", response_model=FeatureTablesResponse)
async def ensure_feature_tables(
    tenant_id: str = Path(..., description="Tenant ID"),
    feature_key: str = Path(..., description="Feature key"),
    gate: TenantFeatureGate = Depends(get_feature_gate)
) -> FeatureTablesResponse:
    """Create the feature's tables in the tenant database if absent."""
    result = await gate.ensure_feature_tables(tenant_id, feature_key)
    return FeatureTablesResponse.model_validate(result.to_dict())
