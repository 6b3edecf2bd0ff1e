"""Tenant provisioning and database configuration endpoints.

Service dependencies are placeholders; the application supplies the real
service through ``app.dependency_overrides``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Path, status

from ..models.requests import ConnectionTargetRequest, DatabaseConfigUpdateRequest, ProvisionTenantRequest
from ..models.responses import (
    DatabaseConfigResponse,
    DatabaseStatusSummaryResponse,
    ProbeResponse,
    ProvisionTenantResponse,
    TenantResponse,
)
from ..services.tenant_provisioning_service import TenantProvisioningService

logger = logging.getLogger(__name__)

tenant_router = APIRouter(
    prefix="/tenants",
    tags=["Tenants"],
    responses={
        400: {"description": "Invalid request"},
        404: {"description": "Tenant not found"},
        409: {"description": "Slug or routing URL already taken"},
        500: {"description": "Internal server error"}
    }
)


def get_provisioning_service() -> TenantProvisioningService:
    """Placeholder for the provisioning service dependency.

    Applications must override this via:
    app.dependency_overrides[get_provisioning_service] = lambda: service
    """
    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Tenant provisioning service not configured."
    )


@tenant_router.post("", response_model=ProvisionTenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    request: ProvisionTenantRequest,
    service: TenantProvisioningService = Depends(get_provisioning_service)
) -> ProvisionTenantResponse:
    """Create a tenant with its license and initial features.

    An unreachable database only sets the status to CONNECTION_FAILED.
    """
    provisioned = await service.create_tenant(request)
    return ProvisionTenantResponse.model_validate(provisioned.to_dict())


@tenant_router.get("/database/status", response_model=DatabaseStatusSummaryResponse)
async def get_database_status_summary(
    service: TenantProvisioningService = Depends(get_provisioning_service)
) -> DatabaseStatusSummaryResponse:
    """Tenant counts per database status."""
    return DatabaseStatusSummaryResponse(**await service.get_database_status_summary())


@tenant_router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: str = Path(..., description="Tenant ID"),
    service: TenantProvisioningService = Depends(get_provisioning_service)
) -> TenantResponse:
    tenant = await service.get_tenant(tenant_id)
    return TenantResponse.model_validate(tenant.to_dict())


@tenant_router.delete("/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def deactivate_tenant(
    tenant_id: str = Path(..., description="Tenant ID"),
    service: TenantProvisioningService = Depends(get_provisioning_service)
) -> None:
    """Soft delete a tenant."""
    await service.deactivate_tenant(tenant_id)


@tenant_router.get("/{tenant_id}/database", response_model=DatabaseConfigResponse)
async def get_database_config(
    tenant_id: str = Path(..., description="Tenant ID"),
    service: TenantProvisioningService = Depends(get_provisioning_service)
) -> DatabaseConfigResponse:
    """Database configuration without password or connection URL."""
    return DatabaseConfigResponse.model_validate(await service.get_database_config(tenant_id))


@tenant_router.put("/{tenant_id}/database", response_model=DatabaseConfigResponse)
async def update_database_config(
    request: DatabaseConfigUpdateRequest,
    tenant_id: str = Path(..., description="Tenant ID"),
    service: TenantProvisioningService = Depends(get_provisioning_service)
) -> DatabaseConfigResponse:
    tenant = await service.update_database_config(tenant_id, request, requested_by=request.requested_by)
    return DatabaseConfigResponse.model_validate(tenant.database_config_dict())


@tenant_router.post("/{tenant_id}/database/test", response_model=ProbeResponse)
async def test_database_connection(
    tenant_id: str = Path(..., description="Tenant ID"),
    override: Optional[ConnectionTargetRequest] = Body(None, description="Details to test instead of the stored ones"),
    service: TenantProvisioningService = Depends(get_provisioning_service)
) -> ProbeResponse:
    """Probe the tenant database and record the outcome."""
    tenant, probe = await service.check_database_connection(tenant_id, override)
    return ProbeResponse(**probe.to_dict(), database_status=tenant.database_status.value)
