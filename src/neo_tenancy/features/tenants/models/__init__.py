"""Tenant API models."""

from .requests import (
    ConnectionTargetRequest,
    AdminUserRequest,
    ProvisionTenantRequest,
    DatabaseConfigPatch,
    DatabaseConfigUpdateRequest,
)
from .responses import (
    DatabaseConfigResponse,
    TenantResponse,
    AdminUserResponse,
    LicenseSummaryResponse,
    FeatureProvisioningResponse,
    ProvisionTenantResponse,
    ProbeResponse,
    DatabaseStatusSummaryResponse,
)

__all__ = [
    "ConnectionTargetRequest",
    "AdminUserRequest",
    "ProvisionTenantRequest",
    "DatabaseConfigPatch",
    "DatabaseConfigUpdateRequest",
    "DatabaseConfigResponse",
    "TenantResponse",
    "AdminUserResponse",
    "LicenseSummaryResponse",
    "FeatureProvisioningResponse",
    "ProvisionTenantResponse",
    "ProbeResponse",
    "DatabaseStatusSummaryResponse",
]
