"""Tenant response models.

None of these models has a field for the database password or the
connection URL.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class DatabaseConfigResponse(BaseModel):
    """Redacted database configuration of a tenant."""

    database_topology: str = Field(..., description="Database topology")
    database_status: str = Field(..., description="Database status")
    can_edit_database: bool = Field(..., description="Whether the tenant may edit its database config")
    managed_by: Optional[str] = Field(None, description="platform, tenant or null")
    database_host: Optional[str] = None
    database_port: Optional[int] = None
    database_name: Optional[str] = None
    database_user: Optional[str] = None
    database_ssl: bool = False
    has_password: bool = False
    has_connection_url: bool = False
    safe_dsn: Optional[str] = Field(None, description="Connection string without secrets")
    last_checked_at: Optional[datetime] = None
    last_error: Optional[str] = None


class TenantResponse(DatabaseConfigResponse):
    """Response model for tenant information."""

    id: str = Field(..., description="Tenant ID")
    name: str = Field(..., description="Tenant display name")
    slug: str = Field(..., description="Tenant slug")
    tenant_type: str = Field(..., description="Kind of organization")
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    routing_url: str = Field(..., description="Routing URL <prefix>.<base-domain>")
    is_active: bool = Field(..., description="Is tenant active")
    created_at: datetime = Field(..., description="Creation time")
    updated_at: datetime = Field(..., description="Last update time")


class AdminUserResponse(BaseModel):
    first_name: str
    last_name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    role: str


class LicenseSummaryResponse(BaseModel):
    id: str
    plan_id: str
    plan_name: Optional[str] = None
    status: str
    trial_ends_at: Optional[datetime] = None


class FeatureProvisioningResponse(BaseModel):
    """Outcome of enabling one initial feature after the tenant was committed."""

    feature_key: str
    enabled: bool
    required: bool = False
    created: bool = False
    already_existed: bool = False
    error: Optional[Dict[str, Any]] = None


class ProvisionTenantResponse(BaseModel):
    """Response model for tenant creation."""

    tenant: TenantResponse
    status: str = Field(..., description="Resulting database status")
    admin_user: Optional[AdminUserResponse] = None
    license: LicenseSummaryResponse
    probe: Optional[Dict[str, Any]] = Field(None, description="Probe result when a connection was supplied")
    feature_provisioning: List[FeatureProvisioningResponse] = Field(default_factory=list)


class ProbeResponse(BaseModel):
    """Result of a connection test."""

    reachable: bool
    latency_ms: float
    checked_at: datetime
    error_detail: Optional[str] = None
    database_status: str


class DatabaseStatusSummaryResponse(BaseModel):
    """Tenant counts per database status."""

    total: int
    by_status: Dict[str, int]
