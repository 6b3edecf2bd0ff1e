"""Response models for feature flag endpoints."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class FeatureFlagResponse(BaseModel):
    id: str
    feature_key: str
    name: str
    description: Optional[str] = None
    category: str
    is_global: bool
    default_enabled: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TenantFeatureResponse(BaseModel):
    id: str
    tenant_id: str
    feature_id: str
    feature_key: Optional[str] = None
    is_enabled: bool
    settings: Dict[str, Any] = Field(default_factory=dict)
    updated_at: Optional[datetime] = None


class FeatureTablesResponse(BaseModel):
    """Outcome of ensuring a feature's tables."""

    feature_key: str
    required: bool
    created: bool
    already_existed: bool
    tables: List[str] = Field(default_factory=list)


class FeatureToggleResponse(BaseModel):
    """Per-tenant outcome of a toggle."""

    tenant_id: str
    feature_key: str
    enabled: bool
    succeeded: bool
    required: bool = False
    created: bool = False
    already_existed: bool = False
    tables: List[str] = Field(default_factory=list)
    settings: Optional[Dict[str, Any]] = None
    error: Optional[Dict[str, Any]] = None


class BulkToggleResponse(BaseModel):
    feature_key: Optional[str] = None
    total: int
    succeeded: int
    failed: int
    results: List[FeatureToggleResponse]


class CreateFeatureResponse(BaseModel):
    feature: FeatureFlagResponse
    rollout: List[FeatureToggleResponse] = Field(default_factory=list)


class BootstrapResponse(BaseModel):
    created: List[str]
    skipped: List[str]
