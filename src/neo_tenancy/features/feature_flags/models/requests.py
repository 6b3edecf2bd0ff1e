"""Request models for feature flag endpoints."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..entities.feature import FEATURE_KEY_PATTERN


class FeatureDefinitionRequest(BaseModel):
    """Definition of a platform feature flag."""

    feature_key: str = Field(..., min_length=2, max_length=100, description="Immutable feature key")
    name: str = Field(..., min_length=2, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    category: str = Field("general", max_length=50)
    is_global: bool = Field(False, description="Applies to every tenant")
    default_enabled: bool = Field(False, description="Enabled for tenants by default")

    @field_validator("feature_key")
    @classmethod
    def validate_feature_key(cls, v: str) -> str:
        if not FEATURE_KEY_PATTERN.match(v):
            raise ValueError("Feature key can only contain lowercase letters, numbers, and underscores")
        return v

    model_config = {
        "json_schema_extra": {
            "example": {
                "feature_key": "fund_management",
                "name": "Fund Management",
                "description": "Donations, expenses and fund accounts",
                "category": "finance",
                "is_global": False,
                "default_enabled": False,
            }
        }
    }


class BulkFeatureDefinitionsRequest(BaseModel):
    features: List[FeatureDefinitionRequest] = Field(..., min_length=1)


class FeatureToggleRequest(BaseModel):
    """Enable or disable one feature for a tenant."""

    enabled: bool
    settings: Optional[Dict[str, Any]] = None


class TenantFeatureToggle(FeatureToggleRequest):
    feature_key: str


class BulkTenantFeaturesRequest(BaseModel):
    features: List[TenantFeatureToggle] = Field(..., min_length=1)


class TenantIdsRequest(BaseModel):
    tenant_ids: List[str] = Field(..., min_length=1)

    @field_validator("tenant_ids")
    @classmethod
    def dedupe(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(v))
