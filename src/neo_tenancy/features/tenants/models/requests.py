"""Tenant request models."""

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator

from ....config.constants import DatabaseTopology, ManagedBy, TenantType
from ...database.entities.connection_target import ConnectionTarget
from ..utils.validation import TenantValidationRules


class ConnectionTargetRequest(BaseModel):
    """Database connection details: a single URL or structured fields."""

    url: Optional[SecretStr] = Field(None, description="postgresql:// connection URL")
    host: Optional[str] = Field(None, description="Database host")
    port: Optional[int] = Field(None, ge=1, le=65535, description="Database port")
    database: Optional[str] = Field(None, description="Database name")
    user: Optional[str] = Field(None, description="Database user")
    password: Optional[SecretStr] = Field(None, description="Database password")
    ssl: Optional[bool] = Field(None, description="Require TLS")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        if v is not None and not re.match(r'^postgres(ql)?://', v.get_secret_value()):
            raise ValueError('Connection URL must start with postgresql://')
        return v

    @property
    def is_empty(self) -> bool:
        return not any(value is not None for value in (
            self.url, self.host, self.port, self.database, self.user, self.password, self.ssl
        ))

    def to_target(self, base: Optional[ConnectionTarget] = None) -> ConnectionTarget:
        """Merge these details over ``base`` (stored details) or build a new target."""
        return (base or ConnectionTarget()).merged_with(
            url=self.url.get_secret_value() if self.url else None,
            host=self.host,
            port=self.port,
            database=self.database,
            user=self.user,
            password=self.password.get_secret_value() if self.password else None,
            ssl=self.ssl,
        )


class AdminUserRequest(BaseModel):
    """First administrator of the tenant."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[str] = Field(None, max_length=255)
    mobile: Optional[str] = Field(None, max_length=20)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if v is not None and not re.match(r'^[^@\s]+@[^@\s]+\.[^@\s]+$', v):
            raise ValueError('Invalid email address')
        return v


class ProvisionTenantRequest(BaseModel):
    """Request model for creating a tenant."""

    name: str = Field(..., min_length=2, max_length=100, description="Tenant display name")
    slug: str = Field(..., description="Unique tenant slug")
    tenant_type: TenantType = Field(TenantType.INDIVIDUAL_CANDIDATE, description="Kind of organization")
    contact_email: Optional[str] = Field(None, description="Tenant contact email")
    contact_phone: Optional[str] = Field(None, description="Tenant contact phone")
    database_topology: DatabaseTopology = Field(DatabaseTopology.NONE, description="Database topology")
    connection: Optional[ConnectionTargetRequest] = Field(
        None, description="Connection details for a dedicated database"
    )
    url_prefix: Optional[str] = Field(None, description="Custom routing prefix; allocated when omitted")
    plan_id: Optional[str] = Field(None, description="License plan; the default plan when omitted")
    trial_days: Optional[int] = Field(None, ge=1, le=365, description="Trial length in days")
    features: List[str] = Field(default_factory=list, description="Feature keys enabled at creation")
    admin: Optional[AdminUserRequest] = Field(None, description="First administrator")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Acme Party",
                "slug": "acme",
                "tenant_type": "POLITICAL_PARTY",
                "database_topology": "SHARED",
                "features": ["fund_management"],
                "admin": {"first_name": "Asha", "email": "asha@acme.example", "mobile": "9000000000"},
            }
        }
    )

    @field_validator('slug')
    @classmethod
    def validate_slug(cls, v):
        TenantValidationRules.validate_slug(v)
        return v

    @field_validator('features')
    @classmethod
    def dedupe_features(cls, v):
        return list(dict.fromkeys(v))

    @model_validator(mode='after')
    def drop_empty_connection(self):
        if self.connection is not None and self.connection.is_empty:
            self.connection = None
        return self


class DatabaseConfigPatch(BaseModel):
    """Request model for updating a tenant's database configuration."""

    database_topology: Optional[DatabaseTopology] = Field(None, description="New topology")
    connection: Optional[ConnectionTargetRequest] = Field(None, description="New or changed connection details")

    @model_validator(mode='after')
    def drop_empty_connection(self):
        if self.connection is not None and self.connection.is_empty:
            self.connection = None
        return self


class DatabaseConfigUpdateRequest(DatabaseConfigPatch):
    """HTTP body for a database config update, naming who is asking."""

    requested_by: ManagedBy = Field(ManagedBy.PLATFORM, description="platform operator or the tenant itself")
