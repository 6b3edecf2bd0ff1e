"""Domain exceptions for neo-tenancy.

Validation, conflict, lookup and permission failures. All of them are
resolved by the caller changing its input; none is retried.
"""

from typing import Any, Dict, Optional

from .base import NeoTenancyError


class ConfigurationError(NeoTenancyError):
    """Raised when service configuration is missing or invalid."""
    pass


class ValidationError(NeoTenancyError):
    """Raised when request input is malformed."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = dict(details or {})
        if field:
            details.setdefault("field", field)
        super().__init__(message, details=details)
        self.field = field


class ConflictError(NeoTenancyError):
    """Raised when a unique value is already taken."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[str] = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, details=details)
        self.field = field
        self.value = value


class SlugConflictError(ConflictError):
    """Raised when a tenant slug is already in use."""

    def __init__(self, slug: str):
        super().__init__(f"Tenant with slug '{slug}' already exists", field="slug", value=slug)


class UrlPrefixConflictError(ConflictError):
    """Raised when a routing URL is already assigned to another tenant."""

    def __init__(self, routing_url: str):
        super().__init__(
            f"Tenant URL '{routing_url}' is already in use",
            field="url_prefix",
            value=routing_url,
        )


class FeatureKeyConflictError(ConflictError):
    """Raised when a feature flag key already exists."""

    def __init__(self, feature_key: str):
        super().__init__(
            f"Feature with key '{feature_key}' already exists",
            field="feature_key",
            value=feature_key,
        )


class NotFoundError(NeoTenancyError):
    """Raised when a requested entity does not exist."""
    pass


class TenantNotFoundError(NotFoundError):
    """Raised when a tenant does not exist."""

    def __init__(self, tenant_id: str):
        super().__init__(f"Tenant {tenant_id} not found", details={"tenant_id": tenant_id})
        self.tenant_id = tenant_id


class FeatureNotFoundError(NotFoundError):
    """Raised when a feature flag does not exist."""

    def __init__(self, feature_key: str):
        super().__init__(f"Feature '{feature_key}' not found", details={"feature_key": feature_key})
        self.feature_key = feature_key


class DatabaseEditForbiddenError(NeoTenancyError):
    """Raised when a tenant edits a database configuration it does not own."""

    def __init__(self, tenant_id: str):
        super().__init__(
            "Database configuration for this tenant is managed by the platform",
            details={"tenant_id": tenant_id},
        )
        self.tenant_id = tenant_id
