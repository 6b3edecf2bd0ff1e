"""Exception hierarchy for neo-tenancy."""

from .base import NeoTenancyError, create_error_response
from .domain import (
    ConfigurationError,
    ValidationError,
    ConflictError,
    SlugConflictError,
    UrlPrefixConflictError,
    FeatureKeyConflictError,
    NotFoundError,
    TenantNotFoundError,
    FeatureNotFoundError,
    DatabaseEditForbiddenError,
)
from .database import (
    DatabaseError,
    ConnectionError,
    ConnectionTimeoutError,
    SchemaError,
    TransactionError,
)
from .http_mapping import HTTP_STATUS_MAP, get_http_status_code

__all__ = [
    "NeoTenancyError",
    "create_error_response",
    "ConfigurationError",
    "ValidationError",
    "ConflictError",
    "SlugConflictError",
    "UrlPrefixConflictError",
    "FeatureKeyConflictError",
    "NotFoundError",
    "TenantNotFoundError",
    "FeatureNotFoundError",
    "DatabaseEditForbiddenError",
    "DatabaseError",
    "ConnectionError",
    "ConnectionTimeoutError",
    "SchemaError",
    "TransactionError",
    "HTTP_STATUS_MAP",
    "get_http_status_code",
]
