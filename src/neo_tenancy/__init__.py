"""neo-tenancy - tenant provisioning control plane.

Creates tenants with a routing URL, a trial license and initial features;
derives database status from the chosen topology and probes dedicated
databases; creates per-feature tables in tenant databases when a gated
feature is enabled.
"""

from .__version__ import __version__

from .config import (
    TenancySettings,
    get_settings,
    DatabaseTopology,
    DatabaseStatus,
    ManagedBy,
)

from .core.exceptions import (
    NeoTenancyError,
    ValidationError,
    ConflictError,
    SlugConflictError,
    UrlPrefixConflictError,
    NotFoundError,
    TenantNotFoundError,
    FeatureNotFoundError,
    DatabaseEditForbiddenError,
    ConnectionError,
    SchemaError,
    TransactionError,
)

__all__ = [
    "__version__",
    "TenancySettings",
    "get_settings",
    "DatabaseTopology",
    "DatabaseStatus",
    "ManagedBy",
    "NeoTenancyError",
    "ValidationError",
    "ConflictError",
    "SlugConflictError",
    "UrlPrefixConflictError",
    "NotFoundError",
    "TenantNotFoundError",
    "FeatureNotFoundError",
    "DatabaseEditForbiddenError",
    "ConnectionError",
    "SchemaError",
    "TransactionError",
]
