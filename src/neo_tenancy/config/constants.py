"""Constants and enums for neo-tenancy.

These correspond to the enum columns of the control-plane tables defined in
``migrations/V001__control_plane.sql``.
"""

from enum import Enum
from typing import Final


class DatabaseTopology(str, Enum):
    """Where a tenant's data lives and who owns that database."""

    NONE = "NONE"
    SHARED = "SHARED"
    DEDICATED_MANAGED = "DEDICATED_MANAGED"
    DEDICATED_SELF = "DEDICATED_SELF"

    @property
    def is_dedicated(self) -> bool:
        return self in (DatabaseTopology.DEDICATED_MANAGED, DatabaseTopology.DEDICATED_SELF)


class DatabaseStatus(str, Enum):
    """Operational status of a tenant's database."""

    NOT_CONFIGURED = "NOT_CONFIGURED"
    PENDING_SETUP = "PENDING_SETUP"
    READY = "READY"
    CONNECTION_FAILED = "CONNECTION_FAILED"

    @classmethod
    def parse(cls, value: str) -> "DatabaseStatus":
        """Parse a stored status, folding the legacy ``CONNECTED`` into READY."""
        if value == "CONNECTED":
            return cls.READY
        return cls(value)


class ManagedBy(str, Enum):
    """Party responsible for a tenant database."""

    PLATFORM = "platform"
    TENANT = "tenant"


class LicenseStatus(str, Enum):
    """Tenant license status."""

    TRIAL = "TRIAL"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    SUSPENDED = "SUSPENDED"


class TenantType(str, Enum):
    """Kind of organization a tenant represents."""

    POLITICAL_PARTY = "POLITICAL_PARTY"
    INDIVIDUAL_CANDIDATE = "INDIVIDUAL_CANDIDATE"
    ELECTION_MANAGEMENT = "ELECTION_MANAGEMENT"


# Role given to the first admin user of a new tenant
DEFAULT_ADMIN_ROLES: Final[dict] = {
    TenantType.POLITICAL_PARTY: "CENTRAL_ADMIN",
    TenantType.ELECTION_MANAGEMENT: "EMC_ADMIN",
    TenantType.INDIVIDUAL_CANDIDATE: "CANDIDATE_ADMIN",
}


class ConstraintNames:
    """Unique constraints whose violations map to conflicts."""

    TENANT_SLUG: Final[str] = "tenants_slug_key"
    TENANT_ROUTING_URL: Final[str] = "tenants_routing_url_key"
    FEATURE_KEY: Final[str] = "feature_flags_feature_key_key"


class ProbeDefaults:
    """Connection probe bounds in seconds."""

    CONNECT_TIMEOUT: Final[float] = 10.0
    QUERY_TIMEOUT: Final[float] = 5.0


class UrlPrefixDefaults:
    """Routing prefix allocation."""

    WIDTH: Final[int] = 4
    MAX_ATTEMPTS: Final[int] = 100
    FALLBACK_RANDOM_LENGTH: Final[int] = 4
