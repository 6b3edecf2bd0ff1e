"""Tenant domain entity.

This module defines the Tenant entity and the admin-user payload
returned when a tenant is created.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ....config.constants import (
    DEFAULT_ADMIN_ROLES,
    DatabaseStatus,
    DatabaseTopology,
    ManagedBy,
    TenantType,
)
from ...database.entities.connection_target import ConnectionTarget


@dataclass
class Tenant:
    """Tenant domain entity.

    Matches the control-plane ``tenants`` table. ``connection`` holds
    decrypted connection details in memory only; repositories encrypt
    the secret and URL on write.
    """

    id: str
    name: str
    slug: str
    routing_url: str
    tenant_type: TenantType = TenantType.INDIVIDUAL_CANDIDATE
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None

    # Database topology
    database_topology: DatabaseTopology = DatabaseTopology.NONE
    database_status: DatabaseStatus = DatabaseStatus.NOT_CONFIGURED
    connection: Optional[ConnectionTarget] = None
    can_edit_database: bool = True
    managed_by: Optional[ManagedBy] = None
    last_checked_at: Optional[datetime] = None
    last_error: Optional[str] = None

    is_active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def url_prefix(self) -> str:
        """Subdomain label of the routing URL."""
        return self.routing_url.split(".", 1)[0]

    @property
    def has_connection(self) -> bool:
        return self.connection is not None and self.connection.is_configured

    def record_probe(self, reachable: bool, checked_at: datetime, error: Optional[str]) -> None:
        """Fold a probe outcome into status. Topology is never changed."""
        self.database_status = DatabaseStatus.READY if reachable else DatabaseStatus.CONNECTION_FAILED
        self.last_checked_at = checked_at
        self.last_error = None if reachable else error
        self.updated_at = datetime.now(timezone.utc)

    def database_config_dict(self) -> Dict[str, Any]:
        """Database configuration with secrets removed."""
        conn = self.connection
        return {
            "database_topology": self.database_topology.value,
            "database_status": self.database_status.value,
            "can_edit_database": self.can_edit_database,
            "managed_by": self.managed_by.value if self.managed_by else None,
            "database_host": conn.host if conn else None,
            "database_port": conn.port if conn and conn.host else None,
            "database_name": conn.database if conn else None,
            "database_user": conn.user if conn else None,
            "database_ssl": conn.ssl if conn else False,
            "has_password": bool(conn and conn.password),
            "has_connection_url": bool(conn and conn.url),
            "safe_dsn": conn.safe_dsn if conn and conn.is_configured else None,
            "last_checked_at": self.last_checked_at.isoformat() if self.last_checked_at else None,
            "last_error": self.last_error,
        }

    def to_dict(self) -> Dict[str, Any]:
        """Public representation; never contains the secret or connection URL."""
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "tenant_type": self.tenant_type.value,
            "contact_email": self.contact_email,
            "contact_phone": self.contact_phone,
            "routing_url": self.routing_url,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            **self.database_config_dict(),
        }


@dataclass(frozen=True)
class AdminUser:
    """First administrator of a new tenant. Carries no credentials."""

    first_name: str
    last_name: Optional[str]
    email: Optional[str]
    mobile: Optional[str]
    role: str

    @classmethod
    def for_tenant(cls, tenant_type: TenantType, first_name: str, last_name: Optional[str] = None,
                   email: Optional[str] = None, mobile: Optional[str] = None) -> "AdminUser":
        return cls(
            first_name=first_name,
            last_name=last_name,
            email=email,
            mobile=mobile,
            role=DEFAULT_ADMIN_ROLES.get(tenant_type, "CANDIDATE_ADMIN"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "mobile": self.mobile,
            "role": self.role,
        }
