"""Resolve which database holds a tenant's feature tables."""

from typing import Optional

from ....config.constants import DatabaseTopology
from ....config.settings import TenancySettings, get_settings
from ....core.exceptions import ConnectionError
from ...database.entities.connection_target import ConnectionTarget
from ...tenants.entities.tenant import Tenant


class ConnectionTargetResolver:
    """SHARED tenants use the platform shared database; DEDICATED_* tenants their own."""

    def __init__(self, settings: Optional[TenancySettings] = None):
        self._settings = settings or get_settings()

    def resolve(self, tenant: Tenant) -> ConnectionTarget:
        """Target database for a tenant.

        Raises:
            ConnectionError: topology NONE, or connection details missing
        """
        topology = tenant.database_topology

        if topology == DatabaseTopology.SHARED:
            if not self._settings.shared_database_url:
                raise ConnectionError(
                    "Shared platform database is not configured",
                    reason="not_configured",
                )
            return ConnectionTarget(url=self._settings.shared_database_url)

        if topology.is_dedicated:
            if not tenant.has_connection:
                raise ConnectionError(
                    f"Tenant {tenant.slug} has no database connection details",
                    reason="not_configured",
                )
            return tenant.connection

        raise ConnectionError(
            f"Tenant {tenant.slug} has no database (topology {topology.value})",
            reason="no_database",
        )
