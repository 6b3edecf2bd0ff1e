"""Derive database status and edit permissions from a topology."""

from dataclasses import dataclass, replace
from typing import Optional

from ....config.constants import DatabaseStatus, DatabaseTopology, ManagedBy
from ...database.entities.connection_target import ProbeResult


@dataclass(frozen=True)
class TopologyResolution:
    """Initial ``(status, can_edit_database, managed_by)`` for a topology."""

    status: DatabaseStatus
    can_edit_database: bool
    managed_by: Optional[ManagedBy]


_RESOLUTIONS = {
    DatabaseTopology.NONE: TopologyResolution(DatabaseStatus.NOT_CONFIGURED, True, None),
    DatabaseTopology.SHARED: TopologyResolution(DatabaseStatus.READY, False, ManagedBy.PLATFORM),
    DatabaseTopology.DEDICATED_MANAGED: TopologyResolution(DatabaseStatus.PENDING_SETUP, False, ManagedBy.PLATFORM),
    DatabaseTopology.DEDICATED_SELF: TopologyResolution(DatabaseStatus.PENDING_SETUP, True, ManagedBy.TENANT),
}


class TopologyResolver:
    """Pure mapping from topology to resolution. No I/O."""

    @staticmethod
    def resolve(topology: DatabaseTopology) -> TopologyResolution:
        return _RESOLUTIONS[DatabaseTopology(topology)]

    @staticmethod
    def apply_probe(resolution: TopologyResolution, probe: ProbeResult) -> TopologyResolution:
        """Override the status only, from a probe outcome."""
        status = DatabaseStatus.READY if probe.reachable else DatabaseStatus.CONNECTION_FAILED
        return replace(resolution, status=status)
