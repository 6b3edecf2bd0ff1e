"""Tests for topology resolution."""

import pytest

from neo_tenancy.config.constants import DatabaseStatus, DatabaseTopology, ManagedBy
from neo_tenancy.features.database.entities.connection_target import ProbeResult
from neo_tenancy.features.tenants.services.topology_resolver import TopologyResolution, TopologyResolver


class TestTopologyResolver:
    """Initial status and permissions per topology."""

    @pytest.mark.parametrize("topology, status, can_edit, managed_by", [
        (DatabaseTopology.NONE, DatabaseStatus.NOT_CONFIGURED, True, None),
        (DatabaseTopology.SHARED, DatabaseStatus.READY, False, ManagedBy.PLATFORM),
        (DatabaseTopology.DEDICATED_MANAGED, DatabaseStatus.PENDING_SETUP, False, ManagedBy.PLATFORM),
        (DatabaseTopology.DEDICATED_SELF, DatabaseStatus.PENDING_SETUP, True, ManagedBy.TENANT),
    ])
    def test_resolve(self, topology, status, can_edit, managed_by):
        assert TopologyResolver.resolve(topology) == TopologyResolution(status, can_edit, managed_by)

    def test_resolve_accepts_raw_value(self):
        assert TopologyResolver.resolve("SHARED").status == DatabaseStatus.READY

    def test_apply_probe_reachable_sets_ready_only(self):
        resolution = TopologyResolver.resolve(DatabaseTopology.DEDICATED_SELF)

        result = TopologyResolver.apply_probe(resolution, ProbeResult(reachable=True, latency_ms=2.0))

        assert result.status == DatabaseStatus.READY
        assert result.can_edit_database is True
        assert result.managed_by == ManagedBy.TENANT
        assert resolution.status == DatabaseStatus.PENDING_SETUP

    def test_apply_probe_unreachable_sets_connection_failed(self):
        resolution = TopologyResolver.resolve(DatabaseTopology.DEDICATED_MANAGED)

        result = TopologyResolver.apply_probe(
            resolution, ProbeResult(reachable=False, latency_ms=0.0, error_detail="network: refused")
        )

        assert result.status == DatabaseStatus.CONNECTION_FAILED
        assert result.can_edit_database is False
        assert result.managed_by == ManagedBy.PLATFORM


class TestDatabaseStatus:

    def test_legacy_connected_is_ready(self):
        assert DatabaseStatus.parse("CONNECTED") == DatabaseStatus.READY

    def test_parse_known_status(self):
        assert DatabaseStatus.parse("PENDING_SETUP") == DatabaseStatus.PENDING_SETUP

    def test_parse_unknown_status_raises(self):
        with pytest.raises(ValueError):
            DatabaseStatus.parse("ONLINE")
