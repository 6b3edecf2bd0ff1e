"""Tests for enabling and disabling tenant features."""

import asyncio

import pytest

from neo_tenancy.config.constants import DatabaseTopology
from neo_tenancy.core.exceptions import FeatureNotFoundError, SchemaError, TenantNotFoundError
from neo_tenancy.features.feature_flags.services.tenant_feature_gate import FeatureToggle, TenantFeatureGate
from neo_tenancy.features.tenants.entities.tenant import Tenant

from tests.conftest import SHARED_DATABASE_URL


@pytest.fixture
def tenants(control_plane):
    shared = Tenant(id="t-shared", name="Acme", slug="acme", routing_url="0001.election.example.com",
                    database_topology=DatabaseTopology.SHARED)
    bare = Tenant(id="t-bare", name="Bravo", slug="bravo", routing_url="0002.election.example.com")
    control_plane.tenants = {shared.id: shared, bare.id: bare}
    return control_plane.tenants


def grant(control_plane, tenant_id, feature_key):
    return control_plane.grants.get((tenant_id, f"flag-{feature_key}"))


class TestSetFeature:

    @pytest.mark.asyncio
    async def test_enable_gated_feature_creates_tables(self, feature_gate, control_plane, connector,
                                                       tenants, seeded_flags):
        result = await feature_gate.set_feature("t-shared", "fund_management", True)

        assert result.enabled is True
        assert result.tables.created is True
        assert grant(control_plane, "t-shared", "fund_management").is_enabled is True
        assert "FundAccount" in connector.databases[SHARED_DATABASE_URL].tables

    @pytest.mark.asyncio
    async def test_enable_plain_feature(self, feature_gate, control_plane, connector, tenants, seeded_flags):
        result = await feature_gate.set_feature("t-bare", "voter_slips", True, settings={"copies": 2})

        assert result.tables.required is False
        assert grant(control_plane, "t-bare", "voter_slips").settings == {"copies": 2}
        assert connector.targets == []

    @pytest.mark.asyncio
    async def test_disable_keeps_tables_and_reenable_finds_them(self, feature_gate, control_plane, connector,
                                                                tenants, seeded_flags):
        await feature_gate.set_feature("t-shared", "fund_management", True)

        disabled = await feature_gate.set_feature("t-shared", "fund_management", False)
        db = connector.databases[SHARED_DATABASE_URL]
        assert disabled.enabled is False
        assert disabled.tables is None
        assert grant(control_plane, "t-shared", "fund_management").is_enabled is False
        assert "FundAccount" in db.tables
        assert not any("DROP" in statement.upper() for statement in db.ddl)

        reenabled = await feature_gate.set_feature("t-shared", "fund_management", True)
        assert reenabled.tables.already_existed is True
        assert grant(control_plane, "t-shared", "fund_management").is_enabled is True

    @pytest.mark.asyncio
    async def test_schema_error_leaves_flag_untouched(self, feature_gate, control_plane, connector,
                                                      tenants, seeded_flags):
        connector.database(SHARED_DATABASE_URL).fail_on = '"FundAccount"'

        with pytest.raises(SchemaError):
            await feature_gate.set_feature("t-shared", "fund_management", True)

        assert grant(control_plane, "t-shared", "fund_management") is None

    @pytest.mark.asyncio
    async def test_unknown_tenant(self, feature_gate, seeded_flags):
        with pytest.raises(TenantNotFoundError):
            await feature_gate.set_feature("missing", "voter_slips", True)

    @pytest.mark.asyncio
    async def test_unknown_feature(self, feature_gate, tenants):
        with pytest.raises(FeatureNotFoundError):
            await feature_gate.set_feature("t-shared", "teleportation", True)


class TestEnsureFeatureTables:

    @pytest.mark.asyncio
    async def test_does_not_touch_grant(self, feature_gate, control_plane, tenants, seeded_flags):
        result = await feature_gate.ensure_feature_tables("t-shared", "inventory_management")

        assert result.created is True
        assert grant(control_plane, "t-shared", "inventory_management") is None


class TestBulk:

    @pytest.mark.asyncio
    async def test_set_features_reports_each_outcome(self, feature_gate, control_plane, tenants, seeded_flags):
        results = await feature_gate.set_features("t-bare", [
            FeatureToggle("voter_slips", True),
            FeatureToggle("fund_management", True),
            FeatureToggle("teleportation", True),
        ])

        by_key = {result.feature_key: result for result in results}
        assert by_key["voter_slips"].succeeded
        assert by_key["fund_management"].error["type"] == "ConnectionError"
        assert by_key["teleportation"].error["type"] == "FeatureNotFoundError"
        assert grant(control_plane, "t-bare", "fund_management") is None

    @pytest.mark.asyncio
    async def test_enable_for_tenants_isolates_failures(self, feature_gate, control_plane, tenants, seeded_flags):
        results = await feature_gate.enable_for_tenants("fund_management", ["t-shared", "t-bare", "t-missing"])

        by_tenant = {result.tenant_id: result for result in results}
        assert by_tenant["t-shared"].succeeded
        assert by_tenant["t-bare"].error["type"] == "ConnectionError"
        assert by_tenant["t-missing"].error["type"] == "TenantNotFoundError"
        assert grant(control_plane, "t-shared", "fund_management").is_enabled is True

    @pytest.mark.asyncio
    async def test_disable_for_tenants(self, feature_gate, control_plane, tenants, seeded_flags):
        await feature_gate.enable_for_tenants("voter_slips", ["t-shared", "t-bare"])

        results = await feature_gate.disable_for_tenants("voter_slips", ["t-shared", "t-bare"])

        assert all(result.succeeded for result in results)
        assert grant(control_plane, "t-shared", "voter_slips").is_enabled is False
        assert grant(control_plane, "t-bare", "voter_slips").is_enabled is False

    @pytest.mark.asyncio
    async def test_rollout_concurrency_is_bounded(self, mocker, store, tenant_repository, feature_repository,
                                                  table_manager, control_plane, settings, seeded_flags):
        control_plane.tenants = {
            f"t-{n}": Tenant(id=f"t-{n}", name=f"Tenant {n}", slug=f"tenant-{n}",
                             routing_url=f"{n:04d}.election.example.com",
                             database_topology=DatabaseTopology.SHARED)
            for n in range(8)
        }
        settings.feature_rollout_concurrency = 3
        gate = TenantFeatureGate(store, tenant_repository, feature_repository, table_manager, settings)

        ensure = table_manager.ensure_feature_tables
        in_flight = 0
        peak = 0

        async def counting_ensure(tenant, feature_key):
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            try:
                await asyncio.sleep(0.01)
                return await ensure(tenant, feature_key)
            finally:
                in_flight -= 1

        mocker.patch.object(table_manager, "ensure_feature_tables", new=counting_ensure)

        results = await gate.enable_for_tenants("fund_management", list(control_plane.tenants))

        assert all(result.succeeded for result in results)
        assert peak == 3
        assert sum(result.tables.created for result in results) == 1

    @pytest.mark.asyncio
    async def test_unknown_feature_fails_whole_call(self, feature_gate, tenants):
        with pytest.raises(FeatureNotFoundError):
            await feature_gate.enable_for_tenants("teleportation", ["t-shared"])

    @pytest.mark.asyncio
    async def test_list_tenant_features(self, feature_gate, tenants, seeded_flags):
        await feature_gate.set_feature("t-bare", "voter_slips", True)

        features = await feature_gate.list_tenant_features("t-bare")

        assert [feature.feature_key for feature in features] == ["voter_slips"]
