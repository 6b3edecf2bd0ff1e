"""Tests for the asyncpg tenant repository."""

from unittest.mock import AsyncMock

import asyncpg
import pytest

from neo_tenancy.config.constants import ConstraintNames, DatabaseStatus, DatabaseTopology, ManagedBy
from neo_tenancy.core.exceptions import ConflictError, SlugConflictError, UrlPrefixConflictError
from neo_tenancy.features.database.entities.connection_target import ConnectionTarget
from neo_tenancy.features.tenants.entities.tenant import Tenant
from neo_tenancy.features.tenants.repositories.tenant_repository import AsyncpgTenantRepository
from neo_tenancy.utils.encryption import SecretEncryption

COLUMNS = (
    "id", "name", "slug", "tenant_type", "contact_email", "contact_phone",
    "database_topology", "database_status", "database_host", "database_port",
    "database_name", "database_user", "database_password_encrypted",
    "database_url_encrypted", "database_ssl", "can_edit_database", "managed_by",
    "routing_url", "last_checked_at", "last_error", "is_active", "created_at", "updated_at",
)


@pytest.fixture
def encryption():
    return SecretEncryption("repository-test-key")


@pytest.fixture
def repository(encryption):
    return AsyncpgTenantRepository(encryption=encryption)


@pytest.fixture
def conn():
    conn = AsyncMock()

    async def echo_insert(query, *params):
        return dict(zip(COLUMNS, params))

    conn.fetchrow.side_effect = echo_insert
    return conn


def dedicated_tenant():
    return Tenant(
        id="t-1",
        name="Acme",
        slug="acme",
        routing_url="0001.election.example.com",
        database_topology=DatabaseTopology.DEDICATED_SELF,
        database_status=DatabaseStatus.READY,
        connection=ConnectionTarget(host="db.acme.example.com", database="acme", user="owner", password="hunter2"),
        managed_by=ManagedBy.TENANT,
    )


def unique_violation(constraint_name):
    error = asyncpg.UniqueViolationError("duplicate key value violates unique constraint")
    error.constraint_name = constraint_name
    return error


class TestInsert:

    @pytest.mark.asyncio
    async def test_encrypts_secrets_and_maps_back(self, repository, conn, encryption):
        created = await repository.insert(conn, dedicated_tenant())

        params = conn.fetchrow.call_args.args[1:]
        stored = dict(zip(COLUMNS, params))
        assert stored["database_password_encrypted"] != "hunter2"
        assert encryption.is_encrypted(stored["database_password_encrypted"])
        assert stored["database_url_encrypted"] is None
        assert "hunter2" not in [p for p in params if isinstance(p, str)]

        assert created.connection.password == "hunter2"
        assert created.connection.host == "db.acme.example.com"
        assert created.database_topology == DatabaseTopology.DEDICATED_SELF
        assert created.managed_by == ManagedBy.TENANT

    @pytest.mark.asyncio
    async def test_tenant_without_database(self, repository, conn):
        tenant = Tenant(id="t-2", name="Bravo", slug="bravo", routing_url="0002.election.example.com")

        created = await repository.insert(conn, tenant)

        assert created.connection is None
        assert created.database_status == DatabaseStatus.NOT_CONFIGURED

    @pytest.mark.asyncio
    @pytest.mark.parametrize("constraint, expected", [
        (ConstraintNames.TENANT_SLUG, SlugConflictError),
        (ConstraintNames.TENANT_ROUTING_URL, UrlPrefixConflictError),
    ])
    async def test_unique_violation_mapping(self, repository, conn, constraint, expected):
        conn.fetchrow.side_effect = unique_violation(constraint)

        with pytest.raises(expected):
            await repository.insert(conn, dedicated_tenant())

    @pytest.mark.asyncio
    async def test_unknown_constraint(self, repository, conn):
        conn.fetchrow.side_effect = unique_violation("tenants_something_key")

        with pytest.raises(ConflictError) as exc_info:
            await repository.insert(conn, dedicated_tenant())

        assert not isinstance(exc_info.value, (SlugConflictError, UrlPrefixConflictError))


class TestQueries:

    @pytest.mark.asyncio
    async def test_count_by_database_status_folds_legacy_values(self, repository):
        conn = AsyncMock()
        conn.fetch.return_value = [
            {"database_status": "CONNECTED", "count": 2},
            {"database_status": "READY", "count": 1},
            {"database_status": "CONNECTION_FAILED", "count": 3},
        ]

        counts = await repository.count_by_database_status(conn)

        assert counts == {DatabaseStatus.READY.value: 3, DatabaseStatus.CONNECTION_FAILED.value: 3}

    @pytest.mark.asyncio
    async def test_deactivate(self, repository):
        conn = AsyncMock()
        conn.execute.return_value = "UPDATE 1"
        assert await repository.deactivate(conn, "t-1") is True

        conn.execute.return_value = "UPDATE 0"
        assert await repository.deactivate(conn, "t-1") is False

    @pytest.mark.asyncio
    async def test_find_missing(self, repository):
        conn = AsyncMock()
        conn.fetchrow.return_value = None

        assert await repository.find_by_id(conn, "missing") is None
