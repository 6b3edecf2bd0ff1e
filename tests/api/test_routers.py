"""HTTP tests for the control-plane API."""

import pytest
from fastapi.testclient import TestClient

from neo_tenancy.api.app import build_services, create_app

from tests.conftest import UNREACHABLE_HOST

TENANTS = "/api/v1/tenants"
FEATURES = "/api/v1/features"


@pytest.fixture
def client(settings, store, probe, connector, tenant_repository, license_repository, feature_repository):
    services = build_services(
        store,
        settings,
        probe=probe,
        connector=connector,
        tenant_repository=tenant_repository,
        license_repository=license_repository,
        feature_repository=feature_repository,
    )
    return TestClient(create_app(settings, services=services))


def create_tenant(client, slug="acme", **overrides):
    body = {"name": slug.title() + " Party", "slug": slug, "database_topology": "SHARED"}
    body.update(overrides)
    return client.post(TENANTS, json=body)


def dedicated_body(host):
    return {
        "database_topology": "DEDICATED_SELF",
        "connection": {"host": host, "database": "beta", "user": "beta_owner", "password": "s3cret-pw"},
    }


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestTenantEndpoints:

    def test_create_shared_tenant(self, client, seeded_flags):
        response = create_tenant(client, features=["fund_management", "voter_slips"],
                                 admin={"first_name": "Asha", "email": "asha@acme.example"})

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "READY"
        assert body["tenant"]["routing_url"] == "0001.election.example.com"
        assert body["tenant"]["can_edit_database"] is False
        assert body["license"]["status"] == "TRIAL"
        assert body["admin_user"]["role"] == "CANDIDATE_ADMIN"
        outcomes = {item["feature_key"]: item for item in body["feature_provisioning"]}
        assert outcomes["fund_management"]["created"] is True
        assert outcomes["voter_slips"]["enabled"] is True

    def test_create_dedicated_tenant_hides_secrets(self, client):
        response = create_tenant(client, slug="beta", **dedicated_body(UNREACHABLE_HOST))

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "CONNECTION_FAILED"
        assert body["probe"]["reachable"] is False
        assert body["tenant"]["has_password"] is True
        assert "s3cret-pw" not in response.text

    def test_duplicate_slug(self, client):
        assert create_tenant(client).status_code == 201

        response = create_tenant(client)

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["errors"][0]["code"] == "SlugConflictError"
        assert body["metadata"]["path"] == TENANTS

    def test_invalid_request_does_not_echo_input(self, client):
        response = create_tenant(client, slug="Not A Slug", **dedicated_body("db.beta.example.com"))

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "ValidationError"
        assert "s3cret-pw" not in response.text

    def test_unknown_feature(self, client):
        response = create_tenant(client, features=["teleportation"])

        assert response.status_code == 400
        assert response.json()["errors"][0]["details"]["unknown"] == ["teleportation"]

    def test_get_and_deactivate(self, client):
        tenant_id = create_tenant(client).json()["tenant"]["id"]

        assert client.get(f"{TENANTS}/{tenant_id}").json()["slug"] == "acme"
        assert client.delete(f"{TENANTS}/{tenant_id}").status_code == 204
        assert client.get(f"{TENANTS}/missing").status_code == 404
        assert client.delete(f"{TENANTS}/missing").status_code == 404

    def test_database_config(self, client):
        tenant_id = create_tenant(client, slug="beta", **dedicated_body("db.beta.example.com")).json()["tenant"]["id"]

        response = client.get(f"{TENANTS}/{tenant_id}/database")

        assert response.status_code == 200
        body = response.json()
        assert body["database_host"] == "db.beta.example.com"
        assert body["has_password"] is True
        assert "password" not in body
        assert "s3cret-pw" not in response.text

    def test_tenant_cannot_edit_platform_database(self, client):
        tenant_id = create_tenant(client).json()["tenant"]["id"]

        response = client.put(f"{TENANTS}/{tenant_id}/database",
                              json={"database_topology": "NONE", "requested_by": "tenant"})

        assert response.status_code == 403
        assert response.json()["errors"][0]["code"] == "DatabaseEditForbiddenError"

    def test_platform_moves_tenant_to_dedicated(self, client):
        tenant_id = create_tenant(client).json()["tenant"]["id"]

        response = client.put(f"{TENANTS}/{tenant_id}/database", json=dedicated_body("db.acme.example.com"))

        assert response.status_code == 200
        body = response.json()
        assert body["database_topology"] == "DEDICATED_SELF"
        assert body["database_status"] == "READY"
        assert body["can_edit_database"] is True

    def test_connection_test(self, client):
        tenant_id = create_tenant(client, slug="beta", **dedicated_body(UNREACHABLE_HOST)).json()["tenant"]["id"]

        failed = client.post(f"{TENANTS}/{tenant_id}/database/test")
        assert failed.status_code == 200
        assert failed.json()["reachable"] is False
        assert failed.json()["database_status"] == "CONNECTION_FAILED"

        fixed = client.post(f"{TENANTS}/{tenant_id}/database/test", json={"host": "db.beta.example.com"})
        assert fixed.json()["reachable"] is True
        assert fixed.json()["database_status"] == "READY"

    def test_status_summary(self, client):
        create_tenant(client)
        create_tenant(client, slug="beta", **dedicated_body(UNREACHABLE_HOST))

        body = client.get(f"{TENANTS}/database/status").json()

        assert body["total"] == 2
        assert body["by_status"]["READY"] == 1
        assert body["by_status"]["CONNECTION_FAILED"] == 1
        assert body["by_status"]["PENDING_SETUP"] == 0


class TestFeatureEndpoints:

    def test_catalog(self, client, seeded_flags):
        created = client.post(FEATURES, json={"feature_key": "booth_agents", "name": "Booth Agents"})
        assert created.status_code == 201
        assert created.json()["feature"]["feature_key"] == "booth_agents"

        assert client.post(FEATURES, json={"feature_key": "booth_agents", "name": "Again"}).status_code == 409
        assert client.get(f"{FEATURES}/voter_slips").status_code == 200
        assert client.get(f"{FEATURES}/teleportation").status_code == 404
        assert len(client.get(FEATURES).json()) == 4

    def test_bootstrap(self, client, seeded_flags):
        response = client.post(f"{FEATURES}/bulk", json={"features": [
            {"feature_key": "voter_slips", "name": "Voter Slips"},
            {"feature_key": "booth_agents", "name": "Booth Agents"},
        ]})

        assert response.json() == {"created": ["booth_agents"], "skipped": ["voter_slips"]}

    def test_toggle_tenant_feature(self, client, seeded_flags):
        tenant_id = create_tenant(client).json()["tenant"]["id"]

        enabled = client.put(f"{TENANTS}/{tenant_id}/features/inventory_management", json={"enabled": True})
        assert enabled.status_code == 200
        assert enabled.json()["created"] is True
        assert "InventoryItem" in enabled.json()["tables"]

        features = client.get(f"{TENANTS}/{tenant_id}/features").json()
        assert [f["feature_key"] for f in features] == ["inventory_management"]

        disabled = client.put(f"{TENANTS}/{tenant_id}/features/inventory_management", json={"enabled": False})
        assert disabled.json()["enabled"] is False

    def test_feature_on_tenant_without_database(self, client, seeded_flags):
        tenant_id = create_tenant(client, database_topology="NONE").json()["tenant"]["id"]

        response = client.put(f"{TENANTS}/{tenant_id}/features/fund_management", json={"enabled": True})

        assert response.status_code == 503
        assert response.json()["errors"][0]["type"] == "ConnectionError"

    def test_bulk_toggles_report_each_outcome(self, client, seeded_flags):
        tenant_id = create_tenant(client).json()["tenant"]["id"]

        response = client.put(f"{TENANTS}/{tenant_id}/features", json={"features": [
            {"feature_key": "voter_slips", "enabled": True},
            {"feature_key": "teleportation", "enabled": True},
        ]})

        body = response.json()
        assert response.status_code == 200
        assert body["total"] == 2
        assert body["succeeded"] == 1
        assert body["failed"] == 1

    def test_enable_for_tenants(self, client, seeded_flags):
        first = create_tenant(client).json()["tenant"]["id"]
        second = create_tenant(client, slug="bravo").json()["tenant"]["id"]

        response = client.post(f"{FEATURES}/fund_management/enable-for-tenants",
                               json={"tenant_ids": [first, second, first]})

        body = response.json()
        assert body["total"] == 2
        assert body["succeeded"] == 2
        assert sum(result["created"] for result in body["results"]) == 1

    def test_ensure_tables(self, client, seeded_flags):
        tenant_id = create_tenant(client).json()["tenant"]["id"]

        response = client.post(f"{TENANTS}/{tenant_id}/features/fund_management/tables")

        assert response.status_code == 200
        assert response.json()["created"] is True


class TestUnconfiguredServices:

    def test_placeholder_dependencies(self, settings):
        client = TestClient(create_app(settings))

        assert client.get(f"{TENANTS}/t-1").status_code == 501
        assert client.get(FEATURES).status_code == 501
