"""Tests for routing prefix allocation."""

import re
from unittest.mock import AsyncMock

import pytest

from neo_tenancy.core.exceptions import UrlPrefixConflictError, ValidationError
from neo_tenancy.features.tenants.entities.tenant import Tenant
from neo_tenancy.features.tenants.services.url_prefix_allocator import UrlPrefixAllocator


def _tenant(tenant_id, slug, routing_url):
    return Tenant(id=tenant_id, name=slug.title(), slug=slug, routing_url=routing_url)


class TestAllocate:

    @pytest.fixture
    def allocator(self, tenant_repository, settings):
        return UrlPrefixAllocator(tenant_repository, settings)

    @pytest.mark.asyncio
    async def test_first_prefix(self, allocator, control_plane):
        assert await allocator.allocate(control_plane) == "0001"

    @pytest.mark.asyncio
    async def test_next_after_count(self, allocator, control_plane):
        control_plane.tenants["t1"] = _tenant("t1", "acme", "0001.election.example.com")
        control_plane.tenants["t2"] = _tenant("t2", "beta", "0002.election.example.com")

        assert await allocator.allocate(control_plane) == "0003"

    @pytest.mark.asyncio
    async def test_collision_increments(self, allocator, control_plane):
        # One tenant, but it took the URL the count would produce
        control_plane.tenants["t1"] = _tenant("t1", "acme", "0002.election.example.com")

        assert await allocator.allocate(control_plane) == "0003"

    @pytest.mark.asyncio
    async def test_fallback_after_max_attempts(self, settings):
        settings.url_prefix_max_attempts = 3
        repository = AsyncMock()
        repository.count.return_value = 7
        repository.routing_url_exists.return_value = True
        allocator = UrlPrefixAllocator(repository, settings)

        prefix = await allocator.allocate(object())

        assert repository.routing_url_exists.await_count == 3
        assert re.match(r"^[0-9a-z]+$", prefix)
        assert len(prefix) > 4
        assert not prefix.startswith("000")

    def test_build_url(self, allocator):
        assert allocator.build_url("0042") == "0042.election.example.com"

    def test_fallback_prefix_is_url_safe(self):
        first = UrlPrefixAllocator.fallback_prefix()
        second = UrlPrefixAllocator.fallback_prefix()

        assert re.match(r"^[0-9a-z]+$", first)
        assert first != second


class TestClaimCustom:

    @pytest.fixture
    def allocator(self, tenant_repository, settings):
        return UrlPrefixAllocator(tenant_repository, settings)

    @pytest.mark.asyncio
    async def test_unused_prefix(self, allocator, control_plane):
        assert await allocator.claim_custom(control_plane, "acme-hq") == "acme-hq.election.example.com"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prefix", ["Acme", "acme.hq", "acme_hq", ""])
    async def test_invalid_prefix(self, allocator, control_plane, prefix):
        with pytest.raises(ValidationError) as exc_info:
            await allocator.claim_custom(control_plane, prefix)

        assert exc_info.value.details["field"] == "url_prefix"

    @pytest.mark.asyncio
    async def test_taken_prefix(self, allocator, control_plane):
        control_plane.tenants["t1"] = _tenant("t1", "acme", "acme.election.example.com")

        with pytest.raises(UrlPrefixConflictError):
            await allocator.claim_custom(control_plane, "acme")
