"""Tenant routers."""

from .tenant_router import tenant_router, get_provisioning_service

__all__ = ["tenant_router", "get_provisioning_service"]
