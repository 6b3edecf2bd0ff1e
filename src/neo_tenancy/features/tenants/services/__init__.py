"""Tenant services."""

from .topology_resolver import TopologyResolver, TopologyResolution
from .url_prefix_allocator import UrlPrefixAllocator
from .tenant_provisioning_service import TenantProvisioningService, ProvisionedTenant

__all__ = [
    "TopologyResolver",
    "TopologyResolution",
    "UrlPrefixAllocator",
    "TenantProvisioningService",
    "ProvisionedTenant",
]
