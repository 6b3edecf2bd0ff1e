"""Tenant provisioning and database configuration.

Creating a tenant writes the tenant, its trial license and its initial
feature grants in one control-plane transaction. A connection probe runs
before that transaction and only ever changes the resulting status, so an
unreachable database never prevents a tenant from being created.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from ....config.constants import DatabaseStatus, ManagedBy
from ....config.settings import TenancySettings, get_settings
from ....core.exceptions import (
    DatabaseEditForbiddenError,
    NeoTenancyError,
    SlugConflictError,
    TenantNotFoundError,
    UrlPrefixConflictError,
    ValidationError,
)
from ....utils.uuid import generate_uuid_v7
from ...database.entities.connection_target import ConnectionTarget, ProbeResult
from ...database.entities.database_protocols import ConnectionProbe, ControlPlaneStore
from ...feature_flags.entities.protocols import FeatureRepository
from ...feature_flags.services.tenant_feature_gate import TenantFeatureGate
from ..entities.license import LicensePlan, TenantLicense
from ..entities.protocols import LicenseRepository, TenantRepository
from ..entities.tenant import AdminUser, Tenant
from ..models.requests import ConnectionTargetRequest, DatabaseConfigPatch, ProvisionTenantRequest
from .topology_resolver import TopologyResolver
from .url_prefix_allocator import UrlPrefixAllocator

logger = logging.getLogger(__name__)


@dataclass
class ProvisionedTenant:
    """Result of ``create_tenant``."""

    tenant: Tenant
    license: TenantLicense
    admin_user: Optional[AdminUser] = None
    probe: Optional[ProbeResult] = None
    feature_provisioning: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def status(self) -> DatabaseStatus:
        return self.tenant.database_status

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tenant": self.tenant.to_dict(),
            "status": self.status.value,
            "admin_user": self.admin_user.to_dict() if self.admin_user else None,
            "license": self.license.summary(),
            "probe": self.probe.to_dict() if self.probe else None,
            "feature_provisioning": self.feature_provisioning,
        }


class TenantProvisioningService:
    """Creates tenants and manages their database configuration."""

    def __init__(
        self,
        store: ControlPlaneStore,
        tenant_repository: TenantRepository,
        license_repository: LicenseRepository,
        feature_repository: FeatureRepository,
        probe: ConnectionProbe,
        feature_gate: TenantFeatureGate,
        allocator: Optional[UrlPrefixAllocator] = None,
        settings: Optional[TenancySettings] = None,
    ):
        self._store = store
        self._tenants = tenant_repository
        self._licenses = license_repository
        self._features = feature_repository
        self._probe = probe
        self._gate = feature_gate
        self._settings = settings or get_settings()
        self._allocator = allocator or UrlPrefixAllocator(tenant_repository, self._settings)

    async def create_tenant(self, request: ProvisionTenantRequest) -> ProvisionedTenant:
        """Provision a tenant.

        Raises:
            SlugConflictError: slug already taken
            UrlPrefixConflictError: custom prefix already taken
            ValidationError: bad prefix, connection for a non-dedicated
                topology, unknown feature key or no license plan
            TransactionError: the control-plane write failed
        """
        async with self._store.connection() as conn:
            if await self._tenants.slug_exists(conn, request.slug):
                raise SlugConflictError(request.slug)

        topology = request.database_topology
        resolution = TopologyResolver.resolve(topology)

        connection: Optional[ConnectionTarget] = None
        probe: Optional[ProbeResult] = None
        if request.connection is not None:
            if not topology.is_dedicated:
                raise ValidationError(
                    f"Connection details are only accepted for dedicated databases, not {topology.value}",
                    field="connection",
                )
            connection = self._build_target(request.connection)
            probe = await self._probe.probe(connection)
            resolution = TopologyResolver.apply_probe(resolution, probe)
            logger.info(
                f"Probe for new tenant {request.slug}: "
                f"{'reachable' if probe.reachable else probe.error_detail} ({probe.latency_ms:.1f}ms)"
            )

        async def work(conn: Any) -> Tuple[Tenant, TenantLicense, List[str]]:
            if request.url_prefix:
                routing_url = await self._allocator.claim_custom(conn, request.url_prefix)
            else:
                routing_url = self._allocator.build_url(await self._allocator.allocate(conn))

            tenant = Tenant(
                id=generate_uuid_v7(),
                name=request.name,
                slug=request.slug,
                routing_url=routing_url,
                tenant_type=request.tenant_type,
                contact_email=request.contact_email,
                contact_phone=request.contact_phone,
                database_topology=topology,
                database_status=resolution.status,
                connection=connection,
                can_edit_database=resolution.can_edit_database,
                managed_by=resolution.managed_by,
            )
            if probe is not None:
                tenant.record_probe(probe.reachable, probe.checked_at, probe.error_detail)
            tenant = await self._tenants.insert(conn, tenant)

            plan = await self._select_plan(conn, request.plan_id)
            trial_days = request.trial_days or self._settings.default_trial_days
            license = await self._licenses.insert_license(conn, TenantLicense.trial(tenant.id, plan, trial_days))

            gated = await self._grant_initial_features(conn, tenant, request.features)
            return tenant, license, gated

        max_retries = self._settings.create_tenant_max_retries
        for attempt in range(1, max_retries + 1):
            try:
                tenant, license, gated = await self._store.run_in_transaction(work)
                break
            except UrlPrefixConflictError:
                if request.url_prefix or attempt == max_retries:
                    raise
                logger.warning(f"Allocated prefix for {request.slug} was taken concurrently, retrying ({attempt}/{max_retries})")

        logger.info(
            f"Created tenant {tenant.slug} ({tenant.id}) at {tenant.routing_url} "
            f"with topology {tenant.database_topology.value}, status {tenant.database_status.value}"
        )

        provisioning = [
            {
                "feature_key": key,
                "enabled": True,
                "required": False,
                "created": False,
                "already_existed": False,
                "error": None,
            }
            for key in request.features
            if key not in gated
        ]
        provisioning.extend([await self._enable_gated(tenant, key) for key in gated])

        admin_user = None
        if request.admin is not None:
            admin_user = AdminUser.for_tenant(
                tenant.tenant_type,
                first_name=request.admin.first_name,
                last_name=request.admin.last_name,
                email=request.admin.email,
                mobile=request.admin.mobile,
            )

        return ProvisionedTenant(
            tenant=tenant,
            license=license,
            admin_user=admin_user,
            probe=probe,
            feature_provisioning=provisioning,
        )

    async def update_database_config(
        self,
        tenant_id: str,
        patch: DatabaseConfigPatch,
        requested_by: ManagedBy = ManagedBy.PLATFORM,
    ) -> Tenant:
        """Change topology and/or connection details of a tenant.

        Raises:
            TenantNotFoundError
            DatabaseEditForbiddenError: tenant-side edit of a platform-owned config
            ValidationError: connection details for a non-dedicated topology
        """
        tenant = await self._load(tenant_id)
        if requested_by == ManagedBy.TENANT and not tenant.can_edit_database:
            raise DatabaseEditForbiddenError(tenant_id)

        topology = patch.database_topology or tenant.database_topology
        if topology != tenant.database_topology:
            resolution = TopologyResolver.resolve(topology)
            logger.info(f"Tenant {tenant.slug} topology {tenant.database_topology.value} -> {topology.value}")
            tenant.database_topology = topology
            tenant.database_status = resolution.status
            tenant.can_edit_database = resolution.can_edit_database
            tenant.managed_by = resolution.managed_by
            if not topology.is_dedicated:
                # The tenant no longer uses a dedicated database
                tenant.connection = None
                tenant.last_checked_at = None
                tenant.last_error = None

        if patch.connection is not None:
            if not topology.is_dedicated:
                raise ValidationError(
                    f"Connection details are only accepted for dedicated databases, not {topology.value}",
                    field="connection",
                )
            tenant.connection = self._build_target(patch.connection, tenant.connection)
            probe = await self._probe.probe(tenant.connection)
            tenant.record_probe(probe.reachable, probe.checked_at, probe.error_detail)

        tenant.updated_at = datetime.now(timezone.utc)

        async def write(conn: Any) -> Tenant:
            return await self._tenants.update_database_config(conn, tenant)

        updated = await self._store.run_in_transaction(write)
        logger.info(f"Updated database config of tenant {updated.slug}: status {updated.database_status.value}")
        return updated

    async def check_database_connection(
        self,
        tenant_id: str,
        override: Optional[ConnectionTargetRequest] = None,
    ) -> Tuple[Tenant, ProbeResult]:
        """Probe the stored or overridden connection and record the outcome.

        Override fields are merged over the stored details for this probe
        only; they are not persisted.
        """
        tenant = await self._load(tenant_id)
        if override is not None and not override.is_empty:
            target = self._build_target(override, tenant.connection)
        else:
            target = tenant.connection

        if target is None or not target.is_configured:
            raise ValidationError(
                f"Tenant {tenant.slug} has no database connection to test",
                field="connection",
            )

        probe = await self._probe.probe(target)
        tenant.record_probe(probe.reachable, probe.checked_at, probe.error_detail)

        async def write(conn: Any) -> Tenant:
            return await self._tenants.update_database_config(conn, tenant)

        updated = await self._store.run_in_transaction(write)
        return updated, probe

    async def get_tenant(self, tenant_id: str) -> Tenant:
        return await self._load(tenant_id)

    async def get_database_config(self, tenant_id: str) -> Dict[str, Any]:
        tenant = await self._load(tenant_id)
        return tenant.database_config_dict()

    async def get_database_status_summary(self) -> Dict[str, Any]:
        async with self._store.connection() as conn:
            counts = await self._tenants.count_by_database_status(conn)
        by_status = {status.value: 0 for status in DatabaseStatus}
        for status, count in counts.items():
            key = DatabaseStatus.parse(status).value
            by_status[key] += count
        return {"total": sum(by_status.values()), "by_status": by_status}

    async def deactivate_tenant(self, tenant_id: str) -> None:
        """Soft delete. Raises TenantNotFoundError for unknown or already inactive tenants."""

        async def write(conn: Any) -> bool:
            return await self._tenants.deactivate(conn, tenant_id)

        if not await self._store.run_in_transaction(write):
            raise TenantNotFoundError(tenant_id)
        logger.info(f"Deactivated tenant {tenant_id}")

    async def _load(self, tenant_id: str) -> Tenant:
        async with self._store.connection() as conn:
            tenant = await self._tenants.find_by_id(conn, tenant_id)
        if tenant is None:
            raise TenantNotFoundError(tenant_id)
        return tenant

    @staticmethod
    def _build_target(request: ConnectionTargetRequest, base: Optional[ConnectionTarget] = None) -> ConnectionTarget:
        try:
            return request.to_target(base)
        except ValueError as e:
            raise ValidationError(str(e), field="connection") from e

    async def _select_plan(self, conn: Any, plan_id: Optional[str]) -> LicensePlan:
        if plan_id:
            plan = await self._licenses.find_plan_by_id(conn, plan_id)
            if plan is None or not plan.is_active:
                raise ValidationError(f"License plan {plan_id} not found", field="plan_id")
            return plan

        plan = await self._licenses.find_plan_by_name(conn, self._settings.default_plan_name)
        if plan is None:
            plan = await self._licenses.find_cheapest_active_plan(conn)
        if plan is None:
            raise ValidationError("No active license plan available", field="plan_id")
        return plan

    async def _grant_initial_features(self, conn: Any, tenant: Tenant, feature_keys: List[str]) -> List[str]:
        """Insert initial grants. Returns the keys that still need tables."""
        if not feature_keys:
            return []

        flags = {flag.feature_key: flag for flag in await self._features.find_by_keys(conn, feature_keys)}
        unknown = [key for key in feature_keys if key not in flags]
        if unknown:
            raise ValidationError(
                f"Unknown feature keys: {', '.join(unknown)}",
                field="features",
                details={"unknown": unknown},
            )

        gated = []
        for key in feature_keys:
            requires_tables = self._gate.requires_tables(key)
            await self._features.upsert_tenant_feature(conn, tenant.id, flags[key].id, not requires_tables)
            if requires_tables:
                gated.append(key)
        return gated

    async def _enable_gated(self, tenant: Tenant, feature_key: str) -> Dict[str, Any]:
        try:
            result = await self._gate.set_feature(tenant.id, feature_key, True)
        except NeoTenancyError as e:
            logger.warning(f"Could not enable {feature_key} for new tenant {tenant.slug}: {e.message}")
            return {
                "feature_key": feature_key,
                "enabled": False,
                "required": True,
                "created": False,
                "already_existed": False,
                "error": e.to_dict(),
            }

        tables = result.tables
        return {
            "feature_key": feature_key,
            "enabled": True,
            "required": True,
            "created": tables.created if tables else False,
            "already_existed": tables.already_existed if tables else False,
            "error": None,
        }
