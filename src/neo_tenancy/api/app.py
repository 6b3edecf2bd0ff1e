"""neo-tenancy control-plane API.

``create_app()`` wires the routers to services built over an asyncpg
control-plane pool during the application lifespan. Tests and embedding
applications can pass a prebuilt ``ServiceContainer`` instead.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

from fastapi import FastAPI

from ..__version__ import __version__
from ..config.logging_config import setup_logging
from ..config.settings import TenancySettings, get_settings
from ..features.database.entities.database_protocols import ConnectionProbe, ControlPlaneStore, TargetConnector
from ..features.database.repositories.connection_probe import AsyncpgConnectionProbe
from ..features.database.repositories.control_plane_store import AsyncpgControlPlaneStore
from ..features.feature_flags.entities.table_sets import FeatureTableRegistry
from ..features.feature_flags.repositories.feature_repository import AsyncpgFeatureRepository
from ..features.feature_flags.routers.feature_router import (
    feature_router,
    get_catalog_service,
    get_feature_gate,
    tenant_features_router,
)
from ..features.feature_flags.services.feature_catalog_service import FeatureCatalogService
from ..features.feature_flags.services.feature_table_manager import FeatureTableManager
from ..features.feature_flags.services.tenant_feature_gate import TenantFeatureGate
from ..features.tenants.repositories.license_repository import AsyncpgLicenseRepository
from ..features.tenants.repositories.tenant_repository import AsyncpgTenantRepository
from ..features.tenants.routers.tenant_router import get_provisioning_service, tenant_router
from ..features.tenants.services.tenant_provisioning_service import TenantProvisioningService
from ..utils.encryption import SecretEncryption
from .exception_handlers import register_exception_handlers

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@dataclass
class ServiceContainer:
    """Services the routers depend on."""

    provisioning: TenantProvisioningService
    feature_gate: TenantFeatureGate
    catalog: FeatureCatalogService


def build_services(
    store: ControlPlaneStore,
    settings: Optional[TenancySettings] = None,
    probe: Optional[ConnectionProbe] = None,
    connector: Optional[TargetConnector] = None,
    registry: Optional[FeatureTableRegistry] = None,
    tenant_repository=None,
    license_repository=None,
    feature_repository=None,
) -> ServiceContainer:
    """Wire services over a control-plane store.

    Repositories default to the asyncpg implementations.
    """
    settings = settings or get_settings()
    tenant_repository = tenant_repository or AsyncpgTenantRepository(
        SecretEncryption(settings.encryption_key.get_secret_value())
    )
    license_repository = license_repository or AsyncpgLicenseRepository()
    feature_repository = feature_repository or AsyncpgFeatureRepository()
    probe = probe or AsyncpgConnectionProbe(
        connect_timeout=settings.probe_connect_timeout,
        query_timeout=settings.probe_query_timeout,
    )

    table_manager = FeatureTableManager(registry=registry, connector=connector, settings=settings)
    gate = TenantFeatureGate(store, tenant_repository, feature_repository, table_manager, settings)
    provisioning = TenantProvisioningService(
        store,
        tenant_repository,
        license_repository,
        feature_repository,
        probe,
        gate,
        settings=settings,
    )
    catalog = FeatureCatalogService(store, feature_repository, tenant_repository, gate)
    return ServiceContainer(provisioning=provisioning, feature_gate=gate, catalog=catalog)


def install_services(app: FastAPI, services: ServiceContainer) -> None:
    """Replace the router placeholder dependencies with real services."""
    app.dependency_overrides[get_provisioning_service] = lambda: services.provisioning
    app.dependency_overrides[get_feature_gate] = lambda: services.feature_gate
    app.dependency_overrides[get_catalog_service] = lambda: services.catalog


def create_app(
    settings: Optional[TenancySettings] = None,
    services: Optional[ServiceContainer] = None,
) -> FastAPI:
    """Create the control-plane API.

    Without ``services`` the lifespan opens the control-plane pool, applies
    the schema and builds the services.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if services is not None:
            yield
            return

        store = await AsyncpgControlPlaneStore.create(settings)
        try:
            await store.ensure_schema()
            install_services(app, build_services(store, settings))
            logger.info(f"{settings.app_name} {__version__} started ({settings.environment})")
            yield
        finally:
            await store.close()
            logger.info(f"{settings.app_name} stopped")

    app = FastAPI(
        title="Neo Tenancy API",
        version=__version__,
        description="Tenant provisioning, database topology and feature tables",
        debug=settings.debug,
        lifespan=lifespan,
    )

    register_exception_handlers(app, is_production=settings.is_production)

    app.include_router(tenant_router, prefix=API_PREFIX)
    app.include_router(tenant_features_router, prefix=API_PREFIX)
    app.include_router(feature_router, prefix=API_PREFIX)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok", "version": __version__}

    if services is not None:
        install_services(app, services)

    return app


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings)
    uvicorn.run(
        "neo_tenancy.api.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_config=None,
    )
