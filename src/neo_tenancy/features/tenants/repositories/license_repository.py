"""License plan and tenant license repository using asyncpg."""

import logging
from decimal import Decimal
from typing import Any, Optional

from ..entities.license import LicensePlan, TenantLicense
from ..entities.protocols import LicenseRepository
from ..utils.queries import (
    LICENSE_PLAN_GET_BY_ID,
    LICENSE_PLAN_GET_BY_NAME,
    LICENSE_PLAN_GET_CHEAPEST,
    TENANT_LICENSE_INSERT,
)

logger = logging.getLogger(__name__)


class AsyncpgLicenseRepository(LicenseRepository):
    """License persistence over an asyncpg connection."""

    async def find_plan_by_id(self, conn: Any, plan_id: str) -> Optional[LicensePlan]:
        row = await conn.fetchrow(LICENSE_PLAN_GET_BY_ID, plan_id)
        return self._map_row_to_plan(row) if row else None

    async def find_plan_by_name(self, conn: Any, name: str) -> Optional[LicensePlan]:
        row = await conn.fetchrow(LICENSE_PLAN_GET_BY_NAME, name)
        return self._map_row_to_plan(row) if row else None

    async def find_cheapest_active_plan(self, conn: Any) -> Optional[LicensePlan]:
        row = await conn.fetchrow(LICENSE_PLAN_GET_CHEAPEST)
        return self._map_row_to_plan(row) if row else None

    async def insert_license(self, conn: Any, license: TenantLicense) -> TenantLicense:
        await conn.execute(
            TENANT_LICENSE_INSERT,
            license.id, license.tenant_id, license.plan_id, license.status.value,
            license.trial_ends_at, license.enforce_session_limit, license.enforce_user_limit,
            license.enforce_api_limit, license.enforce_data_limit, license.soft_limit_mode,
            license.admin_notes, license.created_at,
        )
        logger.info(f"Created {license.status.value} license {license.id} for tenant {license.tenant_id}")
        return license

    @staticmethod
    def _map_row_to_plan(row: Any) -> LicensePlan:
        return LicensePlan(
            id=row["id"],
            name=row["name"],
            plan_type=row["plan_type"],
            base_price=Decimal(row["base_price"]),
            max_users=row["max_users"],
            max_sessions=row["max_sessions"],
            is_active=row["is_active"],
        )
