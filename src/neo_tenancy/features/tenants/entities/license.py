"""License plan and tenant license entities."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from ....config.constants import LicenseStatus
from ....utils.uuid import generate_uuid_v7


@dataclass(frozen=True)
class LicensePlan:
    """A row of the plan catalog."""

    id: str
    name: str
    plan_type: str = "STANDARD"
    base_price: Decimal = Decimal("0")
    max_users: Optional[int] = None
    max_sessions: Optional[int] = None
    is_active: bool = True


@dataclass
class TenantLicense:
    """A tenant's license. Always created in the same transaction as its tenant."""

    id: str
    tenant_id: str
    plan_id: str
    status: LicenseStatus = LicenseStatus.TRIAL
    trial_ends_at: Optional[datetime] = None
    enforce_session_limit: bool = True
    enforce_user_limit: bool = True
    enforce_api_limit: bool = False
    enforce_data_limit: bool = False
    soft_limit_mode: bool = True
    admin_notes: Optional[str] = None
    plan_name: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def trial(cls, tenant_id: str, plan: LicensePlan, trial_days: int) -> "TenantLicense":
        """Auto-created trial license for a new tenant."""
        now = datetime.now(timezone.utc)
        return cls(
            id=generate_uuid_v7(),
            tenant_id=tenant_id,
            plan_id=plan.id,
            plan_name=plan.name,
            status=LicenseStatus.TRIAL,
            trial_ends_at=now + timedelta(days=trial_days),
            admin_notes=f"Auto-created trial license for {trial_days} days",
            created_at=now,
        )

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "plan_id": self.plan_id,
            "plan_name": self.plan_name,
            "status": self.status.value,
            "trial_ends_at": self.trial_ends_at.isoformat() if self.trial_ends_at else None,
        }
