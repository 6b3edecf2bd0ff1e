"""Results of feature table provisioning and feature toggles."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .feature import TenantFeature


@dataclass(frozen=True)
class FeatureTablesResult:
    """Outcome of ensuring a feature's tables for one tenant.

    At most one of ``created`` and ``already_existed`` is true, and both
    are false when the feature needs no tables.
    """

    feature_key: str
    required: bool
    created: bool = False
    already_existed: bool = False
    tables: Tuple[str, ...] = ()

    @classmethod
    def not_required(cls, feature_key: str) -> "FeatureTablesResult":
        return cls(feature_key=feature_key, required=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "feature_key": self.feature_key,
            "required": self.required,
            "created": self.created,
            "already_existed": self.already_existed,
            "tables": list(self.tables),
        }


@dataclass(frozen=True)
class FeatureToggleResult:
    """Outcome of enabling or disabling a feature for one tenant."""

    tenant_id: str
    feature_key: str
    enabled: bool
    tenant_feature: Optional[TenantFeature] = None
    tables: Optional[FeatureTablesResult] = None
    error: Optional[Dict[str, Any]] = field(default=None)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        tables = self.tables.to_dict() if self.tables else None
        return {
            "tenant_id": self.tenant_id,
            "feature_key": self.feature_key,
            "enabled": self.enabled,
            "succeeded": self.succeeded,
            "required": tables["required"] if tables else False,
            "created": tables["created"] if tables else False,
            "already_existed": tables["already_existed"] if tables else False,
            "tables": tables["tables"] if tables else [],
            "settings": self.tenant_feature.settings if self.tenant_feature else None,
            "error": self.error,
        }
