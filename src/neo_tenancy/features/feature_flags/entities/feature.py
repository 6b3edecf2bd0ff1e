"""Feature flag domain entities."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

FEATURE_KEY_PATTERN = re.compile(r'^[a-z0-9_]+$')


@dataclass
class FeatureFlag:
    """Platform-wide feature definition. ``feature_key`` is immutable."""

    id: str
    feature_key: str
    name: str
    description: Optional[str] = None
    category: str = "general"
    is_global: bool = False
    default_enabled: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not self.feature_key or not FEATURE_KEY_PATTERN.match(self.feature_key):
            raise ValueError("Feature key can only contain lowercase letters, numbers, and underscores")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "feature_key": self.feature_key,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "is_global": self.is_global,
            "default_enabled": self.default_enabled,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class TenantFeature:
    """Per-tenant grant of a feature. One row per (tenant, feature)."""

    id: str
    tenant_id: str
    feature_id: str
    is_enabled: bool = False
    settings: Dict[str, Any] = field(default_factory=dict)
    feature_key: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "feature_id": self.feature_id,
            "feature_key": self.feature_key,
            "is_enabled": self.is_enabled,
            "settings": self.settings,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
