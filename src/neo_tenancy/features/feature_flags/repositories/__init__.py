"""Feature flag repositories."""

from .feature_repository import AsyncpgFeatureRepository

__all__ = ["AsyncpgFeatureRepository"]
