"""Tenant utilities."""

from .validation import TenantValidationRules

__all__ = ["TenantValidationRules"]
