"""Tenant provisioning feature."""
