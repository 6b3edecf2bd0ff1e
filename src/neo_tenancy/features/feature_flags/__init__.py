"""Feature flags and per-tenant feature tables."""
