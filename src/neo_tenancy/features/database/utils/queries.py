"""Database query constants for the control plane and tenant target databases."""

# Target database: which of the given tables exist in the current schema
TABLES_EXISTING = """
    SELECT table_name FROM information_schema.tables
    WHERE table_schema = current_schema() AND table_name = ANY($1::text[])
"""

# Target database: serialize check-then-create per feature within one database.
# Released automatically at commit or rollback.
ADVISORY_XACT_LOCK = "SELECT pg_advisory_xact_lock($1::bigint)"

# Control-plane schema. Kept in sync with migrations/V001__control_plane.sql.
CONTROL_PLANE_SCHEMA = """
CREATE TABLE IF NOT EXISTS tenants (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    slug TEXT NOT NULL,
    tenant_type TEXT NOT NULL DEFAULT 'INDIVIDUAL_CANDIDATE',
    contact_email TEXT,
    contact_phone TEXT,
    database_topology TEXT NOT NULL DEFAULT 'NONE',
    database_status TEXT NOT NULL DEFAULT 'NOT_CONFIGURED',
    database_host TEXT,
    database_port INTEGER,
    database_name TEXT,
    database_user TEXT,
    database_password_encrypted TEXT,
    database_url_encrypted TEXT,
    database_ssl BOOLEAN NOT NULL DEFAULT FALSE,
    can_edit_database BOOLEAN NOT NULL DEFAULT TRUE,
    managed_by TEXT,
    routing_url TEXT NOT NULL,
    last_checked_at TIMESTAMPTZ,
    last_error TEXT,
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT tenants_slug_key UNIQUE (slug),
    CONSTRAINT tenants_routing_url_key UNIQUE (routing_url),
    CONSTRAINT tenants_database_topology_check
        CHECK (database_topology IN ('NONE', 'SHARED', 'DEDICATED_MANAGED', 'DEDICATED_SELF')),
    CONSTRAINT tenants_managed_by_check
        CHECK (managed_by IS NULL OR managed_by IN ('platform', 'tenant'))
);

CREATE INDEX IF NOT EXISTS tenants_database_status_idx ON tenants (database_status);

CREATE TABLE IF NOT EXISTS license_plans (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    plan_type TEXT NOT NULL DEFAULT 'STANDARD',
    base_price NUMERIC(12, 2) NOT NULL DEFAULT 0,
    max_users INTEGER,
    max_sessions INTEGER,
    is_active BOOLEAN NOT NULL DEFAULT TRUE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT license_plans_name_key UNIQUE (name)
);

CREATE TABLE IF NOT EXISTS tenant_licenses (
    id TEXT PRIMARY KEY,
    tenant_id TEXT NOT NULL REFERENCES tenants (id) ON DELETE CASCADE,
    plan_id TEXT NOT NULL REFERENCES license_plans (id),
    status TEXT NOT NULL DEFAULT 'TRIAL',
    trial_ends_at TIMESTAMPTZ,
    enforce_session_limit BOOLEAN NOT NULL DEFAULT TRUE,
    enforce_user_limit BOOLEAN NOT NULL DEFAULT TRUE,
    enforce_api_limit BOOLEAN NOT NULL DEFAULT FALSE,
    enforce_data_limit BOOLEAN NOT NULL DEFAULT FALSE,
    soft_limit_mode BOOLEAN NOT NULL DEFAULT TRUE,
    admin_notes TEXT,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT tenant_licenses_tenant_id_key UNIQUE (tenant_id)
);

CREATE TABLE IF NOT EXISTS feature_flags (
    id TEXT PRIMARY KEY,
    feature_key TEXT NOT NULL,
    name TEXT NOT NULL,
    description TEXT,
    category TEXT NOT NULL DEFAULT 'general',
    is_global BOOLEAN NOT NULL DEFAULT FALSE,
    default_enabled BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT feature_flags_feature_key_key UNIQUE (feature_key)
);

CREATE TABLE IF NOT EXISTS tenant_features (
    id TEXT PRIMARY KEY,
    tenant_id TEXT NOT NULL REFERENCES tenants (id) ON DELETE CASCADE,
    feature_id TEXT NOT NULL REFERENCES feature_flags (id) ON DELETE CASCADE,
    is_enabled BOOLEAN NOT NULL DEFAULT FALSE,
    settings JSONB NOT NULL DEFAULT '{}'::jsonb,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CONSTRAINT tenant_features_tenant_id_feature_id_key UNIQUE (tenant_id, feature_id)
);

CREATE INDEX IF NOT EXISTS tenant_features_tenant_id_idx ON tenant_features (tenant_id);
"""
