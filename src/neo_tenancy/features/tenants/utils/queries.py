"""Tenant and license SQL query constants."""

TENANT_INSERT = """
    INSERT INTO tenants (
        id, name, slug, tenant_type, contact_email, contact_phone,
        database_topology, database_status, database_host, database_port,
        database_name, database_user, database_password_encrypted,
        database_url_encrypted, database_ssl, can_edit_database, managed_by,
        routing_url, last_checked_at, last_error, is_active, created_at, updated_at
    ) VALUES (
        $1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14, $15, $16,
        $17, $18, $19, $20, $21, $22, $23
    ) RETURNING *
"""

TENANT_UPDATE_DATABASE_CONFIG = """
    UPDATE tenants SET
        database_topology = $2,
        database_status = $3,
        database_host = $4,
        database_port = $5,
        database_name = $6,
        database_user = $7,
        database_password_encrypted = $8,
        database_url_encrypted = $9,
        database_ssl = $10,
        can_edit_database = $11,
        managed_by = $12,
        last_checked_at = $13,
        last_error = $14,
        updated_at = $15
    WHERE id = $1
    RETURNING *
"""

TENANT_GET_BY_ID = "SELECT * FROM tenants WHERE id = $1"

TENANT_SLUG_EXISTS = "SELECT EXISTS(SELECT 1 FROM tenants WHERE slug = $1)"

TENANT_ROUTING_URL_EXISTS = "SELECT EXISTS(SELECT 1 FROM tenants WHERE routing_url = $1)"

TENANT_COUNT = "SELECT COUNT(*) FROM tenants"

TENANT_LIST_ACTIVE_IDS = "SELECT id FROM tenants WHERE is_active = true ORDER BY created_at"

TENANT_COUNT_BY_DATABASE_STATUS = """
    SELECT database_status, COUNT(*) AS count
    FROM tenants
    GROUP BY database_status
"""

TENANT_DEACTIVATE = """
    UPDATE tenants SET is_active = false, updated_at = $2
    WHERE id = $1 AND is_active = true
"""

# License plans
LICENSE_PLAN_GET_BY_ID = "SELECT * FROM license_plans WHERE id = $1 AND is_active = true"

LICENSE_PLAN_GET_BY_NAME = "SELECT * FROM license_plans WHERE name = $1 AND is_active = true"

LICENSE_PLAN_GET_CHEAPEST = """
    SELECT * FROM license_plans
    WHERE is_active = true
    ORDER BY base_price ASC, created_at ASC
    LIMIT 1
"""

# Tenant licenses
TENANT_LICENSE_INSERT = """
    INSERT INTO tenant_licenses (
        id, tenant_id, plan_id, status, trial_ends_at, enforce_session_limit,
        enforce_user_limit, enforce_api_limit, enforce_data_limit,
        soft_limit_mode, admin_notes, created_at, updated_at
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $12)
    RETURNING *
"""
