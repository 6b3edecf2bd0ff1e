"""Feature flag and tenant feature SQL query constants."""

FEATURE_FLAG_INSERT = """
    INSERT INTO feature_flags (
        id, feature_key, name, description, category, is_global,
        default_enabled, created_at, updated_at
    ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9)
    RETURNING *
"""

FEATURE_FLAG_GET_BY_KEY = "SELECT * FROM feature_flags WHERE feature_key = $1"

FEATURE_FLAG_GET_BY_KEYS = "SELECT * FROM feature_flags WHERE feature_key = ANY($1::text[])"

FEATURE_FLAG_LIST = """
    SELECT * FROM feature_flags
    WHERE ($1::text IS NULL OR category = $1)
    ORDER BY category, name
"""

FEATURE_FLAG_SET_DEFAULT_ENABLED = """
    UPDATE feature_flags SET default_enabled = $2, updated_at = NOW()
    WHERE feature_key = $1
    RETURNING *
"""

# One grant per (tenant, feature); NULL settings keep the stored value
TENANT_FEATURE_UPSERT = """
    INSERT INTO tenant_features (id, tenant_id, feature_id, is_enabled, settings, created_at, updated_at)
    VALUES ($1, $2, $3, $4, COALESCE($5::jsonb, '{}'::jsonb), NOW(), NOW())
    ON CONFLICT (tenant_id, feature_id) DO UPDATE SET
        is_enabled = EXCLUDED.is_enabled,
        settings = COALESCE($5::jsonb, tenant_features.settings),
        updated_at = NOW()
    RETURNING *, (SELECT feature_key FROM feature_flags WHERE id = $3) AS feature_key
"""

TENANT_FEATURE_LIST = """
    SELECT tf.*, f.feature_key
    FROM tenant_features tf
    JOIN feature_flags f ON f.id = tf.feature_id
    WHERE tf.tenant_id = $1
    ORDER BY f.category, f.name
"""
