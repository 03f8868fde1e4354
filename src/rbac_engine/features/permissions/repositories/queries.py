"""SQL statements for the asyncpg permission repository."""

# Schema

CREATE_SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS permissions (
        id TEXT PRIMARY KEY,
        code TEXT NOT NULL UNIQUE,
        description TEXT,
        category TEXT NOT NULL,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS roles (
        id TEXT PRIMARY KEY,
        tenant_id TEXT,
        name TEXT NOT NULL,
        description TEXT,
        is_system_default BOOLEAN NOT NULL DEFAULT FALSE,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    # NULL tenant_id is distinct in a plain UNIQUE constraint
    """
    CREATE UNIQUE INDEX IF NOT EXISTS roles_tenant_name_key
        ON roles (COALESCE(tenant_id, ''), name)
    """,
    """
    CREATE TABLE IF NOT EXISTS role_permissions (
        role_id TEXT NOT NULL REFERENCES roles(id) ON DELETE CASCADE,
        permission_id TEXT NOT NULL REFERENCES permissions(id) ON DELETE CASCADE,
        PRIMARY KEY (role_id, permission_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS user_roles (
        user_id TEXT NOT NULL,
        role_id TEXT NOT NULL REFERENCES roles(id) ON DELETE CASCADE,
        assigned_by TEXT,
        assigned_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        PRIMARY KEY (user_id, role_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS user_permission_overrides (
        user_id TEXT NOT NULL,
        permission_id TEXT NOT NULL REFERENCES permissions(id) ON DELETE CASCADE,
        allow BOOLEAN NOT NULL,
        created_by TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        PRIMARY KEY (user_id, permission_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS teams (
        id TEXT PRIMARY KEY,
        tenant_id TEXT NOT NULL,
        name TEXT NOT NULL,
        description TEXT,
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS team_members (
        team_id TEXT NOT NULL REFERENCES teams(id) ON DELETE CASCADE,
        user_id TEXT NOT NULL,
        joined_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        PRIMARY KEY (team_id, user_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS team_roles (
        team_id TEXT NOT NULL REFERENCES teams(id) ON DELETE CASCADE,
        role_id TEXT NOT NULL REFERENCES roles(id) ON DELETE CASCADE,
        assigned_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        PRIMARY KEY (team_id, role_id)
    )
    """,
    "CREATE INDEX IF NOT EXISTS user_roles_role_idx ON user_roles (role_id)",
    "CREATE INDEX IF NOT EXISTS team_members_user_idx ON team_members (user_id)",
    "CREATE INDEX IF NOT EXISTS team_roles_role_idx ON team_roles (role_id)",
)

# Permissions

LIST_PERMISSIONS = """
    SELECT id, code, category, description, created_at
    FROM permissions
    ORDER BY code
"""

GET_PERMISSIONS_BY_CODES = """
    SELECT id, code, category, description, created_at
    FROM permissions
    WHERE code = ANY($1::text[])
    ORDER BY code
"""

INSERT_PERMISSION_IF_MISSING = """
    INSERT INTO permissions (id, code, category, description, created_at)
    VALUES ($1, $2, $3, $4, COALESCE($5, now()))
    ON CONFLICT (code) DO NOTHING
"""

# Calculator reads

GET_USER_ROLE_IDS = "SELECT role_id FROM user_roles WHERE user_id = $1"

GET_USER_TEAM_ROLE_IDS = """
    SELECT DISTINCT tr.role_id
    FROM team_members tm
    JOIN team_roles tr ON tr.team_id = tm.team_id
    WHERE tm.user_id = $1
"""

GET_ROLE_PERMISSION_CODES = """
    SELECT DISTINCT p.code
    FROM role_permissions rp
    JOIN permissions p ON p.id = rp.permission_id
    WHERE rp.role_id = ANY($1::text[])
"""

GET_USER_OVERRIDES = """
    SELECT o.user_id, o.permission_id, p.code AS permission_code,
           o.allow, o.created_by, o.created_at
    FROM user_permission_overrides o
    JOIN permissions p ON p.id = o.permission_id
    WHERE o.user_id = $1
    ORDER BY p.code
"""

# Roles

_ROLE_COLUMNS = """
    r.id, r.tenant_id, r.name, r.description, r.is_system_default,
    r.created_at, r.updated_at,
    COALESCE(
        ARRAY(
            SELECT p.code FROM role_permissions rp
            JOIN permissions p ON p.id = rp.permission_id
            WHERE rp.role_id = r.id
        ),
        ARRAY[]::text[]
    ) AS permission_codes
"""

GET_ROLE = f"SELECT {_ROLE_COLUMNS} FROM roles r WHERE r.id = $1"

GET_ROLE_BY_NAME = f"""
    SELECT {_ROLE_COLUMNS} FROM roles r
    WHERE r.tenant_id IS NOT DISTINCT FROM $1 AND r.name = $2
"""

LIST_ROLES = f"""
    SELECT {_ROLE_COLUMNS} FROM roles r
    WHERE r.tenant_id IS NULL OR r.tenant_id = $1
    ORDER BY (r.tenant_id IS NOT NULL), r.name
"""

INSERT_ROLE = """
    INSERT INTO roles (id, tenant_id, name, description, is_system_default, created_at, updated_at)
    VALUES ($1, $2, $3, $4, $5, $6, $7)
"""

UPDATE_ROLE = """
    UPDATE roles
    SET name = $2, description = $3, updated_at = $4
    WHERE id = $1
"""

DELETE_ROLE_PERMISSIONS = "DELETE FROM role_permissions WHERE role_id = $1"

INSERT_ROLE_PERMISSIONS = """
    INSERT INTO role_permissions (role_id, permission_id)
    SELECT $1, unnest($2::text[])
    ON CONFLICT DO NOTHING
"""

# Users already holding the target keep their existing row
REASSIGN_USER_ROLES = """
    INSERT INTO user_roles (user_id, role_id, assigned_by, assigned_at)
    SELECT user_id, $2, assigned_by, now()
    FROM user_roles
    WHERE role_id = $1
    ON CONFLICT (user_id, role_id) DO NOTHING
"""

DELETE_ROLE = "DELETE FROM roles WHERE id = $1"

GET_ROLE_USER_IDS = "SELECT user_id FROM user_roles WHERE role_id = $1"

GET_ROLE_TEAM_MEMBER_IDS = """
    SELECT DISTINCT tm.user_id
    FROM team_roles tr
    JOIN team_members tm ON tm.team_id = tr.team_id
    WHERE tr.role_id = $1
"""

INSERT_USER_ROLE = """
    INSERT INTO user_roles (user_id, role_id, assigned_by, assigned_at)
    VALUES ($1, $2, $3, $4)
    ON CONFLICT (user_id, role_id) DO NOTHING
"""

DELETE_USER_ROLE = "DELETE FROM user_roles WHERE user_id = $1 AND role_id = $2"

# Teams

_TEAM_COLUMNS = "id, tenant_id, name, description, created_at, updated_at"

GET_TEAM = f"SELECT {_TEAM_COLUMNS} FROM teams WHERE id = $1"

LIST_TEAMS = f"SELECT {_TEAM_COLUMNS} FROM teams WHERE tenant_id = $1 ORDER BY name"

INSERT_TEAM = """
    INSERT INTO teams (id, tenant_id, name, description, created_at, updated_at)
    VALUES ($1, $2, $3, $4, $5, $6)
"""

UPDATE_TEAM = """
    UPDATE teams
    SET name = $2, description = $3, updated_at = $4
    WHERE id = $1
"""

DELETE_TEAM = "DELETE FROM teams WHERE id = $1"

GET_TEAM_MEMBER_IDS = "SELECT user_id FROM team_members WHERE team_id = $1"

GET_TEAM_ROLE_IDS = "SELECT role_id FROM team_roles WHERE team_id = $1"

INSERT_TEAM_MEMBER = """
    INSERT INTO team_members (team_id, user_id)
    VALUES ($1, $2)
    ON CONFLICT (team_id, user_id) DO NOTHING
"""

DELETE_TEAM_MEMBER = "DELETE FROM team_members WHERE team_id = $1 AND user_id = $2"

INSERT_TEAM_ROLE = """
    INSERT INTO team_roles (team_id, role_id)
    VALUES ($1, $2)
    ON CONFLICT (team_id, role_id) DO NOTHING
"""

DELETE_TEAM_ROLE = "DELETE FROM team_roles WHERE team_id = $1 AND role_id = $2"

# Overrides

UPSERT_OVERRIDE = """
    INSERT INTO user_permission_overrides (user_id, permission_id, allow, created_by, created_at)
    VALUES ($1, $2, $3, $4, $5)
    ON CONFLICT (user_id, permission_id)
    DO UPDATE SET allow = EXCLUDED.allow,
                  created_by = EXCLUDED.created_by,
                  created_at = EXCLUDED.created_at
"""

DELETE_OVERRIDE = """
    DELETE FROM user_permission_overrides
    WHERE user_id = $1 AND permission_id = $2
"""
