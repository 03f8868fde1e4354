"""Constants and enums for rbac-engine.

This module defines the canonical permission vocabulary, the category grouping
used when seeding the ``permissions`` table, the default role bundles, and the
cache/channel naming used across the engine.
"""

from enum import Enum
from typing import Dict, Final, FrozenSet, List


# Bumped whenever a code is added to the vocabulary. Codes are never renamed.
PERMISSION_VOCABULARY_VERSION: Final[int] = 1


class PERMISSIONS:
    """Canonical permission codes."""

    # Authentication & Session
    AUTH_LOGIN: Final[str] = "auth.login"
    AUTH_LOGOUT: Final[str] = "auth.logout"
    AUTH_IMPERSONATE: Final[str] = "auth.impersonate"

    # User Management
    USERS_READ: Final[str] = "users.read"
    USERS_CREATE: Final[str] = "users.create"
    USERS_UPDATE: Final[str] = "users.update"
    USERS_DELETE: Final[str] = "users.delete"
    USERS_INVITE: Final[str] = "users.invite"
    USERS_DEACTIVATE: Final[str] = "users.deactivate"

    # Role Management
    ROLES_READ: Final[str] = "roles.read"
    ROLES_CREATE: Final[str] = "roles.create"
    ROLES_UPDATE: Final[str] = "roles.update"
    ROLES_DELETE: Final[str] = "roles.delete"
    ROLES_ASSIGN: Final[str] = "roles.assign"
    ROLES_REVOKE: Final[str] = "roles.revoke"

    # Team Management
    TEAMS_READ: Final[str] = "teams.read"
    TEAMS_CREATE: Final[str] = "teams.create"
    TEAMS_UPDATE: Final[str] = "teams.update"
    TEAMS_DELETE: Final[str] = "teams.delete"
    TEAMS_MANAGE_MEMBERS: Final[str] = "teams.manage_members"
    TEAMS_ASSIGN_ROLES: Final[str] = "teams.assign_roles"

    # Customer Management
    CUSTOMERS_READ: Final[str] = "customers.read"
    CUSTOMERS_CREATE: Final[str] = "customers.create"
    CUSTOMERS_UPDATE: Final[str] = "customers.update"
    CUSTOMERS_DELETE: Final[str] = "customers.delete"
    CUSTOMERS_EXPORT: Final[str] = "customers.export"

    # Ticket Management
    TICKETS_READ: Final[str] = "tickets.read"
    TICKETS_CREATE: Final[str] = "tickets.create"
    TICKETS_UPDATE: Final[str] = "tickets.update"
    TICKETS_DELETE: Final[str] = "tickets.delete"
    TICKETS_ASSIGN: Final[str] = "tickets.assign"
    TICKETS_CLOSE: Final[str] = "tickets.close"

    # Message Management
    MESSAGES_READ: Final[str] = "messages.read"
    MESSAGES_CREATE: Final[str] = "messages.create"
    MESSAGES_UPDATE: Final[str] = "messages.update"
    MESSAGES_DELETE: Final[str] = "messages.delete"

    # Integration Management
    INTEGRATIONS_READ: Final[str] = "integrations.read"
    INTEGRATIONS_CONNECT: Final[str] = "integrations.connect"
    INTEGRATIONS_DISCONNECT: Final[str] = "integrations.disconnect"
    INTEGRATIONS_MANAGE: Final[str] = "integrations.manage"

    # Settings & Configuration
    SETTINGS_READ: Final[str] = "settings.read"
    SETTINGS_UPDATE: Final[str] = "settings.update"
    SETTINGS_BRANDING: Final[str] = "settings.branding"
    SETTINGS_FEATURES: Final[str] = "settings.features"

    # Billing & Subscription
    BILLING_READ: Final[str] = "billing.read"
    BILLING_MANAGE: Final[str] = "billing.manage"
    BILLING_UPGRADE: Final[str] = "billing.upgrade"
    BILLING_DOWNGRADE: Final[str] = "billing.downgrade"

    # Analytics & Reports
    ANALYTICS_READ: Final[str] = "analytics.read"
    ANALYTICS_EXPORT: Final[str] = "analytics.export"
    REPORTS_CREATE: Final[str] = "reports.create"
    REPORTS_VIEW: Final[str] = "reports.view"

    # Tenant Management (Super Admin)
    TENANT_READ: Final[str] = "tenant.read"
    TENANT_CREATE: Final[str] = "tenant.create"
    TENANT_UPDATE: Final[str] = "tenant.update"
    TENANT_DELETE: Final[str] = "tenant.delete"
    TENANT_SUSPEND: Final[str] = "tenant.suspend"
    TENANT_REACTIVATE: Final[str] = "tenant.reactivate"
    TENANT_EXPORT: Final[str] = "tenant.export"
    TENANT_IMPORT: Final[str] = "tenant.import"

    # Audit & Logs
    AUDIT_READ: Final[str] = "audit.read"
    AUDIT_EXPORT: Final[str] = "audit.export"

    # Files & Attachments
    FILES_READ: Final[str] = "files.read"
    FILES_UPLOAD: Final[str] = "files.upload"
    FILES_DELETE: Final[str] = "files.delete"

    # Phone Calls
    CALLS_READ: Final[str] = "calls.read"
    CALLS_CREATE: Final[str] = "calls.create"
    CALLS_UPDATE: Final[str] = "calls.update"
    CALLS_INITIATE: Final[str] = "calls.initiate"
    CALLS_RECORD: Final[str] = "calls.record"

    # Notifications
    NOTIFICATIONS_READ: Final[str] = "notifications.read"
    NOTIFICATIONS_SEND: Final[str] = "notifications.send"
    NOTIFICATIONS_MANAGE: Final[str] = "notifications.manage"


class PermissionCategory(str, Enum):
    """Permission categories stored in ``permissions.category``."""

    AUTH = "auth"
    USERS = "users"
    ROLES = "roles"
    TEAMS = "teams"
    CUSTOMERS = "customers"
    TICKETS = "tickets"
    MESSAGES = "messages"
    INTEGRATIONS = "integrations"
    SETTINGS = "settings"
    BILLING = "billing"
    ANALYTICS = "analytics"
    TENANT = "tenant"
    AUDIT = "audit"
    FILES = "files"
    CALLS = "calls"
    NOTIFICATIONS = "notifications"


PERMISSION_CATEGORIES: Dict[PermissionCategory, List[str]] = {
    PermissionCategory.AUTH: [
        PERMISSIONS.AUTH_LOGIN,
        PERMISSIONS.AUTH_LOGOUT,
        PERMISSIONS.AUTH_IMPERSONATE,
    ],
    PermissionCategory.USERS: [
        PERMISSIONS.USERS_READ,
        PERMISSIONS.USERS_CREATE,
        PERMISSIONS.USERS_UPDATE,
        PERMISSIONS.USERS_DELETE,
        PERMISSIONS.USERS_INVITE,
        PERMISSIONS.USERS_DEACTIVATE,
    ],
    PermissionCategory.ROLES: [
        PERMISSIONS.ROLES_READ,
        PERMISSIONS.ROLES_CREATE,
        PERMISSIONS.ROLES_UPDATE,
        PERMISSIONS.ROLES_DELETE,
        PERMISSIONS.ROLES_ASSIGN,
        PERMISSIONS.ROLES_REVOKE,
    ],
    PermissionCategory.TEAMS: [
        PERMISSIONS.TEAMS_READ,
        PERMISSIONS.TEAMS_CREATE,
        PERMISSIONS.TEAMS_UPDATE,
        PERMISSIONS.TEAMS_DELETE,
        PERMISSIONS.TEAMS_MANAGE_MEMBERS,
        PERMISSIONS.TEAMS_ASSIGN_ROLES,
    ],
    PermissionCategory.CUSTOMERS: [
        PERMISSIONS.CUSTOMERS_READ,
        PERMISSIONS.CUSTOMERS_CREATE,
        PERMISSIONS.CUSTOMERS_UPDATE,
        PERMISSIONS.CUSTOMERS_DELETE,
        PERMISSIONS.CUSTOMERS_EXPORT,
    ],
    PermissionCategory.TICKETS: [
        PERMISSIONS.TICKETS_READ,
        PERMISSIONS.TICKETS_CREATE,
        PERMISSIONS.TICKETS_UPDATE,
        PERMISSIONS.TICKETS_DELETE,
        PERMISSIONS.TICKETS_ASSIGN,
        PERMISSIONS.TICKETS_CLOSE,
    ],
    PermissionCategory.MESSAGES: [
        PERMISSIONS.MESSAGES_READ,
        PERMISSIONS.MESSAGES_CREATE,
        PERMISSIONS.MESSAGES_UPDATE,
        PERMISSIONS.MESSAGES_DELETE,
    ],
    PermissionCategory.INTEGRATIONS: [
        PERMISSIONS.INTEGRATIONS_READ,
        PERMISSIONS.INTEGRATIONS_CONNECT,
        PERMISSIONS.INTEGRATIONS_DISCONNECT,
        PERMISSIONS.INTEGRATIONS_MANAGE,
    ],
    PermissionCategory.SETTINGS: [
        PERMISSIONS.SETTINGS_READ,
        PERMISSIONS.SETTINGS_UPDATE,
        PERMISSIONS.SETTINGS_BRANDING,
        PERMISSIONS.SETTINGS_FEATURES,
    ],
    PermissionCategory.BILLING: [
        PERMISSIONS.BILLING_READ,
        PERMISSIONS.BILLING_MANAGE,
        PERMISSIONS.BILLING_UPGRADE,
        PERMISSIONS.BILLING_DOWNGRADE,
    ],
    PermissionCategory.ANALYTICS: [
        PERMISSIONS.ANALYTICS_READ,
        PERMISSIONS.ANALYTICS_EXPORT,
        PERMISSIONS.REPORTS_CREATE,
        PERMISSIONS.REPORTS_VIEW,
    ],
    PermissionCategory.TENANT: [
        PERMISSIONS.TENANT_READ,
        PERMISSIONS.TENANT_CREATE,
        PERMISSIONS.TENANT_UPDATE,
        PERMISSIONS.TENANT_DELETE,
        PERMISSIONS.TENANT_SUSPEND,
        PERMISSIONS.TENANT_REACTIVATE,
        PERMISSIONS.TENANT_EXPORT,
        PERMISSIONS.TENANT_IMPORT,
    ],
    PermissionCategory.AUDIT: [
        PERMISSIONS.AUDIT_READ,
        PERMISSIONS.AUDIT_EXPORT,
    ],
    PermissionCategory.FILES: [
        PERMISSIONS.FILES_READ,
        PERMISSIONS.FILES_UPLOAD,
        PERMISSIONS.FILES_DELETE,
    ],
    PermissionCategory.CALLS: [
        PERMISSIONS.CALLS_READ,
        PERMISSIONS.CALLS_CREATE,
        PERMISSIONS.CALLS_UPDATE,
        PERMISSIONS.CALLS_INITIATE,
        PERMISSIONS.CALLS_RECORD,
    ],
    PermissionCategory.NOTIFICATIONS: [
        PERMISSIONS.NOTIFICATIONS_READ,
        PERMISSIONS.NOTIFICATIONS_SEND,
        PERMISSIONS.NOTIFICATIONS_MANAGE,
    ],
}


PERMISSION_DESCRIPTIONS: Dict[str, str] = {
    PERMISSIONS.AUTH_LOGIN: "Allow user to login",
    PERMISSIONS.AUTH_LOGOUT: "Allow user to logout",
    PERMISSIONS.AUTH_IMPERSONATE: "Allow super-admin to impersonate users",
    PERMISSIONS.USERS_READ: "View users",
    PERMISSIONS.USERS_CREATE: "Create new users",
    PERMISSIONS.USERS_UPDATE: "Update user information",
    PERMISSIONS.USERS_DELETE: "Delete users",
    PERMISSIONS.USERS_INVITE: "Invite new users",
    PERMISSIONS.USERS_DEACTIVATE: "Deactivate users",
    PERMISSIONS.ROLES_READ: "View roles",
    PERMISSIONS.ROLES_CREATE: "Create new roles",
    PERMISSIONS.ROLES_UPDATE: "Update role permissions",
    PERMISSIONS.ROLES_DELETE: "Delete roles",
    PERMISSIONS.ROLES_ASSIGN: "Assign roles to users",
    PERMISSIONS.ROLES_REVOKE: "Revoke roles from users",
    PERMISSIONS.TEAMS_READ: "View teams",
    PERMISSIONS.TEAMS_CREATE: "Create new teams",
    PERMISSIONS.TEAMS_UPDATE: "Update team information",
    PERMISSIONS.TEAMS_DELETE: "Delete teams",
    PERMISSIONS.TEAMS_MANAGE_MEMBERS: "Add/remove team members",
    PERMISSIONS.TEAMS_ASSIGN_ROLES: "Assign roles to teams",
    PERMISSIONS.CUSTOMERS_READ: "View customers",
    PERMISSIONS.CUSTOMERS_CREATE: "Create new customers",
    PERMISSIONS.CUSTOMERS_UPDATE: "Update customer information",
    PERMISSIONS.CUSTOMERS_DELETE: "Delete customers",
    PERMISSIONS.CUSTOMERS_EXPORT: "Export customer data",
    PERMISSIONS.TICKETS_READ: "View tickets",
    PERMISSIONS.TICKETS_CREATE: "Create new tickets",
    PERMISSIONS.TICKETS_UPDATE: "Update ticket information",
    PERMISSIONS.TICKETS_DELETE: "Delete tickets",
    PERMISSIONS.TICKETS_ASSIGN: "Assign tickets to users",
    PERMISSIONS.TICKETS_CLOSE: "Close tickets",
    PERMISSIONS.MESSAGES_READ: "View messages",
    PERMISSIONS.MESSAGES_CREATE: "Send messages",
    PERMISSIONS.MESSAGES_UPDATE: "Edit messages",
    PERMISSIONS.MESSAGES_DELETE: "Delete messages",
    PERMISSIONS.INTEGRATIONS_READ: "View integrations",
    PERMISSIONS.INTEGRATIONS_CONNECT: "Connect integrations",
    PERMISSIONS.INTEGRATIONS_DISCONNECT: "Disconnect integrations",
    PERMISSIONS.INTEGRATIONS_MANAGE: "Manage integration settings",
    PERMISSIONS.SETTINGS_READ: "View settings",
    PERMISSIONS.SETTINGS_UPDATE: "Update settings",
    PERMISSIONS.SETTINGS_BRANDING: "Update branding settings",
    PERMISSIONS.SETTINGS_FEATURES: "Update feature settings",
    PERMISSIONS.BILLING_READ: "View billing information",
    PERMISSIONS.BILLING_MANAGE: "Manage billing",
    PERMISSIONS.BILLING_UPGRADE: "Upgrade plan",
    PERMISSIONS.BILLING_DOWNGRADE: "Downgrade plan",
    PERMISSIONS.ANALYTICS_READ: "View analytics",
    PERMISSIONS.ANALYTICS_EXPORT: "Export analytics data",
    PERMISSIONS.REPORTS_CREATE: "Create reports",
    PERMISSIONS.REPORTS_VIEW: "View reports",
    PERMISSIONS.TENANT_READ: "View tenant information",
    PERMISSIONS.TENANT_CREATE: "Create new tenants",
    PERMISSIONS.TENANT_UPDATE: "Update tenant information",
    PERMISSIONS.TENANT_DELETE: "Delete tenants",
    PERMISSIONS.TENANT_SUSPEND: "Suspend tenants",
    PERMISSIONS.TENANT_REACTIVATE: "Reactivate tenants",
    PERMISSIONS.TENANT_EXPORT: "Export tenant data",
    PERMISSIONS.TENANT_IMPORT: "Import tenant data",
    PERMISSIONS.AUDIT_READ: "View audit logs",
    PERMISSIONS.AUDIT_EXPORT: "Export audit logs",
    PERMISSIONS.FILES_READ: "View files",
    PERMISSIONS.FILES_UPLOAD: "Upload files",
    PERMISSIONS.FILES_DELETE: "Delete files",
    PERMISSIONS.CALLS_READ: "View call logs",
    PERMISSIONS.CALLS_CREATE: "Log phone calls",
    PERMISSIONS.CALLS_UPDATE: "Update call logs",
    PERMISSIONS.CALLS_INITIATE: "Initiate phone calls",
    PERMISSIONS.CALLS_RECORD: "Record phone calls",
    PERMISSIONS.NOTIFICATIONS_READ: "View notifications",
    PERMISSIONS.NOTIFICATIONS_SEND: "Send notifications",
    PERMISSIONS.NOTIFICATIONS_MANAGE: "Manage notification settings",
}


def get_all_permissions() -> List[str]:
    """Get all permission codes in vocabulary order."""
    return [code for codes in PERMISSION_CATEGORIES.values() for code in codes]


ALL_PERMISSION_CODES: FrozenSet[str] = frozenset(get_all_permissions())


def is_valid_permission(code: str) -> bool:
    """Check if a permission code belongs to the vocabulary."""
    return code in ALL_PERMISSION_CODES


def get_permission_category(code: str) -> PermissionCategory:
    """Get the category a permission code is grouped under."""
    for category, codes in PERMISSION_CATEGORIES.items():
        if code in codes:
            return category
    raise KeyError(code)


# Default role bundles seeded per tenant
DEFAULT_ROLE_PERMISSIONS: Dict[str, List[str]] = {
    # Tenant Admin - Full access within tenant
    "Admin": [
        PERMISSIONS.USERS_READ,
        PERMISSIONS.USERS_CREATE,
        PERMISSIONS.USERS_UPDATE,
        PERMISSIONS.USERS_DELETE,
        PERMISSIONS.USERS_INVITE,
        PERMISSIONS.ROLES_READ,
        PERMISSIONS.ROLES_CREATE,
        PERMISSIONS.ROLES_UPDATE,
        PERMISSIONS.ROLES_DELETE,
        PERMISSIONS.ROLES_ASSIGN,
        PERMISSIONS.ROLES_REVOKE,
        PERMISSIONS.TEAMS_READ,
        PERMISSIONS.TEAMS_CREATE,
        PERMISSIONS.TEAMS_UPDATE,
        PERMISSIONS.TEAMS_DELETE,
        PERMISSIONS.TEAMS_MANAGE_MEMBERS,
        PERMISSIONS.TEAMS_ASSIGN_ROLES,
        PERMISSIONS.CUSTOMERS_READ,
        PERMISSIONS.CUSTOMERS_CREATE,
        PERMISSIONS.CUSTOMERS_UPDATE,
        PERMISSIONS.CUSTOMERS_DELETE,
        PERMISSIONS.TICKETS_READ,
        PERMISSIONS.TICKETS_CREATE,
        PERMISSIONS.TICKETS_UPDATE,
        PERMISSIONS.TICKETS_DELETE,
        PERMISSIONS.SETTINGS_READ,
        PERMISSIONS.SETTINGS_UPDATE,
        PERMISSIONS.ANALYTICS_READ,
        PERMISSIONS.AUDIT_READ,
    ],
    # Manager - Can manage customers and tickets, view analytics
    "Manager": [
        PERMISSIONS.USERS_READ,
        PERMISSIONS.CUSTOMERS_READ,
        PERMISSIONS.CUSTOMERS_CREATE,
        PERMISSIONS.CUSTOMERS_UPDATE,
        PERMISSIONS.TICKETS_READ,
        PERMISSIONS.TICKETS_CREATE,
        PERMISSIONS.TICKETS_UPDATE,
        PERMISSIONS.TICKETS_ASSIGN,
        PERMISSIONS.ANALYTICS_READ,
        PERMISSIONS.REPORTS_VIEW,
    ],
    # Agent - Can work with customers and tickets
    "Agent": [
        PERMISSIONS.CUSTOMERS_READ,
        PERMISSIONS.CUSTOMERS_UPDATE,
        PERMISSIONS.TICKETS_READ,
        PERMISSIONS.TICKETS_CREATE,
        PERMISSIONS.TICKETS_UPDATE,
        PERMISSIONS.MESSAGES_READ,
        PERMISSIONS.MESSAGES_CREATE,
    ],
    # Viewer - Read-only access
    "Viewer": [
        PERMISSIONS.CUSTOMERS_READ,
        PERMISSIONS.TICKETS_READ,
        PERMISSIONS.MESSAGES_READ,
        PERMISSIONS.ANALYTICS_READ,
    ],
}


class CacheKeys:
    """Cache key patterns."""

    USER_PERMISSIONS: Final[str] = "perm:user:{user_id}"


class CacheTTL:
    """Cache TTL values in seconds."""

    PERMISSIONS_DEFAULT: Final[int] = 60


class InvalidationChannels:
    """Pub/sub channel names."""

    PERMISSIONS: Final[str] = "perm-invalidate"


class BackendType(str, Enum):
    """Pluggable backend identifiers used in settings."""

    MEMORY = "memory"
    REDIS = "redis"
    POSTGRES = "postgres"
