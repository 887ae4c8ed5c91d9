"""Application role enum for role-based access control."""

from enum import Enum as PyEnum


class AppRole(str, PyEnum):
    """
    Platform roles, one per dashboard.

    Role precedence (highest to lowest):
    1. SUPER_ADMIN - platform operator, never bound to a tenant
    2. PARTNER_ADMIN - reseller administrator, bound to exactly one tenant
    3. CLIENT_USER - end customer of a partner, bound to the partner's tenant

    Permissions:
    - SUPER_ADMIN: tenants, licenses, IP authorizations, sessions, partner provisioning
    - PARTNER_ADMIN: clients, cameras, alerts, domains and branding of its tenant
    - CLIENT_USER: cameras and alerts of its own client record
    """

    SUPER_ADMIN = "super_admin"
    PARTNER_ADMIN = "partner_admin"
    CLIENT_USER = "client_user"


ROLE_PRECEDENCE = (AppRole.SUPER_ADMIN, AppRole.PARTNER_ADMIN, AppRole.CLIENT_USER)

TENANT_ROLES = (AppRole.PARTNER_ADMIN, AppRole.CLIENT_USER)
