"""
admin_console.auth.roles

Pure role evaluation for admin identities.

Responsibilities:
- Decide whether an admin record satisfies a view's admin/role requirement.
- Provide role predicates used by views (super admin, content admin, moderator).
"""

from __future__ import annotations

from collections.abc import Iterable

from admin_console.auth.models import AdminRecord, AdminRole


def is_allowed(
    admin_record: AdminRecord | None,
    require_admin: bool,
    allowed_roles: Iterable[AdminRole] = (),
) -> bool:
    """
    True iff admin access is not required, or a record exists and either no
    allow-list was given or the record's role is on it.
    """

    if not require_admin:
        return True
    if admin_record is None:
        return False
    allowed = frozenset(allowed_roles)
    return not allowed or admin_record.role in allowed


def has_role(admin_record: AdminRecord | None, roles: Iterable[AdminRole]) -> bool:
    # Unlike `is_allowed`, an empty role list grants nothing.
    if admin_record is None:
        return False
    return admin_record.role in frozenset(roles)


def is_super_admin(admin_record: AdminRecord | None) -> bool:
    return has_role(admin_record, (AdminRole.super_admin,))


def is_content_admin(admin_record: AdminRecord | None) -> bool:
    return has_role(admin_record, (AdminRole.content_admin,))


def is_moderator(admin_record: AdminRecord | None) -> bool:
    return has_role(admin_record, (AdminRole.moderator,))


def parse_roles(values: Iterable[str | AdminRole]) -> frozenset[AdminRole]:
    # Unknown names are a configuration error, not an authorization outcome.
    roles: set[AdminRole] = set()
    for v in values:
        try:
            roles.add(AdminRole(v))
        except ValueError as e:
            raise ValueError(f"Unknown admin role: {v!r}") from e
    return frozenset(roles)


# --- Module Notes -----------------------------------------------------------
# No I/O here; the gate supplies the record after its directory lookup.
