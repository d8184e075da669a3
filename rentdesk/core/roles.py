"""
RBAC (Role-Based Access Control) module for the rentdesk backend.

Rules:
- Roles come from the users table via the auth dependency, never from the client
- All endpoints that change data MUST enforce role checks
- Route-level role checks live here; record-level checks live in the services
- Clear rules:
  - Settings read (payment config) → any authenticated user
  - Settings write → CEO / ADMIN (payment config also AGENCY_ADMIN)
  - User management → platform roles and agency staff
"""
from __future__ import annotations
from typing import Callable
from fastapi import Depends
from .auth import Authed, auth_required
from .errors import ForbiddenError
from ..domain.models import UserRole

USER_ADMIN_ROLES = (
    UserRole.CEO,
    UserRole.ADMIN,
    UserRole.AGENCY_ADMIN,
    UserRole.AGENCY_MANAGER,
    UserRole.INDEPENDENT_OWNER,
)

USER_VIEW_ROLES = USER_ADMIN_ROLES + (UserRole.BROKER, UserRole.PROPRIETARIO)

TENANT_VIEW_ROLES = (
    UserRole.CEO,
    UserRole.ADMIN,
    UserRole.PROPRIETARIO,
    UserRole.INDEPENDENT_OWNER,
    UserRole.AGENCY_ADMIN,
    UserRole.AGENCY_MANAGER,
    UserRole.BROKER,
)

SETTINGS_ADMIN_ROLES = (UserRole.CEO, UserRole.ADMIN)
PAYMENT_CONFIG_ROLES = (UserRole.CEO, UserRole.ADMIN, UserRole.AGENCY_ADMIN)


def require_roles(*allowed: UserRole) -> Callable[..., Authed]:
    """
    Guard that ensures the caller's role (from auth) is in `allowed`.

    Args:
        *allowed: Allowed roles

    Returns:
        Dependency function that validates role and returns the caller

    Example:
        @router.get("/settings")
        def list_settings(auth: Authed = Depends(require_roles(UserRole.CEO, UserRole.ADMIN))):
            ...
    """
    allowed_set = frozenset(allowed)

    def _inner(auth: Authed = Depends(auth_required)) -> Authed:
        if auth.role not in allowed_set:
            raise ForbiddenError(
                "Insufficient permissions",
                meta={
                    "required_roles": sorted(r.value for r in allowed_set),
                    "current_role": auth.role.value,
                },
            )
        return auth
    return _inner
