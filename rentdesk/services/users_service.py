"""
Service layer for user and tenant management.

Follows Layer 2 and Layer 4 rules:
- Route-level role checks happen in the API layer (core.roles)
- Record-level access checks happen here, against the target row
- Data access MUST be routed through repository/service layers
- Passwords are hashed with bcrypt and never logged

Visibility of a target user by caller role:
- CEO / ADMIN: every user
- AGENCY_ADMIN: users of its agency
- AGENCY_MANAGER: users it created, or created by brokers it created
- BROKER: users it created
- PROPRIETARIO / INDEPENDENT_OWNER: its own tenants and users it created
- anybody: its own record
"""
from __future__ import annotations
from typing import Any, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from ..core.auth import Authed
from ..core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError, ValidationError
from ..core.logger import logger, log_security_event
from ..core.security import hash_password, verify_password
from ..domain.models import OWNER_ROLES, PLATFORM_ROLES, UserRole, UserStatus
from ..domain.sqlalchemy_models import User
from ..repositories import user_repo
from ..schemas.users import (
    PasswordChange, StatusChange, TenantCreate, TenantUpdate, UserCreate, UserUpdate,
)
from .tenant_scope import TenantScope, resolve_tenants

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10

_NON_NULLABLE = frozenset({"email", "role", "plan"})


def parse_id(value: Optional[str], field: str = "id") -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}: {value!r}")


def _load_user(db: Session, user_id: str) -> User:
    user = user_repo.get_user(db, parse_id(user_id))
    if user is None:
        raise NotFoundError("User not found")
    return user


def _same(value: Any, str_id: Optional[str]) -> bool:
    return value is not None and str_id is not None and str(value) == str_id


def _created_by_my_broker(db: Session, target: User, manager_id: str) -> bool:
    if target.created_by is None:
        return False
    creator = user_repo.get_user(db, target.created_by)
    return (
        creator is not None
        and creator.role == UserRole.BROKER
        and _same(creator.created_by, manager_id)
    )


def can_view(db: Session, auth: Authed, target: User) -> bool:
    if auth.role in PLATFORM_ROLES or _same(target.id, auth.user_id):
        return True
    if auth.role == UserRole.AGENCY_ADMIN:
        return _same(target.agency_id, auth.agency_id)
    if auth.role == UserRole.AGENCY_MANAGER:
        return _same(target.created_by, auth.user_id) or _created_by_my_broker(db, target, auth.user_id)
    if auth.role == UserRole.BROKER:
        return _same(target.created_by, auth.user_id)
    if auth.role in OWNER_ROLES:
        return _same(target.owner_id, auth.user_id) or _same(target.created_by, auth.user_id)
    return False


def can_manage(auth: Authed, target: User) -> bool:
    """Update, status change and delete rights over a non-self user."""
    if auth.role in PLATFORM_ROLES:
        return True
    if target.role in PLATFORM_ROLES:
        return False
    if auth.role == UserRole.AGENCY_ADMIN:
        return _same(target.agency_id, auth.agency_id)
    if auth.role == UserRole.AGENCY_MANAGER:
        return _same(target.created_by, auth.user_id)
    if auth.role in OWNER_ROLES:
        if target.role == UserRole.INQUILINO:
            return _same(target.owner_id, auth.user_id)
        return _same(target.created_by, auth.user_id)
    return False


def can_manage_tenant(db: Session, auth: Authed, tenant: User) -> bool:
    if auth.role in PLATFORM_ROLES:
        return True
    if auth.role in OWNER_ROLES:
        return _same(tenant.owner_id, auth.user_id)
    if auth.role == UserRole.AGENCY_ADMIN:
        return _same(tenant.agency_id, auth.agency_id)
    if auth.role == UserRole.AGENCY_MANAGER:
        allowed = _same(tenant.created_by, auth.user_id) or _created_by_my_broker(db, tenant, auth.user_id)
        if allowed and auth.agency_id is not None and tenant.agency_id is not None:
            allowed = _same(tenant.agency_id, auth.agency_id)
        return allowed
    if auth.role == UserRole.BROKER:
        return _same(tenant.created_by, auth.user_id)
    return False


def _check_role_assignment(auth: Authed, role: Optional[UserRole]) -> None:
    if role in PLATFORM_ROLES and auth.role not in PLATFORM_ROLES:
        raise ForbiddenError("Insufficient permissions to assign this role")


def _ensure_email_free(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    existing = user_repo.get_user_by_email(db, email)
    if existing is not None and existing.id != exclude_id:
        raise ConflictError("User with this email already exists")


def list_users(
    db: Session,
    auth: Authed,
    *,
    skip: int = 0,
    take: int = DEFAULT_PAGE_SIZE,
    role: Optional[UserRole] = None,
    agency_id: Optional[str] = None,
    status: Optional[UserStatus] = None,
    search: Optional[str] = None,
) -> dict:
    """
    Page through the users the caller manages, newest first.

    The caller is never part of the result.

    Returns:
        Dict with data, total, page (1-based) and limit
    """
    take = min(MAX_PAGE_SIZE, max(1, take))
    skip = max(0, skip)
    page = {"data": [], "total": 0, "page": skip // take + 1, "limit": take}

    conditions = [User.id != parse_id(auth.user_id)]
    if auth.role == UserRole.AGENCY_ADMIN:
        if auth.agency_id is None:
            logger.warning(
                "Agency admin without agency, returning empty user list",
                extra={"user_id": auth.user_id},
            )
            return page
        conditions.append(User.agency_id == parse_id(auth.agency_id))
    elif auth.role == UserRole.AGENCY_MANAGER:
        conditions.append(User.created_by == parse_id(auth.user_id))
        if auth.agency_id is not None:
            conditions.append(User.agency_id == parse_id(auth.agency_id))
    elif auth.role not in PLATFORM_ROLES:
        conditions.append(User.created_by == parse_id(auth.user_id))

    if role is not None:
        conditions.append(User.role == role)
    if status is not None:
        conditions.append(User.status == status)
    if agency_id is not None:
        conditions.append(User.agency_id == parse_id(agency_id, "agencyId"))
    if search:
        pattern = f"%{search}%"
        conditions.append(or_(
            User.name.ilike(pattern),
            User.email.ilike(pattern),
            User.document.ilike(pattern),
        ))

    items, total = user_repo.list_users(db, conditions, skip, take)
    page["data"] = items
    page["total"] = total
    return page


def get_user_detail(db: Session, auth: Authed, user_id: str) -> User:
    """
    Load one user, enforcing the caller's visibility.

    Raises:
        NotFoundError: no such user
        ForbiddenError: the caller may not see it
    """
    user = _load_user(db, user_id)
    if not can_view(db, auth, user):
        raise ForbiddenError("Access denied")
    return user


def get_own_details(db: Session, auth: Authed) -> User:
    return _load_user(db, auth.user_id)


def create_user(db: Session, auth: Authed, data: UserCreate) -> User:
    """
    Create a staff or owner account on behalf of the caller.

    Agency staff always place the new user in their own agency; platform roles
    may pick the agency. The new account starts ACTIVE.

    Raises:
        ConflictError: email already registered
        BadRequestError: an agency manager without an agency
        ForbiddenError: non-platform caller assigning a platform role
    """
    _check_role_assignment(auth, data.role)
    _ensure_email_free(db, data.email)

    if auth.role == UserRole.AGENCY_ADMIN:
        agency_id = auth.agency_id or data.agency_id
    elif auth.role == UserRole.AGENCY_MANAGER:
        agency_id = auth.agency_id or data.agency_id
        if agency_id is None:
            raise BadRequestError("Agency manager must belong to an agency to create users")
    elif auth.role in PLATFORM_ROLES:
        agency_id = data.agency_id
    else:
        agency_id = None

    fields = data.model_dump(exclude={"password", "agency_id"})
    fields.update(
        password_hash=hash_password(data.password),
        agency_id=parse_id(agency_id, "agencyId"),
        status=UserStatus.ACTIVE,
        created_by=parse_id(auth.user_id),
    )
    user = user_repo.create_user(db, fields)

    log_security_event(
        action="user_create",
        result="success",
        user_id=auth.user_id,
        agency_id=auth.agency_id,
        meta={"target_user_id": str(user.id), "role": user.role.value},
    )
    return user


def update_user(db: Session, auth: Authed, user_id: str, data: UserUpdate) -> User:
    """
    Partially update a user. A new password is re-hashed.

    Raises:
        NotFoundError: no such user
        ForbiddenError: the caller may not manage it, or changes its own role or
            plan without a platform role
        ConflictError: the new email belongs to another user
    """
    user = _load_user(db, user_id)
    is_self = _same(user.id, auth.user_id)
    if not (is_self or can_manage(auth, user)):
        raise ForbiddenError("Access denied")

    fields = data.model_dump(exclude_unset=True)
    if is_self and auth.role not in PLATFORM_ROLES:
        if any(k in fields and fields[k] != getattr(user, k) for k in ("role", "plan")):
            log_security_event(
                action="user_update",
                result="denied",
                user_id=auth.user_id,
                agency_id=auth.agency_id,
                meta={"target_user_id": user_id, "reason": "self_privilege_change"},
            )
            raise ForbiddenError("Cannot change your own role or plan")
    if "role" in fields:
        _check_role_assignment(auth, fields["role"])
    if fields.get("email") and fields["email"] != user.email:
        _ensure_email_free(db, fields["email"], exclude_id=user.id)
    if "password" in fields:
        password = fields.pop("password")
        if password:
            fields["password_hash"] = hash_password(password)
    fields = {k: v for k, v in fields.items() if v is not None or k not in _NON_NULLABLE}

    user = user_repo.update_user(db, user, fields)
    log_security_event(
        action="user_update",
        result="success",
        user_id=auth.user_id,
        agency_id=auth.agency_id,
        meta={"target_user_id": user_id, "fields": sorted(k for k in fields if k != "password_hash")},
    )
    return user


def change_status(db: Session, auth: Authed, user_id: str, data: StatusChange) -> User:
    user = _load_user(db, user_id)
    if not can_manage(auth, user):
        raise ForbiddenError("Access denied")

    user = user_repo.update_user(db, user, {"status": UserStatus(data.status)})
    log_security_event(
        action="user_status_change",
        result="success",
        user_id=auth.user_id,
        agency_id=auth.agency_id,
        meta={"target_user_id": user_id, "status": data.status, "reason": data.reason},
    )
    return user


def delete_user(db: Session, auth: Authed, user_id: str) -> None:
    """
    Hard-delete a user.

    Raises:
        NotFoundError: no such user
        ForbiddenError: self-deletion, or the caller may not manage the target
    """
    user = _load_user(db, user_id)
    if _same(user.id, auth.user_id):
        raise ForbiddenError("Cannot delete your own account")
    if not can_manage(auth, user):
        log_security_event(
            action="user_delete",
            result="denied",
            user_id=auth.user_id,
            agency_id=auth.agency_id,
            meta={"target_user_id": user_id},
            level="warning",
        )
        raise ForbiddenError("Access denied - cannot delete this user")

    user_repo.delete_user(db, user)
    log_security_event(
        action="user_delete",
        result="success",
        user_id=auth.user_id,
        agency_id=auth.agency_id,
        meta={"target_user_id": user_id},
    )


def change_password(db: Session, auth: Authed, user_id: str, data: PasswordChange) -> None:
    """
    Change the caller's own password.

    Raises:
        ForbiddenError: target is not the caller
        BadRequestError: current password mismatch, or new equals current
    """
    if str(user_id) != auth.user_id:
        raise ForbiddenError("You can only change your own password")
    user = _load_user(db, user_id)

    if not verify_password(data.current_password, user.password_hash):
        log_security_event(
            action="password_change",
            result="failure",
            user_id=auth.user_id,
            meta={"reason": "invalid_current_password"},
            level="warning",
        )
        raise BadRequestError("Current password is incorrect")
    if verify_password(data.new_password, user.password_hash):
        raise BadRequestError("New password must be different from the current password")

    user_repo.update_user(db, user, {"password_hash": hash_password(data.new_password)})
    log_security_event(action="password_change", result="success", user_id=auth.user_id)


def create_tenant(db: Session, auth: Authed, data: TenantCreate) -> User:
    """
    Create an INQUILINO account.

    Owners own the tenant directly; agency staff attach it to their agency;
    platform roles may choose owner and agency (owner defaults to the caller).
    """
    _ensure_email_free(db, data.email)

    owner_id: Optional[str] = None
    agency_id: Optional[str] = None
    if auth.role in OWNER_ROLES:
        owner_id = auth.user_id
    elif auth.role in (UserRole.AGENCY_ADMIN, UserRole.AGENCY_MANAGER, UserRole.BROKER):
        agency_id = auth.agency_id
    else:
        owner_id = data.owner_id or auth.user_id
        agency_id = data.agency_id

    fields = data.model_dump(exclude={"password", "owner_id", "agency_id"})
    fields.update(
        password_hash=hash_password(data.password),
        role=UserRole.INQUILINO,
        plan="FREE",
        status=UserStatus.ACTIVE,
        owner_id=parse_id(owner_id, "ownerId"),
        agency_id=parse_id(agency_id, "agencyId"),
        created_by=parse_id(auth.user_id),
    )
    tenant = user_repo.create_user(db, fields)

    log_security_event(
        action="tenant_create",
        result="success",
        user_id=auth.user_id,
        agency_id=auth.agency_id,
        meta={"tenant_id": str(tenant.id)},
    )
    return tenant


def _load_tenant(db: Session, tenant_id: str) -> User:
    tenant = user_repo.get_user(db, parse_id(tenant_id, "tenantId"))
    if tenant is None or tenant.role != UserRole.INQUILINO:
        raise NotFoundError("Tenant not found")
    return tenant


def update_tenant(db: Session, auth: Authed, tenant_id: str, data: TenantUpdate) -> User:
    tenant = _load_tenant(db, tenant_id)
    if not can_manage_tenant(db, auth, tenant):
        raise ForbiddenError("Access denied - cannot update this tenant")

    fields = data.model_dump(exclude_unset=True)
    tenant = user_repo.update_user(db, tenant, fields)
    log_security_event(
        action="tenant_update",
        result="success",
        user_id=auth.user_id,
        agency_id=auth.agency_id,
        meta={"tenant_id": tenant_id, "fields": sorted(fields)},
    )
    return tenant


def delete_tenant(db: Session, auth: Authed, tenant_id: str) -> None:
    tenant = _load_tenant(db, tenant_id)
    if not can_manage_tenant(db, auth, tenant):
        raise ForbiddenError("Access denied - cannot delete this tenant")

    user_repo.delete_user(db, tenant)
    log_security_event(
        action="tenant_delete",
        result="success",
        user_id=auth.user_id,
        agency_id=auth.agency_id,
        meta={"tenant_id": tenant_id},
    )


def scope_for(auth: Authed) -> Optional[TenantScope]:
    """
    Derive the tenant scope from the caller's role.

    Returns:
        TenantScope, or None when the caller can see no tenant at all
        (an agency admin that has no agency)
    """
    role = auth.role
    if role in OWNER_ROLES:
        return TenantScope(owner_id=auth.user_id)
    if role == UserRole.AGENCY_ADMIN:
        if auth.agency_id is None:
            return None
        return TenantScope(agency_id=auth.agency_id)
    if role == UserRole.AGENCY_MANAGER:
        return TenantScope(manager_id=auth.user_id, agency_id=auth.agency_id)
    if role == UserRole.BROKER:
        return TenantScope(broker_id=auth.user_id, agency_id=auth.agency_id)
    return TenantScope()


def list_tenants_for(db: Session, auth: Authed) -> list[User]:
    scope = scope_for(auth)
    if scope is None:
        logger.warning(
            "Agency admin without agency, returning no tenants",
            extra={"user_id": auth.user_id},
        )
        return []

    tenants = resolve_tenants(db, scope)
    logger.info(
        "Tenants resolved",
        extra={
            "user_id": auth.user_id,
            "agency_id": auth.agency_id,
            "meta": {"role": auth.role.value, "scope": scope.as_log_dict(), "count": len(tenants)},
        },
    )
    return tenants
