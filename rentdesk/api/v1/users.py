"""
User and tenant management endpoints.

Follows Layer 2 and Layer 3 rules:
- All endpoints that change data enforce role checks
- Record-level access is checked in the service against the target user
- ALWAYS use Pydantic models for request/response
- Fixed paths (/details, /tenants, /document) are declared before /{user_id}
"""
from __future__ import annotations
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from ...core.auth import Authed, auth_required
from ...core.db import get_session
from ...core.roles import TENANT_VIEW_ROLES, USER_ADMIN_ROLES, USER_VIEW_ROLES, require_roles
from ...domain.models import UserRole, UserStatus
from ...schemas.common import StatusMessage
from ...schemas.users import (
    DocumentValidation, PasswordChange, StatusChange, StatusChanged, TenantCreate,
    TenantOut, TenantUpdate, UserCreate, UserOut, UserPage, UserUpdate,
)
from ...services import users_service
from ...services.document_validation import validate_document

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserPage)
def list_users(
    skip: int = Query(default=0, ge=0),
    take: int = Query(default=users_service.DEFAULT_PAGE_SIZE, description="Page size, clamped to 1..100"),
    role: Optional[UserRole] = None,
    agency_id: Optional[str] = Query(default=None, alias="agencyId"),
    status_: Optional[UserStatus] = Query(default=None, alias="status"),
    search: Optional[str] = Query(default=None, max_length=255),
    auth: Authed = Depends(require_roles(*USER_ADMIN_ROLES)),
    db: Session = Depends(get_session),
) -> dict:
    """
    List users managed by the caller (the caller itself is excluded).

    Returns:
        Page with data, total, page and limit
    """
    return users_service.list_users(
        db, auth,
        skip=skip, take=take, role=role, agency_id=agency_id, status=status_, search=search,
    )


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    auth: Authed = Depends(require_roles(*USER_ADMIN_ROLES)),
    db: Session = Depends(get_session),
):
    return users_service.create_user(db, auth, body)


@router.get("/details", response_model=UserOut)
def get_own_details(auth: Authed = Depends(auth_required), db: Session = Depends(get_session)):
    return users_service.get_own_details(db, auth)


@router.get("/tenants", response_model=list[TenantOut])
def list_tenants(
    auth: Authed = Depends(require_roles(*TENANT_VIEW_ROLES)),
    db: Session = Depends(get_session),
):
    """
    Tenants visible to the caller.

    The visibility scope is derived from the caller's role:
    owners see their tenants, agency admins their agency, managers their own
    and their brokers' tenants, brokers their own, platform roles everything.
    """
    return users_service.list_tenants_for(db, auth)


@router.post("/tenants", response_model=TenantOut, status_code=status.HTTP_201_CREATED)
def create_tenant(
    body: TenantCreate,
    auth: Authed = Depends(require_roles(*TENANT_VIEW_ROLES)),
    db: Session = Depends(get_session),
):
    return users_service.create_tenant(db, auth, body)


@router.put("/tenants/{tenant_id}", response_model=TenantOut)
def update_tenant(
    tenant_id: str,
    body: TenantUpdate,
    auth: Authed = Depends(require_roles(*TENANT_VIEW_ROLES)),
    db: Session = Depends(get_session),
):
    return users_service.update_tenant(db, auth, tenant_id, body)


@router.delete("/tenants/{tenant_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tenant(
    tenant_id: str,
    auth: Authed = Depends(require_roles(*TENANT_VIEW_ROLES)),
    db: Session = Depends(get_session),
) -> None:
    users_service.delete_tenant(db, auth, tenant_id)


@router.get("/document/validate/{document}", response_model=DocumentValidation)
def validate_document_number(document: str, auth: Authed = Depends(auth_required)) -> DocumentValidation:
    """Check a CPF or CNPJ (punctuation allowed)."""
    valid, kind = validate_document(document)
    return DocumentValidation(valid=valid, type=kind)


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: str,
    auth: Authed = Depends(require_roles(*USER_VIEW_ROLES)),
    db: Session = Depends(get_session),
):
    return users_service.get_user_detail(db, auth, user_id)


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    body: UserUpdate,
    auth: Authed = Depends(require_roles(*USER_ADMIN_ROLES)),
    db: Session = Depends(get_session),
):
    return users_service.update_user(db, auth, user_id, body)


@router.patch("/{user_id}/status", response_model=StatusChanged)
def change_status(
    user_id: str,
    body: StatusChange,
    auth: Authed = Depends(require_roles(*USER_ADMIN_ROLES)),
    db: Session = Depends(get_session),
):
    return users_service.change_status(db, auth, user_id, body)


@router.delete("/{user_id}", response_model=StatusMessage)
def delete_user(
    user_id: str,
    auth: Authed = Depends(require_roles(*USER_ADMIN_ROLES)),
    db: Session = Depends(get_session),
) -> StatusMessage:
    users_service.delete_user(db, auth, user_id)
    return StatusMessage(message="User deleted successfully")


@router.post("/{user_id}/change-password", response_model=StatusMessage)
def change_password(
    user_id: str,
    body: PasswordChange,
    auth: Authed = Depends(auth_required),
    db: Session = Depends(get_session),
) -> StatusMessage:
    """
    Change the caller's own password.

    Raises:
        ForbiddenError: 403 when user_id is not the caller
        BadRequestError: 400 on current-password mismatch or unchanged password
    """
    users_service.change_password(db, auth, user_id, body)
    return StatusMessage(message="Password changed successfully")
