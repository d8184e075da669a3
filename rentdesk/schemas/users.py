"""
Pydantic schemas for user and tenant endpoints.

Rules:
- ALWAYS use Pydantic models for request/response
- Never expose password hashes
- The document (CPF/CNPJ) is fixed at creation
- Status changes go through StatusChange only
- Tenant updates never change email, role or status
"""
from __future__ import annotations
from datetime import datetime
from typing import Literal, Optional
from pydantic import EmailStr, Field
from .common import CamelModel, OptStrId, StrId
from ..domain.models import UserRole, UserStatus


class _ProfileFields(CamelModel):
    name: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    birth_date: Optional[datetime] = None
    address: Optional[str] = Field(default=None, max_length=255)
    cep: Optional[str] = Field(default=None, max_length=16)
    neighborhood: Optional[str] = Field(default=None, max_length=120)
    city: Optional[str] = Field(default=None, max_length=120)
    state: Optional[str] = Field(default=None, max_length=64)


class UserCreate(_ProfileFields):
    """Request schema for staff/owner user creation."""
    document: Optional[str] = Field(default=None, max_length=32, description="CPF or CNPJ")
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: UserRole
    plan: str = Field(default="FREE", max_length=32)
    agency_id: OptStrId = Field(default=None, description="Agency for platform-created users")


class TenantCreate(_ProfileFields):
    """Request schema for tenant (INQUILINO) creation."""
    document: Optional[str] = Field(default=None, max_length=32, description="CPF or CNPJ")
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=255)
    owner_id: OptStrId = Field(default=None, description="Owner, honoured for platform roles only")
    agency_id: OptStrId = Field(default=None, description="Agency, honoured for platform roles only")


class UserUpdate(_ProfileFields):
    """Request schema for partial user update (all fields optional)."""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[UserRole] = None
    plan: Optional[str] = Field(default=None, max_length=32)


class TenantUpdate(_ProfileFields):
    """Request schema for tenant profile update: contact and address only."""


class StatusChange(CamelModel):
    status: Literal["ACTIVE", "SUSPENDED"]
    reason: str = Field(..., min_length=3)


class PasswordChange(CamelModel):
    current_password: str = Field(..., min_length=6)
    new_password: str = Field(..., min_length=6)


class UserOut(CamelModel):
    """User projection returned by the API."""
    id: StrId
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    document: Optional[str] = None
    role: UserRole
    status: UserStatus
    plan: Optional[str] = None
    birth_date: Optional[datetime] = None
    address: Optional[str] = None
    cep: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    agency_id: OptStrId = None
    company_id: OptStrId = None
    owner_id: OptStrId = None
    created_by: OptStrId = None
    is_frozen: bool = False
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None


class UserPage(CamelModel):
    data: list[UserOut]
    total: int
    page: int
    limit: int


class TenantOut(CamelModel):
    """Tenant projection: contact and address data only."""
    id: StrId
    email: str
    name: Optional[str] = None
    phone: Optional[str] = None
    document: Optional[str] = None
    birth_date: Optional[datetime] = None
    address: Optional[str] = None
    cep: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    created_at: Optional[datetime] = None


class StatusChanged(CamelModel):
    id: StrId
    status: UserStatus


class DocumentValidation(CamelModel):
    valid: bool
    type: Optional[Literal["CPF", "CNPJ"]] = None
