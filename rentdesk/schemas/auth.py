from __future__ import annotations
from typing import Optional
from pydantic import EmailStr, Field
from .common import CamelModel, OptStrId, StrId
from .users import UserOut
from ..domain.models import UserRole


class LoginIn(CamelModel):
    """Request schema for user login."""
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=1, description="User password")


class LoginOut(CamelModel):
    """Response schema for successful login. The token is also set as a cookie."""
    token: str
    user: UserOut


class MeOut(CamelModel):
    user_id: StrId
    email: str
    role: UserRole
    agency_id: OptStrId = None
    company_id: Optional[str] = None
