"""
Authentication and JWT token management module.

Rules:
- Sign tokens with a private signing key from environment variables
- NEVER hardcode secrets or keys in the repository
- Tokens are accepted from the HTTP-only access token cookie first, then from
  the Authorization: Bearer <token> header (API clients)
- Every request re-reads the user: inactive or frozen accounts lose access
  immediately, whatever the token says
"""
from __future__ import annotations
import datetime
import jwt
from fastapi import Depends, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session
from .config import settings
from .db import get_session
from .errors import UnauthorizedError
from ..domain.models import UserRole, UserStatus
from ..domain.sqlalchemy_models import User

DEFAULT_FROZEN_MESSAGE = (
    "Your account is temporarily disabled due to plan limits. "
    "Contact your agency administrator."
)


class Authed(BaseModel):
    """Authenticated user context resolved from the token and the users table."""
    user_id: str
    email: str
    role: UserRole
    agency_id: str | None = None
    company_id: str | None = None


def _str_id(value) -> str | None:
    return str(value) if value is not None else None


def sign_jwt(user: User) -> str:
    """
    Sign a JWT token for a user.

    Args:
        user: Persisted user record

    Returns:
        Encoded JWT token string
    """
    now = datetime.datetime.now(datetime.timezone.utc)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value,
        "agency_id": _str_id(user.agency_id),
        "iat": now,
        "exp": now + datetime.timedelta(minutes=settings.JWT_EXP_MIN),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def extract_token(req: Request) -> str | None:
    """Cookie first, then bearer header."""
    cookie = req.cookies.get(settings.AUTH_COOKIE_NAME)
    if cookie:
        return cookie
    auth = req.headers.get("authorization")
    if auth and auth.startswith("Bearer "):
        token = auth[len("Bearer "):].strip()
        return token or None
    return None


def decode_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid or expired token")


def resolve_identity(db: Session, subject: str | None) -> Authed:
    """
    Load the user named by a token subject and check it may act.

    Args:
        db: Database session
        subject: The token's `sub` claim

    Returns:
        Authed: Reduced identity projection with string identifiers

    Raises:
        UnauthorizedError: unknown subject, non-ACTIVE status, or frozen account
    """
    try:
        user_id = int(subject) if subject is not None else None
    except (TypeError, ValueError):
        user_id = None

    user = db.get(User, user_id) if user_id is not None else None
    if user is None or user.status != UserStatus.ACTIVE:
        raise UnauthorizedError("User not found or inactive")

    if user.is_frozen:
        raise UnauthorizedError(user.frozen_reason or DEFAULT_FROZEN_MESSAGE)

    return Authed(
        user_id=str(user.id),
        email=user.email,
        role=user.role,
        agency_id=_str_id(user.agency_id),
        company_id=_str_id(user.company_id),
    )


def auth_required(req: Request, db: Session = Depends(get_session)) -> Authed:
    """
    FastAPI dependency that validates the access token and resolves the caller.

    Args:
        req: FastAPI Request object
        db: Database session

    Returns:
        Authed: Authenticated user context

    Raises:
        UnauthorizedError: 401 if the token is missing, invalid, expired, or the
            account is not allowed to act
    """
    token = extract_token(req)
    if not token:
        raise UnauthorizedError("No token provided")

    payload = decode_token(token)
    return resolve_identity(db, payload.get("sub"))
