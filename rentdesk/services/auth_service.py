"""
Authentication service for user login.

Follows Layer 1 and Layer 6 rules:
- Validates credentials securely
- Returns minimal information on failure (no "user not found vs wrong password" distinction)
- Logs security events (login attempts)
- NEVER logs plaintext passwords or hashes
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session
from ..core.auth import DEFAULT_FROZEN_MESSAGE, sign_jwt
from ..core.errors import ForbiddenError, UnauthorizedError
from ..core.logger import log_security_event
from ..core.security import verify_password
from ..domain.models import UserStatus
from ..domain.sqlalchemy_models import User
from ..repositories import user_repo


def login_issue_token(
    db: Session,
    email: str,
    password: str,
    user_agent: Optional[str] = None,
    ip: Optional[str] = None,
) -> tuple[str, User]:
    """
    Authenticate user and issue JWT token.

    Args:
        db: Database session
        email: User email address
        password: Plaintext password (compared against the bcrypt hash)
        user_agent: HTTP User-Agent header (optional, for logging)
        ip: Client IP address (optional, for logging)

    Returns:
        Tuple of (token, user)

    Raises:
        UnauthorizedError: 401 for invalid credentials, inactive or frozen account
        ForbiddenError: 403 for a suspended account
    """
    client = {"ip": ip, "user_agent": user_agent}
    user = user_repo.get_user_by_email(db, email)
    if user is None:
        log_security_event(
            action="login",
            result="failure",
            meta={"reason": "user_not_found", "email": email, **client},
        )
        raise UnauthorizedError("Invalid credentials")

    if not verify_password(password, user.password_hash):
        log_security_event(
            action="login",
            result="failure",
            user_id=str(user.id),
            meta={"reason": "invalid_password", "email": email, **client},
        )
        raise UnauthorizedError("Invalid credentials")

    if user.status == UserStatus.SUSPENDED:
        log_security_event(
            action="login",
            result="failure",
            user_id=str(user.id),
            meta={"reason": "user_suspended", **client},
        )
        raise ForbiddenError("Account suspended. Contact support.")

    if user.status != UserStatus.ACTIVE:
        log_security_event(
            action="login",
            result="failure",
            user_id=str(user.id),
            meta={"reason": "user_inactive", "status": user.status.value, **client},
        )
        raise UnauthorizedError("Invalid credentials")

    if user.is_frozen:
        log_security_event(
            action="login",
            result="failure",
            user_id=str(user.id),
            meta={"reason": "user_frozen", **client},
        )
        raise UnauthorizedError(user.frozen_reason or DEFAULT_FROZEN_MESSAGE)

    user = user_repo.update_user(db, user, {"last_login": datetime.now(timezone.utc)})
    token = sign_jwt(user)

    log_security_event(
        action="login",
        result="success",
        user_id=str(user.id),
        agency_id=str(user.agency_id) if user.agency_id is not None else None,
        meta={"role": user.role.value, **client},
    )
    return token, user
