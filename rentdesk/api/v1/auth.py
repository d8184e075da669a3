"""
Authentication endpoints.

Follows Layer 1 and Layer 3 rules:
- Validate input with Pydantic schemas
- Return minimal information on failure
- ALWAYS use Pydantic models for request/response
- The token travels in an HTTP-only cookie; it is also returned for API clients
"""
from __future__ import annotations
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session
from ...core.auth import Authed, auth_required
from ...core.config import settings
from ...core.db import get_session
from ...core.logger import log_security_event
from ...schemas.auth import LoginIn, LoginOut, MeOut
from ...schemas.common import StatusMessage
from ...services.auth_service import login_issue_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginOut)
def login(body: LoginIn, req: Request, res: Response, db: Session = Depends(get_session)) -> LoginOut:
    """
    Authenticate user, set the access token cookie and return the token.

    Args:
        body: Login credentials
        req: FastAPI Request object (for user-agent and IP)
        res: Response used to set the cookie
        db: Database session

    Returns:
        LoginOut with token and user projection
    """
    ua = req.headers.get("user-agent")
    ip = req.client.host if req.client else None
    token, user = login_issue_token(db, body.email, body.password, ua, ip)

    res.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXP_MIN * 60,
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite=settings.AUTH_COOKIE_SAMESITE,
        path="/",
    )
    return LoginOut.model_validate({"token": token, "user": user})


@router.post("/logout", response_model=StatusMessage)
def logout(res: Response, auth: Authed = Depends(auth_required)) -> StatusMessage:
    res.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.AUTH_COOKIE_SECURE,
        samesite=settings.AUTH_COOKIE_SAMESITE,
    )
    log_security_event(action="logout", result="success", user_id=auth.user_id, agency_id=auth.agency_id)
    return StatusMessage(message="Logged out successfully")


@router.get("/me", response_model=MeOut)
def me(auth: Authed = Depends(auth_required)) -> MeOut:
    """
    Get current authenticated user information.

    Args:
        auth: Authenticated user context

    Returns:
        MeOut with the identity projection
    """
    return MeOut.model_validate(auth.model_dump())
