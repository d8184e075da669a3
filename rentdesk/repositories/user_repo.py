"""
Repository for users table operations.

Rules:
- Data access MUST be routed through repository layer
- No raw queries inside API routes
- The session is always passed in by the caller
"""
from __future__ import annotations
from typing import Any, Iterable, Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement
from ..domain.models import UserRole
from ..domain.sqlalchemy_models import User


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def list_users(
    db: Session,
    conditions: Iterable[ColumnElement[bool]],
    skip: int,
    take: int,
) -> tuple[list[User], int]:
    """
    Page through users matching every condition, newest first.

    Returns:
        Tuple of (page items, total matching rows)
    """
    conditions = list(conditions)
    items = db.execute(
        select(User)
        .where(*conditions)
        .order_by(User.created_at.desc())
        .offset(skip)
        .limit(take)
    ).scalars().all()
    total = db.execute(select(func.count()).select_from(User).where(*conditions)).scalar_one()
    return list(items), int(total)


def find_users(db: Session, condition: ColumnElement[bool]) -> list[User]:
    """All users matching a condition, ordered by creation time descending."""
    return list(
        db.execute(select(User).where(condition).order_by(User.created_at.desc())).scalars().all()
    )


def find_broker_ids_created_by(db: Session, manager_id: int, agency_id: Optional[int] = None) -> list[int]:
    """Ids of BROKER users created by a manager, optionally inside one agency."""
    stmt = select(User.id).where(User.role == UserRole.BROKER, User.created_by == manager_id)
    if agency_id is not None:
        stmt = stmt.where(User.agency_id == agency_id)
    return list(db.execute(stmt).scalars().all())


def create_user(db: Session, fields: dict[str, Any]) -> User:
    user = User(**fields)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_user(db: Session, user: User, fields: dict[str, Any]) -> User:
    for key, value in fields.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()
