"""
SQLAlchemy models for the rentdesk multi-tenant property management schema.

Users of every role live in one table. Tenants (renters) are users with role
INQUILINO linked to an owner (owner_id) or to the staff member who created them
(created_by) inside an agency (agency_id).
"""
from __future__ import annotations
from datetime import datetime, timezone
from sqlalchemy import (
    BigInteger, Boolean, Column, DateTime, Enum as SQLEnum, ForeignKey,
    Integer, String, Text,
)
from sqlalchemy.orm import declarative_base, relationship

from .models import UserRole, UserStatus

Base = declarative_base()

# SQLite only auto-increments INTEGER primary keys.
BigId = BigInteger().with_variant(Integer, "sqlite")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Agency(Base):
    """Real-estate agency; staff and tenants are scoped to it via users.agency_id."""
    __tablename__ = "agencies"

    id = Column(BigId, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    members = relationship("User", back_populates="agency")

    def __repr__(self) -> str:
        return f"<Agency(id={self.id}, name={self.name})>"


class Company(Base):
    __tablename__ = "companies"

    id = Column(BigId, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name={self.name})>"


class User(Base):
    """
    User model for staff, owners and tenants.

    email is globally unique. Deletion is a hard delete; references held by
    other users (owner_id, created_by) are cleared by the database.
    """
    __tablename__ = "users"

    id = Column(BigId, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    phone = Column(String(32), nullable=True)
    document = Column(String(32), nullable=True)
    birth_date = Column(DateTime(timezone=True), nullable=True)
    address = Column(String(255), nullable=True)
    cep = Column(String(16), nullable=True)
    neighborhood = Column(String(120), nullable=True)
    city = Column(String(120), nullable=True)
    state = Column(String(64), nullable=True)

    role = Column(SQLEnum(UserRole, name="user_role", native_enum=False, length=32), nullable=False, index=True)
    status = Column(
        SQLEnum(UserStatus, name="user_status", native_enum=False, length=16),
        nullable=False,
        default=UserStatus.ACTIVE,
    )
    plan = Column(String(32), nullable=False, default="FREE")
    is_frozen = Column(Boolean, nullable=False, default=False)
    frozen_reason = Column(String(255), nullable=True)

    agency_id = Column(BigId, ForeignKey("agencies.id", ondelete="SET NULL"), nullable=True, index=True)
    company_id = Column(BigId, ForeignKey("companies.id", ondelete="SET NULL"), nullable=True)
    owner_id = Column(BigId, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by = Column(BigId, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    agency = relationship("Agency", back_populates="members")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class PlatformSetting(Base):
    """
    Platform-wide key/value configuration.

    Rows are created lazily on first write (upsert).
    """
    __tablename__ = "platform_settings"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    description = Column(String(255), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<PlatformSetting(key={self.key})>"
