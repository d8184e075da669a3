"""
Tenant visibility rules.

Given the caller's scope (ownerId / agencyId / brokerId / managerId), decide
which INQUILINO records the caller may see. Branches are evaluated in a fixed
precedence order and exactly one filter shape is produced per call:

1. nothing set          → every tenant
2. owner_id             → tenants whose owner_id matches
3. agency_id only       → tenants of that agency
4. broker_id            → tenants the broker created (wins over agency_id)
5. manager_id           → tenants the manager created, plus tenants created by
                          brokers the manager created; optionally agency-bound

Results are ordered by created_at, newest first.
"""
from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Optional, Union
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement
from ..core.errors import ValidationError
from ..domain.models import UserRole
from ..domain.sqlalchemy_models import User
from ..repositories import user_repo


@dataclass(frozen=True)
class TenantScope:
    """Caller-derived visibility constraint. Identifiers are decimal strings."""
    owner_id: Optional[str] = None
    agency_id: Optional[str] = None
    broker_id: Optional[str] = None
    manager_id: Optional[str] = None

    def as_log_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class AllTenants:
    pass


@dataclass(frozen=True)
class OwnedBy:
    owner_id: int


@dataclass(frozen=True)
class InAgency:
    agency_id: int


@dataclass(frozen=True)
class CreatedBy:
    creator_id: int


@dataclass(frozen=True)
class ManagedBy:
    manager_id: int
    broker_ids: tuple[int, ...] = ()
    agency_id: Optional[int] = None


TenantFilter = Union[AllTenants, OwnedBy, InAgency, CreatedBy, ManagedBy]


def _as_id(value: Optional[str], field: str) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field}: {value!r}")


def build_tenant_filter(db: Session, scope: TenantScope) -> TenantFilter:
    """
    Pick the filter variant for a scope.

    Only the manager branch touches the database (to list its brokers).
    """
    owner_id = _as_id(scope.owner_id, "ownerId")
    agency_id = _as_id(scope.agency_id, "agencyId")
    broker_id = _as_id(scope.broker_id, "brokerId")
    manager_id = _as_id(scope.manager_id, "managerId")

    if owner_id is None and agency_id is None and broker_id is None and manager_id is None:
        return AllTenants()
    if owner_id is not None:
        return OwnedBy(owner_id)
    if agency_id is not None and broker_id is None and manager_id is None:
        return InAgency(agency_id)
    if broker_id is not None:
        return CreatedBy(broker_id)

    broker_ids = user_repo.find_broker_ids_created_by(db, manager_id, agency_id)
    return ManagedBy(manager_id, tuple(sorted(set(broker_ids))), agency_id)


def filter_clause(f: TenantFilter) -> ColumnElement[bool]:
    """Render a filter variant as a WHERE clause over tenant-role users."""
    is_tenant = User.role == UserRole.INQUILINO

    if isinstance(f, AllTenants):
        return is_tenant
    if isinstance(f, OwnedBy):
        return and_(is_tenant, User.owner_id == f.owner_id)
    if isinstance(f, InAgency):
        return and_(is_tenant, User.agency_id == f.agency_id)
    if isinstance(f, CreatedBy):
        return and_(is_tenant, User.created_by == f.creator_id)
    if isinstance(f, ManagedBy):
        creators = [User.created_by == f.manager_id]
        if f.broker_ids:
            creators.append(User.created_by.in_(f.broker_ids))
        parts = [is_tenant, or_(*creators)]
        if f.agency_id is not None:
            parts.append(User.agency_id == f.agency_id)
        return and_(*parts)
    raise TypeError(f"Unknown tenant filter: {f!r}")


def resolve_tenants(db: Session, scope: TenantScope) -> list[User]:
    """
    Tenant-role users visible under a scope, newest first.

    Persistence errors propagate unchanged.
    """
    return user_repo.find_users(db, filter_clause(build_tenant_filter(db, scope)))
