import pytest

from rentdesk.core.errors import ValidationError
from rentdesk.domain.models import UserRole
from rentdesk.services.tenant_scope import (
    AllTenants, CreatedBy, InAgency, ManagedBy, OwnedBy, TenantScope,
    build_tenant_filter, resolve_tenants,
)


def ids(users):
    return [u.id for u in users]


def test_empty_scope_returns_all_tenants_newest_first(db, make_user):
    t1 = make_user()
    t2 = make_user()
    t3 = make_user()
    make_user(role=UserRole.BROKER)

    result = resolve_tenants(db, TenantScope())

    assert ids(result) == [t3.id, t2.id, t1.id]


def test_owner_scope_returns_only_owned_tenants(db, make_user):
    owner5 = make_user(role=UserRole.PROPRIETARIO)
    owner6 = make_user(role=UserRole.PROPRIETARIO)
    mine = make_user(owner_id=owner5.id)
    make_user(owner_id=owner6.id)
    make_user()

    result = resolve_tenants(db, TenantScope(owner_id=str(owner5.id)))

    assert ids(result) == [mine.id]
    assert all(t.owner_id == owner5.id for t in result)


def test_owner_scope_wins_over_other_fields(db, make_user, make_agency):
    agency = make_agency()
    owner = make_user(role=UserRole.PROPRIETARIO)
    owned = make_user(owner_id=owner.id)
    make_user(agency_id=agency.id)

    scope = TenantScope(owner_id=str(owner.id), agency_id=str(agency.id), broker_id="999")

    assert ids(resolve_tenants(db, scope)) == [owned.id]


def test_agency_scope_returns_agency_tenants(db, make_user, make_agency):
    a1 = make_agency("A1")
    a2 = make_agency("A2")
    t1 = make_user(agency_id=a1.id)
    make_user(agency_id=a2.id)
    make_user(role=UserRole.BROKER, agency_id=a1.id)

    result = resolve_tenants(db, TenantScope(agency_id=str(a1.id)))

    assert ids(result) == [t1.id]
    assert all(t.agency_id == a1.id for t in result)


def test_broker_scope_returns_tenants_created_by_broker(db, make_user, make_agency):
    agency = make_agency()
    broker = make_user(role=UserRole.BROKER, agency_id=agency.id)
    created = make_user(created_by=broker.id)
    make_user(agency_id=agency.id)

    result = resolve_tenants(db, TenantScope(broker_id=str(broker.id), agency_id=str(agency.id)))

    # broker branch takes precedence over agency: the agency-only tenant is not included
    assert ids(result) == [created.id]


def test_manager_without_brokers_sees_only_direct_tenants(db, make_user):
    manager = make_user(role=UserRole.AGENCY_MANAGER)
    other = make_user(role=UserRole.AGENCY_MANAGER)
    direct = make_user(created_by=manager.id)
    make_user(created_by=other.id)

    result = resolve_tenants(db, TenantScope(manager_id=str(manager.id)))

    assert ids(result) == [direct.id]


def test_manager_sees_own_and_managed_broker_tenants_in_agency(db, make_user, make_agency):
    a2 = make_agency("A2")
    a3 = make_agency("A3")
    manager = make_user(role=UserRole.AGENCY_MANAGER, agency_id=a2.id)
    broker = make_user(role=UserRole.BROKER, agency_id=a2.id, created_by=manager.id)
    foreign_broker = make_user(role=UserRole.BROKER, agency_id=a2.id)

    by_manager = make_user(created_by=manager.id, agency_id=a2.id)
    by_broker = make_user(created_by=broker.id, agency_id=a2.id)
    make_user(created_by=broker.id, agency_id=a3.id)
    make_user(created_by=foreign_broker.id, agency_id=a2.id)

    scope = TenantScope(manager_id=str(manager.id), agency_id=str(a2.id))
    result = resolve_tenants(db, scope)

    assert ids(result) == [by_broker.id, by_manager.id]
    assert len(set(ids(result))) == len(result)


def test_manager_filter_ignores_brokers_outside_agency(db, make_user, make_agency):
    a1 = make_agency("A1")
    a2 = make_agency("A2")
    manager = make_user(role=UserRole.AGENCY_MANAGER, agency_id=a1.id)
    make_user(role=UserRole.BROKER, agency_id=a2.id, created_by=manager.id)
    inside = make_user(role=UserRole.BROKER, agency_id=a1.id, created_by=manager.id)

    f = build_tenant_filter(db, TenantScope(manager_id=str(manager.id), agency_id=str(a1.id)))

    assert f == ManagedBy(manager.id, (inside.id,), a1.id)


@pytest.mark.parametrize("scope, expected", [
    (TenantScope(), AllTenants()),
    (TenantScope(owner_id="5"), OwnedBy(5)),
    (TenantScope(agency_id="2"), InAgency(2)),
    (TenantScope(broker_id="11", agency_id="2"), CreatedBy(11)),
])
def test_filter_variant_per_branch(db, scope, expected):
    assert build_tenant_filter(db, scope) == expected


def test_non_numeric_identifier_is_rejected(db):
    with pytest.raises(ValidationError):
        build_tenant_filter(db, TenantScope(owner_id="abc"))


def test_scope_log_dict_drops_unset_fields():
    assert TenantScope(manager_id="9", agency_id="2").as_log_dict() == {"agency_id": "2", "manager_id": "9"}
