import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rentdesk.api.v1.settings import get_settings_store
from rentdesk.domain.models import UserRole
from rentdesk.main import app
from rentdesk.services.settings_service import SettingsStore

PAYMENT = "/api/v1/settings/payment-config"


@pytest.fixture
def store_override(db):
    app.dependency_overrides[get_settings_store] = lambda: SettingsStore(db)
    yield
    app.dependency_overrides.pop(get_settings_store, None)


def test_payment_config_defaults_for_any_user(client, store_override, make_user, bearer):
    res = client.get(PAYMENT, headers=bearer(make_user()))

    assert res.status_code == 200
    assert res.json() == {"platformFee": 2.0, "agencyFee": 8.0}


def test_update_payment_config(client, store_override, make_user, bearer, make_agency):
    admin = make_user(role=UserRole.AGENCY_ADMIN, agency_id=make_agency().id)

    res = client.put(PAYMENT, json={"platformFee": 1.5, "agencyFee": 9}, headers=bearer(admin))

    assert res.status_code == 200
    assert res.json()["config"] == {"platformFee": 1.5, "agencyFee": 9.0}
    assert client.get(PAYMENT, headers=bearer(admin)).json() == {"platformFee": 1.5, "agencyFee": 9.0}


def test_update_payment_config_out_of_range(client, store_override, make_user, bearer):
    res = client.put(PAYMENT, json={"platformFee": 120, "agencyFee": 9}, headers=bearer(make_user(role=UserRole.CEO)))

    assert res.status_code == 400


def test_update_payment_config_requires_role(client, store_override, make_user, bearer):
    res = client.put(PAYMENT, json={"platformFee": 1, "agencyFee": 1}, headers=bearer(make_user(role=UserRole.BROKER)))

    assert res.status_code == 403


def test_key_value_routes(client, store_override, make_user, bearer):
    headers = bearer(make_user(role=UserRole.ADMIN))

    missing = client.get("/api/v1/settings/site.banner", headers=headers)
    put = client.put("/api/v1/settings/site.banner", json={"value": "hello", "description": "Banner"}, headers=headers)
    got = client.get("/api/v1/settings/site.banner", headers=headers)
    listed = client.get("/api/v1/settings", headers=headers)

    assert missing.status_code == 404
    assert put.status_code == 200
    assert put.json()["value"] == "hello"
    assert got.json() == {"key": "site.banner", "value": "hello"}
    assert listed.json() == {"site.banner": "hello"}


def test_key_value_routes_are_platform_only(client, store_override, make_user, bearer, make_agency):
    headers = bearer(make_user(role=UserRole.AGENCY_ADMIN, agency_id=make_agency().id))

    assert client.get("/api/v1/settings", headers=headers).status_code == 403
    assert client.put("/api/v1/settings/k", json={"value": "v"}, headers=headers).status_code == 403


def test_write_on_unmigrated_table_is_503(client, db, make_user, bearer):
    admin = make_user(role=UserRole.ADMIN)
    bare = sessionmaker(bind=create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool,
    ))()
    app.dependency_overrides[get_settings_store] = lambda: SettingsStore(bare)
    try:
        res = client.put("/api/v1/settings/k", json={"value": "v"}, headers=bearer(admin))
        read = client.get(PAYMENT, headers=bearer(admin))
    finally:
        app.dependency_overrides.pop(get_settings_store, None)
        bare.close()

    assert res.status_code == 503
    assert res.json() == {
        "status": "error",
        "code": "configuration_unavailable",
        "message": "Settings table not found. Please contact administrator.",
    }
    assert read.json() == {"platformFee": 2.0, "agencyFee": 8.0}
