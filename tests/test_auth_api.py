from rentdesk.core.config import settings
from rentdesk.core.auth import decode_token
from rentdesk.domain.models import UserRole, UserStatus
from conftest import DEFAULT_PASSWORD

LOGIN = "/api/v1/auth/login"


def test_login_sets_cookie_and_returns_token(client, db, make_user):
    user = make_user(role=UserRole.BROKER, email="broker@example.com")

    res = client.post(LOGIN, json={"email": "broker@example.com", "password": DEFAULT_PASSWORD})

    body = res.json()
    assert res.status_code == 200
    assert body["user"]["id"] == str(user.id)
    assert decode_token(body["token"])["sub"] == str(user.id)
    assert res.cookies.get(settings.AUTH_COOKIE_NAME) == body["token"]
    assert "httponly" in res.headers["set-cookie"].lower()
    db.refresh(user)
    assert user.last_login is not None


def test_cookie_from_login_authenticates(client, make_user):
    user = make_user(role=UserRole.ADMIN, email="admin@example.com")
    token = client.post(LOGIN, json={"email": "admin@example.com", "password": DEFAULT_PASSWORD}).json()["token"]

    client.cookies.set(settings.AUTH_COOKIE_NAME, token)
    res = client.get("/api/v1/auth/me")
    client.cookies.clear()

    assert res.status_code == 200
    assert res.json()["userId"] == str(user.id)


def test_login_failures_do_not_reveal_which_part_was_wrong(client, make_user):
    make_user(email="someone@example.com")

    unknown = client.post(LOGIN, json={"email": "nobody@example.com", "password": DEFAULT_PASSWORD})
    wrong = client.post(LOGIN, json={"email": "someone@example.com", "password": "wrong-password"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json()["message"] == wrong.json()["message"] == "Invalid credentials"


def test_login_suspended_account(client, make_user):
    make_user(email="s@example.com", status=UserStatus.SUSPENDED)

    res = client.post(LOGIN, json={"email": "s@example.com", "password": DEFAULT_PASSWORD})

    assert res.status_code == 403
    assert res.json()["message"] == "Account suspended. Contact support."


def test_login_invited_account(client, make_user):
    make_user(email="i@example.com", status=UserStatus.INVITED)

    res = client.post(LOGIN, json={"email": "i@example.com", "password": DEFAULT_PASSWORD})

    assert res.status_code == 401


def test_login_frozen_account(client, make_user):
    make_user(email="f@example.com", is_frozen=True, frozen_reason="Upgrade your plan")

    res = client.post(LOGIN, json={"email": "f@example.com", "password": DEFAULT_PASSWORD})

    assert res.status_code == 401
    assert res.json()["message"] == "Upgrade your plan"


def test_logout_clears_cookie(client, make_user, bearer):
    user = make_user(role=UserRole.BROKER)

    res = client.post("/api/v1/auth/logout", headers=bearer(user))

    assert res.status_code == 200
    set_cookie = res.headers["set-cookie"]
    assert set_cookie.startswith(f"{settings.AUTH_COOKIE_NAME}=")
    assert "max-age=0" in set_cookie.lower()


def test_health(client):
    assert client.get("/health").json() == {"ok": True}
