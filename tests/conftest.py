import os

os.environ.setdefault("PG_PASSWORD", "test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-at-least-32-bytes")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_COOKIE_SECURE", "false")

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rentdesk.core.auth import sign_jwt
from rentdesk.core.db import get_session
from rentdesk.core.security import hash_password
from rentdesk.domain.models import UserRole, UserStatus
from rentdesk.domain.sqlalchemy_models import Agency, Base, User
from rentdesk.main import app

DEFAULT_PASSWORD = "secret123"
BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def client(db):
    def _override():
        yield db

    app.dependency_overrides[get_session] = _override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(DEFAULT_PASSWORD)


@pytest.fixture
def make_agency(db):
    def _make(name="Agency"):
        agency = Agency(name=name)
        db.add(agency)
        db.commit()
        db.refresh(agency)
        return agency
    return _make


@pytest.fixture
def make_user(db, password_hash):
    """Persist a user; every call is one minute newer than the previous one."""
    seq = count()

    def _make(role=UserRole.INQUILINO, **fields):
        n = next(seq)
        fields.setdefault("email", f"user{n}@example.com")
        fields.setdefault("name", f"User {n}")
        fields.setdefault("password_hash", password_hash)
        fields.setdefault("status", UserStatus.ACTIVE)
        fields.setdefault("created_at", BASE_TIME + timedelta(minutes=n))
        user = User(role=role, **fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user
    return _make


@pytest.fixture
def bearer():
    def _headers(user):
        return {"Authorization": f"Bearer {sign_jwt(user)}"}
    return _headers
