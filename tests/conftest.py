"""
Pytest fixtures: a file-backed SQLite database per test, the API wired to it,
and a stub push provider in place of Expo.
"""

import os
import uuid

# Settings are read at import time
os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-0123456789")
os.environ.setdefault("PUSH_PROVIDER", "stub")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test-unused.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from app.core.db import Base, get_db, make_engine
from app.core.security import create_access_token, hash_password
from app.main import app as fastapi_app
from app.models.user import User, UserRole
from app.models.vehicle import Vehicle
from app.providers.push import StubPushProvider
from app.services.notifications import NotificationDispatcher, get_dispatcher

# Hashing is the slow part of user creation
_PASSWORD = "secret123"
_PASSWORD_HASH = hash_password(_PASSWORD)


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'freight.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def push_provider():
    return StubPushProvider()


@pytest.fixture
def dispatcher(session_factory, push_provider):
    return NotificationDispatcher(session_factory, push_provider, max_concurrency=4)


@pytest.fixture
def client(session_factory, dispatcher):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    fastapi_app.dependency_overrides[get_db] = _get_db
    fastapi_app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    def _make(role=UserRole.DRIVER, email=None, name="User", push_token=None, is_active=True):
        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=email or f"{uuid.uuid4().hex[:8]}@example.com",
            role=role,
            password_hash=_PASSWORD_HASH,
            push_token=push_token,
            is_active=is_active,
        )
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def make_vehicle(db):
    def _make(owner, vehicle_type="TRUCK", plate=None):
        vehicle = Vehicle(
            id=str(uuid.uuid4()),
            owner_id=owner.id,
            vehicle_type=vehicle_type,
            plate=plate or uuid.uuid4().hex[:7].upper(),
            is_active=True,
        )
        db.add(vehicle)
        db.commit()
        return vehicle

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(role=UserRole.ADMIN, email="admin@example.com", name="Admin")


@pytest.fixture
def driver(make_user):
    return make_user(role=UserRole.DRIVER, email="driver@example.com", name="Driver")


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(subject=user.id, role=user.role.value)}"}

    return _headers


@pytest.fixture
def password():
    return _PASSWORD
