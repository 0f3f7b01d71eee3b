# backend/tests/conftest.py
from __future__ import annotations

import time
from datetime import datetime
from typing import Any, Optional

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from estatehub.auth import JwtSessionProvider, get_auth_provider
from estatehub.clients.auth_admin import AuthAdminError, get_auth_admin
from estatehub.db import Base, get_db
from estatehub.enums import EventStatus, EventType, FamilyStatus, ResourceType, Role
from estatehub.main import create_app
from estatehub.models import Event, Family, RentalContract, Resource, User

TEST_SECRET = "test-secret-long-enough-for-hs256-signing"
TEST_AUDIENCE = "authenticated"


class FakeAuthAdmin:
    """Records calls instead of talking to the auth provider."""

    def __init__(self) -> None:
        self.created: list[str] = []
        self.updated: list[tuple[str, str]] = []
        self.deleted: list[str] = []
        self.fail_with: Optional[str] = None

    def _maybe_fail(self) -> None:
        if self.fail_with:
            raise AuthAdminError(self.fail_with)

    def create_user(self, *, email: str, password: str) -> str:
        self._maybe_fail()
        self.created.append(email)
        return f"auth-{email}"

    def update_email(self, *, current_email: str, new_email: str) -> None:
        self._maybe_fail()
        self.updated.append((current_email, new_email))

    def delete_user(self, email: str) -> bool:
        self._maybe_fail()
        self.deleted.append(email)
        return True


class Factory:
    """Commits each row in its own session, like a separate writer would."""

    def __init__(self, session_factory) -> None:
        self.session_factory = session_factory

    def _add(self, row: Any) -> Any:
        db = self.session_factory()
        try:
            db.add(row)
            db.commit()
            db.refresh(row)
            db.expunge(row)
            return row
        finally:
            db.close()

    def user(self, role: Role = Role.ADMIN, *, email: Optional[str] = None, name: str = "Test User", **kw) -> User:
        email = email or f"{role.value.lower()}@example.com"
        return self._add(User(email=email, name=name, role=role, **kw))

    def resource(self, label: str = "Main Building", *, id: Optional[str] = None, **kw) -> Resource:
        kw.setdefault("type", ResourceType.BUILDING)
        if id is not None:
            kw["id"] = id
        return self._add(Resource(label=label, **kw))

    def event(self, resource_id: str, *, id: Optional[str] = None, **kw) -> Event:
        kw.setdefault("label", "Inspection")
        kw.setdefault("type", EventType.INSPECTION)
        kw.setdefault("status", EventStatus.PENDING)
        kw.setdefault("start_date", datetime(2024, 3, 1, 9, 30))
        if id is not None:
            kw["id"] = id
        return self._add(Event(resource_id=resource_id, **kw))

    def contract(self, resource_id: str, *, contract_number: str = "RC-001", **kw) -> RentalContract:
        kw.setdefault("start_date", datetime(2024, 1, 1))
        kw.setdefault("base_rent_amount", 1200.0)
        return self._add(RentalContract(resource_id=resource_id, contract_number=contract_number, **kw))

    def family(self, name: str = "The Smiths", *, size: int = 4, **kw) -> Family:
        kw.setdefault("status", FamilyStatus.ACTIVE)
        return self._add(Family(name=name, size=size, **kw))

    def get(self, model, entity_id: str):
        db = self.session_factory()
        try:
            return db.get(model, entity_id)
        finally:
            db.close()


def token_for(user: User, *, secret: str = TEST_SECRET, expires_in: int = 3600) -> str:
    claims = {
        "sub": f"auth-{user.id}",
        "email": user.email,
        "aud": TEST_AUDIENCE,
        "exp": int(time.time()) + expires_in,
    }
    return jwt.encode(claims, secret, algorithm="HS256")


def auth_headers(user: User, **kw) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(user, **kw)}"}


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def factory(session_factory) -> Factory:
    return Factory(session_factory)


@pytest.fixture()
def auth_admin() -> FakeAuthAdmin:
    return FakeAuthAdmin()


@pytest.fixture()
def app(session_factory, auth_admin):
    app = create_app()

    def _get_db():
        db = session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    provider = JwtSessionProvider(
        secret=TEST_SECRET,
        algorithm="HS256",
        audience=TEST_AUDIENCE,
        cookie_name="sb-access-token",
    )

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_auth_provider] = lambda: provider
    app.dependency_overrides[get_auth_admin] = lambda: auth_admin
    return app


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def admin(factory) -> User:
    return factory.user(Role.ADMIN, email="admin@example.com", name="Ada Admin")


@pytest.fixture()
def tenant(factory) -> User:
    return factory.user(Role.TENANT, email="tenant@example.com", name="Tom Tenant")
