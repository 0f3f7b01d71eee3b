# backend/tests/test_users_api.py
from __future__ import annotations

from estatehub.enums import Role
from estatehub.models import EventAssignment, User

from conftest import auth_headers


def _new_user(**kw):
    return {"email": "New.Person@Example.com", "name": "New Person", "password": "secret1", "role": "TENANT", **kw}


def test_admin_creates_user_and_auth_account(client, admin, auth_admin, session_factory):
    r = client.post("/api/users", json=_new_user(phoneNumber="555-0100"), headers=auth_headers(admin))

    assert r.status_code == 201, r.text
    body = r.json()
    assert body["message"] == "User created successfully"
    assert body["user"]["email"] == "new.person@example.com"
    assert body["user"]["role"] == "TENANT"
    assert body["user"]["identificationVerified"] is False
    assert "password" not in body["user"]
    assert auth_admin.created == ["new.person@example.com"]

    db = session_factory()
    try:
        assert db.query(User).filter(User.email == "new.person@example.com").count() == 1
    finally:
        db.close()


def test_failed_auth_account_rolls_back_local_user(client, admin, auth_admin, session_factory):
    auth_admin.fail_with = "email rate limit exceeded"

    r = client.post("/api/users", json=_new_user(), headers=auth_headers(admin))

    assert r.status_code == 500
    assert r.json() == {
        "success": False,
        "error": "Failed to create auth account",
        "details": "email rate limit exceeded",
    }
    db = session_factory()
    try:
        assert db.query(User).filter(User.email == "new.person@example.com").count() == 0
    finally:
        db.close()


def test_duplicate_email_is_rejected(client, factory, admin, auth_admin):
    factory.user(Role.OWNER, email="new.person@example.com")

    r = client.post("/api/users", json=_new_user(), headers=auth_headers(admin))

    assert r.status_code == 400
    assert r.json()["error"] == "Email already in use"
    assert auth_admin.created == []


def test_create_user_validation(client, admin):
    r = client.post(
        "/api/users",
        json={"email": "not-an-email", "name": "N", "password": "123", "role": "KING"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 400
    details = r.json()["details"]
    for field in ("email", "name", "password", "role"):
        assert details[field]["_errors"], field


def test_list_users_search_and_role(client, factory, admin):
    factory.user(Role.TENANT, email="alice@example.com", name="Alice Smith")
    factory.user(Role.TENANT, email="bob@example.com", name="Bob Jones")
    factory.user(Role.OWNER, email="carol@smith.io", name="Carol")

    r = client.get("/api/users", params={"search": "SMITH"}, headers=auth_headers(admin))
    assert sorted(u["email"] for u in r.json()["data"]) == ["alice@example.com", "carol@smith.io"]

    r = client.get("/api/users", params={"role": "TENANT", "search": "smith"}, headers=auth_headers(admin))
    assert [u["email"] for u in r.json()["data"]] == ["alice@example.com"]
    assert r.json()["pagination"]["total"] == 1


def test_update_email_checks_uniqueness(client, factory, admin, auth_admin):
    target = factory.user(Role.TENANT, email="t1@example.com")
    factory.user(Role.TENANT, email="t2@example.com")

    r = client.patch(f"/api/users/{target.id}", json={"email": "T2@example.com"}, headers=auth_headers(admin))
    assert r.status_code == 400
    assert r.json()["error"] == "Email already in use"

    r = client.patch(f"/api/users/{target.id}", json={"email": "t3@example.com", "role": "OWNER"}, headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "t3@example.com"
    assert r.json()["user"]["role"] == "OWNER"
    assert auth_admin.updated == [("t1@example.com", "t3@example.com")]


def test_update_email_fails_when_auth_provider_fails(client, factory, admin, auth_admin):
    target = factory.user(Role.TENANT, email="t1@example.com")
    auth_admin.fail_with = "boom"

    r = client.patch(f"/api/users/{target.id}", json={"email": "t9@example.com"}, headers=auth_headers(admin))

    assert r.status_code == 500
    assert r.json()["error"] == "Failed to update email in auth system"
    assert factory.get(User, target.id).email == "t1@example.com"


def test_delete_user_with_event_assignment_is_blocked(client, factory, admin, session_factory):
    target = factory.user(Role.SERVICE_PROVIDER)
    factory.resource(id="r1")
    event = factory.event("r1")
    db = session_factory()
    try:
        db.add(EventAssignment(event_id=event.id, user_id=target.id, role=Role.SERVICE_PROVIDER))
        db.commit()
    finally:
        db.close()

    r = client.delete(f"/api/users/{target.id}", headers=auth_headers(admin))

    assert r.status_code == 400
    assert r.json()["error"] == "Cannot delete user with event assignments."


def test_delete_user_with_contract_is_blocked(client, factory, admin):
    target = factory.user(Role.TENANT)
    factory.resource(id="r1")
    factory.contract("r1", tenant_id=target.id)

    r = client.delete(f"/api/users/{target.id}", headers=auth_headers(admin))

    assert r.status_code == 400
    assert r.json()["error"] == "Cannot delete user with rental contracts."


def test_delete_user_survives_auth_provider_failure(client, factory, admin, auth_admin):
    target = factory.user(Role.TENANT)
    auth_admin.fail_with = "unreachable"

    r = client.delete(f"/api/users/{target.id}", headers=auth_headers(admin))

    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "User deleted successfully"}
    assert factory.get(User, target.id) is None


def test_non_admin_cannot_list_users(client, factory):
    manager = factory.user(Role.PROPERTY_MANAGER)
    assert client.get("/api/users", headers=auth_headers(manager)).status_code == 403


def test_profile_is_self_service(client, tenant):
    r = client.get("/api/profile", headers=auth_headers(tenant))
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "tenant@example.com"

    r = client.patch(
        "/api/profile",
        json={"phoneNumber": "555-0199", "role": "ADMIN"},
        headers=auth_headers(tenant),
    )
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["phoneNumber"] == "555-0199"
    assert user["role"] == "TENANT"
