# backend/tests/test_families_api.py
from __future__ import annotations

from estatehub.enums import FamilyStatus, Role, VerificationStatus
from estatehub.models import Location

from conftest import auth_headers


def _names(r) -> list[str]:
    assert r.status_code == 200, r.text
    return [f["name"] for f in r.json()["data"]]


def _seed(factory):
    factory.family("Smith", size=4, income=120000.0, credit_score=750, has_pets=True, lease_length=24,
                   verification_status=VerificationStatus.VERIFIED)
    factory.family("Johnson", size=3, income=95000.0, credit_score=720, lease_length=12)
    factory.family("Garcia", size=5, income=135000.0, credit_score=710)
    factory.family("Lee", size=2, income=60000.0, credit_score=680, has_pets=True)
    factory.family("Dormant", size=2, status=FamilyStatus.INACTIVE)


def test_only_active_families_are_listed(client, factory, admin):
    _seed(factory)

    r = client.get("/api/families", params={"sortBy": "name", "sortOrder": "asc"}, headers=auth_headers(admin))

    assert _names(r) == ["Garcia", "Johnson", "Lee", "Smith"]
    assert r.json()["pagination"] == {"total": 4, "limit": 50, "offset": 0, "hasMore": False}


def test_size_buckets(client, factory, admin):
    _seed(factory)
    headers = auth_headers(admin)
    params = {"sortBy": "name", "sortOrder": "asc"}

    assert _names(client.get("/api/families", params={**params, "size": "1-2"}, headers=headers)) == ["Lee"]
    assert _names(client.get("/api/families", params={**params, "size": "3-4"}, headers=headers)) == ["Johnson", "Smith"]
    assert _names(client.get("/api/families", params={**params, "size": "5+"}, headers=headers)) == ["Garcia"]


def test_matching_filters(client, factory, admin):
    _seed(factory)
    headers = auth_headers(admin)
    params = {"sortBy": "name", "sortOrder": "asc"}

    assert _names(client.get("/api/families", params={**params, "hasPets": "true"}, headers=headers)) == ["Lee", "Smith"]
    assert _names(client.get("/api/families", params={**params, "hasPets": "false"}, headers=headers)) == ["Garcia", "Johnson"]
    assert _names(client.get("/api/families", params={**params, "minIncome": 100000}, headers=headers)) == ["Garcia", "Smith"]
    assert _names(client.get("/api/families", params={**params, "minCreditScore": 720}, headers=headers)) == ["Johnson", "Smith"]
    assert _names(client.get("/api/families", params={**params, "verified": "true"}, headers=headers)) == ["Smith"]
    assert _names(client.get("/api/families", params={**params, "longTerm": "true"}, headers=headers)) == ["Smith"]


def test_sorting_uses_whitelisted_fields(client, factory, admin):
    _seed(factory)
    headers = auth_headers(admin)

    r = client.get("/api/families", params={"sortBy": "income", "sortOrder": "desc"}, headers=headers)
    assert _names(r) == ["Garcia", "Smith", "Johnson", "Lee"]

    r = client.get("/api/families", params={"sortBy": "size", "sortOrder": "asc", "limit": 2, "offset": 1}, headers=headers)
    assert _names(r)[0] == "Johnson"
    assert r.json()["pagination"] == {"total": 4, "limit": 2, "offset": 1, "hasMore": True}

    # not a sortable column: falls back to creation order
    r = client.get("/api/families", params={"sortBy": "creditScore"}, headers=headers)
    assert len(_names(r)) == 4


def test_bad_filter_values_are_400(client, admin):
    r = client.get("/api/families", params={"size": "7-9"}, headers=auth_headers(admin))
    assert r.status_code == 400
    assert r.json()["error"] == "Validation error"

    r = client.get("/api/families", params={"sortOrder": "sideways"}, headers=auth_headers(admin))
    assert r.status_code == 400


def test_family_detail_includes_members_and_location(client, factory, admin):
    family = factory.family("Smith", location=Location(city="Springfield", state="IL", zip_code="62701"))
    factory.user(Role.TENANT, email="head@example.com", name="Sam Smith", family_id=family.id, is_head_of_family=True)

    r = client.get(f"/api/families/{family.id}", headers=auth_headers(admin))

    assert r.status_code == 200, r.text
    body = r.json()["family"]
    assert body["status"] == "ACTIVE"
    assert body["verificationStatus"] == "PENDING"
    assert body["location"]["city"] == "Springfield"
    assert body["location"]["zipCode"] == "62701"
    assert body["members"] == [
        {
            "id": body["members"][0]["id"],
            "name": "Sam Smith",
            "email": "head@example.com",
            "phoneNumber": None,
            "role": "TENANT",
            "isHeadOfFamily": True,
        }
    ]
    assert body["createdAt"].endswith("Z")


def test_missing_family_is_404(client, admin):
    r = client.get("/api/families/nope", headers=auth_headers(admin))
    assert r.status_code == 404
    assert r.json() == {"success": False, "error": "Family not found"}


def test_owners_may_browse_but_tenants_may_not(client, factory, tenant):
    owner = factory.user(Role.OWNER)
    factory.family("Smith")

    assert client.get("/api/families", headers=auth_headers(owner)).status_code == 200
    assert client.get("/api/families", headers=auth_headers(tenant)).status_code == 403
