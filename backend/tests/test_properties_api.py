# backend/tests/test_properties_api.py
from __future__ import annotations

from estatehub.enums import ResourceType, Role
from estatehub.models import AuditEvent, Resource

from conftest import auth_headers


def test_delete_blocked_by_child_property(client, factory, admin):
    factory.resource("Tower", id="p1")
    factory.resource("Unit 1", id="u1", type=ResourceType.UNIT, parent_id="p1")

    r = client.delete("/api/properties/p1", headers=auth_headers(admin))

    assert r.status_code == 400
    assert r.json() == {
        "success": False,
        "error": "Cannot delete property with child properties. Remove child properties first.",
    }
    assert factory.get(Resource, "p1") is not None


def test_delete_blocked_by_rental_contract(client, factory, admin):
    factory.resource(id="p1")
    factory.contract("p1")

    r = client.delete("/api/properties/p1", headers=auth_headers(admin))

    assert r.status_code == 400
    assert r.json()["error"] == "Cannot delete property with active rental contracts."
    assert factory.get(Resource, "p1") is not None


def test_delete_blocked_by_event(client, factory, admin):
    factory.resource(id="p1")
    factory.event("p1")

    r = client.delete("/api/properties/p1", headers=auth_headers(admin))

    assert r.status_code == 400
    assert r.json()["error"] == "Cannot delete property with associated events."


def test_children_are_reported_before_contracts_and_events(client, factory, admin):
    factory.resource(id="p1")
    factory.resource("Unit", parent_id="p1", type=ResourceType.UNIT)
    factory.contract("p1")
    factory.event("p1")

    r = client.delete("/api/properties/p1", headers=auth_headers(admin))
    assert r.json()["error"].startswith("Cannot delete property with child properties")


def test_delete_unreferenced_property(client, factory, session_factory):
    manager = factory.user(Role.PROPERTY_MANAGER)
    factory.resource(id="p1")

    r = client.delete("/api/properties/p1", headers=auth_headers(manager))

    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Property deleted successfully"}
    assert factory.get(Resource, "p1") is None

    admin = factory.user(Role.ADMIN)
    assert client.get("/api/properties/p1", headers=auth_headers(admin)).status_code == 404

    db = session_factory()
    try:
        audit = db.query(AuditEvent).filter(AuditEvent.entity_id == "p1").one()
        assert audit.action == "resource.delete"
        assert audit.actor_user_id == manager.id
        assert audit.after_json is None
    finally:
        db.close()


def test_tenant_cannot_delete_property(client, factory, tenant):
    factory.resource(id="p1")

    r = client.delete("/api/properties/p1", headers=auth_headers(tenant))

    assert r.status_code == 403
    assert factory.get(Resource, "p1") is not None


def test_owner_may_update_but_not_create(client, factory):
    owner = factory.user(Role.OWNER)
    factory.resource(id="p1")

    r = client.post("/api/properties", json={"label": "New", "type": "LAND"}, headers=auth_headers(owner))
    assert r.status_code == 403

    r = client.put("/api/properties/p1", json={"label": "Renamed", "type": "BUILDING"}, headers=auth_headers(owner))
    assert r.status_code == 200
    assert r.json()["property"]["label"] == "Renamed"


def test_create_applies_defaults(client, admin):
    r = client.post(
        "/api/properties",
        json={"label": "Lot 7", "type": "LAND", "rentAmount": 300.5, "bedroomCount": 0},
        headers=auth_headers(admin),
    )

    assert r.status_code == 201, r.text
    prop = r.json()["property"]
    assert prop["amenities"] == []
    assert prop["images"] == []
    assert prop["isActive"] is True
    assert prop["rentAmount"] == 300.5
    assert prop["bedroomCount"] == 0
    assert prop["parentId"] is None


def test_create_validates_shape(client, admin):
    r = client.post(
        "/api/properties",
        json={"label": "X", "type": "CASTLE", "bedroomCount": 1.5, "amenities": "pool"},
        headers=auth_headers(admin),
    )

    assert r.status_code == 400
    details = r.json()["details"]
    for field in ("label", "type", "bedroomCount", "amenities"):
        assert details[field]["_errors"], field


def test_create_with_unknown_parent_is_404(client, admin):
    r = client.post(
        "/api/properties",
        json={"label": "Unit 9", "type": "UNIT", "parentId": "missing"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 404
    assert r.json()["error"] == "Parent property not found"


def test_property_cannot_be_its_own_parent(client, factory, admin):
    factory.resource(id="p1")
    r = client.put(
        "/api/properties/p1",
        json={"label": "Tower", "type": "BUILDING", "parentId": "p1"},
        headers=auth_headers(admin),
    )
    assert r.status_code == 400


def test_get_property_includes_relations(client, factory, admin):
    factory.resource("Tower", id="p1")
    factory.resource("Unit 1", id="u1", type=ResourceType.UNIT, parent_id="p1")

    r = client.get("/api/properties/u1", headers=auth_headers(admin))
    prop = r.json()["property"]
    assert prop["parent"] == {"id": "p1", "label": "Tower", "type": "BUILDING"}

    r = client.get("/api/properties/p1", headers=auth_headers(admin))
    prop = r.json()["property"]
    assert prop["parent"] is None
    assert prop["children"] == [{"id": "u1", "label": "Unit 1", "type": "UNIT", "isActive": True}]
    assert prop["owners"] == []
    assert prop["organizationOwners"] == []


def test_update_overwrites_only_provided_fields(client, factory, admin):
    factory.resource(id="p1", address="1 Main St", amenities=["pool"])

    r = client.patch(
        "/api/properties/p1",
        json={"label": "Tower", "type": "BUILDING", "address": None},
        headers=auth_headers(admin),
    )

    prop = r.json()["property"]
    assert prop["address"] is None
    assert prop["amenities"] == ["pool"]


def test_list_properties_filters(client, factory, admin):
    factory.resource("Tower", id="p1")
    factory.resource("Unit 1", type=ResourceType.UNIT, parent_id="p1")
    factory.resource("Unit 2", type=ResourceType.UNIT, parent_id="p1", is_active=False)

    r = client.get("/api/properties", params={"parentId": "p1", "isActive": "true"}, headers=auth_headers(admin))

    assert r.status_code == 200
    assert [p["label"] for p in r.json()["data"]] == ["Unit 1"]
    assert r.json()["pagination"]["total"] == 1
