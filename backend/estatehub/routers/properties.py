# backend/estatehub/routers/properties.py
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import desc, select
from sqlalchemy.orm import Session, selectinload

from ..auth import require
from ..db import get_db
from ..enums import ResourceType
from ..errors import BusinessRuleViolation
from ..models import Resource, User
from ..schemas import ResourceCreate, ResourceDetailOut, ResourceOut, ResourceUpdate
from ..serialize import ok, page
from ..services.entities import EntityOps, must_get
from ..services.guards import ensure_resource_deletable
from ..services.pagination import Page, fetch_page, pagination
from ..validation import payload

router = APIRouter(prefix="/properties", tags=["properties"])

properties = EntityOps(
    Resource,
    "Property",
    options=(
        selectinload(Resource.parent),
        selectinload(Resource.children),
        selectinload(Resource.owners),
        selectinload(Resource.organization_owners),
    ),
)


def _check_parent(db: Session, values: dict[str, Any], *, self_id: Optional[str] = None) -> None:
    parent_id = values.get("parent_id")
    if not parent_id:
        return
    if self_id is not None and parent_id == self_id:
        raise BusinessRuleViolation("A property cannot be its own parent.")
    must_get(db, Resource, parent_id, label="Parent property")


@router.get("")
def list_properties(
    user: User = Depends(require("properties.list")),
    type: Optional[ResourceType] = Query(default=None),
    parent_id: Optional[str] = Query(default=None, alias="parentId"),
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    pg: Page = Depends(pagination),
    db: Session = Depends(get_db),
):
    q = select(Resource).order_by(desc(Resource.created_at))
    if type:
        q = q.where(Resource.type == type)
    if parent_id:
        q = q.where(Resource.parent_id == parent_id)
    if is_active is not None:
        q = q.where(Resource.is_active == is_active)

    rows, total = fetch_page(db, q, pg)
    return page([ResourceOut.model_validate(r) for r in rows], total=total, limit=pg.limit, offset=pg.offset)


@router.post("", status_code=201)
def create_property(
    user: User = Depends(require("properties.create")),
    data: ResourceCreate = Depends(payload(ResourceCreate)),
    db: Session = Depends(get_db),
):
    values = data.model_dump()
    _check_parent(db, values)
    row = properties.create(db, user, values)
    return ok("property", ResourceOut.model_validate(row))


@router.get("/{property_id}")
def get_property(
    property_id: str,
    user: User = Depends(require("properties.read")),
    db: Session = Depends(get_db),
):
    return ok("property", ResourceDetailOut.model_validate(properties.get(db, property_id)))


@router.api_route("/{property_id}", methods=["PUT", "PATCH"])
def update_property(
    property_id: str,
    user: User = Depends(require("properties.update")),
    data: ResourceUpdate = Depends(payload(ResourceUpdate)),
    db: Session = Depends(get_db),
):
    row = properties.get(db, property_id)
    values = data.model_dump(exclude_unset=True)
    _check_parent(db, values, self_id=row.id)

    row = properties.update(db, user, row, values)
    return ok("property", ResourceOut.model_validate(row))


@router.delete("/{property_id}")
def delete_property(
    property_id: str,
    user: User = Depends(require("properties.delete")),
    db: Session = Depends(get_db),
):
    # lock, check, delete: one transaction
    row = must_get(db, Resource, property_id, label=properties.label, for_update=True)
    ensure_resource_deletable(db, row)
    properties.delete(db, user, row)
    return ok(message="Property deleted successfully")
