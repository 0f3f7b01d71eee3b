# backend/estatehub/routers/events.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import desc, select
from sqlalchemy.orm import Session, selectinload

from ..auth import require
from ..db import get_db
from ..enums import EventStatus, EventType
from ..models import Event, EventAssignment, Resource, User
from ..schemas import EventCreate, EventDetailOut, EventListOut, EventUpdate
from ..serialize import ok, page
from ..services.entities import EntityOps, must_get
from ..services.pagination import Page, fetch_page, pagination
from ..validation import payload

router = APIRouter(prefix="/events", tags=["events"])

events = EntityOps(
    Event,
    "Event",
    options=(
        selectinload(Event.resource),
        selectinload(Event.participants).selectinload(EventAssignment.user),
    ),
)


def _out(row: Event) -> EventDetailOut:
    return EventDetailOut.model_validate(row)


@router.get("")
def list_events(
    user: User = Depends(require("events.list")),
    status: Optional[EventStatus] = Query(default=None),
    type: Optional[EventType] = Query(default=None),
    resource_id: Optional[str] = Query(default=None, alias="resourceId"),
    pg: Page = Depends(pagination),
    db: Session = Depends(get_db),
):
    q = select(Event).options(selectinload(Event.resource)).order_by(desc(Event.start_date))
    if status:
        q = q.where(Event.status == status)
    if type:
        q = q.where(Event.type == type)
    if resource_id:
        q = q.where(Event.resource_id == resource_id)

    rows, total = fetch_page(db, q, pg)
    return page([EventListOut.model_validate(r) for r in rows], total=total, limit=pg.limit, offset=pg.offset)


@router.post("", status_code=201)
def create_event(
    user: User = Depends(require("events.create")),
    data: EventCreate = Depends(payload(EventCreate)),
    db: Session = Depends(get_db),
):
    must_get(db, Resource, data.resource_id, label="Resource")
    row = events.create(db, user, data.model_dump())
    return ok("event", _out(row))


@router.get("/{event_id}")
def get_event(
    event_id: str,
    user: User = Depends(require("events.read")),
    db: Session = Depends(get_db),
):
    return ok("event", _out(events.get(db, event_id)))


@router.api_route("/{event_id}", methods=["PUT", "PATCH"])
def update_event(
    event_id: str,
    user: User = Depends(require("events.update")),
    data: EventUpdate = Depends(payload(EventUpdate)),
    db: Session = Depends(get_db),
):
    row = events.get(db, event_id)
    values = data.model_dump(exclude_unset=True)
    if values.get("resource_id") and values["resource_id"] != row.resource_id:
        must_get(db, Resource, values["resource_id"], label="Resource")

    row = events.update(db, user, row, values)
    return ok("event", _out(row))


@router.delete("/{event_id}")
def delete_event(
    event_id: str,
    user: User = Depends(require("events.delete")),
    db: Session = Depends(get_db),
):
    row = events.get(db, event_id)
    events.delete(db, user, row)
    return ok(message="Event deleted successfully")
