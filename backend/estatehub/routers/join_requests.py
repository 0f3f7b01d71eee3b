# backend/estatehub/routers/join_requests.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session

from ..auth import require
from ..db import get_db
from ..enums import RequestStatus, Role
from ..errors import BusinessRuleViolation
from ..models import JoinRequest, User, utcnow
from ..schemas import JoinRequestCreate, JoinRequestOut, JoinRequestReview
from ..serialize import ok, page
from ..services.entities import EntityOps, must_get
from ..services.pagination import Page, fetch_page, pagination
from ..validation import payload

log = logging.getLogger("estatehub.join_requests")

router = APIRouter(prefix="/join-requests", tags=["join-requests"])

join_requests = EntityOps(JoinRequest, "Join request")


@router.post("", status_code=201)
def submit_join_request(
    data: JoinRequestCreate = Depends(payload(JoinRequestCreate)),
    db: Session = Depends(get_db),
):
    """Public: anyone may ask to join. Review happens later."""
    if db.scalar(select(User.id).where(func.lower(User.email) == data.email)) is not None:
        raise BusinessRuleViolation("Email is already registered. Please log in instead.")
    if db.scalar(select(JoinRequest.id).where(func.lower(JoinRequest.email) == data.email)) is not None:
        raise BusinessRuleViolation("A request with this email already exists and is pending review.")

    values = data.model_dump()
    values["message"] = values.get("message") or None
    row = join_requests.create(db, None, values)
    log.info("join request submitted", extra={"join_request_id": row.id})
    return ok(message="Join request submitted successfully", requestId=row.id)


@router.get("")
def list_join_requests(
    user: User = Depends(require("join_requests.list")),
    status: Optional[RequestStatus] = Query(default=None),
    role: Optional[Role] = Query(default=None),
    pg: Page = Depends(pagination),
    db: Session = Depends(get_db),
):
    q = select(JoinRequest).order_by(desc(JoinRequest.created_at))
    if status:
        q = q.where(JoinRequest.status == status)
    if role:
        q = q.where(JoinRequest.role == role)

    rows, total = fetch_page(db, q, pg)
    return page([JoinRequestOut.model_validate(r) for r in rows], total=total, limit=pg.limit, offset=pg.offset)


@router.get("/{request_id}")
def get_join_request(
    request_id: str,
    user: User = Depends(require("join_requests.read")),
    db: Session = Depends(get_db),
):
    return ok("joinRequest", JoinRequestOut.model_validate(join_requests.get(db, request_id)))


@router.api_route("/{request_id}", methods=["PUT", "PATCH"])
def review_join_request(
    request_id: str,
    user: User = Depends(require("join_requests.review")),
    data: JoinRequestReview = Depends(payload(JoinRequestReview)),
    db: Session = Depends(get_db),
):
    """
    Approve or reject a pending request. Only the review is recorded here;
    the account for an approved request is provisioned separately.
    """
    row = must_get(db, JoinRequest, request_id, label=join_requests.label, for_update=True)
    if row.status != RequestStatus.PENDING:
        raise BusinessRuleViolation(f"This request has already been {RequestStatus(row.status).value.lower()}")

    values = {"status": data.status, "reviewed_by": user.id, "reviewed_at": utcnow()}
    if data.status == RequestStatus.REJECTED:
        reason = f"Rejection Reason: {data.reason or 'None provided'}"
        values["message"] = f"{row.message} | {reason}" if row.message else reason

    row = join_requests.update(db, user, row, values)
    verb = "approved" if row.status == RequestStatus.APPROVED else "rejected"
    return ok("joinRequest", JoinRequestOut.model_validate(row), message=f"Join request {verb}")
