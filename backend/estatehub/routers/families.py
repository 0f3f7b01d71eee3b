# backend/estatehub/routers/families.py
from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import asc, desc, select
from sqlalchemy.orm import Session, selectinload

from ..auth import require
from ..db import get_db
from ..enums import FamilyStatus, VerificationStatus
from ..models import Family, User
from ..schemas import FamilyOut
from ..serialize import ok, page
from ..services.entities import EntityOps
from ..services.pagination import Page, fetch_page, pagination

router = APIRouter(prefix="/families", tags=["families"])

families = EntityOps(
    Family,
    "Family",
    options=(selectinload(Family.members), selectinload(Family.location)),
)

SIZE_BUCKETS: dict[str, tuple[int, Optional[int]]] = {
    "1-2": (1, 2),
    "3-4": (3, 4),
    "5+": (5, None),
}

SORT_COLUMNS = {
    "createdAt": Family.created_at,
    "name": Family.name,
    "size": Family.size,
    "income": Family.income,
}

# two years, in months
LONG_TERM_LEASE = 24


def filtered_families(
    *,
    size: Optional[str] = None,
    has_pets: Optional[bool] = None,
    min_income: Optional[float] = None,
    min_credit_score: Optional[int] = None,
    verified: bool = False,
    long_term: bool = False,
    sort_by: str = "createdAt",
    sort_order: str = "desc",
):
    """
    Query over families open to matching (status ACTIVE only).

    Unknown sort fields fall back to ``createdAt``; ties are broken by id so
    paging is stable.
    """
    q = select(Family).where(Family.status == FamilyStatus.ACTIVE)

    if size in SIZE_BUCKETS:
        lo, hi = SIZE_BUCKETS[size]
        q = q.where(Family.size >= lo)
        if hi is not None:
            q = q.where(Family.size <= hi)
    if has_pets is not None:
        q = q.where(Family.has_pets == has_pets)
    if min_income is not None:
        q = q.where(Family.income >= min_income)
    if min_credit_score is not None:
        q = q.where(Family.credit_score >= min_credit_score)
    if verified:
        q = q.where(Family.verification_status == VerificationStatus.VERIFIED)
    if long_term:
        q = q.where(Family.lease_length >= LONG_TERM_LEASE)

    column = SORT_COLUMNS.get(sort_by, Family.created_at)
    direction = asc if sort_order == "asc" else desc
    return q.order_by(direction(column), direction(Family.id))


@router.get("")
def list_families(
    user: User = Depends(require("families.list")),
    size: Optional[Literal["1-2", "3-4", "5+"]] = Query(default=None),
    has_pets: Optional[bool] = Query(default=None, alias="hasPets"),
    min_income: Optional[float] = Query(default=None, ge=0, alias="minIncome"),
    min_credit_score: Optional[int] = Query(default=None, ge=0, alias="minCreditScore"),
    verified: bool = Query(default=False),
    long_term: bool = Query(default=False, alias="longTerm"),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query(default="desc", alias="sortOrder"),
    pg: Page = Depends(pagination),
    db: Session = Depends(get_db),
):
    q = filtered_families(
        size=size,
        has_pets=has_pets,
        min_income=min_income,
        min_credit_score=min_credit_score,
        verified=verified,
        long_term=long_term,
        sort_by=sort_by,
        sort_order=sort_order,
    ).options(selectinload(Family.members), selectinload(Family.location))

    rows, total = fetch_page(db, q, pg)
    return page([FamilyOut.model_validate(r) for r in rows], total=total, limit=pg.limit, offset=pg.offset)


@router.get("/{family_id}")
def get_family(
    family_id: str,
    user: User = Depends(require("families.read")),
    db: Session = Depends(get_db),
):
    return ok("family", FamilyOut.model_validate(families.get(db, family_id)))
