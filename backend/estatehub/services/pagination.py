# backend/estatehub/services/pagination.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from fastapi import Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..config import settings


@dataclass(frozen=True)
class Page:
    limit: int
    offset: int


def pagination(
    limit: Optional[int] = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
) -> Page:
    limit = min(limit or settings.default_page_limit, settings.max_page_limit)
    return Page(limit=limit, offset=offset)


def fetch_page(db: Session, q, pg: Page) -> tuple[list[Any], int]:
    """Rows of one page of ``q`` plus the unpaged total."""
    total = int(db.scalar(select(func.count()).select_from(q.order_by(None).subquery())) or 0)
    rows = list(db.scalars(q.limit(pg.limit).offset(pg.offset)).all())
    return rows, total
