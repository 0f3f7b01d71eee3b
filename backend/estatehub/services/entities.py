# backend/estatehub/services/entities.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, Optional, Sequence, Type, TypeVar

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..domain.audit import audit_write, snapshot
from ..models import User

T = TypeVar("T")


def must_get(
    db: Session,
    model: Type[T],
    entity_id: str,
    *,
    label: Optional[str] = None,
    options: Sequence[Any] = (),
    for_update: bool = False,
    refresh: bool = False,
) -> T:
    q = select(model).where(model.id == entity_id)
    if options:
        q = q.options(*options)
    if for_update:
        q = q.with_for_update()
    if refresh:
        q = q.execution_options(populate_existing=True)
    row = db.scalar(q)
    if row is None:
        raise HTTPException(status_code=404, detail=f"{label or model.__name__} not found")
    return row


@dataclass(frozen=True)
class EntityOps(Generic[T]):
    """
    The operate step shared by every entity router: load by id (with the
    entity's eager loads), create, overwrite provided fields, delete. Every
    write adds its audit row and commits once.
    """

    model: Type[T]
    label: str
    options: tuple = ()

    @property
    def entity_type(self) -> str:
        return self.model.__name__

    def get(self, db: Session, entity_id: str, *, refresh: bool = False) -> T:
        return must_get(db, self.model, entity_id, label=self.label, options=self.options, refresh=refresh)

    def create(self, db: Session, actor: Optional[User], values: dict[str, Any]) -> T:
        row = self.model(**values)
        db.add(row)
        db.flush()
        audit_write(
            db,
            actor_user_id=actor.id if actor else None,
            action=f"{self.entity_type.lower()}.create",
            entity_type=self.entity_type,
            entity_id=row.id,
            after=snapshot(row),
        )
        db.commit()
        return self.get(db, row.id, refresh=True)

    def update(self, db: Session, actor: Optional[User], row: T, values: dict[str, Any]) -> T:
        before = snapshot(row)
        for k, v in values.items():
            setattr(row, k, v)
        db.flush()
        audit_write(
            db,
            actor_user_id=actor.id if actor else None,
            action=f"{self.entity_type.lower()}.update",
            entity_type=self.entity_type,
            entity_id=row.id,
            before=before,
            after=snapshot(row),
        )
        db.commit()
        return self.get(db, row.id, refresh=True)

    def delete(self, db: Session, actor: Optional[User], row: T, *, commit: bool = True) -> None:
        audit_write(
            db,
            actor_user_id=actor.id if actor else None,
            action=f"{self.entity_type.lower()}.delete",
            entity_type=self.entity_type,
            entity_id=row.id,
            before=snapshot(row),
        )
        db.delete(row)
        if commit:
            db.commit()
