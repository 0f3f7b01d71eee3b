# backend/estatehub/services/guards.py
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..errors import BusinessRuleViolation
from ..models import Event, EventAssignment, RentalContract, Resource, User


def _count(db: Session, q) -> int:
    return int(db.scalar(select(func.count()).select_from(q.subquery())) or 0)


def ensure_resource_deletable(db: Session, resource: Resource) -> None:
    """
    A property can only go once nothing hangs off it. Checks run in order and
    the first failing one decides the message.

    Call with the resource row already locked (``must_get(..., for_update=True)``)
    and delete in the same transaction, so no child, contract or event can be
    attached between the checks and the delete.
    """
    if _count(db, select(Resource.id).where(Resource.parent_id == resource.id)):
        raise BusinessRuleViolation("Cannot delete property with child properties. Remove child properties first.")

    if _count(db, select(RentalContract.id).where(RentalContract.resource_id == resource.id)):
        raise BusinessRuleViolation("Cannot delete property with active rental contracts.")

    if _count(db, select(Event.id).where(Event.resource_id == resource.id)):
        raise BusinessRuleViolation("Cannot delete property with associated events.")


def ensure_user_deletable(db: Session, user: User) -> None:
    if _count(db, select(EventAssignment.id).where(EventAssignment.user_id == user.id)):
        raise BusinessRuleViolation("Cannot delete user with event assignments.")

    if _count(db, select(RentalContract.id).where(RentalContract.tenant_id == user.id)):
        raise BusinessRuleViolation("Cannot delete user with rental contracts.")
