# backend/estatehub/routers/users.py
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import desc, func, or_, select
from sqlalchemy.orm import Session

from ..auth import require
from ..clients.auth_admin import AuthAdminClient, AuthAdminError, get_auth_admin
from ..db import get_db
from ..domain.audit import audit_write, snapshot
from ..enums import Role
from ..errors import BusinessRuleViolation
from ..models import Organization, User
from ..schemas import UserCreate, UserOut, UserUpdate
from ..serialize import ok, page
from ..services.entities import EntityOps, must_get
from ..services.guards import ensure_user_deletable
from ..services.pagination import Page, fetch_page, pagination
from ..validation import payload

log = logging.getLogger("estatehub.users")

router = APIRouter(prefix="/users", tags=["users"])

users = EntityOps(User, "User")


class AuthAccountFailed(HTTPException):
    def __init__(self, message: str, details: str) -> None:
        super().__init__(status_code=500, detail=message)
        self.details = details


def _email_taken(db: Session, email: str, *, exclude_id: Optional[str] = None) -> bool:
    q = select(User.id).where(func.lower(User.email) == email.lower())
    if exclude_id is not None:
        q = q.where(User.id != exclude_id)
    return db.scalar(q) is not None


def _check_organization(db: Session, organization_id: Optional[str]) -> None:
    if organization_id:
        must_get(db, Organization, organization_id, label="Organization")


@router.get("")
def list_users(
    user: User = Depends(require("users.list")),
    role: Optional[Role] = Query(default=None),
    search: Optional[str] = Query(default=None),
    pg: Page = Depends(pagination),
    db: Session = Depends(get_db),
):
    q = select(User).order_by(desc(User.created_at))
    if role:
        q = q.where(User.role == role)
    if search and search.strip():
        needle = f"%{search.strip().lower()}%"
        q = q.where(or_(func.lower(User.name).like(needle), func.lower(User.email).like(needle)))

    rows, total = fetch_page(db, q, pg)
    return page([UserOut.model_validate(r) for r in rows], total=total, limit=pg.limit, offset=pg.offset)


@router.post("", status_code=201)
def create_user(
    user: User = Depends(require("users.create")),
    data: UserCreate = Depends(payload(UserCreate)),
    db: Session = Depends(get_db),
    auth_admin: AuthAdminClient = Depends(get_auth_admin),
):
    if _email_taken(db, data.email):
        raise BusinessRuleViolation("Email already in use")
    _check_organization(db, data.organization_id)

    # the password belongs to the auth provider only
    values = data.model_dump(exclude={"password"})
    row = User(**values)
    db.add(row)
    db.flush()

    try:
        auth_admin.create_user(email=row.email, password=data.password)
    except AuthAdminError as e:
        log.error("auth account creation failed, rolling back user", extra={"user_email": row.email})
        db.rollback()
        raise AuthAccountFailed("Failed to create auth account", str(e)) from e

    audit_write(
        db,
        actor_user_id=user.id,
        action="user.create",
        entity_type="User",
        entity_id=row.id,
        after=snapshot(row),
    )
    db.commit()
    row = users.get(db, row.id, refresh=True)
    log.info("user created", extra={"user_id": row.id, "user_email": row.email})
    return ok("user", UserOut.model_validate(row), message="User created successfully")


@router.get("/{user_id}")
def get_user(
    user_id: str,
    user: User = Depends(require("users.read")),
    db: Session = Depends(get_db),
):
    return ok("user", UserOut.model_validate(users.get(db, user_id)))


@router.api_route("/{user_id}", methods=["PUT", "PATCH"])
def update_user(
    user_id: str,
    user: User = Depends(require("users.update")),
    data: UserUpdate = Depends(payload(UserUpdate)),
    db: Session = Depends(get_db),
    auth_admin: AuthAdminClient = Depends(get_auth_admin),
):
    row = users.get(db, user_id)
    values = data.model_dump(exclude_unset=True)

    # required columns: an explicit null means "leave as is"
    for key in ("name", "email", "role", "identification_verified"):
        if key in values and values[key] is None:
            values.pop(key)

    if "organization_id" in values:
        _check_organization(db, values["organization_id"])

    new_email = values.get("email")
    if new_email and new_email != row.email.lower():
        if _email_taken(db, new_email, exclude_id=row.id):
            raise BusinessRuleViolation("Email already in use")
        try:
            auth_admin.update_email(current_email=row.email, new_email=new_email)
        except AuthAdminError as e:
            log.error("auth email update failed", extra={"user_id": row.id})
            raise AuthAccountFailed("Failed to update email in auth system", str(e)) from e

    row = users.update(db, user, row, values)
    return ok("user", UserOut.model_validate(row), message="User updated successfully")


@router.delete("/{user_id}")
def delete_user(
    user_id: str,
    user: User = Depends(require("users.delete")),
    db: Session = Depends(get_db),
    auth_admin: AuthAdminClient = Depends(get_auth_admin),
):
    row = users.get(db, user_id)
    ensure_user_deletable(db, row)

    # best effort: a stale auth account cannot log in without a local row
    try:
        auth_admin.delete_user(row.email)
    except AuthAdminError:
        log.exception("auth account delete failed", extra={"user_id": row.id})

    users.delete(db, user, row)
    return ok(message="User deleted successfully")
