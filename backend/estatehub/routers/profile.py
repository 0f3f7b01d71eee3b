# backend/estatehub/routers/profile.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import require
from ..db import get_db
from ..models import User
from ..schemas import ProfileUpdate, UserOut
from ..serialize import ok
from ..validation import payload
from .users import users

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("")
def get_profile(user: User = Depends(require("profile.read"))):
    return ok("user", UserOut.model_validate(user))


@router.patch("")
def update_profile(
    user: User = Depends(require("profile.update")),
    data: ProfileUpdate = Depends(payload(ProfileUpdate)),
    db: Session = Depends(get_db),
):
    values = data.model_dump(exclude_unset=True)
    if values.get("name", "") is None:
        values.pop("name")

    row = users.update(db, user, user, values)
    return ok("user", UserOut.model_validate(row), message="Profile updated successfully")
