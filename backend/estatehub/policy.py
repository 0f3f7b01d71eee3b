# backend/estatehub/policy.py
"""
Who may do what.

Every route names one operation; the operation maps to the set of roles that
may perform it. Membership is the whole rule: roles do not imply each other,
so an OWNER is not implicitly allowed what a TENANT is.
"""
from __future__ import annotations

from fastapi import HTTPException

from .enums import Role
from .models import User

ADMIN_ONLY = frozenset({Role.ADMIN})
PROPERTY_STAFF = frozenset({Role.ADMIN, Role.PROPERTY_MANAGER, Role.OWNER})
REVIEWERS = frozenset({Role.ADMIN, Role.PROPERTY_MANAGER})
EVERYONE = frozenset(Role)

ACCESS_POLICY: dict[str, frozenset[Role]] = {
    # events
    "events.list": ADMIN_ONLY,
    "events.read": ADMIN_ONLY,
    "events.create": ADMIN_ONLY,
    "events.update": ADMIN_ONLY,
    "events.delete": ADMIN_ONLY,
    # properties
    "properties.list": ADMIN_ONLY,
    "properties.read": ADMIN_ONLY,
    "properties.create": ADMIN_ONLY,
    "properties.update": PROPERTY_STAFF,
    "properties.delete": PROPERTY_STAFF,
    # users
    "users.list": ADMIN_ONLY,
    "users.read": ADMIN_ONLY,
    "users.create": ADMIN_ONLY,
    "users.update": ADMIN_ONLY,
    "users.delete": ADMIN_ONLY,
    # self-service
    "profile.read": EVERYONE,
    "profile.update": EVERYONE,
    # rental contracts
    "contracts.list": ADMIN_ONLY,
    "contracts.read": ADMIN_ONLY,
    "contracts.create": ADMIN_ONLY,
    "contracts.update": ADMIN_ONLY,
    "contracts.delete": ADMIN_ONLY,
    # families looking for a home
    "families.list": PROPERTY_STAFF,
    "families.read": PROPERTY_STAFF,
    # join requests (creation is public)
    "join_requests.list": REVIEWERS,
    "join_requests.read": REVIEWERS,
    "join_requests.review": REVIEWERS,
}


def allowed_roles(operation: str) -> frozenset[Role]:
    try:
        return ACCESS_POLICY[operation]
    except KeyError:
        raise KeyError(f"no access policy for operation {operation!r}") from None


def is_allowed(role: Role | str | None, operation: str) -> bool:
    if role is None:
        return False
    try:
        role = Role(role)
    except ValueError:
        return False
    return role in allowed_roles(operation)


def authorize(user: User | None, operation: str) -> User:
    if user is None or not is_allowed(user.role, operation):
        raise HTTPException(status_code=403, detail="Forbidden: Insufficient permissions")
    return user
