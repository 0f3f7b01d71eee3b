# backend/estatehub/auth.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

import jwt  # PyJWT
from fastapi import Depends, HTTPException, Request
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from .config import Settings, settings
from .db import get_db
from .models import User
from .policy import authorize

log = logging.getLogger("estatehub.auth")


@dataclass(frozen=True)
class AuthIdentity:
    id: str
    email: str


class AuthProvider(Protocol):
    def get_user(self, request: Request) -> Optional[AuthIdentity]:
        ...


# -------------------------
# Providers
# -------------------------
class JwtSessionProvider:
    """
    Verifies the access token the hosted auth service put in the session cookie
    (or sent as ``Authorization: Bearer``). Every request re-validates; nothing
    is cached.
    """

    def __init__(self, *, secret: str, algorithm: str, audience: Optional[str], cookie_name: str) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience
        self.cookie_name = cookie_name

    def _token(self, request: Request) -> Optional[str]:
        token = request.cookies.get(self.cookie_name) if self.cookie_name else None
        if token:
            return token
        authorization = request.headers.get("Authorization") or ""
        if authorization.lower().startswith("bearer "):
            return authorization.split(" ", 1)[1].strip() or None
        return None

    def decode(self, token: str) -> dict[str, Any]:
        return jwt.decode(
            token,
            self.secret,
            algorithms=[self.algorithm],
            audience=self.audience,
            options={"require": ["exp", "sub"], "verify_aud": self.audience is not None},
        )

    def get_user(self, request: Request) -> Optional[AuthIdentity]:
        token = self._token(request)
        if not token:
            return None
        try:
            claims = self.decode(token)
        except jwt.PyJWTError as e:
            log.info("rejected session token: %s", e)
            return None

        email = str(claims.get("email") or "").strip().lower()
        if not email:
            return None
        return AuthIdentity(id=str(claims["sub"]), email=email)


class DevHeaderProvider:
    """Trusts an email header. Local development only (refused in prod by Settings)."""

    def __init__(self, *, header: str) -> None:
        self.header = header

    def get_user(self, request: Request) -> Optional[AuthIdentity]:
        email = (request.headers.get(self.header) or "").strip().lower()
        if not email:
            return None
        return AuthIdentity(id=f"dev:{email}", email=email)


def build_auth_provider(cfg: Settings) -> AuthProvider:
    if (cfg.auth_mode or "").strip().lower() == "dev":
        return DevHeaderProvider(header=cfg.dev_header_user_email)
    return JwtSessionProvider(
        secret=cfg.auth_jwt_secret,
        algorithm=cfg.auth_jwt_algorithm,
        audience=cfg.auth_jwt_audience,
        cookie_name=cfg.auth_cookie_name,
    )


_provider: AuthProvider = build_auth_provider(settings)


def get_auth_provider() -> AuthProvider:
    return _provider


# -------------------------
# Gates
# -------------------------
def get_identity(request: Request, provider: AuthProvider = Depends(get_auth_provider)) -> AuthIdentity:
    identity = provider.get_user(request)
    if identity is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    request.state.user_email = identity.email
    return identity


def get_current_user(identity: AuthIdentity = Depends(get_identity), db: Session = Depends(get_db)) -> Optional[User]:
    return db.scalar(select(User).where(func.lower(User.email) == identity.email))


def require(operation: str) -> Callable[..., User]:
    """
    Dependency factory: authenticate, load the local user row, check the
    operation's allow-list. Missing row and disallowed role are both 403.
    """

    def _dep(user: Optional[User] = Depends(get_current_user)) -> User:
        return authorize(user, operation)

    _dep.__name__ = f"require_{operation.replace('.', '_')}"
    return _dep
