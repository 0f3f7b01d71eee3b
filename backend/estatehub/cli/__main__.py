# backend/estatehub/cli/__main__.py
from __future__ import annotations

import argparse
import sys

from sqlalchemy import func, select

from estatehub.db import SessionLocal, init_db
from estatehub.domain.audit import audit_write, snapshot
from estatehub.enums import Role
from estatehub.models import User


def create_admin(*, email: str, name: str) -> User:
    """
    Local ADMIN row for a person who already has an account with the auth
    provider. Existing users are promoted instead of duplicated.
    """
    email = email.strip().lower()
    db = SessionLocal()
    try:
        row = db.scalar(select(User).where(func.lower(User.email) == email))
        if row is None:
            row = User(email=email, name=name, role=Role.ADMIN)
            db.add(row)
            db.flush()
            action, before = "user.create", None
        else:
            before = snapshot(row)
            row.role = Role.ADMIN
            db.flush()
            action = "user.update"

        audit_write(
            db,
            actor_user_id=None,
            action=action,
            entity_type="User",
            entity_id=row.id,
            before=before,
            after=snapshot(row),
        )
        db.commit()
        db.refresh(row)
        return row
    finally:
        db.close()


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="estatehub")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create all tables")

    admin = sub.add_parser("create-admin", help="create or promote an ADMIN user")
    admin.add_argument("--email", required=True)
    admin.add_argument("--name", default="Admin")

    args = p.parse_args(argv)

    if args.command == "init-db":
        init_db()
        print({"ok": True})
        return 0

    init_db()
    user = create_admin(email=args.email, name=args.name)
    print({"ok": True, "user_id": user.id, "email": user.email, "role": user.role.value})
    return 0


if __name__ == "__main__":
    sys.exit(main())
