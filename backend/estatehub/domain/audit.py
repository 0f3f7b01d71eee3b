# backend/estatehub/domain/audit.py
from __future__ import annotations

import enum
import json
from datetime import date, datetime
from typing import Any, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import Session

from ..models import AuditEvent
from ..serialize import to_iso


def _default(v: Any) -> Any:
    if isinstance(v, (datetime, date)):
        return to_iso(v)
    if isinstance(v, enum.Enum):
        return v.value
    return str(v)


def _dumps(v: Optional[dict[str, Any]]) -> Optional[str]:
    if v is None:
        return None
    return json.dumps(v, sort_keys=True, default=_default)


def snapshot(row: Any) -> dict[str, Any]:
    """Column values of a mapped row (no relationships)."""
    return {attr.key: getattr(row, attr.key) for attr in inspect(row).mapper.column_attrs}


def audit_write(
    db: Session,
    *,
    actor_user_id: Optional[str],
    action: str,
    entity_type: str,
    entity_id: str,
    before: Optional[dict[str, Any]] = None,
    after: Optional[dict[str, Any]] = None,
) -> AuditEvent:
    """
    Adds an audit row to the current transaction. Never commits: the caller
    commits it together with the change it describes.
    """
    row = AuditEvent(
        actor_user_id=actor_user_id,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        before_json=_dumps(before),
        after_json=_dumps(after),
    )
    db.add(row)
    return row
