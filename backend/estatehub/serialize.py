# backend/estatehub/serialize.py
from __future__ import annotations

import enum
from datetime import date, datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel


def to_iso(v: datetime | date) -> str:
    """
    ISO-8601 in the exact shape browsers produce with Date.toISOString():
    UTC, millisecond precision, trailing "Z". Naive datetimes are UTC.
    """
    if not isinstance(v, datetime):
        v = datetime(v.year, v.month, v.day)
    if v.tzinfo is not None:
        v = v.astimezone(timezone.utc).replace(tzinfo=None)
    return v.isoformat(timespec="milliseconds") + "Z"


def to_jsonable(value: Any) -> Any:
    """Recursively turn dates into ISO strings and enums into their values."""
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True)
    if isinstance(value, (datetime, date)):
        return to_iso(value)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_jsonable(v) for v in value]
    return value


def ok(entity_name: Optional[str] = None, value: Any = None, **extra: Any) -> dict[str, Any]:
    out: dict[str, Any] = {"success": True}
    if entity_name is not None:
        out[entity_name] = to_jsonable(value)
    for k, v in extra.items():
        out[k] = to_jsonable(v)
    return out


def page(rows: list[Any], *, total: int, limit: int, offset: int, **extra: Any) -> dict[str, Any]:
    return ok(
        data=rows,
        pagination={
            "total": int(total),
            "limit": int(limit),
            "offset": int(offset),
            "hasMore": offset + limit < total,
        },
        **extra,
    )


def fail(error: str, details: Any = None) -> dict[str, Any]:
    out: dict[str, Any] = {"success": False, "error": error}
    if details is not None:
        out["details"] = to_jsonable(details)
    return out
