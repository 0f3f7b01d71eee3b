# backend/estatehub/validation.py
from __future__ import annotations

import json
from typing import Any, Callable, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel, ValidationError

from .errors import ValidationFailed, format_errors

M = TypeVar("M", bound=BaseModel)


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity are not JSON
    raise ValueError(f"Unsupported JSON constant {name}")


async def json_body(request: Request) -> Any:
    raw = await request.body()
    if not raw.strip():
        raise ValidationFailed({"_errors": ["Request body is required"]})
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        raise ValidationFailed({"_errors": ["Request body must be valid JSON"]}) from None


def validate_payload(schema: Type[M], payload: Any) -> M:
    """
    Structural check only: shapes, types, enum membership, string lengths.
    Nothing here looks at the database.
    """
    if not isinstance(payload, dict):
        raise ValidationFailed({"_errors": ["Expected a JSON object"]})
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        raise ValidationFailed(format_errors(e.errors())) from None


def payload(schema: Type[M]) -> Callable[..., Any]:
    """
    Dependency factory for a validated request body.

    Declare it after the auth dependency: FastAPI resolves dependencies in
    order, so 401/403 are decided before the body is even read.
    """

    async def _dep(request: Request) -> M:
        return validate_payload(schema, await json_body(request))

    _dep.__name__ = f"payload_{schema.__name__}"
    return _dep
