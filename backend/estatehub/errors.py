# backend/estatehub/errors.py
from __future__ import annotations

import logging
from typing import Any, Iterable

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .serialize import fail

log = logging.getLogger("estatehub.errors")


class ValidationFailed(HTTPException):
    """400 carrying a field-indexed report of what was wrong with the payload."""

    def __init__(self, details: dict[str, Any]) -> None:
        super().__init__(status_code=400, detail="Validation error")
        self.details = details


class BusinessRuleViolation(HTTPException):
    def __init__(self, message: str) -> None:
        super().__init__(status_code=400, detail=message)


def format_errors(errors: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """
    Fold pydantic error entries into a tree keyed by field path:

        {"_errors": [], "label": {"_errors": ["String should have at least 2 characters"]}}

    Errors without a field location land in the root "_errors" list.
    """
    out: dict[str, Any] = {"_errors": []}
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body",)]
        node = out
        for part in loc:
            node = node.setdefault(part, {"_errors": []})
        node["_errors"].append(str(err.get("msg") or "Invalid value"))
    return out


def setup_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            message = "Method not allowed"
        else:
            message = str(exc.detail)
        details = getattr(exc, "details", None)
        return JSONResponse(
            content=fail(message, details),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(content=fail("Validation error", format_errors(exc.errors())), status_code=400)

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        log.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(content=fail(str(exc) or exc.__class__.__name__), status_code=500)
