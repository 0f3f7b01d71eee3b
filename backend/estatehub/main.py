# backend/estatehub/main.py
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .db import init_db
from .errors import setup_exception_handlers
from .logging_config import configure_logging
from .middleware.request_id import RequestIDMiddleware
from .middleware.structured_logging import StructuredLoggingMiddleware

from .routers.health import router as health_router
from .routers.events import router as events_router
from .routers.properties import router as properties_router
from .routers.users import router as users_router
from .routers.profile import router as profile_router
from .routers.rental_contracts import router as rental_contracts_router
from .routers.join_requests import router as join_requests_router
from .routers.families import router as families_router

API_PREFIX = "/api"


def _cors_origins() -> list[str]:
    val = settings.cors_allow_origins
    if isinstance(val, str):
        v = val.strip()
        return ["*"] if v == "*" else [x.strip() for x in v.split(",") if x.strip()]
    return list(val) or ["*"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.db_auto_create:
        init_db()
    yield


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="EstateHub", version=settings.app_version, lifespan=lifespan)

    # added last = outermost: the request id exists before the log line is written
    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    setup_exception_handlers(app)

    app.include_router(health_router, prefix=API_PREFIX)

    app.include_router(properties_router, prefix=API_PREFIX)
    app.include_router(events_router, prefix=API_PREFIX)
    app.include_router(rental_contracts_router, prefix=API_PREFIX)

    app.include_router(users_router, prefix=API_PREFIX)
    app.include_router(profile_router, prefix=API_PREFIX)
    app.include_router(join_requests_router, prefix=API_PREFIX)
    app.include_router(families_router, prefix=API_PREFIX)

    return app


app = create_app()
