# backend/estatehub/config.py
from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ---- App ----
    app_env: str = "local"  # local|dev|prod
    app_version: str = "2025-05.v1"
    database_url: str = "sqlite:///./estatehub.db"
    # create missing tables on startup (no migrations in this service)
    db_auto_create: bool = True

    # ---- CORS (used by main.py) ----
    cors_allow_origins: list[str] | str = ["*"]

    # ---- Auth provider ----
    auth_mode: str = "jwt"  # dev|jwt

    # Session tokens are issued by the hosted auth provider; we only verify them.
    auth_jwt_secret: str = "dev-change-me"
    auth_jwt_audience: str | None = "authenticated"
    auth_jwt_algorithm: str = "HS256"
    auth_cookie_name: str = "sb-access-token"

    # Dev header name (auth_mode=dev only)
    dev_header_user_email: str = "X-User-Email"

    # Admin API of the auth provider (user provisioning)
    auth_admin_url: str = "http://localhost:54321/auth/v1"
    auth_service_role_key: str | None = None
    auth_admin_timeout_seconds: float = 10.0

    # ---- Lists ----
    default_page_limit: int = 50
    max_page_limit: int = 500

    def model_post_init(self, __context) -> None:
        env = (self.app_env or "local").strip().lower()
        is_prod = env in ("prod", "production")

        if is_prod:
            if (self.auth_mode or "").strip().lower() == "dev":
                raise ValueError("SECURITY: auth_mode=dev is not allowed in prod")
            if self.auth_jwt_secret == "dev-change-me":
                raise ValueError("SECURITY: auth_jwt_secret must be set in prod")

            origins = self.cors_allow_origins
            if origins == "*" or origins == ["*"] or (isinstance(origins, str) and "*" in origins):
                raise ValueError("SECURITY: cors_allow_origins wildcard is not allowed in prod")


settings = Settings()
