# backend/estatehub/clients/auth_admin.py
from __future__ import annotations

from typing import Any, Optional

import httpx

from ..config import settings


class AuthAdminError(RuntimeError):
    pass


class AuthAdminClient:
    """
    Thin client for the hosted auth service's admin REST API
    (``/admin/users``). Authenticated with the service-role key.
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        service_key: Optional[str] = None,
        timeout: Optional[float] = None,
        per_page: int = 1000,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base = (base_url or settings.auth_admin_url).rstrip("/")
        self.service_key = service_key if service_key is not None else settings.auth_service_role_key
        self.timeout = timeout or settings.auth_admin_timeout_seconds
        self.per_page = per_page
        self.transport = transport

    def enabled(self) -> bool:
        return bool(self.service_key)

    def _headers(self) -> dict[str, str]:
        if not self.service_key:
            raise AuthAdminError("auth_service_role_key not set")
        return {"apikey": self.service_key, "Authorization": f"Bearer {self.service_key}"}

    def _request(self, method: str, path: str, *, json: Any = None, params: Optional[dict[str, Any]] = None) -> Any:
        url = f"{self.base}{path}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                r = client.request(method, url, json=json, params=params, headers=self._headers())
                r.raise_for_status()
                return r.json() if r.content else None
        except httpx.HTTPStatusError as e:
            body = e.response.text[:300] if e.response is not None else ""
            raise AuthAdminError(f"{method} {path} failed with {e.response.status_code}: {body}") from e
        except httpx.HTTPError as e:
            raise AuthAdminError(f"{method} {path} failed: {e}") from e

    def create_user(self, *, email: str, password: str) -> str:
        data = self._request("POST", "/admin/users", json={"email": email, "password": password, "email_confirm": True})
        user_id = (data or {}).get("id")
        if not user_id:
            raise AuthAdminError("auth service returned no user id")
        return str(user_id)

    def find_user_id(self, email: str) -> Optional[str]:
        email = email.strip().lower()
        page_no = 1
        while True:
            data = self._request("GET", "/admin/users", params={"page": page_no, "per_page": self.per_page})
            users = (data or {}).get("users") or []
            for u in users:
                if str(u.get("email") or "").lower() == email:
                    return str(u["id"])
            if len(users) < self.per_page:
                return None
            page_no += 1

    def update_email(self, *, current_email: str, new_email: str) -> None:
        user_id = self.find_user_id(current_email)
        if user_id is None:
            raise AuthAdminError(f"no auth account for {current_email}")
        self._request("PUT", f"/admin/users/{user_id}", json={"email": new_email})

    def delete_user(self, email: str) -> bool:
        user_id = self.find_user_id(email)
        if user_id is None:
            return False
        self._request("DELETE", f"/admin/users/{user_id}")
        return True


_client = AuthAdminClient()


def get_auth_admin() -> AuthAdminClient:
    return _client
