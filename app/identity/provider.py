"""Identity provider boundary — Supabase GoTrue over its REST API.

Endpoints used (all under {supabase_url}/auth/v1):
  POST /signup                          email + password → session or bare user
  POST /token?grant_type=password       email + password → session
  POST /token?grant_type=refresh_token  refresh_token → session
  GET  /user                            bearer access token → user
  POST /logout                          bearer access token → 204
  GET  /authorize?provider=..           browser redirect (OAuth), URL only

Every failure surfaces as ProviderError with the provider's free-text message;
callers classify it. Tokens are persisted by SessionStore so a later process
can restore the session.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import urlencode

import httpx
from pydantic import BaseModel, ValidationError

from app.identity.errors import ProviderError

logger = logging.getLogger(__name__)

OAUTH_PROVIDERS = ("google", "apple")


class IdentityProvider(Protocol):
    async def sign_up(self, email: str, password: str) -> dict[str, Any]: ...

    async def sign_in(self, email: str, password: str) -> dict[str, Any]: ...

    async def sign_out(self) -> None: ...

    async def get_session(self) -> dict[str, Any] | None: ...

    def oauth_url(self, provider: str, redirect_to: str) -> str: ...


class StoredSession(BaseModel):
    access_token: str
    refresh_token: str | None = None


class SessionStore:
    """JSON file holding the current token pair. Missing or corrupt file → no session."""

    def __init__(self, path: Path | str):
        self._path = Path(path)

    def load(self) -> StoredSession | None:
        if not self._path.exists():
            return None
        try:
            return StoredSession.model_validate_json(self._path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as exc:
            logger.warning("Ignoring unreadable session file %s: %s", self._path, exc)
            return None

    def save(self, session: StoredSession) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(session.model_dump_json(), encoding="utf-8")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except (json.JSONDecodeError, ValueError):
        body = None
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return resp.text or f"HTTP {resp.status_code}"


def _json(resp: httpx.Response) -> dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        raise ProviderError("Invalid provider response: body is not JSON")
    if not isinstance(body, dict):
        raise ProviderError("Invalid provider response: expected an object")
    return body


def _user(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict) or "id" not in payload:
        raise ProviderError("Invalid provider response: no user")
    return payload


class GoTrueProvider:
    def __init__(
        self,
        base_url: str,
        anon_key: str,
        store: SessionStore,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ):
        self._auth_url = base_url.rstrip("/") + "/auth/v1"
        self._anon_key = anon_key
        self._store = store
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self, access_token: str | None = None) -> dict[str, str]:
        return {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {access_token or self._anon_key}",
        }

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        access_token: str | None = None,
    ) -> httpx.Response:
        try:
            resp = await self._client.request(
                method,
                self._auth_url + path,
                params=params,
                json=json_body,
                headers=self._headers(access_token),
            )
        except httpx.TransportError as exc:
            raise ProviderError(f"Network connection error: {exc}") from exc
        if resp.status_code >= 400:
            raise ProviderError(_error_message(resp), status_code=resp.status_code)
        return resp

    def _remember(self, payload: dict[str, Any]) -> None:
        token = payload.get("access_token")
        if isinstance(token, str) and token:
            refresh = payload.get("refresh_token")
            self._store.save(
                StoredSession(access_token=token, refresh_token=refresh if isinstance(refresh, str) else None)
            )

    async def sign_up(self, email: str, password: str) -> dict[str, Any]:
        resp = await self._request("POST", "/signup", json_body={"email": email, "password": password})
        payload = _json(resp)
        # With email confirmation enabled the response is the bare user, no tokens
        user = _user(payload.get("user") or payload)
        self._remember(payload)
        return user

    async def sign_in(self, email: str, password: str) -> dict[str, Any]:
        resp = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json_body={"email": email, "password": password},
        )
        payload = _json(resp)
        user = _user(payload.get("user"))
        self._remember(payload)
        return user

    async def sign_out(self) -> None:
        stored = self._store.load()
        if stored is not None:
            await self._request("POST", "/logout", access_token=stored.access_token)
        self._store.clear()

    async def _refresh(self, refresh_token: str) -> dict[str, Any]:
        resp = await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json_body={"refresh_token": refresh_token},
        )
        payload = _json(resp)
        user = _user(payload.get("user"))
        self._remember(payload)
        return user

    async def get_session(self) -> dict[str, Any] | None:
        """Return the stored session's user, refreshing once on an expired token."""
        stored = self._store.load()
        if stored is None:
            return None
        try:
            resp = await self._request("GET", "/user", access_token=stored.access_token)
            return _user(_json(resp))
        except ProviderError as exc:
            if exc.status_code != 401 or not stored.refresh_token:
                raise
        try:
            return await self._refresh(stored.refresh_token)
        except ProviderError as exc:
            if exc.status_code is not None:
                self._store.clear()
            raise

    def oauth_url(self, provider: str, redirect_to: str) -> str:
        if provider not in OAUTH_PROVIDERS:
            raise ValueError(f"Unsupported OAuth provider: {provider}")
        query = urlencode({"provider": provider, "redirect_to": redirect_to})
        return f"{self._auth_url}/authorize?{query}"
