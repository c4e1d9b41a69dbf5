"""Tests for the GoTrue provider client — httpx MockTransport, no network."""

from __future__ import annotations

import json

import httpx
import pytest

from app.identity.errors import ProviderError
from app.identity.provider import GoTrueProvider, SessionStore, StoredSession
from tests.conftest import make_user_payload

BASE = "https://proj.supabase.test"


def _session_payload(access="at-1", refresh="rt-1") -> dict:
    return {
        "access_token": access,
        "refresh_token": refresh,
        "token_type": "bearer",
        "user": make_user_payload(),
    }


def _provider(handler, tmp_path) -> tuple[GoTrueProvider, SessionStore]:
    store = SessionStore(tmp_path / "session.json")
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoTrueProvider(BASE, "anon-key", store, client=client), store


class TestSessionStore:
    def test_missing_file(self, tmp_path):
        assert SessionStore(tmp_path / "nope.json").load() is None

    def test_save_and_load(self, tmp_path):
        store = SessionStore(tmp_path / "sub" / "session.json")
        store.save(StoredSession(access_token="a", refresh_token="r"))
        assert store.load() == StoredSession(access_token="a", refresh_token="r")

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")
        assert SessionStore(path).load() is None

    def test_clear(self, tmp_path):
        store = SessionStore(tmp_path / "session.json")
        store.save(StoredSession(access_token="a"))
        store.clear()
        store.clear()
        assert store.load() is None


class TestSignIn:
    @pytest.mark.asyncio
    async def test_success_persists_tokens(self, tmp_path):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["apikey"] = request.headers["apikey"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_session_payload())

        provider, store = _provider(handler, tmp_path)
        user = await provider.sign_in("lifter@example.com", "secret1")
        assert user["email"] == "lifter@example.com"
        assert seen["url"] == f"{BASE}/auth/v1/token?grant_type=password"
        assert seen["apikey"] == "anon-key"
        assert seen["body"] == {"email": "lifter@example.com", "password": "secret1"}
        assert store.load().access_token == "at-1"

    @pytest.mark.asyncio
    async def test_error_message_from_body(self, tmp_path):
        def handler(request):
            return httpx.Response(400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"})

        provider, _ = _provider(handler, tmp_path)
        with pytest.raises(ProviderError) as exc_info:
            await provider.sign_in("lifter@example.com", "wrong1")
        assert exc_info.value.message == "Invalid login credentials"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_transport_error_is_network(self, tmp_path):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        provider, _ = _provider(handler, tmp_path)
        with pytest.raises(ProviderError) as exc_info:
            await provider.sign_in("lifter@example.com", "secret1")
        assert "network connection" in exc_info.value.message.lower()
        assert exc_info.value.status_code is None


class TestSignUp:
    @pytest.mark.asyncio
    async def test_bare_user_when_confirmation_required(self, tmp_path):
        def handler(request):
            assert request.url.path == "/auth/v1/signup"
            return httpx.Response(200, json=make_user_payload())

        provider, store = _provider(handler, tmp_path)
        user = await provider.sign_up("lifter@example.com", "secret12")
        assert user["id"] == make_user_payload()["id"]
        assert store.load() is None

    @pytest.mark.asyncio
    async def test_msg_field(self, tmp_path):
        def handler(request):
            return httpx.Response(422, json={"code": 422, "msg": "User already registered"})

        provider, _ = _provider(handler, tmp_path)
        with pytest.raises(ProviderError, match="User already registered"):
            await provider.sign_up("lifter@example.com", "secret12")


class TestSignOut:
    @pytest.mark.asyncio
    async def test_logout_with_token_clears_store(self, tmp_path):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(204)

        provider, store = _provider(handler, tmp_path)
        store.save(StoredSession(access_token="at-1"))
        await provider.sign_out()
        assert seen["auth"] == "Bearer at-1"
        assert store.load() is None

    @pytest.mark.asyncio
    async def test_no_session_no_request(self, tmp_path):
        def handler(request):
            raise AssertionError("should not be called")

        provider, _ = _provider(handler, tmp_path)
        await provider.sign_out()

    @pytest.mark.asyncio
    async def test_failure_keeps_store(self, tmp_path):
        def handler(request):
            return httpx.Response(500, text="upstream down")

        provider, store = _provider(handler, tmp_path)
        store.save(StoredSession(access_token="at-1"))
        with pytest.raises(ProviderError, match="upstream down"):
            await provider.sign_out()
        assert store.load() is not None


class TestGetSession:
    @pytest.mark.asyncio
    async def test_no_stored_session(self, tmp_path):
        provider, _ = _provider(lambda r: httpx.Response(500), tmp_path)
        assert await provider.get_session() is None

    @pytest.mark.asyncio
    async def test_valid_token(self, tmp_path):
        def handler(request):
            assert request.url.path == "/auth/v1/user"
            return httpx.Response(200, json=make_user_payload())

        provider, store = _provider(handler, tmp_path)
        store.save(StoredSession(access_token="at-1", refresh_token="rt-1"))
        user = await provider.get_session()
        assert user["email"] == "lifter@example.com"

    @pytest.mark.asyncio
    async def test_expired_token_refreshes(self, tmp_path):
        def handler(request):
            if request.url.path == "/auth/v1/user":
                return httpx.Response(401, json={"msg": "JWT expired"})
            assert request.url.params["grant_type"] == "refresh_token"
            assert json.loads(request.content) == {"refresh_token": "rt-1"}
            return httpx.Response(200, json=_session_payload(access="at-2", refresh="rt-2"))

        provider, store = _provider(handler, tmp_path)
        store.save(StoredSession(access_token="at-1", refresh_token="rt-1"))
        user = await provider.get_session()
        assert user["email"] == "lifter@example.com"
        assert store.load() == StoredSession(access_token="at-2", refresh_token="rt-2")

    @pytest.mark.asyncio
    async def test_refresh_rejected_clears_store(self, tmp_path):
        def handler(request):
            if request.url.path == "/auth/v1/user":
                return httpx.Response(401, json={"msg": "JWT expired"})
            return httpx.Response(400, json={"error_description": "Invalid Refresh Token"})

        provider, store = _provider(handler, tmp_path)
        store.save(StoredSession(access_token="at-1", refresh_token="rt-1"))
        with pytest.raises(ProviderError):
            await provider.get_session()
        assert store.load() is None

    @pytest.mark.asyncio
    async def test_expired_without_refresh_token_raises(self, tmp_path):
        provider, store = _provider(lambda r: httpx.Response(401, json={"msg": "JWT expired"}), tmp_path)
        store.save(StoredSession(access_token="at-1"))
        with pytest.raises(ProviderError, match="JWT expired"):
            await provider.get_session()

class TestMalformedResponses:
    @pytest.mark.asyncio
    async def test_sign_in_html_body(self, tmp_path):
        provider, store = _provider(lambda r: httpx.Response(200, text="<html>gateway</html>"), tmp_path)
        with pytest.raises(ProviderError, match="Invalid provider response"):
            await provider.sign_in("lifter@example.com", "secret1")
        assert store.load() is None

    @pytest.mark.asyncio
    async def test_sign_in_without_user_stores_nothing(self, tmp_path):
        provider, store = _provider(lambda r: httpx.Response(200, json={"access_token": "t"}), tmp_path)
        with pytest.raises(ProviderError, match="no user"):
            await provider.sign_in("lifter@example.com", "secret1")
        assert store.load() is None

    @pytest.mark.asyncio
    async def test_sign_up_html_body(self, tmp_path):
        provider, _ = _provider(lambda r: httpx.Response(200, text="<html>gateway</html>"), tmp_path)
        with pytest.raises(ProviderError, match="Invalid provider response"):
            await provider.sign_up("lifter@example.com", "secret12")

    @pytest.mark.asyncio
    async def test_sign_up_non_object_body(self, tmp_path):
        provider, _ = _provider(lambda r: httpx.Response(200, json=["nope"]), tmp_path)
        with pytest.raises(ProviderError, match="expected an object"):
            await provider.sign_up("lifter@example.com", "secret12")

    @pytest.mark.asyncio
    async def test_get_session_html_body(self, tmp_path):
        provider, store = _provider(lambda r: httpx.Response(200, text="<html>gateway</html>"), tmp_path)
        store.save(StoredSession(access_token="at-1", refresh_token="rt-1"))
        with pytest.raises(ProviderError, match="Invalid provider response"):
            await provider.get_session()

    @pytest.mark.asyncio
    async def test_refresh_without_user_keeps_old_tokens(self, tmp_path):
        def handler(request):
            if request.url.path == "/auth/v1/user":
                return httpx.Response(401, json={"msg": "JWT expired"})
            return httpx.Response(200, json={"access_token": "at-2"})

        provider, store = _provider(handler, tmp_path)
        store.save(StoredSession(access_token="at-1", refresh_token="rt-1"))
        with pytest.raises(ProviderError, match="no user"):
            await provider.get_session()
        assert store.load() == StoredSession(access_token="at-1", refresh_token="rt-1")



class TestOAuthUrl:
    def test_google(self, tmp_path):
        provider, _ = _provider(lambda r: httpx.Response(500), tmp_path)
        url = provider.oauth_url("google", "nero://login")
        assert url == f"{BASE}/auth/v1/authorize?provider=google&redirect_to=nero%3A%2F%2Flogin"

    def test_unsupported(self, tmp_path):
        provider, _ = _provider(lambda r: httpx.Response(500), tmp_path)
        with pytest.raises(ValueError):
            provider.oauth_url("myspace", "nero://login")
