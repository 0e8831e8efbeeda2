"""
HerbScape Backend — Auth Service Unit Tests
=============================================

What:  AuthService against an httpx.MockTransport, ClientAuth with a mocked
       AuthService.

What we test:
    ✅ Token → user; rejected tokens and provider failures → AuthenticationError
    ✅ Admin role lookup, including malformed user ids and DB failures
    ✅ Sign-out errors are logged, not raised
    ✅ ClientAuth emits INITIAL_SESSION / SIGNED_IN / SIGNED_OUT to subscribers
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from herbscape.exceptions import AuthenticationError, DatabaseError
from herbscape.schemas.herb import SessionUser
from herbscape.services.auth_service import (
    INITIAL_SESSION,
    SIGNED_IN,
    SIGNED_OUT,
    AuthService,
    ClientAuth,
)

USER_ID = "5f0c8c3e-2b1a-4c2e-9d3f-0a1b2c3d4e5f"


def _service(handler):
    return AuthService(
        base_url="https://project.supabase.test",
        anon_key="anon",
        transport=httpx.MockTransport(handler),
    )


class TestGetUser:

    @pytest.mark.asyncio
    async def test_valid_token(self):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["auth"] = request.headers["authorization"]
            return httpx.Response(200, json={"id": USER_ID, "email": "a@b.c"})

        user = await _service(handler).get_user("jwt")

        assert user["email"] == "a@b.c"
        assert seen == {"path": "/auth/v1/user", "auth": "Bearer jwt"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_rejected_token(self, status):
        service = _service(lambda request: httpx.Response(status, json={"msg": "invalid JWT"}))
        with pytest.raises(AuthenticationError) as exc_info:
            await service.get_user("expired")
        assert exc_info.value.message == "Your session has expired. Please sign in again."

    @pytest.mark.asyncio
    async def test_provider_error(self):
        service = _service(lambda request: httpx.Response(500))
        with pytest.raises(AuthenticationError) as exc_info:
            await service.get_user("jwt")
        assert exc_info.value.context["status_code"] == 500

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="<html>gateway</html>"),
        httpx.Response(200, json=[{"id": USER_ID}]),
        httpx.Response(200, json={"email": "a@b.c"}),
    ])
    async def test_unreadable_answer(self, response):
        with pytest.raises(AuthenticationError) as exc_info:
            await _service(lambda request: response).get_user("jwt")
        assert exc_info.value.context["status_code"] == 200

    @pytest.mark.asyncio
    async def test_initial_session_survives_gateway_page(self, mock_db_session):
        service = _service(lambda request: httpx.Response(200, text="<html>gateway</html>"))
        auth = ClientAuth(service)
        events = []

        async def listener(event, current):
            events.append((event, current))

        auth.on_auth_state_change(listener)

        assert await auth.get_session(mock_db_session, "jwt") is None
        assert events == [(INITIAL_SESSION, None)]
        assert auth.access_token is None

    @pytest.mark.asyncio
    async def test_provider_unreachable(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(AuthenticationError):
            await _service(handler).get_user("jwt")


class TestIsAdmin:

    @pytest.mark.asyncio
    async def test_admin_row_found(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock()
        mock_db_session.execute.return_value.scalars.return_value.first.return_value = object()
        assert await AuthService().is_admin(mock_db_session, USER_ID) is True

    @pytest.mark.asyncio
    async def test_no_admin_row(self, mock_db_session):
        mock_db_session.execute.return_value = MagicMock()
        mock_db_session.execute.return_value.scalars.return_value.first.return_value = None
        assert await AuthService().is_admin(mock_db_session, USER_ID) is False

    @pytest.mark.asyncio
    async def test_malformed_user_id(self, mock_db_session):
        assert await AuthService().is_admin(mock_db_session, "not-a-uuid") is False
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_database_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("connection lost")
        with pytest.raises(DatabaseError):
            await AuthService().is_admin(mock_db_session, USER_ID)

    @pytest.mark.asyncio
    async def test_resolve_session_survives_role_failure(self, mock_db_session):
        mock_db_session.execute.side_effect = RuntimeError("connection lost")
        service = _service(lambda request: httpx.Response(200, json={"id": USER_ID, "email": "a@b.c"}))

        user = await service.resolve_session(mock_db_session, "jwt")

        assert user == SessionUser(id=USER_ID, email="a@b.c", is_admin=False)


class TestSignOut:

    @pytest.mark.asyncio
    async def test_posts_logout(self):
        seen = {}

        def handler(request):
            seen["method"] = request.method
            seen["path"] = request.url.path
            return httpx.Response(204)

        await _service(handler).sign_out("jwt")
        assert seen == {"method": "POST", "path": "/auth/v1/logout"}

    @pytest.mark.asyncio
    async def test_errors_are_not_raised(self):
        def handler(request):
            raise httpx.ConnectError("down", request=request)

        await _service(handler).sign_out("jwt")


class TestClientAuth:

    def _client_auth(self, user=None):
        service = MagicMock()
        if user is None:
            service.resolve_session = AsyncMock(side_effect=AuthenticationError())
        else:
            service.resolve_session = AsyncMock(return_value=user)
        service.sign_out = AsyncMock()
        return ClientAuth(service)

    @pytest.mark.asyncio
    async def test_event_sequence(self, mock_db_session):
        user = SessionUser(id=USER_ID, email="a@b.c")
        auth = self._client_auth(user)
        events = []

        async def listener(event, current):
            events.append((event, current.id if current else None))

        auth.on_auth_state_change(listener)

        await auth.get_session(mock_db_session, None)
        await auth.sign_in_with_token(mock_db_session, "jwt")
        await auth.sign_out()

        assert events == [
            (INITIAL_SESSION, None),
            (SIGNED_IN, USER_ID),
            (SIGNED_OUT, None),
        ]
        auth.service.sign_out.assert_awaited_once_with("jwt")

    @pytest.mark.asyncio
    async def test_rejected_sign_in_keeps_state(self, mock_db_session):
        auth = self._client_auth()
        with pytest.raises(AuthenticationError):
            await auth.sign_in_with_token(mock_db_session, "bad")
        assert auth.access_token is None
        assert auth.user is None

    @pytest.mark.asyncio
    async def test_unsubscribe(self, mock_db_session):
        auth = self._client_auth()
        listener = AsyncMock()
        subscription = auth.on_auth_state_change(listener)

        subscription.unsubscribe()
        await auth.get_session(mock_db_session, None)

        listener.assert_not_awaited()
        assert auth.listener_count == 0

    @pytest.mark.asyncio
    async def test_anonymous_sign_out_skips_provider(self):
        auth = self._client_auth()
        await auth.sign_out()
        auth.service.sign_out.assert_not_awaited()
