"""
HerbScape Backend — Authentication Service
============================================

What:  Adapter for the Supabase auth provider (GoTrue) plus the per-client
       session holder the catalog page subscribes to.
How:   - AuthService talks HTTP to {SUPABASE_URL}/auth/v1 and reads the
         `user_roles` table for the admin flag.
       - ClientAuth keeps at most one session per browser client and notifies
         subscribers on INITIAL_SESSION / SIGNED_IN / SIGNED_OUT.
Who:   CatalogPage (subscription, sign-out) and the auth routes (sign-in).

No custom session format: the access token is the Supabase JWT, kept in a
cookie by the routes and validated against GoTrue on every (re)sign-in.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from herbscape.config import settings
from herbscape.exceptions import AuthenticationError, DatabaseError
from herbscape.models.herb import UserRole
from herbscape.schemas.herb import SessionUser

logger = logging.getLogger(__name__)

# Auth state change events, named as in supabase-js
INITIAL_SESSION = "INITIAL_SESSION"
SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

AuthListener = Callable[[str, Optional[SessionUser]], Awaitable[None]]


class AuthService:
    """
    Stateless calls against the auth provider and the roles table.

    Args:
        base_url:  Supabase project URL (defaults to settings.supabase_url)
        anon_key:  Public anon key (defaults to settings.supabase_anon_key)
        transport: Optional httpx transport; tests pass an httpx.MockTransport
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        anon_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.supabase_url).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else settings.supabase_anon_key
        self._transport = transport

    def _headers(self, access_token: str) -> Dict[str, str]:
        return {"apikey": self.anon_key, "Authorization": f"Bearer {access_token}"}

    async def get_user(self, access_token: str) -> Dict[str, Any]:
        """
        Resolve an access token to the provider's user object.

        Raises:
            AuthenticationError: token rejected, or provider unreachable
        """
        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}/auth/v1/user",
                    headers=self._headers(access_token),
                )
        except httpx.HTTPError as e:
            logger.warning("Auth provider unreachable: %s", str(e))
            raise AuthenticationError(
                message="Could not reach the sign-in service. Please try again.",
                context={"error_type": type(e).__name__},
            )

        if response.status_code in (401, 403):
            raise AuthenticationError(context={"status_code": response.status_code})
        if response.is_error:
            logger.warning("Auth provider answered %d for /user", response.status_code)
            raise AuthenticationError(
                message="The sign-in service returned an error. Please try again.",
                context={"status_code": response.status_code},
            )
        try:
            raw = response.json()
        except ValueError:
            raw = None
        if not isinstance(raw, dict) or not raw.get("id"):
            logger.warning("Auth provider sent an unreadable /user answer")
            raise AuthenticationError(
                message="The sign-in service returned an unexpected answer. Please try again.",
                context={"status_code": response.status_code},
            )
        return raw

    async def sign_out(self, access_token: str) -> None:
        """
        Revoke the session at the provider.

        Errors are logged only; the local session is dropped by the caller
        either way.
        """
        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/auth/v1/logout",
                    headers=self._headers(access_token),
                )
            if response.is_error and response.status_code not in (401, 403, 404):
                logger.warning("Auth provider answered %d for /logout", response.status_code)
        except httpx.HTTPError as e:
            logger.warning("Sign-out request failed: %s", str(e))

    async def is_admin(self, db: AsyncSession, user_id: str) -> bool:
        """
        Whether `user_id` holds the 'admin' role.

        Raises:
            DatabaseError: role query failed
        """
        try:
            uid = uuid.UUID(user_id)
        except (TypeError, ValueError):
            return False

        try:
            result = await db.execute(
                select(UserRole).where(UserRole.user_id == uid, UserRole.role == "admin")
            )
            return result.scalars().first() is not None
        except Exception as e:
            logger.error("Database error reading roles for %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not check your permissions.",
                context={"user_id": user_id},
            )

    async def resolve_session(self, db: AsyncSession, access_token: str) -> SessionUser:
        """Token → SessionUser with the admin flag filled in."""
        raw = await self.get_user(access_token)
        user_id = str(raw.get("id", ""))
        try:
            admin = await self.is_admin(db, user_id)
        except DatabaseError:
            admin = False
        try:
            return SessionUser(id=user_id, email=raw.get("email"), is_admin=admin)
        except SchemaValidationError:
            raise AuthenticationError(
                message="The sign-in service returned an unexpected answer. Please try again.",
            )


@dataclass
class Subscription:
    """Handle returned by ClientAuth.on_auth_state_change()."""
    owner: "ClientAuth"
    listener: AuthListener

    def unsubscribe(self) -> None:
        self.owner._remove_listener(self.listener)


class ClientAuth:
    """
    Auth state of one browser client.

    Holds the current access token and user; one instance per CatalogPage, so
    a client never has more than one active session.
    """

    def __init__(self, service: Optional[AuthService] = None):
        self.service = service or auth_service
        self.access_token: Optional[str] = None
        self.user: Optional[SessionUser] = None
        self._listeners: List[AuthListener] = []

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(owner=self, listener=listener)

    def _remove_listener(self, listener: AuthListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def _emit(self, event: str) -> None:
        logger.debug("Auth state change: %s (user=%s)", event, self.user.id if self.user else None)
        for listener in list(self._listeners):
            await listener(event, self.user)

    async def get_session(self, db: AsyncSession, access_token: Optional[str]) -> Optional[SessionUser]:
        """
        Restore the session carried by a cookie token, if any.

        An invalid token silently yields the anonymous state.
        """
        self.access_token = access_token or None
        self.user = None
        if self.access_token:
            try:
                self.user = await self.service.resolve_session(db, self.access_token)
            except AuthenticationError as e:
                logger.info("Stored session rejected: %s", e.message)
                self.access_token = None
        await self._emit(INITIAL_SESSION)
        return self.user

    async def sign_in_with_token(self, db: AsyncSession, access_token: str) -> SessionUser:
        """
        Adopt a token obtained from the sign-in page.

        Raises:
            AuthenticationError: token rejected by the provider
        """
        user = await self.service.resolve_session(db, access_token)
        self.access_token = access_token
        self.user = user
        await self._emit(SIGNED_IN)
        return user

    async def sign_out(self) -> None:
        if self.access_token:
            await self.service.sign_out(self.access_token)
        self.access_token = None
        self.user = None
        await self._emit(SIGNED_OUT)


# ── Singleton Instance ────────────────────────────────────────────────────
auth_service = AuthService()
