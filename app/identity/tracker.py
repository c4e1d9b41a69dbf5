"""Auth phase tracker — the state the UI renders while talking to the provider.

  idle --call--> loading --ok--> succeeded(user)
                 loading --err--> failed(kind)
  succeeded/failed --sign_out ok--> idle
  any --restore_session fails--> idle

No terminal state. Calls are not de-duplicated or cancellable: two
overlapping calls race on `phase` and the last writer wins.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from pydantic import ValidationError

from app.identity.errors import ProviderError, classify_error
from app.identity.launch import LaunchFlag
from app.identity.models import AuthError, AuthErrorKind, AuthPhase, User
from app.identity.provider import IdentityProvider

logger = logging.getLogger(__name__)

ProfileHook = Callable[[User], Awaitable[bool]]


def _normalize(payload: dict) -> User:
    """Provider payload → User; a malformed payload counts as a provider failure."""
    try:
        return User.from_provider(payload)
    except (AttributeError, KeyError, TypeError, ValidationError) as exc:
        logger.warning("Malformed provider user payload: %s", exc)
        raise ProviderError("Invalid provider response: malformed user") from exc


class AuthTracker:
    def __init__(
        self,
        provider: IdentityProvider,
        ensure_profile: ProfileHook | None = None,
        oauth_redirect_url: str = "nero://login",
        signup_profile_delay_s: float = 0.0,
    ):
        self._provider = provider
        self._ensure_profile = ensure_profile
        self._oauth_redirect_url = oauth_redirect_url
        self._signup_profile_delay_s = signup_profile_delay_s
        self.phase: AuthPhase = AuthPhase.idle()
        self.user: User | None = None

    def _succeed(self, user: User) -> None:
        self.user = user
        self.phase = AuthPhase.succeeded(user)

    async def _check_profile(self, user: User) -> None:
        # A missing profile row never fails the auth itself
        if self._ensure_profile is None:
            return
        try:
            ok = await self._ensure_profile(user)
        except Exception:
            logger.exception("Profile check raised for %s", user.email or user.id)
            return
        if not ok:
            logger.warning("Profile issue detected for %s", user.email or user.id)

    async def sign_up(self, email: str, password: str) -> AuthPhase:
        self.phase = AuthPhase.loading()
        logger.info("Creating account for %s", email)
        try:
            user = _normalize(await self._provider.sign_up(email, password))
        except ProviderError as exc:
            self.phase = AuthPhase.failed(classify_error(exc.message))
            logger.warning("Sign up failed for %s: %s", email, exc.message)
            return self.phase

        if self._signup_profile_delay_s > 0:
            # profile row is created by a database trigger on signup
            await asyncio.sleep(self._signup_profile_delay_s)
        await self._check_profile(user)
        self._succeed(user)
        logger.info("Sign up completed for %s", email)
        return self.phase

    async def sign_in(self, email: str, password: str) -> AuthPhase:
        self.phase = AuthPhase.loading()
        logger.info("Signing in %s", email)
        try:
            user = _normalize(await self._provider.sign_in(email, password))
        except ProviderError as exc:
            self.phase = AuthPhase.failed(classify_error(exc.message))
            logger.warning("Sign in failed for %s: %s", email, exc.message)
            return self.phase

        await self._check_profile(user)
        self._succeed(user)
        logger.info("Sign in completed for %s", email)
        return self.phase

    async def sign_out(self) -> AuthPhase:
        try:
            await self._provider.sign_out()
        except ProviderError as exc:
            self.phase = AuthPhase.failed(AuthError.of(AuthErrorKind.network_error))
            logger.warning("Sign out failed: %s", exc.message)
            return self.phase
        self.user = None
        self.phase = AuthPhase.idle()
        logger.info("User signed out")
        return self.phase

    async def restore_session(self) -> AuthPhase:
        """Pick up an existing provider session. Any failure means idle, not an error."""
        self.phase = AuthPhase.loading()
        try:
            payload = await self._provider.get_session()
            user = _normalize(payload) if payload is not None else None
        except ProviderError as exc:
            logger.info("No session restored: %s", exc.message)
            user = None

        if user is None:
            self.user = None
            self.phase = AuthPhase.idle()
            return self.phase

        await self._check_profile(user)
        self._succeed(user)
        logger.info("Session restored for %s", user.email or user.id)
        return self.phase

    async def start(self, flag: LaunchFlag) -> AuthPhase:
        """Startup hook: clear leftovers on a fresh install, otherwise restore."""
        if flag.has_launched():
            return await self.restore_session()

        logger.info("Fresh installation detected, clearing any persisted auth data")
        try:
            await self._provider.sign_out()
        except ProviderError as exc:
            logger.warning("Error clearing auth data on fresh install: %s", exc.message)
        flag.mark_launched()
        self.user = None
        self.phase = AuthPhase.idle()
        return self.phase

    def oauth_url(self, provider: str) -> str:
        """Redirect URL that starts an OAuth flow; completion arrives via platform callback."""
        url = self._provider.oauth_url(provider, self._oauth_redirect_url)
        logger.info("Initiated %s OAuth sign-in", provider)
        return url

    def reset_phase(self) -> AuthPhase:
        self.phase = AuthPhase.idle()
        return self.phase
