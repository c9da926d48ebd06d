"""Session lifecycle: anti-forgery bootstrap, password/OTP login, resume."""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel, ConfigDict

from pyrivian._api import _common
from pyrivian._api.session import (
    build_csrf_request,
    build_login_request,
    build_otp_request,
    parse_csrf_response,
    parse_login_response,
    parse_otp_response,
)
from pyrivian._constants import ANTI_FORGERY_RETRY_DELAY, BASE_HEADERS, GATEWAY_URL
from pyrivian._transport import Transport
from pyrivian.exceptions import RivianAuthenticationError, RivianTransportError
from pyrivian.models.token import (
    AntiForgeryPair,
    CredentialBundle,
    LoginResult,
    OtpRequired,
)

_logger = logging.getLogger(__name__)


class SessionState(enum.StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    AWAITING_OTP = "awaiting_otp"
    AUTHENTICATED = "authenticated"


class AuthenticatedContext(BaseModel):
    """Everything an authenticated query needs.

    Pairs the long-lived :class:`CredentialBundle` with the anti-forgery
    pair fetched for this top-level operation.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    bundle: CredentialBundle
    anti_forgery: AntiForgeryPair

    def gateway_headers(self) -> dict[str, str]:
        return _common.gateway_headers(self.anti_forgery, self.bundle)

    def transaction_headers(self) -> dict[str, str]:
        return _common.transaction_headers(self.anti_forgery, self.bundle)


class SessionManager:
    """Owns the authentication state machine.

    ``UNAUTHENTICATED -> AWAITING_OTP -> AUTHENTICATED``, or straight to
    ``AUTHENTICATED`` when no second factor is required. A failed OTP
    confirmation drops back to ``UNAUTHENTICATED``. Token expiry is not
    handled here.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        retry_delay: float = ANTI_FORGERY_RETRY_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._transport = transport
        self._retry_delay = retry_delay
        self._sleep = sleep
        self._state = SessionState.UNAUTHENTICATED
        self._context: AuthenticatedContext | None = None

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def context(self) -> AuthenticatedContext | None:
        return self._context

    async def create_anti_forgery(self) -> AntiForgeryPair:
        """Fetch a fresh CSRF/app-session pair."""
        response = await self._transport.post_graphql(GATEWAY_URL, build_csrf_request(), BASE_HEADERS)
        return parse_csrf_response(response)

    async def authenticate_with_password(self, username: str, password: str) -> LoginResult:
        """Run the password exchange.

        Returns :class:`LoginSuccess` when the account has no second
        factor, :class:`OtpRequired` when an OTP code must be confirmed
        with :meth:`complete_otp`.

        Raises
        ------
        RivianAuthenticationError
            Rejected credentials, non-200 status or unrecognised response.
        """
        pair = await self._pre_auth_pair("Login")
        try:
            response = await self._transport.post_graphql(
                GATEWAY_URL,
                build_login_request(username, password),
                _common.pre_auth_headers(pair),
            )
        except RivianTransportError as exc:
            self._state = SessionState.UNAUTHENTICATED
            raise RivianAuthenticationError(
                f"Login failed: {exc}", status_code=exc.status_code, body=exc.body
            ) from exc

        try:
            result = parse_login_response(response)
        except RivianAuthenticationError:
            self._state = SessionState.UNAUTHENTICATED
            raise

        if isinstance(result, OtpRequired):
            _logger.info("Login requires OTP confirmation")
            self._state = SessionState.AWAITING_OTP
        else:
            self._authenticated(result.bundle, pair)
        return result

    async def complete_otp(self, username: str, code: str, otp_token: str) -> CredentialBundle:
        """Exchange an OTP code and its token for a credential bundle.

        Raises
        ------
        RivianAuthenticationError
            OTP mismatch, expired token or transport failure. The
            session returns to ``UNAUTHENTICATED``.
        """
        try:
            pair = await self._pre_auth_pair("LoginWithOTP")
            response = await self._transport.post_graphql(
                GATEWAY_URL,
                build_otp_request(username, code, otp_token),
                _common.pre_auth_headers(pair),
            )
            bundle = parse_otp_response(response)
        except RivianTransportError as exc:
            self._state = SessionState.UNAUTHENTICATED
            raise RivianAuthenticationError(
                f"Login with OTP failed: {exc}", status_code=exc.status_code, body=exc.body
            ) from exc
        except RivianAuthenticationError:
            self._state = SessionState.UNAUTHENTICATED
            raise

        self._authenticated(bundle, pair)
        return bundle

    async def resume(self, bundle: CredentialBundle) -> AuthenticatedContext:
        """Wrap a stored bundle into a ready context.

        The bundle itself is not checked against the backend. The
        anti-forgery pair is retried with a fixed delay until it
        succeeds, because no authenticated call can be made without it.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                pair = await self.create_anti_forgery()
                break
            except RivianTransportError as exc:
                _logger.warning(
                    "CreateCSRFToken attempt %d failed (%s); retrying in %.0fs",
                    attempt,
                    exc,
                    self._retry_delay,
                )
                await self._sleep(self._retry_delay)
        return self._authenticated(bundle, pair)

    async def _pre_auth_pair(self, operation: str) -> AntiForgeryPair:
        try:
            return await self.create_anti_forgery()
        except RivianTransportError as exc:
            self._state = SessionState.UNAUTHENTICATED
            raise RivianAuthenticationError(
                f"{operation} failed: could not create CSRF token: {exc}",
                status_code=exc.status_code,
                body=exc.body,
            ) from exc

    def _authenticated(self, bundle: CredentialBundle, pair: AntiForgeryPair) -> AuthenticatedContext:
        self._context = AuthenticatedContext(bundle=bundle, anti_forgery=pair)
        self._state = SessionState.AUTHENTICATED
        return self._context
