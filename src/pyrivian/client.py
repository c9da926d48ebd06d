"""High-level async client for the Rivian GraphQL API."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

import aiohttp

from pyrivian._api.orders import (
    build_order_request,
    build_vehicle_orders_request,
    parse_order_response,
    parse_vehicle_orders_response,
)
from pyrivian._api.vehicle_state import build_vehicle_state_request, parse_vehicle_state_response
from pyrivian._constants import GATEWAY_URL, ORDERS_URL
from pyrivian._transport import GraphQLTransport, Transport
from pyrivian.config import RivianConfig
from pyrivian.credentials import CredentialStore, load_credentials
from pyrivian.exceptions import RivianAuthenticationError, RivianError
from pyrivian.models.order import VehicleDetails, VehicleOrder
from pyrivian.models.token import CredentialBundle, OtpRequired
from pyrivian.models.vehicle_state import FieldSetTier, VehicleSnapshot
from pyrivian.session import AuthenticatedContext, SessionManager

_logger = logging.getLogger(__name__)

OtpPrompt = Callable[[], Awaitable[str]]


class RivianClient:
    """Async client for the Rivian API.

    Usage::

        async with RivianClient(config) as client:
            await client.resume()
            vehicles = await client.get_vehicles()
            snapshot = await client.fetch_snapshot(vehicles[0].vehicle_id)
    """

    def __init__(
        self,
        config: RivianConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        store: CredentialStore | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._store = store or CredentialStore(config.state_file)
        self._transport: Transport | None = None
        self._sessions: SessionManager | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RivianClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = GraphQLTransport(self._http_session, timeout=self._config.request_timeout)
        self._sessions = SessionManager(self._transport, retry_delay=self._config.anti_forgery_retry_delay)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._sessions = None

    @property
    def store(self) -> CredentialStore:
        return self._store

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self, otp_prompt: OtpPrompt | None = None) -> CredentialBundle:
        """Log in with the configured username/password and persist the bundle.

        *otp_prompt* is awaited for the code when the account requires a
        second factor.
        """
        sessions = self._require_sessions()
        username, password = self._config.require_login_credentials()

        result = await sessions.authenticate_with_password(username, password)
        if isinstance(result, OtpRequired):
            if otp_prompt is None:
                raise RivianAuthenticationError("Login requires an OTP code but no prompt was supplied")
            code = (await otp_prompt()).strip()
            bundle = await sessions.complete_otp(username, code, result.challenge.otp_token)
        else:
            bundle = result.bundle

        self._store.save(bundle)
        _logger.info("Login successful")
        return bundle

    async def resume(self) -> AuthenticatedContext:
        """Restore the stored (or environment) bundle into a ready session."""
        bundle = load_credentials(self._store, self._config.authorization)
        return await self._require_sessions().resume(bundle)

    async def ensure_context(self) -> AuthenticatedContext:
        """Return the current authenticated context, resuming if needed."""
        context = self._require_sessions().context
        if context is not None:
            return context
        return await self.resume()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_sessions(self) -> SessionManager:
        if self._sessions is None:
            raise RivianError("Client not initialized. Use 'async with RivianClient(...) as client:'")
        return self._sessions

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise RivianError("Client not initialized. Use 'async with RivianClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Read endpoints
    # ------------------------------------------------------------------

    async def get_vehicle_orders(self) -> list[VehicleOrder]:
        """Fetch pre-orders and vehicle orders on the account."""
        context = await self.ensure_context()
        response = await self._require_transport().post_graphql(
            GATEWAY_URL, build_vehicle_orders_request(), context.gateway_headers()
        )
        return parse_vehicle_orders_response(response)

    async def get_order_details(self, order_id: str) -> VehicleDetails:
        """Fetch the vehicle and configuration attached to one order."""
        context = await self.ensure_context()
        response = await self._require_transport().post_graphql(
            ORDERS_URL, build_order_request(order_id), context.transaction_headers()
        )
        return parse_order_response(response)

    async def get_vehicles(self, orders: list[VehicleOrder] | None = None) -> list[VehicleDetails]:
        """Resolve the vehicle behind every order, in order-list order."""
        if orders is None:
            orders = await self.get_vehicle_orders()
        return [await self.get_order_details(order.id) for order in orders]

    async def fetch_snapshot(
        self,
        vehicle_id: str,
        tier: FieldSetTier = FieldSetTier.MINIMAL,
        *,
        context: AuthenticatedContext | None = None,
    ) -> VehicleSnapshot:
        """Read the live vehicle state.

        Raises
        ------
        RivianTransportError
            Non-200 response or network failure.
        RivianMalformedResponseError
            ``vehicleState`` missing or lacking required signals.
        """
        context = context or await self.ensure_context()
        response = await self._require_transport().post_graphql(
            GATEWAY_URL,
            build_vehicle_state_request(vehicle_id, tier),
            context.gateway_headers(),
        )
        return parse_vehicle_state_response(response)
