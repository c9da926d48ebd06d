"""HTTP transport for GraphQL exchanges."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyrivian._redact import redact_for_log
from pyrivian.exceptions import RivianMalformedResponseError, RivianTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Endpoint modules depend on this protocol only, so tests can pass a
    fake backend instead of :class:`GraphQLTransport`.
    """

    async def post_graphql(
        self,
        url: str,
        payload: Mapping[str, Any],
        headers: Mapping[str, str],
    ) -> dict[str, Any]:
        ...


class GraphQLTransport:
    """POSTs GraphQL operations and returns the decoded JSON body."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float = 30.0) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def post_graphql(
        self,
        url: str,
        payload: Mapping[str, Any],
        headers: Mapping[str, str],
    ) -> dict[str, Any]:
        """Send one GraphQL operation.

        Raises
        ------
        RivianTransportError
            Network failure or non-200 status. ``body`` carries the
            decoded JSON when the server sent any, the text otherwise.
        RivianMalformedResponseError
            A 200 response whose body is not a JSON object.
        """
        operation = str(payload.get("operationName", ""))
        _logger.debug("POST %s operation=%s variables=%s", url, operation, redact_for_log(payload.get("variables")))

        try:
            async with self._http.post(
                url,
                data=json.dumps(payload),
                headers=dict(headers),
                timeout=self._timeout,
            ) as resp:
                status = resp.status
                text = await resp.text()
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise RivianTransportError(
                f"Request {operation} to {url} failed: {exc!r}",
                endpoint=operation,
            ) from exc

        body: Any
        try:
            body = json.loads(text)
        except json.JSONDecodeError:
            body = text

        if status != 200:
            _logger.warning("GraphQL error: status=%s operation=%s", status, operation)
            raise RivianTransportError(
                f"HTTP {status} from {operation}: {text[:200]}",
                status_code=status,
                body=body,
                endpoint=operation,
            )

        if not isinstance(body, dict):
            raise RivianMalformedResponseError(
                f"Invalid JSON from {operation}: {text[:200]}",
                status_code=status,
                body=body,
                endpoint=operation,
            )

        _logger.debug("Response %s: %s", operation, redact_for_log(body))
        return body
