"""Header construction and response unwrapping shared by endpoint modules."""

from __future__ import annotations

import uuid
from typing import Any

from pyrivian._constants import BASE_HEADERS
from pyrivian.exceptions import RivianMalformedResponseError
from pyrivian.models.token import AntiForgeryPair, CredentialBundle


def client_id(prefix: str = "m-ios") -> str:
    """Per-request ``Dc-Cid`` correlation id."""
    return f"{prefix}-{uuid.uuid4()}"


def pre_auth_headers(pair: AntiForgeryPair) -> dict[str, str]:
    """Headers for login exchanges (anti-forgery pair, no user session)."""
    return {
        **BASE_HEADERS,
        "Csrf-Token": pair.csrf_token,
        "A-Sess": pair.app_session_token,
        "Dc-Cid": client_id(),
    }


def gateway_headers(pair: AntiForgeryPair, bundle: CredentialBundle) -> dict[str, str]:
    """Headers for authenticated gateway queries."""
    return {
        **pre_auth_headers(pair),
        "U-Sess": bundle.user_session_token,
    }


def transaction_headers(pair: AntiForgeryPair, bundle: CredentialBundle) -> dict[str, str]:
    """Headers for the orders (``t2d``) service."""
    headers = gateway_headers(pair, bundle)
    headers.update(
        {
            "Dc-Cid": f"t2d--{uuid.uuid4()}--{uuid.uuid4()}",
            "App-Id": "t2d",
        }
    )
    return headers


def graphql_data(response: dict[str, Any], field: str, operation: str) -> dict[str, Any]:
    """Return ``response["data"][field]`` or raise if it is not an object."""
    data = response.get("data")
    record = data.get(field) if isinstance(data, dict) else None
    if not isinstance(record, dict):
        errors = response.get("errors")
        raise RivianMalformedResponseError(
            f"{operation} response missing data.{field}" + (f": {errors}" if errors else ""),
            status_code=200,
            body=response,
            endpoint=operation,
        )
    return record
