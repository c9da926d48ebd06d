"""Custom exception hierarchy for pyrivian."""

from __future__ import annotations

from typing import Any


class RivianError(Exception):
    """Base exception for all pyrivian errors."""


class RivianConfigError(RivianError):
    """Invalid or missing configuration."""


class RivianTransportError(RivianError):
    """HTTP-level failure (network, non-200)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: Any = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.endpoint = endpoint
        super().__init__(message)


class RivianMalformedResponseError(RivianTransportError):
    """Response parsed but is not JSON or lacks the expected fields.

    The poll loop handles this exactly like a transport failure: the
    sample is skipped and the next tick retries.
    """


class RivianAuthenticationError(RivianError):
    """Password login or OTP confirmation was rejected."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: Any = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class RivianNotAuthenticatedError(RivianError):
    """No usable credential bundle is available.

    Raised by the credential store when nothing was persisted (or the
    record is unreadable) and no environment override is set.
    """
