"""Session exchanges: CreateCSRFToken, Login and LoginWithOTP."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from pyrivian._api._common import graphql_data
from pyrivian._redact import redact_for_log
from pyrivian.exceptions import RivianAuthenticationError, RivianMalformedResponseError
from pyrivian.models.token import (
    AntiForgeryPair,
    CredentialBundle,
    LoginResult,
    LoginSuccess,
    OtpChallenge,
    OtpRequired,
)

_logger = logging.getLogger(__name__)

CSRF_QUERY = "mutation CreateCSRFToken {createCsrfToken {__typename csrfToken appSessionToken}}"

LOGIN_QUERY = (
    "mutation Login($email: String!, $password: String!) {\n"
    "  login(email: $email, password: $password) {\n"
    "    __typename\n"
    "    ... on MobileLoginResponse {\n"
    "      __typename\n"
    "      accessToken\n"
    "      refreshToken\n"
    "      userSessionToken\n"
    "    }\n"
    "    ... on MobileMFALoginResponse {\n"
    "      __typename\n"
    "      otpToken\n"
    "    }\n"
    "  }\n"
    "}"
)

LOGIN_WITH_OTP_QUERY = (
    "mutation LoginWithOTP($email: String!, $otpCode: String!, $otpToken: String!) {\n"
    "  loginWithOTP(email: $email, otpCode: $otpCode, otpToken: $otpToken) {\n"
    "    __typename\n"
    "    ... on MobileLoginResponse {\n"
    "      __typename\n"
    "      accessToken\n"
    "      refreshToken\n"
    "      userSessionToken\n"
    "    }\n"
    "  }\n"
    "}"
)


def build_csrf_request() -> dict[str, Any]:
    return {"operationName": "CreateCSRFToken", "query": CSRF_QUERY, "variables": None}


def parse_csrf_response(response: dict[str, Any]) -> AntiForgeryPair:
    """Extract the anti-forgery pair from a ``CreateCSRFToken`` response."""
    record = graphql_data(response, "createCsrfToken", "CreateCSRFToken")
    try:
        return AntiForgeryPair.model_validate(record)
    except ValidationError as exc:
        raise RivianMalformedResponseError(
            "CreateCSRFToken response missing csrfToken/appSessionToken",
            status_code=200,
            body=response,
            endpoint="CreateCSRFToken",
        ) from exc


def build_login_request(username: str, password: str) -> dict[str, Any]:
    return {
        "operationName": "Login",
        "query": LOGIN_QUERY,
        "variables": {"email": username, "password": password},
    }


def parse_login_response(response: dict[str, Any], *, status_code: int = 200) -> LoginResult:
    """Resolve a ``Login`` response into :class:`LoginSuccess` or :class:`OtpRequired`.

    Raises
    ------
    RivianAuthenticationError
        If the response carries neither an OTP token nor a full set of
        credentials (rejected password, GraphQL error, unknown shape).
    """
    _logger.debug("Login response parsed=%s", redact_for_log(response))
    data = response.get("data")
    login = data.get("login") if isinstance(data, dict) else None
    if isinstance(login, dict):
        if login.get("otpToken"):
            return OtpRequired(OtpChallenge.model_validate(login))
        try:
            return LoginSuccess(CredentialBundle.model_validate(login))
        except ValidationError:
            pass
    raise RivianAuthenticationError(
        f"Login failed: status={status_code} details={redact_for_log(response)}",
        status_code=status_code,
        body=response,
    )


def build_otp_request(username: str, otp_code: str, otp_token: str) -> dict[str, Any]:
    return {
        "operationName": "LoginWithOTP",
        "query": LOGIN_WITH_OTP_QUERY,
        "variables": {"email": username, "otpCode": otp_code, "otpToken": otp_token},
    }


def parse_otp_response(response: dict[str, Any], *, status_code: int = 200) -> CredentialBundle:
    """Extract the credential bundle from a ``LoginWithOTP`` response."""
    data = response.get("data")
    login = data.get("loginWithOTP") if isinstance(data, dict) else None
    if isinstance(login, dict):
        try:
            return CredentialBundle.model_validate(login)
        except ValidationError:
            pass
    raise RivianAuthenticationError(
        f"Login with OTP failed: status={status_code} details={redact_for_log(response)}",
        status_code=status_code,
        body=response,
    )
