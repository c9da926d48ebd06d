"""Authentication token models."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_TOKEN_CONFIG = ConfigDict(
    frozen=True,
    extra="ignore",
    populate_by_name=True,
    alias_generator=to_camel,
)


class CredentialBundle(BaseModel):
    """Long-lived tokens returned by a successful login.

    All three tokens are opaque and must be non-empty; a bundle with a
    missing token does not validate, so "partially logged in" cannot be
    represented. Tokens are never stripped or otherwise normalised.

    Parameters
    ----------
    access_token : str
        Bearer access token.
    refresh_token : str
        Refresh token.
    user_session_token : str
        Sent as ``U-Sess`` on every authenticated query.
    """

    model_config = _TOKEN_CONFIG

    access_token: str = Field(min_length=1)
    refresh_token: str = Field(min_length=1)
    user_session_token: str = Field(min_length=1)


class OtpChallenge(BaseModel):
    """Second-factor challenge issued by a password login."""

    model_config = _TOKEN_CONFIG

    otp_token: str = Field(min_length=1)


class AntiForgeryPair(BaseModel):
    """Short-lived CSRF and app-session tokens for one top-level operation."""

    model_config = _TOKEN_CONFIG

    csrf_token: str = Field(min_length=1)
    app_session_token: str = Field(min_length=1)


@dataclass(frozen=True, slots=True)
class LoginSuccess:
    """Password login completed without a second factor."""

    bundle: CredentialBundle


@dataclass(frozen=True, slots=True)
class OtpRequired:
    """Password accepted; an OTP code must be confirmed next."""

    challenge: OtpChallenge


LoginResult = LoginSuccess | OtpRequired
"""Outcome of :meth:`pyrivian.session.SessionManager.authenticate_with_password`."""
