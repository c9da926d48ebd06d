"""Credential persistence across process runs.

One record, one user: the three tokens of a :class:`CredentialBundle`
stored as versioned JSON. This is a convenience cache, not a vault; the
file is created ``0600`` but is otherwise plain text.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from pyrivian._constants import CREDENTIALS_FORMAT_VERSION
from pyrivian.exceptions import RivianNotAuthenticatedError
from pyrivian.models.token import CredentialBundle

_logger = logging.getLogger(__name__)

_LOGIN_HINT = "Please log in first (rivian-cli --login)"


class StoredCredentials(BaseModel):
    """On-disk record format."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    version: int = CREDENTIALS_FORMAT_VERSION
    access_token: str = Field(min_length=1)
    refresh_token: str = Field(min_length=1)
    user_session_token: str = Field(min_length=1)

    @classmethod
    def from_bundle(cls, bundle: CredentialBundle) -> StoredCredentials:
        return cls(
            access_token=bundle.access_token,
            refresh_token=bundle.refresh_token,
            user_session_token=bundle.user_session_token,
        )

    def to_bundle(self) -> CredentialBundle:
        return CredentialBundle(
            access_token=self.access_token,
            refresh_token=self.refresh_token,
            user_session_token=self.user_session_token,
        )


class CredentialStore:
    """File-backed store for a single credential bundle."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def save(self, bundle: CredentialBundle) -> None:
        """Persist *bundle*, replacing any previous record atomically.

        The record is written to a temporary file in the target
        directory and moved into place with :func:`os.replace`, so an
        interrupted write leaves the previous record intact.
        """
        record = StoredCredentials.from_bundle(bundle)
        payload = json.dumps(record.model_dump(by_alias=True), indent=2)

        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, 0o600)
            os.replace(tmp_name, self._path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise
        _logger.debug("Saved credentials to %s", self._path)

    def load(self) -> CredentialBundle:
        """Return the persisted bundle.

        Raises
        ------
        RivianNotAuthenticatedError
            If no record exists, or the record cannot be read as a
            current-version bundle.
        """
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise RivianNotAuthenticatedError(_LOGIN_HINT) from exc

        try:
            record = StoredCredentials.model_validate_json(text)
        except ValidationError as exc:
            raise RivianNotAuthenticatedError(f"Stored credentials in {self._path} are unreadable. {_LOGIN_HINT}") from exc

        if record.version != CREDENTIALS_FORMAT_VERSION:
            raise RivianNotAuthenticatedError(
                f"Stored credentials use format version {record.version}, expected "
                f"{CREDENTIALS_FORMAT_VERSION}. {_LOGIN_HINT}"
            )
        return record.to_bundle()

    def clear(self) -> bool:
        """Delete the record. Returns ``True`` if one existed."""
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        return True


def credentials_from_env(value: str) -> CredentialBundle:
    """Parse an ``access;refresh;user_session`` override string.

    Raises
    ------
    RivianNotAuthenticatedError
        If the string does not hold exactly three non-empty tokens.
    """
    parts = value.split(";")
    if len(parts) != 3 or not all(parts):
        raise RivianNotAuthenticatedError(
            "RIVIAN_AUTHORIZATION must be 'accessToken;refreshToken;userSessionToken'"
        )
    access_token, refresh_token, user_session_token = parts
    return CredentialBundle(
        access_token=access_token,
        refresh_token=refresh_token,
        user_session_token=user_session_token,
    )


def load_credentials(store: CredentialStore, override: str | None = None) -> CredentialBundle:
    """Resolve the bundle to use: the environment override, then the store."""
    if override:
        _logger.debug("Using credentials from RIVIAN_AUTHORIZATION")
        return credentials_from_env(override)
    return store.load()
