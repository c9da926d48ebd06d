"""Client and polling configuration for pyrivian."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyrivian._constants import ANTI_FORGERY_RETRY_DELAY, DEFAULT_STATE_FILE
from pyrivian.exceptions import RivianConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env: Any, key: str, cast: type) -> Any:
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return None
    try:
        return cast(raw)
    except ValueError as exc:
        raise RivianConfigError(f"{key} must be a number, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class RivianConfig:
    """Client configuration.

    Parameters
    ----------
    username : str
        Rivian account email.
    password : str
        Rivian account password.
    authorization : str or None
        Optional ``access;refresh;user_session`` token triple. When set it
        takes precedence over the persisted credential file and is never
        written back to it.
    state_file : str
        Path of the persisted credential record.
    request_timeout : float
        Total timeout in seconds for a single GraphQL exchange.
    anti_forgery_retry_delay : float
        Seconds between attempts while bootstrapping the CSRF pair in
        :meth:`pyrivian.session.SessionManager.resume`.
    """

    username: str = ""
    password: str = ""
    authorization: str | None = None
    state_file: str = DEFAULT_STATE_FILE
    request_timeout: float = 30.0
    anti_forgery_retry_delay: float = ANTI_FORGERY_RETRY_DELAY

    def require_login_credentials(self) -> tuple[str, str]:
        """Return ``(username, password)`` or raise if either is missing."""
        if not self.username or not self.password:
            raise RivianConfigError("RIVIAN_USERNAME and RIVIAN_PASSWORD must be set to log in")
        return self.username, self.password

    @classmethod
    def from_env(cls, **overrides: Any) -> RivianConfig:
        """Create configuration from ``RIVIAN_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "RIVIAN_USERNAME": "username",
            "RIVIAN_PASSWORD": "password",
            "RIVIAN_AUTHORIZATION": "authorization",
            "RIVIAN_STATE_FILE": "state_file",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout = _env_number(env, "RIVIAN_REQUEST_TIMEOUT", float)
        if timeout is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = timeout

        config_kwargs.update(overrides)
        return cls(**config_kwargs)


@dataclasses.dataclass(frozen=True)
class PollConfig:
    """Adaptive poll loop settings.

    Parameters
    ----------
    poll_frequency : float
        Seconds between samples.
    inactivity_wait : float
        If the vehicle is awake and nothing changes for this long, pause
        once per ready cycle for ``sleep_wait``. ``0`` disables the pause.
    sleep_wait : float
        Length of the long pause that lets the vehicle go to sleep.
    show_all : bool
        Report every sample, not only changes.
    single_shot : bool
        Take one sample, report it and stop.
    metric : bool
        Report kilometres/kph instead of miles/mph.
    privacy : bool
        Leave location out of reports and change detection.
    """

    poll_frequency: float = 30
    inactivity_wait: float = 0
    sleep_wait: float = 40 * 60
    show_all: bool = False
    single_shot: bool = False
    metric: bool = False
    privacy: bool = False

    def __post_init__(self) -> None:
        if self.poll_frequency <= 0:
            raise RivianConfigError(f"poll_frequency must be positive, got {self.poll_frequency}")
        if self.inactivity_wait < 0:
            raise RivianConfigError(f"inactivity_wait must not be negative, got {self.inactivity_wait}")
        if self.sleep_wait < 0:
            raise RivianConfigError(f"sleep_wait must not be negative, got {self.sleep_wait}")

    @property
    def long_pause_enabled(self) -> bool:
        return self.inactivity_wait > 0

    @classmethod
    def from_env(cls, **overrides: Any) -> PollConfig:
        """Create poll settings from ``RIVIAN_POLL_*`` environment variables.

        ``None`` overrides are ignored so unset CLI flags fall through to
        the environment and then to the defaults.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_NUMBER_MAP = {
            "RIVIAN_POLL_FREQUENCY": "poll_frequency",
            "RIVIAN_POLL_INACTIVITY_WAIT": "inactivity_wait",
            "RIVIAN_POLL_SLEEP_WAIT": "sleep_wait",
        }
        for env_key, field_name in _ENV_NUMBER_MAP.items():
            val = _env_number(env, env_key, float)
            if val is not None:
                config_kwargs[field_name] = val

        show_all = env.get("RIVIAN_POLL_SHOW_ALL")
        if show_all is not None:
            config_kwargs["show_all"] = _env_bool(show_all, False)

        config_kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**config_kwargs)
