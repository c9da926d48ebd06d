"""pyrivian - Async Python client and poller for the Rivian vehicle API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyrivian")
except PackageNotFoundError:
    __version__ = "0+local"
from pyrivian.client import RivianClient
from pyrivian.config import PollConfig, RivianConfig
from pyrivian.credentials import CredentialStore, credentials_from_env, load_credentials
from pyrivian.exceptions import (
    RivianAuthenticationError,
    RivianConfigError,
    RivianError,
    RivianMalformedResponseError,
    RivianNotAuthenticatedError,
    RivianTransportError,
)
from pyrivian.models import (
    AntiForgeryPair,
    CredentialBundle,
    FieldSetTier,
    LoginSuccess,
    OtpChallenge,
    OtpRequired,
    VehicleDetails,
    VehicleOrder,
    VehicleSnapshot,
)
from pyrivian.polling import AdaptiveScheduler, PollSummary
from pyrivian.session import AuthenticatedContext, SessionManager, SessionState

__all__ = [
    "__version__",
    "AdaptiveScheduler",
    "AntiForgeryPair",
    "AuthenticatedContext",
    "CredentialBundle",
    "CredentialStore",
    "FieldSetTier",
    "LoginSuccess",
    "OtpChallenge",
    "OtpRequired",
    "PollConfig",
    "PollSummary",
    "RivianAuthenticationError",
    "RivianClient",
    "RivianConfig",
    "RivianConfigError",
    "RivianError",
    "RivianMalformedResponseError",
    "RivianNotAuthenticatedError",
    "RivianTransportError",
    "SessionManager",
    "SessionState",
    "VehicleDetails",
    "VehicleOrder",
    "VehicleSnapshot",
    "credentials_from_env",
    "load_credentials",
]
