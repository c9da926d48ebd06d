"""Data models for Rivian API records."""

from pyrivian.models.order import VehicleDetails, VehicleOrder
from pyrivian.models.token import (
    AntiForgeryPair,
    CredentialBundle,
    LoginResult,
    LoginSuccess,
    OtpChallenge,
    OtpRequired,
)
from pyrivian.models.vehicle_state import (
    CloudConnection,
    FieldSetTier,
    GnssLocation,
    NumericSignal,
    SignalValue,
    VehicleSnapshot,
)

__all__ = [
    "AntiForgeryPair",
    "CloudConnection",
    "CredentialBundle",
    "FieldSetTier",
    "GnssLocation",
    "NumericSignal",
    "LoginResult",
    "LoginSuccess",
    "OtpChallenge",
    "OtpRequired",
    "SignalValue",
    "VehicleDetails",
    "VehicleOrder",
    "VehicleSnapshot",
]
