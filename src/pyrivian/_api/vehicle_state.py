"""Vehicle state query: GetVehicleState.

The minimal tier carries what the poll loop summarises; the full tier
adds doors, windows, closures, OTA, climate, security, tyres and seats.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from pyrivian._api._common import graphql_data
from pyrivian.exceptions import RivianMalformedResponseError
from pyrivian.models.vehicle_state import FieldSetTier, VehicleSnapshot

_logger = logging.getLogger(__name__)

MINIMAL_SIGNALS: tuple[str, ...] = (
    "powerState",
    "driveMode",
    "gearStatus",
    "vehicleMileage",
    "batteryLevel",
    "distanceToEmpty",
    "chargerStatus",
    "chargerState",
    "batteryLimit",
    "timeToEndOfCharge",
)

FULL_SIGNALS: tuple[str, ...] = (
    "alarmSoundStatus",
    "timeToEndOfCharge",
    "doorFrontLeftLocked",
    "doorFrontLeftClosed",
    "doorFrontRightLocked",
    "doorFrontRightClosed",
    "doorRearLeftLocked",
    "doorRearLeftClosed",
    "doorRearRightLocked",
    "doorRearRightClosed",
    "windowFrontLeftClosed",
    "windowFrontRightClosed",
    "windowRearLeftClosed",
    "windowRearRightClosed",
    "windowFrontLeftCalibrated",
    "windowFrontRightCalibrated",
    "windowRearLeftCalibrated",
    "windowRearRightCalibrated",
    "closureFrunkLocked",
    "closureFrunkClosed",
    "gearGuardLocked",
    "closureLiftgateLocked",
    "closureLiftgateClosed",
    "closureSideBinLeftLocked",
    "closureSideBinLeftClosed",
    "closureSideBinRightLocked",
    "closureSideBinRightClosed",
    "closureTailgateLocked",
    "closureTailgateClosed",
    "closureTonneauLocked",
    "closureTonneauClosed",
    "wiperFluidState",
    "powerState",
    "batteryHvThermalEventPropagation",
    "vehicleMileage",
    "brakeFluidLow",
    "gearStatus",
    "tirePressureStatusFrontLeft",
    "tirePressureStatusValidFrontLeft",
    "tirePressureStatusFrontRight",
    "tirePressureStatusValidFrontRight",
    "tirePressureStatusRearLeft",
    "tirePressureStatusValidRearLeft",
    "tirePressureStatusRearRight",
    "tirePressureStatusValidRearRight",
    "batteryLevel",
    "chargerState",
    "batteryLimit",
    "remoteChargingAvailable",
    "batteryHvThermalEvent",
    "rangeThreshold",
    "distanceToEmpty",
    "otaAvailableVersion",
    "otaAvailableVersionWeek",
    "otaAvailableVersionYear",
    "otaCurrentVersion",
    "otaCurrentVersionNumber",
    "otaCurrentVersionWeek",
    "otaCurrentVersionYear",
    "otaDownloadProgress",
    "otaInstallDuration",
    "otaInstallProgress",
    "otaInstallReady",
    "otaInstallTime",
    "otaInstallType",
    "otaStatus",
    "otaCurrentStatus",
    "cabinClimateInteriorTemperature",
    "cabinPreconditioningStatus",
    "cabinPreconditioningType",
    "petModeStatus",
    "petModeTemperatureStatus",
    "cabinClimateDriverTemperature",
    "gearGuardVideoStatus",
    "gearGuardVideoMode",
    "gearGuardVideoTermsAccepted",
    "defrostDefogStatus",
    "steeringWheelHeat",
    "seatFrontLeftHeat",
    "seatFrontRightHeat",
    "seatRearLeftHeat",
    "seatRearRightHeat",
    "chargerStatus",
    "seatFrontLeftVent",
    "seatFrontRightVent",
    "chargerDerateStatus",
    "driveMode",
)


def build_vehicle_state_query(tier: FieldSetTier) -> str:
    if tier is FieldSetTier.MINIMAL:
        selections = ["cloudConnection { lastSync }", "gnssLocation { latitude longitude }"]
        selections += [f"{name} {{ value }}" for name in MINIMAL_SIGNALS]
    else:
        selections = [
            "__typename",
            "cloudConnection { __typename lastSync }",
            "gnssLocation { __typename latitude longitude timeStamp }",
        ]
        selections += [f"{name} {{ __typename timeStamp value }}" for name in FULL_SIGNALS]
    return (
        "query GetVehicleState($vehicleID: String!) { vehicleState(id: $vehicleID) { "
        + " ".join(selections)
        + " } }"
    )


def build_vehicle_state_request(vehicle_id: str, tier: FieldSetTier) -> dict[str, Any]:
    return {
        "operationName": "GetVehicleState",
        "query": build_vehicle_state_query(tier),
        "variables": {"vehicleID": vehicle_id},
    }


def parse_vehicle_state_response(
    response: dict[str, Any],
    *,
    fetched_at: datetime | None = None,
) -> VehicleSnapshot:
    """Build a :class:`VehicleSnapshot` from a ``GetVehicleState`` response.

    Raises
    ------
    RivianMalformedResponseError
        If ``data.vehicleState`` is absent, does not validate, or lacks
        any signal the poll loop needs.
    """
    record = graphql_data(response, "vehicleState", "GetVehicleState")
    try:
        snapshot = VehicleSnapshot.model_validate(
            {**record, "fetched_at": fetched_at or datetime.now(UTC), "raw": record}
        )
    except ValidationError as exc:
        raise RivianMalformedResponseError(
            f"GetVehicleState record does not validate: {exc.error_count()} errors",
            status_code=200,
            body=response,
            endpoint="GetVehicleState",
        ) from exc

    missing = snapshot.missing_signals()
    if missing:
        raise RivianMalformedResponseError(
            f"GetVehicleState record missing {', '.join(missing)}",
            status_code=200,
            body=response,
            endpoint="GetVehicleState",
        )
    _logger.debug("Vehicle state parsed power=%s", snapshot.power)
    return snapshot
