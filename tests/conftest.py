from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from pyrivian._api.vehicle_state import parse_vehicle_state_response
from pyrivian.exceptions import RivianTransportError
from pyrivian.models.vehicle_state import VehicleSnapshot

SnapshotFactory = Callable[..., VehicleSnapshot]


def vehicle_state_record(
    *,
    power: str = "ready",
    mileage: float = 16090.0,
    battery: float = 80.04,
    range_km: float = 321.8,
    timestamp: str = "2026-01-01T00:00:00Z",
    latitude: float = 42.0,
    longitude: float = -71.0,
    charger: bool = True,
) -> dict[str, Any]:
    def signal(value: Any) -> dict[str, Any]:
        return {"__typename": "TimeStampedString", "timeStamp": timestamp, "value": value}

    record: dict[str, Any] = {
        "__typename": "VehicleState",
        "cloudConnection": {"lastSync": timestamp},
        "gnssLocation": {"latitude": latitude, "longitude": longitude, "timeStamp": timestamp},
        "powerState": signal(power),
        "driveMode": signal("everyday"),
        "gearStatus": signal("park"),
        "vehicleMileage": signal(mileage),
        "batteryLevel": signal(battery),
        "distanceToEmpty": signal(range_km),
    }
    if charger:
        record.update(
            {
                "chargerStatus": signal("chrgr_sts_not_connected"),
                "chargerState": signal("charging_ready"),
                "batteryLimit": signal(85.0),
                "timeToEndOfCharge": signal(80),
            }
        )
    return record


@pytest.fixture
def state_record() -> Callable[..., dict[str, Any]]:
    return vehicle_state_record


@pytest.fixture
def make_snapshot() -> SnapshotFactory:
    def _make(**kwargs: Any) -> VehicleSnapshot:
        return parse_vehicle_state_response({"data": {"vehicleState": vehicle_state_record(**kwargs)}})

    return _make


@dataclass
class FakeGraphQLBackend:
    """Answers GraphQL operations by ``operationName`` and records every call."""

    vehicle_id: str = "VEH-1"
    otp_required: bool = False
    login_rejected: bool = False
    otp_rejected: bool = False
    csrf_failures: int = 0
    state_failures: int = 0
    vehicle_state: dict[str, Any] = field(default_factory=vehicle_state_record)
    calls: list[tuple[str, str, dict[str, str]]] = field(default_factory=list)

    def count(self, operation: str) -> int:
        return sum(1 for _, op, _ in self.calls if op == operation)

    def headers_for(self, operation: str) -> list[dict[str, str]]:
        return [h for _, op, h in self.calls if op == operation]

    async def post_graphql(
        self,
        url: str,
        payload: Mapping[str, Any],
        headers: Mapping[str, str],
    ) -> dict[str, Any]:
        operation = str(payload["operationName"])
        self.calls.append((url, operation, dict(headers)))
        variables = payload.get("variables") or {}

        if operation == "CreateCSRFToken":
            if self.csrf_failures > 0:
                self.csrf_failures -= 1
                raise RivianTransportError("HTTP 503", status_code=503, body="unavailable", endpoint=operation)
            return {
                "data": {
                    "createCsrfToken": {
                        "__typename": "CreateCsrfTokenResponse",
                        "csrfToken": "csrf-1",
                        "appSessionToken": "a-sess-1",
                    }
                }
            }

        if operation == "Login":
            if self.login_rejected:
                raise RivianTransportError(
                    "HTTP 401",
                    status_code=401,
                    body={"errors": [{"extensions": {"code": "UNAUTHENTICATED"}}]},
                    endpoint=operation,
                )
            if self.otp_required:
                return {"data": {"login": {"__typename": "MobileMFALoginResponse", "otpToken": "otp-token-1"}}}
            return {
                "data": {
                    "login": {
                        "__typename": "MobileLoginResponse",
                        "accessToken": "access-1",
                        "refreshToken": "refresh-1",
                        "userSessionToken": "u-sess-1",
                    }
                }
            }

        if operation == "LoginWithOTP":
            if self.otp_rejected or variables.get("otpCode") != "123456":
                return {"data": None, "errors": [{"extensions": {"code": "BAD_USER_INPUT", "reason": "INVALID_OTP"}}]}
            return {
                "data": {
                    "loginWithOTP": {
                        "__typename": "MobileLoginResponse",
                        "accessToken": "access-otp",
                        "refreshToken": "refresh-otp",
                        "userSessionToken": "u-sess-otp",
                    }
                }
            }

        if operation == "vehicleOrders":
            return {
                "data": {
                    "orders": {
                        "data": [
                            {
                                "__typename": "Order",
                                "id": "ORDER-0001",
                                "orderDate": "2023-01-02T03:04:05.000Z",
                                "state": "ACTIVE",
                                "configurationStatus": "FINALIZED",
                                "fulfillmentSummaryStatus": "DELIVERED",
                                "items": [{"__typename": "Item", "sku": "R1T"}],
                                "consumerStatuses": {"isConsumerFlowComplete": True},
                            }
                        ]
                    }
                }
            }

        if operation == "order":
            return {
                "data": {
                    "order": {
                        "vin": "7FCTGAAL0NN000001",
                        "vehicle": {
                            "vehicleId": self.vehicle_id,
                            "vin": "7FCTGAAL0NN000001",
                            "modelYear": 2022,
                            "model": "R1T",
                            "make": "Rivian",
                        },
                        "items": [
                            {
                                "id": "item-1",
                                "configuration": {
                                    "options": [
                                        {"groupName": "Paint", "optionName": "Forest Green"},
                                        {"groupName": "Wheels", "optionName": "21\" Road"},
                                    ]
                                },
                            }
                        ],
                    }
                }
            }

        if operation == "GetVehicleState":
            if self.state_failures > 0:
                self.state_failures -= 1
                raise RivianTransportError("HTTP 502", status_code=502, body="bad gateway", endpoint=operation)
            if variables.get("vehicleID") != self.vehicle_id:
                return {"data": {"vehicleState": None}, "errors": [{"message": "not found"}]}
            return {"data": {"vehicleState": self.vehicle_state}}

        raise AssertionError(f"Unexpected operation in fake backend: {operation}")


@pytest.fixture
def backend() -> FakeGraphQLBackend:
    return FakeGraphQLBackend()
