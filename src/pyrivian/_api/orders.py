"""Order queries: vehicleOrders (gateway) and order (orders service)."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from pyrivian._api._common import graphql_data
from pyrivian.exceptions import RivianMalformedResponseError
from pyrivian.models.order import VehicleDetails, VehicleOrder

VEHICLE_ORDERS_QUERY = (
    "query vehicleOrders { orders(input: {orderTypes: [PRE_ORDER, VEHICLE], pageInfo: {from: 0, size: 10000}}) "
    "{ __typename data { __typename id orderDate state configurationStatus fulfillmentSummaryStatus "
    "items { __typename sku } consumerStatuses { __typename isConsumerFlowComplete } } } }"
)

ORDER_QUERY = (
    "query order($id: String!) { order(id: $id) { vin state "
    "vehicle { vehicleId vin modelYear model make } "
    "items { id title productId type sku "
    "configuration { version options { optionId optionName groupId groupName } } } } }"
)


def build_vehicle_orders_request() -> dict[str, Any]:
    return {"operationName": "vehicleOrders", "query": VEHICLE_ORDERS_QUERY, "variables": {}}


def parse_vehicle_orders_response(response: dict[str, Any]) -> list[VehicleOrder]:
    orders = graphql_data(response, "orders", "vehicleOrders")
    entries = orders.get("data")
    if not isinstance(entries, list):
        raise RivianMalformedResponseError(
            "vehicleOrders response missing orders.data",
            status_code=200,
            body=response,
            endpoint="vehicleOrders",
        )
    try:
        return [VehicleOrder.model_validate(entry) for entry in entries]
    except ValidationError as exc:
        raise RivianMalformedResponseError(
            "vehicleOrders entry does not validate",
            status_code=200,
            body=response,
            endpoint="vehicleOrders",
        ) from exc


def build_order_request(order_id: str) -> dict[str, Any]:
    return {"operationName": "order", "query": ORDER_QUERY, "variables": {"id": order_id}}


def parse_order_response(response: dict[str, Any]) -> VehicleDetails:
    order = graphql_data(response, "order", "order")
    if not isinstance(order.get("vehicle"), dict):
        raise RivianMalformedResponseError(
            "order response missing vehicle",
            status_code=200,
            body=response,
            endpoint="order",
        )
    return VehicleDetails.from_order(order)
