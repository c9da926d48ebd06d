"""Vehicle order and vehicle detail models."""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from pyrivian.models._base import RivianBaseModel


class VehicleOrder(RivianBaseModel):
    """An entry of the ``vehicleOrders`` list."""

    id: str
    order_date: str = ""
    state: str = ""
    configuration_status: str = ""
    fulfillment_summary_status: str = ""
    items: list[str] = Field(default_factory=list)
    is_consumer_flow_complete: bool = False

    @model_validator(mode="before")
    @classmethod
    def _flatten(cls, values: Any) -> Any:
        """Reduce ``items`` to SKUs and lift ``consumerStatuses``."""
        if not isinstance(values, dict):
            return values
        flat = dict(values)
        items = flat.get("items")
        if isinstance(items, list):
            skus = (i.get("sku") if isinstance(i, dict) else i for i in items)
            flat["items"] = [sku for sku in skus if sku]
        statuses = flat.get("consumerStatuses")
        if isinstance(statuses, dict) and "isConsumerFlowComplete" not in flat:
            flat["isConsumerFlowComplete"] = bool(statuses.get("isConsumerFlowComplete"))
        flat.setdefault("raw", dict(values))
        return flat


class VehicleDetails(RivianBaseModel):
    """Vehicle attached to an order, with its configuration options.

    ``options`` maps configuration group name (e.g. ``"Paint"``) to the
    chosen option name.
    """

    vehicle_id: str = ""
    vin: str = ""
    model_year: int | str | None = None
    make: str = ""
    model: str = ""
    options: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_order(cls, order: dict[str, Any]) -> VehicleDetails:
        vehicle = order.get("vehicle") or {}
        options: dict[str, str] = {}
        for item in order.get("items") or []:
            configuration = item.get("configuration") if isinstance(item, dict) else None
            if not configuration:
                continue
            for option in configuration.get("options") or []:
                group = option.get("groupName")
                if group:
                    options[group] = option.get("optionName") or ""
        return cls.model_validate({**vehicle, "options": options, "raw": order})

    def as_display_dict(self) -> dict[str, Any]:
        """Flat name/value view in display order."""
        data: dict[str, Any] = {
            "vehicleId": self.vehicle_id,
            "vin": self.vin,
            "modelYear": self.model_year,
            "make": self.make,
            "model": self.model,
        }
        data.update(self.options)
        return data
