"""Base model for Rivian GraphQL records.

Every wire model inherits from :class:`RivianBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase GraphQL keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that drops ``None`` values and
  the ``__typename`` discriminator so field defaults are used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class RivianBaseModel(BaseModel):
    """Base for Rivian GraphQL response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Original GraphQL record."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Drop nulls and ``__typename`` and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {k: v for k, v in values.items() if v is not None and k != "__typename"}
        # Keep the caller's raw= when constructing with kwargs.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
