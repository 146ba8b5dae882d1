"""Component option models produced by the research and composition stages."""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .common import CamelModel


def coerce_option_id(value: Any) -> Any:
    """Accept numeric ids from generated JSON by converting them to strings."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class ComponentOption(CamelModel):
    """An identifiable, priceable offering for one trip component."""

    # Generated options often carry extra provider fields; keep them.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str = Field(min_length=1, description="Option id, unique within its component")
    label: str = Field(default="", description="Display label")
    cost_usd: float | None = Field(default=None, description="Total cost in USD")
    notes: str | None = Field(default=None, description="Free-text notes")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        return coerce_option_id(v)


class FlightOption(ComponentOption):
    """Round-trip flight option with local schedule timestamps."""

    airline: str | None = None
    route: str | None = None
    travel_class: str | None = Field(default=None, alias="class")
    outbound_departure_local: str | None = None
    outbound_arrival_local: str | None = None
    return_departure_local: str | None = None
    return_arrival_local: str | None = None
    days_at_destination: int | None = None
    nights_at_destination: int | None = None


class HotelOption(ComponentOption):
    """Hotel option priced per night."""

    stars: float | None = None
    nightly_usd: float | None = None
    nights: int | None = None
    stay_nights: int | None = None


class CarOption(ComponentOption):
    """Car rental option priced per day."""

    company: str | None = None
    car_type: str | None = None
    daily_rate_usd: float | None = None
    rental_days: int | None = None
