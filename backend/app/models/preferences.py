"""Trip preference models representing a planning request."""

from __future__ import annotations

from datetime import date
from typing import Annotated, Literal

from pydantic import ConfigDict, Field, StringConstraints, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from backend.app.errors import InvalidInput

from .common import CamelModel, TravelClass

ActivityCategory = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2)]


class TripPreferences(CamelModel):
    """Immutable user input for a single planning request."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    start_city: str = Field(min_length=2, description="Origin city")
    destination_city: str = Field(min_length=2, description="Destination city")
    start_date: date = Field(description="First day of the trip window")
    end_date: date = Field(description="Last day of the trip window")
    trip_length_days: int = Field(gt=0, description="Requested trip length in days")
    activities: list[ActivityCategory] = Field(
        min_length=1, description="Desired activity categories"
    )
    weather_preferences: str = Field(min_length=2, description="Weather preference text")
    air_travel_class: TravelClass = Field(description="Cabin class")
    hotel_stars: Literal["3", "4", "5"] = Field(description="Hotel star rating")
    transportation_notes: str | None = Field(
        default=None, description="Free-text local transportation notes"
    )

    @model_validator(mode="after")
    def validate_end_after_start(self) -> TripPreferences:
        """Ensure the trip window is not empty."""
        if self.end_date <= self.start_date:
            raise ValueError("endDate must be after startDate")
        return self


def parse_trip_preferences(payload: object) -> TripPreferences:
    """Validate a raw request body into TripPreferences.

    Raises:
        InvalidInput: with field-level details when validation fails
    """
    try:
        return TripPreferences.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInput.from_validation_error(exc) from exc
