"""Itinerary models for the normalized pipeline output."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .common import CamelModel, ComponentType, UsdAmount
from .options import CarOption, ComponentOption, FlightOption, HotelOption


class StayWindow(CamelModel):
    """Derived arrival/departure timing and day/night counts at the destination."""

    arrival_local: str | None = Field(default=None, description="Arrival timestamp or date")
    departure_local: str | None = Field(
        default=None, description="Departure timestamp or date"
    )
    days_at_destination: int = Field(ge=1, description="Whole days at destination")
    nights_at_destination: int = Field(ge=0, description="Whole nights at destination")
    calculation_note: str = Field(description="Which derivation path produced this window")
    source: Literal["flight_schedule", "date_window", "trip_length"] = Field(
        description="Derivation path"
    )


class TripComponent(CamelModel):
    """Options offered for one component plus the confirmation prompt."""

    options: list[ComponentOption] = Field(description="Ordered options")
    recommended_option_id: str = Field(description="Recommended option id")
    confirmation_question: str = Field(description="Question shown to the user")

    def find_option(self, option_id: str) -> ComponentOption | None:
        """Return the option with the given id, if offered."""
        return next((opt for opt in self.options if opt.id == option_id), None)

    def recommended_option(self) -> ComponentOption | None:
        """Return the recommended option, falling back to the first option."""
        if not self.options:
            return None
        return self.find_option(self.recommended_option_id) or self.options[0]


class FlightComponent(TripComponent):
    options: list[FlightOption]


class HotelComponent(TripComponent):
    options: list[HotelOption]


class CarRentalComponent(TripComponent):
    options: list[CarOption]


class TripComponents(CamelModel):
    """The three confirmable components of a trip."""

    flight: FlightComponent
    hotel: HotelComponent
    car_rental: CarRentalComponent

    def get(self, component: ComponentType) -> TripComponent:
        """Look up a component by type."""
        if component is ComponentType.flight:
            return self.flight
        if component is ComponentType.hotel:
            return self.hotel
        return self.car_rental


class ActivityItem(CamelModel):
    """A scheduled activity in the itinerary."""

    name: str
    category: str = "general"
    estimated_cost_usd: float = 0.0
    scheduled_day: str | None = None
    notes: str = ""


class CostSummary(CamelModel):
    """Estimated trip costs; total is the exact sum of the parts."""

    flight_usd: UsdAmount
    hotel_usd: UsdAmount
    car_rental_usd: UsdAmount
    activities_usd: UsdAmount
    total_usd: UsdAmount


class ItineraryDraft(CamelModel):
    """Normalized pipeline output awaiting per-component confirmation."""

    trip_summary: str
    stay_at_destination: StayWindow
    components: TripComponents
    activities: list[ActivityItem] = Field(default_factory=list)
    safety_concerns: list[str] = Field(default_factory=list)
    packing_list: list[str] = Field(default_factory=list)
    local_transport_advice: list[str] = Field(default_factory=list)
    weather_summary: str | None = None
    research_notes: list[str] = Field(default_factory=list)
    pricing_date_note: str | None = None
    estimated_cost_summary: CostSummary
    disclaimer: str
