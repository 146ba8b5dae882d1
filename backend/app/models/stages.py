"""Per-stage document schemas validated at the stage contract boundary."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from .common import CamelModel
from .options import CarOption, FlightOption, HotelOption, coerce_option_id


def _none_as_empty(value: Any) -> Any:
    return [] if value is None else value


def _unique_option_ids(options: list[Any]) -> list[Any]:
    """Reject option lists where two options share an id."""
    seen: set[str] = set()
    for option in options:
        if option.id in seen:
            raise ValueError(f"duplicate option id '{option.id}'")
        seen.add(option.id)
    return options


class ActivityIdea(CamelModel):
    """Activity suggestion from the research stage."""

    name: str
    estimated_cost_usd: float | None = 0.0
    why_fit: str | None = ""
    category: str | None = None


class ResearchDocument(CamelModel):
    """Output of the research stage."""

    flight_options: list[FlightOption] = Field(default_factory=list)
    hotel_options: list[HotelOption] = Field(default_factory=list)
    car_rental_options: list[CarOption] = Field(default_factory=list)
    activity_ideas: list[ActivityIdea] = Field(default_factory=list)
    research_notes: list[str] = Field(default_factory=list)
    pricing_date_note: str | None = None

    lists_default = field_validator(
        "flight_options",
        "hotel_options",
        "car_rental_options",
        "activity_ideas",
        "research_notes",
        mode="before",
    )(_none_as_empty)
    options_unique = field_validator(
        "flight_options", "hotel_options", "car_rental_options"
    )(_unique_option_ids)


class SafetyDocument(CamelModel):
    """Output of the safety and packing stage."""

    safety_concerns: list[str] = Field(default_factory=list)
    packing_list: list[str] = Field(default_factory=list)
    local_transport_advice: list[str] = Field(default_factory=list)
    weather_summary: str | None = None

    lists_default = field_validator(
        "safety_concerns", "packing_list", "local_transport_advice", mode="before"
    )(_none_as_empty)


class ComponentDraft(CamelModel):
    """A component as proposed by the composition stage, before normalization."""

    recommended_option_id: str | None = None
    confirmation_question: str | None = None

    @field_validator("recommended_option_id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        return coerce_option_id(v)


class FlightComponentDraft(ComponentDraft):
    options: list[FlightOption] = Field(default_factory=list)

    options_default = field_validator("options", mode="before")(_none_as_empty)
    options_unique = field_validator("options")(_unique_option_ids)


class HotelComponentDraft(ComponentDraft):
    options: list[HotelOption] = Field(default_factory=list)

    options_default = field_validator("options", mode="before")(_none_as_empty)
    options_unique = field_validator("options")(_unique_option_ids)


class CarComponentDraft(ComponentDraft):
    options: list[CarOption] = Field(default_factory=list)

    options_default = field_validator("options", mode="before")(_none_as_empty)
    options_unique = field_validator("options")(_unique_option_ids)


class ComponentDrafts(CamelModel):
    flight: FlightComponentDraft | None = None
    hotel: HotelComponentDraft | None = None
    car_rental: CarComponentDraft | None = None


class ActivityDraft(CamelModel):
    """Scheduled activity as proposed by the composition stage."""

    name: str
    category: str | None = None
    estimated_cost_usd: float | None = 0.0
    scheduled_day: str | None = None
    notes: str | None = ""


class CompositionDocument(CamelModel):
    """Output of the itinerary composition stage.

    Cost summaries and stay windows the generator proposes are accepted but
    ignored; both are always recomputed downstream.
    """

    trip_summary: str | None = None
    components: ComponentDrafts = Field(default_factory=ComponentDrafts)
    activities: list[ActivityDraft] | None = None
    safety_concerns: list[str] | None = None
    packing_list: list[str] | None = None
    disclaimer: str | None = None

    @field_validator("components", mode="before")
    @classmethod
    def _components_default(cls, v: Any) -> Any:
        return {} if v is None else v


class FinalReviewDocument(CamelModel):
    """Output of the final review stage."""

    final_summary: str = ""
    final_confirmation_question: str = "Do you approve this itinerary?"
    purchase_reminder: str = "No purchases are made"
