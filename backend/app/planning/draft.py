"""Assemble and recompute normalized itinerary drafts."""

from __future__ import annotations

from backend.app.errors import StageOutputInvalid
from backend.app.models.common import StageName
from backend.app.models.itinerary import ItineraryDraft, TripComponents
from backend.app.models.options import FlightOption
from backend.app.models.preferences import TripPreferences
from backend.app.models.stages import CompositionDocument, ResearchDocument, SafetyDocument

from .activities import activities_from_composition, activities_from_research
from .costs import estimate_totals
from .normalize import (
    normalize_car_component,
    normalize_flight_component,
    normalize_hotel_component,
)
from .stay import compute_stay_window

DEFAULT_TRIP_SUMMARY = "Trip itinerary draft"
DEFAULT_DISCLAIMER = "No purchases are made in this app."


def normalize_itinerary(
    composition: CompositionDocument,
    research: ResearchDocument,
    safety: SafetyDocument,
    preferences: TripPreferences,
) -> ItineraryDraft:
    """Turn validated stage documents into a normalized ItineraryDraft.

    The stay window and cost summary are always derived here; any values
    the composition stage proposed for them are discarded.

    Raises:
        StageOutputInvalid: if a component has no options in either the
            composition or the research document
    """
    drafts = composition.components
    recommended_flight = drafts.flight.recommended_option_id if drafts.flight else None
    stay = compute_stay_window(research.flight_options, preferences, recommended_flight)

    flight = normalize_flight_component(drafts.flight, research.flight_options)
    hotel = normalize_hotel_component(drafts.hotel, research.hotel_options, stay)
    car = normalize_car_component(drafts.car_rental, research.car_rental_options, stay)

    missing = [
        name
        for name, component in (("flight", flight), ("hotel", hotel), ("carRental", car))
        if component is None
    ]
    if missing:
        raise StageOutputInvalid(
            StageName.composition.value,
            f"produced no options for {', '.join(missing)}",
        )

    components = TripComponents(flight=flight, hotel=hotel, car_rental=car)

    if composition.activities is not None:
        activities = activities_from_composition(
            composition.activities, preferences.activities
        )
    else:
        activities = activities_from_research(research.activity_ideas, preferences.activities)

    return ItineraryDraft(
        trip_summary=composition.trip_summary or DEFAULT_TRIP_SUMMARY,
        stay_at_destination=stay,
        components=components,
        activities=activities,
        safety_concerns=(
            composition.safety_concerns
            if composition.safety_concerns is not None
            else list(safety.safety_concerns)
        ),
        packing_list=(
            composition.packing_list
            if composition.packing_list is not None
            else list(safety.packing_list)
        ),
        local_transport_advice=list(safety.local_transport_advice),
        weather_summary=safety.weather_summary,
        research_notes=list(research.research_notes),
        pricing_date_note=research.pricing_date_note,
        estimated_cost_summary=estimate_totals(components, activities),
        disclaimer=composition.disclaimer or DEFAULT_DISCLAIMER,
    )


def recompute_from_flight(
    itinerary: ItineraryDraft,
    preferences: TripPreferences,
    flight_option_id: str,
) -> ItineraryDraft:
    """Re-derive everything that depends on the chosen flight.

    Recommends the chosen flight, recomputes the stay window from its
    schedule, re-prices hotel and car options against the new stay, and
    recomputes the cost summary. Returns a new draft; the input is not
    modified. Unknown flight ids leave the draft unchanged.
    """
    updated = itinerary.model_copy(deep=True)
    flight = updated.components.flight
    selected = flight.find_option(flight_option_id)
    if not isinstance(selected, FlightOption):
        return updated

    flight.recommended_option_id = flight_option_id
    stay = compute_stay_window([selected], preferences, flight_option_id)
    updated.stay_at_destination = stay

    components = updated.components
    components.hotel = normalize_hotel_component(
        components.hotel, components.hotel.options, stay
    )
    components.car_rental = normalize_car_component(
        components.car_rental, components.car_rental.options, stay
    )
    updated.estimated_cost_summary = estimate_totals(components, updated.activities)
    return updated
