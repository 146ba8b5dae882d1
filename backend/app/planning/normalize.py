"""Component normalization: canonical options with stay-consistent pricing."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from backend.app.models.common import round_usd
from backend.app.models.itinerary import (
    CarRentalComponent,
    FlightComponent,
    HotelComponent,
    StayWindow,
    TripComponent,
)
from backend.app.models.options import CarOption, ComponentOption, FlightOption, HotelOption
from backend.app.models.stages import ComponentDraft

FLIGHT_QUESTION = "Please confirm this flight option."
HOTEL_QUESTION = "Please confirm this hotel option."
CAR_QUESTION = "Please confirm this car rental option."

OptionT = TypeVar("OptionT", bound=ComponentOption)
ComponentT = TypeVar("ComponentT", bound=TripComponent)


def _first_by_id(options: Sequence[OptionT]) -> list[OptionT]:
    """Copy options, keeping only the first option for each id."""
    unique: dict[str, OptionT] = {}
    for opt in options:
        if opt.id not in unique:
            unique[opt.id] = opt.model_copy(deep=True)
    return list(unique.values())


def _component_fields(
    component: ComponentDraft | TripComponent | None,
    fallback_options: Sequence[OptionT],
    fallback_question: str,
) -> tuple[list[OptionT], str, str]:
    draft_options = list(getattr(component, "options", None) or [])
    options: list[OptionT] = draft_options or list(fallback_options)
    options = _first_by_id(options)

    option_ids = {opt.id for opt in options}
    recommended = getattr(component, "recommended_option_id", None)
    if recommended not in option_ids:
        recommended = options[0].id if options else None

    question = getattr(component, "confirmation_question", None) or fallback_question
    return options, recommended, question


def _build(
    component_cls: type[ComponentT],
    component: ComponentDraft | TripComponent | None,
    fallback_options: Sequence[ComponentOption],
    fallback_question: str,
) -> ComponentT | None:
    options, recommended, question = _component_fields(
        component, fallback_options, fallback_question
    )
    if not options:
        return None
    return component_cls(
        options=options,
        recommended_option_id=recommended,
        confirmation_question=question,
    )


def normalize_flight_component(
    component: ComponentDraft | TripComponent | None,
    fallback_options: Sequence[FlightOption],
) -> FlightComponent | None:
    """Canonical flight component; None when no options exist at all."""
    return _build(FlightComponent, component, fallback_options, FLIGHT_QUESTION)


def derive_nightly_rate(option: HotelOption) -> float | None:
    """Explicit nightly rate, else total cost spread over declared nights."""
    if option.nightly_usd is not None:
        return option.nightly_usd
    if option.cost_usd is not None and option.nights:
        return round_usd(option.cost_usd / option.nights)
    return None


def derive_daily_rate(option: CarOption) -> float | None:
    """Explicit daily rate, else total cost spread over declared rental days."""
    if option.daily_rate_usd is not None:
        return option.daily_rate_usd
    if option.cost_usd is not None and option.rental_days:
        return round_usd(option.cost_usd / option.rental_days)
    return None


def normalize_hotel_component(
    component: ComponentDraft | TripComponent | None,
    fallback_options: Sequence[HotelOption],
    stay: StayWindow,
) -> HotelComponent | None:
    """Canonical hotel component with totals realigned to the stay's nights."""
    hotel = _build(HotelComponent, component, fallback_options, HOTEL_QUESTION)
    if hotel is None:
        return None

    stay_nights = max(1, stay.nights_at_destination)
    for option in hotel.options:
        nightly = derive_nightly_rate(option)
        if nightly is not None:
            option.nightly_usd = nightly
            option.cost_usd = round_usd(nightly * stay_nights)
        option.nights = stay_nights
        option.stay_nights = stay_nights
    return hotel


def normalize_car_component(
    component: ComponentDraft | TripComponent | None,
    fallback_options: Sequence[CarOption],
    stay: StayWindow,
) -> CarRentalComponent | None:
    """Canonical car rental component with totals realigned to the stay's days."""
    car = _build(CarRentalComponent, component, fallback_options, CAR_QUESTION)
    if car is None:
        return None

    rental_days = max(1, stay.days_at_destination)
    for option in car.options:
        daily = derive_daily_rate(option)
        if daily is not None:
            option.daily_rate_usd = daily
            option.cost_usd = round_usd(daily * rental_days)
        option.rental_days = rental_days
    return car
