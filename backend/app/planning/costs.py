"""Cost aggregation for the selected component options and activities."""

from __future__ import annotations

from collections.abc import Iterable

from backend.app.models.common import cents_to_usd, to_cents
from backend.app.models.itinerary import ActivityItem, CostSummary, TripComponent, TripComponents
from backend.app.models.options import ComponentOption, HotelOption


def option_cost_usd(option: ComponentOption) -> float:
    """Cost of a single option; hotels without a total use nightly rate x nights."""
    if option.cost_usd is not None:
        return option.cost_usd
    if (
        isinstance(option, HotelOption)
        and option.nightly_usd is not None
        and option.nights is not None
    ):
        return option.nightly_usd * option.nights
    return 0.0


def selected_option_cost_cents(component: TripComponent | None) -> int:
    """Cents for the recommended option, falling back to the first option."""
    if component is None:
        return 0
    option = component.recommended_option()
    if option is None:
        return 0
    return to_cents(option_cost_usd(option))


def estimate_totals(
    components: TripComponents, activities: Iterable[ActivityItem]
) -> CostSummary:
    """Sum selected component costs plus activity costs.

    All parts are rounded to cents first and the total is the integer sum of
    those cents, so ``total_usd`` always equals the sum of the other fields.
    """
    flight_cents = selected_option_cost_cents(components.flight)
    hotel_cents = selected_option_cost_cents(components.hotel)
    car_cents = selected_option_cost_cents(components.car_rental)
    activities_cents = to_cents(
        sum(float(activity.estimated_cost_usd or 0) for activity in activities)
    )
    total_cents = flight_cents + hotel_cents + car_cents + activities_cents

    return CostSummary(
        flight_usd=cents_to_usd(flight_cents),
        hotel_usd=cents_to_usd(hotel_cents),
        car_rental_usd=cents_to_usd(car_cents),
        activities_usd=cents_to_usd(activities_cents),
        total_usd=cents_to_usd(total_cents),
    )
