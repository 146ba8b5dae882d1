"""Destination stay derivation from flight schedules or the trip date window."""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date

from backend.app.models.itinerary import StayWindow
from backend.app.models.options import FlightOption
from backend.app.models.preferences import TripPreferences

FLIGHT_SCHEDULE_NOTE = (
    "Calculated from local flight date parts (arrival and return departure), "
    "which handles overnight travel and timezone offsets."
)
DATE_WINDOW_NOTE = (
    "Calculated from start/end date window (flight schedule timestamps unavailable)."
)
TRIP_LENGTH_NOTE = (
    "Estimated from requested trip length (start/end dates unusable)."
)

_DATE_PART = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def extract_local_date(timestamp: str | None) -> date | None:
    """Return the calendar date of a local ISO timestamp.

    Time of day and any UTC offset suffix are ignored on purpose: comparing
    clock times across timezones would miscount nights.
    """
    if not timestamp or not isinstance(timestamp, str):
        return None
    date_part = timestamp.split("T", 1)[0].strip()
    if not _DATE_PART.match(date_part):
        return None
    try:
        return date.fromisoformat(date_part)
    except ValueError:
        return None


def nights_between(arrival: date | None, departure: date | None) -> int | None:
    """Whole days from arrival to departure, or None if not computable."""
    if arrival is None or departure is None or departure < arrival:
        return None
    return (departure - arrival).days


def _select_flight(
    flight_options: Sequence[FlightOption], recommended_option_id: str | None
) -> FlightOption | None:
    if not flight_options:
        return None
    if recommended_option_id is not None:
        for option in flight_options:
            if option.id == recommended_option_id:
                return option
    return flight_options[0]


def compute_baseline_stay(preferences: TripPreferences) -> StayWindow:
    """Stay derived from the raw trip date window, or trip length as a last resort."""
    start = preferences.start_date
    end = preferences.end_date
    arrival = start.isoformat() if isinstance(start, date) else None
    departure = end.isoformat() if isinstance(end, date) else None

    if not isinstance(start, date) or not isinstance(end, date) or end <= start:
        length = int(preferences.trip_length_days or 1)
        return StayWindow(
            arrival_local=arrival,
            departure_local=departure,
            days_at_destination=max(1, length),
            nights_at_destination=max(0, length - 1),
            calculation_note=TRIP_LENGTH_NOTE,
            source="trip_length",
        )

    diff_days = (end - start).days
    return StayWindow(
        arrival_local=arrival,
        departure_local=departure,
        days_at_destination=max(1, diff_days),
        nights_at_destination=max(0, diff_days - 1),
        calculation_note=DATE_WINDOW_NOTE,
        source="date_window",
    )


def compute_stay_window(
    flight_options: Sequence[FlightOption],
    preferences: TripPreferences,
    recommended_option_id: str | None = None,
) -> StayWindow:
    """Derive the stay at the destination.

    Uses the recommended flight (or the first one) when its outbound-arrival
    and return-departure dates are usable; otherwise falls back to the
    preference date window.

    Args:
        flight_options: Candidate flights, in offer order
        preferences: Trip preferences as submitted
        recommended_option_id: Flight to derive the stay from

    Returns:
        StayWindow with days >= 1 and nights >= 0
    """
    flight = _select_flight(flight_options, recommended_option_id)
    if flight is not None:
        nights = nights_between(
            extract_local_date(flight.outbound_arrival_local),
            extract_local_date(flight.return_departure_local),
        )
        if nights is not None:
            return StayWindow(
                arrival_local=flight.outbound_arrival_local,
                departure_local=flight.return_departure_local,
                days_at_destination=nights + 1,
                nights_at_destination=nights,
                calculation_note=FLIGHT_SCHEDULE_NOTE,
                source="flight_schedule",
            )

    return compute_baseline_stay(preferences)
