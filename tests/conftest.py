"""Pytest configuration and fixtures for testing."""

import json
from datetime import date
from typing import Any

import pytest

from backend.app.confirm.machine import ConfirmationService
from backend.app.engine.types import StageSpec
from backend.app.models.preferences import TripPreferences
from backend.app.planning.orchestrator import PipelineOrchestrator
from backend.app.planning.service import TripPlanner
from backend.app.store.sessions import InMemorySessionStore


class FakeStageRunner:
    """Scripted stage runner returning canned output per stage.

    A value in ``outputs`` may be a string (returned as-is), a dict (returned
    as JSON), or an exception instance (raised).
    """

    def __init__(self, outputs: dict[str, Any], web_search_stages: tuple[str, ...] = ()) -> None:
        self.outputs = outputs
        self.web_search_stages = web_search_stages
        self.calls: list[tuple[str, str]] = []

    async def run_stage(self, spec: StageSpec, input_text: str, telemetry=None) -> str:
        stage = spec.stage.value
        self.calls.append((stage, input_text))
        if telemetry is not None:
            telemetry.prompt_sent(input_text)
            if stage in self.web_search_stages:
                telemetry.tool_started(
                    "web_search", source="built-in", label=spec.web_search_label
                )
                telemetry.tool_completed(
                    "web_search",
                    source="built-in",
                    label=spec.web_search_label,
                    output="completed",
                )

        output = self.outputs[stage]
        if isinstance(output, Exception):
            raise output
        text = output if isinstance(output, str) else json.dumps(output)
        if telemetry is not None:
            telemetry.response_received(text)
            telemetry.finish()
        return text

    @property
    def stages_called(self) -> list[str]:
        return [stage for stage, _ in self.calls]


def research_output() -> dict[str, Any]:
    """Research stage output with two flights of different stay lengths."""
    return {
        "flightOptions": [
            {
                "id": "F1",
                "label": "Nonstop ORD-MIA",
                "airline": "Sunline",
                "route": "ORD-MIA",
                "class": "economy",
                "outboundDepartureLocal": "2026-03-21T09:10-05:00",
                "outboundArrivalLocal": "2026-03-21T13:25-04:00",
                "returnDepartureLocal": "2026-03-28T16:00-04:00",
                "returnArrivalLocal": "2026-03-28T18:20-05:00",
                "costUsd": 420,
            },
            {
                "id": "F2",
                "label": "Late departure",
                "airline": "Coastal",
                "route": "ORD-MIA",
                "class": "economy",
                "outboundDepartureLocal": "2026-03-21T22:40-05:00",
                "outboundArrivalLocal": "2026-03-22T02:55-04:00",
                "returnDepartureLocal": "2026-03-27T07:15-04:00",
                "returnArrivalLocal": "2026-03-27T09:35-05:00",
                "costUsd": 380,
            },
        ],
        "hotelOptions": [
            {"id": "H1", "label": "Ocean Drive Hotel", "stars": 4, "nightlyUsd": 250, "costUsd": 999},
            {"id": "H2", "label": "Brickell Suites", "stars": 4, "costUsd": 900, "nights": 5},
        ],
        "carRentalOptions": [
            {"id": "C1", "label": "Compact", "company": "Acme", "dailyRateUsd": 45},
            {"id": "C2", "label": "Convertible", "company": "Beachy", "costUsd": 300, "rentalDays": 5},
        ],
        "activityIdeas": [
            {"name": "South Beach morning swim", "estimatedCostUsd": 0, "whyFit": "Beach time"},
            {"name": "Little Havana food walk", "estimatedCostUsd": 65, "whyFit": "Cuban food"},
        ],
        "researchNotes": ["Spring break demand raises prices."],
        "pricingDateNote": "Prices checked on 2026-02-01.",
    }


def safety_output() -> dict[str, Any]:
    return {
        "safetyConcerns": ["Strong rip currents on some beaches"],
        "packingList": ["Sunscreen", "Light rain jacket"],
        "localTransportAdvice": ["Metromover is free downtown"],
        "weatherSummary": "Warm, humid, occasional showers.",
    }


def composition_output() -> dict[str, Any]:
    """Composition output referencing research options with a stale cost summary."""
    return {
        "tripSummary": "Spring break in Miami",
        "components": {
            "flight": {
                "recommendedOptionId": "F1",
                "confirmationQuestion": "Book the nonstop flight?",
            },
            "hotel": {"recommendedOptionId": "H1"},
            "carRental": {"recommendedOptionId": "C1"},
        },
        "activities": [
            {"name": "Beach day", "category": "beach", "estimatedCostUsd": 50, "scheduledDay": "Day 1"},
            {
                "name": "Little Havana food walk",
                "estimatedCostUsd": 35.5,
                "scheduledDay": "Day 2",
                "notes": "Cuban food tasting",
            },
        ],
        "estimatedCostSummary": {"totalUsd": 1},
        "stayAtDestination": {"daysAtDestination": 99, "nightsAtDestination": 99},
    }


def final_review_output() -> dict[str, Any]:
    return {
        "finalSummary": "Nonstop flight, 4-star hotel, compact car.",
        "finalConfirmationQuestion": "Approve this itinerary?",
        "purchaseReminder": "Nothing has been purchased.",
    }


@pytest.fixture
def preferences() -> TripPreferences:
    """Eight-day Miami trip request."""
    return TripPreferences(
        start_city="Chicago",
        destination_city="Miami",
        start_date=date(2026, 3, 21),
        end_date=date(2026, 3, 29),
        trip_length_days=8,
        activities=["beach", "food tours"],
        weather_preferences="warm and sunny",
        air_travel_class="economy",
        hotel_stars="4",
        transportation_notes="Prefer a small car",
    )


@pytest.fixture
def preferences_payload() -> dict[str, Any]:
    """Wire form of the preferences fixture."""
    return {
        "startCity": "Chicago",
        "destinationCity": "Miami",
        "startDate": "2026-03-21",
        "endDate": "2026-03-29",
        "tripLengthDays": 8,
        "activities": ["beach", "food tours"],
        "weatherPreferences": "warm and sunny",
        "airTravelClass": "economy",
        "hotelStars": "4",
        "transportationNotes": "Prefer a small car",
    }


@pytest.fixture
def stage_outputs() -> dict[str, Any]:
    return {
        "research": research_output(),
        "safety": safety_output(),
        "composition": composition_output(),
        "final": final_review_output(),
    }


@pytest.fixture
def fake_runner(stage_outputs) -> FakeStageRunner:
    return FakeStageRunner(stage_outputs, web_search_stages=("research",))


@pytest.fixture
def orchestrator(fake_runner) -> PipelineOrchestrator:
    return PipelineOrchestrator(fake_runner)


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def planner(session_store, orchestrator) -> TripPlanner:
    return TripPlanner(session_store, orchestrator)


@pytest.fixture
def confirmation_service(session_store, orchestrator) -> ConfirmationService:
    return ConfirmationService(session_store, orchestrator)
