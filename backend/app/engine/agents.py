"""Stage definitions and input builders for each generation stage."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel

from backend.app.engine.tools import BUDGET_CALCULATOR
from backend.app.engine.types import StageSpec
from backend.app.models.common import StageName

RESEARCH_AGENT = "TripResearchAgent"
SAFETY_AGENT = "SafetyPackingAgent"
COMPOSER_AGENT = "ItineraryComposerAgent"
FINAL_REVIEW_AGENT = "FinalReviewAgent"


RESEARCH_INSTRUCTIONS = """You research travel options for a trip request.
Search the web for current, realistic providers and prices; call the web search tool at least once.
Respond with a single JSON object only, no markdown and no prose, matching:
{
  "flightOptions": [{"id":"f1","label":"...","airline":"...","route":"...","class":"economy|business","outboundDepartureLocal":"2026-03-21T19:00:00-04:00","outboundArrivalLocal":"2026-03-22T08:30:00+01:00","returnDepartureLocal":"2026-03-29T10:00:00+01:00","returnArrivalLocal":"2026-03-29T13:00:00-04:00","daysAtDestination":8,"nightsAtDestination":7,"costUsd":1200,"notes":"..."}],
  "hotelOptions": [{"id":"h1","label":"...","stars":4,"nightlyUsd":250,"nights":7,"costUsd":1750,"notes":"..."}],
  "carRentalOptions": [{"id":"c1","label":"...","company":"...","carType":"...","dailyRateUsd":50,"rentalDays":8,"costUsd":400,"notes":"..."}],
  "activityIdeas": [{"name":"...","category":"...","estimatedCostUsd":40,"whyFit":"..."}],
  "researchNotes": ["..."],
  "pricingDateNote": "when these prices were observed"
}
Give every timestamp in the local time of the airport it refers to.
Derive daysAtDestination and nightsAtDestination from the flight schedule and the requested dates, accounting for overnight flights and time zones.
Hotel nights and rental days must match that stay.
Return 2-3 options per component, priced in USD.
Never suggest making purchases."""

SAFETY_INSTRUCTIONS = """You advise on safety and packing for a trip.
Search the web for current safety, local transport, and weather considerations; call the web search tool at least once.
Respond with a single JSON object only:
{
  "safetyConcerns": ["..."],
  "packingList": ["..."],
  "localTransportAdvice": ["..."],
  "weatherSummary": "..."
}
Be concise and practical."""

COMPOSITION_INSTRUCTIONS = """You compose a trip itinerary from preferences plus research and safety JSON.
Respond with a single JSON object only:
{
  "tripSummary": "...",
  "components": {
    "flight": {"options": [], "recommendedOptionId": "f1", "confirmationQuestion": "..."},
    "hotel": {"options": [], "recommendedOptionId": "h1", "confirmationQuestion": "..."},
    "carRental": {"options": [], "recommendedOptionId": "c1", "confirmationQuestion": "..."}
  },
  "activities": [{"name":"...","category":"...","estimatedCostUsd":0,"scheduledDay":"Day 1","notes":"..."}],
  "safetyConcerns": ["..."],
  "packingList": ["..."],
  "disclaimer": "No purchases are made"
}
Always include flight, hotel, and carRental, reusing option ids from the research data.
Ask an explicit confirmation question for each component.
Label each activity with one of the requested activity categories.
Call the budget_calculator tool exactly once with the recommended options and activities.
Never recommend or perform purchasing."""

FINAL_REVIEW_INSTRUCTIONS = """You write the final confirmation text after the user confirmed flight, hotel, and car rental.
Respond with a single JSON object only:
{
  "finalSummary": "...",
  "finalConfirmationQuestion": "...",
  "purchaseReminder": "No purchases are made"
}"""


RESEARCH_STAGE = StageSpec(
    stage=StageName.research,
    agent_name=RESEARCH_AGENT,
    instructions=RESEARCH_INSTRUCTIONS,
    web_search_label="research",
    function_tools=(BUDGET_CALCULATOR,),
)

SAFETY_STAGE = StageSpec(
    stage=StageName.safety,
    agent_name=SAFETY_AGENT,
    instructions=SAFETY_INSTRUCTIONS,
    web_search_label="safety",
)

COMPOSITION_STAGE = StageSpec(
    stage=StageName.composition,
    agent_name=COMPOSER_AGENT,
    instructions=COMPOSITION_INSTRUCTIONS,
    function_tools=(BUDGET_CALCULATOR,),
)

FINAL_REVIEW_STAGE = StageSpec(
    stage=StageName.final,
    agent_name=FINAL_REVIEW_AGENT,
    instructions=FINAL_REVIEW_INSTRUCTIONS,
)


def _dump(value: Any) -> str:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    return json.dumps(value, indent=2, default=str)


def build_research_input(preferences: BaseModel) -> str:
    return "\n".join(
        [
            "Research trip options for these preferences:",
            _dump(preferences),
            "Use web search for realistic price ranges and providers.",
        ]
    )


def build_safety_input(preferences: BaseModel) -> str:
    return "\n".join(
        [
            "Provide safety and packing recommendations for this trip:",
            _dump(preferences),
        ]
    )


def build_composition_input(
    preferences: BaseModel, research: BaseModel, safety: BaseModel
) -> str:
    return "\n".join(
        [
            "Compose itinerary JSON from these trip preferences:",
            _dump(preferences),
            "Research data:",
            _dump(research),
            "Safety/packing data:",
            _dump(safety),
        ]
    )


def build_final_review_input(
    preferences: BaseModel, selected_components: dict[str, Any]
) -> str:
    return "\n".join(
        [
            "User has confirmed these selections:",
            _dump(selected_components),
            "Trip preferences:",
            _dump(preferences),
            "Return final confirmation prompt and reminder that nothing is purchased.",
        ]
    )
