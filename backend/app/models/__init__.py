"""Convenient imports for all model types."""

# Common types and enums
from .common import (
    TRIP_COMPONENTS,
    CamelModel,
    ComponentType,
    StageName,
    TravelClass,
    UsdAmount,
)

# Itinerary models
from .itinerary import (
    ActivityItem,
    CarRentalComponent,
    CostSummary,
    FlightComponent,
    HotelComponent,
    ItineraryDraft,
    StayWindow,
    TripComponent,
    TripComponents,
)

# Option models
from .options import CarOption, ComponentOption, FlightOption, HotelOption

# Request models
from .preferences import TripPreferences, parse_trip_preferences

# Session models
from .session import (
    ConfirmationRecord,
    ConfirmationResult,
    FinalApprovalResult,
    FinalDecision,
    FinalReview,
    PlanningSession,
    SessionStatus,
)

# Stage documents
from .stages import (
    CompositionDocument,
    FinalReviewDocument,
    ResearchDocument,
    SafetyDocument,
)

__all__ = [
    # Common
    "TRIP_COMPONENTS",
    "CamelModel",
    "ComponentType",
    "StageName",
    "TravelClass",
    "UsdAmount",
    # Itinerary
    "ActivityItem",
    "CarRentalComponent",
    "CostSummary",
    "FlightComponent",
    "HotelComponent",
    "ItineraryDraft",
    "StayWindow",
    "TripComponent",
    "TripComponents",
    # Options
    "CarOption",
    "ComponentOption",
    "FlightOption",
    "HotelOption",
    # Preferences
    "TripPreferences",
    "parse_trip_preferences",
    # Session
    "ConfirmationRecord",
    "ConfirmationResult",
    "FinalApprovalResult",
    "FinalDecision",
    "FinalReview",
    "PlanningSession",
    "SessionStatus",
    # Stages
    "CompositionDocument",
    "FinalReviewDocument",
    "ResearchDocument",
    "SafetyDocument",
]
