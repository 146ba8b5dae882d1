"""Planning session aggregate and confirmation workflow results."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import Field

from .common import TRIP_COMPONENTS, CamelModel, ComponentType
from .itinerary import ItineraryDraft
from .preferences import TripPreferences


class ConfirmationRecord(CamelModel):
    """A user's confirmed choice for one component."""

    option_id: str
    confirmed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class FinalReview(CamelModel):
    """Non-binding summary generated once every component is confirmed."""

    final_summary: str
    final_confirmation_question: str
    purchase_reminder: str


class FinalDecision(CamelModel):
    """The user's final approve/decline decision."""

    approved: bool
    decided_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class SessionStatus(str, Enum):
    """Aggregate confirmation state of a planning session."""

    drafted = "drafted"
    partially_confirmed = "partially_confirmed"
    all_confirmed = "all_confirmed"
    final_pending = "final_pending"
    final_decided = "final_decided"


Confirmations = dict[ComponentType, ConfirmationRecord | None]


def empty_confirmations() -> Confirmations:
    """Create a confirmation table with every component unconfirmed."""
    return {component: None for component in TRIP_COMPONENTS}


def next_component_to_confirm(confirmations: Confirmations) -> ComponentType | None:
    """Return the first unconfirmed component in confirmation order."""
    return next(
        (component for component in TRIP_COMPONENTS if not confirmations.get(component)),
        None,
    )


class PlanningSession(CamelModel):
    """Aggregate root for one planning request."""

    session_id: str = Field(serialization_alias="itineraryId")
    preferences: TripPreferences
    itinerary: ItineraryDraft
    confirmations: Confirmations = Field(default_factory=empty_confirmations)
    final_review: FinalReview | None = None
    final_confirmed: bool = False
    final_decision: FinalDecision | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def status(self) -> SessionStatus:
        """Derive the aggregate state from confirmations and review."""
        confirmed = [c for c in TRIP_COMPONENTS if self.confirmations.get(c)]
        if not confirmed:
            return SessionStatus.drafted
        if len(confirmed) < len(TRIP_COMPONENTS):
            return SessionStatus.partially_confirmed
        if self.final_decision is not None:
            return SessionStatus.final_decided
        if self.final_review is not None:
            return SessionStatus.final_pending
        return SessionStatus.all_confirmed


class ConfirmationResult(CamelModel):
    """Result of a component confirmation."""

    session_id: str = Field(serialization_alias="itineraryId")
    itinerary: ItineraryDraft
    confirmations: Confirmations
    next_component_to_confirm: ComponentType | None
    final_review: FinalReview | None


class FinalApprovalResult(CamelModel):
    """Result of the final, non-binding approval."""

    session_id: str = Field(serialization_alias="itineraryId")
    approved: bool
    message: str
    no_purchase_policy: str
