"""Error taxonomy for the planning pipeline and confirmation workflow."""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

SNIPPET_LENGTH = 200


class TripPlannerError(Exception):
    """Base exception for planner failures surfaced to callers."""

    status_code: int = 500
    error: str = "Trip planner error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict[str, Any]:
        """Return a JSON-serializable error body."""
        return {"error": self.error, "details": self.message}


class InvalidInput(TripPlannerError):
    """Raised when trip preferences are malformed."""

    status_code = 400
    error = "Invalid trip request"

    def __init__(self, message: str, field_errors: dict[str, list[str]] | None = None) -> None:
        super().__init__(message)
        self.field_errors = field_errors or {}

    @classmethod
    def from_validation_error(cls, exc: ValidationError) -> InvalidInput:
        """Flatten a pydantic ValidationError into field-level messages."""
        field_errors: dict[str, list[str]] = {}
        for err in exc.errors():
            loc = ".".join(str(part) for part in err.get("loc", ())) or "__root__"
            field_errors.setdefault(loc, []).append(err.get("msg", "invalid value"))
        return cls("Trip request failed validation", field_errors)

    def to_detail(self) -> dict[str, Any]:
        return {"error": self.error, "details": {"fieldErrors": self.field_errors}}


class StageOutputInvalid(TripPlannerError):
    """Raised when a generation stage violates its output contract."""

    status_code = 500
    error = "Failed to generate itinerary"

    def __init__(self, stage: str, reason: str, text: str = "") -> None:
        self.stage = stage
        self.reason = reason
        self.snippet = (text or "")[:SNIPPET_LENGTH]
        message = f"{stage} {reason}"
        if self.snippet:
            message = f"{message}: {self.snippet}"
        super().__init__(message)


class StageGenerationError(TripPlannerError):
    """Raised when the generation engine fails to produce stage output."""

    status_code = 500
    error = "Failed to generate itinerary"

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        super().__init__(f"{stage} generation failed: {message}")


class PlanningCancelled(TripPlannerError):
    """Raised at a stage boundary once the caller has gone away."""

    status_code = 499
    error = "Planning cancelled"


class UnknownComponent(TripPlannerError):
    """Raised when a component type is not flight, hotel, or carRental."""

    status_code = 400
    error = "Unknown component"

    def __init__(self, component: str, allowed: list[str]) -> None:
        self.component = component
        super().__init__(f"componentType must be one of: {', '.join(allowed)}")


class OptionNotOffered(TripPlannerError):
    """Raised when an option id is not among a component's current options."""

    status_code = 400
    error = "Option not offered"

    def __init__(self, component: str, option_id: str) -> None:
        self.component = component
        self.option_id = option_id
        super().__init__(
            f"Selected option '{option_id}' is not valid for component '{component}'"
        )


class SessionNotFound(TripPlannerError):
    """Raised when a planning session id is not recognized."""

    status_code = 404
    error = "Itinerary not found"

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"No planning session with id '{session_id}'")


class PendingComponents(TripPlannerError):
    """Raised when final approval is requested before every component is confirmed."""

    status_code = 400
    error = "Pending components"

    def __init__(self, component: str) -> None:
        self.component = component
        super().__init__(f"Please confirm {component} before final confirmation")
