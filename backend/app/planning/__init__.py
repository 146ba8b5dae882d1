"""Planning module for validating stage output and deriving itinerary drafts.

The orchestrator and service live in their own modules and are imported
from there; the engine depends on the event helpers exported here.
"""

from .contracts import parse_stage_output, validate_stage_document
from .costs import estimate_totals
from .draft import normalize_itinerary, recompute_from_flight
from .events import CancelToken, EventType, ProgressEmitter
from .stay import compute_stay_window

__all__ = [
    "parse_stage_output",
    "validate_stage_document",
    "estimate_totals",
    "normalize_itinerary",
    "recompute_from_flight",
    "CancelToken",
    "EventType",
    "ProgressEmitter",
    "compute_stay_window",
]
