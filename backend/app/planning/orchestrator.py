"""LangGraph orchestrator for the staged itinerary generation pipeline."""

from __future__ import annotations

import logging
import time
from typing import Any, TypeVar

from langgraph.graph import END, START, StateGraph
from pydantic import BaseModel, ConfigDict, Field

from backend.app.engine.agents import (
    COMPOSITION_STAGE,
    FINAL_REVIEW_STAGE,
    RESEARCH_STAGE,
    SAFETY_STAGE,
    build_composition_input,
    build_final_review_input,
    build_research_input,
    build_safety_input,
)
from backend.app.engine.telemetry import ToolTelemetry
from backend.app.engine.types import StageRunner, StageSpec
from backend.app.metrics.core import record_stage_run
from backend.app.models.common import TRIP_COMPONENTS, StageName
from backend.app.models.itinerary import ItineraryDraft
from backend.app.models.preferences import TripPreferences
from backend.app.models.session import Confirmations, FinalReview
from backend.app.models.stages import (
    CompositionDocument,
    FinalReviewDocument,
    ResearchDocument,
    SafetyDocument,
)

from .contracts import validate_stage_document
from .draft import normalize_itinerary
from .events import (
    EventType,
    ProgressEmitter,
    summarize_itinerary,
    summarize_research,
    summarize_safety,
)

logger = logging.getLogger(__name__)

DocumentT = TypeVar("DocumentT", bound=BaseModel)

STAGE_SEQUENCE = [
    StageName.initialization,
    StageName.research,
    StageName.safety,
    StageName.composition,
]


class PipelineState(BaseModel):
    """Typed state passed between pipeline nodes.

    Every document stored here has already passed its stage contract.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    preferences: TripPreferences = Field(description="Trip preferences as submitted")
    research_input: str = Field(default="", description="Serialized research input")
    safety_input: str = Field(default="", description="Serialized safety input")
    research: ResearchDocument | None = Field(default=None, description="Research output")
    safety: SafetyDocument | None = Field(default=None, description="Safety output")
    itinerary: ItineraryDraft | None = Field(
        default=None, description="Normalized itinerary draft"
    )


class PipelineOrchestrator:
    """Runs research, safety, and composition stages strictly in order."""

    def __init__(self, runner: StageRunner) -> None:
        """Initialize orchestrator.

        Args:
            runner: Generation engine used for every stage
        """
        self.runner = runner

    async def _run_stage(
        self,
        spec: StageSpec,
        input_text: str,
        schema: type[DocumentT],
        emitter: ProgressEmitter,
    ) -> DocumentT:
        """Invoke one stage and validate its output at the contract boundary."""
        stage = spec.stage.value
        telemetry = ToolTelemetry(emitter, stage, spec.agent_name)
        started = time.perf_counter()
        try:
            raw = await self.runner.run_stage(spec, input_text, telemetry)
            document = validate_stage_document(raw, stage, schema)
        except Exception as exc:
            record_stage_run(
                stage,
                spec.agent_name,
                int((time.perf_counter() - started) * 1000),
                ok=False,
                error_kind=type(exc).__name__,
                tool_calls=telemetry.call_count,
            )
            logger.warning("Stage %s failed: %s", stage, exc)
            raise

        record_stage_run(
            stage,
            spec.agent_name,
            int((time.perf_counter() - started) * 1000),
            ok=True,
            error_kind=None,
            tool_calls=telemetry.call_count,
        )
        return document

    def _build_graph(self, emitter: ProgressEmitter) -> Any:
        """Build the pipeline graph for one run.

        Graph flow:
            initialization → research → safety → composition

        Returns:
            Compiled LangGraph graph
        """

        async def initialization_node(state: PipelineState) -> dict[str, Any]:
            emitter.ensure_active(StageName.initialization.value)
            emitter.emit(
                EventType.stage_started,
                StageName.initialization.value,
                "Planning session started. Agents are preparing inputs.",
            )
            prefs = state.preferences
            updates = {
                "research_input": build_research_input(prefs),
                "safety_input": build_safety_input(prefs),
            }
            emitter.emit(
                EventType.stage_completed,
                StageName.initialization.value,
                "Planning inputs prepared.",
                stage_summary={
                    "destination": prefs.destination_city,
                    "dates": f"{prefs.start_date.isoformat()} to {prefs.end_date.isoformat()}",
                    "tripLength": f"{prefs.trip_length_days} days",
                },
            )
            return updates

        async def research_node(state: PipelineState) -> dict[str, Any]:
            emitter.ensure_active(StageName.research.value)
            emitter.emit(
                EventType.stage_started,
                StageName.research.value,
                "Researching flights, hotels, car rentals, and activity ideas (using web search).",
                agent=RESEARCH_STAGE.agent_name,
            )
            research = await self._run_stage(
                RESEARCH_STAGE, state.research_input, ResearchDocument, emitter
            )
            emitter.emit(
                EventType.stage_completed,
                StageName.research.value,
                "Research complete.",
                agent=RESEARCH_STAGE.agent_name,
                stage_summary=summarize_research(research),
            )
            return {"research": research}

        async def safety_node(state: PipelineState) -> dict[str, Any]:
            emitter.ensure_active(StageName.safety.value)
            emitter.emit(
                EventType.stage_started,
                StageName.safety.value,
                "Checking safety considerations, weather, and packing guidance (using web search).",
                agent=SAFETY_STAGE.agent_name,
            )
            safety = await self._run_stage(
                SAFETY_STAGE, state.safety_input, SafetyDocument, emitter
            )
            emitter.emit(
                EventType.stage_completed,
                StageName.safety.value,
                "Safety and packing analysis complete.",
                agent=SAFETY_STAGE.agent_name,
                stage_summary=summarize_safety(safety),
            )
            return {"safety": safety}

        async def composition_node(state: PipelineState) -> dict[str, Any]:
            emitter.ensure_active(StageName.composition.value)
            emitter.emit(
                EventType.stage_started,
                StageName.composition.value,
                "Composing itinerary, costs, and confirmation questions.",
                agent=COMPOSITION_STAGE.agent_name,
            )
            composition = await self._run_stage(
                COMPOSITION_STAGE,
                build_composition_input(state.preferences, state.research, state.safety),
                CompositionDocument,
                emitter,
            )
            itinerary = normalize_itinerary(
                composition, state.research, state.safety, state.preferences
            )
            emitter.emit(
                EventType.stage_completed,
                StageName.composition.value,
                "Itinerary draft is ready for your review.",
                agent=COMPOSITION_STAGE.agent_name,
                stage_summary=summarize_itinerary(itinerary),
            )
            return {"itinerary": itinerary}

        graph = StateGraph(PipelineState)

        graph.add_node(StageName.initialization.value, initialization_node)
        graph.add_node(StageName.research.value, research_node)
        graph.add_node(StageName.safety.value, safety_node)
        graph.add_node(StageName.composition.value, composition_node)

        graph.add_edge(START, STAGE_SEQUENCE[0].value)
        for current, following in zip(STAGE_SEQUENCE, STAGE_SEQUENCE[1:]):
            graph.add_edge(current.value, following.value)
        graph.add_edge(STAGE_SEQUENCE[-1].value, END)

        return graph.compile()

    async def build_itinerary_draft(
        self,
        preferences: TripPreferences,
        emitter: ProgressEmitter | None = None,
    ) -> ItineraryDraft:
        """Run the pipeline and return the normalized draft.

        Args:
            preferences: Validated trip preferences
            emitter: Optional progress emitter for live events

        Returns:
            Normalized ItineraryDraft

        Raises:
            StageOutputInvalid: if any stage violates its output contract
            StageGenerationError: if the engine fails during any stage
            PlanningCancelled: if the caller went away between stages
        """
        emitter = emitter or ProgressEmitter()
        graph = self._build_graph(emitter)

        final_state = await graph.ainvoke(PipelineState(preferences=preferences))
        return final_state["itinerary"]

    async def create_final_review(
        self,
        preferences: TripPreferences,
        itinerary: ItineraryDraft,
        confirmations: Confirmations,
        emitter: ProgressEmitter | None = None,
    ) -> FinalReview:
        """Run the final review stage over the confirmed options only."""
        emitter = emitter or ProgressEmitter()
        selected: dict[str, Any] = {}
        for component in TRIP_COMPONENTS:
            record = confirmations.get(component)
            option = (
                itinerary.components.get(component).find_option(record.option_id)
                if record
                else None
            )
            selected[component.value] = (
                option.model_dump(mode="json", by_alias=True, exclude_none=True)
                if option
                else None
            )

        emitter.emit(
            EventType.stage_started,
            StageName.final.value,
            "Preparing final review and confirmation prompt.",
            agent=FINAL_REVIEW_STAGE.agent_name,
        )
        document = await self._run_stage(
            FINAL_REVIEW_STAGE,
            build_final_review_input(preferences, selected),
            FinalReviewDocument,
            emitter,
        )
        emitter.emit(
            EventType.stage_completed,
            StageName.final.value,
            "Final review is ready.",
            agent=FINAL_REVIEW_STAGE.agent_name,
            stage_summary={
                "hasFinalSummary": bool(document.final_summary),
                "hasFinalConfirmationQuestion": bool(document.final_confirmation_question),
                "purchaseReminder": document.purchase_reminder,
            },
        )
        return FinalReview(
            final_summary=document.final_summary,
            final_confirmation_question=document.final_confirmation_question,
            purchase_reminder=document.purchase_reminder,
        )
