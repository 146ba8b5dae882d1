"""Type definitions for the generation engine boundary."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from backend.app.models.common import StageName

if TYPE_CHECKING:
    from backend.app.engine.telemetry import ToolTelemetry


@dataclass(frozen=True)
class StageSpec:
    """Static description of one generation stage."""

    stage: StageName
    agent_name: str
    instructions: str
    web_search_label: str | None = None
    function_tools: tuple[str, ...] = field(default_factory=tuple)

    @property
    def uses_web_search(self) -> bool:
        return self.web_search_label is not None


class StageRunner(Protocol):
    """Asynchronous capability that runs one stage and returns its raw text."""

    async def run_stage(
        self,
        spec: StageSpec,
        input_text: str,
        telemetry: ToolTelemetry | None = None,
    ) -> str:
        """Run ``spec`` against ``input_text``.

        Args:
            spec: Stage to run
            input_text: Serialized stage input
            telemetry: Optional best-effort tool-usage side-channel

        Returns:
            Raw text output, validated later at the stage contract boundary

        Raises:
            StageGenerationError: if the engine fails to produce output
        """
        ...
