"""OpenAI Responses API implementation of the stage runner."""

from __future__ import annotations

import json
import logging
from typing import Any

from openai import NOT_GIVEN, AsyncOpenAI, OpenAIError

from backend.app.config import MissingOpenAIKeyError, Settings, get_openai_api_key, get_settings
from backend.app.engine.telemetry import ToolTelemetry
from backend.app.engine.tools import BUDGET_CALCULATOR, FUNCTION_TOOL_SCHEMAS, budget_calculator
from backend.app.engine.types import StageSpec
from backend.app.errors import StageGenerationError

logger = logging.getLogger(__name__)


def _item_dump(item: Any) -> Any:
    dump = getattr(item, "model_dump", None)
    return dump() if callable(dump) else item


class OpenAIStageRunner:
    """Runs stages with the OpenAI Responses API.

    Hosted web search calls are reported to telemetry as they appear in the
    response output. Local function tools are executed here and fed back
    with ``previous_response_id`` until the model stops calling them.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            settings: Application settings
            client: Optional preconfigured client (created lazily otherwise)
        """
        self.settings = settings or get_settings()
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=get_openai_api_key(),
                timeout=self.settings.openai_timeout_s,
            )
        return self._client

    def _tools_for(self, spec: StageSpec) -> list[dict[str, Any]]:
        tools: list[dict[str, Any]] = []
        if spec.uses_web_search:
            tools.append({"type": self.settings.web_search_tool_type})
        tools.extend(FUNCTION_TOOL_SCHEMAS[name] for name in spec.function_tools)
        return tools

    def _execute_function(self, name: str, raw_arguments: str) -> dict[str, Any]:
        try:
            args = json.loads(raw_arguments or "{}")
        except json.JSONDecodeError:
            return {"error": "arguments were not valid JSON"}
        if name == BUDGET_CALCULATOR:
            return budget_calculator(args, tax_rate=self.settings.budget_tax_rate)
        return {"error": f"unknown tool {name}"}

    def _report_hosted_calls(
        self, spec: StageSpec, response: Any, telemetry: ToolTelemetry | None
    ) -> None:
        if telemetry is None:
            return
        for item in getattr(response, "output", None) or []:
            if getattr(item, "type", None) != "web_search_call":
                continue
            raw = _item_dump(item)
            action = getattr(item, "action", None)
            telemetry.tool_started(
                "web_search",
                source="built-in",
                label=spec.web_search_label,
                arguments=_item_dump(action) if action is not None else None,
                raw_item=raw,
            )
            telemetry.tool_completed(
                "web_search",
                source="built-in",
                label=spec.web_search_label,
                output=getattr(item, "status", None),
                raw_item=raw,
            )

    async def _create(self, spec: StageSpec, tools: list[dict[str, Any]], **kwargs: Any) -> Any:
        response = await self.client.responses.create(
            model=self.settings.openai_model,
            instructions=spec.instructions,
            tools=tools or NOT_GIVEN,
            **kwargs,
        )
        error = getattr(response, "error", None)
        if error:
            raise StageGenerationError(
                spec.stage.value, getattr(error, "message", None) or str(error)
            )
        return response

    async def run_stage(
        self,
        spec: StageSpec,
        input_text: str,
        telemetry: ToolTelemetry | None = None,
    ) -> str:
        """Run one stage, resolving local tool calls, and return the output text."""
        if telemetry is not None:
            telemetry.prompt_sent(input_text)

        tools = self._tools_for(spec)
        try:
            response = await self._create(spec, tools, input=input_text)
            rounds = 0
            while True:
                self._report_hosted_calls(spec, response, telemetry)
                calls = [
                    item
                    for item in (response.output or [])
                    if getattr(item, "type", None) == "function_call"
                ]
                if not calls:
                    break
                if rounds >= self.settings.max_tool_rounds:
                    raise StageGenerationError(
                        spec.stage.value,
                        f"exceeded {self.settings.max_tool_rounds} tool rounds",
                    )

                outputs = []
                for call in calls:
                    if telemetry is not None:
                        telemetry.tool_started(
                            call.name, arguments=call.arguments, raw_item=_item_dump(call)
                        )
                    result = self._execute_function(call.name, call.arguments)
                    if telemetry is not None:
                        telemetry.tool_completed(
                            call.name,
                            arguments=call.arguments,
                            output=result,
                            raw_item=_item_dump(call),
                        )
                    outputs.append(
                        {
                            "type": "function_call_output",
                            "call_id": call.call_id,
                            "output": json.dumps(result),
                        }
                    )

                response = await self._create(
                    spec, tools, input=outputs, previous_response_id=response.id
                )
                rounds += 1
        except (OpenAIError, MissingOpenAIKeyError) as exc:
            logger.error(
                "stage_generation_failed",
                extra={"stage": spec.stage.value, "agent": spec.agent_name},
            )
            raise StageGenerationError(spec.stage.value, str(exc)) from exc

        text = response.output_text or ""
        if telemetry is not None:
            telemetry.response_received(text)
            telemetry.finish()
        return text
