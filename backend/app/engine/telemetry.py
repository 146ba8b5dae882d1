"""Best-effort tool-usage telemetry delivered alongside progress events."""

from __future__ import annotations

import json
from typing import Any

from backend.app.planning.events import (
    EventType,
    ProgressEmitter,
    redact_prompt,
    summarize_response,
)


def normalize_detail_value(value: Any) -> str | None:
    """Render tool arguments/outputs as display text."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, indent=2, default=str)
    except (TypeError, ValueError):
        return str(value)


def infer_tool_family(tool_name: str | None) -> str | None:
    """Classify a tool by name."""
    if not tool_name:
        return None
    normalized = tool_name.lower()
    if "web_search" in normalized or "websearch" in normalized:
        return "web_search"
    if "budget" in normalized:
        return "budget_calculator"
    return None


class ToolTelemetry:
    """Reports prompts, responses, and tool calls for one stage run."""

    def __init__(self, emitter: ProgressEmitter, stage: str, agent_name: str) -> None:
        self.emitter = emitter
        self.stage = stage
        self.agent_name = agent_name
        self.call_count = 0

    def prompt_sent(self, prompt: str) -> None:
        self.emitter.emit(
            EventType.agent_prompt,
            self.stage,
            f"Prompt sent to {self.agent_name}.",
            agent=self.agent_name,
            prompt=redact_prompt(prompt),
        )

    def response_received(self, response_text: str) -> None:
        self.emitter.emit(
            EventType.agent_response,
            self.stage,
            f"Response received from {self.agent_name}.",
            agent=self.agent_name,
            response=summarize_response(response_text),
        )

    def _payload(
        self,
        phase: str,
        tool_name: str,
        *,
        source: str,
        label: str | None,
        arguments: Any,
        output: Any,
        raw_item: Any,
    ) -> dict[str, Any]:
        family = infer_tool_family(tool_name)
        return {
            "phase": phase,
            "toolName": tool_name,
            "toolFamily": family,
            "monitorLabel": label,
            "source": source,
            "isWebSearch": family == "web_search",
            "arguments": normalize_detail_value(arguments),
            "output": normalize_detail_value(output),
            "rawItem": normalize_detail_value(raw_item),
        }

    def tool_started(
        self,
        tool_name: str,
        *,
        source: str = "custom",
        label: str | None = None,
        arguments: Any = None,
        raw_item: Any = None,
    ) -> None:
        self.call_count += 1
        payload = self._payload(
            "start",
            tool_name,
            source=source,
            label=label,
            arguments=arguments,
            output=None,
            raw_item=raw_item,
        )
        self.emitter.emit(
            EventType.tool_call_started,
            self.stage,
            f"Tool called: {tool_name}",
            agent=self.agent_name,
            **payload,
        )
        if payload["isWebSearch"]:
            self.emitter.emit(
                EventType.web_search_called,
                self.stage,
                f"Web search tool called ({label or 'default'}).",
                agent=self.agent_name,
                **payload,
            )

    def tool_completed(
        self,
        tool_name: str,
        *,
        source: str = "custom",
        label: str | None = None,
        arguments: Any = None,
        output: Any = None,
        raw_item: Any = None,
    ) -> None:
        payload = self._payload(
            "end",
            tool_name,
            source=source,
            label=label,
            arguments=arguments,
            output=output,
            raw_item=raw_item,
        )
        self.emitter.emit(
            EventType.tool_call_completed,
            self.stage,
            f"Tool output received: {tool_name}",
            agent=self.agent_name,
            **payload,
        )
        if payload["isWebSearch"]:
            self.emitter.emit(
                EventType.web_search_output,
                self.stage,
                f"Web search tool output received ({label or 'default'}).",
                agent=self.agent_name,
                **payload,
            )

    def finish(self) -> None:
        """Note runs that answered without calling any tool."""
        if self.call_count == 0:
            self.emitter.emit(
                EventType.tool_notice,
                self.stage,
                "No tool calls were emitted in this agent run.",
                agent=self.agent_name,
                summary={
                    "note": "Model may have responded directly without tool invocation."
                },
            )
