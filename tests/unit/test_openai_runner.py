"""Tests for the OpenAI Responses API stage runner with a scripted client."""

import asyncio
import json
from types import SimpleNamespace

import pytest
from openai import NOT_GIVEN, OpenAIError

from backend.app.config import Settings
from backend.app.engine.agents import FINAL_REVIEW_STAGE, RESEARCH_STAGE, SAFETY_STAGE
from backend.app.engine.openai_runner import OpenAIStageRunner
from backend.app.engine.telemetry import ToolTelemetry
from backend.app.engine.tools import BUDGET_CALCULATOR_SCHEMA
from backend.app.errors import StageGenerationError
from backend.app.planning.events import ProgressEmitter


class ScriptedResponses:
    """Stands in for ``client.responses`` and replays canned responses."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_response(response_id, output=(), output_text="", error=None):
    return SimpleNamespace(id=response_id, output=list(output), output_text=output_text, error=error)


def web_search_item():
    return SimpleNamespace(
        type="web_search_call",
        status="completed",
        action=SimpleNamespace(query="Miami spring break hotels"),
    )


def budget_call(call_id="call-1"):
    return SimpleNamespace(
        type="function_call",
        name="budget_calculator",
        call_id=call_id,
        arguments=json.dumps({"items": [{"label": "Hotel", "costUsd": 100}]}),
    )


def make_runner(responses, **overrides):
    scripted = ScriptedResponses(responses)
    settings = Settings(_env_file=None, **overrides)
    runner = OpenAIStageRunner(settings, client=SimpleNamespace(responses=scripted))
    return runner, scripted


def test_returns_output_text_and_reports_prompt():
    runner, scripted = make_runner([make_response("r1", output_text='{"ok": true}')])
    events = []
    telemetry = ToolTelemetry(ProgressEmitter(events.append), "safety", SAFETY_STAGE.agent_name)

    text = asyncio.run(runner.run_stage(SAFETY_STAGE, "Provide safety advice", telemetry))

    assert text == '{"ok": true}'
    request = scripted.requests[0]
    assert request["input"] == "Provide safety advice"
    assert request["instructions"] == SAFETY_STAGE.instructions
    assert request["tools"] == [{"type": "web_search_preview"}]
    assert [e["type"] for e in events] == ["agent_prompt", "agent_response", "tool_notice"]


def test_stage_without_tools_sends_no_tools():
    runner, scripted = make_runner([make_response("r1", output_text="{}")])

    asyncio.run(runner.run_stage(FINAL_REVIEW_STAGE, "Review"))

    assert scripted.requests[0]["tools"] is NOT_GIVEN


def test_function_calls_are_executed_and_fed_back():
    runner, scripted = make_runner(
        [
            make_response("r1", output=[web_search_item(), budget_call()]),
            make_response("r2", output_text='{"flightOptions": []}'),
        ]
    )
    events = []
    telemetry = ToolTelemetry(ProgressEmitter(events.append), "research", RESEARCH_STAGE.agent_name)

    text = asyncio.run(runner.run_stage(RESEARCH_STAGE, "Research", telemetry))

    assert text == '{"flightOptions": []}'
    first, second = scripted.requests
    assert BUDGET_CALCULATOR_SCHEMA in first["tools"]
    assert second["previous_response_id"] == "r1"
    [tool_output] = second["input"]
    assert tool_output["type"] == "function_call_output"
    assert tool_output["call_id"] == "call-1"
    assert json.loads(tool_output["output"])["totalUsd"] == 110.0

    types = [e["type"] for e in events]
    assert types.count("web_search_called") == 1
    assert types.count("tool_call_completed") == 2
    assert "tool_notice" not in types
    assert telemetry.call_count == 2


def test_unknown_function_reports_error_to_model():
    call = budget_call()
    call.name = "mystery_tool"
    runner, scripted = make_runner(
        [make_response("r1", output=[call]), make_response("r2", output_text="{}")]
    )

    asyncio.run(runner.run_stage(RESEARCH_STAGE, "Research"))

    output = json.loads(scripted.requests[1]["input"][0]["output"])
    assert output == {"error": "unknown tool mystery_tool"}


def test_tool_round_limit():
    runner, _ = make_runner(
        [make_response(f"r{i}", output=[budget_call(f"c{i}")]) for i in range(3)],
        max_tool_rounds=1,
    )

    with pytest.raises(StageGenerationError, match="exceeded 1 tool rounds"):
        asyncio.run(runner.run_stage(RESEARCH_STAGE, "Research"))


def test_response_error_raises():
    runner, _ = make_runner(
        [make_response("r1", error=SimpleNamespace(message="model overloaded"))]
    )

    with pytest.raises(StageGenerationError, match="model overloaded") as exc_info:
        asyncio.run(runner.run_stage(SAFETY_STAGE, "Safety"))

    assert exc_info.value.stage == "safety"


def test_sdk_errors_are_wrapped():
    runner, _ = make_runner([OpenAIError("connection reset")])

    with pytest.raises(StageGenerationError, match="connection reset"):
        asyncio.run(runner.run_stage(SAFETY_STAGE, "Safety"))


def test_model_comes_from_settings():
    runner, scripted = make_runner(
        [make_response("r1", output_text="{}")], openai_model="gpt-4o-mini"
    )

    asyncio.run(runner.run_stage(SAFETY_STAGE, "Safety"))

    assert scripted.requests[0]["model"] == "gpt-4o-mini"
