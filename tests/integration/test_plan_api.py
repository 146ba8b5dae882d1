"""Integration tests for plan endpoints."""

import json

import pytest

pytestmark = pytest.mark.integration


def parse_sse(body: str) -> list[tuple[str, dict]]:
    """Split an SSE body into (event, data) pairs."""
    events = []
    for block in body.replace("\r\n", "\n").split("\n\n"):
        name, data = None, []
        for line in block.split("\n"):
            if line.startswith("event:"):
                name = line.split(":", 1)[1].strip()
            elif line.startswith("data:"):
                data.append(line.split(":", 1)[1].strip())
        if name:
            events.append((name, json.loads("\n".join(data))))
    return events


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "spring-break-trip-agent"}


def test_plan_returns_draft(client, preferences_payload):
    response = client.post("/api/plan", json=preferences_payload)

    assert response.status_code == 200
    body = response.json()
    assert body["itineraryId"]
    assert body["nextComponentToConfirm"] == "flight"
    itinerary = body["itinerary"]
    assert itinerary["stayAtDestination"]["nightsAtDestination"] == 7
    assert itinerary["estimatedCostSummary"]["totalUsd"] == 2615.5
    assert itinerary["components"]["carRental"]["recommendedOptionId"] == "C1"
    assert itinerary["components"]["flight"]["options"][0]["class"] == "economy"


def test_plan_rejects_invalid_preferences(client, preferences_payload, fake_runner):
    preferences_payload["activities"] = []

    response = client.post("/api/plan", json=preferences_payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid trip request"
    assert "activities" in body["details"]["fieldErrors"]
    assert fake_runner.calls == []


def test_plan_failure_is_500(client, preferences_payload, stage_outputs, session_store):
    stage_outputs["composition"] = "```json\n{not json}\n```"

    response = client.post("/api/plan", json=preferences_payload)

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to generate itinerary"
    assert len(session_store) == 0


def test_get_plan(client, preferences_payload):
    itinerary_id = client.post("/api/plan", json=preferences_payload).json()["itineraryId"]

    response = client.get(f"/api/plan/{itinerary_id}")

    assert response.status_code == 200
    body = response.json()
    assert body["itineraryId"] == itinerary_id
    assert body["status"] == "drafted"
    assert body["confirmations"] == {"flight": None, "hotel": None, "carRental": None}
    assert body["preferences"]["destinationCity"] == "Miami"


def test_get_unknown_plan_is_404(client):
    response = client.get("/api/plan/does-not-exist")

    assert response.status_code == 404
    assert response.json()["error"] == "Itinerary not found"


def test_plan_stream_emits_activity_then_result(client, preferences_payload):
    response = client.post("/api/plan-stream", json=preferences_payload)

    assert response.status_code == 200
    events = parse_sse(response.text)
    names = [name for name, _ in events]
    assert names[-2:] == ["result", "done"]
    assert set(names[:-2]) == {"activity"}

    activity_types = [data["type"] for name, data in events if name == "activity"]
    assert activity_types[0] == "planning_started"
    assert activity_types.count("stage_completed") == 4
    assert "web_search_called" in activity_types

    result = events[-2][1]
    assert result["nextComponentToConfirm"] == "flight"
    assert "ts" in result
    assert events[-1][1]["message"] == "Planning complete. Review options and confirm components."
    assert "ts" in events[-1][1]
    assert client.get(f"/api/plan/{result['itineraryId']}").status_code == 200


def test_plan_stream_failure_ends_with_single_error(client, preferences_payload, stage_outputs):
    stage_outputs["safety"] = ""

    response = client.post("/api/plan-stream", json=preferences_payload)

    events = parse_sse(response.text)
    names = [name for name, _ in events]
    assert names[-1] == "error"
    assert names.count("error") == 1
    assert "result" not in names
    assert "safety returned empty output" in events[-1][1]["details"]
    assert events[-1][1]["error"] == "Failed to generate itinerary"
    assert "ts" in events[-1][1]


def test_plan_stream_rejects_invalid_input_before_streaming(client, preferences_payload):
    preferences_payload["endDate"] = "2026-03-01"

    response = client.post("/api/plan-stream", json=preferences_payload)

    assert response.status_code == 400
