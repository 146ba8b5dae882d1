"""Tests for stage output parsing and schema validation."""

import pytest

from backend.app.errors import StageOutputInvalid
from backend.app.models.stages import CompositionDocument, ResearchDocument, SafetyDocument
from backend.app.planning.contracts import (
    parse_stage_output,
    strip_code_fence,
    validate_stage_document,
)


def test_parse_plain_json():
    assert parse_stage_output('{"a": 1}', "research") == {"a": 1}


def test_parse_strips_json_code_fence():
    raw = '```json\n{"packingList": ["hat"]}\n```'
    assert parse_stage_output(raw, "safety") == {"packingList": ["hat"]}


def test_strip_code_fence_leaves_unfenced_text():
    assert strip_code_fence('{"a": 1}') == '{"a": 1}'


@pytest.mark.parametrize("raw", [None, "", "   \n  "])
def test_empty_output_is_invalid(raw):
    with pytest.raises(StageOutputInvalid) as exc_info:
        parse_stage_output(raw, "research")

    assert exc_info.value.stage == "research"
    assert "empty" in exc_info.value.message


def test_invalid_json_carries_snippet():
    raw = "Here are some flights: " + "x" * 500
    with pytest.raises(StageOutputInvalid) as exc_info:
        parse_stage_output(raw, "composition")

    err = exc_info.value
    assert err.stage == "composition"
    assert len(err.snippet) == 200
    assert err.snippet.startswith("Here are some flights")
    assert "did not return valid JSON" in err.message


def test_non_object_json_is_invalid():
    with pytest.raises(StageOutputInvalid, match="JSON object"):
        validate_stage_document("[1, 2, 3]", "safety", SafetyDocument)


def test_schema_violation_is_invalid():
    raw = '{"flightOptions": [{"label": "no id here"}]}'
    with pytest.raises(StageOutputInvalid) as exc_info:
        validate_stage_document(raw, "research", ResearchDocument)

    assert "ResearchDocument" in exc_info.value.message
    assert exc_info.value.status_code == 500


def test_research_document_defaults_missing_lists():
    doc = validate_stage_document(
        '{"flightOptions": null, "unexpected": true}', "research", ResearchDocument
    )

    assert doc.flight_options == []
    assert doc.hotel_options == []
    assert doc.activity_ideas == []


def test_numeric_option_ids_are_coerced_to_strings():
    doc = validate_stage_document(
        '{"hotelOptions": [{"id": 7, "nightlyUsd": 120}]}', "research", ResearchDocument
    )

    assert doc.hotel_options[0].id == "7"


def test_option_extra_fields_are_kept():
    doc = validate_stage_document(
        '{"carRentalOptions": [{"id": "C1", "pickupLocation": "MIA"}]}',
        "research",
        ResearchDocument,
    )

    assert doc.car_rental_options[0].model_dump(by_alias=True)["pickupLocation"] == "MIA"


def test_composition_document_ignores_generated_cost_summary():
    doc = validate_stage_document(
        '{"tripSummary": "x", "components": null, "estimatedCostSummary": {"totalUsd": 1}}',
        "composition",
        CompositionDocument,
    )

    assert doc.components.flight is None
    assert doc.activities is None
    assert not hasattr(doc, "estimated_cost_summary")


def test_duplicate_research_option_ids_are_invalid():
    raw = '{"hotelOptions": [{"id": "H1", "nightlyUsd": 100}, {"id": "H1", "nightlyUsd": 500}]}'
    with pytest.raises(StageOutputInvalid, match="duplicate option id 'H1'") as exc_info:
        validate_stage_document(raw, "research", ResearchDocument)

    assert exc_info.value.stage == "research"


def test_duplicate_composition_option_ids_are_invalid():
    raw = '{"components": {"flight": {"options": [{"id": 3}, {"id": "3"}]}}}'
    with pytest.raises(StageOutputInvalid, match="duplicate option id '3'"):
        validate_stage_document(raw, "composition", CompositionDocument)
