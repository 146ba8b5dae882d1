"""Tests for matching activities to requested categories."""

from backend.app.models.stages import ActivityDraft, ActivityIdea
from backend.app.planning.activities import (
    DEFAULT_CATEGORY,
    activities_from_composition,
    activities_from_research,
    match_category,
)

CATEGORIES = ["beach", "food tours", "nightlife"]


def test_exact_match_on_declared_category_is_case_insensitive():
    assert match_category("Anything", CATEGORIES, declared="Food Tours") == "food tours"


def test_exact_match_on_name():
    assert match_category("Nightlife", CATEGORIES) == "nightlife"


def test_substring_match_either_direction():
    assert match_category("South Beach sunrise", CATEGORIES) == "beach"
    assert match_category("Food", ["street food"]) == "street food"


def test_keyword_overlap_uses_notes_and_plurals():
    category = match_category(
        "Little Havana walk", CATEGORIES, notes="Tasting Cuban foods along Calle Ocho"
    )

    assert category == "food tours"


def test_ties_go_to_first_requested_category():
    assert match_category("Harbor boat ride", ["boat tours", "harbor cruises"]) == "boat tours"


def test_no_match_keeps_declared_category_or_general():
    assert match_category("Kayaking", CATEGORIES, declared="water sports") == "water sports"
    assert match_category("Kayaking", CATEGORIES) == DEFAULT_CATEGORY
    assert match_category("Kayaking", []) == DEFAULT_CATEGORY


def test_activities_from_research_are_scheduled_one_per_day():
    items = activities_from_research(
        [
            ActivityIdea(name="Beach day", estimated_cost_usd=None, why_fit="Sun"),
            ActivityIdea(name="Club night", estimated_cost_usd=40, why_fit="Nightlife scene"),
        ],
        CATEGORIES,
    )

    assert [item.scheduled_day for item in items] == ["Day 1", "Day 2"]
    assert [item.category for item in items] == ["beach", "nightlife"]
    assert items[0].estimated_cost_usd == 0.0
    assert items[1].notes == "Nightlife scene"


def test_activities_from_composition_keep_schedule():
    items = activities_from_composition(
        [ActivityDraft(name="Sunset cruise", scheduled_day="Day 3", notes=None)], CATEGORIES
    )

    assert items[0].scheduled_day == "Day 3"
    assert items[0].notes == ""
    assert items[0].category == DEFAULT_CATEGORY
