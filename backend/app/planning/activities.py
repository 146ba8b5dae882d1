"""Match generated activities to the user's requested activity categories."""

from __future__ import annotations

import re
from collections.abc import Sequence

from backend.app.models.itinerary import ActivityItem
from backend.app.models.stages import ActivityDraft, ActivityIdea

DEFAULT_CATEGORY = "general"

_TOKEN = re.compile(r"[a-z0-9]+")
_STOP_WORDS = frozenset(
    {
        "and", "the", "for", "with", "from", "into", "your", "our", "tour",
        "trip", "day", "visit", "local", "near", "around", "some",
    }
)


def _keywords(text: str | None) -> set[str]:
    words = set()
    for token in _TOKEN.findall((text or "").lower()):
        if len(token) < 3 or token in _STOP_WORDS:
            continue
        if len(token) > 3 and token.endswith("s"):
            token = token[:-1]
        words.add(token)
    return words


def match_category(
    name: str,
    categories: Sequence[str],
    *,
    declared: str | None = None,
    notes: str | None = None,
) -> str:
    """Pick the requested category that best describes an activity.

    Precedence: exact match on the declared category or name, then substring
    match in either direction, then the highest keyword overlap. Ties go to
    the category listed first in the request.
    """
    candidates = [c for c in categories if c and c.strip()]
    fallback = declared.strip() if declared and declared.strip() else DEFAULT_CATEGORY
    if not candidates:
        return fallback

    probes = [p.strip().lower() for p in (declared, name) if p and p.strip()]

    for category in candidates:
        if category.strip().lower() in probes:
            return category

    for category in candidates:
        needle = category.strip().lower()
        if any(needle in probe or probe in needle for probe in probes):
            return category

    activity_words = _keywords(declared) | _keywords(name) | _keywords(notes)
    best, best_score = None, 0
    for category in candidates:
        score = len(_keywords(category) & activity_words)
        if score > best_score:
            best, best_score = category, score

    return best if best is not None else fallback


def activities_from_composition(
    drafts: Sequence[ActivityDraft], categories: Sequence[str]
) -> list[ActivityItem]:
    """Categorized activities from the composition stage's schedule."""
    return [
        ActivityItem(
            name=draft.name,
            category=match_category(
                draft.name, categories, declared=draft.category, notes=draft.notes
            ),
            estimated_cost_usd=draft.estimated_cost_usd or 0.0,
            scheduled_day=draft.scheduled_day,
            notes=draft.notes or "",
        )
        for draft in drafts
    ]


def activities_from_research(
    ideas: Sequence[ActivityIdea], categories: Sequence[str]
) -> list[ActivityItem]:
    """Schedule research activity ideas one per day when composition has none."""
    return [
        ActivityItem(
            name=idea.name,
            category=match_category(
                idea.name, categories, declared=idea.category, notes=idea.why_fit
            ),
            estimated_cost_usd=idea.estimated_cost_usd or 0.0,
            scheduled_day=f"Day {index + 1}",
            notes=idea.why_fit or "",
        )
        for index, idea in enumerate(ideas)
    ]
