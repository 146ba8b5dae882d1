"""Stage contract validation: the single trust boundary for generated output."""

from __future__ import annotations

import json
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from backend.app.errors import StageOutputInvalid

DocumentT = TypeVar("DocumentT", bound=BaseModel)

_FENCE_OPEN = re.compile(r"^```(?:json)?\n?")
_FENCE_CLOSE = re.compile(r"```$")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if present."""
    if text.startswith("```") and text.endswith("```"):
        return _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", text)).strip()
    return text


def parse_stage_output(raw_text: str | None, stage: str) -> Any:
    """Parse raw stage output as a single JSON value.

    Args:
        raw_text: Text returned by the generation engine
        stage: Logical stage name, used in error messages

    Returns:
        The parsed JSON value

    Raises:
        StageOutputInvalid: if the text is empty or not valid JSON
    """
    text = (raw_text or "").strip()
    if not text:
        raise StageOutputInvalid(stage, "returned empty output")

    cleaned = strip_code_fence(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise StageOutputInvalid(stage, "did not return valid JSON", cleaned) from exc


def validate_stage_document(
    raw_text: str | None, stage: str, schema: type[DocumentT]
) -> DocumentT:
    """Parse stage output and validate it against the stage's document schema.

    Raises:
        StageOutputInvalid: if parsing fails, the value is not a JSON object,
            or the object does not satisfy ``schema``
    """
    value = parse_stage_output(raw_text, stage)
    if not isinstance(value, dict):
        raise StageOutputInvalid(
            stage, "did not return a JSON object", json.dumps(value)
        )

    try:
        return schema.model_validate(value)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in exc.errors()[:5]
        )
        raise StageOutputInvalid(
            stage, f"output failed {schema.__name__} validation ({problems})"
        ) from exc
