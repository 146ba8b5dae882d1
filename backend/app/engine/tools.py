"""Local function tools exposed to generation stages."""

from __future__ import annotations

from typing import Any

from backend.app.models.common import cents_to_usd, to_cents

BUDGET_CALCULATOR = "budget_calculator"

BUDGET_CALCULATOR_SCHEMA: dict[str, Any] = {
    "type": "function",
    "name": BUDGET_CALCULATOR,
    "description": (
        "Calculate subtotal and total from itemized USD costs for flights, "
        "hotels, transport, and activities."
    ),
    "parameters": {
        "type": "object",
        "properties": {
            "items": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "label": {"type": "string"},
                        "costUsd": {"type": "number", "minimum": 0},
                    },
                    "required": ["label", "costUsd"],
                    "additionalProperties": False,
                },
            }
        },
        "required": ["items"],
        "additionalProperties": False,
    },
    "strict": True,
}


def budget_calculator(args: dict[str, Any], tax_rate: float = 0.1) -> dict[str, Any]:
    """Subtotal, tax, and total for itemized USD costs."""
    items = args.get("items") or []
    subtotal_cents = sum(to_cents(max(0.0, float(item.get("costUsd") or 0))) for item in items)
    tax_cents = to_cents(float(cents_to_usd(subtotal_cents)) * tax_rate)

    return {
        "subtotalUsd": float(cents_to_usd(subtotal_cents)),
        "taxUsd": float(cents_to_usd(tax_cents)),
        "totalUsd": float(cents_to_usd(subtotal_cents + tax_cents)),
        "taxRateUsed": tax_rate,
    }


FUNCTION_TOOL_SCHEMAS: dict[str, dict[str, Any]] = {
    BUDGET_CALCULATOR: BUDGET_CALCULATOR_SCHEMA,
}
