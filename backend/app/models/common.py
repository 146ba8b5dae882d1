"""Common data types and enums used across the application."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

CENT = Decimal("0.01")


class CamelModel(BaseModel):
    """Base model exposing snake_case attributes with camelCase wire names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ComponentType(str, Enum):
    """Purchasable trip elements that require explicit confirmation."""

    flight = "flight"
    hotel = "hotel"
    car_rental = "carRental"


# Confirmation order; also the order used for "next component" lookups.
TRIP_COMPONENTS: tuple[ComponentType, ...] = (
    ComponentType.flight,
    ComponentType.hotel,
    ComponentType.car_rental,
)


class StageName(str, Enum):
    """Pipeline stages in execution order."""

    initialization = "initialization"
    research = "research"
    safety = "safety"
    composition = "composition"
    final = "final"


class TravelClass(str, Enum):
    """Air travel cabin class."""

    economy = "economy"
    business = "business"


UsdAmount = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


def to_cents(value: float | Decimal | None) -> int:
    """Convert a dollar amount to integer cents, rounding half up."""
    if value is None:
        return 0
    return int((Decimal(str(value)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_usd(cents: int) -> Decimal:
    """Convert integer cents to a two-place Decimal dollar amount."""
    return (Decimal(cents) / 100).quantize(CENT)


def round_usd(value: float | Decimal) -> float:
    """Round a dollar amount to cents."""
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))
