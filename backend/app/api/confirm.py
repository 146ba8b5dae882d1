"""Confirmation API endpoints for components and the final decision."""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import Field, field_validator

from backend.app.api.deps import get_confirmation_service
from backend.app.confirm.machine import ConfirmationService
from backend.app.models.common import CamelModel
from backend.app.models.options import coerce_option_id

router = APIRouter(tags=["confirm"])


class ConfirmComponentRequest(CamelModel):
    """Request to confirm one option for one component."""

    itinerary_id: str = Field(min_length=1)
    component_type: str = Field(min_length=1)
    option_id: str = Field(min_length=1)

    @field_validator("option_id", mode="before")
    @classmethod
    def _coerce_option_id(cls, v: Any) -> Any:
        return coerce_option_id(v)


class FinalConfirmationRequest(CamelModel):
    """Request to approve or decline the confirmed itinerary."""

    itinerary_id: str = Field(min_length=1)
    approved: bool


@router.post("/confirm-component")
async def confirm_component(
    request: ConfirmComponentRequest,
    service: ConfirmationService = Depends(get_confirmation_service),
) -> dict[str, Any]:
    """Confirm a component option.

    Returns:
        Updated itinerary, confirmations, next component, and final review

    Raises:
        UnknownComponent: 400 if componentType is not flight, hotel, or carRental
        OptionNotOffered: 400 if optionId is not a current option
        SessionNotFound: 404 if itineraryId is unknown
    """
    result = await service.confirm(
        request.itinerary_id, request.component_type, request.option_id
    )
    return result.model_dump(mode="json", by_alias=True)


@router.post("/final-confirmation")
async def final_confirmation(
    request: FinalConfirmationRequest,
    service: ConfirmationService = Depends(get_confirmation_service),
) -> dict[str, Any]:
    """Record the final, non-binding decision. Nothing is purchased.

    Raises:
        PendingComponents: 400 if any component is unconfirmed
        SessionNotFound: 404 if itineraryId is unknown
    """
    result = await service.final_approve(request.itinerary_id, request.approved)
    return result.model_dump(mode="json", by_alias=True)
