"""Pricing routes — stateless computation and the live editing project."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from inkvalue.api.deps import get_studio
from inkvalue.models.schemas import (
    ComplexityLevel,
    CostProfile,
    DiscountType,
    PricingBreakdown,
    Project,
    TattooStyle,
)
from inkvalue.services.studio_service import StudioService

router = APIRouter(prefix="/api/pricing", tags=["Pricing"])
logger = logging.getLogger("inkvalue-api")


class ComputeRequest(BaseModel):
    project: Project
    costs: Optional[CostProfile] = None    # defaults to the saved cost profile


class ProjectPatch(BaseModel):
    style: Optional[TattooStyle] = None
    complexity: Optional[ComplexityLevel] = None
    width_cm: Optional[float] = None
    height_cm: Optional[float] = None
    body_part: Optional[str] = None
    sessions: Optional[int] = None
    design_time_hours: Optional[float] = None
    tattoo_time_hours: Optional[float] = None
    material_cost: Optional[float] = None
    hourly_rate: Optional[float] = None
    profit_margin_percent: Optional[float] = None
    discount_amount: Optional[float] = None
    discount_type: Optional[DiscountType] = None
    client_id: Optional[str] = None


class EditingState(BaseModel):
    project: Project
    body_part_choice: str
    client_id: Optional[str] = None
    pricing: PricingBreakdown


def _editing_state(studio: StudioService) -> EditingState:
    return EditingState(
        project=studio.project,
        body_part_choice=studio.body_part_choice(studio.project.body_part),
        client_id=studio.selected_client_id,
        pricing=studio.current_pricing(),
    )


@router.post("/compute", response_model=PricingBreakdown)
async def compute(body: ComputeRequest, studio: StudioService = Depends(get_studio)):
    return studio.price(body.project, body.costs)


@router.get("/current", response_model=EditingState)
async def get_current(studio: StudioService = Depends(get_studio)):
    return _editing_state(studio)


@router.patch("/current", response_model=EditingState)
async def patch_current(body: ProjectPatch, studio: StudioService = Depends(get_studio)):
    fields = body.model_dump(exclude_none=True)
    client_id = fields.pop("client_id", None)
    studio.edit_session(fields, change_client="client_id" in body.model_fields_set, client_id=client_id)
    return _editing_state(studio)


@router.post("/current/reset", response_model=EditingState)
async def reset_current(studio: StudioService = Depends(get_studio)):
    studio.reset_project()
    return _editing_state(studio)
