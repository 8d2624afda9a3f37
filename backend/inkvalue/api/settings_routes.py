"""Settings routes — monthly cost profile and studio identity."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from inkvalue.api.deps import get_studio
from inkvalue.models.schemas import CostProfile, StudioProfile
from inkvalue.services.studio_service import StudioService

router = APIRouter(prefix="/api/settings", tags=["Studio Settings"])
logger = logging.getLogger("inkvalue-api")


# ─── Pydantic schemas ────────────────────────────────────────────────────────

class CostProfileUpdate(BaseModel):
    monthly_rent: Optional[float] = None
    monthly_utilities: Optional[float] = None
    monthly_marketing: Optional[float] = None
    monthly_misc: Optional[float] = None
    days_worked_per_month: Optional[float] = None
    hours_worked_per_day: Optional[float] = None


class StudioProfileUpdate(BaseModel):
    name: Optional[str] = None
    owner_name: Optional[str] = None
    document: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    logo_url: Optional[str] = None


class CostProfileOut(BaseModel):
    monthly_rent: float
    monthly_utilities: float
    monthly_marketing: float
    monthly_misc: float
    days_worked_per_month: float
    hours_worked_per_day: float
    # derived
    total_monthly_hours: float
    total_monthly_fixed_expenses: float


def _costs_out(costs: CostProfile) -> CostProfileOut:
    return CostProfileOut(
        **costs.model_dump(),
        total_monthly_hours=costs.total_monthly_hours,
        total_monthly_fixed_expenses=costs.total_monthly_fixed_expenses,
    )


# ─── Endpoints ───────────────────────────────────────────────────────────────

@router.get("/costs", response_model=CostProfileOut)
async def get_costs(studio: StudioService = Depends(get_studio)):
    return _costs_out(studio.cost_profile)


@router.put("/costs", response_model=CostProfileOut)
async def update_costs(body: CostProfileUpdate, studio: StudioService = Depends(get_studio)):
    costs = studio.update_cost_profile(**body.model_dump(exclude_none=True))
    return _costs_out(costs)


@router.get("/studio", response_model=StudioProfile)
async def get_studio_profile(studio: StudioService = Depends(get_studio)):
    return studio.studio_profile


@router.put("/studio", response_model=StudioProfile)
async def update_studio_profile(body: StudioProfileUpdate, studio: StudioService = Depends(get_studio)):
    return studio.update_studio_profile(**body.model_dump(exclude_none=True))
