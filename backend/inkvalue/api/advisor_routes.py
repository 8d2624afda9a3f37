"""Advisor routes — generative pricing analysis and WhatsApp sales pitch."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from inkvalue.api.deps import get_studio
from inkvalue.models.schemas import AIAnalysisResult, Project
from inkvalue.services import advisor
from inkvalue.services.clients import whatsapp_url
from inkvalue.services.studio_service import StudioService

router = APIRouter(prefix="/api/advisor", tags=["Advisor"])
logger = logging.getLogger("inkvalue-api")


class AdvisorRequest(BaseModel):
    project: Optional[Project] = None      # defaults to the editing project
    client_id: Optional[str] = None


class PitchOut(BaseModel):
    text: str
    whatsapp_url: Optional[str] = None


@router.post("/analysis", response_model=AIAnalysisResult)
async def analysis(body: AdvisorRequest, studio: StudioService = Depends(get_studio)):
    project = body.project or studio.project
    pricing = studio.price(project)
    return await advisor.analyze_pricing(project, studio.cost_profile, pricing)


@router.post("/pitch", response_model=PitchOut)
async def pitch(body: AdvisorRequest, studio: StudioService = Depends(get_studio)):
    project = body.project or studio.project
    client = studio.find_client(body.client_id or studio.selected_client_id)
    price = studio.price(project).suggested_price
    text = await advisor.generate_sales_pitch(project, price, client.name if client else None)
    return PitchOut(text=text, whatsapp_url=whatsapp_url(client.phone, text) if client else None)
