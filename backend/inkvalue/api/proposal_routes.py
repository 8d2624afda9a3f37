"""
Proposal routes — save, list, close, delete and reload saved proposals.

POST /api/proposals                 — save the editing project as draft or completed
POST /api/proposals/{id}/close      — draft → completed
POST /api/proposals/{id}/load       — copy a proposal back into the editor
GET  /api/proposals/{id}/whatsapp   — share link built from the saved client phone
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from inkvalue.api.deps import get_studio
from inkvalue.models.schemas import Project, ProposalStatus, SavedProject
from inkvalue.services.studio_service import StudioService

router = APIRouter(prefix="/api/proposals", tags=["Proposals"])
logger = logging.getLogger("inkvalue-api")


class SaveRequest(BaseModel):
    status: ProposalStatus = ProposalStatus.DRAFT
    client_id: Optional[str] = None     # defaults to the client selected in the editor


@router.get("", response_model=List[SavedProject])
async def list_proposals(status: Optional[ProposalStatus] = None, studio: StudioService = Depends(get_studio)):
    return studio.list_proposals(status)


@router.post("", response_model=SavedProject, status_code=201)
async def save_proposal(body: SaveRequest, studio: StudioService = Depends(get_studio)):
    proposal_id = studio.save_current(body.status, body.client_id)
    return studio.get_proposal(proposal_id)


@router.get("/{proposal_id}", response_model=SavedProject)
async def get_proposal(proposal_id: str, studio: StudioService = Depends(get_studio)):
    return studio.get_proposal(proposal_id)


@router.post("/{proposal_id}/close", response_model=SavedProject)
async def close_proposal(proposal_id: str, studio: StudioService = Depends(get_studio)):
    return studio.close_proposal(proposal_id)


@router.delete("/{proposal_id}", status_code=204)
async def delete_proposal(proposal_id: str, studio: StudioService = Depends(get_studio)):
    studio.delete_proposal(proposal_id)


@router.post("/{proposal_id}/load", response_model=Project)
async def load_proposal(proposal_id: str, studio: StudioService = Depends(get_studio)):
    return studio.load_proposal(proposal_id)


class ShareOut(BaseModel):
    proposal_id: str
    message: str
    url: str


@router.get("/{proposal_id}/whatsapp", response_model=ShareOut)
async def share_proposal(proposal_id: str, studio: StudioService = Depends(get_studio)):
    message, url = studio.share_proposal(proposal_id)
    return ShareOut(proposal_id=proposal_id, message=message, url=url)
