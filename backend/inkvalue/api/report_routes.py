"""Report routes — yearly dashboard figures and PDF documents per proposal."""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from inkvalue.api.deps import get_studio
from inkvalue.models.schemas import Report
from inkvalue.services.documents import DocumentType, render_document
from inkvalue.services.studio_service import StudioService

router = APIRouter(tags=["Reports"])
logger = logging.getLogger("inkvalue-report-routes")


@router.get("/api/reports/{year}", response_model=Report)
async def yearly_report(year: int, studio: StudioService = Depends(get_studio)):
    return studio.report(year)


@router.get("/api/documents/{proposal_id}/{kind}")
async def proposal_document(proposal_id: str, kind: DocumentType, studio: StudioService = Depends(get_studio)):
    proposal = studio.get_proposal(proposal_id)
    pdf = render_document(kind, proposal, studio.studio_profile)
    filename = f"{kind.value}_{proposal_id[:8]}.pdf"
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
