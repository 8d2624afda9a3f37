"""FastAPI dependency injection — the studio state owner."""
from fastapi import HTTPException, Request, status

from inkvalue.services.studio_service import StudioService


def get_studio(request: Request) -> StudioService:
    studio = getattr(request.app.state, "studio", None)
    if studio is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Studio state not initialized",
        )
    return studio
