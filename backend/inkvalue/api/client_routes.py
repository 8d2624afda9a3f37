"""Client routes — registry CRUD, search and WhatsApp links."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from inkvalue.api.deps import get_studio
from inkvalue.models.schemas import Client
from inkvalue.services.clients import DEFAULT_DDI, whatsapp_url
from inkvalue.services.studio_service import StudioService

router = APIRouter(prefix="/api/clients", tags=["Clients"])
logger = logging.getLogger("inkvalue-api")


class ClientCreate(BaseModel):
    name: str
    phone: str
    ddi: str = DEFAULT_DDI
    email: Optional[str] = None
    notes: Optional[str] = None


class ClientUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    ddi: str = DEFAULT_DDI
    email: Optional[str] = None
    notes: Optional[str] = None


@router.get("", response_model=List[Client])
async def list_clients(q: Optional[str] = None, studio: StudioService = Depends(get_studio)):
    """All clients, or those whose name or phone contains `q`."""
    return studio.clients.search(q or "")


@router.post("", response_model=Client, status_code=201)
async def create_client(body: ClientCreate, studio: StudioService = Depends(get_studio)):
    return studio.add_client(body.name, body.phone, email=body.email, notes=body.notes, ddi=body.ddi)


@router.get("/{client_id}", response_model=Client)
async def get_client(client_id: str, studio: StudioService = Depends(get_studio)):
    return studio.clients.get(client_id)


@router.put("/{client_id}", response_model=Client)
async def update_client(client_id: str, body: ClientUpdate, studio: StudioService = Depends(get_studio)):
    return studio.update_client(client_id, **body.model_dump())


@router.delete("/{client_id}", status_code=204)
async def delete_client(client_id: str, studio: StudioService = Depends(get_studio)):
    studio.delete_client(client_id)


@router.get("/{client_id}/whatsapp")
async def client_whatsapp(client_id: str, message: str = "", studio: StudioService = Depends(get_studio)):
    client = studio.clients.get(client_id)
    return {"client_id": client.id, "url": whatsapp_url(client.phone, message)}
