"""
Client registry and phone helpers.

Deleting a client never touches saved proposals: they keep a denormalized
name/phone snapshot.
"""
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional
from urllib.parse import quote

from inkvalue.models.schemas import Client
from inkvalue.services.errors import NotFoundError, ValidationError

logger = logging.getLogger("inkvalue-clients")

DEFAULT_DDI = "+55"
MIN_PHONE_DIGITS = 8
_NON_DIGIT = re.compile(r"\D")


def digits_only(phone: str) -> str:
    return _NON_DIGIT.sub("", phone or "")


def format_phone(raw: str, ddi: str = DEFAULT_DDI) -> str:
    """
    Apply the Brazilian display mask when the DDI is +55:
        11 digits → (DD) DDDDD-DDDD, 10 digits → (DD) DDDD-DDDD.
    Other DDIs keep the raw digits (max 15).
    """
    val = digits_only(raw)[:15]
    if ddi != DEFAULT_DDI:
        return val
    val = val[:11]
    if len(val) == 11:
        return f"({val[:2]}) {val[2:7]}-{val[7:]}"
    if len(val) > 6:
        return f"({val[:2]}) {val[2:6]}-{val[6:]}"
    if len(val) > 2:
        return f"({val[:2]}) {val[2:]}"
    return val


def full_phone(raw: str, ddi: str = DEFAULT_DDI) -> str:
    digits = digits_only(raw)
    if not digits:
        raise ValidationError("Phone number is required")
    if len(digits) < MIN_PHONE_DIGITS:
        raise ValidationError("Phone number must have at least 8 digits")
    return f"{ddi} {format_phone(raw, ddi)}"


def whatsapp_url(phone: str, message: str = "") -> str:
    url = f"https://wa.me/{digits_only(phone)}"
    if message:
        url += f"?text={quote(message)}"
    return url


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ClientRegistry:
    """In-memory client collection; persistence is handled by the owner."""

    def __init__(
        self,
        clients: Optional[Iterable[Client]] = None,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self._clients: List[Client] = list(clients or [])
        self._id_factory = id_factory
        self._clock = clock

    def __len__(self) -> int:
        return len(self._clients)

    def list(self) -> List[Client]:
        return list(self._clients)

    def restore(self, clients: Iterable[Client]) -> None:
        """Replace the whole collection (rollback after a failed write)."""
        self._clients = list(clients)

    def find(self, client_id: str) -> Optional[Client]:
        for client in self._clients:
            if client.id == client_id:
                return client
        return None

    def get(self, client_id: str) -> Client:
        client = self.find(client_id)
        if client is None:
            raise NotFoundError(f"Client {client_id} not found")
        return client

    def search(self, term: str) -> List[Client]:
        """Case-insensitive name match, or raw substring match on the phone."""
        if not term:
            return self.list()
        needle = term.lower()
        return [c for c in self._clients if needle in c.name.lower() or term in c.phone]

    def add(
        self,
        name: str,
        phone: str,
        email: Optional[str] = None,
        notes: Optional[str] = None,
        ddi: str = DEFAULT_DDI,
    ) -> Client:
        if not (name or "").strip():
            raise ValidationError("Client name is required")
        client = Client(
            id=self._id_factory(),
            name=name.strip(),
            phone=full_phone(phone, ddi),
            email=email or None,
            notes=notes or None,
            created_at=self._clock(),
        )
        self._clients.append(client)
        logger.info("Client added id=%s", client.id)
        return client

    def update(self, client_id: str, ddi: str = DEFAULT_DDI, **fields) -> Client:
        current = self.get(client_id)
        updates = {k: v for k, v in fields.items() if v is not None and k in ("name", "phone", "email", "notes")}
        if "name" in updates and not updates["name"].strip():
            raise ValidationError("Client name is required")
        if "phone" in updates:
            updates["phone"] = full_phone(updates["phone"], ddi)
        updated = current.model_copy(update=updates)
        self._clients = [updated if c.id == client_id else c for c in self._clients]
        logger.info("Client updated id=%s fields=%s", client_id, sorted(updates))
        return updated

    def delete(self, client_id: str) -> None:
        self.get(client_id)
        self._clients = [c for c in self._clients if c.id != client_id]
        logger.info("Client deleted id=%s", client_id)
