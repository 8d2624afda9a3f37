"""
Proposal lifecycle — draft → completed.

A proposal is created only by save_proposal(), which prices the project and
copies the resulting scalars into the record. Later changes to the cost
profile or multiplier tables never reach an existing record.

    save_proposal   → new record (draft | completed)
    close_proposal  → draft → completed, nothing else changes
    delete_proposal → removes the record whatever its status
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional

from inkvalue.models.schemas import (
    Client,
    CostProfile,
    Project,
    ProposalStatus,
    SavedProject,
)
from inkvalue.services.clients import whatsapp_url
from inkvalue.services.errors import InvalidTransitionError, NotFoundError, ValidationError
from inkvalue.services.pricing_engine import PricingEngine

logger = logging.getLogger("inkvalue-lifecycle")

UNKNOWN_CLIENT_NAME = "Desconhecido"


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(timezone.utc)


def proposal_share_message(proposal: SavedProject) -> str:
    return (
        f"Olá {proposal.client_name}! Aqui está o orçamento para sua tattoo:\n\n"
        f"Estilo: {proposal.style.value}\n"
        f"Local: {proposal.body_part} ({proposal.width_cm:g}cm x {proposal.height_cm:g}cm)\n"
        f"Valor Total: R$ {proposal.final_price:.2f}\n\n"
        "Podemos agendar?"
    )


def proposal_share_url(proposal: SavedProject) -> str:
    """wa.me link to the phone captured when the proposal was saved."""
    if not proposal.client_phone:
        raise ValidationError(f"Proposal {proposal.id} has no client phone")
    return whatsapp_url(proposal.client_phone, proposal_share_message(proposal))


class ProposalBook:
    """Owns the ordered collection of saved proposals (oldest first)."""

    def __init__(
        self,
        proposals: Optional[Iterable[SavedProject]] = None,
        engine: Optional[PricingEngine] = None,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self._proposals: List[SavedProject] = list(proposals or [])
        self.engine = engine or PricingEngine()
        self._id_factory = id_factory
        self._clock = clock

    def __len__(self) -> int:
        return len(self._proposals)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list(self) -> List[SavedProject]:
        return list(self._proposals)

    def restore(self, proposals: Iterable[SavedProject]) -> None:
        """Replace the whole collection (rollback after a failed write)."""
        self._proposals = list(proposals)

    def find(self, proposal_id: str) -> Optional[SavedProject]:
        for proposal in self._proposals:
            if proposal.id == proposal_id:
                return proposal
        return None

    def get(self, proposal_id: str) -> SavedProject:
        proposal = self.find(proposal_id)
        if proposal is None:
            raise NotFoundError(f"Proposal {proposal_id} not found")
        return proposal

    def by_status(self, status: ProposalStatus) -> List[SavedProject]:
        """Newest first."""
        matches = [p for p in self._proposals if p.status == status]
        return sorted(matches, key=lambda p: p.created_at, reverse=True)

    def drafts(self) -> List[SavedProject]:
        return self.by_status(ProposalStatus.DRAFT)

    def completed(self) -> List[SavedProject]:
        return self.by_status(ProposalStatus.COMPLETED)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def save_proposal(
        self,
        project: Project,
        costs: CostProfile,
        client: Optional[Client],
        status: ProposalStatus = ProposalStatus.DRAFT,
    ) -> str:
        """Freeze the priced project into a new record; returns its id."""
        if client is None:
            logger.warning("Save rejected: no client selected")
            raise ValidationError("Select a client before saving the proposal")

        status = ProposalStatus(status)
        pricing = self.engine.compute(project, costs)
        record = SavedProject(
            **project.model_dump(),
            id=self._id_factory(),
            client_id=client.id,
            client_name=client.name or UNKNOWN_CLIENT_NAME,
            client_phone=client.phone,
            created_at=self._clock(),
            status=status,
            final_price=pricing.suggested_price,
            final_cost=pricing.total_base_cost,
            final_profit=pricing.profit_amount,
        )
        self._proposals.append(record)
        logger.info(
            "Proposal saved status=%s price=%.2f",
            status.value, record.final_price,
            extra={"proposal_id": record.id},
        )
        return record.id

    def close_proposal(self, proposal_id: str) -> SavedProject:
        current = self.get(proposal_id)
        if current.status == ProposalStatus.COMPLETED:
            logger.warning("Close rejected: already completed", extra={"proposal_id": proposal_id})
            raise InvalidTransitionError(f"Proposal {proposal_id} is already completed")

        closed = current.model_copy(update={"status": ProposalStatus.COMPLETED})
        self._proposals = [closed if p.id == proposal_id else p for p in self._proposals]
        logger.info("Proposal closed", extra={"proposal_id": proposal_id})
        return closed

    def delete_proposal(self, proposal_id: str) -> None:
        removed = self.get(proposal_id)
        self._proposals = [p for p in self._proposals if p.id != proposal_id]
        logger.info("Proposal deleted status=%s", removed.status.value, extra={"proposal_id": proposal_id})
