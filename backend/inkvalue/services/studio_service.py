"""
StudioService — the single owner of studio state.

Holds the cost profile, studio profile, client registry, proposal book and
the one live editing project. Everything is loaded from the injected
KeyValueStore at construction; every successful mutation writes the affected
key back. Validation happens before any change; if the write itself fails the
in-memory collections are restored, so memory and store never disagree.
"""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

import pydantic

from inkvalue.models.schemas import (
    BODY_PARTS,
    Client,
    CostProfile,
    PricingBreakdown,
    Project,
    ProposalStatus,
    Report,
    SavedProject,
    StudioProfile,
)
from inkvalue.services.clients import ClientRegistry
from inkvalue.services.errors import ValidationError
from inkvalue.services.persistence import (
    CLIENTS_KEY,
    COSTS_KEY,
    PROJECTS_KEY,
    STUDIO_KEY,
    KeyValueStore,
)
from inkvalue.services.pricing_engine import PricingEngine
from inkvalue.services.proposal_lifecycle import ProposalBook, proposal_share_message, proposal_share_url
from inkvalue.services.reporting import aggregate

logger = logging.getLogger("inkvalue-studio")


class StudioService:

    def __init__(
        self,
        store: KeyValueStore,
        engine: Optional[PricingEngine] = None,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.store = store
        self.engine = engine or PricingEngine()

        extra = {}
        if id_factory is not None:
            extra["id_factory"] = id_factory
        if clock is not None:
            extra["clock"] = clock

        self.cost_profile: CostProfile = self._load_model(COSTS_KEY, CostProfile)
        self.studio_profile: StudioProfile = self._load_model(STUDIO_KEY, StudioProfile)
        self.clients = ClientRegistry(
            [Client.model_validate(c) for c in (store.get(CLIENTS_KEY) or [])], **extra
        )
        self.proposals = ProposalBook(
            [SavedProject.model_validate(p) for p in (store.get(PROJECTS_KEY) or [])],
            engine=self.engine,
            **extra,
        )

        # Editing session
        self.project: Project = Project()
        self.selected_client_id: Optional[str] = None

        logger.info(
            "Studio state loaded clients=%d proposals=%d", len(self.clients), len(self.proposals)
        )

    @staticmethod
    def _merge(model, current, fields):
        try:
            return model.model_validate({**current.model_dump(), **fields})
        except pydantic.ValidationError as e:
            raise ValidationError(str(e)) from e

    def _load_model(self, key: str, model):
        raw = self.store.get(key)
        return model.model_validate(raw) if raw else model()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @contextmanager
    def _rollback_on_failure(self, key: str):
        clients, proposals = self.clients.list(), self.proposals.list()
        project, selected = self.project, self.selected_client_id
        try:
            yield
        except Exception:
            logger.error("Writing %s failed, in-memory state restored", key)
            self.clients.restore(clients)
            self.proposals.restore(proposals)
            self.project, self.selected_client_id = project, selected
            raise

    def _persist_clients(self) -> None:
        self.store.set(CLIENTS_KEY, [c.model_dump(mode="json") for c in self.clients.list()])

    def _persist_proposals(self) -> None:
        self.store.set(PROJECTS_KEY, [p.model_dump(mode="json") for p in self.proposals.list()])

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def update_cost_profile(self, **fields: Any) -> CostProfile:
        updated = self._merge(CostProfile, self.cost_profile, fields)
        self.store.set(COSTS_KEY, updated.model_dump(mode="json"))
        self.cost_profile = updated
        logger.info("Cost profile updated fields=%s", sorted(fields))
        return self.cost_profile

    def update_studio_profile(self, **fields: Any) -> StudioProfile:
        updated = self._merge(StudioProfile, self.studio_profile, fields)
        self.store.set(STUDIO_KEY, updated.model_dump(mode="json"))
        self.studio_profile = updated
        logger.info("Studio profile updated fields=%s", sorted(fields))
        return self.studio_profile

    # ------------------------------------------------------------------
    # Clients
    # ------------------------------------------------------------------

    def add_client(self, name: str, phone: str, **kwargs: Any) -> Client:
        with self._rollback_on_failure(CLIENTS_KEY):
            client = self.clients.add(name, phone, **kwargs)
            self._persist_clients()
        return client

    def update_client(self, client_id: str, **fields: Any) -> Client:
        with self._rollback_on_failure(CLIENTS_KEY):
            client = self.clients.update(client_id, **fields)
            self._persist_clients()
        return client

    def delete_client(self, client_id: str) -> None:
        with self._rollback_on_failure(CLIENTS_KEY):
            self.clients.delete(client_id)
            if self.selected_client_id == client_id:
                self.selected_client_id = None
            self._persist_clients()

    def find_client(self, client_id: Optional[str]) -> Optional[Client]:
        if not client_id:
            return None
        return self.clients.find(client_id)

    # ------------------------------------------------------------------
    # Editing session
    # ------------------------------------------------------------------

    def update_project(self, **fields: Any) -> Project:
        self.project = self._merge(Project, self.project, fields)
        return self.project

    def edit_session(self, fields: Dict[str, Any], change_client: bool = False, client_id: Optional[str] = None) -> Project:
        """Apply project edits and an optional client change together, or neither."""
        project = self._merge(Project, self.project, fields) if fields else self.project
        if change_client and client_id:
            self.clients.get(client_id)
        self.project = project
        if change_client:
            self.selected_client_id = client_id or None
        return project

    def select_client(self, client_id: Optional[str]) -> None:
        if client_id:
            self.clients.get(client_id)
        self.selected_client_id = client_id or None

    def reset_project(self) -> Project:
        self.project = Project()
        self.selected_client_id = None
        return self.project

    def current_pricing(self) -> PricingBreakdown:
        return self.engine.compute(self.project, self.cost_profile)

    def price(self, project: Project, costs: Optional[CostProfile] = None) -> PricingBreakdown:
        return self.engine.compute(project, costs or self.cost_profile)

    @staticmethod
    def body_part_choice(body_part: str) -> str:
        """Which entry of the body-part list a label maps to ("Outro" for free text)."""
        return body_part if body_part in BODY_PARTS else "Outro"

    # ------------------------------------------------------------------
    # Proposals
    # ------------------------------------------------------------------

    def save_proposal(
        self,
        project: Project,
        costs: CostProfile,
        client: Optional[Client],
        status: ProposalStatus = ProposalStatus.DRAFT,
    ) -> str:
        with self._rollback_on_failure(PROJECTS_KEY):
            proposal_id = self.proposals.save_proposal(project, costs, client, status)
            self._persist_proposals()
        return proposal_id

    def save_current(
        self,
        status: ProposalStatus = ProposalStatus.DRAFT,
        client_id: Optional[str] = None,
    ) -> str:
        """Save the editing project; resets the editing session only on success."""
        chosen = client_id or self.selected_client_id
        client = self.find_client(chosen)
        if chosen and client is None:
            raise ValidationError(f"Client {chosen} does not exist")
        proposal_id = self.save_proposal(self.project, self.cost_profile, client, status)
        self.reset_project()
        return proposal_id

    def close_proposal(self, proposal_id: str) -> SavedProject:
        with self._rollback_on_failure(PROJECTS_KEY):
            closed = self.proposals.close_proposal(proposal_id)
            self._persist_proposals()
        return closed

    def delete_proposal(self, proposal_id: str) -> None:
        with self._rollback_on_failure(PROJECTS_KEY):
            self.proposals.delete_proposal(proposal_id)
            self._persist_proposals()

    def get_proposal(self, proposal_id: str) -> SavedProject:
        return self.proposals.get(proposal_id)

    def list_proposals(self, status: Optional[ProposalStatus] = None) -> List[SavedProject]:
        if status is None:
            return self.proposals.list()
        return self.proposals.by_status(status)

    def share_proposal(self, proposal_id: str) -> Tuple[str, str]:
        """WhatsApp message and link for a saved proposal, from its phone snapshot."""
        saved = self.proposals.get(proposal_id)
        return proposal_share_message(saved), proposal_share_url(saved)

    def load_proposal(self, proposal_id: str) -> Project:
        """Copy a saved proposal back into the editing session."""
        saved = self.proposals.get(proposal_id)
        self.project = saved.to_project()
        self.selected_client_id = saved.client_id
        return self.project

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def report(self, year: int) -> Report:
        return aggregate(self.proposals.list(), year)
