"""
test_proposal_lifecycle.py — Unit tests for ProposalBook.

Tests cover:
  - save_proposal: frozen financial snapshot, client denormalization, status
  - Missing client rejection
  - close_proposal: draft → completed, already-completed and unknown ids
  - delete_proposal in both statuses
  - Drafts / completed listings (newest first)
  - Snapshot independence from later cost-profile changes
  - WhatsApp share built from the saved phone snapshot
"""

import pytest

from inkvalue.models.schemas import Client, CostProfile, ProposalStatus
from inkvalue.services.errors import InvalidTransitionError, NotFoundError, ValidationError
from inkvalue.services.proposal_lifecycle import (
    UNKNOWN_CLIENT_NAME,
    proposal_share_message,
    proposal_share_url,
)


# ===========================================================================
# Class 1: Saving
# ===========================================================================

class TestSaveProposal:

    def test_save_freezes_pricing(self, proposal_book, simple_project, round_costs, client_ana):
        """price 570, base 380, profit 190 are copied into the record."""
        proposal_id = proposal_book.save_proposal(simple_project, round_costs, client_ana)
        saved = proposal_book.get(proposal_id)
        assert saved.final_price == pytest.approx(570.0)
        assert saved.final_cost == pytest.approx(380.0)
        assert saved.final_profit == pytest.approx(190.0)

    def test_save_defaults_to_draft(self, proposal_book, simple_project, round_costs, client_ana):
        proposal_id = proposal_book.save_proposal(simple_project, round_costs, client_ana)
        assert proposal_book.get(proposal_id).status == ProposalStatus.DRAFT

    def test_save_as_completed(self, proposal_book, simple_project, round_costs, client_ana):
        proposal_id = proposal_book.save_proposal(
            simple_project, round_costs, client_ana, ProposalStatus.COMPLETED
        )
        assert proposal_book.get(proposal_id).status == ProposalStatus.COMPLETED

    def test_save_copies_project_and_client(self, proposal_book, simple_project, round_costs, client_ana):
        proposal_id = proposal_book.save_proposal(simple_project, round_costs, client_ana)
        saved = proposal_book.get(proposal_id)
        assert saved.to_project() == simple_project
        assert saved.client_id == "cli-ana"
        assert saved.client_name == "Ana Souza"
        assert saved.client_phone == "+55 (11) 98765-4321"

    def test_ids_are_unique(self, proposal_book, simple_project, round_costs, client_ana):
        ids = {proposal_book.save_proposal(simple_project, round_costs, client_ana) for _ in range(5)}
        assert len(ids) == 5
        assert len(proposal_book) == 5

    def test_missing_client_rejected(self, proposal_book, simple_project, round_costs):
        with pytest.raises(ValidationError):
            proposal_book.save_proposal(simple_project, round_costs, None)
        assert len(proposal_book) == 0

    def test_blank_client_name_falls_back(self, proposal_book, simple_project, round_costs, clock):
        nameless = Client(id="cli-x", name="", phone="+55 (11) 91234-5678", created_at=clock())
        proposal_id = proposal_book.save_proposal(simple_project, round_costs, nameless)
        assert proposal_book.get(proposal_id).client_name == UNKNOWN_CLIENT_NAME

    def test_snapshot_ignores_later_cost_changes(self, proposal_book, simple_project, round_costs, client_ana):
        """Records keep the price computed at save time, not a recomputation."""
        proposal_id = proposal_book.save_proposal(simple_project, round_costs, client_ana)
        pricier = CostProfile(**{**round_costs.model_dump(), "monthly_rent": 5000.0})
        assert proposal_book.engine.compute(simple_project, pricier).suggested_price > 570.0
        assert proposal_book.get(proposal_id).final_price == pytest.approx(570.0)

    def test_record_is_frozen(self, proposal_book, simple_project, round_costs, client_ana):
        import pydantic
        saved = proposal_book.get(proposal_book.save_proposal(simple_project, round_costs, client_ana))
        with pytest.raises(pydantic.ValidationError):
            saved.final_price = 1.0


# ===========================================================================
# Class 2: Closing
# ===========================================================================

class TestCloseProposal:

    def test_close_draft(self, proposal_book, simple_project, round_costs, client_ana):
        proposal_id = proposal_book.save_proposal(simple_project, round_costs, client_ana)
        before = proposal_book.get(proposal_id)
        closed = proposal_book.close_proposal(proposal_id)
        assert closed.status == ProposalStatus.COMPLETED
        # Only the status changes
        assert closed.model_dump(exclude={"status"}) == before.model_dump(exclude={"status"})
        assert proposal_book.get(proposal_id).status == ProposalStatus.COMPLETED

    def test_close_twice_rejected(self, proposal_book, simple_project, round_costs, client_ana):
        proposal_id = proposal_book.save_proposal(simple_project, round_costs, client_ana)
        proposal_book.close_proposal(proposal_id)
        with pytest.raises(InvalidTransitionError):
            proposal_book.close_proposal(proposal_id)

    def test_close_unknown_id(self, proposal_book):
        with pytest.raises(NotFoundError):
            proposal_book.close_proposal("nope")

    def test_close_keeps_position(self, proposal_book, simple_project, round_costs, client_ana):
        ids = [proposal_book.save_proposal(simple_project, round_costs, client_ana) for _ in range(3)]
        proposal_book.close_proposal(ids[1])
        assert [p.id for p in proposal_book.list()] == ids


# ===========================================================================
# Class 3: Deleting and listing
# ===========================================================================

class TestDeleteAndList:

    def test_delete_draft(self, proposal_book, simple_project, round_costs, client_ana):
        proposal_id = proposal_book.save_proposal(simple_project, round_costs, client_ana)
        proposal_book.delete_proposal(proposal_id)
        assert proposal_book.find(proposal_id) is None

    def test_delete_completed(self, proposal_book, simple_project, round_costs, client_ana):
        proposal_id = proposal_book.save_proposal(
            simple_project, round_costs, client_ana, ProposalStatus.COMPLETED
        )
        proposal_book.delete_proposal(proposal_id)
        assert proposal_book.completed() == []

    def test_delete_unknown_id(self, proposal_book):
        with pytest.raises(NotFoundError):
            proposal_book.delete_proposal("nope")

    def test_lists_newest_first(self, proposal_book, simple_project, round_costs, client_ana):
        first = proposal_book.save_proposal(simple_project, round_costs, client_ana)
        second = proposal_book.save_proposal(simple_project, round_costs, client_ana)
        done = proposal_book.save_proposal(simple_project, round_costs, client_ana, ProposalStatus.COMPLETED)
        assert [p.id for p in proposal_book.drafts()] == [second, first]
        assert [p.id for p in proposal_book.completed()] == [done]


# ===========================================================================
# Class 4: WhatsApp share
# ===========================================================================

class TestWhatsAppShare:

    def test_message_lists_project_and_price(self, proposal_book, simple_project, round_costs, client_ana):
        """simple_project with round_costs is priced at 570."""
        saved = proposal_book.get(proposal_book.save_proposal(simple_project, round_costs, client_ana))
        message = proposal_share_message(saved)
        assert message.startswith("Olá Ana Souza! Aqui está o orçamento para sua tattoo:")
        assert "Estilo: Old School" in message
        assert "Local: Antebraço (10cm x 10cm)" in message
        assert "Valor Total: R$ 570.00" in message
        assert message.endswith("Podemos agendar?")

    def test_url_targets_snapshot_phone(self, proposal_book, simple_project, round_costs, client_ana):
        saved = proposal_book.get(proposal_book.save_proposal(simple_project, round_costs, client_ana))
        url = proposal_share_url(saved)
        assert url.startswith("https://wa.me/5511987654321?text=Ol%C3%A1%20Ana%20Souza")

    def test_missing_phone_rejected(self, proposal_book, simple_project, round_costs, clock):
        phoneless = Client(id="cli-p", name="Sem Telefone", phone="", created_at=clock())
        saved = proposal_book.get(proposal_book.save_proposal(simple_project, round_costs, phoneless))
        with pytest.raises(ValidationError):
            proposal_share_url(saved)
