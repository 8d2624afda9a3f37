"""
test_persistence.py — Key-value stores and StudioService reload.

Tests cover:
  - InMemoryStore copy semantics
  - SqlKeyValueStore insert / overwrite against a temporary SQLite file
  - A StudioService rebuilt from the same store sees the same state
"""

import pytest
from sqlalchemy.orm import Session, sessionmaker

from conftest import sequential_ids
from inkvalue.db import init_db, make_engine
from inkvalue.models.schemas import ProposalStatus
from inkvalue.services.persistence import (
    CLIENTS_KEY,
    COSTS_KEY,
    PROJECTS_KEY,
    InMemoryStore,
    SqlKeyValueStore,
)
from inkvalue.services.studio_service import StudioService


@pytest.fixture
def sql_store(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'inkvalue-test.db'}")
    init_db(bind=engine)
    yield SqlKeyValueStore(sessionmaker(engine, class_=Session, expire_on_commit=False))
    engine.dispose()


# ===========================================================================
# Class 1: Stores
# ===========================================================================

class TestInMemoryStore:

    def test_missing_key(self):
        assert InMemoryStore().get("nope") is None

    def test_values_are_copied(self):
        store = InMemoryStore()
        value = {"items": [1, 2]}
        store.set("k", value)
        value["items"].append(3)
        assert store.get("k") == {"items": [1, 2]}
        store.get("k")["items"].append(9)
        assert store.get("k") == {"items": [1, 2]}


class TestSqlKeyValueStore:

    def test_missing_key(self, sql_store):
        assert sql_store.get(COSTS_KEY) is None

    def test_insert_then_overwrite(self, sql_store):
        sql_store.set(COSTS_KEY, {"monthly_rent": 1000.0})
        sql_store.set(COSTS_KEY, {"monthly_rent": 2000.0})
        assert sql_store.get(COSTS_KEY) == {"monthly_rent": 2000.0}

    def test_list_values(self, sql_store):
        sql_store.set(CLIENTS_KEY, [{"id": "a"}, {"id": "b"}])
        assert sql_store.get(CLIENTS_KEY) == [{"id": "a"}, {"id": "b"}]


# ===========================================================================
# Class 2: Reload
# ===========================================================================

class TestStudioReload:

    def _populate(self, store, clock):
        studio = StudioService(store, id_factory=sequential_ids("id"), clock=clock)
        studio.update_cost_profile(monthly_rent=1800.0)
        studio.update_studio_profile(name="Black Ink")
        client = studio.add_client("Ana Souza", "11987654321")
        studio.select_client(client.id)
        studio.update_project(material_cost=80.0)
        proposal_id = studio.save_current(ProposalStatus.COMPLETED)
        return studio, proposal_id

    @pytest.mark.parametrize("store_name", ["memory_store", "sql_store"])
    def test_state_survives_restart(self, request, clock, store_name):
        store = request.getfixturevalue(store_name)
        original, proposal_id = self._populate(store, clock)

        reloaded = StudioService(store)
        assert reloaded.cost_profile == original.cost_profile
        assert reloaded.studio_profile.name == "Black Ink"
        assert [c.id for c in reloaded.clients.list()] == [c.id for c in original.clients.list()]
        assert reloaded.get_proposal(proposal_id) == original.get_proposal(proposal_id)
        assert reloaded.report(original.get_proposal(proposal_id).created_at.year).count == 1

    def test_editing_session_not_persisted(self, memory_store, clock):
        studio, _ = self._populate(memory_store, clock)
        studio.update_project(material_cost=999.0)
        assert StudioService(memory_store).project.material_cost != 999.0

    def test_proposals_stored_as_json(self, memory_store, clock):
        self._populate(memory_store, clock)
        stored = memory_store.get(PROJECTS_KEY)
        assert isinstance(stored[0]["created_at"], str)
        assert stored[0]["status"] == "completed"
