"""
Key-value persistence for studio state.

Values are plain JSON documents (dicts or lists) keyed by name. Two stores:
  - InMemoryStore   : tests and throwaway sessions
  - SqlKeyValueStore: a `kv_store` table through SQLAlchemy (SQLite by default)
"""
import copy
import logging
from typing import Any, Dict, Optional, Protocol

from sqlalchemy.orm import sessionmaker

from inkvalue.models.orm_models import KeyValueRecord

logger = logging.getLogger("inkvalue-db")

COSTS_KEY = "inkvalue_costs"
STUDIO_KEY = "inkvalue_studio"
CLIENTS_KEY = "inkvalue_clients"
PROJECTS_KEY = "inkvalue_projects"


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...


class InMemoryStore:
    def __init__(self, initial: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = copy.deepcopy(initial or {})

    def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class SqlKeyValueStore:
    def __init__(self, session_factory: Optional[sessionmaker] = None) -> None:
        if session_factory is None:
            from inkvalue.db import SessionLocal
            session_factory = SessionLocal
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[Any]:
        with self._session_factory() as session:
            record = session.get(KeyValueRecord, key)
            return record.value if record is not None else None

    def set(self, key: str, value: Any) -> None:
        with self._session_factory() as session:
            with session.begin():
                record = session.get(KeyValueRecord, key)
                if record is None:
                    session.add(KeyValueRecord(key=key, value=value))
                else:
                    record.value = value
        logger.debug("Stored key=%s", key)
