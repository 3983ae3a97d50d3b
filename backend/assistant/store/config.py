from typing import Optional

from assistant.config import ARCHITECTURE_STORE
from assistant.logging import STORE, get_logger
from assistant.store.base import ArchitectureStore
from assistant.store.memory import InMemoryArchitectureStore

logger = get_logger(__name__)

# Global store instance
_store: Optional[ArchitectureStore] = None


def create_store(kind: str = ARCHITECTURE_STORE) -> ArchitectureStore:
    if kind == "sql":
        from assistant.db.session import SessionLocal
        from assistant.store.sql import SqlArchitectureStore

        return SqlArchitectureStore(SessionLocal)

    if kind != "memory":
        logger.warning("%s Unknown ARCHITECTURE_STORE=%r, using memory", STORE, kind)
    return InMemoryArchitectureStore()


def get_store() -> ArchitectureStore:
    global _store
    if _store is None:
        _store = create_store()
        logger.info("%s Using %s", STORE, type(_store).__name__)
    return _store
