import json
from typing import Optional

from sqlalchemy.orm import sessionmaker

from assistant.db.models import ArchitectureRecord
from assistant.ir.architecture import Architecture
from assistant.logging import STORE, get_logger
from assistant.store.base import ArchitectureStore

logger = get_logger(__name__)


class SqlArchitectureStore(ArchitectureStore):
    """Stores each architecture as one JSON payload row."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def get(self, architecture_id: str) -> Optional[Architecture]:
        with self.session_factory() as session:
            record = session.get(ArchitectureRecord, architecture_id)
            if record is None:
                return None
            payload = record.payload

        return Architecture.model_validate(json.loads(payload))

    def set(self, architecture_id: str, architecture: Architecture) -> None:
        payload = json.dumps(architecture.to_payload())

        with self.session_factory() as session:
            record = session.get(ArchitectureRecord, architecture_id)
            if record is None:
                session.add(ArchitectureRecord(id=architecture_id, payload=payload))
            else:
                record.payload = payload
            session.commit()

        logger.debug("%s Saved architecture %s", STORE, architecture_id)
