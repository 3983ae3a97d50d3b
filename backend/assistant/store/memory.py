import threading
from typing import Dict, Optional

from assistant.ir.architecture import Architecture
from assistant.store.base import ArchitectureStore


class InMemoryArchitectureStore(ArchitectureStore):
    """
    Process-lifetime store. Records are copied on the way in and out so a
    caller holding an Architecture cannot change the stored one without set().
    """

    def __init__(self):
        self._records: Dict[str, Architecture] = {}
        self._lock = threading.Lock()

    def get(self, architecture_id: str) -> Optional[Architecture]:
        with self._lock:
            record = self._records.get(architecture_id)
        return record.model_copy(deep=True) if record is not None else None

    def set(self, architecture_id: str, architecture: Architecture) -> None:
        copy = architecture.model_copy(deep=True)
        with self._lock:
            self._records[architecture_id] = copy

    def __len__(self) -> int:
        return len(self._records)
