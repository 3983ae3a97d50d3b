from abc import ABC, abstractmethod
from typing import Optional

from assistant.ir.architecture import Architecture


class ArchitectureStore(ABC):
    """
    Keyed architecture storage. Ids are opaque strings.
    Last write wins; no transactions.
    """

    @abstractmethod
    def get(self, architecture_id: str) -> Optional[Architecture]:
        pass

    @abstractmethod
    def set(self, architecture_id: str, architecture: Architecture) -> None:
        pass
