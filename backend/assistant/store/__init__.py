from assistant.store.base import ArchitectureStore
from assistant.store.memory import InMemoryArchitectureStore

__all__ = ["ArchitectureStore", "InMemoryArchitectureStore"]
