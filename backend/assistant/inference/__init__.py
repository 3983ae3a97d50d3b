from assistant.inference.base import GenerationClient, GenerationResult

__all__ = ["GenerationClient", "GenerationResult"]
