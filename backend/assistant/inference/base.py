from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class GenerationResult:
    architecture_suggestion: str
    rationale: Optional[str] = None


class GenerationClient(ABC):
    @abstractmethod
    def generate(self, problem_statement: str) -> GenerationResult:
        """
        Send one prompt to the text-generation backend.
        Raises UpstreamGenerationError on any failure.
        """
        pass
