import json
from typing import Optional

import requests

from assistant.inference.base import GenerationClient, GenerationResult
from assistant.ir.errors import UpstreamGenerationError
from assistant.logging import LLM, get_logger

logger = get_logger(__name__)


SYSTEM_PROMPT = (
    "You are Jarvis, an AWS cloud architecture assistant. "
    "Follow the output format requested in the user message exactly."
)


def _unpack_structured_reply(content: str) -> GenerationResult:
    """
    Some backends answer with {"architectureSuggestion": ..., "rationale": ...}.
    Anything else is taken as the suggestion text itself.
    """
    stripped = content.strip()
    if stripped.startswith("{") and "architectureSuggestion" in stripped:
        try:
            data = json.loads(stripped)
        except ValueError:
            data = None

        if isinstance(data, dict) and isinstance(data.get("architectureSuggestion"), str):
            rationale = data.get("rationale")
            return GenerationResult(
                architecture_suggestion=data["architectureSuggestion"],
                rationale=rationale if isinstance(rationale, str) else None,
            )

    return GenerationResult(architecture_suggestion=content)


class ChatCompletionsClient(GenerationClient):
    def __init__(
        self,
        base_url: str,
        model: str,
        temperature: float = 0.4,
        timeout: float = 60.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(self, problem_statement: str) -> GenerationResult:
        url = f"{self.base_url}/chat/completions"
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": problem_statement},
            ],
            "temperature": self.temperature,
        }

        logger.info("%s POST %s (model=%s, prompt=%d chars)", LLM, url, self.model, len(problem_statement))

        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            content = response.json()["choices"][0]["message"]["content"]
        except requests.Timeout as e:
            raise UpstreamGenerationError(
                f"Generation backend timed out after {self.timeout}s"
            ) from e
        except requests.RequestException as e:
            raise UpstreamGenerationError(f"Generation backend request failed: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise UpstreamGenerationError(f"Unexpected generation payload: {e}") from e

        if not isinstance(content, str) or not content.strip():
            raise UpstreamGenerationError("Generation backend returned empty text")

        return _unpack_structured_reply(content)
