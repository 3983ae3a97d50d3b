from typing import Optional

from assistant.config import LLM_BASE_URL, LLM_MODEL, LLM_TEMPERATURE, LLM_TIMEOUT
from assistant.inference.base import GenerationClient
from assistant.inference.chat_completions_client import ChatCompletionsClient

# Global client instance
_client: Optional[GenerationClient] = None


def get_generation_client() -> GenerationClient:
    global _client
    if _client is None:
        _client = ChatCompletionsClient(
            base_url=LLM_BASE_URL,
            model=LLM_MODEL,
            temperature=LLM_TEMPERATURE,
            timeout=LLM_TIMEOUT,
        )
    return _client
