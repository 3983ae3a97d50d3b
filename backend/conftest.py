"""Shared fixtures: a small stored architecture and a scripted generation client."""

from typing import List, Optional

import pytest

from assistant.inference.base import GenerationClient, GenerationResult
from assistant.ir.architecture import Architecture
from assistant.ir.errors import UpstreamGenerationError
from assistant.pipeline.controller import AssistantController
from assistant.store.memory import InMemoryArchitectureStore


ARCH_ID = "abc123"


class FakeGenerationClient(GenerationClient):
    """Returns queued replies in order and records every prompt."""

    def __init__(self, replies: Optional[List] = None):
        self.replies = list(replies or [])
        self.prompts: List[str] = []

    def queue(self, suggestion: str, rationale: Optional[str] = None):
        self.replies.append(GenerationResult(suggestion, rationale))

    def fail_next(self, message: str = "backend down"):
        self.replies.append(UpstreamGenerationError(message))

    def generate(self, problem_statement: str) -> GenerationResult:
        self.prompts.append(problem_statement)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def make_architecture() -> Architecture:
    return Architecture.model_validate({
        "nodes": [
            {
                "id": "node-1",
                "type": "default",
                "position": {"x": 100, "y": 100},
                "data": {
                    "label": "Orders API",
                    "service": "API Gateway",
                    "description": "Public REST entry point",
                    "estCost": "$10/month",
                    "faultTolerance": "High",
                },
                "style": {"background": "#ec407a", "color": "#ffffff", "border": "1px solid #000000", "width": 180},
            },
            {
                "id": "node-2",
                "position": {"x": 300, "y": 100},
                "data": {"label": "Orders Table", "service": "DynamoDB"},
            },
        ],
        "edges": [
            {
                "id": "edge-node-1-node-2",
                "source": "node-1",
                "target": "node-2",
                "animated": True,
                "data": {"dataFlow": "Order writes", "protocol": "HTTPS"},
            },
        ],
        "metadata": {
            "prompt": "Serverless order processing",
            "rationale": "Security: IAM roles scope every function. Cost is pay per request.",
        },
    })


@pytest.fixture
def architecture() -> Architecture:
    return make_architecture()


@pytest.fixture
def store(architecture) -> InMemoryArchitectureStore:
    store = InMemoryArchitectureStore()
    store.set(ARCH_ID, architecture)
    return store


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def controller(store, fake_client) -> AssistantController:
    return AssistantController(store=store, client=fake_client)
