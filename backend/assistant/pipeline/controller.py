"""
One assistant turn, end to end:

    Received -> Classified -> Prompted -> AwaitingModel -> (ModelOk | ModelFailed)
    ModelOk  -> (ParseOk | ParseFailed)
    ParseOk  -> Patched -> Responded        (architecture_updated=True)
    ParseFailed -> Responded                (clarification message)
    ModelFailed -> Responded                (apology message)

Every turn makes at most one generation call and ends in exactly one
TurnResult. Only missing fields and unknown ids raise.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional

from pydantic import ValidationError

from assistant.inference.base import GenerationClient, GenerationResult
from assistant.intent.classifier import Intent, IntentClassifier, KeywordIntentClassifier, Mode
from assistant.ir.architecture import Architecture, ArchitectureEdge, ArchitectureNode
from assistant.ir.errors import (
    ArchitectureNotFoundError,
    ArchitectureParseError,
    InvalidRequestError,
    UpstreamGenerationError,
)
from assistant.logging import ASSISTANT, get_logger
from assistant.pipeline import patcher, prompts
from assistant.pipeline.extractor import extract, extract_code, extract_graph
from assistant.pipeline.patcher import utc_now_iso
from assistant.store.base import ArchitectureStore

logger = get_logger(__name__)


CLARIFY_EDIT_MESSAGE = (
    "I understand what you're trying to do, but I couldn't quite work out how to "
    "update the architecture properly. Could you clarify what you want to change?"
)
EDIT_FAILED_MESSAGE = (
    "I ran into a problem while working on those changes. "
    "Maybe we could try a simpler approach?"
)
INFRA_CODE_FAILED_MESSAGE = (
    "I encountered an error while generating the CDK code. This might be due to the "
    "complexity of the architecture. Let me know if you'd like me to try a simplified "
    "approach or focus on a specific part of the implementation."
)
ANSWER_FAILED_MESSAGE = (
    "I'm having trouble reaching the architecture model right now. "
    "Could you try asking again in a moment?"
)
UNEXPECTED_FAULT_MESSAGE = (
    "Sorry about that - I hit a snag while processing your request. Can we try again?"
)


class TurnState(Enum):
    RECEIVED = "received"
    CLASSIFIED = "classified"
    PROMPTED = "prompted"
    AWAITING_MODEL = "awaiting_model"
    MODEL_OK = "model_ok"
    MODEL_FAILED = "model_failed"
    PARSE_OK = "parse_ok"
    PARSE_FAILED = "parse_failed"
    PATCHED = "patched"
    RESPONDED = "responded"


@dataclass
class TurnResult:
    response: str
    architecture_updated: bool
    mode: Mode


class _LockEntry:
    __slots__ = ("lock", "users")

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


class ArchitectureLocks:
    """
    At most one writer per architecture id.

    An entry lives only while some thread holds or waits on it, so ids that
    are never found (404s) leave nothing behind.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._entries: Dict[str, _LockEntry] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    @contextmanager
    def hold(self, architecture_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._entries.get(architecture_id)
            if entry is None:
                entry = self._entries[architecture_id] = _LockEntry()
            entry.users += 1

        try:
            with entry.lock:
                yield
        finally:
            with self._guard:
                entry.users -= 1
                if entry.users == 0:
                    del self._entries[architecture_id]


class AssistantController:
    def __init__(
        self,
        store: ArchitectureStore,
        client: GenerationClient,
        classifier: Optional[IntentClassifier] = None,
        locks: Optional[ArchitectureLocks] = None,
    ):
        self.store = store
        self.client = client
        self.classifier = classifier or KeywordIntentClassifier()
        self.locks = locks if locks is not None else ArchitectureLocks()

    def _enter(self, state: TurnState, architecture_id: str):
        logger.debug("%s [%s] -> %s", ASSISTANT, architecture_id, state.value)

    def load(self, architecture_id: str) -> Architecture:
        architecture = self.store.get(architecture_id)
        if architecture is None:
            raise ArchitectureNotFoundError(architecture_id)
        return architecture

    def run_turn(
        self,
        message: Optional[str],
        architecture_id: Optional[str],
        history: Optional[List[Dict[str, str]]] = None,
    ) -> TurnResult:
        if not message or not architecture_id:
            raise InvalidRequestError(
                "Invalid request: message and architectureId are required"
            )

        with self.locks.hold(architecture_id):
            architecture = self.load(architecture_id)
            self._enter(TurnState.RECEIVED, architecture_id)

            intent = self.classifier.classify(message)
            self._enter(TurnState.CLASSIFIED, architecture_id)
            logger.info("%s Message classified as %s", ASSISTANT, intent.mode.value)

            if intent.mode == Mode.INFRA_CODE:
                result = self._infra_code_turn(architecture_id, architecture, message, intent)
            elif intent.mode == Mode.EDIT:
                result = self._edit_turn(architecture_id, architecture, message, history)
            else:
                result = self._answer_turn(architecture_id, architecture, message, intent, history)

            self._enter(TurnState.RESPONDED, architecture_id)
            return result

    # ------------------------------------------------
    # Model call
    # ------------------------------------------------

    def _call_model(self, architecture_id: str, prompt: str) -> Optional[GenerationResult]:
        self._enter(TurnState.PROMPTED, architecture_id)
        self._enter(TurnState.AWAITING_MODEL, architecture_id)

        try:
            result = self.client.generate(prompt)
        except UpstreamGenerationError as e:
            logger.error("%s Generation failed: %s", ASSISTANT, e)
            self._enter(TurnState.MODEL_FAILED, architecture_id)
            return None
        except Exception:
            logger.exception("%s Generation client raised unexpectedly", ASSISTANT)
            self._enter(TurnState.MODEL_FAILED, architecture_id)
            return None

        if not (result.architecture_suggestion or "").strip() and not result.rationale:
            logger.error("%s Generation returned no usable text", ASSISTANT)
            self._enter(TurnState.MODEL_FAILED, architecture_id)
            return None

        self._enter(TurnState.MODEL_OK, architecture_id)
        return result

    # ------------------------------------------------
    # Modes
    # ------------------------------------------------

    def _infra_code_turn(
        self,
        architecture_id: str,
        architecture: Architecture,
        message: str,
        intent: Intent,
    ) -> TurnResult:
        prompt = prompts.build_infra_code_prompt(architecture, message, intent.preferred_language)
        result = self._call_model(architecture_id, prompt)
        if result is None:
            return TurnResult(INFRA_CODE_FAILED_MESSAGE, False, Mode.INFRA_CODE)

        code = extract_code(result, intent.preferred_language)

        updated = architecture.model_copy(
            update={
                "metadata": {
                    **architecture.metadata,
                    "cdkCode": code.text,
                    "cdkLanguage": code.language,
                    "cdkGeneratedAt": utc_now_iso(),
                }
            },
            deep=True,
        )
        self.store.set(architecture_id, updated)
        logger.info("%s Saved %s CDK code to architecture metadata", ASSISTANT, code.language)

        return TurnResult(code.text, False, Mode.INFRA_CODE)

    def _edit_turn(
        self,
        architecture_id: str,
        architecture: Architecture,
        message: str,
        history: Optional[List[Dict[str, str]]],
    ) -> TurnResult:
        prompt = prompts.build_edit_prompt(architecture, message, history)
        result = self._call_model(architecture_id, prompt)
        if result is None:
            return TurnResult(EDIT_FAILED_MESSAGE, False, Mode.EDIT)

        extraction = extract_graph(result)
        if not extraction.ok:
            self._enter(TurnState.PARSE_FAILED, architecture_id)
            return TurnResult(CLARIFY_EDIT_MESSAGE, False, Mode.EDIT)

        try:
            updated = patcher.patch(
                architecture,
                extraction.candidate,
                request=message,
                explanation=extraction.explanation,
            )
        except ArchitectureParseError as e:
            logger.warning("%s Candidate graph rejected: %s", ASSISTANT, e)
            self._enter(TurnState.PARSE_FAILED, architecture_id)
            return TurnResult(CLARIFY_EDIT_MESSAGE, False, Mode.EDIT)

        self._enter(TurnState.PARSE_OK, architecture_id)

        self.store.set(architecture_id, updated)
        self._enter(TurnState.PATCHED, architecture_id)

        return TurnResult(extraction.explanation, True, Mode.EDIT)

    def _answer_turn(
        self,
        architecture_id: str,
        architecture: Architecture,
        message: str,
        intent: Intent,
        history: Optional[List[Dict[str, str]]],
    ) -> TurnResult:
        if intent.mode == Mode.CODE_SNIPPET:
            prompt = prompts.build_code_prompt(architecture, message)
        else:
            prompt = prompts.build_info_prompt(architecture, message, history)

        result = self._call_model(architecture_id, prompt)
        if result is None:
            return TurnResult(ANSWER_FAILED_MESSAGE, False, intent.mode)

        prose = extract(intent.mode, result)
        return TurnResult(prose.text, False, intent.mode)

    # ------------------------------------------------
    # Direct edits (no model call)
    # ------------------------------------------------

    def replace_graph(
        self,
        architecture_id: Optional[str],
        nodes: Optional[List[Dict]],
        edges: Optional[List[Dict]],
    ) -> Architecture:
        """Store a graph edited by hand in the diagram editor."""
        if not architecture_id or nodes is None or edges is None:
            raise InvalidRequestError(
                "Invalid request: architectureId, nodes, and edges are required"
            )

        with self.locks.hold(architecture_id):
            architecture = self.load(architecture_id)

            try:
                updated = architecture.model_copy(
                    update={
                        "nodes": [ArchitectureNode.model_validate(n) for n in nodes],
                        "edges": [ArchitectureEdge.model_validate(e) for e in edges],
                        "metadata": {
                            **architecture.metadata,
                            "lastEdited": utc_now_iso(),
                            "userEdited": True,
                        },
                    },
                    deep=True,
                )
            except ValidationError as e:
                raise InvalidRequestError(f"Invalid request: malformed graph ({e.error_count()} errors)") from e

            self.store.set(architecture_id, updated)
            logger.info("%s Updated architecture with ID: %s", ASSISTANT, architecture_id)
            return updated

    def save_cdk(self, architecture_id: Optional[str], cdk_code: Optional[str]) -> Architecture:
        if not architecture_id or not isinstance(cdk_code, str):
            raise InvalidRequestError("Invalid request: architectureId and cdkCode are required")

        with self.locks.hold(architecture_id):
            architecture = self.load(architecture_id)
            updated = architecture.model_copy(
                update={
                    "metadata": {
                        **architecture.metadata,
                        "cdkCode": cdk_code,
                        "cdkLastEdited": utc_now_iso(),
                    }
                },
                deep=True,
            )
            self.store.set(architecture_id, updated)
            logger.info("%s Updated CDK code for architecture ID: %s", ASSISTANT, architecture_id)
            return updated
