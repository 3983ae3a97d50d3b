"""
Response Extractor - turns a generation backend reply into a mode-specific result.

Infra code  -> CodeExtraction (full reply text + chosen language)
Edit        -> GraphExtraction (candidate {nodes, edges} + explanation)
Snippet/Info -> ProseExtraction

Nothing in here raises on bad model output. A reply that cannot be read as
a graph comes back as a GraphExtraction with candidate=None and an error.
"""

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from assistant.inference.base import GenerationResult
from assistant.intent.classifier import Mode
from assistant.logging import EXTRACTOR, get_logger

logger = get_logger(__name__)


DEFAULT_EXPLANATION = "Here are the changes to the architecture based on your request."

CODE_BLOCK_RE = re.compile(r"```(?:python|typescript)?([\s\S]*?)```")
ARCHITECTURE_TAG_RE = re.compile(r"<architecture>([\s\S]*?)</architecture>")
EXPLANATION_TAG_RE = re.compile(r"<explanation>([\s\S]*?)</explanation>")

# Sanitizer steps, applied in this order
FENCE_RE = re.compile(r"```(json)?|```")
LINE_COMMENT_RE = re.compile(r"//.*$", re.MULTILINE)
BLOCK_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")


@dataclass
class CodeExtraction:
    text: str
    language: str
    has_code_block: bool


@dataclass
class GraphExtraction:
    candidate: Optional[Dict[str, Any]]
    explanation: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.candidate is not None


@dataclass
class ProseExtraction:
    text: str


ExtractedResult = Union[CodeExtraction, GraphExtraction, ProseExtraction]


# ============================================================
# LENIENT JSON CLEANUP (LLM TRUST BOUNDARY)
# ============================================================

def clean_architecture_json(text: str) -> str:
    """
    Make loose model JSON parseable.

    Strips ``` fences, turns every single quote into a double quote, drops
    // line comments and /* */ block comments, trims.

    Known casualties: apostrophes inside string values ("it's") and
    anything after // inside a string ("https://...") are mangled, which
    then fails to parse.
    """
    text = FENCE_RE.sub("", text)
    text = text.replace("'", '"')
    text = LINE_COMMENT_RE.sub("", text)
    text = BLOCK_COMMENT_RE.sub("", text)
    return text.strip()


def parse_candidate_graph(raw_json: str) -> Dict[str, Any]:
    """
    Parse the inside of an <architecture> block.
    Raises ValueError when it is not an object with list-valued nodes/edges.
    """
    data = json.loads(clean_architecture_json(raw_json))

    if not isinstance(data, dict):
        raise ValueError("architecture block is not a JSON object")

    nodes = data.get("nodes")
    edges = data.get("edges")
    if not isinstance(nodes, list) or not isinstance(edges, list):
        raise ValueError("architecture block must contain 'nodes' and 'edges' arrays")

    return data


# ============================================================
# PER-MODE EXTRACTION
# ============================================================

def extract_code(result: GenerationResult, language: str) -> CodeExtraction:
    raw = result.architecture_suggestion
    if CODE_BLOCK_RE.search(raw):
        logger.info("%s Found code block in model reply", EXTRACTOR)
        # Surrounding prose stays: it carries the deployment instructions.
        return CodeExtraction(text=raw, language=language, has_code_block=True)

    logger.info("%s No code block found, using full reply", EXTRACTOR)
    return CodeExtraction(
        text=result.rationale or raw,
        language=language,
        has_code_block=False,
    )


def extract_explanation(result: GenerationResult) -> str:
    match = EXPLANATION_TAG_RE.search(result.architecture_suggestion)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return result.rationale or DEFAULT_EXPLANATION


def extract_graph(result: GenerationResult) -> GraphExtraction:
    explanation = extract_explanation(result)

    match = ARCHITECTURE_TAG_RE.search(result.architecture_suggestion)
    if not match:
        logger.warning("%s No <architecture> block in model reply", EXTRACTOR)
        return GraphExtraction(
            candidate=None,
            explanation=explanation,
            error="missing <architecture> block",
        )

    try:
        candidate = parse_candidate_graph(match.group(1))
    except ValueError as e:
        # json.JSONDecodeError is a ValueError
        logger.warning("%s Could not parse <architecture> block: %s", EXTRACTOR, e)
        return GraphExtraction(candidate=None, explanation=explanation, error=str(e))

    logger.info(
        "%s Candidate graph: %d nodes, %d edges",
        EXTRACTOR,
        len(candidate["nodes"]),
        len(candidate["edges"]),
    )
    return GraphExtraction(candidate=candidate, explanation=explanation)


def strip_leaked_tags(text: str) -> str:
    text = EXPLANATION_TAG_RE.sub(r"\1", text).strip()
    text = ARCHITECTURE_TAG_RE.sub(r"\1", text).strip()
    return text


def extract(mode: Mode, result: GenerationResult, language: str = "typescript") -> ExtractedResult:
    if mode == Mode.INFRA_CODE:
        return extract_code(result, language)

    if mode == Mode.EDIT:
        return extract_graph(result)

    text = result.rationale or result.architecture_suggestion
    if mode == Mode.INFO:
        text = strip_leaked_tags(text)
    return ProseExtraction(text=text)
