"""
Graph Patcher - repairs a candidate graph and builds the updated record.

The candidate REPLACES the stored nodes/edges; no diff against the old
graph is attempted. The input Architecture is never modified: a new one is
returned and only the caller commits it to the store.
"""

import copy
import math
import random
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

from pydantic import ValidationError

from assistant.ir.architecture import Architecture, ArchitectureEdge, ArchitectureNode
from assistant.ir.errors import ArchitectureParseError
from assistant.logging import PATCHER, get_logger
from assistant.validation.graph_validator import validate_graph

logger = get_logger(__name__)


EDITOR_NAME = "Jarvis"

NODE_PALETTE = [
    "#42a5f5",  # Blue (Lambda)
    "#5c6bc0",  # Indigo (DynamoDB)
    "#ec407a",  # Pink (API Gateway)
    "#66bb6a",  # Green (S3)
    "#ffa726",  # Orange (SQS/SNS)
    "#8d6e63",  # Brown (EC2)
    "#5c6bc0",  # Indigo (RDS)
    "#7e57c2",  # Purple (CloudFront)
]

DEFAULT_TEXT_COLOR = "#ffffff"
DEFAULT_BORDER = "1px solid #000000"
DEFAULT_NODE_WIDTH = 180

ColorChooser = Callable[[List[str]], str]


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_finite_number(value: Any) -> bool:
    # bool is an int subclass, but true/false is not a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints past the float range cannot be placed on a canvas
        return False


def fallback_position(index: int) -> Dict[str, float]:
    return {
        "x": 100 + index * 200,
        "y": 100 + (index // 5) * 150,
    }


def default_style(choose_color: ColorChooser = random.choice) -> Dict[str, Any]:
    return {
        "background": choose_color(NODE_PALETTE),
        "color": DEFAULT_TEXT_COLOR,
        "border": DEFAULT_BORDER,
        "width": DEFAULT_NODE_WIDTH,
    }


def repair_node(raw: Dict[str, Any], index: int, choose_color: ColorChooser = random.choice) -> Dict[str, Any]:
    node = dict(raw)

    position = node.get("position")
    if (
        not isinstance(position, dict)
        or not _is_finite_number(position.get("x"))
        or not _is_finite_number(position.get("y"))
    ):
        node["position"] = fallback_position(index)

    if node.get("style") is None:
        node["style"] = default_style(choose_color)

    return node


def repair_nodes(raw_nodes: List[Any], choose_color: ColorChooser = random.choice) -> List[Any]:
    """Non-dict entries are passed through untouched and fail validation later."""
    return [
        repair_node(n, i, choose_color) if isinstance(n, dict) else n
        for i, n in enumerate(raw_nodes)
    ]


def repair_edges(raw_edges: List[Any]) -> List[Any]:
    repaired = []
    for e in raw_edges:
        if isinstance(e, dict) and not e.get("id") and e.get("source") and e.get("target"):
            e = {**e, "id": f"edge-{e['source']}-{e['target']}"}
        repaired.append(e)
    return repaired


def build_graph(
    candidate: Dict[str, Any],
    choose_color: ColorChooser = random.choice,
):
    """
    Repair and validate a candidate graph.
    Raises ArchitectureParseError when the result is not a valid graph.
    """
    raw = copy.deepcopy(candidate)
    raw_nodes = repair_nodes(raw.get("nodes") or [], choose_color)
    raw_edges = repair_edges(raw.get("edges") or [])

    try:
        nodes = [ArchitectureNode.model_validate(n) for n in raw_nodes]
        edges = [ArchitectureEdge.model_validate(e) for e in raw_edges]
    except ValidationError as e:
        raise ArchitectureParseError(f"Candidate graph failed validation: {e}") from e
    except (TypeError, ValueError, OverflowError) as e:
        raise ArchitectureParseError(f"Candidate graph could not be read: {e}") from e

    validation = validate_graph(nodes, edges)
    logger.info("%s %s", PATCHER, validation.get_summary())
    for issue in validation.issues:
        logger.warning("%s [%s] %s", PATCHER, issue.code, issue.message)

    if not validation.is_valid:
        raise ArchitectureParseError(
            "; ".join(i.message for i in validation.errors())
        )

    return nodes, edges


def patch(
    architecture: Architecture,
    candidate: Dict[str, Any],
    request: str,
    explanation: str,
    choose_color: ColorChooser = random.choice,
) -> Architecture:
    nodes, edges = build_graph(candidate, choose_color)

    metadata = {
        **architecture.metadata,
        "lastEditedBy": EDITOR_NAME,
        "lastEditedAt": utc_now_iso(),
        "lastEditRequest": request,
        "lastEditExplanation": explanation,
    }

    logger.info(
        "%s Nodes: %d -> %d, Edges: %d -> %d",
        PATCHER,
        len(architecture.nodes),
        len(nodes),
        len(architecture.edges),
        len(edges),
    )

    return architecture.model_copy(
        update={"nodes": nodes, "edges": edges, "metadata": metadata},
        deep=True,
    )
