import math

import pytest

from assistant.ir.errors import ArchitectureParseError
from assistant.pipeline.patcher import (
    DEFAULT_BORDER,
    DEFAULT_NODE_WIDTH,
    NODE_PALETTE,
    build_graph,
    fallback_position,
    patch,
    repair_node,
    repair_nodes,
)


def bare_node(node_id: str) -> dict:
    return {"id": node_id, "data": {"label": node_id.upper(), "service": "Lambda"}}


def first_color(palette):
    return palette[0]


def test_fallback_layout_grid():
    assert fallback_position(0) == {"x": 100, "y": 100}
    assert fallback_position(4) == {"x": 900, "y": 100}
    assert fallback_position(5) == {"x": 1100, "y": 250}
    assert fallback_position(11) == {"x": 2300, "y": 400}


@pytest.mark.parametrize(
    "position",
    [
        None,
        {},
        {"x": 5},
        {"x": "10", "y": 20},
        {"x": True, "y": 20},
        {"x": math.inf, "y": 0},
        {"x": 0, "y": math.nan},
        {"x": 10 ** 400, "y": 0},
    ],
)
def test_invalid_positions_are_replaced(position):
    node = bare_node("a")
    if position is not None:
        node["position"] = position

    repaired = repair_node(node, 3, first_color)

    assert repaired["position"] == fallback_position(3)


def test_valid_position_and_style_are_kept():
    node = {**bare_node("a"), "position": {"x": 1.5, "y": -20}, "style": {"background": "#000"}}

    repaired = repair_node(node, 0)

    assert repaired["position"] == {"x": 1.5, "y": -20}
    assert repaired["style"] == {"background": "#000"}


def test_missing_style_gets_palette_defaults():
    repaired = repair_node(bare_node("a"), 0)

    assert repaired["style"]["background"] in NODE_PALETTE
    assert repaired["style"]["color"] == "#ffffff"
    assert repaired["style"]["border"] == DEFAULT_BORDER
    assert repaired["style"]["width"] == DEFAULT_NODE_WIDTH


def test_repair_is_deterministic_apart_from_color():
    first = repair_node(bare_node("a"), 7)
    second = repair_node(bare_node("a"), 7)

    assert first["position"] == second["position"]
    assert set(first["style"]) == set(second["style"])
    assert {k: v for k, v in first["style"].items() if k != "background"} == {
        k: v for k, v in second["style"].items() if k != "background"
    }


def test_repair_does_not_mutate_input():
    node = bare_node("a")
    repair_nodes([node])
    assert "position" not in node


def test_build_graph_assigns_edge_ids_and_keeps_dangling_edges():
    nodes, edges = build_graph({
        "nodes": [bare_node("a")],
        "edges": [{"source": "a", "target": "missing"}],
    })

    assert edges[0].id == "edge-a-missing"
    assert edges[0].target == "missing"
    assert nodes[0].position.x == 100


def test_build_graph_rejects_duplicate_node_ids():
    with pytest.raises(ArchitectureParseError):
        build_graph({"nodes": [bare_node("a"), bare_node("a")], "edges": []})


@pytest.mark.parametrize(
    "candidate",
    [
        {"nodes": [{"data": {"label": "x", "service": "y"}}], "edges": []},
        {"nodes": [{"id": "a"}], "edges": []},
        {"nodes": ["not a node"], "edges": []},
        {"nodes": [], "edges": [{"id": "e"}]},
    ],
)
def test_build_graph_rejects_malformed_candidates(candidate):
    with pytest.raises(ArchitectureParseError):
        build_graph(candidate)


def test_patch_replaces_graph_and_records_edit(architecture):
    candidate = {
        "nodes": [bare_node("x"), bare_node("y")],
        "edges": [{"id": "e1", "source": "x", "target": "y", "data": {"protocol": "gRPC"}}],
    }

    updated = patch(architecture, candidate, request="swap it all", explanation="Swapped.", choose_color=first_color)

    assert [n.id for n in updated.nodes] == ["x", "y"]
    assert updated.nodes[1].position.x == 300
    assert updated.nodes[0].style.background == NODE_PALETTE[0]
    assert updated.edges[0].data.protocol == "gRPC"

    meta = updated.metadata
    assert meta["prompt"] == "Serverless order processing"
    assert meta["lastEditedBy"] == "Jarvis"
    assert meta["lastEditRequest"] == "swap it all"
    assert meta["lastEditExplanation"] == "Swapped."
    assert "T" in meta["lastEditedAt"]

    # the input record is untouched
    assert [n.id for n in architecture.nodes] == ["node-1", "node-2"]
    assert "lastEditedAt" not in architecture.metadata


def test_patch_failure_leaves_architecture_alone(architecture):
    with pytest.raises(ArchitectureParseError):
        patch(architecture, {"nodes": [{"id": "a"}], "edges": []}, "r", "e")

    assert len(architecture.nodes) == 2
