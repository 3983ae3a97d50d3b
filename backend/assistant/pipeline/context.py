"""
Renders a stored architecture as plain text for the generation backend.

The output has no size cap: very large graphs produce very large prompts.
"""

import json
from typing import Optional

from assistant.ir.architecture import Architecture, ArchitectureEdge, ArchitectureNode

UNKNOWN = "(unknown)"


def _or(value: Optional[str], fallback: str) -> str:
    return value if value else fallback


def original_prompt(architecture: Architecture) -> str:
    return _or(architecture.metadata.get("prompt"), "Not specified")


def node_label(node: Optional[ArchitectureNode]) -> str:
    return node.data.label if node else UNKNOWN


def node_service(node: Optional[ArchitectureNode]) -> str:
    return node.data.service if node else UNKNOWN


def edge_protocol(edge: ArchitectureEdge) -> Optional[str]:
    return edge.data.protocol if edge.data else None


def edge_data_flow(edge: ArchitectureEdge) -> Optional[str]:
    return edge.data.data_flow if edge.data else None


def describe_node(node: ArchitectureNode) -> str:
    data = node.data
    return (
        f"Service: {data.service}\n"
        f"Name: {data.label}\n"
        f"Description: {_or(data.description, 'N/A')}\n"
        f"Estimated Cost: {_or(data.est_cost, 'N/A')}\n"
        f"Fault Tolerance: {_or(data.fault_tolerance, 'N/A')}\n"
    )


def describe_edge(architecture: Architecture, edge: ArchitectureEdge) -> str:
    source = architecture.node_by_id(edge.source)
    target = architecture.node_by_id(edge.target)
    return (
        f"Connection from {node_label(source)} ({node_service(source)}) "
        f"to {node_label(target)} ({node_service(target)})\n"
        f"  Data flow: {_or(edge_data_flow(edge), 'Not specified')}\n"
        f"  Protocol: {_or(edge_protocol(edge), 'Not specified')}"
    )


def build_context(architecture: Architecture) -> str:
    payload = architecture.to_payload()
    nodes_json = json.dumps(payload.get("nodes", []))
    edges_json = json.dumps(payload.get("edges", []))

    service_details = "\n".join(describe_node(n) for n in architecture.nodes)
    connections = "\n\n".join(describe_edge(architecture, e) for e in architecture.edges)

    return f"""
Current Architecture Overview:
- Contains {len(architecture.nodes)} services
- Has {len(architecture.edges)} connections between services
- Original requirement: {original_prompt(architecture)}

Services Details:
{service_details}

Service Connections:
{connections}

Architecture JSON for reference:
Nodes: {nodes_json}
Edges: {edges_json}
"""
