from assistant.ir.architecture import (
    Architecture,
    ArchitectureEdge,
    ArchitectureNode,
    EdgeData,
    EdgeStyle,
    NodeData,
    NodeStyle,
    Position,
)

__all__ = [
    "Architecture",
    "ArchitectureEdge",
    "ArchitectureNode",
    "EdgeData",
    "EdgeStyle",
    "NodeData",
    "NodeStyle",
    "Position",
]
