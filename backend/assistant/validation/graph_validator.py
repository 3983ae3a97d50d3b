"""
Graph Validator - checks an architecture graph before it is committed.

Catches issues like:
- Duplicate node ids (error, the graph is rejected)
- Edges pointing at missing nodes (warning, kept as-is)
- Duplicate edge ids
- Self loops
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from assistant.ir.architecture import ArchitectureEdge, ArchitectureNode


class ValidationSeverity(Enum):
    ERROR = "error"      # Graph must not be stored
    WARNING = "warning"  # Graph is stored but consumers must tolerate it
    INFO = "info"


@dataclass
class ValidationIssue:
    """A single issue found in a graph"""
    severity: ValidationSeverity
    code: str
    message: str
    node_id: Optional[str] = None
    edge_id: Optional[str] = None


@dataclass
class GraphValidationResult:
    is_valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.WARNING)

    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    def get_summary(self) -> str:
        status = "Valid" if self.is_valid else "Invalid"
        return f"{status} | Errors: {self.error_count}, Warnings: {self.warning_count}"


class GraphValidator:
    """
    Usage:
        result = GraphValidator().validate(nodes, edges)
        if not result.is_valid:
            ...
    """

    def validate(
        self,
        nodes: List[ArchitectureNode],
        edges: List[ArchitectureEdge],
    ) -> GraphValidationResult:
        issues: List[ValidationIssue] = []
        node_ids = {n.id for n in nodes}

        issues.extend(self._check_duplicate_node_ids(nodes))
        issues.extend(self._check_missing_edge_references(edges, node_ids))
        issues.extend(self._check_duplicate_edge_ids(edges))
        issues.extend(self._check_self_loops(edges))

        has_errors = any(i.severity == ValidationSeverity.ERROR for i in issues)
        return GraphValidationResult(
            is_valid=not has_errors,
            issues=issues,
            stats={"nodes": len(nodes), "edges": len(edges)},
        )

    def _check_duplicate_node_ids(self, nodes: List[ArchitectureNode]) -> List[ValidationIssue]:
        counts = Counter(n.id for n in nodes)
        return [
            ValidationIssue(
                severity=ValidationSeverity.ERROR,
                code="DUPLICATE_NODE_ID",
                message=f"Node id '{node_id}' is used by {count} nodes",
                node_id=node_id,
            )
            for node_id, count in counts.items()
            if count > 1
        ]

    def _check_missing_edge_references(self, edges, node_ids) -> List[ValidationIssue]:
        issues = []
        for edge in edges:
            if edge.source not in node_ids:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="MISSING_SOURCE_NODE",
                    message=f"Edge '{edge.id}' starts at unknown node '{edge.source}'",
                    edge_id=edge.id,
                ))
            if edge.target not in node_ids:
                issues.append(ValidationIssue(
                    severity=ValidationSeverity.WARNING,
                    code="MISSING_TARGET_NODE",
                    message=f"Edge '{edge.id}' ends at unknown node '{edge.target}'",
                    edge_id=edge.id,
                ))
        return issues

    def _check_duplicate_edge_ids(self, edges) -> List[ValidationIssue]:
        counts = Counter(e.id for e in edges)
        return [
            ValidationIssue(
                severity=ValidationSeverity.WARNING,
                code="DUPLICATE_EDGE_ID",
                message=f"Edge id '{edge_id}' is used by {count} edges",
                edge_id=edge_id,
            )
            for edge_id, count in counts.items()
            if count > 1
        ]

    def _check_self_loops(self, edges) -> List[ValidationIssue]:
        return [
            ValidationIssue(
                severity=ValidationSeverity.INFO,
                code="SELF_LOOP",
                message=f"Edge '{e.id}' connects '{e.source}' to itself",
                edge_id=e.id,
                node_id=e.source,
            )
            for e in edges
            if e.source == e.target
        ]


def validate_graph(nodes, edges) -> GraphValidationResult:
    return GraphValidator().validate(nodes, edges)
