"""
Graph Validator — structural gate run once per graph before traversal.

Checks a Graph for:
    - Missing root
    - Dangling option targets
    - Unreachable (orphan) nodes
    - Cycles among question nodes
    - Node shape (leaves with options, questions without any)

IMPORTANT: This module does NOT modify the graph.
It only produces a read-only ValidationResult. Every defect is collected,
so a single validate() call reports all of them, not just the first.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from decision_graph.model import Graph

logger = logging.getLogger(__name__)


class ValidationErrorKind(str, Enum):
    MISSING_ROOT = "MissingRoot"
    DANGLING_REFERENCE = "DanglingReference"
    UNREACHABLE_NODE = "UnreachableNode"
    CYCLE_DETECTED = "CycleDetected"
    LEAF_WITH_OPTIONS = "LeafWithOptions"
    QUESTION_WITHOUT_OPTIONS = "QuestionWithoutOptions"


@dataclass(frozen=True)
class ValidationError:
    """
    A single structural defect.

    node_id is the offending node. For edge defects (dangling references and
    cycle edges) target_id is the edge's target.
    """
    kind: ValidationErrorKind
    node_id: str
    target_id: Optional[str] = None
    message: str = ""

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validate(). Valid iff there are no errors."""
    errors: Tuple[ValidationError, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def kinds(self) -> Set[ValidationErrorKind]:
        return {e.kind for e in self.errors}

    def errors_of(self, kind: ValidationErrorKind) -> List[ValidationError]:
        return [e for e in self.errors if e.kind == kind]


class InvalidGraph(Exception):
    """Raised when a graph fails validation. Carries the full result."""

    def __init__(self, result: ValidationResult):
        self.result = result
        lines = "\n".join(f"  - {e}" for e in result.errors)
        super().__init__(f"Graph failed validation with {len(result.errors)} error(s):\n{lines}")


def _find_cycles_dfs(adjacency: Dict[str, List[str]], start: str, visited: Set[str],
                     found: List[Tuple[str, str, List[str]]]) -> None:
    """DFS collecting every back edge reachable from start as (source, target, cycle)."""
    visited.add(start)
    path = [start]
    on_stack = {start}
    frames = [iter(adjacency.get(start, []))]

    while frames:
        neighbor = next(frames[-1], None)
        if neighbor is None:
            frames.pop()
            on_stack.discard(path.pop())
            continue
        if neighbor in on_stack:
            cycle_start_idx = path.index(neighbor)
            found.append((path[-1], neighbor, path[cycle_start_idx:] + [neighbor]))
        elif neighbor not in visited:
            visited.add(neighbor)
            path.append(neighbor)
            on_stack.add(neighbor)
            frames.append(iter(adjacency.get(neighbor, [])))


def _reachable_from(graph: Graph, root_id: str) -> Set[str]:
    reachable: Set[str] = set()
    stack = [root_id]
    while stack:
        node_id = stack.pop()
        if node_id in reachable:
            continue
        reachable.add(node_id)
        node = graph.nodes[node_id]
        for option in node.options:
            if option.target_id in graph.nodes and option.target_id not in reachable:
                stack.append(option.target_id)
    return reachable


def validate(graph: Graph) -> ValidationResult:
    """
    Perform a full structural check of a Graph.

    Checks for:
    - Root presence
    - Node shape (leaf/question option counts)
    - Dangling option targets
    - Reachability from the root
    - Cycles among question nodes

    Returns a ValidationResult listing every defect found.
    """
    errors: List[ValidationError] = []
    logger.debug("Validating graph %r: %d node(s), root '%s'",
                 graph.name, len(graph.nodes), graph.root_id)

    # =========================================================================
    # 1. ROOT
    # =========================================================================

    root_present = graph.root_id in graph.nodes
    if not root_present:
        errors.append(ValidationError(
            kind=ValidationErrorKind.MISSING_ROOT,
            node_id=graph.root_id,
            message=f"Root node '{graph.root_id}' is not defined",
        ))

    # =========================================================================
    # 2. SHAPE AND DANGLING REFERENCES
    # =========================================================================

    for node in graph.nodes.values():
        if node.is_leaf and node.options:
            errors.append(ValidationError(
                kind=ValidationErrorKind.LEAF_WITH_OPTIONS,
                node_id=node.id,
                message=f"Leaf '{node.id}' has {len(node.options)} option(s); leaves must have none",
            ))
        if node.is_question and not node.options:
            errors.append(ValidationError(
                kind=ValidationErrorKind.QUESTION_WITHOUT_OPTIONS,
                node_id=node.id,
                message=f"Question '{node.id}' has no options",
            ))
        for index, option in enumerate(node.options):
            if option.target_id not in graph.nodes:
                errors.append(ValidationError(
                    kind=ValidationErrorKind.DANGLING_REFERENCE,
                    node_id=node.id,
                    target_id=option.target_id,
                    message=(
                        f"Option {index} ('{option.label}') of '{node.id}' "
                        f"points to unknown node '{option.target_id}'"
                    ),
                ))

    # =========================================================================
    # 3. REACHABILITY
    # =========================================================================

    # Without a root, reachability is undefined; MissingRoot already covers it.
    if root_present:
        reachable = _reachable_from(graph, graph.root_id)
        for node_id in graph.nodes:
            if node_id not in reachable:
                errors.append(ValidationError(
                    kind=ValidationErrorKind.UNREACHABLE_NODE,
                    node_id=node_id,
                    message=f"Node '{node_id}' is not reachable from root '{graph.root_id}'",
                ))

    # =========================================================================
    # 4. CYCLES AMONG QUESTIONS
    # =========================================================================

    adjacency: Dict[str, List[str]] = {
        node.id: [
            # Parallel options to one target are a single edge
            target_id for target_id in dict.fromkeys(o.target_id for o in node.options)
            if target_id in graph.nodes and graph.nodes[target_id].is_question
        ]
        for node in graph.nodes.values()
        if node.is_question
    }
    visited: Set[str] = set()
    back_edges: List[Tuple[str, str, List[str]]] = []
    for node_id in adjacency:
        if node_id not in visited:
            _find_cycles_dfs(adjacency, node_id, visited, back_edges)

    for source, target, cycle in back_edges:
        errors.append(ValidationError(
            kind=ValidationErrorKind.CYCLE_DETECTED,
            node_id=source,
            target_id=target,
            message=f"Cycle detected: {' -> '.join(cycle)}",
        ))

    # The result is a set of defects; keep first occurrence order
    errors = list(dict.fromkeys(errors))
    for error in errors:
        logger.info("%s", error)

    return ValidationResult(errors=tuple(errors))


def ensure_valid(graph: Graph) -> Graph:
    """
    Validate a graph and return it unchanged.

    Raises:
        InvalidGraph: If any structural defect is found
    """
    result = validate(graph)
    if not result.is_valid:
        raise InvalidGraph(result)
    return graph


__all__ = [
    "ValidationErrorKind",
    "ValidationError",
    "ValidationResult",
    "InvalidGraph",
    "validate",
    "ensure_valid",
]
