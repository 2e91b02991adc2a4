"""
Core Decision Graph Objects

Defines the fundamental data structures of the decision graph:
    - Options (labelled edges between nodes)
    - Nodes (questions and leaf recommendations)
    - Graphs (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about rendering, pages or navigation markup
        - Are immutable once constructed
        - Are fully serializable
        - Represent structure, not behavior

    Structural soundness (dangling links, orphans, cycles) is NOT assumed here.
    It is checked by decision_graph.validator.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple


class NodeKind(str, Enum):
    """Kind of a node in the decision graph."""
    QUESTION = "question"
    LEAF = "leaf"


@dataclass(frozen=True)
class Option:
    """
    A directed edge from a Question node to another node.

    Properties:
        label:
            Display text for the choice (e.g. "Yes", "I prefer fruit")

        target_id:
            ID of the node reached by selecting this option
    """

    label: str
    target_id: str


@dataclass(frozen=True)
class Node:
    """
    Represents a single vertex of the decision graph.

    Properties:
        id:
            Unique identifier (must be stable across edits)
            Examples: "root", "likes-chocolate", "vanilla"

        kind:
            NodeKind.QUESTION branches further,
            NodeKind.LEAF terminates with a recommendation

        text:
            The prompt of a Question or the recommendation of a Leaf

        options:
            Ordered choices leaving this node. Empty on a well-formed Leaf.
            Lists are frozen to tuples on construction.
    """

    id: str
    kind: NodeKind
    text: str
    options: Tuple[Option, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "kind", NodeKind(self.kind))
        object.__setattr__(self, "options", tuple(self.options))

    @classmethod
    def question(cls, node_id: str, prompt: str, options: Iterable[Option]) -> "Node":
        return cls(id=node_id, kind=NodeKind.QUESTION, text=prompt, options=tuple(options))

    @classmethod
    def leaf(cls, node_id: str, recommendation: str) -> "Node":
        return cls(id=node_id, kind=NodeKind.LEAF, text=recommendation)

    @property
    def is_leaf(self) -> bool:
        return self.kind is NodeKind.LEAF

    @property
    def is_question(self) -> bool:
        return self.kind is NodeKind.QUESTION

    @property
    def prompt(self) -> Optional[str]:
        """Question text, or None for a Leaf."""
        return self.text if self.is_question else None

    @property
    def recommendation(self) -> Optional[str]:
        """Recommendation text, or None for a Question."""
        return self.text if self.is_leaf else None


@dataclass(frozen=True)
class Graph:
    """
    Root container for an entire decision graph.

    This is THE primary artifact. Every traversal session, diagram and
    persisted definition is derived from this object alone.

    ARCHITECTURAL PRINCIPLE:
        Graph is the single source of truth for links between nodes.
        It is immutable: edits build a new Graph.
        Equality is structural (root, name and nodes; node order irrelevant).

    Properties:
        root_id:
            ID of the entry node

        nodes:
            Read-only mapping from node ID to Node

        name:
            Optional human-readable title

    INVARIANTS (checked by the validator, never assumed):
        - root_id exists in nodes
        - Every option target exists in nodes
        - Every node is reachable from the root
        - Leaves have no options, questions have at least one
        - Questions do not form a cycle
    """

    root_id: str
    nodes: Mapping[str, Node] = field(default_factory=dict)
    name: str = ""

    def __post_init__(self):
        for key, node in self.nodes.items():
            if key != node.id:
                raise ValueError(f"Node stored under '{key}' has id '{node.id}'")
        object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))

    @classmethod
    def from_nodes(cls, root_id: str, nodes: Iterable[Node], name: str = "") -> "Graph":
        """
        Build a graph from a sequence of nodes, keeping definition order.

        Raises:
            ValueError: If two nodes share an id
        """
        by_id = {}
        for node in nodes:
            if node.id in by_id:
                raise ValueError(f"Duplicate node id: '{node.id}'")
            by_id[node.id] = node
        return cls(root_id=root_id, nodes=by_id, name=name)

    def node_by_id(self, node_id: str) -> Optional[Node]:
        """
        Retrieve a node by ID.

        Args:
            node_id: Node identifier

        Returns:
            Node object or None if not found
        """
        return self.nodes.get(node_id)

    def root(self) -> Optional[Node]:
        """Return the entry node, or None if root_id is not defined."""
        return self.nodes.get(self.root_id)

    def question_ids(self) -> List[str]:
        return [n.id for n in self.nodes.values() if n.is_question]

    def leaf_ids(self) -> List[str]:
        return [n.id for n in self.nodes.values() if n.is_leaf]
