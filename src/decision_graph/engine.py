"""
Traversal Engine — walks one user's session over a validated decision graph.

A Session is an immutable value: choose(), back() and reset() return a new
Session and leave the one they were given untouched, so earlier snapshots stay
valid for replay or undo. A failed operation raises and changes nothing.

The engine holds no mutable state of its own. It only reads the Graph and the
Session passed to it, so one validated Graph can back any number of sessions.

Typical use:

    engine = TraversalEngine(graph)        # validates once, raises InvalidGraph
    session = engine.start()
    session = engine.choose(session, 1)
    view = engine.current_state(session)
    if view.is_terminal:
        print(view.node.recommendation)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Tuple

from decision_graph.model import Graph, Node
from decision_graph.validator import ensure_valid

logger = logging.getLogger(__name__)


class TraversalError(Exception):
    """Base class for failures of a single traversal call."""
    pass


class InvalidTransition(TraversalError):
    """Raised when choosing an option from a terminal (leaf) node."""
    pass


class OptionOutOfRange(TraversalError):
    """Raised when an option index is outside the current node's options."""
    pass


class AtRoot(TraversalError):
    """Raised when going back from a session with no history."""
    pass


@dataclass(frozen=True)
class Session:
    """
    One user's traversal state.

    Properties:
        graph:
            The validated graph being walked (not part of equality or repr)

        path:
            Node IDs visited so far, root first, current last
    """

    graph: Graph = field(compare=False, repr=False)
    path: Tuple[str, ...]

    def __post_init__(self):
        object.__setattr__(self, "path", tuple(self.path))
        if not self.path:
            raise ValueError("Session path must contain at least the root")

    @property
    def current_id(self) -> str:
        return self.path[-1]


@dataclass(frozen=True)
class StateView:
    """Read-only snapshot of a session for renderers."""
    node: Node
    is_terminal: bool
    can_go_back: bool


def _current_node(session: Session) -> Node:
    node = session.graph.node_by_id(session.current_id)
    if node is None:
        raise ValueError(f"Session is positioned on unknown node '{session.current_id}'")
    return node


def start(graph: Graph) -> Session:
    """
    Validate a graph and open a session at its root.

    Raises:
        InvalidGraph: If the graph fails validation
    """
    return TraversalEngine(graph).start()


def current_state(session: Session) -> StateView:
    node = _current_node(session)
    return StateView(node=node, is_terminal=node.is_leaf, can_go_back=len(session.path) > 1)


def choose(session: Session, option_index: int) -> Session:
    """
    Follow one option of the current question.

    Args:
        session: Session to advance (left unchanged)
        option_index: Zero-based index into the current node's options

    Returns:
        A new Session positioned on the option's target

    Raises:
        InvalidTransition: If the current node is a leaf
        OptionOutOfRange: If option_index is not in 0 <= i < len(options)
    """
    node = _current_node(session)
    if node.is_leaf:
        raise InvalidTransition(f"Node '{node.id}' is terminal; there is nothing to choose")
    if not 0 <= option_index < len(node.options):
        raise OptionOutOfRange(
            f"Option {option_index} is out of range for '{node.id}' "
            f"({len(node.options)} option(s))"
        )
    target_id = node.options[option_index].target_id
    logger.debug("choose %s[%d] -> %s", node.id, option_index, target_id)
    return Session(graph=session.graph, path=session.path + (target_id,))


def back(session: Session) -> Session:
    """
    Undo the last choice.

    Raises:
        AtRoot: If the session is still at the root
    """
    if len(session.path) <= 1:
        raise AtRoot(f"Already at root '{session.current_id}'")
    logger.debug("back %s -> %s", session.path[-1], session.path[-2])
    return Session(graph=session.graph, path=session.path[:-1])


def reset(session: Session) -> Session:
    """Return to the root, discarding path history."""
    return Session(graph=session.graph, path=(session.graph.root_id,))


class TraversalEngine:
    """
    Validated entry point over one graph.

    Construction runs the validator once; every session started here is
    guaranteed to walk a structurally sound graph.
    """

    def __init__(self, graph: Graph):
        self.graph = ensure_valid(graph)

    def start(self) -> Session:
        return Session(graph=self.graph, path=(self.graph.root_id,))

    def _own(self, session: Session) -> Session:
        # Structurally equal graphs count as the same graph
        if session.graph is not self.graph and session.graph != self.graph:
            raise ValueError("Session was not started on this engine's graph")
        return session

    def current_state(self, session: Session) -> StateView:
        return current_state(self._own(session))

    def choose(self, session: Session, option_index: int) -> Session:
        return choose(self._own(session), option_index)

    def back(self, session: Session) -> Session:
        return back(self._own(session))

    def reset(self, session: Session) -> Session:
        return reset(self._own(session))

    def walk(self, choices: Iterable[int]) -> Session:
        """Start a session and replay a sequence of option indices."""
        session = self.start()
        for index in choices:
            session = choose(session, index)
        return session


__all__ = [
    "TraversalError",
    "InvalidTransition",
    "OptionOutOfRange",
    "AtRoot",
    "Session",
    "StateView",
    "TraversalEngine",
    "start",
    "current_state",
    "choose",
    "back",
    "reset",
]
