"""
Serialization helpers for decision graphs.

Provides lossless JSON/YAML round-trip via an intermediate dict representation:

    rootId: root
    nodes:
      - id: root
        kind: question
        prompt: ...
        options: [{label: ..., targetId: ...}]
      - id: A
        kind: leaf
        recommendation: ...

Loading is purely syntactic. A well-formed document describing a broken graph
(dangling target, cycle, leaf with options) loads fine and is rejected later
by decision_graph.validator.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Union

import yaml

from decision_graph import config
from decision_graph.model import Graph, Node, NodeKind, Option

logger = logging.getLogger(__name__)

FORMATS = ("json", "yaml")

_EXTENSIONS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}

_TEXT_KEYS = {
    NodeKind.QUESTION: "prompt",
    NodeKind.LEAF: "recommendation",
}


class ParseError(Exception):
    """Raised when a graph definition is syntactically malformed."""
    pass


def _require(d: Dict[str, Any], key: str, where: str) -> Any:
    if key not in d:
        raise ParseError(f"{where}: missing required field '{key}'")
    return d[key]


def _require_str(d: Dict[str, Any], key: str, where: str) -> str:
    value = _require(d, key, where)
    if not isinstance(value, str):
        raise ParseError(f"{where}: field '{key}' must be a string, got {type(value).__name__}")
    return value


def _require_mapping(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ParseError(f"{where}: expected a mapping, got {type(value).__name__}")
    return value


def option_to_dict(o: Option) -> Dict[str, Any]:
    return {"label": o.label, "targetId": o.target_id}


def option_from_dict(d: Any, where: str = "option") -> Option:
    d = _require_mapping(d, where)
    return Option(label=_require_str(d, "label", where), target_id=_require_str(d, "targetId", where))


def node_to_dict(n: Node) -> Dict[str, Any]:
    d: Dict[str, Any] = {"id": n.id, "kind": n.kind.value, _TEXT_KEYS[n.kind]: n.text}
    # Leaves only carry options when malformed; keep them so the validator can see them.
    if n.is_question or n.options:
        d["options"] = [option_to_dict(o) for o in n.options]
    return d


def node_from_dict(d: Any, where: str = "node") -> Node:
    d = _require_mapping(d, where)
    node_id = _require_str(d, "id", where)
    where = f"node '{node_id}'"

    raw_kind = _require_str(d, "kind", where)
    try:
        kind = NodeKind(raw_kind)
    except ValueError as exc:
        raise ParseError(f"{where}: unknown kind '{raw_kind}' (expected 'question' or 'leaf')") from exc

    text = _require_str(d, _TEXT_KEYS[kind], where)

    raw_options = d.get("options")
    if raw_options is None:
        raw_options = []
    if not isinstance(raw_options, list):
        raise ParseError(f"{where}: 'options' must be a list")
    options = [option_from_dict(o, f"{where} option {i}") for i, o in enumerate(raw_options)]

    return Node(id=node_id, kind=kind, text=text, options=tuple(options))


def graph_to_dict(g: Graph) -> Dict[str, Any]:
    d: Dict[str, Any] = {
        "rootId": g.root_id,
        "nodes": [node_to_dict(n) for n in g.nodes.values()],
    }
    if g.name:
        d["name"] = g.name
    return d


def graph_from_dict(d: Any) -> Graph:
    d = _require_mapping(d, "graph definition")
    root_id = _require_str(d, "rootId", "graph definition")
    name = d.get("name", "")
    if not isinstance(name, str):
        raise ParseError("graph definition: field 'name' must be a string")

    raw_nodes = _require(d, "nodes", "graph definition")
    if not isinstance(raw_nodes, list):
        raise ParseError("graph definition: 'nodes' must be a list")
    nodes: List[Node] = [node_from_dict(n, f"node {i}") for i, n in enumerate(raw_nodes)]

    try:
        return Graph.from_nodes(root_id, nodes, name=name)
    except ValueError as exc:
        raise ParseError(str(exc)) from exc


def _check_format(fmt: str) -> str:
    fmt = fmt.lower()
    if fmt not in FORMATS:
        raise ValueError(f"Unsupported format '{fmt}', expected one of {FORMATS}")
    return fmt


def dump(g: Graph, fmt: str = "json") -> bytes:
    """Serialize a graph to UTF-8 encoded JSON or YAML."""
    fmt = _check_format(fmt)
    d = graph_to_dict(g)
    if fmt == "json":
        text = json.dumps(d, indent=2, ensure_ascii=False)
    else:
        text = yaml.safe_dump(d, sort_keys=False, allow_unicode=True)
    return text.encode("utf-8")


def load(data: Union[bytes, str], fmt: str = "json") -> Graph:
    """
    Parse a JSON or YAML graph definition.

    Raises:
        ParseError: If the document is malformed or misses required fields
    """
    fmt = _check_format(fmt)
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Graph definition is not valid UTF-8: {exc}") from exc

    try:
        if fmt == "json":
            d = json.loads(data)
        else:
            d = yaml.safe_load(data)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ParseError(f"Malformed {fmt.upper()} graph definition: {exc}") from exc

    g = graph_from_dict(d)
    logger.debug("Loaded graph %r with %d node(s)", g.name, len(g.nodes))
    return g


def format_for_path(path: str) -> str:
    """Infer the serialization format from a file extension."""
    ext = os.path.splitext(path)[1].lower()
    return _EXTENSIONS.get(ext, config.DEFAULT_FORMAT)


def load_file(path: str) -> Graph:
    """
    Load a graph definition file, inferring the format from its extension.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ParseError: If parsing fails
    """
    with open(path, "rb") as f:
        data = f.read()
    return load(data, fmt=format_for_path(path))


def dump_file(g: Graph, path: str) -> None:
    with open(path, "wb") as f:
        f.write(dump(g, fmt=format_for_path(path)))


__all__ = [
    "ParseError",
    "graph_to_dict",
    "graph_from_dict",
    "dump",
    "load",
    "load_file",
    "dump_file",
    "format_for_path",
]
