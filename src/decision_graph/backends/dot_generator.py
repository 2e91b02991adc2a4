"""
Graphviz DOT diagram generator for decision graphs.

Converts a Graph object into Graphviz DOT format for visualization, so authors
can eyeball the branching before publishing it.

Supports two modes:
    - SIMPLE: Node flow only (no option labels)
    - DETAILED: Option labels on every edge
"""

from enum import Enum

from decision_graph.model import Graph


class DotMode(Enum):
    """Visualization modes for DOT output."""
    SIMPLE = "simple"      # Just node flow
    DETAILED = "detailed"  # Include option labels


def _escape_dot_string(s: str) -> str:
    """Escape special characters for DOT labels."""
    if not s:
        return '""'
    # Escape backslashes first so the newline escapes survive
    s = s.replace('\\', '\\\\')
    s = s.replace('"', '\\"')
    s = s.replace('\n', '\\n')
    return f'"{s}"'


def _escape_dot_id(identifier: str) -> str:
    """Quote an identifier unless it is a plain DOT ID."""
    if identifier and not identifier[0].isdigit() and identifier.replace('_', '').isalnum() \
            and identifier.isascii():
        return identifier
    return _escape_dot_string(identifier)


def generate_dot(graph: Graph, mode: DotMode = DotMode.SIMPLE) -> str:
    """
    Generate Graphviz DOT format for a graph.

    Args:
        graph: Graph object to visualize
        mode: Visualization mode (SIMPLE, DETAILED)

    Returns:
        String containing DOT graph definition
    """
    lines = []

    # Header
    lines.append("digraph decision_graph {")
    lines.append("  rankdir=TB;")
    lines.append("  node [shape=box, style=filled, fillcolor=lightblue];")
    if graph.name:
        lines.append(f"  label={_escape_dot_string(graph.name)};")

    # =========================================================================
    # NODES
    # =========================================================================

    for node in graph.nodes.values():
        node_id = _escape_dot_id(node.id)
        label = node.text or node.id

        attrs = [f"label={_escape_dot_string(label)}"]
        if node.is_leaf:
            attrs.append("shape=ellipse")
        if node.id == graph.root_id:
            attrs.append("fillcolor=lightgreen")
            attrs.append("penwidth=2")
        elif node.is_leaf:
            attrs.append("fillcolor=lightyellow")

        lines.append(f"  {node_id} [{', '.join(attrs)}];")

    # =========================================================================
    # EDGES (OPTIONS)
    # =========================================================================

    for node in graph.nodes.values():
        from_id = _escape_dot_id(node.id)
        for option in node.options:
            to_id = _escape_dot_id(option.target_id)
            edge_attr = ""
            if mode == DotMode.DETAILED and option.label:
                label = option.label
                # Shorten for readability
                if len(label) > 40:
                    label = label[:37] + "..."
                edge_attr = f" [label={_escape_dot_string(label)}]"
            lines.append(f"  {from_id} -> {to_id}{edge_attr};")

    # Footer
    lines.append("}")

    return "\n".join(lines)


def save_dot_file(graph: Graph, filename: str, mode: DotMode = DotMode.SIMPLE) -> None:
    """
    Generate DOT and save to file.

    Args:
        graph: Graph to visualize
        filename: Output file path (.dot extension recommended)
        mode: Visualization mode
    """
    dot = generate_dot(graph, mode=mode)
    with open(filename, 'w', encoding='utf-8') as f:
        f.write(dot)


__all__ = ["DotMode", "generate_dot", "save_dot_file"]
