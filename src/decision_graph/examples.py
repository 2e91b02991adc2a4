"""
Example graph builders.

The cupcake finder is the small questionnaire used across the docs and tests:

    root: "Do you want chocolate?"
        Yes -> A (leaf)  Chocolate Cupcake
        No  -> B: "Do you prefer something light?"
            Yes -> C (leaf)  Vanilla Cupcake
            No  -> D (leaf)  Red Velvet Cupcake
"""
from decision_graph.model import Graph, Node, Option


def build_cupcake_graph() -> Graph:
    return Graph.from_nodes(
        "root",
        [
            Node.question("root", "Do you want chocolate?", [
                Option(label="Yes", target_id="A"),
                Option(label="No", target_id="B"),
            ]),
            Node.leaf("A", "Chocolate Cupcake"),
            Node.question("B", "Do you prefer something light?", [
                Option(label="Yes", target_id="C"),
                Option(label="No", target_id="D"),
            ]),
            Node.leaf("C", "Vanilla Cupcake"),
            Node.leaf("D", "Red Velvet Cupcake"),
        ],
        name="Cupcake Finder",
    )
