#!/usr/bin/env python3
"""
Demo: Validate the cupcake graph, walk one path and export a diagram.
"""

from decision_graph.examples import build_cupcake_graph
from decision_graph.engine import OptionOutOfRange, TraversalEngine
from decision_graph.serialization import dump
from decision_graph.backends import DotMode, generate_dot


def print_state(engine, session):
    view = engine.current_state(session)
    print(f"  Path:    {' -> '.join(session.path)}")
    if view.is_terminal:
        print(f"  Result:  {view.node.recommendation}")
    else:
        labels = ", ".join(f"{i}={o.label}" for i, o in enumerate(view.node.options))
        print(f"  Prompt:  {view.node.prompt}  [{labels}]")
    print()


def main():
    graph = build_cupcake_graph()
    engine = TraversalEngine(graph)

    print("=" * 70)
    print(f"WALKTHROUGH: {graph.name}")
    print("=" * 70)
    print()

    session = engine.start()
    print_state(engine, session)

    for index in (1, 0):
        print(f"choose({index})")
        session = engine.choose(session, index)
        print_state(engine, session)

    print("back()")
    session = engine.back(session)
    print_state(engine, session)

    print("choose(5)")
    try:
        engine.choose(session, 5)
    except OptionOutOfRange as e:
        print(f"  Refused: {e}")
    print_state(engine, session)

    print("=" * 70)
    print("GRAPH DEFINITION (YAML)")
    print("=" * 70)
    print(dump(graph, fmt="yaml").decode("utf-8"))

    print("=" * 70)
    print("DIAGRAM (DOT)")
    print("=" * 70)
    print(generate_dot(graph, mode=DotMode.DETAILED))


if __name__ == "__main__":
    main()
