"""
Command line for authoring and trying out decision graphs.

    decision-graph validate FILE        lint a graph definition
    decision-graph dot FILE [-o OUT]    export a Graphviz diagram
    decision-graph play FILE            walk the graph interactively

Exit codes: 0 success, 1 validation failed, 2 unreadable or malformed file.
"""
import argparse
import logging
import sys
from typing import List, Optional

from decision_graph import config
from decision_graph.backends.dot_generator import DotMode, generate_dot, save_dot_file
from decision_graph.engine import AtRoot, TraversalEngine, TraversalError
from decision_graph.model import Graph
from decision_graph.serialization import ParseError, load_file
from decision_graph.validator import InvalidGraph, validate

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_UNREADABLE = 2

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _load(path: str) -> Optional[Graph]:
    try:
        return load_file(path)
    except OSError as e:
        print(f"error: cannot read {path}: {e.strerror}", file=sys.stderr)
    except ParseError as e:
        print(f"error: {path}: {e}", file=sys.stderr)
    return None


def cmd_validate(args: argparse.Namespace) -> int:
    graph = _load(args.file)
    if graph is None:
        return EXIT_UNREADABLE

    result = validate(graph)
    if result.is_valid:
        print(f"{args.file}: OK ({len(graph.nodes)} nodes, root '{graph.root_id}')")
        return EXIT_OK

    for error in result.errors:
        print(f"{args.file}: {error}")
    print(f"{len(result.errors)} error(s) found")
    return EXIT_INVALID


def cmd_dot(args: argparse.Namespace) -> int:
    graph = _load(args.file)
    if graph is None:
        return EXIT_UNREADABLE

    mode = DotMode(args.mode)
    if args.output:
        save_dot_file(graph, args.output, mode=mode)
        logger.info("Wrote %s", args.output)
    else:
        print(generate_dot(graph, mode=mode))
    return EXIT_OK


def _render(engine: TraversalEngine, session) -> None:
    view = engine.current_state(session)
    print()
    if view.is_terminal:
        print(f"Recommendation: {view.node.recommendation}")
        print("[r] start over  [b] back  [q] quit")
        return
    print(view.node.prompt)
    for i, option in enumerate(view.node.options, 1):
        print(f"  {i}. {option.label}")
    hint = "[b] back  " if view.can_go_back else ""
    print(f"{hint}[r] start over  [q] quit")


def cmd_play(args: argparse.Namespace) -> int:
    graph = _load(args.file)
    if graph is None:
        return EXIT_UNREADABLE

    try:
        engine = TraversalEngine(graph)
    except InvalidGraph as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID

    session = engine.start()
    while True:
        _render(engine, session)
        try:
            answer = input("> ").strip().lower()
        except EOFError:
            break

        if answer == "q":
            break
        if answer == "r":
            session = engine.reset(session)
            continue
        try:
            if answer == "b":
                session = engine.back(session)
            elif answer.isdecimal():
                session = engine.choose(session, int(answer) - 1)
            else:
                print(f"Unrecognised input: {answer!r}")
        except AtRoot:
            print("Already at the first question.")
        except TraversalError as e:
            print(e)

    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="decision-graph", description="Decision graph tools")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, type=str.upper, choices=LOG_LEVELS,
                        help="Logging level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="Check a graph definition for structural errors")
    p_validate.add_argument("file", help="Path to a .json/.yaml graph definition")
    p_validate.set_defaults(func=cmd_validate)

    p_dot = sub.add_parser("dot", help="Export a Graphviz DOT diagram")
    p_dot.add_argument("file", help="Path to a .json/.yaml graph definition")
    p_dot.add_argument("-o", "--output", help="Write to this file instead of stdout")
    p_dot.add_argument("--mode", choices=[m.value for m in DotMode], default=DotMode.SIMPLE.value)
    p_dot.set_defaults(func=cmd_dot)

    p_play = sub.add_parser("play", help="Walk the graph interactively")
    p_play.add_argument("file", help="Path to a .json/.yaml graph definition")
    p_play.set_defaults(func=cmd_play)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    # Defaults bypass choices, so DECISION_GRAPH_LOG_LEVEL is checked here
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid log level {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})")
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
