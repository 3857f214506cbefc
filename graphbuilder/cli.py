#!/usr/bin/env python3
"""Command-line access to validation, code generation and templates.

Usage:
    graphbuilder generate graph.json --target python
    graphbuilder validate graph.json --json
    graphbuilder template research-sprint > graph.json
    graphbuilder templates
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from graphbuilder.analysis.validation import validate
from graphbuilder.codegen import CodeTarget, generate
from graphbuilder.config import DEFAULT_TARGET, configure_logging
from graphbuilder.data.catalog import TEMPLATES, instantiate_template
from graphbuilder.errors import GraphBuilderError
from graphbuilder.models.graph import FlowGraph
from graphbuilder.models.validation_issue import ValidationIssue
from graphbuilder.sdk.graph_editor import canonicalize

logger = logging.getLogger(__name__)


def load_graph(graph_file: Path) -> FlowGraph:
    """Load a graph JSON file and bring it into canonical form.

    Args:
        graph_file: path to a JSON document with ``nodes`` and ``edges``

    Returns:
        the normalized, role-inferred FlowGraph
    """
    graph = FlowGraph.model_validate_json(graph_file.read_text())
    nodes, edges = canonicalize(graph.nodes, graph.edges)
    logger.debug("loaded %s: %d nodes, %d edges", graph_file, len(nodes), len(edges))
    return graph.model_copy(update={"nodes": nodes, "edges": edges})


def format_issues(issues: list[ValidationIssue]) -> str:
    """Format validator output for human-readable output."""
    if not issues:
        return "✓ Graph is ready for export"
    lines = [f"{len(issues)} issue(s) found:"]
    for issue in issues:
        lines.append(f"  [{issue.code}] {issue.message}")
    return "\n".join(lines)


def _cmd_generate(args: argparse.Namespace) -> int:
    graph = load_graph(args.graph_file)
    print(generate(
        args.target,
        graph.nodes,
        graph.edges,
        entry_id=args.entry,
        project_name=args.project_name or graph.name,
    ), end="")
    return 0


def _cmd_validate(args: argparse.Namespace) -> int:
    graph = load_graph(args.graph_file)
    issues = validate(graph.nodes, graph.edges, entry_id=args.entry)
    if args.json:
        print(json.dumps([issue.model_dump() for issue in issues], indent=2))
    else:
        print(format_issues(issues))
    return 1 if issues else 0


def _cmd_template(args: argparse.Namespace) -> int:
    graph = instantiate_template(args.template_id)
    print(graph.model_dump_json(indent=2))
    return 0


def _cmd_templates(args: argparse.Namespace) -> int:
    for template in TEMPLATES:
        print(f"{template.id:<18} {template.name}: {template.description}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphbuilder",
        description="Validate agent workflow graphs and generate LangGraph skeletons.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="logging level (defaults to GRAPHBUILDER_LOG_LEVEL)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    gen = subparsers.add_parser("generate", help="emit skeleton source code")
    gen.add_argument("graph_file", type=Path, help="path to the graph JSON file")
    gen.add_argument(
        "--target",
        default=DEFAULT_TARGET,
        help="python or typescript (aliases: py, ts, js)",
    )
    gen.add_argument("--entry", default=None, help="id of the entry node")
    gen.add_argument("--project-name", default=None, help="name used in the file header")
    gen.set_defaults(handler=_cmd_generate)

    val = subparsers.add_parser("validate", help="report export-blocking issues")
    val.add_argument("graph_file", type=Path, help="path to the graph JSON file")
    val.add_argument("--entry", default=None, help="id of the entry node")
    val.add_argument(
        "--json",
        action="store_true",
        help="output issues as JSON instead of human-readable format",
    )
    val.set_defaults(handler=_cmd_validate)

    tpl = subparsers.add_parser("template", help="print an instantiated template as JSON")
    tpl.add_argument("template_id", help="template id, see `graphbuilder templates`")
    tpl.set_defaults(handler=_cmd_template)

    lst = subparsers.add_parser("templates", help="list available templates")
    lst.set_defaults(handler=_cmd_templates)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    graph_file = getattr(args, "graph_file", None)
    if graph_file is not None and not graph_file.exists():
        print(f"Error: graph file not found: {graph_file}", file=sys.stderr)
        return 1

    try:
        return args.handler(args)
    except ValidationError as exc:
        print(f"Error: invalid graph file: {exc}", file=sys.stderr)
        return 1
    except GraphBuilderError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
