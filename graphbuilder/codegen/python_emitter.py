"""Render a GraphPlan as a Python LangGraph ``StateGraph`` skeleton."""

from __future__ import annotations

from graphbuilder.codegen.emitter import CodeEmitter, string_literal
from graphbuilder.codegen.plan import Branch, GraphPlan, PlannedNode

INDENT = "    "


def _docstring_text(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')


def _one_line(value: str) -> str:
    return " ".join(value.split())


def _list_literal(values: list[str]) -> str:
    return "[" + ", ".join(string_literal(value) for value in values) + "]"


class PythonEmitter(CodeEmitter):
    """LangGraph (Python) target."""

    target = "python"
    section_separator = "\n\n\n"

    def function_name(self, key: str) -> str:
        return key

    def router_name(self, source_key: str) -> str:
        return f"route_from_{source_key}"

    def render_header(self, plan: GraphPlan, project_name: str) -> str:
        entry = plan.entry or "none"
        lines = [
            f'"""{_docstring_text(_one_line(project_name))}: LangGraph skeleton generated by GraphBuilder.',
            "",
            f"Nodes: {len(plan.nodes)} | Entry: {entry}",
            '"""',
            "",
        ]
        if plan.branches:
            lines.append("from typing import Literal, TypedDict")
        else:
            lines.append("from typing import TypedDict")
        lines += [
            "",
            "from langgraph.graph import END, START, StateGraph",
        ]
        return "\n".join(lines)

    def render_state(self, plan: GraphPlan) -> str:
        return "\n".join([
            "class FlowState(TypedDict, total=False):",
            f"{INDENT}messages: list",
            f"{INDENT}route: str  # route key chosen by the last branching node",
        ])

    def render_node(self, item: PlannedNode, name: str, branch: Branch | None) -> str:
        title = _one_line(item.label) or item.key
        lines = [
            f"def {name}(state: FlowState) -> dict:",
            f'{INDENT}"""{_docstring_text(title)}',
        ]
        if item.description.strip():
            lines.append("")
            for text in item.description.strip().splitlines():
                lines.append(f"{INDENT}{_docstring_text(text)}".rstrip())
        lines += [
            "",
            f"{INDENT}Roles: {', '.join(item.roles)}",
            f"{INDENT}Tools: {', '.join(_docstring_text(tool) for tool in item.tools) if item.tools else 'none'}",
            f'{INDENT}"""',
            f"{INDENT}tools = {_list_literal(item.tools)}",
            f"{INDENT}# TODO: implement {title} with the tools above.",
        ]
        if branch is not None:
            keys = [route.key for route in branch.routes]
            lines.append(f"{INDENT}# return one of: {', '.join(string_literal(key) for key in keys)}")
            lines.append(f'{INDENT}return {{"route": {string_literal(keys[0])}}}')
        else:
            lines.append(f"{INDENT}return {{}}")
        return "\n".join(lines)

    def render_router(self, branch: Branch, name: str) -> str:
        choices = ", ".join(string_literal(route.key) for route in branch.routes)
        return "\n".join([
            f"def {name}(state: FlowState) -> Literal[{choices}]:",
            f'{INDENT}"""Pick the branch taken after {branch.source}."""',
            f'{INDENT}return state["route"]',
        ])

    def render_graph(
        self,
        plan: GraphPlan,
        names: dict[str, str],
        router_names: dict[str, str],
    ) -> str:
        body: list[str] = ["graph = StateGraph(FlowState)", ""]

        if not plan.nodes:
            body.append("# graph has no nodes yet")
        for item in plan.nodes:
            metadata = (
                f'{{"label": {string_literal(item.label)}, '
                f'"description": {string_literal(item.description)}, '
                f'"roles": {_list_literal(item.roles)}, '
                f'"tools": {_list_literal(item.tools)}}}'
            )
            body += [
                "graph.add_node(",
                f"{INDENT}{string_literal(item.key)},",
                f"{INDENT}{names[item.key]},",
                f"{INDENT}metadata={metadata},",
                ")",
            ]

        if plan.entry is not None:
            body.append("")
            if plan.entry_is_fallback:
                body.append("# no node is free of incoming edges; entry defaults to the first node")
            body.append(f"graph.add_edge(START, {string_literal(plan.entry)})")
        if plan.unreachable:
            body.append(f"# unreachable from the entry node: {', '.join(plan.unreachable)}")

        if plan.edges:
            body.append("")
        for source, target in plan.edges:
            body.append(f"graph.add_edge({string_literal(source)}, {string_literal(target)})")

        for branch in plan.branches:
            body += [
                "",
                "graph.add_conditional_edges(",
                f"{INDENT}{string_literal(branch.source)},",
                f"{INDENT}{router_names[branch.source]},",
                f"{INDENT}{{",
            ]
            for key in branch.renamed:
                body.append(f"{INDENT * 2}# duplicate route key {string_literal(key)} was renamed")
            for route in branch.routes:
                body.append(f"{INDENT * 2}{string_literal(route.key)}: {string_literal(route.target)},")
            body += [f"{INDENT}}},", ")"]

        if plan.sinks:
            body.append("")
        for sink in plan.sinks:
            body.append(f"graph.add_edge({string_literal(sink)}, END)")

        body += ["", "return graph.compile()"]

        lines = ["def build_graph():"]
        lines += [f"{INDENT}{line}" if line else "" for line in body]
        lines += ["", "", "app = build_graph()"]
        return "\n".join(lines)
