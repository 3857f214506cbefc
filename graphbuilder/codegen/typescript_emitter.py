"""Render a GraphPlan as a LangGraph.js (TypeScript) skeleton."""

from __future__ import annotations

from graphbuilder.codegen.emitter import CodeEmitter, string_literal
from graphbuilder.codegen.plan import Branch, GraphPlan, PlannedNode

INDENT = "  "


def _comment_text(value: str) -> str:
    # keep block comments closed only where we close them
    return value.replace("*/", "*\\/")


def _one_line(value: str) -> str:
    return " ".join(value.split())


def _array_literal(values: list[str]) -> str:
    return "[" + ", ".join(string_literal(value) for value in values) + "]"


def camel_case(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


class TypeScriptEmitter(CodeEmitter):
    """LangGraph.js target."""

    target = "typescript"

    def function_name(self, key: str) -> str:
        return camel_case(key)

    def router_name(self, source_key: str) -> str:
        return camel_case(f"route_from_{source_key}")

    def render_header(self, plan: GraphPlan, project_name: str) -> str:
        entry = plan.entry or "none"
        return "\n".join([
            "/**",
            f" * {_comment_text(_one_line(project_name))}: LangGraph.js skeleton generated by GraphBuilder.",
            " *",
            f" * Nodes: {len(plan.nodes)} | Entry: {entry}",
            " */",
            "",
            'import { Annotation, END, START, StateGraph } from "@langchain/langgraph";',
        ])

    def render_state(self, plan: GraphPlan) -> str:
        return "\n".join([
            "const FlowState = Annotation.Root({",
            f"{INDENT}messages: Annotation<unknown[]>({{",
            f"{INDENT * 2}reducer: (left, right) => left.concat(right),",
            f"{INDENT * 2}default: () => [],",
            f"{INDENT}}}),",
            f"{INDENT}// route key chosen by the last branching node",
            f"{INDENT}route: Annotation<string>(),",
            "});",
            "",
            "type State = typeof FlowState.State;",
        ])

    def render_node(self, item: PlannedNode, name: str, branch: Branch | None) -> str:
        title = _one_line(item.label) or item.key
        lines = ["/**", f" * {_comment_text(title)}"]
        if item.description.strip():
            lines.append(" *")
            for text in item.description.strip().splitlines():
                lines.append(f" * {_comment_text(text)}".rstrip())
        lines += [
            " *",
            f" * Roles: {', '.join(item.roles)}",
            f" * Tools: {', '.join(_comment_text(tool) for tool in item.tools) if item.tools else 'none'}",
            " */",
            f"async function {name}(state: State): Promise<Partial<State>> {{",
            f"{INDENT}const tools = {_array_literal(item.tools)};",
            f"{INDENT}// TODO: implement {_comment_text(title)} with the tools above.",
        ]
        if branch is not None:
            keys = [route.key for route in branch.routes]
            lines.append(f"{INDENT}// return one of: {', '.join(string_literal(key) for key in keys)}")
            lines.append(f"{INDENT}return {{ route: {string_literal(keys[0])} }};")
        else:
            lines.append(f"{INDENT}return {{}};")
        lines.append("}")
        return "\n".join(lines)

    def render_router(self, branch: Branch, name: str) -> str:
        choices = " | ".join(string_literal(route.key) for route in branch.routes)
        return "\n".join([
            f"/** Pick the branch taken after {branch.source}. */",
            f"function {name}(state: State): {choices} {{",
            f"{INDENT}return state.route as {choices};",
            "}",
        ])

    def render_graph(
        self,
        plan: GraphPlan,
        names: dict[str, str],
        router_names: dict[str, str],
    ) -> str:
        calls: list[str] = []
        for item in plan.nodes:
            calls.append(f".addNode({string_literal(item.key)}, {names[item.key]})")

        if plan.entry is not None:
            if plan.entry_is_fallback:
                calls.append("// no node is free of incoming edges; entry defaults to the first node")
            calls.append(f".addEdge(START, {string_literal(plan.entry)})")
        if plan.unreachable:
            calls.append(f"// unreachable from the entry node: {', '.join(plan.unreachable)}")

        for source, target in plan.edges:
            calls.append(f".addEdge({string_literal(source)}, {string_literal(target)})")

        for branch in plan.branches:
            calls.append(
                f".addConditionalEdges({string_literal(branch.source)}, {router_names[branch.source]}, {{"
            )
            for key in branch.renamed:
                calls.append(f"{INDENT}// duplicate route key {string_literal(key)} was renamed")
            for route in branch.routes:
                calls.append(f"{INDENT}{string_literal(route.key)}: {string_literal(route.target)},")
            calls.append("})")

        for sink in plan.sinks:
            calls.append(f".addEdge({string_literal(sink)}, END)")

        lines = ["const workflow = new StateGraph(FlowState)"]
        if not plan.nodes:
            lines[0] = "// graph has no nodes yet\n" + lines[0]
        lines += [f"{INDENT}{call}" for call in calls]
        lines[-1] += ";"
        lines += ["", "export const app = workflow.compile();"]
        return "\n".join(lines)
