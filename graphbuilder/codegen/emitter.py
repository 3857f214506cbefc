"""Shared emission skeleton: walk a GraphPlan, let the target spell each piece."""

from __future__ import annotations

import json

from graphbuilder.codegen.plan import Branch, GraphPlan, PlannedNode


def string_literal(value: str) -> str:
    """a double-quoted literal that is valid in both Python and TypeScript."""
    return json.dumps(value)


def unique_name(candidate: str, used: set[str]) -> str:
    name = candidate
    suffix = 2
    while name in used:
        name = f"{candidate}{suffix}"
        suffix += 1
    used.add(name)
    return name


class CodeEmitter:
    """Base class for target emitters.

    ``render`` fixes the section order (header, state, node units, routing
    functions, graph wiring); subclasses only implement the spelling.
    """

    target: str = ""
    section_separator = "\n\n"

    def render(self, plan: GraphPlan, project_name: str) -> str:
        names, router_names = self.function_names(plan)
        sections: list[str] = [
            self.render_header(plan, project_name),
            self.render_state(plan),
        ]
        branch_by_source = plan.branch_by_source
        for item in plan.nodes:
            sections.append(self.render_node(item, names[item.key], branch_by_source.get(item.key)))
        for branch in plan.branches:
            sections.append(self.render_router(branch, router_names[branch.source]))
        sections.append(self.render_graph(plan, names, router_names))
        body = self.section_separator.join(section.strip("\n") for section in sections if section)
        return body + "\n"

    def function_names(self, plan: GraphPlan) -> tuple[dict[str, str], dict[str, str]]:
        """unique function names for node units and routing functions, keyed by graph key."""
        used: set[str] = set()
        names = {item.key: unique_name(self.function_name(item.key), used) for item in plan.nodes}
        router_names = {
            branch.source: unique_name(self.router_name(branch.source), used)
            for branch in plan.branches
        }
        return names, router_names

    # target-specific spelling

    def function_name(self, key: str) -> str:
        raise NotImplementedError

    def router_name(self, source_key: str) -> str:
        raise NotImplementedError

    def render_header(self, plan: GraphPlan, project_name: str) -> str:
        raise NotImplementedError

    def render_state(self, plan: GraphPlan) -> str:
        raise NotImplementedError

    def render_node(self, item: PlannedNode, name: str, branch: Branch | None) -> str:
        raise NotImplementedError

    def render_router(self, branch: Branch, name: str) -> str:
        raise NotImplementedError

    def render_graph(
        self,
        plan: GraphPlan,
        names: dict[str, str],
        router_names: dict[str, str],
    ) -> str:
        raise NotImplementedError
