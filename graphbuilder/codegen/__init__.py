"""Skeleton code generation for the supported LangGraph targets.

Usage:

    from graphbuilder.codegen import generate

    source = generate("python", graph.nodes, graph.edges)
"""

from __future__ import annotations

import logging
from enum import Enum

from graphbuilder.codegen.emitter import CodeEmitter
from graphbuilder.codegen.plan import GraphPlan, build_plan
from graphbuilder.codegen.python_emitter import PythonEmitter
from graphbuilder.codegen.typescript_emitter import TypeScriptEmitter
from graphbuilder.config import PROJECT_NAME
from graphbuilder.errors import UnknownTargetError
from graphbuilder.models.graph import FlowEdge, FlowNode

logger = logging.getLogger(__name__)


class CodeTarget(str, Enum):
    """Supported output ecosystems."""

    python = "python"
    typescript = "typescript"

    @classmethod
    def parse(cls, value: "CodeTarget | str") -> "CodeTarget":
        """accept the enum, its value or a common alias (py, ts, js, ...)."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        resolved = _TARGET_ALIASES.get(normalized)
        if resolved is None:
            raise UnknownTargetError(f"unknown code generation target: {value!r}")
        return resolved


_TARGET_ALIASES = {
    "python": CodeTarget.python,
    "py": CodeTarget.python,
    "langgraph": CodeTarget.python,
    "typescript": CodeTarget.typescript,
    "ts": CodeTarget.typescript,
    "javascript": CodeTarget.typescript,
    "js": CodeTarget.typescript,
}

EMITTERS: dict[CodeTarget, CodeEmitter] = {
    CodeTarget.python: PythonEmitter(),
    CodeTarget.typescript: TypeScriptEmitter(),
}


def generate(
    target: CodeTarget | str,
    nodes: list[FlowNode],
    edges: list[FlowEdge],
    *,
    entry_id: str | None = None,
    project_name: str | None = None,
) -> str:
    """Render the graph as skeleton source code for ``target``.

    Does not require a prior validation pass: a graph without an entry or
    with duplicate route keys still produces a best-effort skeleton.

    Raises:
        UnknownTargetError: if ``target`` is not supported.
        GraphInvariantError: if an edge references a missing node or a node
            lacks the agent role.
    """
    resolved = CodeTarget.parse(target)
    plan = build_plan(nodes, edges, entry_id=entry_id)
    logger.debug(
        "generating %s skeleton: %d nodes, %d branches",
        resolved.value,
        len(plan.nodes),
        len(plan.branches),
    )
    return EMITTERS[resolved].render(plan, project_name or PROJECT_NAME)


def generate_all(
    nodes: list[FlowNode],
    edges: list[FlowEdge],
    *,
    entry_id: str | None = None,
    project_name: str | None = None,
) -> dict[CodeTarget, str]:
    """render every target from one shared plan."""
    plan = build_plan(nodes, edges, entry_id=entry_id)
    name = project_name or PROJECT_NAME
    return {target: emitter.render(plan, name) for target, emitter in EMITTERS.items()}


__all__ = [
    "CodeTarget",
    "CodeEmitter",
    "EMITTERS",
    "GraphPlan",
    "PythonEmitter",
    "TypeScriptEmitter",
    "build_plan",
    "generate",
    "generate_all",
]
