"""Target-independent walk over the IR shared by every code emitter.

The plan fixes everything that must be identical across targets: node keys,
emission order, entry node, plain wiring and per-source routing tables.
Emitters only decide how those facts are spelled.
"""

from __future__ import annotations

import heapq
import keyword
import logging
from collections import Counter
from dataclasses import dataclass, field

from graphbuilder.analysis.edge_normalization import to_route_key
from graphbuilder.errors import GraphInvariantError
from graphbuilder.models.graph import FlowEdge, FlowNode, Role

logger = logging.getLogger(__name__)

# state keys declared by every generated program
STATE_KEYS = frozenset({"messages", "route"})

# words that cannot be used as a function name in at least one target
TS_RESERVED = frozenset({
    "arguments", "await", "break", "case", "catch", "class", "const", "continue",
    "debugger", "default", "delete", "do", "else", "enum", "eval", "export",
    "extends", "false", "finally", "for", "function", "if", "implements",
    "import", "in", "instanceof", "interface", "let", "new", "null", "package",
    "private", "protected", "public", "return", "static", "super", "switch",
    "this", "throw", "true", "try", "typeof", "var", "void", "while", "with",
    "yield",
})
# names the generated modules define or rely on at top level
GENERATED_NAMES = frozenset({"app", "workflow", "graph", "build_graph", "dict", "list", "str"})
RESERVED_KEYS = frozenset(keyword.kwlist) | TS_RESERVED | STATE_KEYS | GENERATED_NAMES


@dataclass
class PlannedNode:
    """a node with its target-independent graph key."""

    key: str
    node: FlowNode

    @property
    def label(self) -> str:
        return self.node.label

    @property
    def description(self) -> str:
        return self.node.description

    @property
    def tools(self) -> list[str]:
        return list(self.node.tools)

    @property
    def roles(self) -> list[str]:
        return [role.value for role in self.node.roles]


@dataclass
class Route:
    """one entry of a routing table."""

    key: str
    target: str  # graph key of the target node


@dataclass
class Branch:
    """conditional wiring out of one source node."""

    source: str  # graph key
    routes: list[Route] = field(default_factory=list)
    renamed: list[str] = field(default_factory=list)  # duplicate keys that were suffixed


@dataclass
class GraphPlan:
    """everything an emitter needs, in emission order."""

    nodes: list[PlannedNode]
    entry: str | None
    entry_is_fallback: bool
    edges: list[tuple[str, str]]  # unconditional wiring, graph keys
    branches: list[Branch]
    sinks: list[str]
    unreachable: list[str]

    @property
    def branch_by_source(self) -> dict[str, Branch]:
        return {branch.source: branch for branch in self.branches}

    def route_keys(self) -> dict[str, list[str]]:
        """route keys per branching node, for cross-target comparisons."""
        return {branch.source: [route.key for route in branch.routes] for branch in self.branches}


def _assign_keys(nodes: list[FlowNode]) -> dict[str, str]:
    keys: dict[str, str] = {}
    used: set[str] = set()
    for index, node in enumerate(nodes):
        base = to_route_key(node.label) or f"node_{index + 1}"
        if base[0].isdigit():
            base = f"node_{base}"
        if base in RESERVED_KEYS:
            base = f"{base}_node"
        key = base
        suffix = 2
        while key in used:
            key = f"{base}_{suffix}"
            suffix += 1
        used.add(key)
        keys[node.id] = key
    return keys


def _check_invariants(nodes: list[FlowNode], edges: list[FlowEdge]) -> None:
    duplicates = [node_id for node_id, count in Counter(n.id for n in nodes).items() if count > 1]
    if duplicates:
        raise GraphInvariantError(f"duplicate node ids: {', '.join(duplicates)}")

    known = {node.id for node in nodes}
    for edge in edges:
        if edge.source not in known or edge.target not in known:
            raise GraphInvariantError(
                f"edge {edge.id or '<unnamed>'} references a missing node "
                f"({edge.source} -> {edge.target})"
            )

    for node in nodes:
        if Role.agent not in node.roles:
            raise GraphInvariantError(f"node {node.id} has no agent role; run role inference first")


def _topological_order(nodes: list[FlowNode], edges: list[FlowEdge]) -> list[int]:
    """Kahn's algorithm with ties broken by input order; cycle members go last."""
    position = {node.id: index for index, node in enumerate(nodes)}
    remaining = [0] * len(nodes)
    children: list[list[int]] = [[] for _ in nodes]
    for edge in edges:
        source, target = position[edge.source], position[edge.target]
        children[source].append(target)
        remaining[target] += 1

    ready = [index for index, count in enumerate(remaining) if count == 0]
    heapq.heapify(ready)
    order: list[int] = []
    emitted = set()
    while ready:
        index = heapq.heappop(ready)
        order.append(index)
        emitted.add(index)
        for child in children[index]:
            remaining[child] -= 1
            if remaining[child] == 0:
                heapq.heappush(ready, child)

    order.extend(index for index in range(len(nodes)) if index not in emitted)
    return order


def _reachable(entry: str, edges: list[tuple[str, str]], branches: list[Branch]) -> set[str]:
    adjacency: dict[str, list[str]] = {}
    for source, target in edges:
        adjacency.setdefault(source, []).append(target)
    for branch in branches:
        adjacency.setdefault(branch.source, []).extend(route.target for route in branch.routes)

    seen = {entry}
    stack = [entry]
    while stack:
        for target in adjacency.get(stack.pop(), []):
            if target not in seen:
                seen.add(target)
                stack.append(target)
    return seen


def build_plan(
    nodes: list[FlowNode],
    edges: list[FlowEdge],
    entry_id: str | None = None,
) -> GraphPlan:
    """Walk the IR once and lay out what every target must emit.

    Raises:
        GraphInvariantError: if the IR bypassed normalization (dangling
            edges, duplicate node ids, nodes without the agent role).
    """
    _check_invariants(nodes, edges)

    keys = _assign_keys(nodes)
    order = _topological_order(nodes, edges)
    planned = [PlannedNode(key=keys[nodes[i].id], node=nodes[i]) for i in order]

    targets = {edge.target for edge in edges}
    entry: str | None = None
    entry_is_fallback = False
    if entry_id is not None and entry_id in keys:
        entry = keys[entry_id]
    else:
        for node in nodes:
            if node.id not in targets:
                entry = keys[node.id]
                break
        if entry is None and nodes:
            entry = keys[nodes[0].id]
            entry_is_fallback = True
            logger.warning("graph has no node without incoming edges; using %r as entry", entry)

    # edges grouped by source, in plan order, then by edge order
    rank = {item.node.id: rank for rank, item in enumerate(planned)}
    ordered_edges = sorted(enumerate(edges), key=lambda pair: (rank[pair[1].source], pair[0]))

    plain: list[tuple[str, str]] = []
    branches: dict[str, Branch] = {}
    for _, edge in ordered_edges:
        source, target = keys[edge.source], keys[edge.target]
        if not edge.is_conditional:
            plain.append((source, target))
            continue
        branch = branches.setdefault(source, Branch(source=source))
        # un-normalized conditional edges fall back to the target key
        key = (edge.route_key or "").strip() or target
        taken = {route.key for route in branch.routes}
        if key in taken:
            suffix = 2
            while f"{key}_{suffix}" in taken:
                suffix += 1
            branch.renamed.append(key)
            logger.warning("duplicate route key %r from %r; emitting %r", key, source, f"{key}_{suffix}")
            key = f"{key}_{suffix}"
        branch.routes.append(Route(key=key, target=target))

    sources = {edge.source for edge in edges}
    sinks = [item.key for item in planned if item.node.id not in sources]

    branch_list = [branches[item.key] for item in planned if item.key in branches]
    unreachable: list[str] = []
    if entry is not None:
        reachable = _reachable(entry, plain, branch_list)
        unreachable = [item.key for item in planned if item.key not in reachable]

    return GraphPlan(
        nodes=planned,
        entry=entry,
        entry_is_fallback=entry_is_fallback,
        edges=plain,
        branches=branch_list,
        sinks=sinks,
        unreachable=unreachable,
    )
