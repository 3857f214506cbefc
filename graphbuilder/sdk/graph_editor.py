"""Canvas mutation events as pure functions over a FlowGraph.

Every operation returns a new graph that has already been run through edge
normalization and role inference, so callers always hold a canonical IR.

Usage:

    from graphbuilder.sdk.graph_editor import add_node, connect, create_node

    graph = FlowGraph()
    graph = add_node(graph, create_node(Role.agent, index=0))
"""

from __future__ import annotations

import logging
from collections.abc import Collection

from graphbuilder.analysis.edge_normalization import normalize_edges, to_route_key
from graphbuilder.analysis.role_inference import infer_roles
from graphbuilder.errors import EdgeNotFoundError, NodeNotFoundError
from graphbuilder.models.graph import (
    EdgeKind,
    FlowEdge,
    FlowGraph,
    FlowNode,
    Role,
    canonical_roles,
)
from graphbuilder.utils.identifiers import generate_edge_id, generate_node_id

logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTION = "Describe what this node should do."


def canonicalize(
    nodes: list[FlowNode],
    edges: list[FlowEdge],
    pinned_conditional: Collection[str] = (),
) -> tuple[list[FlowNode], list[FlowEdge]]:
    """run edge normalization then role inference."""
    next_edges = normalize_edges(edges, nodes, pinned_conditional)
    next_nodes = infer_roles(nodes, next_edges)
    return next_nodes, next_edges


def _rebuild(
    graph: FlowGraph,
    nodes: list[FlowNode],
    edges: list[FlowEdge],
    pinned_conditional: Collection[str] = (),
) -> FlowGraph:
    next_nodes, next_edges = canonicalize(nodes, edges, pinned_conditional)
    return graph.model_copy(update={"nodes": next_nodes, "edges": next_edges})


def _require_node(graph: FlowGraph, node_id: str) -> FlowNode:
    node = graph.get_node(node_id)
    if node is None:
        raise NodeNotFoundError(node_id)
    return node


def _require_edge(graph: FlowGraph, edge_id: str) -> FlowEdge:
    edge = graph.get_edge(edge_id)
    if edge is None:
        raise EdgeNotFoundError(edge_id)
    return edge


def _replace_node(graph: FlowGraph, node: FlowNode) -> list[FlowNode]:
    return [node if existing.id == node.id else existing for existing in graph.nodes]


def _replace_edge(graph: FlowGraph, edge: FlowEdge) -> list[FlowEdge]:
    return [edge if existing.id == edge.id else existing for existing in graph.edges]


def create_node(role: Role, index: int, node_id: str | None = None) -> FlowNode:
    """a fresh node as the canvas creates it from the "Add Node" palette."""
    role = Role(role)
    return FlowNode(
        id=node_id or generate_node_id(),
        label=f"{role.value.capitalize()} node",
        description=DEFAULT_DESCRIPTION,
        tools=[],
        roles=[role],
        position={"x": 140 + index * 30, "y": 120 + index * 40},
    )


def add_node(graph: FlowGraph, node: FlowNode) -> FlowGraph:
    """append a node; ids must be unique."""
    if graph.get_node(node.id) is not None:
        raise ValueError(f"node id already in graph: {node.id}")
    return _rebuild(graph, [*graph.nodes, node], list(graph.edges))


def move_node(graph: FlowGraph, node_id: str, x: float, y: float) -> FlowGraph:
    node = _require_node(graph, node_id)
    moved = node.model_copy(update={"position": {"x": x, "y": y}})
    return _rebuild(graph, _replace_node(graph, moved), list(graph.edges))


def update_node(
    graph: FlowGraph,
    node_id: str,
    *,
    label: str | None = None,
    description: str | None = None,
    tools: list[str] | None = None,
    roles: list[Role] | None = None,
) -> FlowGraph:
    """Edit the inspector fields of a node.

    Passing ``roles`` replaces the declared set; roles still backed by a live
    signal (tools attached, fan-out, memory vocabulary) are re-added by
    inference right away.
    """
    node = _require_node(graph, node_id)
    patch: dict = {}
    if label is not None:
        patch["label"] = label
    if description is not None:
        patch["description"] = description
    if tools is not None:
        patch["tools"] = list(dict.fromkeys(tools))
    if roles is not None:
        patch["roles"] = canonical_roles(roles)
    updated = node.model_copy(update=patch)
    return _rebuild(graph, _replace_node(graph, updated), list(graph.edges))


def toggle_tool(graph: FlowGraph, node_id: str, tool_id: str) -> FlowGraph:
    """attach ``tool_id`` to the node, or detach it if already attached."""
    node = _require_node(graph, node_id)
    if tool_id in node.tools:
        tools = [existing for existing in node.tools if existing != tool_id]
    else:
        tools = [*node.tools, tool_id]
    return update_node(graph, node_id, tools=tools)


def remove_node(graph: FlowGraph, node_id: str) -> FlowGraph:
    """delete a node together with every edge touching it."""
    _require_node(graph, node_id)
    nodes = [node for node in graph.nodes if node.id != node_id]
    edges = [edge for edge in graph.edges if node_id not in (edge.source, edge.target)]
    return _rebuild(graph, nodes, edges)


def connect(
    graph: FlowGraph,
    source: str,
    target: str,
    edge_id: str | None = None,
) -> FlowGraph:
    """Add an edge from ``source`` to ``target``.

    Connecting two nodes that are already connected in the same direction is
    a no-op, matching how the canvas treats a repeated drag.
    """
    _require_node(graph, source)
    _require_node(graph, target)
    if any(edge.source == source and edge.target == target for edge in graph.edges):
        logger.debug("ignoring duplicate connection %s -> %s", source, target)
        return graph
    edge = FlowEdge(id=edge_id or generate_edge_id(), source=source, target=target)
    return _rebuild(graph, list(graph.nodes), [*graph.edges, edge])


def remove_edge(graph: FlowGraph, edge_id: str) -> FlowGraph:
    _require_edge(graph, edge_id)
    edges = [edge for edge in graph.edges if edge.id != edge_id]
    return _rebuild(graph, list(graph.nodes), edges)


def reroute_edge(
    graph: FlowGraph,
    edge_id: str,
    *,
    source: str | None = None,
    target: str | None = None,
) -> FlowGraph:
    """move one or both endpoints of an edge; its route key is kept if still branching."""
    edge = _require_edge(graph, edge_id)
    if source is not None:
        _require_node(graph, source)
    if target is not None:
        _require_node(graph, target)
    moved = edge.model_copy(update={
        "source": source if source is not None else edge.source,
        "target": target if target is not None else edge.target,
    })
    return _rebuild(graph, list(graph.nodes), _replace_edge(graph, moved))


def set_edge_kind(graph: FlowGraph, edge_id: str, kind: EdgeKind) -> FlowGraph:
    """Apply the inspector's manual edge-kind toggle.

    Edge kind is derived from fan-out, so the toggle only matters in one
    case: marking the single outgoing edge of a node conditional before a
    second branch exists. That request is honored for this update only. A
    later update demotes the edge again unless a second branch was added in
    the meantime, in which case the chosen route key is kept. Marking a
    branching edge normal has no lasting effect.
    """
    edge = _require_edge(graph, edge_id)
    kind = EdgeKind(kind)
    toggled = edge.model_copy(update={"kind": kind})
    pinned = {edge_id} if kind == EdgeKind.conditional else set()
    return _rebuild(graph, list(graph.nodes), _replace_edge(graph, toggled), pinned)


def set_route_key(graph: FlowGraph, edge_id: str, route_key: str | None) -> FlowGraph:
    """Set the route key of a conditional edge.

    The key is slugified; a blank key falls back to the default derived from
    the target label. Keys on normal edges are cleared by normalization.
    """
    edge = _require_edge(graph, edge_id)
    slug = to_route_key(route_key)
    updated = edge.model_copy(update={"route_key": slug or None})
    pinned = {edge_id} if edge.is_conditional else set()
    return _rebuild(graph, list(graph.nodes), _replace_edge(graph, updated), pinned)
