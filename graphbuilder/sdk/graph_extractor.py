"""Import the topology of a compiled LangGraph into the editor IR.

Usage, with any compiled graph (for example a generated skeleton):

    from graphbuilder.sdk.graph_extractor import extract_flow_graph
    app = build_graph()
    graph = extract_flow_graph(app, name="Support Copilot")

Node metadata attached via ``add_node(..., metadata={...})`` is read back:
``label``, ``description``, ``tools`` and ``roles``. Skeletons produced by
the Python emitter carry exactly these keys, so they import losslessly.
"""

from __future__ import annotations

import logging

from graphbuilder.models.graph import FlowEdge, FlowGraph, FlowNode, Role
from graphbuilder.sdk.graph_editor import canonicalize

logger = logging.getLogger(__name__)

# langgraph synthetic node ids
_START = "__start__"
_END = "__end__"


def _metadata_roles(meta: dict) -> list[Role]:
    roles = []
    for value in meta.get("roles") or []:
        try:
            roles.append(Role(value))
        except ValueError:
            logger.warning("ignoring unknown role %r in node metadata", value)
    return roles


def extract_flow_graph(compiled_graph, name: str | None = None) -> FlowGraph:
    """Build a canonical FlowGraph from a compiled LangGraph.

    The synthetic start/end nodes and every edge touching them are dropped:
    the entry is re-derived from in-degree and sinks from out-degree.
    """
    lc_graph = compiled_graph.get_graph()

    nodes: list[FlowNode] = []
    for node_id, node in lc_graph.nodes.items():
        if node_id in (_START, _END):
            continue
        meta = node.metadata or {}
        nodes.append(FlowNode(
            id=node_id,
            label=meta.get("label") or node.name or node_id,
            description=meta.get("description", ""),
            tools=list(meta.get("tools") or []),
            roles=_metadata_roles(meta),
        ))

    edges: list[FlowEdge] = []
    for idx, edge in enumerate(lc_graph.edges):
        if _START in (edge.source, edge.target) or _END in (edge.source, edge.target):
            continue
        route_key = str(edge.data) if edge.conditional and edge.data is not None else None
        edges.append(FlowEdge(
            id=f"{edge.source}->{edge.target}#{idx}",
            source=edge.source,
            target=edge.target,
            route_key=route_key,
        ))

    nodes, edges = canonicalize(nodes, edges)
    logger.debug("extracted %d nodes and %d edges", len(nodes), len(edges))
    return FlowGraph(
        name=name or getattr(compiled_graph, "name", None) or "Agent Flow",
        nodes=nodes,
        edges=edges,
    )
