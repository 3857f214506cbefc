"""SDK for editing graphs and importing existing LangGraph workflows."""

from graphbuilder.sdk.graph_editor import (
    add_node,
    canonicalize,
    connect,
    create_node,
    move_node,
    remove_edge,
    remove_node,
    reroute_edge,
    set_edge_kind,
    set_route_key,
    toggle_tool,
    update_node,
)
from graphbuilder.sdk.graph_extractor import extract_flow_graph

__all__ = [
    "add_node",
    "canonicalize",
    "connect",
    "create_node",
    "move_node",
    "remove_edge",
    "remove_node",
    "reroute_edge",
    "set_edge_kind",
    "set_route_key",
    "toggle_tool",
    "update_node",
    "extract_flow_graph",
]
