"""Utility functions for the graph builder."""

from graphbuilder.utils.identifiers import (
    generate_node_id,
    generate_edge_id,
)

__all__ = [
    "generate_node_id",
    "generate_edge_id",
]
