"""Recompute edge kinds and route keys from the current topology.

An edge is conditional exactly when its source has more than one outgoing
edge. Conditional edges need a route key that is unique among the edges of
the same source; missing keys get a default derived from the target label.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Collection

from graphbuilder.models.graph import EdgeKind, FlowEdge, FlowNode, out_degrees

logger = logging.getLogger(__name__)

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def to_route_key(value: str | None) -> str:
    """slugify a label into a route key; empty input gives an empty string."""
    if not value:
        return ""
    return _NON_SLUG.sub("_", value.lower()).strip("_")


def build_default_route_key(
    target_label: str | None,
    edge_id: str | None,
    fallback_index: int,
) -> str:
    """default key for a conditional edge: target label, then edge id, then position."""
    slug = to_route_key(target_label)
    if slug:
        return slug
    if edge_id:
        return f"route_{edge_id[:6]}"
    return f"route_{fallback_index}"


def _dedupe_key(candidate: str, taken: set[str]) -> str:
    if candidate not in taken:
        return candidate
    suffix = 2
    while f"{candidate}_{suffix}" in taken:
        suffix += 1
    return f"{candidate}_{suffix}"


def _existing_key(edge: FlowEdge) -> str:
    return (edge.route_key or "").strip()


def normalize_edges(
    edges: list[FlowEdge],
    nodes: list[FlowNode],
    pinned_conditional: Collection[str] = (),
) -> list[FlowEdge]:
    """Return the canonical edge list for the given topology.

    Edge order is preserved and unchanged edges are returned as the same
    objects. ``pinned_conditional`` holds ids of edges the user just marked
    conditional while their source still has a single outgoing edge; they
    stay conditional for this pass only.
    """
    counts = out_degrees(edges)
    labels = {node.id: node.label for node in nodes}

    pinned = set(pinned_conditional)

    def wants_conditional(edge: FlowEdge) -> bool:
        if counts.get(edge.source, 0) > 1:
            return True
        return (
            edge.id is not None
            and edge.id in pinned
            and edge.is_conditional
            and edge.source in labels
            and edge.target in labels
        )

    conditional = [wants_conditional(edge) for edge in edges]

    # explicit keys are reserved before any default is handed out
    taken: dict[str, set[str]] = {}
    for edge, is_conditional in zip(edges, conditional):
        key = _existing_key(edge)
        if is_conditional and key:
            taken.setdefault(edge.source, set()).add(key)

    result: list[FlowEdge] = []
    for index, (edge, is_conditional) in enumerate(zip(edges, conditional)):
        if is_conditional:
            key = _existing_key(edge)
            if not key:
                used = taken.setdefault(edge.source, set())
                key = _dedupe_key(
                    build_default_route_key(labels.get(edge.target), edge.id, index + 1),
                    used,
                )
                used.add(key)
                logger.debug("assigned default route key %r to edge %s", key, edge.id)
            kind, route_key = EdgeKind.conditional, key
        else:
            kind, route_key = EdgeKind.normal, None

        if edge.kind == kind and edge.route_key == route_key:
            result.append(edge)
        else:
            result.append(edge.model_copy(update={"kind": kind, "route_key": route_key}))

    return result
