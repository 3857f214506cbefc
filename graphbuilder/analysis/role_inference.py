"""Derive functional roles for each node.

Roles are the union of what the user declared and what the structure
implies. Inference is one-way: a declared role is never dropped, and a role
the user removed comes back while its signal is still live (e.g. ``tool``
while the node still has tools attached).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import NamedTuple

from graphbuilder.models.graph import (
    FlowEdge,
    FlowNode,
    Role,
    canonical_roles,
    out_degrees,
)

logger = logging.getLogger(__name__)

MEMORY_ROLE_PATTERN = re.compile(
    r"\b(memory|context|history|store|persist|recall|retrieve|knowledge|cache)\b",
    re.IGNORECASE,
)
MEMORY_TOOL_IDS = frozenset({"db-query", "notion"})


def _has_memory_signal(node: FlowNode) -> bool:
    if MEMORY_ROLE_PATTERN.search(f"{node.label} {node.description}"):
        return True
    return any(tool_id in MEMORY_TOOL_IDS for tool_id in node.tools)


class RoleSignal(NamedTuple):
    """a rule that adds ``role`` when ``applies(node, out_degree)`` holds."""

    role: Role
    applies: Callable[[FlowNode, int], bool]


ROLE_SIGNALS: tuple[RoleSignal, ...] = (
    RoleSignal(Role.agent, lambda node, out_degree: True),
    RoleSignal(Role.tool, lambda node, out_degree: len(node.tools) > 0),
    RoleSignal(Role.router, lambda node, out_degree: out_degree > 1),
    RoleSignal(Role.memory, lambda node, out_degree: _has_memory_signal(node)),
)


def derive_signals(node: FlowNode, out_degree: int) -> set[Role]:
    """roles implied by the node's tools, text and fan-out."""
    return {signal.role for signal in ROLE_SIGNALS if signal.applies(node, out_degree)}


def infer_node_roles(node: FlowNode, out_degree: int) -> FlowNode:
    """merge declared and derived roles; returns ``node`` itself if nothing changed."""
    next_roles = canonical_roles([*node.roles, *derive_signals(node, out_degree)])
    if next_roles == node.roles:
        return node
    logger.debug(
        "node %s roles %s -> %s",
        node.id,
        [role.value for role in node.roles],
        [role.value for role in next_roles],
    )
    return node.model_copy(update={"roles": next_roles})


def infer_roles(nodes: list[FlowNode], edges: list[FlowEdge]) -> list[FlowNode]:
    """Recompute the role set of every node from the current edges."""
    counts = out_degrees(edges)
    return [infer_node_roles(node, counts.get(node.id, 0)) for node in nodes]
