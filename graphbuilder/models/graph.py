"""Data model for the workflow graph IR.

Nodes and edges are what the canvas edits and what the normalizer, role
inference, validator and code generators read. Models are frozen: every
derivation pass returns new values (or the same object when nothing changed)
instead of mutating in place.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Role(str, Enum):
    """Functional role of a node."""

    agent = "agent"
    tool = "tool"
    router = "router"
    memory = "memory"


# canonical rendering order, independent of insertion order
ROLE_ORDER: tuple[Role, ...] = (Role.agent, Role.tool, Role.router, Role.memory)


class EdgeKind(str, Enum):
    """Control-flow classification of an edge."""

    normal = "normal"
    conditional = "conditional"


def canonical_roles(roles) -> list[Role]:
    """dedupe roles and sort them into ROLE_ORDER."""
    present = {Role(role) for role in roles}
    return [role for role in ROLE_ORDER if role in present]


class FlowNode(BaseModel):
    """a unit of work on the canvas: agent, tool, router or memory."""

    model_config = {"frozen": True}

    id: str
    label: str = ""
    description: str = ""
    tools: list[str] = Field(default_factory=list)
    roles: list[Role] = Field(default_factory=list)

    # canvas-owned, passed through untouched
    position: dict[str, float] | None = None
    metadata: dict[str, Any] | None = None

    @field_validator("roles", mode="before")
    @classmethod
    def _canonicalize_roles(cls, value):
        if value is None:
            return []
        return canonical_roles(value)

    @field_validator("tools")
    @classmethod
    def _dedupe_tools(cls, value: list[str]) -> list[str]:
        # tools behave as a set observed in definition order
        return list(dict.fromkeys(value))


class FlowEdge(BaseModel):
    """a directed control-flow transition between two nodes."""

    model_config = {"frozen": True}

    id: str | None = None  # template edges may not have minted ids yet
    source: str
    target: str
    kind: EdgeKind = EdgeKind.normal
    route_key: str | None = None

    @property
    def is_conditional(self) -> bool:
        return self.kind == EdgeKind.conditional


class FlowGraph(BaseModel):
    """the full graph as edited on the canvas."""

    model_config = {"frozen": True}

    name: str = "Agent Flow"
    nodes: list[FlowNode] = Field(default_factory=list)
    edges: list[FlowEdge] = Field(default_factory=list)

    def get_node(self, node_id: str) -> FlowNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> FlowEdge | None:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None


def out_degrees(edges: list[FlowEdge]) -> dict[str, int]:
    """count edges per source id across the whole edge list."""
    counts: dict[str, int] = {}
    for edge in edges:
        counts[edge.source] = counts.get(edge.source, 0) + 1
    return counts


def in_degrees(edges: list[FlowEdge]) -> dict[str, int]:
    """count edges per target id across the whole edge list."""
    counts: dict[str, int] = {}
    for edge in edges:
        counts[edge.target] = counts.get(edge.target, 0) + 1
    return counts
