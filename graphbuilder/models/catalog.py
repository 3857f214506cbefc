"""Data models for the tool library and graph templates.

The catalogs are owned by the editor surface; the core only stores tool ids
on nodes and instantiates templates into canonical graphs.
"""

from enum import Enum
from typing import Self

from pydantic import BaseModel, Field, model_validator

from graphbuilder.models.graph import Role


class ToolCategory(str, Enum):
    """Grouping used by the tool picker."""

    research = "research"
    automation = "automation"
    collaboration = "collaboration"
    data = "data"
    ops = "ops"


class ToolDefinition(BaseModel):
    """a tool a node can call during execution."""

    id: str
    name: str
    description: str
    category: ToolCategory


class TemplateNode(BaseModel):
    """a node in a template, without an id yet."""

    kind: Role  # initial role, becomes the declared role set
    label: str
    description: str
    tools: list[str] = Field(default_factory=list)


class TemplateEdge(BaseModel):
    """an edge in a template, endpoints given as node indices."""

    source: int
    target: int
    route_key: str | None = None


class GraphTemplate(BaseModel):
    """a proven starting flow the user can customize."""

    id: str
    name: str
    description: str
    nodes: list[TemplateNode]
    edges: list[TemplateEdge]

    @model_validator(mode="after")
    def validate_edge_indices(self) -> Self:
        """edges must point at nodes of this template."""
        count = len(self.nodes)
        for edge in self.edges:
            if not (0 <= edge.source < count and 0 <= edge.target < count):
                raise ValueError(
                    f"template edge {edge.source} -> {edge.target} is out of range for {count} nodes"
                )
        return self
