"""Core data models for the graph builder."""

from graphbuilder.models.graph import (
    ROLE_ORDER,
    EdgeKind,
    FlowEdge,
    FlowGraph,
    FlowNode,
    Role,
    canonical_roles,
    in_degrees,
    out_degrees,
)
from graphbuilder.models.catalog import (
    GraphTemplate,
    TemplateEdge,
    TemplateNode,
    ToolCategory,
    ToolDefinition,
)
from graphbuilder.models.validation_issue import ValidationIssue

__all__ = [
    # Graph IR
    "ROLE_ORDER",
    "EdgeKind",
    "FlowEdge",
    "FlowGraph",
    "FlowNode",
    "Role",
    "canonical_roles",
    "in_degrees",
    "out_degrees",
    # Catalogs
    "GraphTemplate",
    "TemplateEdge",
    "TemplateNode",
    "ToolCategory",
    "ToolDefinition",
    # Validation
    "ValidationIssue",
]
