"""GraphBuilder - agent workflow graphs compiled to LangGraph skeletons."""

from graphbuilder.models.graph import (
    EdgeKind,
    FlowEdge,
    FlowGraph,
    FlowNode,
    Role,
)
from graphbuilder.models.validation_issue import ValidationIssue
from graphbuilder.analysis.edge_normalization import normalize_edges
from graphbuilder.analysis.role_inference import infer_roles
from graphbuilder.analysis.validation import validate
from graphbuilder.codegen import CodeTarget, generate
from graphbuilder.sdk.graph_editor import canonicalize

__all__ = [
    # Graph IR
    "EdgeKind",
    "FlowEdge",
    "FlowGraph",
    "FlowNode",
    "Role",
    "ValidationIssue",
    # Derivation passes
    "normalize_edges",
    "infer_roles",
    "validate",
    "canonicalize",
    # Code generation
    "CodeTarget",
    "generate",
]
