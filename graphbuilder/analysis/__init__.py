"""Derivation passes over the graph IR: normalization, role inference, validation."""

from graphbuilder.analysis.edge_normalization import (
    build_default_route_key,
    normalize_edges,
    to_route_key,
)
from graphbuilder.analysis.role_inference import (
    MEMORY_ROLE_PATTERN,
    MEMORY_TOOL_IDS,
    ROLE_SIGNALS,
    derive_signals,
    infer_node_roles,
    infer_roles,
)
from graphbuilder.analysis.validation import (
    find_entry_candidates,
    validate,
)

__all__ = [
    # edge_normalization exports
    "build_default_route_key",
    "normalize_edges",
    "to_route_key",
    # role_inference exports
    "MEMORY_ROLE_PATTERN",
    "MEMORY_TOOL_IDS",
    "ROLE_SIGNALS",
    "derive_signals",
    "infer_node_roles",
    "infer_roles",
    # validation exports
    "find_entry_candidates",
    "validate",
]
