"""Check a graph for problems that would make the generated code ill-formed.

Findings are reported, never raised: an empty result means the graph is
ready for export. Issues do not block normalization or inference.
"""

from __future__ import annotations

import logging
from collections import Counter, deque

from graphbuilder.models.graph import FlowEdge, FlowNode, Role
from graphbuilder.models.validation_issue import ValidationIssue

logger = logging.getLogger(__name__)


def _name(node: FlowNode) -> str:
    return node.label or node.id


def find_entry_candidates(nodes: list[FlowNode], edges: list[FlowEdge]) -> list[FlowNode]:
    """nodes with no incoming edge, in node order."""
    targets = {edge.target for edge in edges}
    return [node for node in nodes if node.id not in targets]


def _reachable_from(entry_id: str, edges: list[FlowEdge]) -> set[str]:
    adjacency: dict[str, list[str]] = {}
    for edge in edges:
        adjacency.setdefault(edge.source, []).append(edge.target)

    seen = {entry_id}
    queue = deque([entry_id])
    while queue:
        current = queue.popleft()
        for target in adjacency.get(current, []):
            if target not in seen:
                seen.add(target)
                queue.append(target)
    return seen


def _check_entry(
    nodes: list[FlowNode],
    edges: list[FlowEdge],
    entry_id: str | None,
    issues: list[ValidationIssue],
) -> FlowNode | None:
    by_id = {node.id: node for node in nodes}

    if entry_id is not None:
        entry = by_id.get(entry_id)
        if entry is None:
            issues.append(ValidationIssue(
                code="unknown_entry",
                message=f"Entry node '{entry_id}' does not exist.",
                node_id=entry_id,
            ))
        return entry

    candidates = find_entry_candidates(nodes, edges)
    if not candidates:
        issues.append(ValidationIssue(
            code="no_entry",
            message="No entry node: every node has an incoming edge.",
        ))
        return None
    if len(candidates) > 1:
        names = ", ".join(f"'{_name(node)}'" for node in candidates)
        issues.append(ValidationIssue(
            code="ambiguous_entry",
            message=f"Ambiguous entry: {len(candidates)} nodes have no incoming edges ({names}).",
        ))
        return None
    return candidates[0]


def _check_reachability(
    nodes: list[FlowNode],
    edges: list[FlowEdge],
    entry: FlowNode,
    issues: list[ValidationIssue],
) -> None:
    reachable = _reachable_from(entry.id, edges)
    touched = {edge.source for edge in edges} | {edge.target for edge in edges}

    for node in nodes:
        if node.id in reachable:
            continue
        if node.id not in touched:
            issues.append(ValidationIssue(
                code="isolated_node",
                message=f"Node '{_name(node)}' is isolated and unreachable from entry '{_name(entry)}'.",
                node_id=node.id,
            ))
        else:
            issues.append(ValidationIssue(
                code="unreachable_node",
                message=f"Node '{_name(node)}' is unreachable from entry '{_name(entry)}'.",
                node_id=node.id,
            ))


def _check_route_keys(
    edges: list[FlowEdge],
    by_id: dict[str, FlowNode],
    issues: list[ValidationIssue],
) -> None:
    keys_by_source: dict[str, Counter] = {}
    for edge in edges:
        if not edge.is_conditional:
            continue
        source = by_id.get(edge.source)
        source_name = _name(source) if source else edge.source
        key = (edge.route_key or "").strip()
        if not key:
            issues.append(ValidationIssue(
                code="missing_route_key",
                message=f"Conditional edge from '{source_name}' has no route key.",
                edge_id=edge.id,
            ))
            continue
        keys_by_source.setdefault(edge.source, Counter())[key] += 1

    for source_id, counter in keys_by_source.items():
        source = by_id.get(source_id)
        source_name = _name(source) if source else source_id
        for key, count in counter.items():
            if count > 1:
                issues.append(ValidationIssue(
                    code="duplicate_route_key",
                    message=f"Route key '{key}' is used by {count} edges from '{source_name}'.",
                    node_id=source_id,
                ))


def validate(
    nodes: list[FlowNode],
    edges: list[FlowEdge],
    entry_id: str | None = None,
) -> list[ValidationIssue]:
    """Return every problem found in the graph, in a stable order.

    Args:
        nodes: graph nodes
        edges: graph edges
        entry_id: entry node chosen by the caller; when omitted the single
            node without incoming edges is used.

    Returns:
        list of ValidationIssue, empty when the graph is export-ready
    """
    issues: list[ValidationIssue] = []

    if not nodes:
        issues.append(ValidationIssue(code="empty_graph", message="Graph has no nodes."))

    id_counts = Counter(node.id for node in nodes)
    for node_id, count in id_counts.items():
        if count > 1:
            issues.append(ValidationIssue(
                code="duplicate_node",
                message=f"Node id '{node_id}' is used by {count} nodes.",
                node_id=node_id,
            ))

    by_id = {node.id: node for node in nodes}
    for edge in edges:
        if edge.source not in by_id:
            issues.append(ValidationIssue(
                code="dangling_source",
                message=f"Edge source '{edge.source}' does not match any node.",
                edge_id=edge.id,
            ))
        if edge.target not in by_id:
            issues.append(ValidationIssue(
                code="dangling_target",
                message=f"Edge target '{edge.target}' does not match any node.",
                edge_id=edge.id,
            ))

    for node in nodes:
        if Role.agent not in node.roles:
            issues.append(ValidationIssue(
                code="missing_agent_role",
                message=f"Node '{_name(node)}' is missing the agent role.",
                node_id=node.id,
            ))

    if nodes:
        entry = _check_entry(nodes, edges, entry_id, issues)
        if entry is not None:
            _check_reachability(nodes, edges, entry, issues)

    _check_route_keys(edges, by_id, issues)

    logger.debug("validation found %d issue(s)", len(issues))
    return issues
