"""API routes for graph normalization, validation and code generation."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from graphbuilder.analysis.validation import validate
from graphbuilder.codegen import CodeTarget, generate
from graphbuilder.errors import GraphInvariantError, UnknownTargetError
from graphbuilder.models.graph import FlowGraph
from graphbuilder.models.validation_issue import ValidationIssue
from graphbuilder.sdk.graph_editor import canonicalize

router = APIRouter()


class ValidateResponse(BaseModel):
    """validator findings for a graph."""

    export_ready: bool
    issues: list[ValidationIssue]


class GenerateResponse(BaseModel):
    """generated skeleton for one target."""

    target: CodeTarget
    code: str


def _canonical(graph: FlowGraph) -> FlowGraph:
    nodes, edges = canonicalize(graph.nodes, graph.edges)
    return graph.model_copy(update={"nodes": nodes, "edges": edges})


@router.post("/graphs/normalize")
def normalize_graph(graph: FlowGraph) -> FlowGraph:
    """return the canonical form of a graph (edge kinds, route keys, roles)."""
    return _canonical(graph)


@router.post("/graphs/validate")
def validate_graph(graph: FlowGraph, entry_id: str | None = None) -> ValidateResponse:
    """report problems that block export; never fails on user input."""
    canonical = _canonical(graph)
    issues = validate(canonical.nodes, canonical.edges, entry_id=entry_id)
    return ValidateResponse(export_ready=not issues, issues=issues)


@router.post("/graphs/generate")
def generate_code(
    graph: FlowGraph,
    target: str = "python",
    entry_id: str | None = None,
) -> GenerateResponse:
    """generate skeleton source for the requested target.

    Generation is best effort: graphs with validation issues still produce
    code. Structural corruption (edges to missing nodes) is rejected.
    """
    try:
        resolved = CodeTarget.parse(target)
    except UnknownTargetError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    canonical = _canonical(graph)
    try:
        code = generate(
            resolved,
            canonical.nodes,
            canonical.edges,
            entry_id=entry_id,
            project_name=canonical.name,
        )
    except GraphInvariantError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return GenerateResponse(target=resolved, code=code)
