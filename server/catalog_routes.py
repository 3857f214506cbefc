"""API routes for the tool library and graph templates."""

from fastapi import APIRouter, HTTPException

from graphbuilder.data.catalog import TEMPLATES, TOOL_LIBRARY, get_template, instantiate_template
from graphbuilder.errors import UnknownTemplateError
from graphbuilder.models.catalog import GraphTemplate, ToolDefinition
from graphbuilder.models.graph import FlowGraph

router = APIRouter()


@router.get("/tools")
def list_tools() -> list[ToolDefinition]:
    """list the tool library."""
    return TOOL_LIBRARY


@router.get("/templates")
def list_templates() -> list[GraphTemplate]:
    """list available graph templates."""
    return TEMPLATES


@router.get("/templates/{template_id}")
def get_template_graph(template_id: str) -> FlowGraph:
    """instantiate a template into a fresh canonical graph."""
    try:
        template = get_template(template_id)
    except UnknownTemplateError:
        raise HTTPException(status_code=404, detail=f"Template not found: {template_id}")
    return instantiate_template(template)
