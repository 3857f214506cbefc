"""Static tool library and graph templates.

Templates are instantiated into fresh, canonical graphs so they obey the
same invariants as hand-built ones.
"""

from __future__ import annotations

from graphbuilder.errors import UnknownTemplateError
from graphbuilder.models.catalog import (
    GraphTemplate,
    TemplateEdge,
    TemplateNode,
    ToolCategory,
    ToolDefinition,
)
from graphbuilder.models.graph import FlowEdge, FlowGraph, FlowNode, Role
from graphbuilder.sdk.graph_editor import canonicalize
from graphbuilder.utils.identifiers import generate_edge_id, generate_node_id

TOOL_LIBRARY: list[ToolDefinition] = [
    ToolDefinition(
        id="web-search",
        name="Web Search",
        description="Search the web and return relevant sources.",
        category=ToolCategory.research,
    ),
    ToolDefinition(
        id="doc-summarizer",
        name="Doc Summarizer",
        description="Condense long content into key points.",
        category=ToolCategory.research,
    ),
    ToolDefinition(
        id="db-query",
        name="DB Query",
        description="Run parameterized queries on a database.",
        category=ToolCategory.data,
    ),
    ToolDefinition(
        id="crm-update",
        name="CRM Update",
        description="Create or update CRM records.",
        category=ToolCategory.collaboration,
    ),
    ToolDefinition(
        id="calendar",
        name="Calendar",
        description="Schedule or move meetings.",
        category=ToolCategory.collaboration,
    ),
    ToolDefinition(
        id="email",
        name="Email",
        description="Draft and send customer-ready emails.",
        category=ToolCategory.collaboration,
    ),
    ToolDefinition(
        id="notion",
        name="Notion",
        description="Write specs and notes to a workspace.",
        category=ToolCategory.collaboration,
    ),
    ToolDefinition(
        id="ticketing",
        name="Ticketing",
        description="Create or update support tickets.",
        category=ToolCategory.ops,
    ),
    ToolDefinition(
        id="webhook",
        name="Webhook",
        description="Trigger external workflows over HTTP.",
        category=ToolCategory.automation,
    ),
]

TEMPLATES: list[GraphTemplate] = [
    GraphTemplate(
        id="research-sprint",
        name="Research Sprint",
        description="Research → gather sources → synthesize in one pass.",
        nodes=[
            TemplateNode(
                kind=Role.agent,
                label="Lead Researcher",
                description="Define scope, questions, and guardrails.",
                tools=["web-search"],
            ),
            TemplateNode(
                kind=Role.tool,
                label="Source Collector",
                description="Pull relevant sources and surface citations.",
                tools=["web-search"],
            ),
            TemplateNode(
                kind=Role.agent,
                label="Synthesizer",
                description="Turn sources into a concise narrative.",
                tools=["doc-summarizer"],
            ),
        ],
        edges=[
            TemplateEdge(source=0, target=1),
            TemplateEdge(source=1, target=2),
        ],
    ),
    GraphTemplate(
        id="support-copilot",
        name="Support Copilot",
        description="Triage → resolve → update CRM with follow-ups.",
        nodes=[
            TemplateNode(
                kind=Role.agent,
                label="Triage Agent",
                description="Classify intent and extract key details.",
                tools=["ticketing"],
            ),
            TemplateNode(
                kind=Role.agent,
                label="Resolution Agent",
                description="Draft reply and decide next steps.",
                tools=["email"],
            ),
            TemplateNode(
                kind=Role.tool,
                label="CRM Sync",
                description="Update CRM with ticket status and notes.",
                tools=["crm-update"],
            ),
        ],
        edges=[
            TemplateEdge(source=0, target=1),
            TemplateEdge(source=1, target=2),
        ],
    ),
    GraphTemplate(
        id="prd-builder",
        name="Product Requirements",
        description="Capture intent → draft PRD → share with team.",
        nodes=[
            TemplateNode(
                kind=Role.agent,
                label="PM Copilot",
                description="Clarify goals, constraints, and success metrics.",
                tools=["calendar"],
            ),
            TemplateNode(
                kind=Role.agent,
                label="PRD Writer",
                description="Draft a crisp PRD with user stories.",
                tools=["notion"],
            ),
        ],
        edges=[TemplateEdge(source=0, target=1)],
    ),
]

_TOOLS_BY_ID = {tool.id: tool for tool in TOOL_LIBRARY}


def get_tool(tool_id: str) -> ToolDefinition | None:
    return _TOOLS_BY_ID.get(tool_id)


def tools_by_category() -> dict[ToolCategory, list[ToolDefinition]]:
    """group the tool library for the picker, keeping library order."""
    grouped: dict[ToolCategory, list[ToolDefinition]] = {}
    for tool in TOOL_LIBRARY:
        grouped.setdefault(tool.category, []).append(tool)
    return grouped


def find_unknown_tools(nodes: list[FlowNode]) -> dict[str, list[str]]:
    """stale tool references per node id (ids not in the tool library)."""
    stale: dict[str, list[str]] = {}
    for node in nodes:
        missing = [tool_id for tool_id in node.tools if tool_id not in _TOOLS_BY_ID]
        if missing:
            stale[node.id] = missing
    return stale


def get_template(template_id: str) -> GraphTemplate:
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    raise UnknownTemplateError(f"unknown template: {template_id}")


def instantiate_template(template: GraphTemplate | str) -> FlowGraph:
    """Build a canonical graph from a template with freshly minted ids.

    Args:
        template: the template or its id

    Returns:
        FlowGraph named after the template, normalized and role-inferred
    """
    if isinstance(template, str):
        template = get_template(template)

    nodes = [
        FlowNode(
            id=generate_node_id(),
            label=item.label,
            description=item.description,
            tools=list(item.tools),
            roles=[item.kind],
            position={"x": 140 + index * 240, "y": 140 + (index % 2) * 120},
        )
        for index, item in enumerate(template.nodes)
    ]
    edges = [
        FlowEdge(
            id=generate_edge_id(),
            source=nodes[item.source].id,
            target=nodes[item.target].id,
            route_key=item.route_key,
        )
        for item in template.edges
    ]

    nodes, edges = canonicalize(nodes, edges)
    return FlowGraph(name=template.name, nodes=nodes, edges=edges)
