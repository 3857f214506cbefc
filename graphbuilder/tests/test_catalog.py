"""Tests for the tool library and graph templates."""

import pytest

from graphbuilder.analysis.validation import validate
from graphbuilder.data.catalog import (
    TEMPLATES,
    TOOL_LIBRARY,
    find_unknown_tools,
    get_template,
    get_tool,
    instantiate_template,
    tools_by_category,
)
from graphbuilder.errors import UnknownTemplateError
from graphbuilder.models.catalog import ToolCategory
from graphbuilder.models.graph import FlowNode, Role


class TestToolLibrary:
    """Test tool lookups."""

    def test_tool_ids_are_unique(self):
        """Every tool id should appear once."""
        ids = [tool.id for tool in TOOL_LIBRARY]
        assert len(ids) == len(set(ids))

    def test_get_tool(self):
        """get_tool should return the definition or None."""
        assert get_tool("web-search").name == "Web Search"
        assert get_tool("nope") is None

    def test_grouping_keeps_library_order(self):
        """tools_by_category should preserve library order within a group."""
        grouped = tools_by_category()
        assert [tool.id for tool in grouped[ToolCategory.research]] == ["web-search", "doc-summarizer"]
        assert sum(len(tools) for tools in grouped.values()) == len(TOOL_LIBRARY)

    def test_find_unknown_tools(self):
        """Stale tool ids should be reported per node."""
        nodes = [
            FlowNode(id="a", tools=["email", "legacy-fax"]),
            FlowNode(id="b", tools=["webhook"]),
        ]
        assert find_unknown_tools(nodes) == {"a": ["legacy-fax"]}


class TestTemplates:
    """Test template instantiation."""

    def test_unknown_template(self):
        """get_template should raise for an unknown id."""
        with pytest.raises(UnknownTemplateError) as exc_info:
            get_template("does-not-exist")
        assert "does-not-exist" in str(exc_info.value)

    @pytest.mark.parametrize("template_id", [template.id for template in TEMPLATES])
    def test_templates_are_export_ready(self, template_id):
        """Every shipped template should validate cleanly."""
        graph = instantiate_template(template_id)
        assert validate(graph.nodes, graph.edges) == []
        assert find_unknown_tools(graph.nodes) == {}

    def test_instantiation_mints_fresh_ids(self):
        """Two instantiations should not share node or edge ids."""
        first = instantiate_template("support-copilot")
        second = instantiate_template("support-copilot")
        assert {node.id for node in first.nodes}.isdisjoint(node.id for node in second.nodes)
        assert {edge.id for edge in first.edges}.isdisjoint(edge.id for edge in second.edges)

    def test_instantiation_wires_template_edges(self):
        """Template edge indices should resolve to the new node ids."""
        graph = instantiate_template("research-sprint")
        ids = [node.id for node in graph.nodes]
        assert [(edge.source, edge.target) for edge in graph.edges] == [(ids[0], ids[1]), (ids[1], ids[2])]

    def test_instantiated_roles_are_inferred(self):
        """Template kinds should be merged with inferred roles."""
        graph = instantiate_template("prd-builder")
        assert graph.name == "Product Requirements"
        roles = {node.label: node.roles for node in graph.nodes}
        assert roles["PM Copilot"] == [Role.agent, Role.tool]
        # notion is a memory-backed tool
        assert roles["PRD Writer"] == [Role.agent, Role.tool, Role.memory]

    def test_tool_template_node_gains_agent_role(self):
        """Tool-kind template nodes should still be agents."""
        graph = instantiate_template("research-sprint")
        collector = next(node for node in graph.nodes if node.label == "Source Collector")
        assert collector.roles == [Role.agent, Role.tool]

    def test_template_positions(self):
        """Template nodes should be laid out left to right in a zigzag."""
        graph = instantiate_template("research-sprint")
        assert [node.position for node in graph.nodes] == [
            {"x": 140.0, "y": 140.0},
            {"x": 380.0, "y": 260.0},
            {"x": 620.0, "y": 140.0},
        ]
