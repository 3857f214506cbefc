"""Static catalogs: tool library and graph templates."""

from graphbuilder.data.catalog import (
    TEMPLATES,
    TOOL_LIBRARY,
    find_unknown_tools,
    get_template,
    get_tool,
    instantiate_template,
    tools_by_category,
)

__all__ = [
    "TEMPLATES",
    "TOOL_LIBRARY",
    "find_unknown_tools",
    "get_template",
    "get_tool",
    "instantiate_template",
    "tools_by_category",
]
