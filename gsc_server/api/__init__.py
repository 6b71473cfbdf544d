"""
Tool layer: argument validation, dispatch and the tool registry.
"""

from gsc_server.api.tools import (
    TOOL_DEFINITIONS,
    TOOLS_BY_NAME,
    ToolArgumentError,
    ToolDefinition,
    dispatch_tool,
)

__all__ = [
    "TOOL_DEFINITIONS",
    "TOOLS_BY_NAME",
    "ToolArgumentError",
    "ToolDefinition",
    "dispatch_tool",
]
