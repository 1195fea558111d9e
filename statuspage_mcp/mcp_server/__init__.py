"""
MCP Server Implementation
========================

Model Context Protocol tools for Atlassian Statuspage incident management.

Tools provided:
- create-incident: Create a new incident
- update-incident: Update an existing incident
- get-incident: Get details of one incident
- list-incidents: List incidents with an optional status filter
- list-components: List the page components
"""

from .handlers import ToolContext, ToolExecutor
from .registry import ToolArgumentsError, ToolDescriptor, ToolNotFoundError, ToolRegistry
from .tools import create_tool_registry

__all__ = [
    "ToolArgumentsError",
    "ToolContext",
    "ToolDescriptor",
    "ToolExecutor",
    "ToolNotFoundError",
    "ToolRegistry",
    "create_tool_registry",
]
