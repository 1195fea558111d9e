"""
MCP Server Implementation
========================

Model Context Protocol server for the stdio transport. Tool listing and
invocation are served from the shared ``ToolRegistry`` through the same
``ToolExecutor`` the HTTP bridge uses.
"""

from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from statuspage_mcp import __version__
from statuspage_mcp.config.credentials import CredentialStore
from statuspage_mcp.config.logging import get_logger
from statuspage_mcp.config.settings import Settings, get_settings

from .handlers import ToolExecutor
from .registry import ToolRegistry
from .tools import create_tool_registry

logger = get_logger(__name__)


class ToolCallError(Exception):
    """Raised to report an error tool result through the MCP SDK."""


class StatusPageMCPServer:
    """MCP Server exposing the Statuspage tools over stdio."""

    def __init__(
        self,
        registry: Optional[ToolRegistry] = None,
        settings: Optional[Settings] = None,
        credential_store: Optional[CredentialStore] = None,
        executor: Optional[ToolExecutor] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(component="mcp_server")
        self.registry = registry or create_tool_registry()
        self.credential_store = credential_store or CredentialStore.from_settings(self.settings)
        self.executor = executor or ToolExecutor(self.registry, self.settings)
        self.server = Server(self.settings.mcp_server_name, version=__version__)
        self._setup_tools()

    def _setup_tools(self) -> None:
        """Setup MCP tools."""

        @self.server.list_tools()
        async def handle_list_tools() -> List[Tool]:
            """List available MCP tools."""
            return self.list_tools()

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> List[TextContent]:
            """Handle tool execution."""
            return await self.call_tool(name, arguments)

    def list_tools(self) -> List[Tool]:
        """Registered tools as MCP ``Tool`` definitions."""
        return [
            Tool(
                name=descriptor.name,
                description=descriptor.description,
                inputSchema=dict(descriptor.parameter_schema),
            )
            for descriptor in self.registry.list()
        ]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> List[TextContent]:
        """
        Call a tool with the environment credentials.

        Raises:
            ToolCallError: When the tool reports an error result
        """
        self.logger.info("Tool called over stdio", tool=name)
        credentials = self.credential_store.resolve()
        try:
            result = await self.executor.execute(name, arguments, credentials)
        except (LookupError, ValueError) as e:
            self.logger.warning("Tool call rejected", tool=name, error=str(e))
            raise ToolCallError(str(e)) from e

        content = [TextContent(type="text", text=item.text) for item in result.content]
        if result.is_error:
            raise ToolCallError("\n".join(item.text for item in content))
        return content

    async def run(self) -> None:
        """Run the MCP server on stdin/stdout."""
        async with stdio_server() as (read_stream, write_stream):
            self.logger.info(
                "MCP server starting with stdio transport",
                tools=self.registry.names(),
                **self.credential_store.base.describe(),
            )
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )
