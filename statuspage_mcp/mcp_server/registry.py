"""
Tool Registry
=============

Name-keyed registry of MCP tools shared by the stdio server and the HTTP bridge.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterator, List, Mapping

from statuspage_mcp.config.logging import get_logger
from statuspage_mcp.models.schemas import ToolResult

logger = get_logger(__name__)


class ToolNotFoundError(LookupError):
    """Raised when a tool name is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"The requested tool '{name}' is not registered")


class ToolArgumentsError(ValueError):
    """Raised by a tool handler when its arguments fail validation."""

    def __init__(self, tool_name: str, detail: str):
        self.tool_name = tool_name
        self.detail = detail
        super().__init__(f"Invalid arguments for tool '{tool_name}': {detail}")


ToolHandler = Callable[[Dict[str, Any], Any], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolDescriptor:
    """Registered tool: metadata plus the coroutine that runs it."""

    name: str
    description: str
    parameter_schema: Mapping[str, Any]
    handler: ToolHandler = field(compare=False, repr=False)

    def discovery_entry(self, schema_key: str = "parameters") -> Dict[str, Any]:
        """Describe the tool for discovery responses."""
        return {
            "name": self.name,
            "description": self.description,
            schema_key: dict(self.parameter_schema),
        }


class ToolRegistry:
    """Registry of tools, kept in registration order."""

    def __init__(self) -> None:
        self._tools: Dict[str, ToolDescriptor] = {}
        self.logger: Any = logger.bind(component="tool_registry")

    def register(
        self,
        name: str,
        description: str,
        schema: Mapping[str, Any],
        handler: ToolHandler,
    ) -> ToolDescriptor:
        """
        Register a tool. Registering an existing name replaces the prior entry.

        Args:
            name: Unique tool name
            description: Human readable description
            schema: JSON schema of the tool arguments
            handler: Coroutine ``handler(arguments, context) -> ToolResult``

        Returns:
            The stored descriptor
        """
        if not name:
            raise ValueError("Tool name must not be empty")

        if name in self._tools:
            self.logger.warning("Replacing registered tool", tool=name)

        descriptor = ToolDescriptor(
            name=name, description=description, parameter_schema=dict(schema), handler=handler
        )
        self._tools[name] = descriptor
        self.logger.debug("Tool registered", tool=name)
        return descriptor

    def lookup(self, name: str) -> ToolDescriptor:
        """
        Find a tool by name.

        Raises:
            ToolNotFoundError: If no tool has that name
        """
        try:
            return self._tools[name]
        except KeyError:
            raise ToolNotFoundError(name) from None

    def list(self) -> List[ToolDescriptor]:
        """All registered tools in registration order."""
        return list(self._tools.values())

    def names(self) -> List[str]:
        return list(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self.list())
