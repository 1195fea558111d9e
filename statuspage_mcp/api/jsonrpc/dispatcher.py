"""
MCP JSON-RPC Dispatcher
=======================

Turns a raw ``POST /mcp`` body into a JSON-RPC response: validates the
envelope, resolves the request's credentials, routes the method and runs the
tool. Every outcome, including internal failures, is a response object.
"""

from typing import Any, Dict, List, Mapping, Optional
import time

from statuspage_mcp.config.credentials import CredentialStore, MissingCredentialsError
from statuspage_mcp.config.logging import get_logger
from statuspage_mcp.config.settings import Settings, get_settings
from statuspage_mcp.mcp_server.handlers import ToolExecutor
from statuspage_mcp.mcp_server.registry import (
    ToolArgumentsError,
    ToolNotFoundError,
    ToolRegistry,
)

from .envelope import classify, parse_envelope
from .models import (
    CallToolRequest,
    ConnectRequest,
    DiscoverToolsRequest,
    InternalError,
    InvalidParamsError,
    JsonRpcError,
    JsonRpcResponse,
    MethodNotFoundError,
    MethodRequest,
    RequestId,
)

logger = get_logger(__name__)


class MCPDispatcher:
    """Routes JSON-RPC requests from the HTTP transport to the tool registry."""

    def __init__(
        self,
        registry: ToolRegistry,
        executor: ToolExecutor,
        credential_store: CredentialStore,
        settings: Optional[Settings] = None,
    ) -> None:
        self.registry = registry
        self.executor = executor
        self.credential_store = credential_store
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(component="mcp_dispatcher")

    async def handle(
        self, raw_body: Any, headers: Optional[Mapping[str, str]] = None
    ) -> JsonRpcResponse:
        """
        Handle one request body.

        Args:
            raw_body: Raw body bytes/text or decoded JSON
            headers: Request headers carrying optional credential overrides

        Returns:
            JSON-RPC response echoing the request id
        """
        start_time = time.time()
        request_id: RequestId = None
        method: Optional[str] = None

        try:
            envelope = parse_envelope(raw_body)
            request_id = envelope.id
            method = envelope.method
            request = classify(envelope, self.registry)
            result = await self.dispatch(request, headers or {})
            response = JsonRpcResponse.success(request_id, result)
        except JsonRpcError as e:
            if e.request_id is not None:
                request_id = e.request_id
            self.logger.warning(
                "JSON-RPC request failed",
                method=method,
                request_id=request_id,
                code=e.code,
                detail=e.data,
            )
            response = JsonRpcResponse.from_error(request_id, e)
        except Exception as e:
            self.logger.exception("Error handling MCP request", method=method, request_id=request_id)
            response = JsonRpcResponse.from_error(request_id, InternalError(str(e)))

        self.logger.info(
            "JSON-RPC request handled",
            method=method,
            request_id=request_id,
            is_error=response.is_error,
            execution_time=round(time.time() - start_time, 4),
        )
        return response

    async def dispatch(self, request: MethodRequest, headers: Mapping[str, str]) -> Any:
        """Produce the result for a routed request, raising ``JsonRpcError`` on failure."""
        if isinstance(request, ConnectRequest):
            return self.connect_descriptor()

        if isinstance(request, DiscoverToolsRequest):
            return {"tools": self.discovery_entries()}

        if isinstance(request, CallToolRequest):
            return await self.call_tool(request, headers)

        raise MethodNotFoundError(f"The requested method '{request.method}' is not supported")

    def connect_descriptor(self) -> Dict[str, Any]:
        return {
            "streaming": False,
            "version": self.settings.mcp_protocol_version,
            "name": self.settings.mcp_display_name,
            "formats": ["json"],
            "capabilities": ["tool_discovery", "tool_execution"],
        }

    def discovery_entries(self) -> List[Dict[str, Any]]:
        schema_key = self.settings.mcp_discovery_schema_key
        return [descriptor.discovery_entry(schema_key) for descriptor in self.registry]

    async def call_tool(self, request: CallToolRequest, headers: Mapping[str, str]) -> Any:
        if not request.tool_name:
            raise InvalidParamsError("Missing tool name in call_tool request")

        if request.tool_name not in self.registry:
            raise MethodNotFoundError(f"The requested tool '{request.tool_name}' is not registered")

        if not isinstance(request.arguments, dict):
            raise InvalidParamsError("Tool arguments must be a JSON object")

        credentials = self.credential_store.resolve(headers)

        try:
            result = await self.executor.execute(request.tool_name, request.arguments, credentials)
        except ToolNotFoundError as e:
            raise MethodNotFoundError(str(e)) from e
        except MissingCredentialsError as e:
            raise InvalidParamsError(str(e)) from e
        except ToolArgumentsError as e:
            raise InvalidParamsError(e.detail) from e

        return result.to_wire()
