"""
JSON-RPC Envelope Handling
==========================

Validation of raw request bodies and routing of validated envelopes to
request variants.
"""

from typing import Any, Dict, Mapping, Union
import json
import math

from statuspage_mcp.mcp_server.registry import ToolRegistry

from .models import (
    JSONRPC_VERSION,
    CallToolRequest,
    ConnectRequest,
    DiscoverToolsRequest,
    InvalidRequestError,
    JsonRpcEnvelope,
    MethodRequest,
    RequestId,
    UnknownMethodRequest,
)

CONNECT_METHOD = "mcp.connect"
DISCOVER_TOOLS_METHOD = "mcp.discover_tools"
CALL_TOOL_METHOD = "mcp.call_tool"

INVALID_REQUEST_DETAIL = "The request does not conform to the JSON-RPC 2.0 specification"


def _is_valid_id(value: Any) -> bool:
    if value is None or isinstance(value, str):
        return True
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # NaN and Infinity cannot be echoed back as JSON
    return not isinstance(value, float) or math.isfinite(value)



def _recover_id(body: Mapping[str, Any]) -> RequestId:
    value = body.get("id")
    return value if _is_valid_id(value) else None


def parse_envelope(raw: Union[bytes, str, Mapping[str, Any], Any]) -> JsonRpcEnvelope:
    """
    Validate a request body as a JSON-RPC 2.0 envelope.

    Args:
        raw: Raw body bytes or text, or an already decoded JSON value

    Returns:
        Validated envelope; an absent id becomes ``None``

    Raises:
        InvalidRequestError: Body is not JSON, not an object, has the wrong
            ``jsonrpc`` version or lacks a method. The recovered id, if any,
            travels on the exception.
    """
    body = raw
    if isinstance(raw, (bytes, bytearray, str)):
        try:
            body = json.loads(raw)
        except (ValueError, UnicodeDecodeError):
            raise InvalidRequestError("Request body is not valid JSON") from None

    if not isinstance(body, Mapping):
        raise InvalidRequestError(INVALID_REQUEST_DETAIL)

    request_id = _recover_id(body)

    if body.get("jsonrpc") != JSONRPC_VERSION:
        raise InvalidRequestError(INVALID_REQUEST_DETAIL, request_id=request_id)

    method = body.get("method")
    if not isinstance(method, str) or not method:
        raise InvalidRequestError("Missing method in request", request_id=request_id)

    if not _is_valid_id(body.get("id")):
        raise InvalidRequestError("Request id must be a string, number or null")

    return JsonRpcEnvelope(
        jsonrpc=JSONRPC_VERSION,
        method=method,
        params=body.get("params"),
        id=request_id,
    )


def _call_tool_arguments(params: Dict[str, Any]) -> Any:
    arguments = params.get("params")
    if arguments is None:
        arguments = params.get("arguments")
    return {} if arguments is None else arguments


def classify(envelope: JsonRpcEnvelope, registry: ToolRegistry) -> MethodRequest:
    """
    Route an envelope to its request variant.

    ``mcp.call_tool`` is matched before the bare tool name form, so a tool can
    never shadow the namespaced methods.
    """
    method = envelope.method

    if method == CONNECT_METHOD:
        return ConnectRequest(id=envelope.id)

    if method == DISCOVER_TOOLS_METHOD:
        return DiscoverToolsRequest(id=envelope.id)

    if method == CALL_TOOL_METHOD:
        params = envelope.params if isinstance(envelope.params, dict) else {}
        name = params.get("name")
        return CallToolRequest(
            id=envelope.id,
            tool_name=name if isinstance(name, str) and name else None,
            arguments=_call_tool_arguments(params),
        )

    if method in registry:
        arguments = envelope.params if envelope.params is not None else {}
        return CallToolRequest(id=envelope.id, tool_name=method, arguments=arguments)

    return UnknownMethodRequest(id=envelope.id, method=method)
