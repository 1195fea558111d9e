"""
JSON-RPC Models
===============

JSON-RPC 2.0 envelopes, responses and protocol errors used by the HTTP bridge,
plus the request variants produced by method routing.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

JSONRPC_VERSION = "2.0"

# Error codes
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = Union[str, int, float, None]


class JsonRpcErrorPayload(BaseModel):
    """Error object of a JSON-RPC response."""

    code: int
    message: str
    data: Optional[Any] = None


class JsonRpcError(Exception):
    """Base class for errors reported to the caller as JSON-RPC error objects."""

    code: int = INTERNAL_ERROR
    message: str = "Internal error"

    def __init__(self, data: Optional[Any] = None, request_id: RequestId = None):
        self.data = data
        self.request_id = request_id
        super().__init__(data if data is not None else self.message)

    def to_payload(self) -> JsonRpcErrorPayload:
        return JsonRpcErrorPayload(code=self.code, message=self.message, data=self.data)


class InvalidRequestError(JsonRpcError):
    """The body is not a valid JSON-RPC 2.0 request."""

    code = INVALID_REQUEST
    message = "Invalid Request"


class MethodNotFoundError(JsonRpcError):
    """Unsupported method or unregistered tool."""

    code = METHOD_NOT_FOUND
    message = "Method not found"


class InvalidParamsError(JsonRpcError):
    """Missing tool name, bad arguments or incomplete credentials."""

    code = INVALID_PARAMS
    message = "Invalid params"


class InternalError(JsonRpcError):
    """Unexpected failure while handling a request."""

    code = INTERNAL_ERROR
    message = "Internal error"


class JsonRpcEnvelope(BaseModel):
    """Validated inbound JSON-RPC request."""

    model_config = ConfigDict(frozen=True)

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    method: str = Field(..., min_length=1)
    params: Optional[Any] = None
    id: RequestId = None


class JsonRpcResponse(BaseModel):
    """Outbound JSON-RPC response carrying exactly one of result or error."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId = None
    result: Optional[Any] = None
    error: Optional[JsonRpcErrorPayload] = None

    @model_validator(mode="after")
    def check_result_xor_error(self) -> "JsonRpcResponse":
        has_result = "result" in self.model_fields_set
        has_error = self.error is not None
        if has_result == has_error:
            raise ValueError("A JSON-RPC response carries exactly one of result or error")
        return self

    @classmethod
    def success(cls, request_id: RequestId, result: Any) -> "JsonRpcResponse":
        return cls(id=request_id, result=result)

    @classmethod
    def from_error(cls, request_id: RequestId, error: JsonRpcError) -> "JsonRpcResponse":
        return cls(id=request_id, error=error.to_payload())

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_wire(self) -> Dict[str, Any]:
        """Serialise for the transport, omitting the unused member."""
        body: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            body["error"] = self.error.model_dump(exclude_none=True)
        else:
            body["result"] = self.result
        return body


# Request variants
@dataclass(frozen=True)
class ConnectRequest:
    id: RequestId = None


@dataclass(frozen=True)
class DiscoverToolsRequest:
    id: RequestId = None


@dataclass(frozen=True)
class CallToolRequest:
    """Tool invocation, either through ``mcp.call_tool`` or by tool name as method."""

    id: RequestId = None
    tool_name: Optional[str] = None
    arguments: Any = field(default_factory=dict)


@dataclass(frozen=True)
class UnknownMethodRequest:
    id: RequestId = None
    method: str = ""


MethodRequest = Union[ConnectRequest, DiscoverToolsRequest, CallToolRequest, UnknownMethodRequest]
