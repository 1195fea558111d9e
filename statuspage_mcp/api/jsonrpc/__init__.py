"""
JSON-RPC Bridge
===============

Envelope validation, method routing and dispatch for ``POST /mcp``.
"""

from .dispatcher import MCPDispatcher
from .envelope import classify, parse_envelope
from .models import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    JsonRpcEnvelope,
    JsonRpcError,
    JsonRpcResponse,
)

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "JsonRpcEnvelope",
    "JsonRpcError",
    "JsonRpcResponse",
    "MCPDispatcher",
    "classify",
    "parse_envelope",
]
