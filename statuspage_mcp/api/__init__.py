"""
HTTP API
========

FastAPI application exposing the MCP bridge over HTTP (JSON-RPC POST) and
Server-Sent Events.
"""
