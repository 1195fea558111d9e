"""
StatusPage MCP Server
=====================

A Model Context Protocol (MCP) server exposing Atlassian Statuspage incident
management as tools for AI agents.

This package provides:
- MCP tools for creating, updating, reading and listing incidents and components
- A stdio transport for direct embedding by an MCP host
- A FastAPI HTTP transport with JSON-RPC over POST and an SSE keep-alive stream
"""

__version__ = "1.0.0"
__author__ = "StatusPage MCP Team"
