"""
Core Business Logic
==================

Integrations with external services used by the MCP tools.
"""
