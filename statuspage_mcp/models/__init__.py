"""
Data Models
===========

Pydantic models for Statuspage resources and MCP tool parameters/results.
"""
