"""
API Routes
==========

FastAPI routers for the MCP bridge and service metadata endpoints.
"""
